"""
Test Service for featurescope Python SDK

This HTTP server wraps the FeaturesClient and exposes a standard interface
for the test harness to interact with.

Protocol:
- GET /  -> Health check
- POST / -> Execute command
- DELETE / -> Cleanup/shutdown
"""

import os
import sys
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import uvicorn

# Add parent directory to path to import featurescope
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import featurescope
from featurescope import FeaturesClient, FeaturesClientError

client: Optional[FeaturesClient] = None

app = FastAPI()

STUB_COMMANDS = {
    "createFeatureVariation": "create_feature_variation",
    "createFeatureVariations": "create_feature_variations",
    "getAllVariationsForFeature": "get_all_variations_for_feature",
    "getAllVariationsForFeaturesList": "get_all_variations_for_features_list",
}


def make_response(
    value: Any = None,
    features: Optional[dict] = None,
    items: Optional[list] = None,
    headers: Optional[dict] = None,
    success: Optional[bool] = None,
    error: Optional[str] = None,
    message: Optional[str] = None,
    errors: Optional[list] = None,
) -> dict:
    resp = {}
    if value is not None:
        resp["value"] = value
    if features is not None:
        resp["features"] = features
    if items is not None:
        resp["items"] = items
    if headers is not None:
        resp["headers"] = headers
    if success is not None:
        resp["success"] = success
    if error is not None:
        resp["error"] = error
    if message is not None:
        resp["message"] = message
    if errors is not None:
        resp["errors"] = errors
    return resp


def error_response(e: FeaturesClientError) -> dict:
    return make_response(
        error=type(e).__name__,
        message=e.message,
        errors=getattr(e, "errors", None),
    )


async def handle_command(cmd: dict) -> dict:
    global client
    command = cmd.get("command")

    if command == "init":
        try:
            client = featurescope.init(cmd.get("config"))
            return make_response(success=True)
        except FeaturesClientError as e:
            return error_response(e)

    elif command == "close":
        client = None
        return make_response(success=True)

    if not client:
        return make_response(error="NotInitializedError", message="Client not initialized")

    try:
        if command == "listScopes":
            return make_response(items=await client.list_scopes_for_user())

        elif command == "listFeatures":
            scope = cmd.get("scope")
            if not scope:
                return make_response(error="ValidationError", message="scope is required")
            return make_response(items=await client.list_features_for_scope(scope))

        elif command == "getFeatures":
            features = await client.get_features(
                cmd.get("demographics"),
                feature_ids=cmd.get("featureIds"),
            )
            return make_response(features=features)

        elif command == "getFeature":
            feature_id = cmd.get("featureId")
            if not feature_id:
                return make_response(error="ValidationError", message="featureId is required")
            value = await client.get_feature(feature_id, cmd.get("demographics"))
            return make_response(value=value)

        elif command == "getHeaders":
            return make_response(headers=client.headers)

        elif command in STUB_COMMANDS:
            getattr(client, STUB_COMMANDS[command])()
            return make_response(error="UnexpectedResult", message=f"{command} did not fail")

        else:
            return make_response(error="UnknownCommand", message=f"Unknown command: {command}")
    except FeaturesClientError as e:
        return error_response(e)


@app.get("/")
async def health_check():
    return {"success": True}


@app.post("/")
async def execute_command(request: Request):
    try:
        cmd = await request.json()
    except ValueError as e:
        return JSONResponse(
            content=make_response(error="ParseError", message=str(e)),
            status_code=400,
        )
    if not isinstance(cmd, dict):
        return JSONResponse(
            content=make_response(error="ParseError", message="command must be a JSON object"),
            status_code=400,
        )
    result = await handle_command(cmd)
    return JSONResponse(content=result)


@app.delete("/")
async def cleanup():
    global client
    client = None
    return {"success": True}


if __name__ == "__main__":
    port = int(os.getenv("PORT", "8007"))
    print(f"[featurescope test-service] Listening on port {port}")
    uvicorn.run(app, host="0.0.0.0", port=port, log_level="warning")
