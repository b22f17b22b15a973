"""Tests for the SDK test service command dispatcher."""

import pytest
import httpx
import respx

from test_service import main as service

API_URL = "https://api.featurescope.test"


@pytest.fixture
def mock_api():
    """Mock API responses."""
    with respx.mock:
        yield respx


@pytest.fixture(autouse=True)
def reset_client():
    """Start every test without a client."""
    service.client = None
    yield
    service.client = None


async def init_service(scope: str = "_") -> dict:
    return await service.handle_command(
        {"command": "init", "config": {"apiKey": "k", "apiUrl": API_URL, "scope": scope}}
    )


class TestHandleCommand:
    """Tests for handle_command."""

    async def test_requires_init(self):
        """Commands before init should report NotInitializedError."""
        result = await service.handle_command({"command": "listScopes"})

        assert result["error"] == "NotInitializedError"

    async def test_init_with_string(self):
        """init should accept the API key shorthand."""
        assert await service.handle_command({"command": "init", "config": "k"}) == {"success": True}

        result = await service.handle_command({"command": "getHeaders"})
        assert result["headers"]["Authorization"] == "Bearer k"

    async def test_init_error(self):
        """Invalid config should surface FeaturesClientInitError."""
        result = await service.handle_command({"command": "init", "config": {"headers": "nope"}})

        assert result["error"] == "FeaturesClientInitError"

    async def test_init_ignores_unknown_keys(self):
        """Extra config keys and an empty scope should still initialize."""
        result = await service.handle_command(
            {"command": "init", "config": {"apiKey": "k", "scope": "", "extra": 1}}
        )

        assert result == {"success": True}
        assert service.client.scope == ""

    async def test_get_features(self, mock_api):
        """getFeatures should return the features mapping."""
        route = mock_api.get(f"{API_URL}/api/v1/variations").mock(
            return_value=httpx.Response(200, json={"data": {"f1": 1}, "errors": []})
        )
        await init_service("web")

        result = await service.handle_command(
            {"command": "getFeatures", "demographics": {"age": 30}, "featureIds": ["f1"]}
        )

        assert result == {"features": {"f1": 1}}
        assert dict(route.calls.last.request.url.params) == {
            "scope": "web",
            "age": "30",
            "featureIds": "f1",
        }

    async def test_get_feature(self, mock_api):
        """getFeature should return the single value."""
        mock_api.get(f"{API_URL}/api/v1/variations").mock(
            return_value=httpx.Response(200, json={"data": {"f1": "blue"}, "errors": []})
        )
        await init_service()

        result = await service.handle_command({"command": "getFeature", "featureId": "f1"})

        assert result == {"value": "blue"}

    async def test_list_features(self, mock_api):
        """listFeatures should return the feature ids."""
        mock_api.get(f"{API_URL}/api/v1/features").mock(
            return_value=httpx.Response(200, json={"data": ["f1", "f2"], "errors": []})
        )
        await init_service()

        result = await service.handle_command({"command": "listFeatures", "scope": "team-a"})

        assert result == {"items": ["f1", "f2"]}

    async def test_transport_error(self, mock_api):
        """Transport failures should be reported with the unknown error list."""
        mock_api.get(f"{API_URL}/api/v1/scopes").mock(return_value=httpx.Response(503))
        await init_service()

        result = await service.handle_command({"command": "listScopes"})

        assert result == {
            "error": "FeaturesTransportError",
            "message": "Unknown error",
            "errors": ["Unknown error"],
        }

    async def test_stub_command(self):
        """Stub commands should report the not-implemented error."""
        await init_service()

        result = await service.handle_command({"command": "createFeatureVariations"})

        assert result["error"] == "FeaturesClientNotImplementedError"
        assert "create_feature_variations" in result["message"]

    async def test_stub_command_that_returns(self, monkeypatch):
        """A stub that stops raising should still produce an error response."""
        await init_service()
        monkeypatch.setattr(service.client, "create_feature_variation", lambda: None)

        result = await service.handle_command({"command": "createFeatureVariation"})

        assert result["error"] == "UnexpectedResult"

    async def test_unknown_command(self):
        """Unknown commands should be reported."""
        await init_service()

        result = await service.handle_command({"command": "explode"})

        assert result["error"] == "UnknownCommand"

    async def test_close(self):
        """close should drop the client."""
        await init_service()

        assert await service.handle_command({"command": "close"}) == {"success": True}
        assert service.client is None
