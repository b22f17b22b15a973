"""
Error types for the Featurescope SDK.

Every failure surfaced by the client is a FeaturesClientError subclass
tagged with an ErrorCategory, so callers can branch on either.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

UNKNOWN_ERROR_MESSAGE = "Unknown error"


class ErrorCategory(str, Enum):
    """Categories of errors for classification."""

    INIT = "init"
    NOT_IMPLEMENTED = "not_implemented"
    TRANSPORT = "transport"
    SERVICE = "service"
    RESPONSE = "response"
    UNKNOWN = "unknown"


class FeaturesClientError(Exception):
    """Base exception for all Featurescope SDK errors."""

    def __init__(self, message: str, category: ErrorCategory = ErrorCategory.UNKNOWN):
        super().__init__(message)
        self.message = message
        self.category = category

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, category={self.category})"


class FeaturesClientInitError(FeaturesClientError):
    """Raised when client options cannot be resolved into a usable client."""

    def __init__(self, message: str):
        super().__init__(
            f"Could not instantiate features client: {message}",
            category=ErrorCategory.INIT,
        )


class FeaturesClientNotImplementedError(FeaturesClientError, NotImplementedError):
    """Raised when a reserved, not yet available operation is invoked."""

    def __init__(self, method: str):
        super().__init__(
            f'Method "{method}" not implemented',
            category=ErrorCategory.NOT_IMPLEMENTED,
        )
        self.method = method


class FeaturesTransportError(FeaturesClientError):
    """
    Raised when the request fails at the HTTP layer.

    Network failures and non-2xx responses are deliberately collapsed into
    the same opaque value; the original exception, if any, is chained.
    """

    def __init__(self):
        super().__init__(UNKNOWN_ERROR_MESSAGE, category=ErrorCategory.TRANSPORT)
        self.errors: List[str] = [UNKNOWN_ERROR_MESSAGE]

    def to_dict(self) -> Dict[str, List[str]]:
        return {"errors": list(self.errors)}


class FeaturesServiceError(FeaturesClientError):
    """Raised when the response envelope carries a non-empty errors list."""

    def __init__(self, errors: List[Any]):
        reason = errors[0]
        super().__init__(
            reason if isinstance(reason, str) else repr(reason),
            category=ErrorCategory.SERVICE,
        )
        self.reason = reason
        self.errors = list(errors)


class FeaturesResponseError(FeaturesClientError):
    """Raised when a successful response body is not a JSON envelope."""

    def __init__(self, message: str = "Response body is not a JSON object", status_code: Optional[int] = None):
        super().__init__(message, category=ErrorCategory.RESPONSE)
        self.status_code = status_code
