"""
Custom Exceptions
Gateway error taxonomy shared by providers, the query client and the web layer
"""
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Closed set of error codes exposed in error envelopes."""

    UPSTREAM_TIMEOUT = "UPSTREAM_TIMEOUT"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    MISCONFIGURED = "MISCONFIGURED"
    BAD_REQUEST = "BAD_REQUEST"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ContentGatewayError(Exception):
    """Base exception for the content gateway"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class GatewayError(ContentGatewayError):
    """
    Error that maps onto a wire-level error envelope

    Attributes:
        status_code: HTTP status the gateway responds with
        code: machine-readable error code, callers branch on this
        message: human-readable message
        details: optional structured context (never raw upstream bodies)
    """

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        status_code: int,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.code = ErrorCode(code)
        self.status_code = int(status_code)

    def to_error_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.details:
            body["details"] = dict(self.details)
        return body

    def __repr__(self) -> str:
        return f"GatewayError(code={self.code.value!r}, status_code={self.status_code}, message={self.message!r})"


class ConfigurationError(GatewayError):
    """Fatal configuration error"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message,
            code=ErrorCode.MISCONFIGURED,
            status_code=500,
            details=details,
        )


def upstream_timeout(resource: str, **details: Any) -> GatewayError:
    return GatewayError(
        f"Timed out while loading {resource} from the content backend.",
        code=ErrorCode.UPSTREAM_TIMEOUT,
        status_code=504,
        details=details or None,
    )


def upstream_error(resource: str, *, status_code: int = 502, **details: Any) -> GatewayError:
    return GatewayError(
        f"Failed to load {resource} from the content backend.",
        code=ErrorCode.UPSTREAM_ERROR,
        status_code=status_code,
        details=details or None,
    )


def invalid_upstream_response(resource: str, reason: str) -> GatewayError:
    return GatewayError(
        f"Content backend returned an invalid response for {resource}.",
        code=ErrorCode.VALIDATION_ERROR,
        status_code=500,
        details={"reason": reason},
    )


def not_found(resource: str, slug: str) -> GatewayError:
    return GatewayError(
        f"The requested {resource} was not found.",
        code=ErrorCode.NOT_FOUND,
        status_code=404,
        details={"slug": slug},
    )


def bad_request(message: str, **details: Any) -> GatewayError:
    return GatewayError(
        message,
        code=ErrorCode.BAD_REQUEST,
        status_code=400,
        details=details or None,
    )
