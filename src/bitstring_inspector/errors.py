"""
Error taxonomy for Bitstring Status List decoding.

Every failure in the fetch/unwrap/validate/decode pipeline is reported as a
DetailedError carrying one ErrorCode from a closed set.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

import httpx


class ErrorCode(str, Enum):
    """Closed set of error codes, grouped by pipeline stage."""

    # Network
    NETWORK_ERROR = "NETWORK_ERROR"
    CORS_ERROR = "CORS_ERROR"
    TIMEOUT = "TIMEOUT"

    # HTTP
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    SERVER_ERROR = "SERVER_ERROR"
    BAD_GATEWAY = "BAD_GATEWAY"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

    # Parsing
    INVALID_JSON = "INVALID_JSON"
    INVALID_CREDENTIAL_FORMAT = "INVALID_CREDENTIAL_FORMAT"
    MISSING_CREDENTIAL_TYPE = "MISSING_CREDENTIAL_TYPE"
    UNSUPPORTED_CREDENTIAL_TYPE = "UNSUPPORTED_CREDENTIAL_TYPE"
    MISSING_BITSTRING_LIST = "MISSING_BITSTRING_LIST"

    # Decoding
    BASE64_DECODE_ERROR = "BASE64_DECODE_ERROR"
    GZIP_DECODE_ERROR = "GZIP_DECODE_ERROR"
    JWT_PARSE_ERROR = "JWT_PARSE_ERROR"
    DECOMPRESSION_ERROR = "DECOMPRESSION_ERROR"

    # Validation
    INVALID_BIT_INDEX = "INVALID_BIT_INDEX"
    INVALID_BIT_RANGE = "INVALID_BIT_RANGE"

    UNKNOWN_ERROR = "UNKNOWN_ERROR"


@dataclass(frozen=True)
class DetailedError:
    """A classified failure with optional diagnostics and remediation hint."""

    code: ErrorCode
    message: str
    details: str | None = None
    status_code: int | None = None
    suggestion: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output, dropping unset fields."""
        data = asdict(self)
        data["code"] = self.code.value
        return {k: v for k, v in data.items() if v is not None}

    def __str__(self) -> str:
        if self.details:
            return f"{self.code.value}: {self.message} ({self.details})"
        return f"{self.code.value}: {self.message}"


class CrossOriginError(httpx.TransportError):
    """Raised by a transport when the server rejects a cross-origin request."""


def create_error(
    code: ErrorCode,
    message: str,
    details: str | None = None,
    status_code: int | None = None,
    suggestion: str | None = None,
) -> DetailedError:
    """Build a DetailedError."""
    return DetailedError(
        code=code,
        message=message,
        details=details,
        status_code=status_code,
        suggestion=suggestion,
    )


# status code -> (code, message, details, suggestion)
_HTTP_ERRORS: dict[int, tuple[ErrorCode, str, str, str]] = {
    404: (
        ErrorCode.NOT_FOUND,
        "Credential not found",
        "The URL returned a 404 Not Found error.",
        "Verify the URL is correct and the credential exists.",
    ),
    401: (
        ErrorCode.UNAUTHORIZED,
        "Authentication required",
        "The server requires authentication to access this credential.",
        "Provide valid authentication credentials or contact the credential issuer.",
    ),
    403: (
        ErrorCode.FORBIDDEN,
        "Access denied",
        "You don't have permission to access this credential.",
        "Contact the credential issuer for access permissions.",
    ),
    500: (
        ErrorCode.SERVER_ERROR,
        "Server error",
        "The credential server encountered an internal error.",
        "Try again later or contact the server administrator.",
    ),
    502: (
        ErrorCode.BAD_GATEWAY,
        "Bad gateway",
        "The server received an invalid response from an upstream server.",
        "Try again later. The issue is likely temporary.",
    ),
    503: (
        ErrorCode.SERVICE_UNAVAILABLE,
        "Service unavailable",
        "The credential service is temporarily unavailable.",
        "The service may be under maintenance. Try again later.",
    ),
}


def classify_http_status(status_code: int, reason: str = "") -> DetailedError:
    """Map a non-2xx HTTP status to a DetailedError.

    Args:
        status_code: The HTTP status code of the response.
        reason: The response reason phrase, used for unmapped codes.

    Returns:
        DetailedError with status_code set.
    """
    if status_code in _HTTP_ERRORS:
        code, message, details, suggestion = _HTTP_ERRORS[status_code]
        return create_error(code, message, details, status_code, suggestion)

    return create_error(
        ErrorCode.SERVER_ERROR,
        f"HTTP {status_code} error",
        reason or "Server returned an error response.",
        status_code,
        "Check the URL and try again later.",
    )
