"""
Application error codes.

The closed set of failure categories and their HTTP status mapping.
No framework imports allowed.
"""

from enum import Enum
from http import HTTPStatus


class ErrorCode(str, Enum):
    """Machine-readable failure category."""

    # An action cannot be performed.
    CONFLICT = "conflict"
    # Error within the application.
    INTERNAL = "internal"
    # Validation failed.
    INVALID = "invalid"
    # Entity does not exist.
    NOT_FOUND = "not_found"
    # Application unknown error.
    UNKNOWN = "unknown"
    # More than allowed action.
    MAXIMUM_ATTEMPTS = "maximum_attempts"
    # Subscription expired.
    EXPIRED = "expired"


_HTTP_STATUS = {
    ErrorCode.CONFLICT.value: HTTPStatus.CONFLICT,
    ErrorCode.INVALID.value: HTTPStatus.BAD_REQUEST,
    ErrorCode.NOT_FOUND.value: HTTPStatus.NOT_FOUND,
    ErrorCode.EXPIRED.value: HTTPStatus.PAYMENT_REQUIRED,
    ErrorCode.MAXIMUM_ATTEMPTS.value: HTTPStatus.TOO_MANY_REQUESTS,
}


def code_value(code: "ErrorCode | str | None") -> str:
    """Return the plain string form of a code ("" when unset)."""
    if code is None:
        return ""
    if isinstance(code, ErrorCode):
        return code.value
    return code


def http_status_for(code: "ErrorCode | str | None") -> int:
    """Map an error code to the HTTP status a response should carry.

    Internal, unknown, unset and unrecognised codes all map to 500.
    """
    status = _HTTP_STATUS.get(code_value(code), HTTPStatus.INTERNAL_SERVER_ERROR)
    return int(status)
