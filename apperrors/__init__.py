"""
apperrors: structured application errors.

Errors carry a code, a message, the failed operation, the wrapped cause and
the location they were built at. They map to HTTP statuses and serialize to
JSON for logs, responses and storage.
"""

from apperrors.core.config import (
    ErrorSettings,
    configure,
    get_settings,
    reset_settings,
)
from apperrors.domain.chain import error_code, error_message, to_error
from apperrors.domain.codes import ErrorCode, http_status_for
from apperrors.domain.error import (
    DecodeError,
    Error,
    error_f,
    new_conflict,
    new_e,
    new_expired,
    new_internal,
    new_invalid,
    new_maximum_attempts,
    new_not_found,
    new_unknown,
    wrap,
)
from apperrors.domain.trace import CAPTURE_DEPTH, ProgramCounter, StackTrace, Trace

__version__ = "0.1.0"

__all__ = [
    "CAPTURE_DEPTH",
    "DecodeError",
    "Error",
    "ErrorCode",
    "ErrorSettings",
    "ProgramCounter",
    "StackTrace",
    "Trace",
    "configure",
    "error_code",
    "error_f",
    "error_message",
    "get_settings",
    "http_status_for",
    "new_conflict",
    "new_e",
    "new_expired",
    "new_internal",
    "new_invalid",
    "new_maximum_attempts",
    "new_not_found",
    "new_unknown",
    "reset_settings",
    "to_error",
    "wrap",
]
