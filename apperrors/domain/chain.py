"""
Queries over a chain of errors.

Only ``Error`` links are followed. A foreign exception ends the chain even if
it carries its own ``__cause__``.
"""

from typing import Any, Optional

from apperrors.core.config import get_settings
from apperrors.domain.codes import ErrorCode
from apperrors.domain.error import Error


def error_code(err: Optional[BaseException]) -> str:
    """Return the first non-empty code in the chain.

    Returns "" for None and INTERNAL when no code is found, including for
    foreign exceptions.
    """
    if err is None:
        return ""
    if isinstance(err, Error):
        if err.code:
            return err.code
        if err.err is not None:
            return error_code(err.err)
    return ErrorCode.INTERNAL.value


def error_message(err: Optional[BaseException]) -> str:
    """Return the first non-empty message in the chain.

    Returns "" for None and the configured global message when no message is
    found.
    """
    if err is None:
        return ""
    if isinstance(err, Error):
        if err.message:
            return err.message
        if err.err is not None:
            return error_message(err.err)
    return get_settings().global_message


def to_error(value: Any) -> Optional[Error]:
    """Normalize ``value`` into an Error.

    An Error is returned as is. Other exceptions and strings become a leaf
    Error whose cause holds their text. Anything else returns None.
    """
    if isinstance(value, Error):
        return value
    if isinstance(value, BaseException):
        return Error(err=Exception(str(value)))
    if isinstance(value, str):
        return Error(err=Exception(value))
    return None
