"""
Centralized error handlers for FastAPI.

Maps ``Error`` values to HTTP responses using their code.
Internal errors never expose their message or cause to clients.
All error responses use the ErrorResponse schema.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from apperrors.core.config import get_settings
from apperrors.domain.chain import error_code, error_message
from apperrors.domain.codes import ErrorCode, http_status_for
from apperrors.domain.error import Error
from apperrors.interfaces.schemas import ErrorResponse

logger = logging.getLogger(__name__)


def _is_internal(error: Error, code: str) -> bool:
    """Return True when any part of the chain must stay hidden from clients."""
    if code == ErrorCode.INTERNAL.value:
        return True
    link = error
    while isinstance(link, Error):
        if link.internal:
            return True
        link = link.err
    return False


def error_response(error: Error) -> JSONResponse:
    """Build the JSON response for an Error.

    Status and body code both come from the effective code of the chain
    (``error_code``), so a wrapper without its own code answers with the
    status of the error it wraps. ``Error.http_status_code()`` looks at the
    outer code only.

    Args:
        error: The error to render.

    Returns:
        A response with the status mapped from the error's effective code.
    """
    settings = get_settings()
    code = error_code(error)
    if _is_internal(error, code) and not settings.expose_internal_messages:
        body = ErrorResponse(code=code, message=settings.global_message)
    else:
        body = ErrorResponse(
            code=code,
            message=error_message(error),
            operation=error.operation,
        )
    return JSONResponse(
        status_code=http_status_for(code),
        content=body.model_dump(),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register the error handlers on a FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(Error)
    async def handle_error(_request: Request, exc: Error) -> JSONResponse:
        """Handle application errors by their code."""
        response = error_response(exc)
        if response.status_code >= 500:
            logger.error("Request failed: %s\n%s", exc, exc.error_with_stack_trace())
        else:
            logger.warning("Request rejected: %s", exc)
        return response

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        body = ErrorResponse(
            code=ErrorCode.INTERNAL.value,
            message=get_settings().global_message,
        )
        return JSONResponse(status_code=500, content=body.model_dump())
