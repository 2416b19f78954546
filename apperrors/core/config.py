"""
Library configuration.

Loads settings from environment variables and .env file.
The default error code and the fallback message live here instead of in
mutable module globals. Settings are replaced as a whole, under a lock,
through ``configure``; readers always see one consistent snapshot.
"""

import threading

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from apperrors.domain.codes import ErrorCode

GLOBAL_MESSAGE = "An error has occurred."


class ErrorSettings(BaseSettings):
    """Error library settings loaded from environment.

    Attributes:
        default_code: Code used by ``new_e``, ``error_f`` and ``wrap``.
        global_message: Message returned when no message exists in a chain.
        max_stack_depth: Upper bound of frames recorded for lazy stack traces.
        log_level: Level used by ``configure_logging`` when none is given.
        expose_internal_messages: Let HTTP responses show internal messages.
            Must be False in production.
    """

    model_config = SettingsConfigDict(
        env_prefix="APPERRORS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_code: ErrorCode = ErrorCode.INTERNAL
    global_message: str = GLOBAL_MESSAGE
    max_stack_depth: int = Field(default=100, ge=2)
    log_level: str = "INFO"
    expose_internal_messages: bool = False


_lock = threading.Lock()
_settings = ErrorSettings()


def get_settings() -> ErrorSettings:
    """Return the active settings snapshot."""
    return _settings


def configure(**overrides) -> ErrorSettings:
    """Replace the active settings with a validated copy.

    Unspecified fields keep their current values.

    Args:
        **overrides: Field values, e.g. ``default_code=ErrorCode.UNKNOWN``.

    Returns:
        The new active settings.
    """
    global _settings
    with _lock:
        merged = {**_settings.model_dump(), **overrides}
        _settings = ErrorSettings(**merged)
        return _settings


def reset_settings() -> ErrorSettings:
    """Reload settings from the environment, dropping any overrides."""
    global _settings
    with _lock:
        _settings = ErrorSettings()
        return _settings
