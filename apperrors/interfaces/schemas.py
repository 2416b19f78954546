"""
Pydantic schemas for the error wire format and HTTP error bodies.

``WireError`` is the flat form an ``Error`` takes on the wire: the cause is
reduced to its rendered text, so structure below the first level is lost.
Field order is the serialized key order and must not change.
No business logic belongs here.
"""

from typing import Any, Optional

from pydantic import BaseModel, field_validator, model_serializer

_STRING_FIELDS = ("code", "message", "operation", "error", "file_line")


class WireTrace(BaseModel):
    """Serialized stack frame. Empty function/file and zero line are omitted."""

    index: int
    function: str = ""
    file: str = ""
    line: int = 0

    @model_serializer(mode="wrap")
    def _omit_empty(self, handler) -> dict[str, Any]:
        data = handler(self)
        for key in ("function", "file", "line"):
            if not data.get(key):
                data.pop(key, None)
        return data


class WireError(BaseModel):
    """Serialized error.

    Attributes:
        code: Error code, "" when unset.
        message: Human-readable message.
        operation: Logical operation that failed.
        error: Rendered cause, "" when there is none.
        file_line: Origin of the error, only sent along with a cause.
        additional: Captured stack frames, null when there are none.
        internal: Whether the message may be unsafe to show end users.
    """

    code: str = ""
    message: str = ""
    operation: str = ""
    error: str = ""
    file_line: str = ""
    additional: Optional[list[WireTrace]] = None
    internal: bool = False

    @field_validator(*_STRING_FIELDS, mode="before")
    @classmethod
    def _null_string(cls, value: Any) -> Any:
        return "" if value is None else value


class ErrorResponse(BaseModel):
    """HTTP response body for a failed request.

    Attributes:
        code: Effective error code of the chain.
        message: Text safe to show to the client.
        operation: Operation label, "" when withheld.
    """

    code: str
    message: str
    operation: str = ""
