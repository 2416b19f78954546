"""
The application error value.

An ``Error`` annotates a failure with a code, a message, the operation that
failed and the error that caused it, and records where it was built.
Lower layers hand their error up as the ``err`` of a new ``Error``, forming a
chain that the helpers in ``apperrors.domain.chain`` walk.
"""

import logging
from typing import Any, Iterable, Iterator, Optional, Union

from pydantic import ValidationError

from apperrors.core.config import get_settings
from apperrors.domain.codes import ErrorCode, code_value, http_status_for
from apperrors.domain.trace import (
    ProgramCounter,
    StackTrace,
    Trace,
    capture,
    location,
    resolve,
    to_stack_trace,
)
from apperrors.interfaces.schemas import WireError, WireTrace

logger = logging.getLogger(__name__)

_BYTE_TYPES = (bytes, bytearray, memoryview)


class DecodeError(ValueError):
    """Raised when serialized data cannot be decoded into an Error."""


class Error(Exception):
    """Standard application error.

    Built through the ``new_*`` constructors, which capture the origin and
    stack. Instantiating the class directly builds the record as given, with
    no capture; ``Error()`` is the empty value used as a decoding target.

    Attributes:
        code: Error code value, "" when unset.
        message: Human-readable message.
        operation: Logical operation that failed.
        err: The wrapped cause, if any.
        additional: Stack frames captured at construction.
        internal: True when built with the INTERNAL code; presentation layers
            should not show ``message`` or the cause verbatim.
    """

    def __init__(
        self,
        code: Union[ErrorCode, str] = "",
        message: str = "",
        operation: str = "",
        err: Optional[BaseException] = None,
        additional: Iterable[Trace] = (),
        internal: bool = False,
        file_line: str = "",
    ) -> None:
        super().__init__(message)
        self.code = code_value(code)
        self.message = message
        self.operation = operation
        self.err = err
        self.additional = StackTrace(additional)
        self.internal = internal
        self._file_line = file_line
        self._pcs: tuple[ProgramCounter, ...] = ()
        self.__cause__ = err

    def __str__(self) -> str:
        parts = []
        if self.code:
            parts.append(f"<{self.code}> ")
        if self._file_line:
            parts.append(f"{self._file_line} - ")
        if self.operation:
            parts.append(f"{self.operation}: ")
        if self.err is not None:
            parts.append(f"{self.err}, ")
        if self.message:
            parts.append(self.message)
        return "".join(parts).strip().removesuffix(",")

    def __repr__(self) -> str:
        return (
            f"Error(code={self.code!r}, message={self.message!r}, "
            f"operation={self.operation!r})"
        )

    def __reduce__(self):
        # Code objects cannot be pickled; the lazy full stack stays behind.
        state = dict(self.__dict__)
        state["_pcs"] = ()
        return (self.__class__, (), state)

    def __setstate__(self, state: dict) -> None:
        self.__dict__.update(state)
        self.__cause__ = self.err
        self.args = (self.message,)

    def error_with_stack_trace(self) -> str:
        """Render the error, its frames, and the cause's block recursively."""
        parts = [
            f"Type: {self.code}, Message: {self.message}, "
            f"Operation: {self.operation}\n",
            str(self.additional),
        ]
        if isinstance(self.err, Error):
            parts.extend(["\n", self.err.error_with_stack_trace(), "\n"])
        elif self.err is not None:
            parts.extend(["\n", str(self.err)])
        return "".join(parts)

    @property
    def file_line(self) -> str:
        """The ``file:line`` where the error was constructed."""
        return self._file_line

    def unwrap(self) -> Optional[BaseException]:
        """Return the wrapped cause."""
        return self.err

    def http_status_code(self) -> int:
        """Return the HTTP response status for this error's code."""
        return http_status_for(self.code)

    # -- full stack ----------------------------------------------------

    def program_counters(self) -> tuple[ProgramCounter, ...]:
        """Return the unresolved frames recorded at construction."""
        return self._pcs

    def runtime_frames(self) -> Iterator:
        """Resolve the recorded frames into ``traceback.FrameSummary``."""
        return resolve(self._pcs)

    def _stack_lines(self, indent: str) -> list[str]:
        frames = list(self.runtime_frames())
        head = frames[0].name if frames else ""
        lines = [f"{head}(): {self.message}"]
        lines.extend(f"{indent}{frame.filename}:{frame.lineno}" for frame in frames)
        return lines

    def stack_trace(self) -> str:
        """Return the full stack, one tab-indented ``file:line`` per frame."""
        return "\n".join(self._stack_lines("\t"))

    def stack_trace_slice(self) -> list[str]:
        """Return the full stack as a list of lines."""
        return self._stack_lines("")

    # -- serialization -------------------------------------------------

    def _to_wire(self) -> WireError:
        wire = WireError(
            code=self.code,
            message=self.message,
            operation=self.operation,
            additional=[
                WireTrace(
                    index=trace.index,
                    function=trace.function,
                    file=trace.file,
                    line=trace.line,
                )
                for trace in self.additional
            ]
            or None,
            internal=self.internal,
        )
        if self.err is not None:
            wire.error = str(self.err)
            wire.file_line = self._file_line
        return wire

    def _load(self, wire: WireError) -> None:
        self.code = wire.code
        self.message = wire.message
        self.operation = wire.operation
        self.additional = StackTrace(
            Trace(index=t.index, function=t.function, file=t.file, line=t.line)
            for t in wire.additional or ()
        )
        self.internal = wire.internal
        self._file_line = wire.file_line
        self._pcs = ()
        self.err = Exception(wire.error) if wire.error else None
        self.__cause__ = self.err
        self.args = (wire.message,)

    def to_json(self) -> bytes:
        """Encode the error as JSON.

        The cause is flattened to its rendered text; its code, chain and
        frames are not part of the output.
        """
        return self._to_wire().model_dump_json().encode("utf-8")

    def json_as_string(self) -> str:
        """Encode the error as JSON text."""
        return self._to_wire().model_dump_json()

    def unmarshal_json(self, data: Union[str, bytes]) -> None:
        """Overwrite every field of this error from JSON.

        Raises:
            DecodeError: If ``data`` is not a valid error document.
        """
        try:
            wire = WireError.model_validate_json(data)
        except ValidationError as exc:
            logger.debug("Rejected error document: %s", exc)
            raise DecodeError(f"cannot decode error: {exc}") from exc
        self._load(wire)

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> "Error":
        """Decode a new error from JSON."""
        error = cls()
        error.unmarshal_json(data)
        return error

    def scan(self, value: Any) -> None:
        """Load a stored column value into this error.

        ``None`` leaves the error untouched.

        Raises:
            DecodeError: If ``value`` is not a byte sequence or not valid JSON.
        """
        if value is None:
            return
        if not isinstance(value, _BYTE_TYPES):
            raise DecodeError(
                f"scan not supported for {type(value).__name__} into Error"
            )
        self.unmarshal_json(bytes(value))

    def value(self) -> bytes:
        """Return the column value to store for this error."""
        return self.to_json()


def _new_error(
    err: Optional[BaseException],
    message: str,
    code: Union[ErrorCode, str],
    operation: str,
) -> Error:
    # Called only from the public constructors: skip this frame and theirs.
    pcs = capture(skip=2, limit=get_settings().max_stack_depth)
    code = code_value(code)
    error = Error(
        code=code,
        message=message,
        operation=operation,
        err=err,
        additional=to_stack_trace(pcs),
        internal=code == ErrorCode.INTERNAL.value,
        file_line=location(pcs),
    )
    error._pcs = pcs
    return error


def new_internal(err: Optional[BaseException], message: str, operation: str) -> Error:
    """Return an Error with the INTERNAL code."""
    return _new_error(err, message, ErrorCode.INTERNAL, operation)


def new_conflict(err: Optional[BaseException], message: str, operation: str) -> Error:
    """Return an Error with the CONFLICT code."""
    return _new_error(err, message, ErrorCode.CONFLICT, operation)


def new_invalid(err: Optional[BaseException], message: str, operation: str) -> Error:
    """Return an Error with the INVALID code."""
    return _new_error(err, message, ErrorCode.INVALID, operation)


def new_not_found(err: Optional[BaseException], message: str, operation: str) -> Error:
    """Return an Error with the NOT_FOUND code."""
    return _new_error(err, message, ErrorCode.NOT_FOUND, operation)


def new_unknown(err: Optional[BaseException], message: str, operation: str) -> Error:
    """Return an Error with the UNKNOWN code."""
    return _new_error(err, message, ErrorCode.UNKNOWN, operation)


def new_maximum_attempts(
    err: Optional[BaseException], message: str, operation: str
) -> Error:
    """Return an Error with the MAXIMUM_ATTEMPTS code."""
    return _new_error(err, message, ErrorCode.MAXIMUM_ATTEMPTS, operation)


def new_expired(err: Optional[BaseException], message: str, operation: str) -> Error:
    """Return an Error with the EXPIRED code."""
    return _new_error(err, message, ErrorCode.EXPIRED, operation)


def new_e(err: Optional[BaseException], message: str, operation: str) -> Error:
    """Return an Error with the configured default code."""
    return _new_error(err, message, get_settings().default_code, operation)


def error_f(
    err: Optional[BaseException], operation: str, format: str, *args: Any
) -> Error:
    """Return an Error with the default code and a ``%``-formatted message.

    Without ``args`` the format is used verbatim, so ``"100%% done"`` keeps
    both percent signs. ``format % ()`` would otherwise fail on a lone ``%``.
    """
    message = format % args if args else format
    return _new_error(err, message, get_settings().default_code, operation)


def wrap(
    err: Optional[BaseException], message: str, operation: str
) -> Optional[Error]:
    """Annotate ``err`` with a message and the current location.

    Returns None when ``err`` is None, so call sites can wrap unconditionally.
    """
    if err is None:
        return None
    return _new_error(err, message, get_settings().default_code, operation)
