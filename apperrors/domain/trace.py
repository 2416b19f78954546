"""
Call-stack capture and rendering.

An error keeps two kinds of stack information:

- ``StackTrace``: a small, resolved slice of ``CAPTURE_DEPTH`` frames that
  travels with the error, including over the wire.
- ``ProgramCounter`` entries: the raw code objects and line numbers of the
  whole outward stack. They are resolved into file/line/function only when a
  caller asks for a full trace, and are never serialized.
"""

import inspect
import traceback
from dataclasses import dataclass
from types import CodeType
from typing import Iterable, Iterator, NamedTuple, Sequence

CAPTURE_DEPTH = 2


@dataclass(frozen=True)
class Trace:
    """One captured stack frame.

    Attributes:
        index: Position in the captured slice, 0 being the innermost frame.
        function: Module-qualified function name.
        file: Source file path.
        line: Line number within ``file``.
    """

    index: int
    function: str = ""
    file: str = ""
    line: int = 0

    def __str__(self) -> str:
        return f"#{self.index} {self.file}:{self.line} {self.function}"


class StackTrace(tuple):
    """Immutable sequence of ``Trace`` entries."""

    def __new__(cls, traces: Iterable[Trace] = ()) -> "StackTrace":
        return super().__new__(cls, traces)

    def __str__(self) -> str:
        return "".join(f"{trace}\n" for trace in self)

    def __repr__(self) -> str:
        return f"StackTrace({list(self)!r})"

    def string_array(self) -> list[str]:
        """Return each trace rendered on its own."""
        return [str(trace) for trace in self]


class ProgramCounter(NamedTuple):
    """Unresolved location of one frame: its code object and line."""

    code: CodeType
    lineno: int
    module: str = ""


def function_name(pc: ProgramCounter) -> str:
    """Return ``<module>.<qualname>`` for a program counter."""
    name = getattr(pc.code, "co_qualname", pc.code.co_name)
    return f"{pc.module}.{name}" if pc.module else name


def capture(skip: int = 0, limit: int = 100) -> tuple[ProgramCounter, ...]:
    """Record the call stack of the caller.

    Args:
        skip: Frames to drop above the caller of ``capture``; 0 starts at the
            caller itself.
        limit: Maximum number of frames to record.

    Returns:
        Program counters ordered from innermost to outermost. Empty when the
        interpreter offers no frame introspection.
    """
    frame = inspect.currentframe()
    if frame is None:
        return ()
    try:
        frame = frame.f_back
        for _ in range(skip):
            if frame is None:
                break
            frame = frame.f_back
        pcs: list[ProgramCounter] = []
        while frame is not None and len(pcs) < limit:
            pcs.append(
                ProgramCounter(
                    frame.f_code,
                    frame.f_lineno,
                    frame.f_globals.get("__name__", ""),
                )
            )
            frame = frame.f_back
        return tuple(pcs)
    finally:
        # Frames hold their locals alive; break the reference cycle.
        del frame


def to_stack_trace(
    pcs: Sequence[ProgramCounter], depth: int = CAPTURE_DEPTH
) -> StackTrace:
    """Resolve the first ``depth`` program counters into traces."""
    return StackTrace(
        Trace(
            index=index,
            function=function_name(pc),
            file=pc.code.co_filename,
            line=pc.lineno,
        )
        for index, pc in enumerate(pcs[:depth])
    )


def location(pcs: Sequence[ProgramCounter]) -> str:
    """Return ``file:line`` of the innermost program counter, or ""."""
    if not pcs:
        return ""
    return f"{pcs[0].code.co_filename}:{pcs[0].lineno}"


def resolve(pcs: Sequence[ProgramCounter]) -> Iterator[traceback.FrameSummary]:
    """Lazily turn program counters into frame summaries.

    Source lines are looked up through ``linecache`` as each frame is
    produced, so the files must still be readable at that point.
    """
    for pc in pcs:
        yield traceback.FrameSummary(pc.code.co_filename, pc.lineno, function_name(pc))
