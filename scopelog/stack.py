"""Error description and stack-trace rendering for the ``error`` field."""

import traceback
from types import FrameType, TracebackType
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Describable(Protocol):
    """A non-exception value that can describe itself as an error."""

    def describe(self) -> str: ...


@runtime_checkable
class Stacker(Protocol):
    """
    Implemented by errors that carry a captured stack. ``stack()`` returns
    frames, a :class:`traceback.StackSummary` or a traceback object.
    """

    def stack(self) -> Any: ...


class StackError(Exception):
    """
    Exception that records the stack at the point it was created.

    Example:
        >>> err = StackError("broken pipe")
        >>> render_stack(err.stack())  # ['app.py:12[main]', ...]
    """

    def __init__(self, *args: Any):
        super().__init__(*args)
        # drop this __init__ frame
        self._stack = traceback.extract_stack()[:-1]

    def stack(self) -> traceback.StackSummary:
        return self._stack


def describe_error(value: Any) -> str | None:
    """Return the error message of ``value``, or ``None`` if it is not error-shaped."""
    if isinstance(value, BaseException):
        return str(value)
    if callable(getattr(value, "describe", None)):
        return value.describe()
    return None


def is_stacker(value: Any) -> bool:
    """``stack`` must be a method; a string or list attribute does not count."""
    return callable(getattr(value, "stack", None))


def find_stacker(value: Any) -> Stacker | None:
    """Return the first stack-carrying error along the ``__cause__`` links."""
    seen: set[int] = set()
    while value is not None and id(value) not in seen:
        if is_stacker(value):
            return value
        seen.add(id(value))
        value = getattr(value, "__cause__", None)
    return None


def _frame_parts(frame: Any) -> tuple[str, int | None, str]:
    if isinstance(frame, FrameType):
        return frame.f_code.co_filename, frame.f_lineno, frame.f_code.co_name
    return frame.filename, frame.lineno, frame.name


def render_stack(frames: Any) -> list[str]:
    """
    Render frames as ``file:line[function]`` strings, innermost first.

    Frames are given in the order :mod:`traceback` produces them (outermost
    first), so the result starts at the frame that created the error.
    """
    if frames is None:
        return []
    if isinstance(frames, TracebackType):
        frames = traceback.extract_tb(frames)
    rendered = []
    for frame in reversed(list(frames)):
        filename, lineno, name = _frame_parts(frame)
        rendered.append(f"{filename}:{lineno}[{name}]")
    return rendered


def stack_of(value: Any) -> list[str]:
    """Rendered stack of ``value``; empty when it carries none."""
    stacker = find_stacker(value)
    if stacker is None:
        return []
    return render_stack(stacker.stack())

