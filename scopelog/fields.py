"""Field values attached to scopes and log calls."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

MSG = "msg"
TIME = "time"
ERROR = "error"
LEVEL = "level"
ORIG_MSG = "orig-msg"
DEFAULT_STACK_FIELD = "error-stack"


@dataclass(frozen=True)
class Field:
    """
    One key/value pair. An empty ``key`` marks a stashed value: it travels with
    the scope for :meth:`Logger.lookup` but is never serialized.
    """

    key: str
    value: Any

    @property
    def stashed(self) -> bool:
        return not self.key


def field(key: str, value: Any) -> Field:
    return Field(key, value)


def error_field(exc: BaseException) -> Field:
    """Attach an error; it is reduced to its message (and stack, if any)."""
    return Field(ERROR, exc)


def time_field(ts: datetime) -> Field:
    """Pin the record time instead of using the instant of the log call."""
    return Field(TIME, ts)


def stash(value: Any) -> Field:
    return Field("", value)


def fields_from(mapping: Mapping[str, Any] | None) -> tuple[Field, ...]:
    """Convert a mapping to fields, keeping its iteration order."""
    if not mapping:
        return ()
    return tuple(Field(str(k), v) for k, v in mapping.items())
