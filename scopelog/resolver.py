"""Flatten a scope chain into one record.

The chain is walked from the leaf to the root and every key keeps the first
value seen, so fields attached closer to the log call win. The logger's base
fields are walked last, as the implicit root. ``error`` and ``time`` are
reduced to serializable values on the way in; ``msg`` is always set from the
call and ``time`` falls back to the instant of the call.
"""

from datetime import UTC, datetime
from typing import Any, Iterable, Optional

from .fields import DEFAULT_STACK_FIELD, ERROR, MSG, TIME, Field
from .scope import ChainNode
from .stack import describe_error, stack_of


def normalize_time(value: Any) -> datetime | str | None:
    """UTC datetime for datetimes (naive ones are taken as UTC), strings as-is."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)
    if isinstance(value, str) and value:
        return value
    return None


def _insert(record: dict[str, Any], f: Field, stack_field: str) -> None:
    if f.key == ERROR:
        try:
            described = describe_error(f.value)
        except Exception:
            described = f"<unprintable {type(f.value).__name__}>"
        if described is None:
            record[ERROR] = f.value
            return
        record[ERROR] = described
        try:
            frames = stack_of(f.value)
        except Exception:
            frames = []
        if frames and stack_field not in record:
            record[stack_field] = frames
    elif f.key == TIME:
        ts = normalize_time(f.value)
        if ts is not None:
            record[TIME] = ts
    else:
        record[f.key] = f.value


def _merge(record: dict[str, Any], fields: Iterable[Field], stack_field: str) -> None:
    for f in fields:
        if f.stashed or f.key in record:
            continue
        _insert(record, f, stack_field)


def resolve_into(
    record: dict[str, Any],
    leaf: Optional[ChainNode],
    base: Iterable[Field],
    msg: str,
    *,
    stack_field: str = DEFAULT_STACK_FIELD,
    now: datetime | None = None,
) -> dict[str, Any]:
    """
    Populate ``record`` from ``leaf`` up through the chain, then ``base``.

    Args:
        record: Empty mapping to fill, usually drawn from a pool.
        leaf: Most recently attached node, or ``None`` for a bare scope.
        base: The logger's own fields.
        msg: Message of the log call; always stored under ``msg``.
        stack_field: Key for rendered error stacks.
        now: Fallback time; defaults to the current UTC instant.

    Returns:
        ``record``, for convenience.
    """
    if leaf is not None:
        for node in leaf.walk():
            _merge(record, node.fields, stack_field)
    _merge(record, base, stack_field)

    record[MSG] = msg
    if TIME not in record:
        record[TIME] = now if now is not None else datetime.now(UTC)
    return record


def resolve(
    leaf: Optional[ChainNode],
    base: Iterable[Field] = (),
    msg: str = "",
    *,
    stack_field: str = DEFAULT_STACK_FIELD,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Like :func:`resolve_into` but returns a fresh dict the caller may keep."""
    return resolve_into({}, leaf, base, msg, stack_field=stack_field, now=now)
