"""Record encoders and the substitute-record fallback."""

import json
from abc import ABC, abstractmethod
from datetime import UTC, date, datetime, timedelta
from typing import Any, Literal, Mapping

from .fields import ERROR, MSG, ORIG_MSG, TIME
from .mechanism import EncodeError, FatalEncodeError

LOG_FORMAT = Literal["text", "json"]

ENCODE_ERROR_MSG = "scopelog: encode error"


def to_utf8(text: str) -> bytes:
    """UTF-8 bytes; lone surrogates (e.g. from ``os.fsdecode``) become ``\\udcXX`` escapes."""
    return text.encode("utf-8", errors="backslashreplace")


def clean_text(text: str) -> str:
    return to_utf8(text).decode("utf-8")


def format_timestamp(ts: datetime) -> str:
    """
    RFC 3339 rendering: ``2000-01-01T00:00:00Z``, ``2000-01-01T00:00:00.5Z``.

    UTC instants get a ``Z`` suffix and no trailing zeros in the fraction;
    other offsets fall back to :meth:`datetime.isoformat`.
    """
    offset = ts.utcoffset()
    if offset is not None and offset != timedelta(0):
        return ts.isoformat()
    text = ts.strftime("%Y-%m-%dT%H:%M:%S")
    if ts.microsecond:
        text += "." + f"{ts.microsecond:06d}".rstrip("0")
    return text + "Z"


class Encoder(ABC):
    """Serializes one resolved record to one line of bytes."""

    @abstractmethod
    def encode(self, record: Mapping[str, Any]) -> bytes:
        """Raise :class:`EncodeError` if some value cannot be represented."""
        ...


class JSONEncoder(Encoder):
    """
    Newline-delimited JSON with sorted keys.

    Example:
        >>> JSONEncoder().encode({"msg": "hi", "a": 1})
        b'{"a":1,"msg":"hi"}\\n'
    """

    def _default(self, value: Any) -> Any:
        if isinstance(value, datetime):
            return format_timestamp(value)
        if isinstance(value, date):
            return value.isoformat()
        raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")

    def encode(self, record: Mapping[str, Any]) -> bytes:
        try:
            text = json.dumps(
                record,
                sort_keys=True,
                separators=(",", ":"),
                ensure_ascii=False,
                allow_nan=False,
                default=self._default,
            )
            return to_utf8(text + "\n")
        except (TypeError, ValueError, RecursionError) as exc:
            raise EncodeError(exc, encoder=type(self).__name__) from exc


class TextEncoder(Encoder):
    """
    Human-readable ``key=value`` lines with sorted keys.

    Values with spaces, quotes or ``=`` are JSON-quoted, so a line can still be
    split reliably:

        error="broken pipe" msg=hello time=2000-01-01T00:00:00Z
    """

    _QUOTE_CHARS = frozenset(' "=\t\n\r')

    def _text_value(self, value: Any) -> str:
        if isinstance(value, datetime):
            return format_timestamp(value)
        if isinstance(value, str):
            text = value
        elif isinstance(value, (list, tuple, dict)):
            return json.dumps(value, ensure_ascii=False, default=str)
        else:
            text = str(value)
        if not text or any(c in self._QUOTE_CHARS for c in text):
            return json.dumps(text, ensure_ascii=False)
        return text

    def encode(self, record: Mapping[str, Any]) -> bytes:
        try:
            parts = [f"{key}={self._text_value(record[key])}" for key in sorted(record)]
            return to_utf8(" ".join(parts) + "\n")
        except Exception as exc:
            raise EncodeError(exc, encoder=type(self).__name__) from exc


def get_encoder(format: LOG_FORMAT) -> Encoder:
    if format == "json":
        return JSONEncoder()
    if format == "text":
        return TextEncoder()
    raise ValueError(f"Unknown log format: {format!r}")


def substitute_record(record: Mapping[str, Any], error: Exception) -> dict[str, Any]:
    """
    The record emitted in place of one that failed to encode. All values are
    plain strings or a datetime, so any working encoder can represent it.
    """
    ts = record.get(TIME)
    if isinstance(ts, str):
        ts = clean_text(ts)
    elif not isinstance(ts, datetime):
        ts = datetime.now(UTC)
    return {
        TIME: ts,
        ERROR: clean_text(str(error)),
        MSG: ENCODE_ERROR_MSG,
        ORIG_MSG: clean_text(str(record.get(MSG, ""))),
    }


def encode_with_fallback(encoder: Encoder, record: Mapping[str, Any]) -> bytes:
    """
    Encode ``record``; on failure encode a substitute record describing it.

    Raises:
        FatalEncodeError: if the substitute record cannot be encoded either.
    """
    try:
        return encoder.encode(record)
    except Exception as exc:
        cause = exc.exception if isinstance(exc, EncodeError) else exc
        substitute = substitute_record(record, cause)

    try:
        return encoder.encode(substitute)
    except Exception as exc:
        raise FatalEncodeError(exc, encoder=type(encoder).__name__) from exc
