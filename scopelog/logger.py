"""Structured logger over explicitly passed scopes.

:class:`Logger` attaches fields to a :class:`~scopelog.scope.Scope` and, on
every log call, resolves the scope chain into one record, encodes it and
writes it to the sink in a single locked write.
"""

import threading
from typing import Any, Mapping, NoReturn, Optional, TypeVar

from .encoding import Encoder, JSONEncoder, encode_with_fallback
from .fields import DEFAULT_STACK_FIELD, LEVEL, Field, error_field, fields_from
from .pool import Pool, record_pool
from .resolver import resolve_into
from .scope import EMPTY, ChainNode, Scope
from .writer import LogWriter, SubjectWriter, SyncWriter

T = TypeVar("T")

LEVEL_DEBUG = "debug"
LEVEL_INFO = "info"
LEVEL_ERROR = "error"
LEVEL_FATAL = "fatal"


class _ScopeKey:
    """Key under which one logger keeps its values in a scope."""

    __slots__ = ("name",)

    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return f"<scope key {self.name}>"


class Logger:
    """
    Logger writing one encoded record per call.

    Example:
        >>> log = Logger(fields={"svc": "api"})
        >>> scope = log.with_field(Scope(), "request_id", "r-1")
        >>> log.info(scope, "request started")
        {"level":"info","msg":"request started","request_id":"r-1","svc":"api","time":"..."}

    Parameters
    - writer: Sink with a ``write(bytes)`` method. A bare stream is wrapped in
      :class:`SyncWriter`; ``None`` writes to stdout. A :class:`SubjectWriter` is
      used as-is.
    - fields: Base fields added to every record, lowest precedence.
    - debug: Process-wide default for debug-level output.
    - stack_field: Key under which error stacks are rendered.
    - encoder: Record encoder, :class:`JSONEncoder` by default.
    - pool: Freelist for scratch records, shared module-wide by default.
    """

    def __init__(
        self,
        writer: Any = None,
        *,
        fields: Mapping[str, Any] | None = None,
        debug: bool = False,
        stack_field: str = DEFAULT_STACK_FIELD,
        encoder: Encoder | None = None,
        pool: Pool[dict] | None = None,
    ):
        if not isinstance(writer, (SyncWriter, SubjectWriter)):
            writer = SyncWriter(writer)
        self._writer = writer
        self._fields = fields_from(fields)
        self._stack_field = stack_field
        self._encoder = encoder or JSONEncoder()
        self._pool = pool if pool is not None else record_pool

        self._debug = threading.Event()
        if debug:
            self._debug.set()

        self._fields_key = _ScopeKey(f"fields-{id(self):x}")
        self._debug_key = _ScopeKey(f"debug-{id(self):x}")

    @property
    def fields(self) -> tuple[Field, ...]:
        return self._fields

    @property
    def encoder(self) -> Encoder:
        return self._encoder

    # -- scope derivation ----------------------------------------------------

    def chain(self, scope: Optional[Scope]) -> Optional[ChainNode]:
        """Leaf node of this logger's chain in ``scope``, if any."""
        if scope is None:
            return None
        return scope.get(self._fields_key)

    def bind(self, scope: Optional[Scope], *fields: Field) -> Scope:
        """Return a scope with ``fields`` attached on top of its chain."""
        scope = scope if scope is not None else EMPTY
        if not fields:
            return scope
        return scope.derive(self._fields_key, ChainNode(self.chain(scope), tuple(fields)))

    def with_fields(self, scope: Optional[Scope], fields: Mapping[str, Any]) -> Scope:
        return self.bind(scope, *fields_from(fields))

    def with_field(self, scope: Optional[Scope], key: str, value: Any) -> Scope:
        return self.bind(scope, Field(key, value))

    def with_error(self, scope: Optional[Scope], exc: BaseException) -> Scope:
        return self.bind(scope, error_field(exc))

    def lookup(self, scope: Optional[Scope], cls: type[T]) -> T | None:
        """Return the stashed value of type ``cls`` closest to the leaf."""
        leaf = self.chain(scope)
        if leaf is None:
            return None
        return leaf.lookup(cls)

    # -- debug gating --------------------------------------------------------

    def set_debug_global(self, enabled: bool) -> None:
        """Enable or disable debug output for scopes without an override."""
        if enabled:
            self._debug.set()
        else:
            self._debug.clear()

    def set_debug(self, scope: Optional[Scope], enabled: bool) -> Scope:
        """Return a scope overriding the global debug flag."""
        scope = scope if scope is not None else EMPTY
        return scope.derive(self._debug_key, bool(enabled))

    def debug_enabled(self, scope: Optional[Scope]) -> bool:
        override = scope.get(self._debug_key) if scope is not None else None
        if override is not None:
            return override
        return self._debug.is_set()

    # -- log calls -----------------------------------------------------------

    def print(self, scope: Optional[Scope], msg: str, *fields: Field) -> None:
        """Log ``msg`` without a level. ``fields`` apply to this call only."""
        self._print(scope, msg, fields)

    def debug(self, scope: Optional[Scope], msg: str, *fields: Field) -> None:
        if not self.debug_enabled(scope):
            return
        self._print(scope, msg, (Field(LEVEL, LEVEL_DEBUG), *fields))

    def info(self, scope: Optional[Scope], msg: str, *fields: Field) -> None:
        self._print(scope, msg, (Field(LEVEL, LEVEL_INFO), *fields))

    def error(self, scope: Optional[Scope], msg: str, *fields: Field) -> None:
        self._print(scope, msg, (Field(LEVEL, LEVEL_ERROR), *fields))

    def fatal(self, scope: Optional[Scope], msg: str, *fields: Field) -> NoReturn:
        """Log at fatal level, then exit with status 1."""
        self._print(scope, msg, (Field(LEVEL, LEVEL_FATAL), *fields))
        raise SystemExit(1)

    def writer(self, scope: Optional[Scope] = None) -> LogWriter:
        """File-like adapter logging each write at info level."""
        return LogWriter(self, scope if scope is not None else EMPTY)

    def _print(self, scope: Optional[Scope], msg: str, fields: tuple[Field, ...]) -> None:
        leaf = self.chain(scope)
        if fields:
            leaf = ChainNode(leaf, fields)

        with self._pool.acquire() as record:
            resolve_into(record, leaf, self._fields, msg, stack_field=self._stack_field)
            data = encode_with_fallback(self._encoder, record)

        self._writer.write(data)
