"""Propagation handle and the immutable field chain it carries.

A :class:`Scope` plays the role of a request context: it is passed explicitly
down the call chain and every derivation returns a new scope, leaving the
original untouched. A logger stores its :class:`ChainNode` in the scope under a
key private to that logger, so several loggers can share one scope.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterator, Optional, TypeVar

from .fields import Field

T = TypeVar("T")


@dataclass(frozen=True)
class ChainNode:
    """One link of the scope chain: the fields attached at one derivation."""

    previous: Optional["ChainNode"]
    fields: tuple[Field, ...]

    def walk(self) -> Iterator["ChainNode"]:
        """Yield nodes from this one (the leaf) up to the root."""
        node: Optional[ChainNode] = self
        while node is not None:
            yield node
            node = node.previous

    def extend(self, fields: tuple[Field, ...]) -> "ChainNode":
        return ChainNode(self, fields)

    def lookup(self, cls: type[T]) -> T | None:
        """Return the stashed value of type ``cls`` closest to the leaf."""
        for node in self.walk():
            for f in node.fields:
                if f.stashed and isinstance(f.value, cls):
                    return f.value
        return None


class Scope:
    """
    Immutable carrier of per-request values.

    Example:
        >>> root = Scope()
        >>> child = root.derive("user", "alice")
        >>> child.get("user"), root.get("user")
        ('alice', None)
    """

    __slots__ = ("_values",)

    def __init__(self, values: dict[Any, Any] | None = None):
        self._values = MappingProxyType(dict(values or {}))

    def get(self, key: Any, default: Any = None) -> Any:
        return self._values.get(key, default)

    def derive(self, key: Any, value: Any) -> "Scope":
        """Return a new scope with ``key`` set to ``value``."""
        values = dict(self._values)
        values[key] = value
        return Scope(values)

    def __contains__(self, key: Any) -> bool:
        return key in self._values

    def __repr__(self) -> str:
        return f"Scope({len(self._values)} values)"


EMPTY = Scope()
