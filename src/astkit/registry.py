"""Kind predicate and assertion tables.

So we can write::

    query(src).find("Identifier").filter(registry.check.VariableDeclarator)

instead of spelling out a lambda for every kind. Tables are built once over
the whole vocabulary by ``build_registry`` and never change afterwards.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Callable, Iterator, Mapping, Optional

from .errors import KindMismatch, UnknownKind
from .kinds import KINDS, KindDef, check_vocabulary, is_kind
from .paths import resolve_node
from .tree import tree_label

Predicate = Callable[[Any], bool]
Assertion = Callable[[Any], None]


class KindTable(Mapping[str, Callable[..., Any]]):
    """Read-only kind -> function table, also reachable by attribute."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, Callable[..., Any]]):
        object.__setattr__(self, "_entries", MappingProxyType(dict(entries)))

    def __getitem__(self, kind: str) -> Callable[..., Any]:
        try:
            return self._entries[kind]
        except KeyError:
            raise UnknownKind(kind) from None

    def __getattr__(self, kind: str) -> Callable[..., Any]:
        if kind.startswith("_"):
            raise AttributeError(kind)
        return self[kind]

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("kind tables are read-only")

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"KindTable({len(self)} kinds)"


def _make_predicate(kind: str, kinds: Mapping[str, KindDef]) -> Predicate:
    def check(value: Any) -> bool:
        return is_kind(resolve_node(value), kind, kinds)

    check.__name__ = f"is_{kind}"
    return check

def _make_assertion(kind: str, kinds: Mapping[str, KindDef]) -> Assertion:
    def assert_kind(value: Any) -> None:
        node = resolve_node(value)
        if not is_kind(node, kind, kinds):
            raise KindMismatch(kind, tree_label(node))

    assert_kind.__name__ = f"assert_{kind}"
    return assert_kind


@dataclass(frozen=True)
class KindRegistry:
    kinds: Mapping[str, KindDef]
    check: KindTable
    assertion: KindTable

    def predicate_for(self, kind: str) -> Predicate:
        return self.check[kind]

    def assertion_for(self, kind: str) -> Assertion:
        return self.assertion[kind]

    def kind_def(self, kind: str) -> KindDef:
        try:
            return self.kinds[kind]
        except KeyError:
            raise UnknownKind(kind) from None


def build_registry(kinds: Mapping[str, KindDef]) -> KindRegistry:
    """Build predicate/assertion tables over every kind in ``kinds``."""
    vocabulary = MappingProxyType(check_vocabulary(kinds))

    return KindRegistry(
        kinds=vocabulary,
        check=KindTable({name: _make_predicate(name, vocabulary) for name in vocabulary}),
        assertion=KindTable({name: _make_assertion(name, vocabulary) for name in vocabulary}),
    )

@lru_cache(maxsize=None)
def default_registry() -> KindRegistry:
    return build_registry(KINDS)

def predicate_for(kind: str, registry: Optional[KindRegistry] = None) -> Predicate:
    return (registry or default_registry()).predicate_for(kind)

def assertion_for(kind: str, registry: Optional[KindRegistry] = None) -> Assertion:
    return (registry or default_registry()).assertion_for(kind)
