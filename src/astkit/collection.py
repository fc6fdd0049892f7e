from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator, List, Optional, TypeVar, Union

from lark import Tree

from .kinds import is_kind
from .parser import parse
from .paths import NodePath, root_path

T = TypeVar("T")

KindOrPredicate = Union[str, Callable[[NodePath], bool]]


def _as_predicate(kind_or_pred: KindOrPredicate) -> Callable[[NodePath], bool]:
    if isinstance(kind_or_pred, str):
        kind = kind_or_pred
        return lambda path: is_kind(path.value, kind)

    return kind_or_pred


class Collection:
    """Ordered group of node paths with find/filter/map composition."""

    __slots__ = ("_paths",)

    def __init__(self, paths: Iterable[NodePath]):
        self._paths: List[NodePath] = list(paths)

    def find(self, kind_or_pred: KindOrPredicate) -> Collection:
        """All descendants (pre-order) of every path matching a kind name or predicate."""
        pred = _as_predicate(kind_or_pred)
        found: List[NodePath] = []

        for path in self._paths:
            for child in path.descendants():
                if pred(child):
                    found.append(child)

        return Collection(found)

    def filter(self, pred: Callable[[NodePath], Any]) -> Collection:
        return Collection(p for p in self._paths if pred(p))

    def map(self, fn: Callable[[NodePath], T]) -> List[T]:
        return [fn(p) for p in self._paths]

    def for_each(self, fn: Callable[[NodePath], Any]) -> Collection:
        for path in self._paths:
            fn(path)
        return self

    def size(self) -> int:
        return len(self._paths)

    def paths(self) -> List[NodePath]:
        return list(self._paths)

    def nodes(self) -> List[Tree]:
        return [p.value for p in self._paths]

    def first(self) -> Optional[NodePath]:
        return self._paths[0] if self._paths else None

    def __len__(self) -> int:
        return len(self._paths)

    def __iter__(self) -> Iterator[NodePath]:
        return iter(self._paths)

    def __getitem__(self, idx: int) -> NodePath:
        return self._paths[idx]

    def __repr__(self) -> str:
        return f"Collection({len(self._paths)} paths)"


def query(source: Any) -> Collection:
    """Start a query from source text, a node, or a path."""
    if isinstance(source, str):
        source = parse(source)

    return Collection([root_path(source)])
