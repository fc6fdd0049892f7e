"""Structural equivalence of syntax trees.

Useful for deciding whether two variables have the same definition::

    equivalent(path1, path2)
    query(src).find("CallExpression").filter(equivalent_to(reference))

Only the kind and the declared fields take part; positions, original
literal text and comments live on ``meta`` and are never consulted.
"""
from __future__ import annotations

from typing import Any

from lark import Tree

from .errors import MalformedNode
from .kinds import LIST, NODE, iter_fields
from .paths import resolve_node


def _scalars_equal(a: Any, b: Any) -> bool:
    # bool is an int subclass in Python; JS keeps them distinct.
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b

    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a == b

    return type(a) is type(b) and a == b

def _nodes_equal(a: Any, b: Any) -> bool:
    if a is None or b is None:
        return a is None and b is None

    if not isinstance(a, Tree) or not isinstance(b, Tree):
        raise MalformedNode(f"cannot compare {type(a).__name__} with {type(b).__name__}")

    if a.data != b.data:
        return False

    for (f, left), (_, right) in zip(iter_fields(a), iter_fields(b)):
        if f.shape == LIST:
            if not isinstance(left, list) or not isinstance(right, list):
                raise MalformedNode(f"field '{f.name}' must be a list", a.data)
            if len(left) != len(right):
                return False
            if not all(_nodes_equal(x, y) for x, y in zip(left, right)):
                return False
        elif f.shape == NODE:
            if not f.optional and (left is None or right is None):
                raise MalformedNode(f"missing required field '{f.name}'", a.data)
            if not _nodes_equal(left, right):
                return False
        elif not _scalars_equal(left, right):
            return False

    return True


def equivalent(a: Any, b: Any) -> bool:
    """Return True if the two nodes (or paths) are structurally equivalent."""
    return _nodes_equal(resolve_node(a), resolve_node(b))


class EquivalenceMatcher:
    """Unary predicate comparing its argument against a captured node."""

    __slots__ = ("reference",)

    def __init__(self, reference: Any):
        self.reference = resolve_node(reference)

    def __call__(self, other: Any) -> bool:
        return equivalent(self.reference, other)

    def __repr__(self) -> str:
        return f"EquivalenceMatcher({self.reference.data if isinstance(self.reference, Tree) else self.reference!r})"


def equivalent_to(reference: Any) -> EquivalenceMatcher:
    return EquivalenceMatcher(reference)
