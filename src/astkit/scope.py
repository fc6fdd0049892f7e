"""Scope membership and identifier collision queries."""
from __future__ import annotations

from typing import Set

from .collection import Collection
from .helpers import negate
from .kinds import get_field, is_kind
from .paths import NodePath, Scope


def nodes_of_kind_in_scope(path: NodePath, kind: str) -> Collection:
    """Nodes of ``kind`` whose scope is exactly the scope of ``path``.

    Nodes inside a nested function or block are excluded even though they
    sit textually inside the scope's node.
    """
    scope = path.scope
    return Collection([scope.path]).find(kind).filter(lambda p: p.scope == scope)


def is_property_name(path: NodePath) -> bool:
    """True for identifiers naming an object property rather than a binding."""
    parent = path.parent_path
    if parent is None:
        return False

    owner = parent.value

    if is_kind(owner, "MemberExpression"):
        return get_field(owner, "property") is path.value and not get_field(owner, "computed")

    if is_kind(owner, "Property"):
        return (
            path.name == "key"
            and not get_field(owner, "computed")
            and not get_field(owner, "shorthand")
        )

    return False


def identifiers_in_same_scope(path: NodePath) -> Set[str]:
    """Names that would clash or shadow if declared in the scope of ``path``.

    For::

        () => {
          let x;
          const f = () => {};
          setTimeout(f, 2000, x);
        }

    the result is ``{"x", "f", "setTimeout"}``: declaring any of these would
    clash with ``x``/``f`` or shadow ``setTimeout``.
    """
    found = nodes_of_kind_in_scope(path, "Identifier").filter(negate(is_property_name))
    return {get_field(node, "name") for node in found.nodes()}


def closest_shared_scope(a: NodePath, b: NodePath) -> Scope:
    """Innermost scope enclosing both paths."""
    outer = set(a.scope.ancestors())

    for scope in b.scope.ancestors():
        if scope in outer:
            return scope

    raise ValueError("paths do not belong to the same tree")
