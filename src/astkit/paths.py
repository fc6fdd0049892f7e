"""Node handles (paths) and lexical scopes.

A ``NodePath`` is a transient view of a node: the node itself plus where it
sits in the tree. Scopes are resolved lazily by walking parents, so a path
must not outlive a mutation of the tree it was produced from.
"""
from __future__ import annotations

from typing import Any, Iterator, List, Optional, TypeGuard

from lark import Tree

from .kinds import LIST, NODE, get_field, is_kind, iter_fields

# Blocks directly owned by these kinds share the owner's scope.
_BODY_OWNERS = ("Function", "CatchClause")

_SCOPE_KINDS = (
    "Program",
    "Function",
    "CatchClause",
    "ForStatement",
    "ForInStatement",
    "ForOfStatement",
)


class Scope:
    __slots__ = ("path", "parent", "depth")

    def __init__(self, path: NodePath, parent: Optional[Scope]):
        self.path = path
        self.parent = parent
        self.depth = 0 if parent is None else parent.depth + 1

    @property
    def node(self) -> Tree:
        return self.path.value

    @property
    def is_global(self) -> bool:
        return self.parent is None

    def ancestors(self) -> Iterator[Scope]:
        """Yield this scope, then each enclosing scope outwards."""
        scope: Optional[Scope] = self
        while scope is not None:
            yield scope
            scope = scope.parent

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Scope):
            return NotImplemented
        return self.node is other.node

    def __hash__(self) -> int:
        return id(self.node)

    def __repr__(self) -> str:
        return f"Scope({self.node.data!r}, depth={self.depth})"


class NodePath:
    __slots__ = ("value", "parent_path", "name", "index", "_scope")

    def __init__(
        self,
        value: Any,
        parent_path: Optional[NodePath] = None,
        name: Optional[str] = None,
        index: Optional[int] = None,
    ):
        self.value = value
        self.parent_path = parent_path
        self.name = name
        self.index = index
        self._scope: Optional[Scope] = None

    @property
    def node(self) -> Any:
        return self.value

    @property
    def parent(self) -> Optional[NodePath]:
        return self.parent_path

    @property
    def scope(self) -> Scope:
        if self._scope is None:
            self._scope = _resolve_scope(self)
        return self._scope

    def establishes_scope(self) -> bool:
        parent = self.parent_path
        if parent is None:
            return True

        node = self.value
        if any(is_kind(node, kind) for kind in _SCOPE_KINDS):
            return True

        if not is_kind(node, "BlockStatement"):
            return False

        owned = self.name == "body" and any(is_kind(parent.value, k) for k in _BODY_OWNERS)
        return not owned

    def children(self) -> Iterator[NodePath]:
        node = self.value
        if not isinstance(node, Tree):
            return

        for f, value in iter_fields(node):
            if f.shape == LIST:
                for idx, item in enumerate(value):
                    if isinstance(item, Tree):
                        yield NodePath(item, self, f.name, idx)
            elif f.shape == NODE and isinstance(value, Tree):
                yield NodePath(value, self, f.name)

    def descendants(self) -> Iterator[NodePath]:
        """Pre-order walk of everything below this path (not including it)."""
        stack: List[Iterator[NodePath]] = [self.children()]

        while stack:
            child = next(stack[-1], None)
            if child is None:
                stack.pop()
                continue
            yield child
            stack.append(child.children())

    def get(self, field: str) -> Optional[NodePath]:
        for child in self.children():
            if child.name == field and child.index is None:
                return child
        return None

    def __repr__(self) -> str:
        label = self.value.data if isinstance(self.value, Tree) else type(self.value).__name__
        where = self.name if self.index is None else f"{self.name}[{self.index}]"
        return f"NodePath({label!r}, at={where!r})"


def is_path(value: Any) -> TypeGuard[NodePath]:
    return isinstance(value, NodePath)

def resolve_node(node_or_path: Any) -> Any:
    """If supplied a path, return its node; otherwise return the value unchanged."""
    return node_or_path.value if is_path(node_or_path) else node_or_path

def root_path(node_or_path: Any) -> NodePath:
    if is_path(node_or_path):
        return node_or_path
    return NodePath(node_or_path)

def _resolve_scope(path: NodePath) -> Scope:
    parent = path.parent_path

    if parent is None:
        return Scope(path, None)

    if path.establishes_scope():
        return Scope(path, parent.scope)

    scope = parent.scope

    # A declared function's name is bound where the declaration sits.
    if path.name == "id" and is_kind(parent.value, "FunctionDeclaration"):
        return scope.parent if scope.parent is not None else scope

    if path.name == "id" and _declares_var(parent):
        return _function_scope(scope)

    return scope

def _declares_var(declarator: NodePath) -> bool:
    owner = declarator.parent_path
    if owner is None or not is_kind(declarator.value, "VariableDeclarator"):
        return False
    return is_kind(owner.value, "VariableDeclaration") and get_field(owner.value, "kind") == "var"

def _function_scope(scope: Scope) -> Scope:
    """Nearest function or program scope; ``var`` ignores blocks and loops."""
    found = scope
    for found in scope.ancestors():
        if is_kind(found.node, "Function") or is_kind(found.node, "Program"):
            break
    return found
