"""Shared helpers for working with the lark Tree nodes used across the project.

Every syntax node is a ``lark.Tree``: ``data`` holds the kind tag and
``children`` hold the kind's fields positionally. Positions, the original
literal text and attached comments live on ``tree.meta``; lark's ``Tree``
equality ignores ``meta`` so none of it takes part in comparisons.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, TypeGuard, Union

from lark import Tree
from lark.tree import Meta
from typing_extensions import TypeAlias

from .kinds import KINDS

Scalar: TypeAlias = Union[str, int, float, bool, None]


@dataclass
class Comment:
    """A source comment attached to a node. ``block`` selects ``/* */`` form."""

    text: str
    block: bool = False
    leading: bool = True

    def render(self) -> str:
        if self.block:
            return f"/*{self.text}*/"
        return f"//{self.text}"


def is_tree(node: Any) -> TypeGuard[Tree]:
    return isinstance(node, Tree)

def tree_label(node: Any) -> Optional[str]:
    return node.data if is_tree(node) else None

def tree_children(node: Any) -> List[Any]:
    if not is_tree(node):
        return []

    return list(node.children)

def node_meta(node: Any) -> Optional[Meta]:
    if not is_tree(node):
        return None

    return node.meta

def node_comments(node: Any) -> List[Comment]:
    meta = node_meta(node)
    if meta is None:
        return []

    return list(getattr(meta, "comments", None) or [])

def node_raw(node: Any) -> Optional[str]:
    return getattr(node_meta(node), "raw", None)

def copy_position(target: Tree, start: Any, end: Any = None) -> Tree:
    """Copy source positions from ``start`` (and ``end``) onto ``target.meta``.

    ``start``/``end`` may be lexer tokens or trees; whichever carries
    positions is used. Trees built without positions are left untouched.
    """
    first = start.meta if is_tree(start) else start
    last = end if end is not None else start
    last = last.meta if is_tree(last) else last

    line = getattr(first, "line", None)
    if line is None:
        return target

    meta = target.meta
    meta.line = line
    meta.column = getattr(first, "column", None)
    meta.start_pos = getattr(first, "start_pos", None)
    meta.end_line = getattr(last, "end_line", None)
    meta.end_column = getattr(last, "end_column", None)
    meta.end_pos = getattr(last, "end_pos", None)
    meta.empty = False

    return target

def pretty_tree(node: Any, indent: str = '  ') -> str:
    """Indented dump of a node with field names, for debugging."""

    def _pretty(value: Any, label: str, level: int) -> List[str]:
        pad = indent * level
        prefix = f'{label}: ' if label else ''

        if isinstance(value, list):
            lines = [f'{pad}{prefix}[{len(value)}]']
            for idx, item in enumerate(value):
                lines.extend(_pretty(item, str(idx), level + 1))
            return lines

        if not is_tree(value):
            return [f'{pad}{prefix}{value!r}']

        found = KINDS.get(value.data)
        names = found.field_names if found is not None else ()
        lines = [f'{pad}{prefix}{value.data}']
        for idx, child in enumerate(value.children):
            name = names[idx] if idx < len(names) else str(idx)
            lines.extend(_pretty(child, name, level + 1))
        return lines

    return '\n'.join(_pretty(node, '', 0))
