from __future__ import annotations

from typing import Any, Callable, Union

from .paths import resolve_node
from .printer import print_node
from .tree import Comment


def negate(fn: Callable[..., Any]) -> Callable[..., bool]:
    """Wrap ``fn`` so it returns the opposite truth value."""
    def negated(*args: Any, **kwargs: Any) -> bool:
        return not fn(*args, **kwargs)

    negated.__name__ = f"not_{getattr(fn, '__name__', 'fn')}"
    return negated

def append_comment(node_or_path: Any, comment: Union[Comment, str]) -> None:
    """Attach ``comment`` after any comments the node already carries."""
    if isinstance(comment, str):
        comment = Comment(comment)

    meta = resolve_node(node_or_path).meta
    comments = getattr(meta, "comments", None)

    if not isinstance(comments, list):
        meta.comments = [comment]
    else:
        comments.append(comment)

def summarise(node_or_path: Any) -> str:
    """Source text for a node or path, in canonical formatting."""
    return print_node(node_or_path)

def pretty_print(node_or_path: Any) -> None:
    print(summarise(node_or_path))
