"""Callee pattern matching for call expressions.

The callee is printed in canonical form (one line, comments stripped) and
the pattern is searched in that text. Equivalent callees that print
differently will not match the same pattern; this is a convenience filter,
not a semantic one::

    query(src).find("CallExpression").filter(call_expression_matching(r"^assert\\.equal$"))
"""
from __future__ import annotations

import re
from typing import Any, Callable, Optional, Union

from .errors import KindMismatch
from .kinds import get_field, is_kind
from .paths import resolve_node
from .printer import PrintOptions, print_node
from .tree import tree_label

_CALLEE_OPTIONS = PrintOptions(comments=False)


def callee_text(node_or_path: Any) -> str:
    node = resolve_node(node_or_path)
    if not (is_kind(node, 'CallExpression') or is_kind(node, 'NewExpression')):
        raise KindMismatch('CallExpression', tree_label(node))
    return print_node(get_field(node, 'callee'), _CALLEE_OPTIONS)

def call_expression_matching(pattern: Union[str, re.Pattern[str]]) -> Callable[[Any], Optional[re.Match]]:
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern

    def matches(node_or_path: Any) -> Optional[re.Match]:
        return regex.search(callee_text(node_or_path))

    return matches
