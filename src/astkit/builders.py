"""Node construction helpers.

``node(kind, **fields)`` orders keyword fields by the kind's declaration and
validates the result; the named helpers cover the kinds transformations
build most often.
"""
from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence, Union

from lark import Tree

from .errors import MalformedNode
from .kinds import LIST, kind_def, validate_node
from .tree import Scalar


def node(kind: str, /, **fields: Any) -> Tree:
    found = kind_def(kind)
    if found.abstract:
        raise MalformedNode("cannot build an abstract kind", kind)

    unknown = set(fields) - set(found.field_names)
    if unknown:
        raise MalformedNode(f"unknown fields {sorted(unknown)}", kind)

    children: List[Any] = []
    for f in found.fields:
        value = fields.get(f.name)
        if value is None and f.shape == LIST:
            value = []
        elif f.shape == LIST:
            value = list(value)
        children.append(value)

    tree = Tree(kind, children)
    validate_node(tree)
    return tree

def identifier(name: str) -> Tree:
    return node('Identifier', name=name)

def literal(value: Scalar) -> Tree:
    return node('Literal', value=value)

def _as_expression(value: Union[str, Tree]) -> Tree:
    return identifier(value) if isinstance(value, str) else value

def member_expression(obj: Union[str, Tree], prop: Union[str, Tree], computed: bool = False) -> Tree:
    return node('MemberExpression', object=_as_expression(obj), property=_as_expression(prop), computed=computed)

def call_expression(callee: Union[str, Tree], arguments: Iterable[Tree] = ()) -> Tree:
    return node('CallExpression', callee=_as_expression(callee), arguments=list(arguments))

def expression_statement(expression: Tree) -> Tree:
    return node('ExpressionStatement', expression=expression)

def variable_declaration(kind: str, name: Union[str, Tree], init: Optional[Tree] = None) -> Tree:
    if kind not in ('var', 'let', 'const'):
        raise MalformedNode(f"invalid declaration kind '{kind}'", 'VariableDeclaration')
    declarator = node('VariableDeclarator', id=_as_expression(name), init=init)
    return node('VariableDeclaration', kind=kind, declarations=[declarator])

def build_nested_member_expression(members: Sequence[Union[str, Tree]]) -> Tree:
    """Left-associated member chain: ['assert', 'equal'] prints as ``assert.equal``."""
    if not members:
        raise ValueError("member chain needs at least one name")

    expr = _as_expression(members[0])
    for member in members[1:]:
        expr = member_expression(expr, member)
    return expr
