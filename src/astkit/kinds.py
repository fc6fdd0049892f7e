"""
Node kind vocabulary for the JavaScript subset.

Each concrete kind declares its fields in child order. A field's ``shape``
tells how its slot is read:

- ``node``: a child Tree (or None when optional)
- ``list``: a Python list of child Trees
- ``value``: a scalar (str/int/float/bool/None)

Abstract kinds (Expression, Statement, Function, ...) carry no fields; they
exist so predicates can ask "is this any kind of function?".
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from lark import Tree

from .errors import MalformedNode, UnknownKind

NODE = "node"
LIST = "list"
VALUE = "value"


@dataclass(frozen=True)
class Field:
    name: str
    shape: str = NODE
    optional: bool = False


@dataclass(frozen=True)
class KindDef:
    name: str
    fields: Tuple[Field, ...] = ()
    supertypes: Tuple[str, ...] = ()
    abstract: bool = False

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def index_of(self, field_name: str) -> int:
        for idx, f in enumerate(self.fields):
            if f.name == field_name:
                return idx
        raise MalformedNode(f"no field '{field_name}'", self.name)


def _kind(name: str, fields: Iterable[Field] = (), supertypes: Iterable[str] = ()) -> KindDef:
    return KindDef(name, tuple(fields), tuple(supertypes))

def _abstract(name: str, supertypes: Iterable[str] = ()) -> KindDef:
    return KindDef(name, (), tuple(supertypes), abstract=True)


EXPR = ("Expression", "Node")
STMT = ("Statement", "Node")
FUNC = ("Function", "Node")

JS_KINDS: Tuple[KindDef, ...] = (
    _abstract("Node"),
    _abstract("Expression", ("Node",)),
    _abstract("Statement", ("Node",)),
    _abstract("Declaration", ("Statement", "Node")),
    _abstract("Function", ("Node",)),
    _abstract("Pattern", ("Node",)),

    _kind("Program", [Field("body", LIST)], ("Node",)),
    _kind("Identifier", [Field("name", VALUE)], ("Expression", "Pattern", "Node")),
    _kind("Literal", [Field("value", VALUE)], EXPR),
    _kind("ThisExpression", [], EXPR),
    _kind("ArrayExpression", [Field("elements", LIST)], EXPR),
    _kind("ObjectExpression", [Field("properties", LIST)], EXPR),
    _kind("Property", [
        Field("key"),
        Field("value"),
        Field("computed", VALUE),
        Field("shorthand", VALUE),
    ], ("Node",)),
    _kind("FunctionExpression", [
        Field("id", optional=True),
        Field("params", LIST),
        Field("body"),
    ], ("Function",) + EXPR),
    _kind("ArrowFunctionExpression", [
        Field("params", LIST),
        Field("body"),
        Field("expression", VALUE),
    ], ("Function",) + EXPR),
    _kind("UnaryExpression", [Field("operator", VALUE), Field("argument")], EXPR),
    _kind("UpdateExpression", [
        Field("operator", VALUE),
        Field("prefix", VALUE),
        Field("argument"),
    ], EXPR),
    _kind("BinaryExpression", [Field("operator", VALUE), Field("left"), Field("right")], EXPR),
    _kind("LogicalExpression", [Field("operator", VALUE), Field("left"), Field("right")], EXPR),
    _kind("AssignmentExpression", [Field("operator", VALUE), Field("left"), Field("right")], EXPR),
    _kind("ConditionalExpression", [Field("test"), Field("consequent"), Field("alternate")], EXPR),
    _kind("CallExpression", [Field("callee"), Field("arguments", LIST)], EXPR),
    _kind("NewExpression", [Field("callee"), Field("arguments", LIST)], EXPR),
    _kind("MemberExpression", [
        Field("object"),
        Field("property"),
        Field("computed", VALUE),
    ], ("Expression", "Pattern", "Node")),
    _kind("SequenceExpression", [Field("expressions", LIST)], EXPR),

    _kind("ExpressionStatement", [Field("expression")], STMT),
    _kind("BlockStatement", [Field("body", LIST)], STMT),
    _kind("EmptyStatement", [], STMT),
    _kind("VariableDeclaration", [
        Field("kind", VALUE),
        Field("declarations", LIST),
    ], ("Declaration",) + STMT),
    _kind("VariableDeclarator", [Field("id"), Field("init", optional=True)], ("Node",)),
    _kind("FunctionDeclaration", [
        Field("id"),
        Field("params", LIST),
        Field("body"),
    ], ("Function", "Declaration") + STMT),
    _kind("ReturnStatement", [Field("argument", optional=True)], STMT),
    _kind("IfStatement", [
        Field("test"),
        Field("consequent"),
        Field("alternate", optional=True),
    ], STMT),
    _kind("ForStatement", [
        Field("init", optional=True),
        Field("test", optional=True),
        Field("update", optional=True),
        Field("body"),
    ], STMT),
    _kind("ForInStatement", [Field("left"), Field("right"), Field("body")], STMT),
    _kind("ForOfStatement", [Field("left"), Field("right"), Field("body")], STMT),
    _kind("WhileStatement", [Field("test"), Field("body")], STMT),
    _kind("DoWhileStatement", [Field("body"), Field("test")], STMT),
    _kind("BreakStatement", [Field("label", optional=True)], STMT),
    _kind("ContinueStatement", [Field("label", optional=True)], STMT),
    _kind("ThrowStatement", [Field("argument")], STMT),
    _kind("TryStatement", [
        Field("block"),
        Field("handler", optional=True),
        Field("finalizer", optional=True),
    ], STMT),
    _kind("CatchClause", [Field("param", optional=True), Field("body")], ("Node",)),
)

KINDS: Mapping[str, KindDef] = MappingProxyType({k.name: k for k in JS_KINDS})


def kind_def(name: str, kinds: Mapping[str, KindDef] = KINDS) -> KindDef:
    try:
        return kinds[name]
    except KeyError:
        raise UnknownKind(name) from None

def is_kind(node: Any, kind: str, kinds: Mapping[str, KindDef] = KINDS) -> bool:
    """True if ``node`` is a Tree of ``kind`` or of a kind that lists it as a supertype."""
    if not isinstance(node, Tree):
        return False

    if node.data == kind:
        return True

    found = kinds.get(node.data)
    return found is not None and kind in found.supertypes

def node_kind_def(node: Tree, kinds: Mapping[str, KindDef] = KINDS) -> KindDef:
    found = kinds.get(node.data)
    if found is None or found.abstract:
        raise MalformedNode("unknown node kind", str(node.data))

    if len(node.children) != len(found.fields):
        raise MalformedNode(
            f"expected {len(found.fields)} fields, got {len(node.children)}",
            found.name,
        )

    return found

def get_field(node: Tree, name: str) -> Any:
    found = node_kind_def(node)
    return node.children[found.index_of(name)]

def iter_fields(node: Tree) -> List[Tuple[Field, Any]]:
    found = node_kind_def(node)
    return list(zip(found.fields, node.children))

def validate_node(node: Any, deep: bool = False) -> None:
    """Raise MalformedNode unless ``node`` matches its kind's field layout."""
    if not isinstance(node, Tree):
        raise MalformedNode(f"expected a node, got {type(node).__name__}")

    for f, value in iter_fields(node):
        _validate_field(node.data, f, value)

        if not deep:
            continue

        if f.shape == LIST:
            for item in value:
                if item is not None:
                    validate_node(item, deep=True)
        elif f.shape == NODE and value is not None:
            validate_node(value, deep=True)

def _validate_field(kind: str, f: Field, value: Any) -> None:
    if f.shape == LIST:
        if not isinstance(value, list):
            raise MalformedNode(f"field '{f.name}' must be a list", kind)
        return

    if f.shape == NODE:
        if value is None:
            if not f.optional:
                raise MalformedNode(f"missing required field '{f.name}'", kind)
            return
        if not isinstance(value, Tree):
            raise MalformedNode(f"field '{f.name}' must hold a node", kind)
        return

    if isinstance(value, (list, Tree)):
        raise MalformedNode(f"field '{f.name}' must hold a scalar", kind)

def check_vocabulary(kinds: Mapping[str, KindDef]) -> Dict[str, KindDef]:
    """Return a plain copy of ``kinds`` after checking every supertype is defined."""
    out: Dict[str, KindDef] = dict(kinds)

    for found in out.values():
        for sup in found.supertypes:
            if sup not in out:
                raise UnknownKind(sup)

    return out
