from __future__ import annotations

from types import MappingProxyType

import pytest
from lark import Tree

from astkit.kinds import JS_KINDS, KINDS, LIST, VALUE, Field, KindDef, validate_node
from astkit.registry import KindRegistry, assertion_for, build_registry, default_registry, predicate_for
from tests.support.harness import KindMismatch, MalformedNode, UnknownKind, expr, find_one


def test_default_registry_is_built_once() -> None:
    assert default_registry() is default_registry()
    assert isinstance(default_registry(), KindRegistry)


def test_tables_cover_every_kind() -> None:
    registry = default_registry()

    assert set(registry.check) == set(KINDS)
    assert set(registry.assertion) == set(KINDS)
    assert len(registry.check) == len(JS_KINDS)


@pytest.mark.parametrize(
    "kind, source, expected",
    [
        pytest.param("Identifier", "x", True, id="identifier"),
        pytest.param("Identifier", "'x'", False, id="literal-is-not-identifier"),
        pytest.param("CallExpression", "f()", True, id="call"),
        pytest.param("Expression", "a + b", True, id="abstract-expression"),
        pytest.param("Function", "() => 1", True, id="abstract-function-arrow"),
        pytest.param("Function", "function () {}", True, id="abstract-function-expression"),
        pytest.param("Statement", "a", False, id="expression-is-not-statement"),
        pytest.param("Pattern", "a.b", True, id="member-is-pattern"),
        pytest.param("Node", "this", True, id="everything-is-node"),
    ],
)
def test_predicates(kind: str, source: str, expected: bool) -> None:
    node = expr(source)
    assert predicate_for(kind)(node) is expected
    assert default_registry().check[kind](node) is expected


def test_predicates_accept_paths() -> None:
    path = find_one("var a = 1;", "VariableDeclarator")
    assert default_registry().check.VariableDeclarator(path)
    assert default_registry().check.Declaration(path.parent)


def test_predicates_reject_non_nodes() -> None:
    is_identifier = predicate_for("Identifier")
    assert not is_identifier("x")
    assert not is_identifier(None)


def test_assertions() -> None:
    assert_call = assertion_for("CallExpression")
    assert assert_call(expr("f(1)")) is None

    with pytest.raises(KindMismatch) as excinfo:
        default_registry().assertion.CallExpression(expr("a.b"))

    assert excinfo.value.expected == "CallExpression"
    assert excinfo.value.actual == "MemberExpression"
    assert isinstance(excinfo.value, TypeError)


def test_assertion_on_non_node() -> None:
    with pytest.raises(KindMismatch, match="non-node value"):
        assertion_for("Identifier")(42)


def test_unknown_kind_lookup() -> None:
    with pytest.raises(UnknownKind) as excinfo:
        predicate_for("Banana")
    assert excinfo.value.kind == "Banana"
    assert isinstance(excinfo.value, KeyError)

    with pytest.raises(UnknownKind):
        default_registry().check.Banana

    with pytest.raises(UnknownKind):
        assertion_for("ClassDeclaration")


def test_tables_are_read_only() -> None:
    registry = default_registry()

    with pytest.raises(AttributeError):
        registry.check.Identifier = lambda value: True
    with pytest.raises(AttributeError):
        registry.check = registry.assertion
    assert isinstance(registry.kinds, MappingProxyType)


def test_build_registry_over_custom_vocabulary() -> None:
    kinds = {
        "Node": KindDef("Node", abstract=True),
        "Leaf": KindDef("Leaf", (Field("value", VALUE),), ("Node",)),
        "Pair": KindDef("Pair", (Field("items", LIST),), ("Node",)),
    }
    registry = build_registry(kinds)

    assert set(registry.check) == {"Node", "Leaf", "Pair"}
    assert registry.check.Leaf(Tree("Leaf", [1]))
    assert registry.check.Node(Tree("Pair", [[]]))
    assert not registry.check.Pair(Tree("Leaf", [1]))
    assert registry is not default_registry()


def test_build_registry_rejects_undefined_supertype() -> None:
    kinds = {"Leaf": KindDef("Leaf", (), ("Missing",))}
    with pytest.raises(UnknownKind) as excinfo:
        build_registry(kinds)
    assert excinfo.value.kind == "Missing"


@pytest.mark.parametrize(
    "node, message",
    [
        pytest.param(Tree("Bogus", []), "unknown node kind", id="unknown-kind"),
        pytest.param(Tree("Identifier", []), "expected 1 fields", id="arity"),
        pytest.param(Tree("ExpressionStatement", [None]), "missing required field", id="required"),
        pytest.param(Tree("Program", [None]), "must be a list", id="list-shape"),
        pytest.param(Tree("ReturnStatement", ["x"]), "must hold a node", id="node-shape"),
        pytest.param(Tree("Identifier", [["x"]]), "must hold a scalar", id="value-shape"),
        pytest.param("Identifier", "expected a node", id="not-a-tree"),
    ],
)
def test_validate_node(node: object, message: str) -> None:
    with pytest.raises(MalformedNode, match=message):
        validate_node(node)


def test_validate_node_deep() -> None:
    bad = Tree("ExpressionStatement", [Tree("Identifier", [])])
    validate_node(bad)

    with pytest.raises(MalformedNode):
        validate_node(bad, deep=True)
