from __future__ import annotations

import pytest

from astkit.helpers import append_comment, negate, pretty_print, summarise
from astkit.tree import Comment, node_comments, pretty_tree
from tests.support.harness import find_one, parse


def test_negate() -> None:
    is_even = lambda n: n % 2 == 0
    is_odd = negate(is_even)

    assert is_odd(3) is True
    assert is_odd(4) is False
    assert [n for n in range(5) if is_odd(n)] == [1, 3]


def test_negate_passes_arguments_through() -> None:
    def between(value: int, low: int = 0, high: int = 10) -> bool:
        return low <= value <= high

    outside = negate(between)
    assert outside(11)
    assert not outside(5, high=5)
    assert outside.__name__ == "not_between"


def test_negate_coerces_truthiness() -> None:
    assert negate(lambda: None)() is True
    assert negate(lambda: "x")() is False


def test_append_comment_to_statement() -> None:
    tree = parse("foo();")
    stmt = tree.children[0][0]

    append_comment(stmt, " added")
    append_comment(stmt, Comment(" note ", block=True))

    assert node_comments(stmt) == [Comment(" added"), Comment(" note ", block=True)]
    assert summarise(tree) == "// added\n/* note */\nfoo();"


def test_append_comment_keeps_existing() -> None:
    tree = parse("// first\nfoo();")
    path = find_one(tree, "ExpressionStatement")

    append_comment(path, "second")

    assert [c.text for c in node_comments(path.value)] == [" first", "second"]


def test_append_comment_to_expression_prints_inline() -> None:
    tree = parse("x = y;")
    append_comment(find_one(tree, "Identifier", 1), "why")
    assert summarise(tree) == "x = /*why*/ y;"


def test_summarise_accepts_paths() -> None:
    src = "function f() { return a   +b; }"
    assert summarise(find_one(src, "ReturnStatement")) == "return a + b;"


def test_pretty_print_writes_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    pretty_print(parse("a.b( 1 )"))
    assert capsys.readouterr().out == "a.b(1);\n"


def test_pretty_tree_names_fields() -> None:
    dump = pretty_tree(parse("x = 1;"))
    assert dump.splitlines() == [
        "Program",
        "  body: [1]",
        "    0: ExpressionStatement",
        "      expression: AssignmentExpression",
        "        operator: '='",
        "        left: Identifier",
        "          name: 'x'",
        "        right: Literal",
        "          value: 1",
    ]
