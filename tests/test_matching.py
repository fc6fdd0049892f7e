from __future__ import annotations

import re

import pytest

from astkit.collection import query
from astkit.matching import call_expression_matching, callee_text
from tests.support.harness import KindMismatch, expr, find_one

CALLEE_CASES = [
    pytest.param("assert.equal(1, 2)", r"^assert\.equal$", True, id="exact-match"),
    pytest.param("assert.equal(1, 2)", r"^assert\.notEqual$", False, id="different-method"),
    pytest.param("assert.equal(1, 2)", r"equal", True, id="search-not-fullmatch"),
    pytest.param("assert.notEqual(1, 2)", r"^assert\.equal", False, id="anchored-prefix"),
    pytest.param("assert . equal (1, 2)", r"^assert\.equal$", True, id="canonical-spacing"),
    pytest.param("assert/* x */.equal(1)", r"^assert\.equal$", True, id="comments-stripped"),
    pytest.param("a['b'](c)", r"^a\['b'\]$", True, id="computed-single-quoted"),
    pytest.param('a["b"](c)', r"^a\['b'\]$", True, id="computed-requoted"),
    pytest.param("f(x)(y)", r"^f\(x\)$", True, id="callee-is-call"),
    pytest.param("new Foo.Bar()", r"^Foo\.Bar$", True, id="new-expression"),
]


@pytest.mark.parametrize("source, pattern, expected", CALLEE_CASES)
def test_call_expression_matching(source: str, pattern: str, expected: bool) -> None:
    node = expr(source)
    assert bool(call_expression_matching(pattern)(node)) is expected


def test_compiled_patterns_and_match_objects() -> None:
    matcher = call_expression_matching(re.compile(r"^console\.(log|warn)$"))
    result = matcher(expr("console.warn('x')"))

    assert result is not None
    assert result.group(1) == "warn"


def test_matcher_filters_paths() -> None:
    src = "assert.equal(a, b); assert.notEqual(a, b); assert.equal(c, d);"
    found = query(src).find("CallExpression").filter(call_expression_matching(r"^assert\.equal$"))

    assert found.size() == 2


def test_callee_text() -> None:
    assert callee_text(find_one("a.b.c(1);", "CallExpression")) == "a.b.c"


@pytest.mark.parametrize(
    "source",
    [
        pytest.param("a.b", id="member"),
        pytest.param("x", id="identifier"),
        pytest.param("1 + f()", id="binary"),
    ],
)
def test_non_call_raises_kind_mismatch(source: str) -> None:
    with pytest.raises(KindMismatch) as excinfo:
        call_expression_matching("x")(expr(source))

    assert excinfo.value.expected == "CallExpression"
    assert excinfo.value.actual == expr(source).data
