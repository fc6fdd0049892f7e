from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import pytest

from astkit.lexer import LexError, tokenize
from astkit.token_types import TT
from astkit.tree import Comment


@dataclass(frozen=True)
class Case:
    """Unified lexer case payload."""

    name: str
    source: str
    expected: Optional[Tuple[Tuple[TT, object], ...]] = None
    expected_types: Optional[Tuple[TT, ...]] = None
    msg: Optional[str] = None
    err_line: Optional[int] = None
    err_col: Optional[int] = None


BASIC_TOKEN_CASES: List[Case] = [
    Case("number-int", "123", expected=((TT.NUMBER, 123),)),
    Case("number-float", "3.14", expected=((TT.NUMBER, 3.14),)),
    Case("number-leading-dot", ".5", expected=((TT.NUMBER, 0.5),)),
    Case("number-exponent", "1e3", expected=((TT.NUMBER, 1000.0),)),
    Case("number-hex", "0x1F", expected=((TT.NUMBER, 31),)),
    Case("ident-single", "x", expected=((TT.IDENT, "x"),)),
    Case("ident-dollar", "$el", expected=((TT.IDENT, "$el"),)),
    Case("ident-underscore", "_private1", expected=((TT.IDENT, "_private1"),)),
    Case("string-double", '"hello"', expected=((TT.STRING, "hello"),)),
    Case("string-single", "'world'", expected=((TT.STRING, "world"),)),
    Case("string-escapes", r"'a\nb\t\'c'", expected=((TT.STRING, "a\nb\t'c"),)),
    Case("string-hex-escape", r"'\x41'", expected=((TT.STRING, "A"),)),
    Case("string-unicode-escape", r"'\u00e9'", expected=((TT.STRING, "\u00e9"),)),
    Case("string-unicode-braces", r"'\u{1F600}'", expected=((TT.STRING, "\U0001F600"),)),
    Case("keyword-typeof", "typeof", expected=((TT.TYPEOF, "typeof"),)),
    Case("bool-true", "true", expected=((TT.TRUE, "true"),)),
    Case("null-literal", "null", expected=((TT.NULL, "null"),)),
    Case("contextual-of", "of", expected=((TT.IDENT, "of"),)),
]

OPERATOR_CASES: List[Case] = [
    Case("plus", "+", expected_types=(TT.PLUS,)),
    Case("pow", "**", expected_types=(TT.POW,)),
    Case("pow-assign", "**=", expected_types=(TT.POWEQ,)),
    Case("strict-eq", "===", expected_types=(TT.SEQ,)),
    Case("strict-neq", "!==", expected_types=(TT.SNEQ,)),
    Case("urshift", ">>>", expected_types=(TT.URSHIFT,)),
    Case("urshift-assign", ">>>=", expected_types=(TT.URSHIFTEQ,)),
    Case("nullish", "??", expected_types=(TT.NULLISH,)),
    Case("arrow", "a=>b", expected_types=(TT.IDENT, TT.ARROW, TT.IDENT)),
    Case("incr-vs-plus", "a+++b", expected_types=(TT.IDENT, TT.INCR, TT.PLUS, TT.IDENT)),
    Case("spaced-minus", "- -x", expected_types=(TT.MINUS, TT.MINUS, TT.IDENT)),
    Case(
        "punctuation",
        "({[;,.:?]})",
        expected_types=(
            TT.LPAR, TT.LBRACE, TT.LSQB, TT.SEMI, TT.COMMA, TT.DOT,
            TT.COLON, TT.QMARK, TT.RSQB, TT.RBRACE, TT.RPAR,
        ),
    ),
]

ERROR_CASES: List[Case] = [
    Case("unterminated-string", "'abc", msg="Unterminated string", err_line=1, err_col=1),
    Case("string-newline", "'ab\ncd'", msg="Unterminated string", err_line=1, err_col=1),
    Case("unterminated-comment", "/* x", msg="Unterminated comment", err_line=1),
    Case("unexpected-char", "x\n  @", msg="Unexpected character '@'", err_line=2, err_col=3),
    Case("ident-after-number", "1abc", msg="Identifier directly after number", err_line=1),
    Case("bad-hex", "0x", msg="Invalid hex literal", err_line=1, err_col=1),
    Case("bad-exponent", "1e+", msg="Invalid number", err_line=1, err_col=1),
    Case("bad-escape", r"'\xZZ'", msg="Invalid escape", err_line=1),
]


def _types(source: str) -> Tuple[TT, ...]:
    return tuple(tok.type for tok in tokenize(source)[:-1])


@pytest.mark.parametrize("case", [pytest.param(c, id=c.name) for c in BASIC_TOKEN_CASES])
def test_basic_tokens(case: Case) -> None:
    tokens = tokenize(case.source)
    assert tokens[-1].type == TT.EOF
    assert tuple((tok.type, tok.value) for tok in tokens[:-1]) == case.expected


@pytest.mark.parametrize("case", [pytest.param(c, id=c.name) for c in OPERATOR_CASES])
def test_operators(case: Case) -> None:
    assert _types(case.source) == case.expected_types


@pytest.mark.parametrize("case", [pytest.param(c, id=c.name) for c in ERROR_CASES])
def test_lex_errors(case: Case) -> None:
    with pytest.raises(LexError) as excinfo:
        tokenize(case.source)

    err = excinfo.value
    assert case.msg is not None and case.msg in err.message
    if case.err_line is not None:
        assert err.line == case.err_line
    if case.err_col is not None:
        assert err.column == case.err_col


def test_token_positions() -> None:
    tokens = tokenize("a + bb\n  c")
    bb, c = tokens[2], tokens[3]

    assert (bb.line, bb.column, bb.start_pos, bb.end_pos, bb.raw) == (1, 5, 4, 6, "bb")
    assert (c.line, c.column) == (2, 3)


def test_newline_before_is_recorded() -> None:
    tokens = tokenize("a\nb c")
    assert [tok.newline_before for tok in tokens[:3]] == [False, True, False]


def test_block_comment_spanning_lines_counts_as_newline() -> None:
    tokens = tokenize("a /*\n*/ b")
    assert tokens[1].newline_before
    assert tokens[1].line == 2


def test_comments_ride_on_next_token() -> None:
    tokens = tokenize("// one\n/* two */ x // three")

    assert tokens[0].comments == [Comment(" one"), Comment(" two ", block=True)]
    assert tokens[-1].type == TT.EOF
    assert tokens[-1].comments == [Comment(" three")]


def test_crlf_line_endings() -> None:
    tokens = tokenize("a\r\nb")
    assert tokens[1].line == 2
    assert tokens[1].newline_before


def test_raw_keeps_source_spelling() -> None:
    tok = tokenize("0x10")[0]
    assert tok.value == 16
    assert tok.raw == "0x10"
