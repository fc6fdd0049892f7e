from __future__ import annotations

from textwrap import dedent

import pytest

from astkit.repl import ReplState, _handle_slash, _normalize, _open_depth, describe, scope_report
from astkit.utils import DEBUG_PY_TRACE_ENV, debug_py_trace_enabled
from tests.support.harness import ParseError, parse


def test_describe_prints_canonical_source() -> None:
    assert describe("x   =1", ReplState(show_scopes=False)) == "x = 1;"


def test_describe_with_scopes() -> None:
    out = describe("let a; function f(b) { c; }", ReplState())
    assert out == dedent(
        """\
        let a;
        function f(b) {
            c;
        }

        Program (line 1): a, f
          FunctionDeclaration (line 1): b, c"""
    )


def test_describe_with_tree() -> None:
    out = describe("a;", ReplState(show_tree=True, show_scopes=False))
    assert out.splitlines()[0] == "a;"
    assert "    0: ExpressionStatement" in out.splitlines()


def test_describe_propagates_parse_errors() -> None:
    with pytest.raises(ParseError):
        describe("a +", ReplState())


def test_scope_report_nested_blocks() -> None:
    src = dedent(
        """\
        let x;
        {
            let y;
        }
    """
    )
    assert scope_report(parse(src)) == [
        "Program (line 1): x",
        "  BlockStatement (line 2): y",
    ]


def test_scope_report_empty_scope() -> None:
    assert scope_report(parse("(() => 1);")) == [
        "Program (line 1): -",
        "  ArrowFunctionExpression (line 1): -",
    ]


@pytest.mark.parametrize(
    "command, attr, expected",
    [
        pytest.param("/tree", "show_tree", True, id="tree-toggle"),
        pytest.param("/tree off", "show_tree", False, id="tree-off"),
        pytest.param("/scopes", "show_scopes", False, id="scopes-toggle"),
        pytest.param("/scopes on", "show_scopes", True, id="scopes-on"),
    ],
)
def test_toggle_commands(command: str, attr: str, expected: bool, capsys: pytest.CaptureFixture[str]) -> None:
    state = ReplState()
    assert _handle_slash(command, state)
    assert getattr(state, attr) is expected
    assert ("on" if expected else "off") in capsys.readouterr().out


def test_py_traceback_command(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.delenv(DEBUG_PY_TRACE_ENV, raising=False)
    state = ReplState()

    assert _handle_slash("/py-traceback on", state)
    assert debug_py_trace_enabled()

    assert _handle_slash("/py-traceback", state)
    assert not debug_py_trace_enabled()
    assert capsys.readouterr().out.splitlines() == ["Python traceback: on", "Python traceback: off"]


def test_unknown_command(capsys: pytest.CaptureFixture[str]) -> None:
    assert _handle_slash("/nope", ReplState())
    assert "Unknown command: /nope" in capsys.readouterr().err


def test_source_is_not_a_command() -> None:
    assert not _handle_slash("x = 1", ReplState())


@pytest.mark.parametrize(
    "text, depth",
    [
        pytest.param("f(", 1, id="open-call"),
        pytest.param("x = { a: [", 2, id="nested"),
        pytest.param("f()", 0, id="balanced"),
        pytest.param("'open", 0, id="lex-error"),
        pytest.param("}", 0, id="extra-close"),
    ],
)
def test_open_depth(text: str, depth: int) -> None:
    assert _open_depth(text) == depth


def test_normalize_strips_invisible_characters() -> None:
    assert _normalize("a\u200b = \ufeff1\r") == "a = 1"


def test_debug_env_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(DEBUG_PY_TRACE_ENV, "yes")
    assert debug_py_trace_enabled()
    monkeypatch.setenv(DEBUG_PY_TRACE_ENV, "0")
    assert not debug_py_trace_enabled()
