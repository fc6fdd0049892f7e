"""Interactive tree explorer, powered by prompt_toolkit."""

from __future__ import annotations

import itertools
import re
import sys
import traceback
from dataclasses import dataclass
from typing import List

from lark import Tree
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .errors import AstkitError
from .lexer import LexError, tokenize
from .parser import parse
from .paths import root_path
from .printer import print_node
from .scope import identifiers_in_same_scope
from .token_types import TT
from .tree import pretty_tree
from .utils import debug_py_trace_enabled, set_debug_py_trace

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/scopes": ("Toggle per-scope identifier listing", ""),
    "/tree": ("Toggle tree dump", ""),
}

_DEPTH_OPEN = {TT.LPAR, TT.LSQB, TT.LBRACE}
_DEPTH_CLOSE = {TT.RPAR, TT.RSQB, TT.RBRACE}


@dataclass
class ReplState:
    show_tree: bool = False
    show_scopes: bool = True


def _open_depth(text: str) -> int:
    """Bracket depth left open at the end of *text* (0 when it lexes badly)."""
    try:
        tokens = tokenize(text)
    except LexError:
        return 0

    depth = 0
    for tok in tokens:
        if tok.type in _DEPTH_OPEN:
            depth += 1
        elif tok.type in _DEPTH_CLOSE:
            depth = max(depth - 1, 0)
    return depth


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the primary prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


def _toggle(arg: str, current: bool) -> bool:
    if arg.lower() in ("on", "1", "true", "yes"):
        return True
    if arg.lower() in ("off", "0", "false", "no"):
        return False
    return not current


def _handle_slash(line: str, state: ReplState) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/py-traceback":
        set_debug_py_trace(_toggle(arg, debug_py_trace_enabled()))
        state_text = "on" if debug_py_trace_enabled() else "off"
        print(f"Python traceback: {state_text}")
        return True

    if cmd == "/tree":
        state.show_tree = _toggle(arg, state.show_tree)
        print(f"Tree dump: {'on' if state.show_tree else 'off'}")
        return True

    if cmd == "/scopes":
        state.show_scopes = _toggle(arg, state.show_scopes)
        print(f"Scope listing: {'on' if state.show_scopes else 'off'}")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def scope_report(tree: Tree) -> List[str]:
    """One line per scope: kind, line and the names that would collide there."""
    root = root_path(tree)
    lines: List[str] = []

    for path in itertools.chain([root], root.descendants()):
        if not path.establishes_scope():
            continue

        names = sorted(identifiers_in_same_scope(path))
        line = getattr(path.value.meta, "line", None)
        where = f" (line {line})" if line is not None else ""
        indent = "  " * path.scope.depth
        lines.append(f"{indent}{path.value.data}{where}: {', '.join(names) or '-'}")

    return lines


def describe(source: str, state: ReplState) -> str:
    """Parse *source* and render what the REPL shows for it."""
    tree = parse(source)
    sections = [print_node(tree)]

    if state.show_tree:
        sections.append(pretty_tree(tree))

    if state.show_scopes:
        sections.append("\n".join(scope_report(tree)))

    return "\n\n".join(s for s in sections if s)


def repl() -> None:
    """Interactive read-print loop with prompt_toolkit."""
    state = ReplState()
    history = InMemoryHistory()
    bindings = KeyBindings()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer
        text = buf.text

        # Keep reading while brackets are open; an empty line submits anyway.
        lines = text.split("\n")
        if lines[-1].strip() and _open_depth(text) > 0 and not text.startswith("/"):
            buf.insert_text("\n" + "    " * _open_depth(text))
            return

        buf.validate_and_handle()

    session: PromptSession[str] = PromptSession(
        history=history,
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=bindings,
        multiline=True,
        prompt_continuation="... ",
    )

    print("astkit repl (Ctrl-D to exit, / for commands)")

    while True:
        try:
            text = session.prompt(">>> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        if _handle_slash(text, state):
            continue

        try:
            output = describe(text, state)
        except AstkitError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            if debug_py_trace_enabled():
                print("\nPython traceback:", file=sys.stderr)
                print("".join(traceback.format_tb(exc.__traceback__)), file=sys.stderr, end="")
            continue

        print(output)


def main() -> None:
    repl()
