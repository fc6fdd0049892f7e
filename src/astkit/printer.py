"""Canonical source printer.

Output is stable rather than faithful: expressions go on one line with the
fewest parentheses precedence allows, statements go one per line indented
by ``tab_width`` spaces, and strings are re-quoted with single quotes.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from lark import Tree

from .errors import MalformedNode
from .kinds import get_field, is_kind
from .paths import resolve_node
from .tree import Comment, node_comments

# Expression precedence, higher binds tighter
SEQUENCE = 1
ASSIGN = 2
CONDITIONAL = 3
UNARY = 16
POSTFIX = 17
CALL = 18
PRIMARY = 19

BINARY_PRECEDENCE = {
    '??': 4,
    '||': 5,
    '&&': 6,
    '|': 7,
    '^': 8,
    '&': 9,
    '==': 10, '!=': 10, '===': 10, '!==': 10,
    '<': 11, '>': 11, '<=': 11, '>=': 11, 'instanceof': 11, 'in': 11,
    '<<': 12, '>>': 12, '>>>': 12,
    '+': 13, '-': 13,
    '*': 14, '/': 14, '%': 14,
    '**': 15,
}

_WORD_OPERATORS = frozenset({'typeof', 'void', 'delete'})

_STRING_ESCAPES = {
    '\\': '\\\\',
    "'": "\\'",
    '\n': '\\n',
    '\r': '\\r',
    '\t': '\\t',
    '\b': '\\b',
    '\f': '\\f',
    '\v': '\\v',
    '\0': '\\0',
}


@dataclass(frozen=True)
class PrintOptions:
    tab_width: int = 4
    comments: bool = True


def quote_string(value: str) -> str:
    out: List[str] = []
    for ch in value:
        if ch in _STRING_ESCAPES:
            out.append(_STRING_ESCAPES[ch])
        elif ord(ch) < 0x20:
            out.append(f"\\x{ord(ch):02x}")
        else:
            out.append(ch)
    return "'" + "".join(out) + "'"

def format_number(value: Any) -> str:
    if isinstance(value, float):
        if math.isinf(value):
            return 'Infinity' if value > 0 else '-Infinity'
        if math.isnan(value):
            return 'NaN'
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    return str(value)

def format_literal(value: Any) -> str:
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, str):
        return quote_string(value)
    if isinstance(value, (int, float)):
        return format_number(value)
    raise MalformedNode(f"unsupported literal value {value!r}", 'Literal')


def _has_call(node: Tree) -> bool:
    """True if a member chain bottoms out in a call (needs parens after `new`)."""
    while True:
        if is_kind(node, 'CallExpression'):
            return True
        if not is_kind(node, 'MemberExpression'):
            return False
        node = get_field(node, 'object')


class Printer:
    def __init__(self, options: Optional[PrintOptions] = None):
        self.options = options or PrintOptions()
        self.level = 0
        self.no_in = False  # Set while printing a for-loop init
        self._expr: Dict[str, Callable[[Tree], str]] = {
            'Identifier': lambda n: get_field(n, 'name'),
            'Literal': lambda n: format_literal(get_field(n, 'value')),
            'ThisExpression': lambda n: 'this',
            'ArrayExpression': lambda n: self.lifted(self.array, n),
            'ObjectExpression': lambda n: self.lifted(self.object, n),
            'FunctionExpression': self.function,
            'ArrowFunctionExpression': self.arrow,
            'UnaryExpression': self.unary,
            'UpdateExpression': self.update,
            'BinaryExpression': self.binary,
            'LogicalExpression': self.binary,
            'AssignmentExpression': self.assignment,
            'ConditionalExpression': self.conditional,
            'CallExpression': self.call,
            'NewExpression': self.new,
            'MemberExpression': self.member,
            'SequenceExpression': self.sequence,
        }

    # ---- entry ----

    def print(self, node: Any) -> str:
        if not isinstance(node, Tree):
            raise MalformedNode(f"cannot print {type(node).__name__}")

        if is_kind(node, 'Program'):
            return self.statements(get_field(node, 'body'), node)
        if is_kind(node, 'Statement'):
            return self.statement(node)
        if is_kind(node, 'Property'):
            return self.property(node)
        if is_kind(node, 'VariableDeclarator'):
            return self.declarator(node)
        if is_kind(node, 'CatchClause'):
            return self.catch_clause(node)

        return self.expr(node)

    # ---- layout ----

    @property
    def pad(self) -> str:
        return ' ' * (self.options.tab_width * self.level)

    def comment_lines(self, node: Tree, leading: bool) -> List[str]:
        if not self.options.comments:
            return []
        return [
            self.pad + c.render()
            for c in node_comments(node)
            if c.leading == leading
        ]

    def statements(self, body: List[Tree], owner: Tree) -> str:
        lines = [self.statement(stmt) for stmt in body]
        lines.extend(self.comment_lines(owner, leading=False))
        return '\n'.join(lines)

    def lifted(self, render: Callable[..., str], *args: Any) -> str:
        """Render a nested part, where a bare `in` is allowed again."""
        saved, self.no_in = self.no_in, False
        try:
            return render(*args)
        finally:
            self.no_in = saved

    def block(self, node: Tree) -> str:
        return self.lifted(self.block_text, node)

    def block_text(self, node: Tree) -> str:
        body = get_field(node, 'body')

        self.level += 1
        try:
            if body:
                inner = [self.statement(stmt) for stmt in body]
            else:
                # An empty block keeps its trailing comments inside the braces.
                inner = self.comment_lines(node, leading=False)
        finally:
            self.level -= 1

        if not inner:
            return '{}'
        return '{\n' + '\n'.join(inner) + '\n' + self.pad + '}'

    def body(self, node: Tree) -> str:
        """Statement body of if/for/while: inline block or indented line."""
        if is_kind(node, 'BlockStatement'):
            return ' ' + self.block(node)

        self.level += 1
        try:
            return '\n' + self.statement(node)
        finally:
            self.level -= 1

    # ---- statements ----

    def statement(self, node: Tree) -> str:
        text = self.pad + self.statement_text(node)

        lines = self.comment_lines(node, leading=True)
        lines.append(text)
        if not is_kind(node, 'BlockStatement') or get_field(node, 'body'):
            lines.extend(self.comment_lines(node, leading=False))
        return '\n'.join(lines)

    def statement_text(self, node: Tree) -> str:
        kind = node.data

        if kind == 'ExpressionStatement':
            text = self.expr(get_field(node, 'expression'))
            if text.startswith(('{', 'function')):
                text = f'({text})'
            return text + ';'
        if kind == 'BlockStatement':
            return self.block(node)
        if kind == 'EmptyStatement':
            return ';'
        if kind == 'VariableDeclaration':
            return self.variable_declaration(node) + ';'
        if kind == 'FunctionDeclaration':
            return self.function(node)
        if kind == 'ReturnStatement':
            argument = get_field(node, 'argument')
            return 'return;' if argument is None else f'return {self.expr(argument)};'
        if kind in ('BreakStatement', 'ContinueStatement'):
            word = 'break' if kind == 'BreakStatement' else 'continue'
            label = get_field(node, 'label')
            return f'{word};' if label is None else f'{word} {self.expr(label)};'
        if kind == 'ThrowStatement':
            return f"throw {self.expr(get_field(node, 'argument'))};"
        if kind == 'IfStatement':
            return self.if_statement(node)
        if kind == 'ForStatement':
            return self.for_statement(node)
        if kind in ('ForInStatement', 'ForOfStatement'):
            word = 'in' if kind == 'ForInStatement' else 'of'
            left = self.for_left(get_field(node, 'left'))
            right = self.expr(get_field(node, 'right'), ASSIGN)
            return f'for ({left} {word} {right})' + self.body(get_field(node, 'body'))
        if kind == 'WhileStatement':
            test = self.expr(get_field(node, 'test'))
            return f'while ({test})' + self.body(get_field(node, 'body'))
        if kind == 'DoWhileStatement':
            body = self.body(get_field(node, 'body'))
            test = self.expr(get_field(node, 'test'))
            joiner = ' ' if body.startswith(' {') else '\n' + self.pad
            return f'do{body}{joiner}while ({test});'
        if kind == 'TryStatement':
            return self.try_statement(node)

        raise MalformedNode("not a printable statement", kind)

    def variable_declaration(self, node: Tree) -> str:
        decls = ', '.join(self.declarator(d) for d in get_field(node, 'declarations'))
        return f"{get_field(node, 'kind')} {decls}"

    def declarator(self, node: Tree) -> str:
        name = self.expr(get_field(node, 'id'))
        init = get_field(node, 'init')
        if init is None:
            return name
        return f'{name} = {self.expr(init, ASSIGN)}'

    def for_left(self, node: Tree) -> str:
        if is_kind(node, 'VariableDeclaration'):
            return self.variable_declaration(node)
        return self.expr(node, CALL)

    def if_statement(self, node: Tree) -> str:
        test = self.expr(get_field(node, 'test'))
        consequent = get_field(node, 'consequent')
        alternate = get_field(node, 'alternate')

        text = f'if ({test})' + self.body(consequent)
        if alternate is None:
            return text

        joiner = ' ' if is_kind(consequent, 'BlockStatement') else '\n' + self.pad
        if is_kind(alternate, 'IfStatement'):
            return text + joiner + 'else ' + self.if_statement(alternate)
        return text + joiner + 'else' + self.body(alternate)

    def for_statement(self, node: Tree) -> str:
        init = get_field(node, 'init')
        test = get_field(node, 'test')
        update = get_field(node, 'update')

        saved, self.no_in = self.no_in, True
        try:
            if init is None:
                head_init = ''
            elif is_kind(init, 'VariableDeclaration'):
                head_init = self.variable_declaration(init)
            else:
                head_init = self.expr(init)
        finally:
            self.no_in = saved

        head_test = '' if test is None else ' ' + self.expr(test)
        head_update = '' if update is None else ' ' + self.expr(update)
        head = f'for ({head_init};{head_test};{head_update})'
        return head + self.body(get_field(node, 'body'))

    def try_statement(self, node: Tree) -> str:
        text = 'try ' + self.block(get_field(node, 'block'))

        handler = get_field(node, 'handler')
        if handler is not None:
            text += ' ' + self.catch_clause(handler)

        finalizer = get_field(node, 'finalizer')
        if finalizer is not None:
            text += ' finally ' + self.block(finalizer)

        return text

    def catch_clause(self, node: Tree) -> str:
        param = get_field(node, 'param')
        head = 'catch' if param is None else f'catch ({self.expr(param)})'
        return f"{head} {self.block(get_field(node, 'body'))}"

    # ---- expressions ----

    def expr(self, node: Any, min_prec: int = SEQUENCE) -> str:
        if not isinstance(node, Tree):
            raise MalformedNode(f"expected an expression node, got {type(node).__name__}")

        render = self._expr.get(node.data)
        if render is None:
            raise MalformedNode("not a printable expression", str(node.data))

        if self.precedence(node) < min_prec:
            text = '(' + self.lifted(render, node) + ')'
        else:
            text = render(node)

        # Comments inside an expression are always printed in block form.
        inline = node_comments(node) if self.options.comments else []
        if inline:
            text = ' '.join(Comment(c.text, block=True).render() for c in inline) + ' ' + text

        return text

    def precedence(self, node: Tree) -> int:
        kind = node.data
        if kind == 'SequenceExpression':
            return SEQUENCE
        if kind in ('AssignmentExpression', 'ArrowFunctionExpression'):
            return ASSIGN
        if kind == 'ConditionalExpression':
            return CONDITIONAL
        if kind in ('BinaryExpression', 'LogicalExpression'):
            return BINARY_PRECEDENCE[get_field(node, 'operator')]
        if kind == 'UnaryExpression':
            return UNARY
        if kind == 'UpdateExpression':
            return UNARY if get_field(node, 'prefix') else POSTFIX
        if kind in ('CallExpression', 'NewExpression', 'MemberExpression'):
            return CALL
        return PRIMARY

    def array(self, node: Tree) -> str:
        elements = get_field(node, 'elements')
        parts = ['' if el is None else self.expr(el, ASSIGN) for el in elements]
        text = ', '.join(parts)
        if elements and elements[-1] is None:
            text += ','
        return f'[{text}]'

    def object(self, node: Tree) -> str:
        props = get_field(node, 'properties')
        if not props:
            return '{}'
        return '{ ' + ', '.join(self.property(p) for p in props) + ' }'

    def property(self, node: Tree) -> str:
        key = get_field(node, 'key')
        value = get_field(node, 'value')

        if get_field(node, 'shorthand'):
            return self.expr(value, ASSIGN)

        key_text = self.expr(key, ASSIGN)
        if get_field(node, 'computed'):
            key_text = f'[{key_text}]'

        return f'{key_text}: {self.expr(value, ASSIGN)}'

    def params(self, node: Tree) -> str:
        return ', '.join(self.expr(p) for p in get_field(node, 'params'))

    def function(self, node: Tree) -> str:
        ident = get_field(node, 'id')
        name = '' if ident is None else ' ' + self.expr(ident)
        return f'function{name}({self.params(node)}) ' + self.block(get_field(node, 'body'))

    def arrow(self, node: Tree) -> str:
        body = get_field(node, 'body')

        if is_kind(body, 'BlockStatement'):
            body_text = self.block(body)
        else:
            body_text = self.lifted(self.expr, body, ASSIGN)
            if body_text.startswith('{'):
                body_text = f'({body_text})'

        return f'({self.params(node)}) => {body_text}'

    def unary(self, node: Tree) -> str:
        op = get_field(node, 'operator')
        argument = self.expr(get_field(node, 'argument'), UNARY)

        if op in _WORD_OPERATORS:
            return f'{op} {argument}'
        if op in ('+', '-') and argument.startswith(op):
            return f'{op} {argument}'
        return op + argument

    def update(self, node: Tree) -> str:
        op = get_field(node, 'operator')
        argument = get_field(node, 'argument')
        if get_field(node, 'prefix'):
            return op + self.expr(argument, POSTFIX)
        return self.expr(argument, CALL) + op

    def binary(self, node: Tree) -> str:
        op = get_field(node, 'operator')
        if op == 'in' and self.no_in:
            return '(' + self.lifted(self.binary, node) + ')'

        prec = BINARY_PRECEDENCE[op]
        left = get_field(node, 'left')
        right = get_field(node, 'right')

        if op == '**':
            left_min, right_min = prec + 1, prec
        else:
            left_min, right_min = prec, prec + 1

        left_text = self.expr(left, left_min)
        right_text = self.expr(right, right_min)

        # ?? cannot mix with && or || without parentheses.
        if self.mixes_nullish(op, left):
            left_text = f'({left_text})'
        if self.mixes_nullish(op, right):
            right_text = f'({right_text})'

        return f'{left_text} {op} {right_text}'

    def mixes_nullish(self, op: str, child: Tree) -> bool:
        if not is_kind(child, 'LogicalExpression') or op not in ('??', '||', '&&'):
            return False
        inner = get_field(child, 'operator')
        if (op == '??') == (inner == '??'):
            return False
        return self.precedence(child) >= BINARY_PRECEDENCE[op]

    def assignment(self, node: Tree) -> str:
        left = self.expr(get_field(node, 'left'), CALL)
        right = self.expr(get_field(node, 'right'), ASSIGN)
        return f"{left} {get_field(node, 'operator')} {right}"

    def conditional(self, node: Tree) -> str:
        test = self.expr(get_field(node, 'test'), CONDITIONAL + 1)
        consequent = self.lifted(self.expr, get_field(node, 'consequent'), ASSIGN)
        alternate = self.expr(get_field(node, 'alternate'), ASSIGN)
        return f'{test} ? {consequent} : {alternate}'

    def arguments(self, node: Tree) -> str:
        args = get_field(node, 'arguments')
        return self.lifted(lambda: ', '.join(self.expr(a, ASSIGN) for a in args))

    def call(self, node: Tree) -> str:
        callee = self.expr(get_field(node, 'callee'), CALL)
        return f'{callee}({self.arguments(node)})'

    def new(self, node: Tree) -> str:
        callee = get_field(node, 'callee')
        callee_text = self.expr(callee, CALL)
        if _has_call(callee):
            callee_text = f'({callee_text})'
        return f'new {callee_text}({self.arguments(node)})'

    def member(self, node: Tree) -> str:
        obj = get_field(node, 'object')
        obj_text = self.expr(obj, CALL)

        # `1.toString` would lex as a number
        if is_kind(obj, 'Literal'):
            value = get_field(obj, 'value')
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                obj_text = f'({obj_text})'

        prop = get_field(node, 'property')
        if get_field(node, 'computed'):
            return f'{obj_text}[{self.lifted(self.expr, prop)}]'
        return f'{obj_text}.{self.expr(prop)}'

    def sequence(self, node: Tree) -> str:
        return ', '.join(self.expr(e, ASSIGN) for e in get_field(node, 'expressions'))


def print_node(node_or_path: Any, options: Optional[PrintOptions] = None) -> str:
    """Print a node or path as source text."""
    return Printer(options).print(resolve_node(node_or_path))
