"""
Recursive Descent Parser for the JavaScript subset

Produces lark ``Tree`` nodes whose ``data`` is the ESTree kind name and whose
children are the kind's fields in declaration order (see ``kinds``).

Structure:
- Lexer: Token stream from source
- Parser: Recursive descent with precedence climbing for binary operators
- AST: lark Tree per node, positions and comments on ``tree.meta``
"""

from typing import Any, List, Optional, Tuple

from lark import Tree

from .errors import AstkitError
from .lexer import Lexer, tokenize
from .token_types import TT, Tok
from .tree import copy_position

# ============================================================================
# Parser
# ============================================================================

class ParseError(AstkitError):
    """Parse error with position info"""
    def __init__(self, message: str, token: Optional[Tok] = None):
        self.message = message
        self.token = token
        super().__init__(
            f"{message} at line {token.line}, col {token.column}" if token else message
        )


KEYWORD_TYPES = frozenset(Lexer.KEYWORDS.values())

# Binary operators: token type -> (precedence, node kind)
BINARY_OPS = {
    TT.NULLISH: (1, 'LogicalExpression'),
    TT.OR: (2, 'LogicalExpression'),
    TT.AND: (3, 'LogicalExpression'),
    TT.PIPE: (4, 'BinaryExpression'),
    TT.CARET: (5, 'BinaryExpression'),
    TT.AMP: (6, 'BinaryExpression'),
    TT.EQ: (7, 'BinaryExpression'),
    TT.NEQ: (7, 'BinaryExpression'),
    TT.SEQ: (7, 'BinaryExpression'),
    TT.SNEQ: (7, 'BinaryExpression'),
    TT.LT: (8, 'BinaryExpression'),
    TT.GT: (8, 'BinaryExpression'),
    TT.LTE: (8, 'BinaryExpression'),
    TT.GTE: (8, 'BinaryExpression'),
    TT.INSTANCEOF: (8, 'BinaryExpression'),
    TT.IN: (8, 'BinaryExpression'),
    TT.LSHIFT: (9, 'BinaryExpression'),
    TT.RSHIFT: (9, 'BinaryExpression'),
    TT.URSHIFT: (9, 'BinaryExpression'),
    TT.PLUS: (10, 'BinaryExpression'),
    TT.MINUS: (10, 'BinaryExpression'),
    TT.STAR: (11, 'BinaryExpression'),
    TT.SLASH: (11, 'BinaryExpression'),
    TT.MOD: (11, 'BinaryExpression'),
    TT.POW: (12, 'BinaryExpression'),
}

ASSIGN_OPS = frozenset({
    TT.ASSIGN, TT.PLUSEQ, TT.MINUSEQ, TT.STAREQ, TT.SLASHEQ, TT.MODEQ,
    TT.POWEQ, TT.LSHIFTEQ, TT.RSHIFTEQ, TT.URSHIFTEQ, TT.AMPEQ, TT.PIPEEQ,
    TT.CARETEQ,
})

UNARY_OPS = frozenset({
    TT.NEG, TT.TILDE, TT.PLUS, TT.MINUS, TT.TYPEOF, TT.VOID, TT.DELETE,
})

DECLARATION_KINDS = {TT.VAR: 'var', TT.LET: 'let', TT.CONST: 'const'}


class Parser:
    """
    Recursive descent parser for the JavaScript subset.

    Expression precedence (lowest to highest):
    1. sequence (,)
    2. assignment (=, +=, ...) and arrow functions
    3. conditional (? :)
    4. binary operators, see BINARY_OPS
    5. unary (!, ~, +, -, typeof, void, delete, prefix ++/--)
    6. postfix (++, --)
    7. call/member (.name, [expr], (args), new)
    8. primary (literals, identifiers, parens, arrays, objects, functions)
    """

    def __init__(self, tokens: List[Tok]):
        self.tokens = tokens
        self.pos = 0
        self.current = tokens[0] if tokens else Tok(TT.EOF, None)
        self.prev = self.current
        self.no_in = False  # Set while parsing a for-loop head

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def peek(self, offset: int = 0) -> Tok:
        """Look ahead at token"""
        idx = self.pos + offset
        if idx < len(self.tokens):
            return self.tokens[idx]
        return self.tokens[-1]

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        prev = self.current
        self.prev = prev
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        self.current = self.tokens[self.pos]
        return prev

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.current.type in types

    def match(self, *types: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, message: Optional[str] = None) -> Tok:
        """Consume token of expected type or raise error"""
        if not self.check(token_type):
            msg = message or f"Expected {token_type.name}, got {self.current.type.name}"
            raise ParseError(msg, self.current)
        return self.advance()

    def check_contextual(self, word: str) -> bool:
        return self.current.type == TT.IDENT and self.current.value == word

    def consume_semicolon(self) -> None:
        """Consume ';' or accept an automatic semicolon."""
        if self.match(TT.SEMI):
            return
        if self.check(TT.RBRACE, TT.EOF) or self.current.newline_before:
            return
        raise ParseError("Expected ';'", self.current)

    def can_insert_semicolon(self) -> bool:
        return self.check(TT.SEMI, TT.RBRACE, TT.EOF) or self.current.newline_before

    def node(self, kind: str, children: List[Any], start: Any, end: Any = None) -> Tree:
        """Build a node spanning ``start`` to ``end`` (default: last consumed token)."""
        tree = Tree(kind, children)
        return copy_position(tree, start, end if end is not None else self.prev)

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> Tree:
        """Parse entire program"""
        start = self.current
        body = self.parse_statement_list(TT.EOF)
        program = self.node('Program', [body], start, self.current)
        if not body:
            self.attach_trailing_comments(program, self.current)
        return program

    def parse_statement_list(self, terminator: TT) -> List[Tree]:
        body: List[Tree] = []

        while not self.check(terminator):
            if self.check(TT.EOF):
                raise ParseError("Unexpected end of input", self.current)
            leading = self.current.comments
            stmt = self.parse_statement()
            if leading:
                stmt.meta.comments = list(leading)
            body.append(stmt)

        if body:
            self.attach_trailing_comments(body[-1], self.current)

        return body

    def attach_trailing_comments(self, tree: Tree, tok: Tok) -> None:
        if not tok.comments:
            return

        comments = getattr(tree.meta, 'comments', None) or []
        for comment in tok.comments:
            comment.leading = False
            comments.append(comment)
        tree.meta.comments = comments

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Tree:
        """
        Parse a single statement.

        Statements include:
        - Blocks and empty statements
        - Declarations (var/let/const, function)
        - Control flow (if, for, while, do, try)
        - Jumps (return, break, continue, throw)
        - Expressions
        """
        if self.check(TT.LBRACE):
            return self.parse_block()
        if self.check(TT.SEMI):
            tok = self.advance()
            return self.node('EmptyStatement', [], tok)

        # Declarations
        if self.check(TT.VAR, TT.LET, TT.CONST):
            decl = self.parse_variable_declaration()
            self.consume_semicolon()
            return decl
        if self.check(TT.FUNCTION):
            return self.parse_function(declaration=True)

        # Control flow
        if self.check(TT.IF):
            return self.parse_if_stmt()
        if self.check(TT.FOR):
            return self.parse_for_stmt()
        if self.check(TT.WHILE):
            return self.parse_while_stmt()
        if self.check(TT.DO):
            return self.parse_do_while_stmt()
        if self.check(TT.TRY):
            return self.parse_try_stmt()

        # Simple statements
        if self.check(TT.RETURN):
            return self.parse_return_stmt()
        if self.check(TT.BREAK, TT.CONTINUE):
            return self.parse_jump_stmt()
        if self.check(TT.THROW):
            return self.parse_throw_stmt()

        # Just an expression statement
        start = self.current
        expr = self.parse_expression()
        self.consume_semicolon()
        return self.node('ExpressionStatement', [expr], start)

    def parse_block(self) -> Tree:
        start = self.expect(TT.LBRACE)
        saved, self.no_in = self.no_in, False
        try:
            body = self.parse_statement_list(TT.RBRACE)
        finally:
            self.no_in = saved
        closing = self.expect(TT.RBRACE)
        block = self.node('BlockStatement', [body], start)
        if not body:
            self.attach_trailing_comments(block, closing)
        return block

    def parse_variable_declaration(self) -> Tree:
        """var|let|const declarator (, declarator)*"""
        start = self.advance()
        kind = DECLARATION_KINDS[start.type]
        declarations = [self.parse_declarator()]

        while self.match(TT.COMMA):
            declarations.append(self.parse_declarator())

        return self.node('VariableDeclaration', [kind, declarations], start)

    def parse_declarator(self) -> Tree:
        ident = self.parse_binding_identifier()
        init = None
        if self.match(TT.ASSIGN):
            init = self.parse_assignment()
        return self.node('VariableDeclarator', [ident, init], ident)

    def parse_binding_identifier(self) -> Tree:
        tok = self.expect(TT.IDENT, f"Expected identifier, got {self.current.type.name}")
        return self.node('Identifier', [tok.value], tok)

    def parse_function(self, declaration: bool) -> Tree:
        """function [name](params) { body }"""
        start = self.expect(TT.FUNCTION)

        ident = None
        if self.check(TT.IDENT):
            ident = self.parse_binding_identifier()
        elif declaration:
            raise ParseError("Function declaration requires a name", self.current)

        self.expect(TT.LPAR)
        params = self.parse_param_list()
        self.expect(TT.RPAR)
        body = self.parse_block()

        kind = 'FunctionDeclaration' if declaration else 'FunctionExpression'
        return self.node(kind, [ident, params, body], start)

    def parse_param_list(self) -> List[Tree]:
        params: List[Tree] = []
        if self.check(TT.RPAR):
            return params

        params.append(self.parse_binding_identifier())
        while self.match(TT.COMMA):
            if self.check(TT.RPAR):
                break  # trailing comma
            params.append(self.parse_binding_identifier())

        return params

    def parse_if_stmt(self) -> Tree:
        """if (expr) stmt [else stmt]"""
        start = self.expect(TT.IF)
        self.expect(TT.LPAR)
        test = self.parse_expression()
        self.expect(TT.RPAR)
        consequent = self.parse_statement()

        alternate = None
        if self.match(TT.ELSE):
            alternate = self.parse_statement()

        return self.node('IfStatement', [test, consequent, alternate], start)

    def parse_for_stmt(self) -> Tree:
        """
        Parse for loop:
        for (init; test; update) stmt
        for (left in expr) stmt
        for (left of expr) stmt
        """
        start = self.expect(TT.FOR)
        self.expect(TT.LPAR)

        init: Optional[Tree] = None
        if not self.check(TT.SEMI):
            self.no_in = True
            try:
                if self.check(TT.VAR, TT.LET, TT.CONST):
                    init = self.parse_variable_declaration()
                else:
                    init = self.parse_expression()
            finally:
                self.no_in = False

            if self.check(TT.IN) or self.check_contextual('of'):
                return self.parse_for_in_of(start, init)

        self.expect(TT.SEMI)
        test = None if self.check(TT.SEMI) else self.parse_expression()
        self.expect(TT.SEMI)
        update = None if self.check(TT.RPAR) else self.parse_expression()
        self.expect(TT.RPAR)
        body = self.parse_statement()

        return self.node('ForStatement', [init, test, update, body], start)

    def parse_for_in_of(self, start: Tok, left: Tree) -> Tree:
        kind = 'ForInStatement' if self.check(TT.IN) else 'ForOfStatement'

        if left.data == 'VariableDeclaration':
            declarations = left.children[1]
            if len(declarations) != 1 or declarations[0].children[1] is not None:
                raise ParseError("Invalid left-hand side in for loop", self.current)
        elif left.data not in ('Identifier', 'MemberExpression'):
            raise ParseError("Invalid left-hand side in for loop", self.current)

        self.advance()
        right = self.parse_expression() if kind == 'ForInStatement' else self.parse_assignment()
        self.expect(TT.RPAR)
        body = self.parse_statement()

        return self.node(kind, [left, right, body], start)

    def parse_while_stmt(self) -> Tree:
        """Parse while loop: while (expr) stmt"""
        start = self.expect(TT.WHILE)
        self.expect(TT.LPAR)
        test = self.parse_expression()
        self.expect(TT.RPAR)
        body = self.parse_statement()
        return self.node('WhileStatement', [test, body], start)

    def parse_do_while_stmt(self) -> Tree:
        """Parse do loop: do stmt while (expr)"""
        start = self.expect(TT.DO)
        body = self.parse_statement()
        self.expect(TT.WHILE)
        self.expect(TT.LPAR)
        test = self.parse_expression()
        self.expect(TT.RPAR)
        self.match(TT.SEMI)
        return self.node('DoWhileStatement', [body, test], start)

    def parse_try_stmt(self) -> Tree:
        """try block [catch [(param)] block] [finally block]"""
        start = self.expect(TT.TRY)
        block = self.parse_block()

        handler = None
        if self.check(TT.CATCH):
            catch_tok = self.advance()
            param = None
            if self.match(TT.LPAR):
                param = self.parse_binding_identifier()
                self.expect(TT.RPAR)
            body = self.parse_block()
            handler = self.node('CatchClause', [param, body], catch_tok)

        finalizer = None
        if self.match(TT.FINALLY):
            finalizer = self.parse_block()

        if handler is None and finalizer is None:
            raise ParseError("Missing catch or finally after try", self.current)

        return self.node('TryStatement', [block, handler, finalizer], start)

    def parse_return_stmt(self) -> Tree:
        start = self.expect(TT.RETURN)
        argument = None
        if not self.can_insert_semicolon():
            argument = self.parse_expression()
        self.consume_semicolon()
        return self.node('ReturnStatement', [argument], start)

    def parse_jump_stmt(self) -> Tree:
        start = self.advance()
        kind = 'BreakStatement' if start.type == TT.BREAK else 'ContinueStatement'
        label = None
        if self.check(TT.IDENT) and not self.current.newline_before:
            label = self.parse_binding_identifier()
        self.consume_semicolon()
        return self.node(kind, [label], start)

    def parse_throw_stmt(self) -> Tree:
        start = self.expect(TT.THROW)
        if self.current.newline_before:
            raise ParseError("Illegal newline after throw", self.current)
        argument = self.parse_expression()
        self.consume_semicolon()
        return self.node('ThrowStatement', [argument], start)

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expression(self) -> Tree:
        """expr (, expr)*"""
        start = self.current
        expr = self.parse_assignment()

        if not self.check(TT.COMMA):
            return expr

        expressions = [expr]
        while self.match(TT.COMMA):
            expressions.append(self.parse_assignment())

        return self.node('SequenceExpression', [expressions], start)

    def parse_assignment(self) -> Tree:
        if self.is_arrow_ahead():
            return self.parse_arrow_function()

        start = self.current
        left = self.parse_conditional()

        if not self.check(*ASSIGN_OPS):
            return left

        if left.data not in ('Identifier', 'MemberExpression'):
            raise ParseError("Invalid assignment target", self.current)

        op = self.advance()
        right = self.parse_assignment()
        return self.node('AssignmentExpression', [op.value, left, right], start)

    def is_arrow_ahead(self) -> bool:
        """Look ahead for `ident =>` or `( ... ) =>` without consuming tokens."""
        if self.check(TT.IDENT):
            return self.peek(1).type == TT.ARROW

        if not self.check(TT.LPAR):
            return False

        depth = 0
        idx = self.pos
        while idx < len(self.tokens):
            tok = self.tokens[idx]
            if tok.type in (TT.LPAR, TT.LSQB, TT.LBRACE):
                depth += 1
            elif tok.type in (TT.RPAR, TT.RSQB, TT.RBRACE):
                depth -= 1
                if depth == 0:
                    nxt = self.tokens[idx + 1] if idx + 1 < len(self.tokens) else tok
                    return nxt.type == TT.ARROW and not nxt.newline_before
            elif tok.type == TT.EOF:
                return False
            idx += 1

        return False

    def parse_arrow_function(self) -> Tree:
        """ident => body | (params) => body"""
        start = self.current

        if self.check(TT.IDENT):
            params = [self.parse_binding_identifier()]
        else:
            self.expect(TT.LPAR)
            params = self.parse_param_list()
            self.expect(TT.RPAR)

        self.expect(TT.ARROW)

        if self.check(TT.LBRACE):
            body = self.parse_block()
            is_expression = False
        else:
            # The for-head `in` restriction does not reach into a function body.
            saved, self.no_in = self.no_in, False
            try:
                body = self.parse_assignment()
            finally:
                self.no_in = saved
            is_expression = True

        return self.node('ArrowFunctionExpression', [params, body, is_expression], start)

    def parse_conditional(self) -> Tree:
        start = self.current
        test = self.parse_binary(0)

        if not self.match(TT.QMARK):
            return test

        saved, self.no_in = self.no_in, False
        try:
            consequent = self.parse_assignment()
        finally:
            self.no_in = saved
        self.expect(TT.COLON)
        alternate = self.parse_assignment()

        return self.node('ConditionalExpression', [test, consequent, alternate], start)

    def binary_info(self) -> Optional[Tuple[int, str]]:
        tok = self.current
        if tok.type == TT.IN and self.no_in:
            return None
        return BINARY_OPS.get(tok.type)

    def parse_binary(self, min_prec: int) -> Tree:
        """Precedence climbing over BINARY_OPS; ** is right-associative."""
        start = self.current
        left = self.parse_unary()

        while True:
            info = self.binary_info()
            if info is None or info[0] <= min_prec:
                break

            prec, kind = info
            op = self.advance()
            next_min = prec - 1 if op.type == TT.POW else prec
            right = self.parse_binary(next_min)
            left = self.node(kind, [op.value, left, right], start)

        return left

    def parse_unary(self) -> Tree:
        start = self.current

        if self.check(*UNARY_OPS):
            op = self.advance()
            argument = self.parse_unary()
            return self.node('UnaryExpression', [op.value, argument], start)

        if self.check(TT.INCR, TT.DECR):
            op = self.advance()
            argument = self.parse_unary()
            self.check_update_target(argument)
            return self.node('UpdateExpression', [op.value, True, argument], start)

        return self.parse_postfix()

    def parse_postfix(self) -> Tree:
        start = self.current
        expr = self.parse_call_member()

        if self.check(TT.INCR, TT.DECR) and not self.current.newline_before:
            self.check_update_target(expr)
            op = self.advance()
            return self.node('UpdateExpression', [op.value, False, expr], start)

        return expr

    def check_update_target(self, target: Tree) -> None:
        if target.data not in ('Identifier', 'MemberExpression'):
            raise ParseError("Invalid update target", self.current)

    def parse_call_member(self) -> Tree:
        start = self.current

        if self.check(TT.NEW):
            expr = self.parse_new()
        else:
            expr = self.parse_primary()

        while True:
            if self.match(TT.DOT):
                prop = self.parse_property_name()
                expr = self.node('MemberExpression', [expr, prop, False], start)
            elif self.match(TT.LSQB):
                prop = self.parse_nested_expression()
                self.expect(TT.RSQB)
                expr = self.node('MemberExpression', [expr, prop, True], start)
            elif self.check(TT.LPAR):
                args = self.parse_arguments()
                expr = self.node('CallExpression', [expr, args], start)
            else:
                return expr

    def parse_new(self) -> Tree:
        """new callee [(args)]; the callee takes member accesses but no calls."""
        start = self.expect(TT.NEW)

        if self.check(TT.NEW):
            callee = self.parse_new()
        else:
            callee = self.parse_primary()

        while True:
            if self.match(TT.DOT):
                prop = self.parse_property_name()
                callee = self.node('MemberExpression', [callee, prop, False], start)
            elif self.match(TT.LSQB):
                prop = self.parse_nested_expression()
                self.expect(TT.RSQB)
                callee = self.node('MemberExpression', [callee, prop, True], start)
            else:
                break

        args: List[Tree] = []
        if self.check(TT.LPAR):
            args = self.parse_arguments()

        return self.node('NewExpression', [callee, args], start)

    def parse_arguments(self) -> List[Tree]:
        self.expect(TT.LPAR)
        args: List[Tree] = []

        while not self.check(TT.RPAR):
            args.append(self.parse_nested_assignment())
            if not self.match(TT.COMMA):
                break

        self.expect(TT.RPAR)
        return args

    def parse_nested_expression(self) -> Tree:
        saved, self.no_in = self.no_in, False
        try:
            return self.parse_expression()
        finally:
            self.no_in = saved

    def parse_nested_assignment(self) -> Tree:
        saved, self.no_in = self.no_in, False
        try:
            return self.parse_assignment()
        finally:
            self.no_in = saved

    def parse_property_name(self) -> Tree:
        """Identifier after '.', keywords allowed (obj.default, obj.new)."""
        tok = self.current
        if tok.type != TT.IDENT and tok.type not in KEYWORD_TYPES:
            raise ParseError(f"Expected property name, got {tok.type.name}", tok)
        self.advance()
        return self.node('Identifier', [tok.raw or str(tok.value)], tok)

    def parse_primary(self) -> Tree:
        tok = self.current

        if self.check(TT.IDENT):
            self.advance()
            return self.node('Identifier', [tok.value], tok)

        if self.check(TT.NUMBER, TT.STRING):
            self.advance()
            return self.literal(tok.value, tok)

        if self.check(TT.TRUE, TT.FALSE):
            self.advance()
            return self.literal(tok.type == TT.TRUE, tok)

        if self.check(TT.NULL):
            self.advance()
            return self.literal(None, tok)

        if self.check(TT.THIS):
            self.advance()
            return self.node('ThisExpression', [], tok)

        if self.check(TT.FUNCTION):
            return self.parse_function(declaration=False)

        if self.check(TT.LPAR):
            self.advance()
            expr = self.parse_nested_expression()
            self.expect(TT.RPAR)
            return expr

        if self.check(TT.LSQB):
            return self.parse_array()

        if self.check(TT.LBRACE):
            return self.parse_object()

        if self.check(TT.EOF):
            raise ParseError("Unexpected end of input", tok)

        raise ParseError(f"Unexpected token {tok.type.name}", tok)

    def literal(self, value: Any, tok: Tok) -> Tree:
        lit = self.node('Literal', [value], tok)
        lit.meta.raw = tok.raw
        return lit

    def parse_array(self) -> Tree:
        """[elem, , elem] with holes as None"""
        start = self.expect(TT.LSQB)
        elements: List[Optional[Tree]] = []

        while not self.check(TT.RSQB):
            if self.match(TT.COMMA):
                elements.append(None)
                continue
            elements.append(self.parse_nested_assignment())
            if not self.check(TT.RSQB):
                self.expect(TT.COMMA)

        self.expect(TT.RSQB)
        return self.node('ArrayExpression', [elements], start)

    def parse_object(self) -> Tree:
        """{ key: value, [expr]: value, shorthand }"""
        start = self.expect(TT.LBRACE)
        properties: List[Tree] = []

        while not self.check(TT.RBRACE):
            properties.append(self.parse_object_property())
            if not self.match(TT.COMMA):
                break

        self.expect(TT.RBRACE)
        return self.node('ObjectExpression', [properties], start)

    def parse_object_property(self) -> Tree:
        tok = self.current

        if self.match(TT.LSQB):
            key = self.parse_nested_assignment()
            self.expect(TT.RSQB)
            self.expect(TT.COLON)
            value = self.parse_nested_assignment()
            return self.node('Property', [key, value, True, False], tok)

        if self.check(TT.STRING, TT.NUMBER):
            self.advance()
            key = self.literal(tok.value, tok)
        elif self.check(TT.IDENT) or tok.type in KEYWORD_TYPES:
            key = self.parse_property_name()
            if tok.type == TT.IDENT and self.check(TT.COMMA, TT.RBRACE):
                value = self.node('Identifier', [tok.value], tok)
                return self.node('Property', [key, value, False, True], tok)
        else:
            raise ParseError(f"Unexpected token {tok.type.name} in object literal", tok)

        self.expect(TT.COLON)
        value = self.parse_nested_assignment()
        return self.node('Property', [key, value, False, False], tok)


def parse(source: str) -> Tree:
    """Parse source text into a Program tree."""
    parser = Parser(tokenize(source))
    return parser.parse()

def parse_expression(source: str) -> Tree:
    """Parse a single expression (no trailing statements allowed)."""
    parser = Parser(tokenize(source))
    expr = parser.parse_expression()
    if not parser.check(TT.EOF):
        raise ParseError(f"Unexpected token {parser.current.type.name}", parser.current)
    return expr
