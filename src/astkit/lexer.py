"""
Lexer for the JavaScript subset

Tokenizes source text into a flat token list.

Features:
- Single-pass tokenization
- Position tracking (line, column, offset)
- Comments are not emitted as tokens; they ride on the next token
- Line breaks are recorded on the following token for semicolon insertion
"""

from typing import List

from .errors import AstkitError
from .token_types import TT, Tok
from .tree import Comment

# ============================================================================
# Lexer Implementation
# ============================================================================

class LexError(AstkitError):
    """Lexical analysis error"""

    def __init__(self, message: str, line: int = 0, column: int = 0):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(f"{message} at line {line}, col {column}" if line else message)


_ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    'b': '\b',
    'f': '\f',
    'v': '\v',
    '0': '\0',
}


class Lexer:
    """JavaScript subset lexer."""

    # Keyword mapping
    KEYWORDS = {
        'var': TT.VAR,
        'let': TT.LET,
        'const': TT.CONST,
        'function': TT.FUNCTION,
        'return': TT.RETURN,
        'if': TT.IF,
        'else': TT.ELSE,
        'for': TT.FOR,
        'in': TT.IN,
        'while': TT.WHILE,
        'do': TT.DO,
        'break': TT.BREAK,
        'continue': TT.CONTINUE,
        'throw': TT.THROW,
        'try': TT.TRY,
        'catch': TT.CATCH,
        'finally': TT.FINALLY,
        'new': TT.NEW,
        'this': TT.THIS,
        'typeof': TT.TYPEOF,
        'void': TT.VOID,
        'delete': TT.DELETE,
        'instanceof': TT.INSTANCEOF,
        'true': TT.TRUE,
        'false': TT.FALSE,
        'null': TT.NULL,
    }

    # Operator mapping: longest matches first to handle prefixes correctly
    OPERATORS = [
        # Four-character operators
        ('>>>=', TT.URSHIFTEQ),

        # Three-character operators
        ('===', TT.SEQ),
        ('!==', TT.SNEQ),
        ('**=', TT.POWEQ),
        ('<<=', TT.LSHIFTEQ),
        ('>>=', TT.RSHIFTEQ),
        ('>>>', TT.URSHIFT),

        # Two-character operators
        ('=>', TT.ARROW),
        ('==', TT.EQ),
        ('!=', TT.NEQ),
        ('<=', TT.LTE),
        ('>=', TT.GTE),
        ('&&', TT.AND),
        ('||', TT.OR),
        ('??', TT.NULLISH),
        ('++', TT.INCR),
        ('--', TT.DECR),
        ('+=', TT.PLUSEQ),
        ('-=', TT.MINUSEQ),
        ('*=', TT.STAREQ),
        ('/=', TT.SLASHEQ),
        ('%=', TT.MODEQ),
        ('&=', TT.AMPEQ),
        ('|=', TT.PIPEEQ),
        ('^=', TT.CARETEQ),
        ('**', TT.POW),
        ('<<', TT.LSHIFT),
        ('>>', TT.RSHIFT),

        # Single-character operators
        ('+', TT.PLUS),
        ('-', TT.MINUS),
        ('*', TT.STAR),
        ('/', TT.SLASH),
        ('%', TT.MOD),
        ('&', TT.AMP),
        ('|', TT.PIPE),
        ('^', TT.CARET),
        ('~', TT.TILDE),
        ('<', TT.LT),
        ('>', TT.GT),
        ('!', TT.NEG),
        ('=', TT.ASSIGN),
        ('(', TT.LPAR),
        (')', TT.RPAR),
        ('[', TT.LSQB),
        (']', TT.RSQB),
        ('{', TT.LBRACE),
        ('}', TT.RBRACE),
        ('.', TT.DOT),
        (',', TT.COMMA),
        (':', TT.COLON),
        (';', TT.SEMI),
        ('?', TT.QMARK),
    ]

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Tok] = []

        self.pending_comments: List[Comment] = []
        self.saw_newline = False

        # Start of the token being scanned
        self.tok_pos = 0
        self.tok_line = 1
        self.tok_column = 1

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list"""
        while self.pos < len(self.source):
            self.scan_token()

        self.mark_start()
        self.emit(TT.EOF, None)
        return self.tokens

    def scan_token(self):
        """Scan next token"""
        ch = self.peek()

        if ch in (' ', '\t', '\ufeff', '\u00a0'):
            self.advance()
            return

        if ch in ('\n', '\r', '\u2028', '\u2029'):
            self.scan_newline()
            return

        if ch == '/' and self.peek(1) == '/':
            self.scan_line_comment()
            return

        if ch == '/' and self.peek(1) == '*':
            self.scan_block_comment()
            return

        self.mark_start()

        if ch in ('"', "'"):
            self.scan_string()
            return

        if ch.isdigit() or (ch == '.' and self.peek(1).isdigit()):
            self.scan_number()
            return

        if ch.isalpha() or ch in ('_', '$'):
            self.scan_identifier()
            return

        self.scan_operator()

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_newline(self):
        """Scan newline character"""
        if self.peek() == '\r' and self.peek(1) == '\n':
            self.advance(2)  # consume CRLF
        else:
            self.advance()

        self.line += 1
        self.column = 1
        self.saw_newline = True

    def scan_line_comment(self):
        self.advance(2)
        text = ''
        while self.peek() not in ('\n', '\r', '\0'):
            text += self.advance()
        self.pending_comments.append(Comment(text))

    def scan_block_comment(self):
        start_line = self.line
        self.advance(2)
        text = ''

        while self.pos < len(self.source):
            if self.peek() == '*' and self.peek(1) == '/':
                self.advance(2)
                self.pending_comments.append(Comment(text, block=True))
                return

            ch = self.peek()
            if ch == '\n':
                text += ch
                self.advance()
                self.line += 1
                self.column = 1
                self.saw_newline = True
                continue

            text += self.advance()

        raise LexError("Unterminated comment", start_line)

    def scan_string(self):
        """Scan string literal: "..." or '...'"""
        quote = self.advance()
        value = ''

        while True:
            if self.pos >= len(self.source) or self.peek() in ('\n', '\r'):
                raise LexError("Unterminated string", self.tok_line, self.tok_column)

            ch = self.advance()
            if ch == quote:
                break

            if ch != '\\':
                value += ch
                continue

            value += self.scan_escape()

        self.emit(TT.STRING, value)

    def scan_escape(self) -> str:
        """Decode the escape sequence following a backslash."""
        ch = self.advance()

        if ch in _ESCAPES:
            return _ESCAPES[ch]

        if ch == 'x':
            return chr(self.read_hex(2))

        if ch == 'u':
            if self.peek() == '{':
                self.advance()
                digits = ''
                while self.peek() != '}':
                    if self.pos >= len(self.source):
                        raise LexError("Unterminated unicode escape", self.line, self.column)
                    digits += self.advance()
                self.advance()
                return chr(self.parse_hex(digits))
            return chr(self.read_hex(4))

        if ch == '\r' and self.peek() == '\n':
            self.advance()
            ch = '\n'

        if ch == '\n':
            # Line continuation
            self.line += 1
            self.column = 1
            return ''

        return ch

    def read_hex(self, count: int) -> int:
        return self.parse_hex(self.advance(count))

    def parse_hex(self, digits: str) -> int:
        try:
            return int(digits, 16)
        except ValueError:
            raise LexError(f"Invalid escape '{digits}'", self.line, self.column) from None

    def scan_number(self):
        """Scan number literal"""
        if self.peek() == '0' and self.peek(1) in ('x', 'X'):
            self.advance(2)
            digits = ''
            while self.peek() in '0123456789abcdefABCDEF' and self.peek() != '\0':
                digits += self.advance()
            if not digits:
                raise LexError("Invalid hex literal", self.tok_line, self.tok_column)
            self.emit(TT.NUMBER, int(digits, 16))
            return

        value = ''
        is_float = False

        # Integer part
        while self.peek().isdigit():
            value += self.advance()

        # Decimal part
        if self.peek() == '.':
            is_float = True
            value += self.advance()
            while self.peek().isdigit():
                value += self.advance()

        # Scientific notation
        if self.peek() in ('e', 'E'):
            is_float = True
            value += self.advance()
            if self.peek() in ('+', '-'):
                value += self.advance()
            if not self.peek().isdigit():
                raise LexError("Invalid number", self.tok_line, self.tok_column)
            while self.peek().isdigit():
                value += self.advance()

        if self.peek().isalpha() or self.peek() in ('_', '$'):
            raise LexError("Identifier directly after number", self.line, self.column)

        self.emit(TT.NUMBER, float(value) if is_float else int(value))

    def scan_identifier(self):
        """Scan identifier or keyword"""
        value = ''

        while self.peek().isalnum() or self.peek() in ('_', '$'):
            value += self.advance()

        # Check if keyword
        token_type = self.KEYWORDS.get(value, TT.IDENT)
        self.emit(token_type, value)

    def scan_operator(self):
        """Scan operators and punctuation"""
        for op_str, op_type in self.OPERATORS:
            if self.source.startswith(op_str, self.pos):
                self.advance(len(op_str))
                self.emit(op_type, op_str)
                return

        ch = self.peek()
        raise LexError(f"Unexpected character '{ch}'", self.line, self.column)

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        result = ''
        for _ in range(n):
            ch = self.source[self.pos] if self.pos < len(self.source) else '\0'
            result += ch
            self.pos += 1
            self.column += 1
        return result

    def mark_start(self):
        self.tok_pos = self.pos
        self.tok_line = self.line
        self.tok_column = self.column

    def emit(self, token_type: TT, value):
        """Emit a token"""
        end = min(self.pos, len(self.source))
        tok = Tok(
            type=token_type,
            value=value,
            line=self.tok_line,
            column=self.tok_column,
            start_pos=self.tok_pos,
            end_pos=end,
            end_line=self.line,
            end_column=self.column,
            raw=self.source[self.tok_pos:end],
            newline_before=self.saw_newline,
            comments=self.pending_comments,
        )
        self.tokens.append(tok)
        self.pending_comments = []
        self.saw_newline = False


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source"""
    lexer = Lexer(source)
    return lexer.tokenize()
