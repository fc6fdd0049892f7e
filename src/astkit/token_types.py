"""
Token Types for the JavaScript subset parser

Shared between lexer and parser to avoid circular dependencies.
"""

from typing import Any, List
from dataclasses import dataclass, field
from enum import Enum, auto


class TT(Enum):
    """Token Types"""

    # Literals
    NUMBER = auto()
    STRING = auto()
    IDENT = auto()

    # Keywords
    VAR = auto()
    LET = auto()
    CONST = auto()
    FUNCTION = auto()
    RETURN = auto()
    IF = auto()
    ELSE = auto()
    FOR = auto()
    IN = auto()
    WHILE = auto()
    DO = auto()
    BREAK = auto()
    CONTINUE = auto()
    THROW = auto()
    TRY = auto()
    CATCH = auto()
    FINALLY = auto()
    NEW = auto()
    THIS = auto()
    TYPEOF = auto()
    VOID = auto()
    DELETE = auto()
    INSTANCEOF = auto()

    # Literal keywords
    TRUE = auto()
    FALSE = auto()
    NULL = auto()

    # Arithmetic
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    MOD = auto()
    POW = auto()

    # Bitwise
    AMP = auto()
    PIPE = auto()
    CARET = auto()
    TILDE = auto()
    LSHIFT = auto()
    RSHIFT = auto()
    URSHIFT = auto()  # >>>

    # Comparison
    EQ = auto()  # ==
    NEQ = auto()  # !=
    SEQ = auto()  # ===
    SNEQ = auto()  # !==
    LT = auto()
    LTE = auto()
    GT = auto()
    GTE = auto()

    # Logical
    AND = auto()  # &&
    OR = auto()  # ||
    NULLISH = auto()  # ??
    NEG = auto()  # !

    # Assignment
    ASSIGN = auto()  # =
    PLUSEQ = auto()
    MINUSEQ = auto()
    STAREQ = auto()
    SLASHEQ = auto()
    MODEQ = auto()
    POWEQ = auto()
    LSHIFTEQ = auto()
    RSHIFTEQ = auto()
    URSHIFTEQ = auto()
    AMPEQ = auto()
    PIPEEQ = auto()
    CARETEQ = auto()

    # Increment/Decrement
    INCR = auto()  # ++
    DECR = auto()  # --

    # Punctuation
    LPAR = auto()
    RPAR = auto()
    LSQB = auto()
    RSQB = auto()
    LBRACE = auto()
    RBRACE = auto()
    DOT = auto()
    COMMA = auto()
    COLON = auto()
    SEMI = auto()
    QMARK = auto()
    ARROW = auto()  # =>

    # Special
    EOF = auto()


@dataclass
class Tok:
    """Token with position info.

    ``newline_before`` records a line break between this token and the
    previous one (automatic semicolon insertion). ``comments`` holds the
    comments that appeared just before the token.
    """

    type: TT
    value: Any
    line: int = 0
    column: int = 0
    start_pos: int = 0
    end_pos: int = 0
    end_line: int = 0
    end_column: int = 0
    raw: str = ""
    newline_before: bool = False
    comments: List[Any] = field(default_factory=list)

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, {self.line}:{self.column})"
