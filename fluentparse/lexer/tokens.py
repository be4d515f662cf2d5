"""
Token definitions consumed by the fluentparse engine.

Tokens are produced by an external tokenizer. The engine only reads them:
each token carries a kind from the closed TokenType enumeration, the raw
lexeme, and optionally the source location it was read from.

Block structure is already explicit in the token stream: the tokenizer emits
END_OF_LINE after every statement and INDENT/DEDENT around nested blocks.

Author: fluentparse developers
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional


class TokenType(Enum):
    """
    Enumeration of all terminal symbols.

    Organized by category for clarity and maintainability.
    """

    # ========================================================================
    # Special Tokens
    # ========================================================================
    EOF = auto()                    # End of input
    END_OF_LINE = auto()            # Statement terminator
    INDENT = auto()                 # Indentation increase
    DEDENT = auto()                 # Indentation decrease

    # ========================================================================
    # Literals
    # ========================================================================
    NUMBER = auto()                 # 42, 3.14
    STRING = auto()                 # "hello"
    IDENTIFIER = auto()             # variable_name

    # ========================================================================
    # Keywords
    # ========================================================================
    IF = auto()                     # if / daca
    THEN = auto()                   # then / atunci
    ELSE = auto()                   # else / altfel
    WHILE = auto()                  # while / cat timp
    DO = auto()                     # do / executa
    REPEAT = auto()                 # repeat / repeta
    UNTIL = auto()                  # until / pana cand
    FOR = auto()                    # for / pentru
    READ = auto()                   # read / citeste
    WRITE = auto()                  # write / scrie

    # ========================================================================
    # Operators
    # ========================================================================

    # Assignment
    ASSIGN = auto()                 # <-

    # Logical
    OR = auto()                     # or
    AND = auto()                    # and
    NOT = auto()                    # not

    # Bitwise
    BITWISE_OR = auto()             # |
    BITWISE_XOR = auto()            # ^
    BITWISE_AND = auto()            # &
    BITWISE_NOT = auto()            # ~
    BITWISE_LEFT_SHIFT = auto()     # <<
    BITWISE_RIGHT_SHIFT = auto()    # >>

    # Comparison
    NOT_EQUAL = auto()              # !=
    EQUAL = auto()                  # =
    LESS_THAN = auto()              # <
    LESS_THAN_EQUAL = auto()        # <=
    GREATER_THAN = auto()           # >
    GREATER_THAN_EQUAL = auto()     # >=

    # Arithmetic
    PLUS = auto()                   # +
    MINUS = auto()                  # -
    MULTIPLY = auto()               # *
    DIVIDE = auto()                 # /
    MODULUS = auto()                # %
    POWER = auto()                  # ^^

    # ========================================================================
    # Punctuation and Delimiters
    # ========================================================================
    COMMA = auto()                  # ,
    LEFT_PARENTHESIS = auto()       # (
    RIGHT_PARENTHESIS = auto()      # )
    LEFT_SQUARE_BRACKET = auto()    # [
    RIGHT_SQUARE_BRACKET = auto()   # ]


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Used for error reporting when the tokenizer supplies positions.
    """
    filename: str
    line: int
    column: int
    offset: int = 0

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    A single lexical token: its kind, the raw lexeme and an optional location.
    """
    kind: TokenType
    lexeme: str = ""
    location: Optional[SourceLocation] = None

    def __str__(self) -> str:
        if self.lexeme:
            return f"{self.kind.name}({self.lexeme!r})"
        return self.kind.name

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.lexeme!r})"

    @property
    def is_literal(self) -> bool:
        """Check if this token is a literal value."""
        return self.kind in LITERALS

    @property
    def is_keyword(self) -> bool:
        """Check if this token is a keyword."""
        return self.kind in KEYWORDS

    @property
    def is_layout(self) -> bool:
        """Check if this token only carries block structure."""
        return self.kind in LAYOUT


LITERALS = frozenset({
    TokenType.NUMBER,
    TokenType.STRING,
    TokenType.IDENTIFIER,
})

KEYWORDS = frozenset({
    TokenType.IF, TokenType.THEN, TokenType.ELSE,
    TokenType.WHILE, TokenType.DO, TokenType.REPEAT, TokenType.UNTIL,
    TokenType.FOR, TokenType.READ, TokenType.WRITE,
})

LAYOUT = frozenset({
    TokenType.EOF,
    TokenType.END_OF_LINE,
    TokenType.INDENT,
    TokenType.DEDENT,
})
