"""
Token definitions for the right-hand-side expression lexer.

The pass only ever tokenizes the expression after a statement's `=`, so
the token set covers integer literals, identifiers, the arithmetic and
relational operators, and parentheses.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from prefold.utils.errors import SourceLocation


# Identifiers are a letter followed by letters or digits. No underscores.
IDENTIFIER_RE = re.compile(r"[A-Za-z][A-Za-z0-9]*")


def is_letter(char: str) -> bool:
    """Check for an ASCII letter."""
    return ("a" <= char <= "z") or ("A" <= char <= "Z")


def is_digit(char: str) -> bool:
    """Check for an ASCII decimal digit."""
    return "0" <= char <= "9"


class TokenType(Enum):
    """Enumeration of all expression token types."""

    # End of expression
    EOF = auto()

    # Literals
    INTEGER = auto()
    TRUE = auto()
    FALSE = auto()

    # Identifiers
    IDENTIFIER = auto()

    # Arithmetic operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()

    # Comparison operators
    EQ = auto()
    NE = auto()
    LT = auto()
    GT = auto()
    LE = auto()
    GE = auto()

    # Delimiters
    LPAREN = auto()
    RPAREN = auto()


# Boolean literals fold to integers
KEYWORDS: dict[str, TokenType] = {
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
}

SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "<": TokenType.LT,
    ">": TokenType.GT,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
}

# Two character operators (checked before single char)
DOUBLE_CHAR_TOKENS: dict[str, TokenType] = {
    "==": TokenType.EQ,
    "!=": TokenType.NE,
    "<=": TokenType.LE,
    ">=": TokenType.GE,
}

RELATIONAL_OPERATORS = frozenset(
    {
        TokenType.EQ,
        TokenType.NE,
        TokenType.LT,
        TokenType.GT,
        TokenType.LE,
        TokenType.GE,
    }
)


@dataclass(slots=True)
class Token:
    """
    Represents a single token of an expression.

    Attributes:
        type: The type of this token
        value: The integer value for literals, the lexeme otherwise
        location: Source location of this token in the whole program
    """

    type: TokenType
    value: Any
    location: SourceLocation

    def __repr__(self) -> str:
        if self.value is not None:
            return f"Token({self.type.name}, {self.value!r}, {self.location})"
        return f"Token({self.type.name}, {self.location})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Token):
            return self.type == other.type and self.value == other.value
        if isinstance(other, TokenType):
            return self.type == other
        return NotImplemented

    @property
    def is_relational(self) -> bool:
        return self.type in RELATIONAL_OPERATORS
