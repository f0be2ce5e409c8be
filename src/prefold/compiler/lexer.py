"""
Expression lexer.

Turns the right-hand side of a statement into a finite list of tokens
ending in EOF. The lexer works on a slice of the whole program so that
token locations point into the original source.
"""

from typing import Iterator, Optional

from prefold.compiler.tokens import (
    DOUBLE_CHAR_TOKENS,
    KEYWORDS,
    SINGLE_CHAR_TOKENS,
    Token,
    TokenType,
    is_digit,
    is_letter,
)
from prefold.utils.errors import MalformedStatementError, SourceLocation


class ExpressionLexer:
    """
    Tokenizer for right-hand-side expressions.

    Usage:
        lexer = ExpressionLexer("x = 2 * (y + 1);", start=4, end=15)
        tokens = lexer.tokenize()
    """

    def __init__(
        self,
        source: str,
        start: int = 0,
        end: Optional[int] = None,
        filename: Optional[str] = None,
    ) -> None:
        """
        Initialize the lexer over source[start:end].

        Args:
            source: The whole program text
            start: Offset of the first character of the expression
            end: Offset one past the last character (defaults to len(source))
            filename: Optional filename for error reporting
        """
        self.source = source
        self.start = start
        self.end = len(source) if end is None else end
        self.filename = filename
        self.tokens: list[Token] = []

        self._begin = SourceLocation.from_offset(source, start, filename)
        self._rewind()

    def _rewind(self) -> None:
        """Move back to the start of the expression."""
        self.pos = self.start
        self.line = self._begin.line
        self.column = self._begin.column
        self._line_start = self.start - (self._begin.column - 1)

    @property
    def _current_char(self) -> Optional[str]:
        """Return the current character or None if at end."""
        if self.pos >= self.end:
            return None
        return self.source[self.pos]

    @property
    def _peek_char(self) -> Optional[str]:
        """Return the next character without consuming it."""
        peek_pos = self.pos + 1
        if peek_pos >= self.end:
            return None
        return self.source[peek_pos]

    def _location(self) -> SourceLocation:
        return SourceLocation(
            line=self.line,
            column=self.column,
            offset=self.pos,
            filename=self.filename,
        )

    def _current_line_text(self) -> str:
        end = self.source.find("\n", self._line_start)
        if end == -1:
            end = len(self.source)
        return self.source[self._line_start:end]

    def _advance(self) -> str:
        """Consume and return the current character."""
        char = self.source[self.pos]
        self.pos += 1

        if char == "\n":
            self.line += 1
            self.column = 1
            self._line_start = self.pos
        else:
            self.column += 1

        return char

    def _skip_whitespace(self) -> None:
        while self._current_char is not None and self._current_char.isspace():
            self._advance()

    def _read_number(self) -> Token:
        """Read a maximal run of decimal digits."""
        start_loc = self._location()
        digits: list[str] = []

        while self._current_char is not None and is_digit(self._current_char):
            digits.append(self._advance())

        return Token(TokenType.INTEGER, int("".join(digits)), start_loc)

    def _read_identifier(self) -> Token:
        """Read an identifier or a boolean literal."""
        start_loc = self._location()
        chars: list[str] = []

        while self._current_char is not None and (
            is_letter(self._current_char) or is_digit(self._current_char)
        ):
            chars.append(self._advance())

        identifier = "".join(chars)

        if identifier in KEYWORDS:
            token_type = KEYWORDS[identifier]
            return Token(token_type, 1 if token_type == TokenType.TRUE else 0, start_loc)

        return Token(TokenType.IDENTIFIER, identifier, start_loc)

    def _next_token(self) -> Token:
        self._skip_whitespace()

        if self._current_char is None:
            return Token(TokenType.EOF, None, self._location())

        char = self._current_char

        if is_digit(char):
            return self._read_number()

        if is_letter(char):
            return self._read_identifier()

        if self._peek_char is not None:
            two_chars = char + self._peek_char
            if two_chars in DOUBLE_CHAR_TOKENS:
                loc = self._location()
                self._advance()
                self._advance()
                return Token(DOUBLE_CHAR_TOKENS[two_chars], two_chars, loc)

        if char in SINGLE_CHAR_TOKENS:
            loc = self._location()
            self._advance()
            return Token(SINGLE_CHAR_TOKENS[char], char, loc)

        raise MalformedStatementError(
            f"Unexpected character '{char}' in expression",
            self._location(),
            self._current_line_text(),
        )

    def tokenize(self) -> list[Token]:
        """
        Tokenize the whole expression.

        Returns:
            A list of all tokens including the final EOF token.
        """
        self.tokens = []
        self._rewind()

        while True:
            token = self._next_token()
            self.tokens.append(token)
            if token.type == TokenType.EOF:
                break

        return self.tokens

    def __iter__(self) -> Iterator[Token]:
        if not self.tokens:
            self.tokenize()
        return iter(self.tokens)


def tokenize(source: str, filename: Optional[str] = None) -> list[Token]:
    """Convenience function to tokenize a standalone expression."""
    return ExpressionLexer(source, filename=filename).tokenize()
