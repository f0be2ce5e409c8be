"""
Recursive-descent expression evaluator.

Evaluates a right-hand side directly to an integer while parsing it.
Grammar levels, lowest binding first:

    relational      := additive (("<" | "<=" | ">" | ">=" | "==" | "!=") additive)*
    additive        := multiplicative (("+" | "-") multiplicative)*
    multiplicative  := unary (("*" | "/") unary)*
    unary           := "-" unary | primary
    primary         := INTEGER | "true" | "false" | IDENTIFIER | "(" relational ")"

Identifiers other than true/false are handed to a resolver.
"""

from __future__ import annotations

import operator
from typing import Callable, Optional, Protocol

from prefold.compiler.lexer import ExpressionLexer
from prefold.compiler.tokens import Token, TokenType
from prefold.utils.errors import (
    DivisionByZeroError,
    MalformedStatementError,
    UnresolvedVariableError,
)


class VariableResolver(Protocol):
    """Anything that can produce the value of a name seen before a statement."""

    def resolve(self, before_index: int, name: str, reference: Optional[Token] = None) -> int:
        ...


# Comparisons yield 0/1 so they can feed further arithmetic
COMPARISONS: dict[TokenType, Callable[[int, int], bool]] = {
    TokenType.LT: operator.lt,
    TokenType.LE: operator.le,
    TokenType.GT: operator.gt,
    TokenType.GE: operator.ge,
    TokenType.EQ: operator.eq,
    TokenType.NE: operator.ne,
}


def truncating_divide(left: int, right: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(left) // abs(right)
    return quotient if (left >= 0) == (right >= 0) else -quotient


class _TokenCursor:
    """Finite token sequence consumed front to back by one evaluation."""

    __slots__ = ("tokens", "pos", "before_index")

    def __init__(self, tokens: list[Token], before_index: int) -> None:
        self.tokens = tokens
        self.pos = 0
        self.before_index = before_index

    @property
    def current(self) -> Token:
        return self.tokens[min(self.pos, len(self.tokens) - 1)]

    def check(self, *types: TokenType) -> bool:
        return self.current.type in types

    def advance(self) -> Token:
        token = self.current
        if token.type != TokenType.EOF:
            self.pos += 1
        return token


class ExpressionEvaluator:
    """
    Evaluates expression tokens to an integer.

    Usage:
        evaluator = ExpressionEvaluator(resolver, source)
        value = evaluator.evaluate(tokens, before_index=3)
    """

    def __init__(
        self,
        resolver: Optional[VariableResolver] = None,
        source: Optional[str] = None,
    ) -> None:
        """
        Args:
            resolver: Looks up variables; without one every variable is unresolved
            source: Whole program text, used for error context
        """
        self.resolver = resolver
        self.source = source

    def evaluate(self, tokens: list[Token], before_index: int = 0) -> int:
        """
        Evaluate a complete expression.

        Args:
            tokens: Tokens ending in EOF
            before_index: Variables resolve to definitions before this statement

        Raises:
            MalformedStatementError: On a missing operand, an unclosed
                parenthesis, trailing tokens or runaway nesting
            DivisionByZeroError: If a divisor evaluates to zero
        """
        cursor = _TokenCursor(tokens, before_index)
        try:
            result = self._relational(cursor)
        except RecursionError:
            raise self._error("Expression is nested too deeply", tokens[0]) from None

        if not cursor.check(TokenType.EOF):
            raise self._error(f"Unexpected '{cursor.current.value}' after expression", cursor.current)

        return result

    def evaluate_text(
        self,
        source: str,
        start: int = 0,
        end: Optional[int] = None,
        before_index: int = 0,
        filename: Optional[str] = None,
    ) -> int:
        """Tokenize source[start:end] and evaluate it."""
        tokens = ExpressionLexer(source, start, end, filename).tokenize()
        return self.evaluate(tokens, before_index)

    # -------------------------------------------------------------------------
    # Grammar levels
    # -------------------------------------------------------------------------

    def _relational(self, cursor: _TokenCursor) -> int:
        result = self._additive(cursor)
        while cursor.current.is_relational:
            compare = COMPARISONS[cursor.advance().type]
            result = int(compare(result, self._additive(cursor)))
        return result

    def _additive(self, cursor: _TokenCursor) -> int:
        result = self._multiplicative(cursor)
        while cursor.check(TokenType.PLUS, TokenType.MINUS):
            if cursor.advance().type == TokenType.PLUS:
                result += self._multiplicative(cursor)
            else:
                result -= self._multiplicative(cursor)
        return result

    def _multiplicative(self, cursor: _TokenCursor) -> int:
        result = self._unary(cursor)
        while cursor.check(TokenType.STAR, TokenType.SLASH):
            op = cursor.advance()
            if op.type == TokenType.STAR:
                result *= self._unary(cursor)
                continue
            divisor = self._unary(cursor)
            if divisor == 0:
                raise DivisionByZeroError(
                    "Division by zero",
                    op.location,
                    self._line(op),
                )
            result = truncating_divide(result, divisor)
        return result

    def _unary(self, cursor: _TokenCursor) -> int:
        if cursor.check(TokenType.MINUS):
            cursor.advance()
            return -self._unary(cursor)
        return self._primary(cursor)

    def _primary(self, cursor: _TokenCursor) -> int:
        token = cursor.current

        if token.type in (TokenType.INTEGER, TokenType.TRUE, TokenType.FALSE):
            cursor.advance()
            return token.value

        if token.type == TokenType.IDENTIFIER:
            cursor.advance()
            return self._variable(token, cursor.before_index)

        if token.type == TokenType.LPAREN:
            cursor.advance()
            result = self._relational(cursor)
            if not cursor.check(TokenType.RPAREN):
                raise self._error("Expected ')' to close '('", cursor.current)
            cursor.advance()
            return result

        if token.type == TokenType.EOF:
            raise self._error("Expected an operand", token)

        raise self._error(f"Unexpected '{token.value}' where an operand was expected", token)

    def _variable(self, token: Token, before_index: int) -> int:
        if self.resolver is None:
            raise UnresolvedVariableError(
                f"Cannot resolve variable '{token.value}'",
                token.value,
                token.location,
                self._line(token),
            )
        return self.resolver.resolve(before_index, token.value, token)

    # -------------------------------------------------------------------------
    # Errors
    # -------------------------------------------------------------------------

    def _line(self, token: Token) -> Optional[str]:
        if self.source is None:
            return None
        offset = token.location.offset
        start = self.source.rfind("\n", 0, offset) + 1
        end = self.source.find("\n", offset)
        return self.source[start:end if end != -1 else len(self.source)]

    def _error(self, message: str, token: Token) -> MalformedStatementError:
        return MalformedStatementError(message, token.location, self._line(token))


def evaluate_expression(text: str) -> int:
    """
    Evaluate a standalone constant expression.

    Example:
        >>> evaluate_expression("2 + 3 * 4")
        14
    """
    return ExpressionEvaluator(source=text).evaluate_text(text)
