"""
Definition resolver.

Finds the statement that most recently defines a variable before a given
statement, marks it live, and folds its right-hand side. The definitions
a right-hand side refers to are folded first from an explicit work
stack, so evaluation itself only reads values that are already cached.
"""

from __future__ import annotations

import logging
from typing import NoReturn, Optional

from prefold.compiler.config import OptimizerConfig
from prefold.compiler.diagnostics import find_best_match
from prefold.compiler.evaluator import ExpressionEvaluator
from prefold.compiler.lexer import ExpressionLexer
from prefold.compiler.statements import DefinitionIndex, Program, Statement
from prefold.compiler.tokens import Token, TokenType
from prefold.utils.errors import (
    CyclicDefinitionError,
    MalformedStatementError,
    SourceLocation,
    UnresolvedVariableError,
)

logger = logging.getLogger(__name__)


class DefinitionResolver:
    """
    Resolves variables to folded constants by backward proximity search.

    Every statement is resolved at most once. Later lookups that land on
    the same statement reuse its cached value.

    Usage:
        resolver = DefinitionResolver(split_statements(source))
        value = resolver.resolve(len(resolver.program), "output")
    """

    def __init__(
        self,
        program: Program,
        config: Optional[OptimizerConfig] = None,
        index: Optional[DefinitionIndex] = None,
    ) -> None:
        self.program = program
        self.config = config or OptimizerConfig.default()
        self.index = index if index is not None else DefinitionIndex(program)
        self.evaluator = ExpressionEvaluator(self, program.source)
        # statement index -> name being resolved, outermost first
        self._in_progress: dict[int, str] = {}

    def resolve(self, before_index: int, name: str, reference: Optional[Token] = None) -> int:
        """
        Fold the nearest definition of name preceding before_index.

        Args:
            before_index: Only statements with a smaller index are searched
            name: The variable to resolve
            reference: The token that referred to name, for error locations

        Returns:
            The value of the definition's right-hand side

        Raises:
            UnresolvedVariableError: If no earlier statement defines name
            CyclicDefinitionError: If name refers back to a definition that
                is still being resolved
            MalformedStatementError: If the definition has no `=`
        """
        found = self.index.nearest_before(name, before_index)
        if found is None:
            self._unresolved(before_index, name, reference)

        stmt = self.program[found]
        if stmt.is_resolved:
            logger.debug("reusing %s from statement %d = %d", name, found, stmt.value)
            return stmt.value

        self._fold(found, name)
        return stmt.value

    def _fold(self, root: int, name: str) -> None:
        """
        Fold root after every unresolved definition it depends on.

        Dependencies are pushed on an explicit stack and folded first, so
        evaluating a right-hand side only ever reads cached values and the
        length of the def-use chain never shows up as Python recursion.
        """
        pending = [(root, name)]
        tokens: dict[int, list[Token]] = {}
        try:
            while pending:
                index, target = pending[-1]
                stmt = self.program[index]
                if stmt.is_resolved:
                    pending.pop()
                    continue

                if index not in tokens:
                    tokens[index] = self._right_hand_side(stmt, target)
                    stmt.live = True
                    self._in_progress[index] = target
                    dependencies = self._dependencies(index, tokens[index])
                    if dependencies:
                        pending.extend(reversed(dependencies))
                        continue

                value = self.evaluator.evaluate(tokens[index], before_index=index)
                del self._in_progress[index]
                stmt.value = value
                stmt.folded = f"{stmt.text[:stmt.assign_pos + 1]} {value};"
                logger.debug("resolved %s -> statement %d -> %d", target, index, value)
                pending.pop()
        finally:
            for index in tokens:
                self._in_progress.pop(index, None)

    def _right_hand_side(self, stmt: Statement, name: str) -> list[Token]:
        eq = stmt.assign_pos
        if eq == -1:
            raise MalformedStatementError(
                f"Statement defining '{name}' has no '='",
                self.program.location_of(stmt),
                self.program.line_of(stmt),
            )
        return ExpressionLexer(
            self.program.source,
            stmt.offset + eq + 1,
            stmt.offset + len(stmt.text),
            self.program.filename,
        ).tokenize()

    def _dependencies(self, index: int, tokens: list[Token]) -> list[tuple[int, str]]:
        """Unresolved definitions referenced by a right-hand side, in order of use."""
        dependencies: list[tuple[int, str]] = []
        seen: set[int] = set()
        for token in tokens:
            if token.type != TokenType.IDENTIFIER:
                continue
            found = self.index.nearest_before(token.value, index)
            # missing names are reported when the expression is evaluated
            if found is None or found in seen or self.program[found].is_resolved:
                continue
            seen.add(found)
            dependencies.append((found, token.value))
        return dependencies

    def _location(
        self, before_index: int, reference: Optional[Token]
    ) -> tuple[Optional[SourceLocation], Optional[str]]:
        if reference is not None:
            loc = reference.location
            return loc, self.program.line_at(loc.offset)
        if 0 < before_index <= len(self.program):
            stmt = self.program[before_index - 1]
            return self.program.location_of(stmt), self.program.line_of(stmt)
        return None, None

    def _defining_in_progress(self, name: str) -> Optional[int]:
        """Index of an in-progress statement whose target is name."""
        for index in self._in_progress:
            if name in self.program[index].defined_names():
                return index
        return None

    def _unresolved(self, before_index: int, name: str, reference: Optional[Token]) -> NoReturn:
        # `a = a + 1;` with no earlier `a` refers to its own definition
        owner = self._defining_in_progress(name)
        if owner is not None:
            self._cyclic(owner, name, reference)

        location, line = self._location(before_index, reference)
        candidates = [
            candidate
            for candidate in self.index.names_before(before_index)
            if not self.config.is_type_keyword(candidate)
        ]
        suggestion = find_best_match(name, candidates)
        raise UnresolvedVariableError(
            f"Cannot find a definition of '{name}' before statement {before_index + 1}",
            name,
            location,
            line,
            suggestion=suggestion,
        )

    def _cyclic(self, owner: int, name: str, reference: Optional[Token]) -> NoReturn:
        chain = list(self._in_progress)
        cycle = [self._in_progress[index] for index in chain[chain.index(owner):]] + [name]
        location, line = self._location(owner + 1, reference)
        raise CyclicDefinitionError(
            f"Definition of '{name}' in statement {owner + 1} depends on itself",
            name,
            location,
            line,
            cycle=cycle,
        )
