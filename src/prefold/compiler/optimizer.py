"""
Output-rooted constant folding and dead-code elimination.

The pass runs before the front end proper. It splits the program into
statements, resolves the output symbol backward through the statements
it depends on, and emits only those statements with their right-hand
sides folded to integer literals:

    int y = 99;                      int x = 5;
    int x = 5;            ==>        int output = 10;
    output = x * 2;

Any error aborts the pass; no partial output is produced.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from prefold.compiler.config import OptimizerConfig
from prefold.compiler.resolver import DefinitionResolver
from prefold.compiler.statements import DefinitionIndex, Program, split_statements
from prefold.compiler.synthesizer import DeclarationSynthesizer
from prefold.utils.errors import EmptyProgramError, SourceLocation

logger = logging.getLogger(__name__)


@dataclass
class OptimizationResult:
    """
    Outcome of one optimization run.

    Attributes:
        code: The folded program text
        value: The folded value of the output symbol
        kept: Indices of the statements that survived, in source order
        removed: Indices of the non-empty statements that were dropped
        declared: Names that received a synthesized declaration
    """

    code: str
    value: int
    kept: list[int] = field(default_factory=list)
    removed: list[int] = field(default_factory=list)
    declared: list[str] = field(default_factory=list)

    @property
    def statements_removed(self) -> int:
        return len(self.removed)


class PreOptimizer:
    """
    Folds a whole program down to the statements the output depends on.

    Usage:
        optimizer = PreOptimizer("int x = 5; output = x * 2;")
        code = optimizer.optimize()
    """

    def __init__(self, source: str, config: Optional[OptimizerConfig] = None) -> None:
        self.source = source
        self.config = config or OptimizerConfig.default()
        self.program: Optional[Program] = None

    def optimize(self) -> str:
        """Run the pass and return the folded program text."""
        return self.run().code

    def run(self) -> OptimizationResult:
        """
        Run the pass.

        Raises:
            MalformedStatementError: If the program does not fit the grammar
            EmptyProgramError: If nothing defines the output symbol
            UnresolvedVariableError: If a referenced variable has no definition
            CyclicDefinitionError: If a definition depends on itself
            DivisionByZeroError: If a divisor folds to zero
        """
        program = split_statements(self.source, self.config.filename)
        self.program = program
        logger.debug("split %d statements", len(program))

        output = self.config.output_symbol
        if program.is_blank:
            raise EmptyProgramError(
                "Program contains no statements",
                SourceLocation(1, 1, 0, self.config.filename),
            )

        index = DefinitionIndex(program)
        if index.nearest_before(output, len(program)) is None:
            raise EmptyProgramError(
                f"No statement assigns '{output}'",
                SourceLocation(1, 1, 0, self.config.filename),
            )

        resolver = DefinitionResolver(program, self.config, index)
        value = resolver.resolve(len(program), output)

        synthesizer = DeclarationSynthesizer(self.config)
        code = synthesizer.synthesize(program)

        kept = [stmt.index for stmt in program if stmt.live]
        removed = [stmt.index for stmt in program if stmt.text and not stmt.live]
        logger.info("kept %d statements, removed %d", len(kept), len(removed))

        return OptimizationResult(
            code=code,
            value=value,
            kept=kept,
            removed=removed,
            declared=list(synthesizer.synthesized),
        )


def optimize_source(source: str, config: Optional[OptimizerConfig] = None) -> str:
    """
    Convenience function to fold a program.

    Args:
        source: Program text of semicolon-terminated assignments
        config: Optional optimizer settings

    Returns:
        The folded program text
    """
    return PreOptimizer(source, config).optimize()
