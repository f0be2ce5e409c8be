"""
Declaration synthesizer.

Assembles the folded program from the live statements. Dropping dead
statements can remove a variable's only typed declaration, so a bare
reassignment whose target has not been declared yet gets the default type
prefixed to it.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from prefold.compiler.config import OptimizerConfig
from prefold.compiler.statements import Statement
from prefold.compiler.tokens import IDENTIFIER_RE

logger = logging.getLogger(__name__)


class DeclarationSynthesizer:
    """
    Joins folded statements and inserts missing type declarations.

    Only the assignment target is checked against the declared set, so a
    name that merely appears elsewhere on the line never suppresses a
    declaration.
    """

    def __init__(self, config: Optional[OptimizerConfig] = None) -> None:
        self.config = config or OptimizerConfig.default()
        self.declared: set[str] = set()
        self.synthesized: list[str] = []

    def synthesize(self, statements: Iterable[Statement]) -> str:
        """
        Build the output text from live statements in source order.

        Args:
            statements: Statements of the program; dead ones are skipped

        Returns:
            The rewritten statements joined by single newlines
        """
        self.declared = set()
        self.synthesized = []
        lines = [
            self.declare(stmt.folded)
            for stmt in statements
            if stmt.live and stmt.folded is not None
        ]
        return "\n".join(lines)

    def declare(self, text: str) -> str:
        """Rewrite one folded statement, recording what it declares."""
        if text.startswith("\n"):
            text = text[1:]

        eq = text.find("=")
        head = text if eq == -1 else text[:eq]
        words = head.split()

        for position, word in enumerate(words):
            if self.config.is_type_keyword(word):
                if position + 1 < len(words):
                    self.declared.add(words[position + 1])
                return text

        match = IDENTIFIER_RE.search(head)
        if match is None or match.group() in self.declared:
            return text

        target = match.group()
        self.declared.add(target)
        self.synthesized.append(target)
        logger.debug("synthesized %s declaration for %s", self.config.default_type, target)
        return f"{self.config.default_type} {text}"
