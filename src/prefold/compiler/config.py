"""
Configuration for the pre-optimization pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional

from prefold.compiler.tokens import IDENTIFIER_RE


@dataclass(frozen=True)
class OptimizerConfig:
    """
    Settings that shape how a program is folded and re-declared.

    Example:
        config = OptimizerConfig(filename="prog.txt")
        config = config.with_output("result")
    """

    output_symbol: str = "output"
    type_keywords: tuple[str, ...] = field(default=("int", "bool"))
    default_type: str = "int"
    filename: Optional[str] = None

    def __post_init__(self) -> None:
        if not IDENTIFIER_RE.fullmatch(self.output_symbol):
            raise ValueError(f"Invalid output symbol: {self.output_symbol!r}")
        if not self.type_keywords:
            raise ValueError("At least one type keyword is required")
        if self.default_type not in self.type_keywords:
            raise ValueError(
                f"Default type {self.default_type!r} is not one of {self.type_keywords!r}"
            )

    @classmethod
    def default(cls) -> OptimizerConfig:
        return cls()

    def with_output(self, symbol: str) -> OptimizerConfig:
        """Return a copy rooted at a different output symbol."""
        return replace(self, output_symbol=symbol)

    def is_type_keyword(self, word: str) -> bool:
        return word in self.type_keywords
