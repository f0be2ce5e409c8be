"""
prefold utilities: error types and source locations.
"""

from prefold.utils.errors import (
    CyclicDefinitionError,
    DivisionByZeroError,
    EmptyProgramError,
    MalformedStatementError,
    PrefoldError,
    SourceLocation,
    UnresolvedVariableError,
)

__all__ = [
    "PrefoldError",
    "MalformedStatementError",
    "UnresolvedVariableError",
    "DivisionByZeroError",
    "CyclicDefinitionError",
    "EmptyProgramError",
    "SourceLocation",
]
