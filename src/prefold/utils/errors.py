"""
Error types and source location tracking for the prefold pass.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Attributes:
        line: 1-indexed line number
        column: 1-indexed column number
        offset: 0-indexed character offset from start of source
        filename: Optional filename for error reporting
    """

    line: int
    column: int
    offset: int = 0
    filename: Optional[str] = None

    @classmethod
    def from_offset(
        cls,
        source: str,
        offset: int,
        filename: Optional[str] = None,
    ) -> "SourceLocation":
        """Compute line and column for a character offset into source."""
        offset = max(0, min(offset, len(source)))
        line = source.count("\n", 0, offset) + 1
        line_start = source.rfind("\n", 0, offset) + 1
        return cls(line=line, column=offset - line_start + 1, offset=offset, filename=filename)

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


class PrefoldError(Exception):
    """Base exception for all prefold errors."""

    code = "P0000"

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> None:
        self.message = message
        self.location = location
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = []

        if self.location:
            parts.append(f"[{self.location}]")

        parts.append(self.message)

        if self.source_line and self.location:
            parts.append(f"\n    {self.source_line}")
            # Add caret pointing to the error column
            padding = " " * (4 + self.location.column - 1)
            parts.append(f"\n{padding}^")

        return " ".join(parts) if not self.source_line else parts[0] + " " + "".join(parts[1:])


class MalformedStatementError(PrefoldError):
    """Raised when a statement or expression does not fit the input grammar."""

    code = "P0001"


class UnresolvedVariableError(PrefoldError):
    """
    Raised when no preceding statement defines a referenced variable.

    Attributes:
        name: The variable that could not be resolved
        suggestion: A similarly named variable defined earlier, if any
    """

    code = "P0002"

    def __init__(
        self,
        message: str,
        name: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.name = name
        self.suggestion = suggestion
        super().__init__(message, location, source_line)


class DivisionByZeroError(PrefoldError):
    """Raised when a divisor evaluates to zero."""

    code = "P0003"


class CyclicDefinitionError(PrefoldError):
    """
    Raised when resolving a variable re-enters its own resolution.

    Attributes:
        name: The variable whose definition refers back to itself
        cycle: Chain of names from the outermost in-progress definition
    """

    code = "P0004"

    def __init__(
        self,
        message: str,
        name: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        cycle: Optional[list[str]] = None,
    ) -> None:
        self.name = name
        self.cycle = cycle or []
        super().__init__(message, location, source_line)

    def _format_message(self) -> str:
        message = super()._format_message()
        if self.cycle:
            message += "\n  Cycle: " + " -> ".join(self.cycle)
        return message


class EmptyProgramError(PrefoldError):
    """Raised when there is nothing to optimize or nothing defines the output symbol."""

    code = "P0005"
