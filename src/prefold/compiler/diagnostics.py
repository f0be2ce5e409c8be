"""
Rust-like diagnostics for prefold errors.

Turns a PrefoldError into a report with source context:

    error[P0002]: cannot find value `cout` before statement 3
      --> prog.txt:3:10
       |
     3 | output = cout * 2
       |          ^^^^
       |
       = help: did you mean `count`?

Name suggestions use Levenshtein distance over the names defined earlier
in the program.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from prefold.utils.errors import (
    CyclicDefinitionError,
    PrefoldError,
    SourceLocation,
    UnresolvedVariableError,
)


class DiagnosticSeverity(Enum):
    """Severity level for diagnostic messages."""

    ERROR = "error"

    def color_code(self) -> str:
        """ANSI color used for the header and underline."""
        return "\033[91m"  # red

    @property
    def label(self) -> str:
        return self.value


@dataclass
class Diagnostic:
    """
    A diagnostic message with source context.

    Attributes:
        severity: The severity level
        code: Error code like "P0002"
        message: The primary diagnostic message
        location: Source location where the diagnostic occurred
        length: Number of characters to underline
        suggestion: Optional "did you mean X?" text
        notes: Extra notes rendered after the source context
    """

    severity: DiagnosticSeverity
    code: str
    message: str
    location: Optional[SourceLocation] = None
    length: int = 1
    suggestion: Optional[str] = None
    notes: list[str] = field(default_factory=list)

    @classmethod
    def from_error(cls, error: PrefoldError) -> "Diagnostic":
        """Build an error diagnostic from a raised PrefoldError."""
        diag = cls(
            severity=DiagnosticSeverity.ERROR,
            code=error.code,
            message=error.message,
            location=error.location,
        )
        if isinstance(error, (UnresolvedVariableError, CyclicDefinitionError)):
            diag.length = max(1, len(error.name))
        if isinstance(error, UnresolvedVariableError) and error.suggestion:
            diag.suggestion = f"did you mean `{error.suggestion}`?"
        if isinstance(error, CyclicDefinitionError) and error.cycle:
            diag.notes.append("cycle: " + " -> ".join(error.cycle))
        return diag

    def format(self, source: str, use_color: bool = False) -> str:
        """
        Format the diagnostic against the program source.

        Args:
            source: The full program text the location refers to
            use_color: Whether to use ANSI color codes

        Returns:
            Formatted multi-line string
        """
        reset = "\033[0m" if use_color else ""
        bold = "\033[1m" if use_color else ""
        blue = "\033[94m" if use_color else ""
        green = "\033[92m" if use_color else ""
        severity_color = self.severity.color_code() if use_color else ""

        lines = [
            f"{severity_color}{bold}{self.severity.label}[{self.code}]{reset}: "
            f"{bold}{self.message}{reset}"
        ]

        src_lines = source.splitlines()
        if self.location:
            loc = self.location
            lines.append(f"  {blue}-->{reset} {loc.filename or '<input>'}:{loc.line}:{loc.column}")

            if 1 <= loc.line <= len(src_lines):
                lines.append(f"   {blue}|{reset}")
                lines.append(f"{blue}{loc.line:3} |{reset} {src_lines[loc.line - 1]}")
                padding = " " * (loc.column - 1)
                underline = "^" * self.length
                lines.append(f"   {blue}|{reset} {padding}{severity_color}{underline}{reset}")
                lines.append(f"   {blue}|{reset}")

        if self.suggestion:
            lines.append(f"   {blue}={reset} {green}help:{reset} {self.suggestion}")

        for note in self.notes:
            lines.append(f"   {blue}={reset} {bold}note:{reset} {note}")

        return "\n".join(lines)


# =============================================================================
# Levenshtein Distance for "Did you mean?" Suggestions
# =============================================================================


def levenshtein_distance(s1: str, s2: str) -> int:
    """
    Calculate the Levenshtein (edit) distance between two strings.

    Example:
        >>> levenshtein_distance("count", "cout")
        1
    """
    if len(s1) < len(s2):
        return levenshtein_distance(s2, s1)

    if len(s2) == 0:
        return len(s1)

    # Wagner-Fischer with O(n) space
    previous_row = list(range(len(s2) + 1))

    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def find_similar_names(
    name: str,
    candidates: list[str],
    max_distance: int = 2,
    max_suggestions: int = 3,
) -> list[str]:
    """
    Find similar names from a list of candidates, closest first.

    Example:
        >>> find_similar_names("cout", ["count", "total", "output"])
        ['count']
    """
    scored: list[tuple[int, str]] = []
    for candidate in candidates:
        if candidate == name or abs(len(candidate) - len(name)) > max_distance:
            continue

        distance = levenshtein_distance(name.lower(), candidate.lower())
        if distance <= max_distance:
            scored.append((distance, candidate))

    scored.sort(key=lambda x: (x[0], x[1]))

    return [candidate for _, candidate in scored[:max_suggestions]]


def find_best_match(name: str, candidates: list[str], max_distance: int = 2) -> Optional[str]:
    """Find the single best matching name, or None if nothing is close enough."""
    similar = find_similar_names(name, candidates, max_distance, 1)
    return similar[0] if similar else None


def format_error(error: PrefoldError, source: str, use_color: bool = False) -> str:
    """
    Format a raised error with source context.

    Convenience wrapper around Diagnostic.from_error().format().
    """
    return Diagnostic.from_error(error).format(source, use_color=use_color)


__all__ = [
    "DiagnosticSeverity",
    "Diagnostic",
    "levenshtein_distance",
    "find_similar_names",
    "find_best_match",
    "format_error",
]
