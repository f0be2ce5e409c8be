"""
Statement records and the definition index.

A program is cut into statements at every `;`. Each statement keeps its
trimmed text, its offset into the source, and the per-statement state the
resolver writes: the live flag, the folded replacement text and the cached
value. The statement's index in source order is its identity.
"""

from __future__ import annotations

from bisect import bisect_left
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

from prefold.compiler.tokens import IDENTIFIER_RE
from prefold.utils.errors import MalformedStatementError, SourceLocation


def _line_at(source: str, offset: int) -> str:
    start = source.rfind("\n", 0, offset) + 1
    end = source.find("\n", offset)
    if end == -1:
        end = len(source)
    return source[start:end]


@dataclass
class Statement:
    """
    One semicolon-terminated assignment.

    Attributes:
        index: Position in source order
        text: Source text between semicolons, trimmed
        offset: Offset of the first character of text in the source
        live: Whether the statement contributes to the output
        folded: Rewritten statement text, set once when resolved
        value: Evaluated right-hand side, set once when resolved
    """

    index: int
    text: str
    offset: int
    live: bool = False
    folded: Optional[str] = None
    value: Optional[int] = None

    @property
    def assign_pos(self) -> int:
        """Position of the first `=` in text, or -1."""
        return self.text.find("=")

    @property
    def is_resolved(self) -> bool:
        return self.folded is not None

    def defined_names(self) -> list[str]:
        """
        Identifier runs before the first `=`.

        This includes a leading type keyword. A statement without `=`
        contributes every identifier it contains.
        """
        eq = self.assign_pos
        head = self.text if eq == -1 else self.text[:eq]
        return IDENTIFIER_RE.findall(head)


@dataclass
class Program:
    """Ordered statements of one source buffer."""

    source: str
    statements: list[Statement] = field(default_factory=list)
    filename: Optional[str] = None

    def __len__(self) -> int:
        return len(self.statements)

    def __iter__(self) -> Iterator[Statement]:
        return iter(self.statements)

    def __getitem__(self, index: int) -> Statement:
        return self.statements[index]

    @property
    def is_blank(self) -> bool:
        """True when every statement is empty."""
        return not any(stmt.text for stmt in self.statements)

    def live_statements(self) -> list[Statement]:
        return [stmt for stmt in self.statements if stmt.live]

    def location_of(self, stmt: Statement, column: int = 0) -> SourceLocation:
        """Location of a character inside a statement's text."""
        return SourceLocation.from_offset(self.source, stmt.offset + column, self.filename)

    def line_of(self, stmt: Statement, column: int = 0) -> str:
        """Source line containing a character of a statement."""
        return self.line_at(stmt.offset + column)

    def line_at(self, offset: int) -> str:
        return _line_at(self.source, offset)


def split_statements(source: str, filename: Optional[str] = None) -> Program:
    """
    Cut source into statements at each `;`.

    Args:
        source: The full program text
        filename: Optional filename for error reporting

    Returns:
        A Program with one Statement per semicolon

    Raises:
        MalformedStatementError: If the source is empty or ends in a
            non-empty fragment without a terminating `;`
    """
    if not source.strip():
        raise MalformedStatementError("Program is empty", SourceLocation(1, 1, 0, filename))

    program = Program(source=source, filename=filename)
    start = 0
    end = source.find(";", start)

    while end != -1:
        raw = source[start:end]
        text = raw.strip()
        lead = len(raw) - len(raw.lstrip())
        program.statements.append(Statement(index=len(program), text=text, offset=start + lead))
        start = end + 1
        end = source.find(";", start)

    tail = source[start:]
    if tail.strip():
        offset = start + len(tail) - len(tail.lstrip())
        location = SourceLocation.from_offset(source, offset, filename)
        raise MalformedStatementError(
            f"Unterminated statement '{tail.strip()}' (missing ';')",
            location,
            _line_at(source, offset),
        )

    return program


class DefinitionIndex:
    """
    Map from variable name to the statements that may define it.

    Built in one forward pass. Lookups return the nearest candidate that
    precedes a given statement index.
    """

    def __init__(self, statements: Iterable[Statement]) -> None:
        self._positions: dict[str, list[int]] = defaultdict(list)
        for stmt in statements:
            for name in dict.fromkeys(stmt.defined_names()):
                self._positions[name].append(stmt.index)

    def __contains__(self, name: str) -> bool:
        return name in self._positions

    def nearest_before(self, name: str, before_index: int) -> Optional[int]:
        """
        Index of the closest statement before before_index defining name.

        Returns:
            The statement index, or None if no earlier statement matches
        """
        positions = self._positions.get(name)
        if not positions:
            return None
        i = bisect_left(positions, before_index)
        return positions[i - 1] if i else None

    def names_before(self, before_index: int) -> list[str]:
        """All names with at least one candidate before before_index."""
        return [
            name
            for name, positions in self._positions.items()
            if positions and positions[0] < before_index
        ]
