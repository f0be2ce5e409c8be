"""
Unit tests for error types and diagnostic formatting.
"""

import pytest

from prefold.compiler.diagnostics import (
    Diagnostic,
    DiagnosticSeverity,
    find_best_match,
    find_similar_names,
    format_error,
    levenshtein_distance,
)
from prefold.compiler.optimizer import optimize_source
from prefold.utils.errors import (
    CyclicDefinitionError,
    DivisionByZeroError,
    EmptyProgramError,
    MalformedStatementError,
    PrefoldError,
    SourceLocation,
    UnresolvedVariableError,
)


class TestSourceLocation:
    """Tests for SourceLocation."""

    def test_str_without_filename(self):
        assert str(SourceLocation(3, 7)) == "3:7"

    def test_str_with_filename(self):
        assert str(SourceLocation(3, 7, filename="a.pf")) == "a.pf:3:7"

    def test_from_offset(self):
        """Offsets are converted to 1-indexed line and column."""
        loc = SourceLocation.from_offset("ab\ncde", 4)
        assert (loc.line, loc.column, loc.offset) == (2, 2, 4)

    def test_from_offset_clamps(self):
        """Offsets past the end clamp to the end of the source."""
        loc = SourceLocation.from_offset("abc", 99)
        assert loc.offset == 3


class TestErrors:
    """Tests for the error hierarchy."""

    @pytest.mark.parametrize(
        "error_class,code",
        [
            (MalformedStatementError, "P0001"),
            (DivisionByZeroError, "P0003"),
            (EmptyProgramError, "P0005"),
        ],
    )
    def test_codes(self, error_class, code):
        """Each error kind has a stable code."""
        error = error_class("boom")
        assert isinstance(error, PrefoldError)
        assert error.code == code

    def test_message_with_caret(self):
        """Errors with a source line point at the column."""
        error = MalformedStatementError("bad", SourceLocation(1, 3), "x = $;")
        assert str(error) == "[1:3] bad\n    x = $;\n      ^"

    def test_unresolved_attributes(self):
        error = UnresolvedVariableError("missing", "cout", suggestion="count")
        assert error.code == "P0002"
        assert error.name == "cout"
        assert error.suggestion == "count"

    def test_cycle_in_message(self):
        """Cyclic errors list the chain of names."""
        error = CyclicDefinitionError("cycle", "a", cycle=["a", "a"])
        assert error.code == "P0004"
        assert "Cycle: a -> a" in str(error)


class TestSimilarity:
    """Tests for name suggestions."""

    def test_levenshtein(self):
        assert levenshtein_distance("count", "cout") == 1
        assert levenshtein_distance("", "abc") == 3
        assert levenshtein_distance("same", "same") == 0

    def test_similar_names_sorted(self):
        """Closest names come first."""
        assert find_similar_names("total", ["tita", "totals", "x"]) == ["totals", "tita"]

    def test_exact_name_excluded(self):
        """The name itself is never suggested."""
        assert find_best_match("x", ["x"]) is None

    def test_best_match(self):
        assert find_best_match("cout", ["count", "output"]) == "count"
        assert find_best_match("zzz", ["count"]) is None


class TestFormatError:
    """Tests for Rust-style error reports."""

    def test_unresolved_report(self):
        """The report shows location, source line, underline and help."""
        source = "int count = 3;\noutput = cout * 2;"
        with pytest.raises(UnresolvedVariableError) as exc_info:
            optimize_source(source)
        report = format_error(exc_info.value, source)
        assert report.splitlines() == [
            "error[P0002]: Cannot find a definition of 'cout' before statement 2",
            "  --> <input>:2:10",
            "   |",
            "  2 | output = cout * 2;",
            "   |          ^^^^",
            "   |",
            "   = help: did you mean `count`?",
        ]

    def test_cycle_note(self):
        """Cyclic definitions add a note with the chain."""
        source = "a = a + 1; output = a;"
        with pytest.raises(CyclicDefinitionError) as exc_info:
            optimize_source(source)
        report = format_error(exc_info.value, source)
        assert report.startswith("error[P0004]:")
        assert report.endswith("= note: cycle: a -> a")

    def test_without_location(self):
        """Errors without a location render only the header."""
        diag = Diagnostic.from_error(EmptyProgramError("nothing"))
        assert diag.format("") == "error[P0005]: nothing"

    def test_color(self):
        """Color output wraps the header in ANSI codes."""
        diag = Diagnostic(DiagnosticSeverity.ERROR, "P0001", "bad")
        assert "\033[91m" in diag.format("", use_color=True)
