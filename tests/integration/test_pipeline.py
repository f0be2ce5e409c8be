"""
Integration tests for the whole folding pass.

These tests run complete programs through the pass and check the text
handed to the downstream front end.
"""

import pytest

from prefold import OptimizerConfig, optimize_source
from prefold.utils.errors import (
    CyclicDefinitionError,
    DivisionByZeroError,
    UnresolvedVariableError,
)


class TestFolding:
    """Programs folded to constants."""

    def test_single_expression(self, optimize):
        """A lone output is folded and declared."""
        assert optimize("output = 2 + 3 * 4;") == "int output = 14;"

    def test_propagates_through_variable(self, optimize):
        """A typed variable is kept and its use folded."""
        assert optimize("int x = 5; output = x * 2;") == "int x = 5;\nint output = 10;"

    def test_boolean_literal(self, optimize):
        """Boolean literals fold to integers."""
        assert optimize("output = true;") == "int output = 1;"

    def test_boolean_variable(self, optimize):
        """bool declarations are kept with their folded value."""
        source = "bool flag = 3 > 2; output = flag * 7;"
        assert optimize(source) == "bool flag = 1;\nint output = 7;"

    def test_comparisons_feed_arithmetic(self, optimize):
        """Relational results are ordinary integers."""
        source = "int a = 4; int b = a >= 4; output = (b + 1) * (a != 4);"
        assert optimize(source) == "int a = 4;\nint b = 1;\nint output = 0;"

    def test_multiline_source(self, optimize):
        """Newlines and indentation in the input are normalised."""
        source = """
            int width = 6;
            int height =
                width - 2;
            output = width * height;
        """
        assert optimize(source) == "int width = 6;\nint height = 4;\nint output = 24;"

    def test_long_def_use_chain(self, optimize):
        """Hundreds of chained definitions fold without exhausting the stack."""
        links = 600
        chain = " ".join(f"x{i} = x{i - 1} + 1;" for i in range(1, links))
        code = optimize(f"int x0 = 0; {chain} output = x{links - 1} * 2;")
        lines = code.split("\n")
        assert len(lines) == links + 1
        assert lines[0] == "int x0 = 0;"
        assert lines[1] == "int x1 = 1;"
        assert lines[-1] == f"int output = {2 * (links - 1)};"


class TestDeadCode:
    """Statements that do not reach output are dropped."""

    def test_dead_store(self, optimize):
        """An unused declaration is removed."""
        assert optimize("int y = 99; int x = 5; output = x;") == "int x = 5;\nint output = 5;"

    def test_overwritten_value(self, optimize):
        """A value overwritten before use is removed."""
        assert optimize("x = 1; x = 2; output = x;") == "int x = 2;\nint output = 2;"

    def test_assignment_after_output(self, optimize):
        """Statements after the final output assignment are removed."""
        source = "int x = 1; output = x; x = 7;"
        assert optimize(source) == "int x = 1;\nint output = 1;"

    def test_dead_code_with_errors_ignored(self, optimize):
        """Dead statements are never evaluated."""
        source = "int junk = 1 / 0; int x = 3; output = x;"
        assert optimize(source) == "int x = 3;\nint output = 3;"

    def test_dropped_declaration_is_resynthesized(self, optimize):
        """Removing a typed statement moves the declaration to the kept one."""
        source = "int x = 1; x = 10; output = x + 1;"
        assert optimize(source) == "int x = 10;\nint output = 11;"


class TestDeclarations:
    """Declaration synthesis across a program."""

    def test_declared_once_with_reassignments(self, optimize):
        """Only the first kept assignment of a variable is declared."""
        source = "x = 1; x = x + 1; x = x * 3; output = x;"
        assert optimize(source) == "int x = 1;\nx = 2;\nx = 6;\nint output = 6;"

    def test_typed_output_kept(self, optimize):
        """A typed output statement needs no synthesized prefix."""
        assert optimize("int output = 1 + 1;") == "int output = 2;"

    def test_synthesized_names_reported(self, run_optimizer):
        """Each synthesized declaration is reported once."""
        result = run_optimizer("a = 1; b = a; a = a + b; output = a;")
        assert result.declared == ["a", "b", "output"]


class TestIdempotence:
    """Folded, dead-code-free programs are fixed points of the pass."""

    @pytest.mark.parametrize(
        "source",
        [
            "output = 2 + 3 * 4;",
            "int y = 99; int x = 5; output = x;",
            "x = 1; x = x + 1; output = x * 2;",
            "bool b = 1 < 2; output = b;",
            "output = -7 / 2;",
        ],
    )
    def test_fixed_point(self, optimize, source):
        """A second run leaves only the output, which then stays unchanged."""
        twice = optimize(optimize(source))
        assert "\n" not in twice
        assert optimize(twice) == twice

    def test_already_folded_program(self, optimize):
        """A folded, dead-code-free program is returned as-is."""
        folded = "int output = 10;"
        assert optimize(folded) == folded

    def test_folded_constants_become_dead(self, optimize):
        """Once output is a literal, the constants it used are no longer needed."""
        assert optimize("int x = 5;\nint output = 10;") == "int output = 10;"


class TestFailures:
    """Programs the pass rejects."""

    def test_cyclic_definition(self, optimize):
        """A self-referential definition fails instead of looping."""
        with pytest.raises(CyclicDefinitionError):
            optimize("a = a + 1; output = a;")

    def test_division_by_zero(self, optimize):
        """Dividing by zero on the output path fails."""
        with pytest.raises(DivisionByZeroError):
            optimize("output = 1 / 0;")

    def test_division_by_folded_zero(self, optimize):
        """A divisor that folds to zero through variables fails."""
        with pytest.raises(DivisionByZeroError):
            optimize("int z = 3 - 3; output = 10 / z;")

    def test_use_before_definition(self, optimize):
        """Definitions after the use do not count."""
        with pytest.raises(UnresolvedVariableError):
            optimize("output = x; int x = 1;")


def test_package_level_api():
    """The package root exposes the pass and its configuration."""
    config = OptimizerConfig(filename="main.pf")
    assert optimize_source("int x = 2; output = x;", config) == "int x = 2;\nint output = 2;"
