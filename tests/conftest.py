"""
Pytest configuration and shared fixtures for prefold tests.
"""

import pytest

from prefold.compiler.config import OptimizerConfig
from prefold.compiler.evaluator import ExpressionEvaluator
from prefold.compiler.optimizer import PreOptimizer
from prefold.compiler.resolver import DefinitionResolver
from prefold.compiler.statements import Program, split_statements


@pytest.fixture
def program_factory():
    """Factory fixture for splitting source into a Program."""

    def _create_program(source: str, filename: str = "test.pf") -> Program:
        return split_statements(source, filename)

    return _create_program


@pytest.fixture
def resolver_factory(program_factory):
    """Factory fixture for creating resolvers over a program."""

    def _create_resolver(source: str) -> DefinitionResolver:
        return DefinitionResolver(program_factory(source))

    return _create_resolver


@pytest.fixture
def evaluate():
    """Fixture to evaluate a standalone expression with no variables."""

    def _evaluate(expression: str) -> int:
        return ExpressionEvaluator(source=expression).evaluate_text(expression)

    return _evaluate


@pytest.fixture
def optimize():
    """Fixture to run the whole pass and return the folded text."""

    def _optimize(source: str, config: OptimizerConfig | None = None) -> str:
        return PreOptimizer(source, config).optimize()

    return _optimize


@pytest.fixture
def run_optimizer():
    """Fixture to run the whole pass and return the full result."""

    def _run(source: str, config: OptimizerConfig | None = None):
        return PreOptimizer(source, config).run()

    return _run
