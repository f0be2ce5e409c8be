"""
prefold compiler package.

Components, leaves first:
- Statements: splits source at `;` and indexes candidate definitions
- Lexer: tokenizes right-hand-side expressions
- Evaluator: recursive-descent evaluation of expressions to integers
- Resolver: backward search for definitions, liveness and folding
- Synthesizer: re-emits live statements with missing declarations
- Optimizer: the pass driver rooted at the output symbol
"""

from __future__ import annotations

from prefold.compiler.config import OptimizerConfig
from prefold.compiler.diagnostics import (
    Diagnostic,
    DiagnosticSeverity,
    find_best_match,
    find_similar_names,
    format_error,
    levenshtein_distance,
)
from prefold.compiler.evaluator import (
    ExpressionEvaluator,
    evaluate_expression,
    truncating_divide,
)
from prefold.compiler.lexer import ExpressionLexer, tokenize
from prefold.compiler.optimizer import (
    OptimizationResult,
    PreOptimizer,
    optimize_source,
)
from prefold.compiler.resolver import DefinitionResolver
from prefold.compiler.statements import (
    DefinitionIndex,
    Program,
    Statement,
    split_statements,
)
from prefold.compiler.synthesizer import DeclarationSynthesizer
from prefold.compiler.tokens import Token, TokenType
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
    # Pass
    "optimize_source",
    "PreOptimizer",
    "OptimizationResult",
    "OptimizerConfig",
    # Components
    "split_statements",
    "Program",
    "Statement",
    "DefinitionIndex",
    "DefinitionResolver",
    "ExpressionEvaluator",
    "evaluate_expression",
    "truncating_divide",
    "ExpressionLexer",
    "tokenize",
    "Token",
    "TokenType",
    "DeclarationSynthesizer",
    # Diagnostics
    "Diagnostic",
    "DiagnosticSeverity",
    "format_error",
    "levenshtein_distance",
    "find_similar_names",
    "find_best_match",
    # Errors
    "PrefoldError",
    "MalformedStatementError",
    "UnresolvedVariableError",
    "DivisionByZeroError",
    "CyclicDefinitionError",
    "EmptyProgramError",
    "SourceLocation",
]
