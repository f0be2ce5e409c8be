"""
prefold - constant folding and dead-code elimination for a tiny
assignment language.

Runs ahead of the compiler front end: every value reachable from the
`output` symbol is folded to a literal and statements that do not
contribute to it are dropped.
"""

from prefold.compiler import optimize_source
from prefold.compiler.config import OptimizerConfig
from prefold.compiler.optimizer import OptimizationResult, PreOptimizer

__version__ = "0.1.0"
__all__ = [
    "optimize_source",
    "PreOptimizer",
    "OptimizationResult",
    "OptimizerConfig",
]
