"""Solver-Modul (Local Search mit inkrementellem Score)."""

from .scheduler import TimetableSolver, solve, score, validate_problem
from .manager import SolverJob, SolverManager, SolverStatus, solve_async
from .exceptions import SolverError, ConfigurationError, InvariantViolation

__all__ = [
    "TimetableSolver",
    "solve",
    "solve_async",
    "score",
    "validate_problem",
    "SolverJob",
    "SolverManager",
    "SolverStatus",
    "SolverError",
    "ConfigurationError",
    "InvariantViolation",
]
