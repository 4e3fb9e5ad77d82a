"""Solver module exports."""

from .backtracking import HidatoSolver, SearchLimitExceeded, SolveResult, solve
from .state import InvalidPuzzleError, PlacementError, PuzzleState

__all__ = [
    "HidatoSolver",
    "SearchLimitExceeded",
    "SolveResult",
    "solve",
    "InvalidPuzzleError",
    "PlacementError",
    "PuzzleState",
]
