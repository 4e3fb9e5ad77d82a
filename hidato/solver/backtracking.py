"""Hidato solver using depth-first backtracking with distance pruning."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .state import (
    UNPLACED,
    Grid,
    GridObserver,
    InvalidPuzzleError,
    Location,
    PuzzleState,
    chebyshev_distance,
)

_LOGGER = logging.getLogger(__name__)

# (round(cos(k * 45deg)), round(sin(k * 45deg))) for k = 0..7 as (row, col)
# offsets. The order decides which solution is found first.
KING_MOVES: Tuple[Location, ...] = (
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
    (-1, 0),
    (-1, -1),
    (0, -1),
    (1, -1),
)


class SearchLimitExceeded(RuntimeError):
    """Raised when a search runs past the step budget set by its driver."""

    def __init__(self, steps: int):
        super().__init__(f"Search stopped after {steps} steps")
        self.steps = steps


@dataclass
class SolveResult:
    solved: bool
    steps: int


class HidatoSolver:
    """Solves a Hidato puzzle in place on a shared PuzzleState."""

    def __init__(self, state: PuzzleState, max_steps: Optional[int] = None):
        self.state = state
        self.max_steps = max_steps
        self.steps = 0
        self.solutions_count = 0

    def solve(self) -> SolveResult:
        """
        Fill every missing value of the puzzle.

        On success the solution is left in the state. On failure the state
        holds only what it held before the call.

        Returns:
            SolveResult with the outcome and the number of explore steps

        Raises:
            SearchLimitExceeded: if ``max_steps`` is set and was reached
        """
        self.steps = 0
        _LOGGER.info("Solving %r", self.state)
        solved = self._explore()
        _LOGGER.info(
            "Search %s after %d steps", "succeeded" if solved else "exhausted", self.steps
        )
        return SolveResult(solved=solved, steps=self.steps)

    def _explore(self) -> bool:
        """Run one recursive search step."""
        self._count_step()

        next_value = self._find_missing_value()
        if next_value is None:
            return True

        end = self._find_next_value(next_value)
        budget = end - next_value
        anchor = self.state.location_of(end)

        for candidate in self._adjacent_cells(next_value - 1):
            if not self._is_viable(candidate, anchor, budget):
                continue
            with self.state.tentative(candidate, next_value) as placement:
                if self._explore():
                    placement.keep()
                    return True

        return False

    def count_solutions(self, max_count: int = 2) -> int:
        """
        Count solutions (up to max_count) without keeping any of them.

        Args:
            max_count: Stop counting after finding this many solutions

        Returns:
            Number of solutions found
        """
        self.steps = 0
        self.solutions_count = 0
        self._count_solutions_recursive(max_count)
        return self.solutions_count

    def _count_solutions_recursive(self, max_count: int) -> None:
        if self.solutions_count >= max_count:
            return
        self._count_step()

        next_value = self._find_missing_value()
        if next_value is None:
            self.solutions_count += 1
            return

        end = self._find_next_value(next_value)
        budget = end - next_value
        anchor = self.state.location_of(end)

        for candidate in self._adjacent_cells(next_value - 1):
            if self.solutions_count >= max_count:
                return
            if not self._is_viable(candidate, anchor, budget):
                continue
            with self.state.tentative(candidate, next_value):
                self._count_solutions_recursive(max_count)

    def _count_step(self) -> None:
        if self.max_steps is not None and self.steps >= self.max_steps:
            raise SearchLimitExceeded(self.steps)
        self.steps += 1

    def _find_missing_value(self) -> Optional[int]:
        """Smallest value that is not on the grid yet, or None when all are."""
        for value in range(1, self.state.highest_value + 1):
            if self.state.location_of(value) is UNPLACED:
                return value
        return None

    def _find_next_value(self, next_value: int) -> int:
        """Smallest placed value at or after next_value (the anchor)."""
        for value in range(next_value, self.state.highest_value + 1):
            if self.state.location_of(value) is not UNPLACED:
                return value
        raise InvalidPuzzleError(
            f"No placed value after {next_value}; "
            f"the highest value {self.state.highest_value} must be a fixed clue"
        )

    def _adjacent_cells(self, start: int) -> List[Location]:
        row, col = self.state.location_of(start)
        return [(row + dr, col + dc) for dr, dc in KING_MOVES]

    def _is_viable(self, candidate: Location, anchor: Location, budget: int) -> bool:
        """
        Check if the next value may go at candidate.

        Args:
            candidate: Cell next to the previous value
            anchor: Location of the nearest placed value ahead
            budget: Number of moves left before reaching the anchor

        Returns:
            True if the cell is open and close enough to the anchor
        """
        return (
            self.state.is_open(candidate)
            and chebyshev_distance(candidate, anchor) <= budget
        )


def solve(
    grid: Grid,
    observers: Iterable[GridObserver] = (),
    max_steps: Optional[int] = None,
) -> Optional[Grid]:
    """Convenience function to solve a Hidato grid."""
    state = PuzzleState.from_rows(grid)
    for observer in observers:
        state.add_observer(observer)
    result = HidatoSolver(state, max_steps=max_steps).solve()
    if result.solved:
        return state.rows()
    return None
