"""Hidato puzzle state: the grid and the value -> location index."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional, Protocol, Tuple

Grid = List[List[int]]
Location = Tuple[int, int]

BLOCKED = -1
EMPTY = 0
UNPLACED: Optional[Location] = None

MIN_GRID_SIZE = 2
DEFAULT_MAX_GRID_SIZE = 20
# The search recurses once per value it places.
MAX_SEARCH_DEPTH = DEFAULT_MAX_GRID_SIZE * DEFAULT_MAX_GRID_SIZE

_LOGGER = logging.getLogger(__name__)


class InvalidPuzzleError(ValueError):
    """Raised when a puzzle grid violates the solver's input preconditions."""


class PlacementError(RuntimeError):
    """Raised when place/remove is called with its preconditions unmet."""


class GridObserver(Protocol):
    """Receives one notification per grid mutation, in mutation order."""

    def cell_filled(self, row: int, col: int, value: int) -> None: ...

    def cell_cleared(self, row: int, col: int) -> None: ...


class Placement:
    """Handle yielded by :meth:`PuzzleState.tentative`."""

    __slots__ = ("location", "value", "kept")

    def __init__(self, location: Location, value: int):
        self.location = location
        self.value = value
        self.kept = False

    def keep(self) -> None:
        """Leave the value in place when the enclosing block exits."""
        self.kept = True


def chebyshev_distance(a: Location, b: Location) -> int:
    """King-move distance between two grid coordinates."""
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


class PuzzleState:
    """Grid contents plus the index of where each value currently sits.

    ``place`` and ``remove`` are the only mutators and always update the
    grid and the index together, then notify observers.
    """

    def __init__(self, grid: Grid, highest_value: int):
        self.height = len(grid)
        self.width = len(grid[0]) if grid else 0
        self.highest_value = highest_value
        self._grid: Grid = [list(row) for row in grid]
        self._index: List[Optional[Location]] = [UNPLACED] * (highest_value + 1)
        self._fixed: frozenset[Location] = frozenset(
            (r, c)
            for r in range(self.height)
            for c in range(self.width)
            if self._grid[r][c] > 0
        )
        for r, c in self._fixed:
            self._index[self._grid[r][c]] = (r, c)
        self._observers: List[GridObserver] = []

    @classmethod
    def from_rows(
        cls, rows: Grid, max_size: int = DEFAULT_MAX_GRID_SIZE
    ) -> "PuzzleState":
        """
        Build a state from raw rows after validating them.

        Args:
            rows: List of rows; positive ints are clues, 0 is open, -1 blocked
            max_size: Largest accepted height or width

        Returns:
            A fresh PuzzleState

        Raises:
            InvalidPuzzleError: if the grid cannot be solved as given
        """
        validate_rows(rows, max_size=max_size)
        highest = max(cell for row in rows for cell in row)
        return cls(rows, highest)

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------
    def add_observer(self, observer: GridObserver) -> None:
        self._observers.append(observer)

    def remove_observer(self, observer: GridObserver) -> None:
        self._observers.remove(observer)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def in_bounds(self, location: Location) -> bool:
        row, col = location
        return 0 <= row < self.height and 0 <= col < self.width

    def is_open(self, location: Location) -> bool:
        """True when the cell is in bounds, not blocked, not fixed and empty."""
        if not self.in_bounds(location):
            return False
        row, col = location
        return self._grid[row][col] == EMPTY

    def is_fixed(self, location: Location) -> bool:
        return location in self._fixed

    def cell(self, location: Location) -> int:
        row, col = location
        return self._grid[row][col]

    def location_of(self, value: int) -> Optional[Location]:
        return self._index[value]

    def rows(self) -> Grid:
        """Copy of the grid as a list of lists."""
        return [list(row) for row in self._grid]

    def snapshot(self) -> Tuple[Tuple[Tuple[int, ...], ...], Tuple[Optional[Location], ...]]:
        return tuple(tuple(row) for row in self._grid), tuple(self._index)

    def is_complete(self) -> bool:
        return all(loc is not UNPLACED for loc in self._index[1:])

    def is_solution(self) -> bool:
        """Check the completeness and adjacency laws on the current grid."""
        if not self.is_complete():
            return False
        for r in range(self.height):
            for c in range(self.width):
                if self._grid[r][c] == EMPTY:
                    return False
        for value in range(1, self.highest_value):
            here = self._index[value]
            there = self._index[value + 1]
            if chebyshev_distance(here, there) != 1:
                return False
        return True

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------
    def place(self, location: Location, value: int) -> None:
        """Put ``value`` at ``location`` and record it in the index."""
        if not 1 <= value <= self.highest_value:
            raise PlacementError(f"value {value} outside 1..{self.highest_value}")
        if self._index[value] is not UNPLACED:
            raise PlacementError(f"value {value} already placed at {self._index[value]}")
        if not self.is_open(location):
            raise PlacementError(f"cell {location} is not open for value {value}")

        row, col = location
        self._grid[row][col] = value
        self._index[value] = location
        for observer in self._observers:
            observer.cell_filled(row, col, value)

    def remove(self, location: Location, value: int) -> None:
        """Clear ``value`` from ``location``; the exact inverse of place."""
        if location in self._fixed:
            raise PlacementError(f"cell {location} holds fixed value {self.cell(location)}")
        if not self.in_bounds(location) or self.cell(location) != value:
            raise PlacementError(f"cell {location} does not hold value {value}")

        row, col = location
        self._grid[row][col] = EMPTY
        self._index[value] = UNPLACED
        for observer in self._observers:
            observer.cell_cleared(row, col)

    @contextmanager
    def tentative(self, location: Location, value: int) -> Iterator[Placement]:
        """Place a value for the duration of a block.

        The value is removed on every exit path, exceptions included,
        unless the block called ``keep()`` on the yielded placement.
        """
        self.place(location, value)
        placement = Placement(location, value)
        try:
            yield placement
        finally:
            if not placement.kept:
                self.remove(location, value)

    def reset(self) -> None:
        """Remove every non-fixed value, leaving only the clues."""
        for value in range(self.highest_value, 0, -1):
            location = self._index[value]
            if location is not UNPLACED and location not in self._fixed:
                self.remove(location, value)

    def __repr__(self):
        placed = sum(1 for loc in self._index[1:] if loc is not UNPLACED)
        return (
            f"PuzzleState({self.height}x{self.width}, "
            f"placed={placed}/{self.highest_value}, fixed={len(self._fixed)})"
        )


def validate_rows(rows: Grid, max_size: int = DEFAULT_MAX_GRID_SIZE) -> None:
    """
    Check that a grid satisfies the solver's input preconditions.

    Args:
        rows: Grid to validate (-1 blocked, 0 open, positive clue)
        max_size: Largest accepted height or width

    Raises:
        InvalidPuzzleError: describing the first problem found
    """
    if not isinstance(rows, list) or not rows:
        raise InvalidPuzzleError("Grid must be a non-empty list of rows")

    height = len(rows)
    width = len(rows[0]) if isinstance(rows[0], list) else 0
    if not MIN_GRID_SIZE <= height <= max_size:
        raise InvalidPuzzleError(
            f"Grid height out of bounds: {height} (expected {MIN_GRID_SIZE}..{max_size})"
        )
    if not MIN_GRID_SIZE <= width <= max_size:
        raise InvalidPuzzleError(
            f"Grid width out of bounds: {width} (expected {MIN_GRID_SIZE}..{max_size})"
        )

    seen: dict[int, Location] = {}
    playable = 0
    for r, row in enumerate(rows):
        if not isinstance(row, list) or len(row) != width:
            raise InvalidPuzzleError(f"Row {r} does not have {width} cells")
        for c, cell in enumerate(row):
            if not isinstance(cell, int) or isinstance(cell, bool) or cell < BLOCKED:
                raise InvalidPuzzleError(f"Invalid cell value {cell!r} at ({r}, {c})")
            if cell == BLOCKED:
                continue
            playable += 1
            if cell == EMPTY:
                continue
            if cell in seen:
                raise InvalidPuzzleError(
                    f"Value {cell} appears at both {seen[cell]} and {(r, c)}"
                )
            seen[cell] = (r, c)

    if 1 not in seen:
        raise InvalidPuzzleError("Value 1 must be given as a fixed clue")

    highest = max(seen)
    if playable > highest:
        raise InvalidPuzzleError(
            f"Grid has {playable} playable cells but the highest clue is {highest}; "
            "the final value must be given as a fixed clue"
        )
    if playable > MAX_SEARCH_DEPTH:
        raise InvalidPuzzleError(
            f"Grid has {playable} playable cells; at most {MAX_SEARCH_DEPTH} can be searched"
        )
    _LOGGER.debug(
        "Validated %dx%d grid: %d clues, %d playable cells, highest value %d",
        height, width, len(seen), playable, highest,
    )
