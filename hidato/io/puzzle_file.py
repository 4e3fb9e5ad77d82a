"""Read and write the plain-text Hidato puzzle format.

The first line holds ``height width``. Each following line is one grid row
of whitespace separated tokens: an integer clue, ``0`` for an open cell or
``x`` for a blocked cell.
"""

from __future__ import annotations

from pathlib import Path

from ..solver.state import BLOCKED, Grid, InvalidPuzzleError

BLOCKED_TOKEN = "x"


class PuzzleFormatError(InvalidPuzzleError):
    """Raised when puzzle text cannot be parsed."""


def parse_puzzle(text: str) -> Grid:
    """
    Parse puzzle text into a grid.

    Args:
        text: Puzzle file contents

    Returns:
        List of rows with -1 for blocked cells

    Raises:
        PuzzleFormatError: on a malformed header, short row or bad token
    """
    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        raise PuzzleFormatError("Puzzle text is empty")

    header = lines[0].split()
    if len(header) != 2:
        raise PuzzleFormatError(f"Expected 'height width' header, got {lines[0]!r}")
    try:
        height, width = int(header[0]), int(header[1])
    except ValueError as exc:
        raise PuzzleFormatError(f"Header dimensions must be integers: {lines[0]!r}") from exc
    if height < 1 or width < 1:
        raise PuzzleFormatError(f"Header dimensions must be positive: {lines[0]!r}")

    body = lines[1:]
    if len(body) < height:
        raise PuzzleFormatError(f"Expected {height} rows, found {len(body)}")

    grid: Grid = []
    for r, line in enumerate(body[:height]):
        tokens = line.split()
        if len(tokens) < width:
            raise PuzzleFormatError(f"Row {r} has {len(tokens)} cells, expected {width}")
        grid.append([_parse_token(token, r, c) for c, token in enumerate(tokens[:width])])
    return grid


def _parse_token(token: str, row: int, col: int) -> int:
    if token.lower() == BLOCKED_TOKEN:
        return BLOCKED
    try:
        value = int(token)
    except ValueError as exc:
        raise PuzzleFormatError(f"Unknown token {token!r} at ({row}, {col})") from exc
    if value < 0:
        raise PuzzleFormatError(f"Negative value {value} at ({row}, {col})")
    return value


def load_puzzle(path: str | Path) -> Grid:
    """Read and parse a puzzle file."""
    return parse_puzzle(Path(path).read_text(encoding="utf-8"))


def format_grid(grid: Grid) -> str:
    """Render a grid back into the puzzle text format."""
    height = len(grid)
    width = len(grid[0]) if grid else 0
    cells = [[BLOCKED_TOKEN if v == BLOCKED else str(v) for v in row] for row in grid]
    pad = max((len(cell) for row in cells for cell in row), default=1)
    lines = [f"{height} {width}"]
    lines.extend(" ".join(cell.rjust(pad) for cell in row) for row in cells)
    return "\n".join(lines) + "\n"
