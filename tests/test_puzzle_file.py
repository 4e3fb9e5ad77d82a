"""Tests for reading and writing puzzle text files."""

from pathlib import Path

import pytest

from hidato.io.puzzle_file import PuzzleFormatError, format_grid, load_puzzle, parse_puzzle
from hidato.solver.state import InvalidPuzzleError

PUZZLE_DIR = Path(__file__).resolve().parents[1] / "puzzles"


def test_parse_tokens():
    grid = parse_puzzle("2 3\n1 0 x\nX 0 4\n")
    assert grid == [[1, 0, -1], [-1, 0, 4]]


def test_blank_lines_and_extra_tokens_ignored():
    grid = parse_puzzle("\n2 2\n\n1 0 7\n0 4\n\n")
    assert grid == [[1, 0], [0, 4]]


def test_load_bundled_puzzle():
    grid = load_puzzle(PUZZLE_DIR / "rosetta.txt")
    assert len(grid) == 8
    assert all(len(row) == 8 for row in grid)
    assert grid[4][6] == 1
    assert grid[3][4] == 40
    assert grid[0][7] == -1


def test_format_grid_parses_back():
    grid = [[1, 0, -1], [12, 0, 4]]
    text = format_grid(grid)
    assert text.splitlines()[0] == "2 3"
    assert text.splitlines()[1] == " 1  0  x"
    assert parse_puzzle(text) == grid


@pytest.mark.parametrize(
    "text, match",
    [
        ("", "empty"),
        ("3\n1 0 0\n", "header"),
        ("a b\n1 0\n", "integers"),
        ("0 2\n", "positive"),
        ("2 2\n1 0\n", "Expected 2 rows"),
        ("2 2\n1 0\n4\n", "Row 1"),
        ("2 2\n1 ?\n0 4\n", "Unknown token"),
        ("2 2\n1 -3\n0 4\n", "Negative"),
    ],
)
def test_malformed_text(text, match):
    with pytest.raises(PuzzleFormatError, match=match):
        parse_puzzle(text)


def test_format_error_is_an_invalid_puzzle():
    assert issubclass(PuzzleFormatError, InvalidPuzzleError)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_puzzle(tmp_path / "nope.txt")
