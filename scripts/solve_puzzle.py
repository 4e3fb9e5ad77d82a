"""Solve a Hidato puzzle file from the command line, optionally animated."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from hidato.io.puzzle_file import format_grid, load_puzzle
from hidato.render.grid_image import GridRenderer
from hidato.solver.backtracking import HidatoSolver, SearchLimitExceeded
from hidato.solver.state import DEFAULT_MAX_GRID_SIZE, InvalidPuzzleError, PuzzleState
from hidato.solver.trace import SearchTraceLogger

LOGGER = logging.getLogger("solve_puzzle")

EXIT_SOLVED = 0
EXIT_NOT_SOLVED = 1
EXIT_BAD_INPUT = 2


@dataclass
class SolveConfig:
    puzzle_file: Path
    delay_ms: int = 0
    show: bool = False
    output: Optional[Path] = None
    max_steps: Optional[int] = None
    max_grid_size: int = DEFAULT_MAX_GRID_SIZE
    debug: bool = False


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        force=True,
    )


def _parse_args(argv: Optional[list[str]] = None) -> SolveConfig:
    parser = argparse.ArgumentParser(description="Solve a Hidato puzzle file")
    parser.add_argument("puzzle_file", type=Path, help="Puzzle text file")
    parser.add_argument(
        "delay_ms",
        type=int,
        nargs="?",
        default=0,
        help="Milliseconds to hold each search step when animating (--show)",
    )
    parser.add_argument("--show", action="store_true", help="Animate the search in a window")
    parser.add_argument("--output", type=Path, help="Write the final grid image (PNG)")
    parser.add_argument(
        "--max-steps",
        type=int,
        default=None,
        help="Give up after this many search steps (default: run to completion)",
    )
    parser.add_argument(
        "--max-grid-size",
        type=int,
        default=int(os.getenv("HIDATO_MAX_GRID_SIZE", str(DEFAULT_MAX_GRID_SIZE))),
    )
    parser.add_argument("--debug", action="store_true", help="Log every placement")
    args = parser.parse_args(argv)

    return SolveConfig(
        puzzle_file=args.puzzle_file,
        delay_ms=args.delay_ms,
        show=args.show,
        output=args.output,
        max_steps=args.max_steps,
        max_grid_size=args.max_grid_size,
        debug=args.debug,
    )


def run(config: SolveConfig) -> int:
    _configure_logging(config.debug)

    try:
        rows = load_puzzle(config.puzzle_file)
        state = PuzzleState.from_rows(rows, max_size=config.max_grid_size)
    except OSError as exc:
        LOGGER.error("The file %s cannot be opened for input: %s", config.puzzle_file, exc)
        return EXIT_BAD_INPUT
    except InvalidPuzzleError as exc:
        LOGGER.error("Invalid puzzle %s: %s", config.puzzle_file, exc)
        return EXIT_BAD_INPUT

    renderer = None
    if config.show or config.output:
        renderer = GridRenderer.from_state(
            state,
            delay_ms=config.delay_ms,
            window_name="Hidato" if config.show else None,
        )
        renderer.draw()
        state.add_observer(renderer)
    if config.debug:
        state.add_observer(SearchTraceLogger())

    solver = HidatoSolver(state, max_steps=config.max_steps)
    try:
        return _report(solver, state)
    finally:
        if renderer is not None:
            if config.output:
                renderer.save(str(config.output))
            renderer.close()


def _report(solver: HidatoSolver, state: PuzzleState) -> int:
    try:
        result = solver.solve()
    except SearchLimitExceeded as exc:
        print(f"Gave up: {exc}")
        return EXIT_NOT_SOLVED

    if result.solved:
        print("The Hidato puzzle has been solved!")
        print(f"It took {result.steps} steps to solve!")
        print(format_grid(state.rows()), end="")
    else:
        print("The Hidato puzzle has not been solved!")
        print(f"{result.steps} steps have been taken")

    return EXIT_SOLVED if result.solved else EXIT_NOT_SOLVED


def main(argv: Optional[list[str]] = None) -> int:
    config = _parse_args(argv)
    return run(config)


if __name__ == "__main__":
    raise SystemExit(main())
