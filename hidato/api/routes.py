"""API routes for the Hidato solver application."""

from __future__ import annotations

import logging
import os
from typing import TypeVar

from fastapi import APIRouter, HTTPException

from ..models.schemas import (
    HealthResponse,
    RenderRequest,
    RenderResponse,
    SolveRequest,
    SolveResponse,
)
from ..render.grid_image import GridRenderer, image_to_base64
from ..solver.backtracking import HidatoSolver, SearchLimitExceeded
from ..solver.state import DEFAULT_MAX_GRID_SIZE, InvalidPuzzleError, PuzzleState

router = APIRouter()
_LOGGER = logging.getLogger(__name__)

_T = TypeVar("_T", int, float)

DEFAULT_MAX_STEPS = 2_000_000


def _env(name: str, default: _T) -> _T:
    """Read an environment variable, converting to the same type as *default*."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return type(default)(raw)
    except (TypeError, ValueError):
        return default


def _max_grid_size() -> int:
    return _env("HIDATO_MAX_GRID_SIZE", DEFAULT_MAX_GRID_SIZE)


def _max_steps() -> int:
    return _env("HIDATO_MAX_STEPS", DEFAULT_MAX_STEPS)


def _check_unique() -> bool:
    return _env("HIDATO_CHECK_UNIQUE", 1) != 0


def check_config() -> str | None:
    """Return a description of the first invalid setting, or None."""
    if _max_grid_size() < 2:
        return f"HIDATO_MAX_GRID_SIZE must be at least 2, got {_max_grid_size()}"
    if _max_steps() < 1:
        return f"HIDATO_MAX_STEPS must be positive, got {_max_steps()}"
    return None


def _is_unique(grid: list[list[int]]) -> bool | None:
    """Whether the puzzle has exactly one solution; None if the budget ran out."""
    state = PuzzleState.from_rows(grid, max_size=_max_grid_size())
    try:
        return HidatoSolver(state, max_steps=_max_steps()).count_solutions(max_count=2) == 1
    except SearchLimitExceeded:
        _LOGGER.info("Uniqueness check stopped by the step budget")
        return None


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        max_grid_size=_max_grid_size(),
        max_steps=_max_steps(),
    )


@router.post("/api/v1/hidato:solve", response_model=SolveResponse, tags=["Hidato"])
async def solve_hidato(request: SolveRequest):
    """
    Solve a Hidato puzzle from a JSON grid.

    Expected JSON format:
    {
        "grid": {
            "cells": [[row1], [row2], ...]
        }
    }
    Where each cell is a clue, 0 for an open cell or -1 for a blocked cell.
    """
    grid = request.grid.cells
    try:
        state = PuzzleState.from_rows(grid, max_size=_max_grid_size())
    except InvalidPuzzleError as e:
        _LOGGER.warning("Rejected puzzle: %s", e)
        return SolveResponse(
            success=False,
            original=grid,
            solved=None,
            message=f"Invalid Hidato grid: {e}",
        )

    try:
        solver = HidatoSolver(state, max_steps=_max_steps())
        result = solver.solve()

        if not result.solved:
            return SolveResponse(
                success=False,
                original=grid,
                solved=None,
                steps=result.steps,
                message="Puzzle has no solution",
            )

        solved = state.rows()
        unique = _is_unique(grid) if _check_unique() else None

        return SolveResponse(
            success=True,
            original=grid,
            solved=solved,
            steps=result.steps,
            unique=unique,
            message="Puzzle solved successfully",
        )

    except SearchLimitExceeded as e:
        _LOGGER.warning("Search budget exhausted: %s", e)
        return SolveResponse(
            success=False,
            original=grid,
            solved=None,
            steps=e.steps,
            message=f"Search budget of {_max_steps()} steps exhausted",
        )
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/api/v1/hidato:render", response_model=RenderResponse, tags=["Hidato"])
async def render_hidato(request: RenderRequest):
    """Render a Hidato grid, optionally solved, as a base64 PNG."""
    grid = request.grid.cells
    try:
        state = PuzzleState.from_rows(grid, max_size=_max_grid_size())
    except InvalidPuzzleError as e:
        return RenderResponse(success=False, message=f"Invalid Hidato grid: {e}")

    message = "Grid rendered"
    if request.solve:
        try:
            result = HidatoSolver(state, max_steps=_max_steps()).solve()
        except SearchLimitExceeded:
            result = None
        if result is None or not result.solved:
            message = "Puzzle could not be solved; rendered the clues only"
        else:
            message = f"Puzzle solved in {result.steps} steps"

    try:
        image = GridRenderer.from_state(state).draw()
        return RenderResponse(success=True, message=message, image=image_to_base64(image))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
