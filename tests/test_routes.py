"""Tests for the Hidato API routes."""

import base64

import cv2
import numpy as np
import pytest

from hidato.api import routes
from hidato.models.schemas import HidatoGrid, RenderRequest, SolveRequest


def _solve_request(cells):
    return SolveRequest(grid=HidatoGrid(cells=cells))


@pytest.mark.asyncio
async def test_solve_returns_solution_and_steps():
    response = await routes.solve_hidato(_solve_request([[1, 0], [0, 4]]))

    assert response.success is True
    assert response.solved == [[1, 3], [2, 4]]
    assert response.original == [[1, 0], [0, 4]]
    assert response.steps == 3
    assert response.unique is False


@pytest.mark.asyncio
async def test_solve_reports_unique_solution():
    response = await routes.solve_hidato(_solve_request([[1, 0, -1], [-1, -1, 3]]))

    assert response.success is True
    assert response.solved == [[1, 2, -1], [-1, -1, 3]]
    assert response.steps == 2
    assert response.unique is True


@pytest.mark.asyncio
async def test_solve_skips_uniqueness_when_disabled(monkeypatch):
    monkeypatch.setenv("HIDATO_CHECK_UNIQUE", "0")

    response = await routes.solve_hidato(_solve_request([[1, 0], [0, 4]]))

    assert response.success is True
    assert response.unique is None


@pytest.mark.asyncio
async def test_solve_rejects_invalid_grid():
    response = await routes.solve_hidato(_solve_request([[0, 0], [0, 2]]))

    assert response.success is False
    assert response.solved is None
    assert response.message.startswith("Invalid Hidato grid")


@pytest.mark.asyncio
async def test_solve_respects_max_grid_size(monkeypatch):
    monkeypatch.setenv("HIDATO_MAX_GRID_SIZE", "2")

    response = await routes.solve_hidato(_solve_request([[1, 0, 0], [0, 0, 6]]))

    assert response.success is False
    assert "width" in response.message


@pytest.mark.asyncio
async def test_solve_reports_exhaustion_as_no_solution():
    response = await routes.solve_hidato(
        _solve_request([[1, 0, -1, 3], [-1, -1, -1, -1]])
    )

    assert response.success is False
    assert response.message == "Puzzle has no solution"
    assert response.steps == 1


@pytest.mark.asyncio
async def test_solve_reports_exhausted_budget(monkeypatch):
    monkeypatch.setenv("HIDATO_MAX_STEPS", "2")

    response = await routes.solve_hidato(_solve_request([[1, 0], [0, 4]]))

    assert response.success is False
    assert "budget" in response.message
    assert response.steps == 2


@pytest.mark.asyncio
async def test_render_returns_png():
    response = await routes.render_hidato(
        RenderRequest(grid=HidatoGrid(cells=[[1, 0], [0, 4]]), solve=True)
    )

    assert response.success is True
    assert response.message == "Puzzle solved in 3 steps"
    raw = base64.b64decode(response.image)
    image = cv2.imdecode(np.frombuffer(raw, np.uint8), cv2.IMREAD_COLOR)
    assert image is not None
    assert image.ndim == 3


@pytest.mark.asyncio
async def test_render_unsolvable_keeps_clues():
    response = await routes.render_hidato(
        RenderRequest(grid=HidatoGrid(cells=[[1, 0, -1, 3], [-1, -1, -1, -1]]), solve=True)
    )

    assert response.success is True
    assert "could not be solved" in response.message
    assert response.image


@pytest.mark.asyncio
async def test_render_rejects_invalid_grid():
    response = await routes.render_hidato(RenderRequest(grid=HidatoGrid(cells=[[1]])))

    assert response.success is False
    assert response.image is None


@pytest.mark.asyncio
async def test_health_reports_settings(monkeypatch):
    monkeypatch.setenv("HIDATO_MAX_STEPS", "1000")
    monkeypatch.delenv("HIDATO_MAX_GRID_SIZE", raising=False)

    response = await routes.health_check()

    assert response.status == "healthy"
    assert response.max_steps == 1000
    assert response.max_grid_size == 20


def test_env_falls_back_on_bad_value(monkeypatch):
    monkeypatch.setenv("HIDATO_MAX_STEPS", "lots")
    assert routes._max_steps() == routes.DEFAULT_MAX_STEPS


def test_check_config(monkeypatch):
    monkeypatch.delenv("HIDATO_MAX_GRID_SIZE", raising=False)
    monkeypatch.delenv("HIDATO_MAX_STEPS", raising=False)
    assert routes.check_config() is None
    monkeypatch.setenv("HIDATO_MAX_GRID_SIZE", "1")
    assert "HIDATO_MAX_GRID_SIZE" in routes.check_config()


@pytest.mark.asyncio
async def test_solve_rejects_grid_too_deep_to_search(monkeypatch):
    monkeypatch.setenv("HIDATO_MAX_GRID_SIZE", "250")
    cells = [[1] + [0] * 249, [0] * 249 + [500]]

    response = await routes.solve_hidato(_solve_request(cells))

    assert response.success is False
    assert "at most 400" in response.message


@pytest.mark.asyncio
async def test_render_rejects_grid_too_deep_to_search(monkeypatch):
    monkeypatch.setenv("HIDATO_MAX_GRID_SIZE", "250")
    cells = [[1] + [0] * 249, [0] * 249 + [500]]

    response = await routes.render_hidato(RenderRequest(grid=HidatoGrid(cells=cells), solve=True))

    assert response.success is False
    assert response.image is None
