"""Tests for application startup behavior."""

import pytest

from hidato import main


@pytest.mark.asyncio
async def test_app_lifespan_fails_on_invalid_config(monkeypatch):
    monkeypatch.setattr(main, "check_config", lambda: "HIDATO_MAX_STEPS must be positive")

    with pytest.raises(RuntimeError, match="Invalid solver configuration"):
        async with main._app_lifespan(main.app):
            pass


@pytest.mark.asyncio
async def test_app_lifespan_fails_on_bad_env(monkeypatch):
    monkeypatch.setenv("HIDATO_MAX_STEPS", "0")

    with pytest.raises(RuntimeError, match="HIDATO_MAX_STEPS"):
        async with main._app_lifespan(main.app):
            pass


@pytest.mark.asyncio
async def test_app_lifespan_succeeds_with_defaults(monkeypatch):
    monkeypatch.delenv("HIDATO_MAX_STEPS", raising=False)
    monkeypatch.delenv("HIDATO_MAX_GRID_SIZE", raising=False)

    async with main._app_lifespan(main.app):
        pass


@pytest.mark.asyncio
async def test_root_points_to_docs():
    assert await main.root() == {"message": "Hidato Solver API", "docs": "/docs"}
