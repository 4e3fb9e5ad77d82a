"""Pydantic models for API requests and responses."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HidatoGrid(BaseModel):
    """A Hidato grid."""

    cells: list[list[int]] = Field(
        description="Grid rows: positive clue, 0 for open cells, -1 for blocked cells"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "cells": [
                    [0, 33, 35, 0, 0, -1, -1, -1],
                    [0, 0, 24, 22, 0, -1, -1, -1],
                    [0, 0, 0, 21, 0, 0, -1, -1],
                    [0, 26, 0, 13, 40, 11, -1, -1],
                    [27, 0, 0, 0, 9, 0, 1, -1],
                    [-1, -1, 0, 0, 18, 0, 0, -1],
                    [-1, -1, -1, -1, 0, 7, 0, 0],
                    [-1, -1, -1, -1, -1, -1, 5, 0],
                ]
            }
        }


class SolveRequest(BaseModel):
    """Request to solve a Hidato grid."""

    grid: HidatoGrid = Field(description="The Hidato puzzle to solve")


class SolveResponse(BaseModel):
    """Response from solving a Hidato puzzle."""

    success: bool = Field(description="Whether the puzzle was solved")
    original: list[list[int]] = Field(description="Original grid")
    solved: list[list[int]] | None = Field(description="Solved grid (if successful)")
    steps: int = Field(default=0, description="Number of search steps taken")
    unique: bool | None = Field(
        default=None, description="Whether the solution is unique (when checked)"
    )
    message: str = Field(description="Status message")


class RenderRequest(BaseModel):
    """Request to render a Hidato grid as an image."""

    grid: HidatoGrid = Field(description="The Hidato puzzle to render")
    solve: bool = Field(default=False, description="Solve the puzzle before rendering")


class RenderResponse(BaseModel):
    """Response carrying a rendered grid image."""

    success: bool = Field(description="Whether the image was rendered")
    message: str = Field(description="Status message")
    image: str | None = Field(default=None, description="Base64 encoded PNG image")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service status")
    max_grid_size: int = Field(description="Largest accepted grid height or width")
    max_steps: int = Field(description="Search step budget per request")
