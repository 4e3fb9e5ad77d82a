"""Draw a Hidato grid with OpenCV and keep it in sync with the search."""

from __future__ import annotations

import base64
import logging
from typing import Callable, Optional

import cv2
import numpy as np

from ..solver.state import BLOCKED, EMPTY, Grid, Location, PuzzleState

_LOGGER = logging.getLogger(__name__)

# Colours are BGR
WALL_COLOR = (0, 0, 0)
BACKGROUND = (230, 230, 230)
CELL_BACKGROUND = (255, 255, 255)
FIXED_BACKGROUND = BACKGROUND
FIXED_COLOR = (0, 0, 0)
VALUE_COLOR = (0, 0, 255)

BORDER_WIDTH = 15
CELL_SIZE = 46
EDGE_WIDTH = 3
FONT = cv2.FONT_HERSHEY_SIMPLEX
FONT_THICKNESS = 2

# Cell classes
_BLOCKED, _FIXED, _VALUE = "blocked", "fixed", "value"


def image_to_base64(image: np.ndarray) -> str:
    """Convert OpenCV image to base64 string."""
    _, buffer = cv2.imencode(".png", image)
    return base64.b64encode(buffer).decode("utf-8")


class GridRenderer:
    """
    Image of a Hidato grid that doubles as a search observer.

    Declare every cell with fixed_cell/value_cell/blocked_cell (or use
    from_state), call draw(), then feed cell_filled/cell_cleared while
    searching. When a window name is set each update is shown and held for
    ``delay_ms`` milliseconds.
    """

    def __init__(
        self,
        height: int,
        width: int,
        delay_ms: int = 0,
        window_name: Optional[str] = None,
    ):
        self.height = height
        self.width = width
        self.delay_ms = max(0, int(delay_ms))
        self.window_name = window_name
        self._classes = [[_BLOCKED] * width for _ in range(height)]
        self._values = [[0] * width for _ in range(height)]
        self._image: Optional[np.ndarray] = None

    @classmethod
    def from_state(
        cls,
        state: PuzzleState,
        delay_ms: int = 0,
        window_name: Optional[str] = None,
    ) -> "GridRenderer":
        return cls.from_grid(state.rows(), delay_ms, window_name, fixed=state.is_fixed)

    @classmethod
    def from_grid(
        cls,
        grid: Grid,
        delay_ms: int = 0,
        window_name: Optional[str] = None,
        fixed: Optional[Callable[[Location], bool]] = None,
    ) -> "GridRenderer":
        """Seed a renderer from rows; positive cells are clues unless fixed() says otherwise."""
        renderer = cls(len(grid), len(grid[0]), delay_ms, window_name)
        for r, row in enumerate(grid):
            for c, value in enumerate(row):
                if value == BLOCKED:
                    renderer.blocked_cell(r, c)
                elif value == EMPTY:
                    renderer.value_cell(r, c)
                elif fixed is None or fixed((r, c)):
                    renderer.fixed_cell(r, c, value)
                else:
                    renderer.value_cell(r, c)
                    renderer._values[r][c] = value
        return renderer

    def fixed_cell(self, row: int, col: int, value: int) -> None:
        self._classes[row][col] = _FIXED
        self._values[row][col] = value

    def value_cell(self, row: int, col: int) -> None:
        self._classes[row][col] = _VALUE
        self._values[row][col] = 0

    def blocked_cell(self, row: int, col: int) -> None:
        self._classes[row][col] = _BLOCKED
        self._values[row][col] = 0

    def draw(self) -> np.ndarray:
        """Paint the whole grid and return the image (BGR)."""
        img_h = 2 * BORDER_WIDTH + CELL_SIZE * self.height + 1
        img_w = 2 * BORDER_WIDTH + CELL_SIZE * self.width + 1
        self._image = np.full((img_h, img_w, 3), BACKGROUND, dtype=np.uint8)

        exterior = self._exterior_cells()
        for r in range(self.height):
            for c in range(self.width):
                cls = self._classes[r][c]
                if cls == _BLOCKED:
                    if (r, c) not in exterior:
                        self._fill_rect(r, c, WALL_COLOR, inset=-1)
                    continue
                if cls == _FIXED:
                    self._paint_value(r, c, FIXED_COLOR, FIXED_BACKGROUND)
                elif self._values[r][c]:
                    self._paint_value(r, c, VALUE_COLOR, CELL_BACKGROUND)
                else:
                    self._fill_rect(r, c, CELL_BACKGROUND)
                self._draw_edges(r, c)
        return self._image

    @property
    def image(self) -> np.ndarray:
        if self._image is None:
            return self.draw()
        return self._image

    # Observer interface -------------------------------------------------
    def cell_filled(self, row: int, col: int, value: int) -> None:
        self._values[row][col] = value
        if self._image is not None:
            self._paint_value(row, col, VALUE_COLOR, CELL_BACKGROUND)
            self._show()

    def cell_cleared(self, row: int, col: int) -> None:
        self._values[row][col] = 0
        if self._image is not None:
            self._fill_rect(row, col, CELL_BACKGROUND)

    def save(self, path: str) -> None:
        if not cv2.imwrite(path, self.image):
            raise OSError(f"Failed to write grid image to {path}")
        _LOGGER.info("Grid image written to %s", path)

    def close(self) -> None:
        """Show the final frame until a key is pressed, then close the window."""
        if self.window_name is None:
            return
        cv2.imshow(self.window_name, self.image)
        cv2.waitKey(0)
        cv2.destroyWindow(self.window_name)

    def _show(self) -> None:
        if self.window_name is None:
            return
        cv2.imshow(self.window_name, self._image)
        cv2.waitKey(max(1, self.delay_ms))

    def _exterior_cells(self) -> set[tuple[int, int]]:
        """Blocked cells connected (4-way) to the grid border."""
        stack = [
            (r, c)
            for r in range(self.height)
            for c in range(self.width)
            if r in (0, self.height - 1) or c in (0, self.width - 1)
        ]
        seen: set[tuple[int, int]] = set()
        while stack:
            r, c = stack.pop()
            if (r, c) in seen or not (0 <= r < self.height and 0 <= c < self.width):
                continue
            if self._classes[r][c] != _BLOCKED:
                continue
            seen.add((r, c))
            stack.extend([(r - 1, c), (r + 1, c), (r, c - 1), (r, c + 1)])
        return seen

    def _cell_origin(self, row: int, col: int) -> tuple[int, int]:
        return BORDER_WIDTH + CELL_SIZE * col, BORDER_WIDTH + CELL_SIZE * row

    def _fill_rect(self, row: int, col: int, color, inset: int = 1) -> None:
        x0, y0 = self._cell_origin(row, col)
        cv2.rectangle(
            self._image,
            (x0 + inset, y0 + inset),
            (x0 + CELL_SIZE - inset, y0 + CELL_SIZE - inset),
            color,
            thickness=-1,
        )

    def _paint_value(self, row: int, col: int, text_color, background) -> None:
        self._fill_rect(row, col, background)
        text = str(self._values[row][col])
        scale = 0.8 if len(text) < 3 else 0.6
        (text_w, text_h), _ = cv2.getTextSize(text, FONT, scale, FONT_THICKNESS)
        x0, y0 = self._cell_origin(row, col)
        origin = (x0 + (CELL_SIZE - text_w) // 2, y0 + (CELL_SIZE + text_h) // 2)
        cv2.putText(
            self._image, text, origin, FONT, scale, text_color, FONT_THICKNESS, cv2.LINE_AA
        )

    def _draw_edges(self, row: int, col: int) -> None:
        """Thin lines between playable cells, thick walls against blocked ones."""
        x0, y0 = self._cell_origin(row, col)
        x1, y1 = x0 + CELL_SIZE, y0 + CELL_SIZE
        sides = (
            ((row - 1, col), (x0, y0), (x1, y0)),
            ((row + 1, col), (x0, y1), (x1, y1)),
            ((row, col - 1), (x0, y0), (x0, y1)),
            ((row, col + 1), (x1, y0), (x1, y1)),
        )
        for (nr, nc), start, end in sides:
            outside = not (0 <= nr < self.height and 0 <= nc < self.width)
            wall = outside or self._classes[nr][nc] == _BLOCKED
            cv2.line(self._image, start, end, WALL_COLOR, EDGE_WIDTH if wall else 1)
