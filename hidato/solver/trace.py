"""Search observers that log or record every grid mutation."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

Event = Tuple[str, int, int, Optional[int]]


class SearchTraceLogger:
    """Write each fill/clear to a logger at DEBUG level."""

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger("hidato.trace")

    def cell_filled(self, row: int, col: int, value: int) -> None:
        self.logger.debug("place %d at (%d, %d)", value, row, col)

    def cell_cleared(self, row: int, col: int) -> None:
        self.logger.debug("clear (%d, %d)", row, col)


class SearchRecorder:
    """Keep the ordered list of mutations, e.g. for replaying a search."""

    def __init__(self):
        self.events: List[Event] = []

    def cell_filled(self, row: int, col: int, value: int) -> None:
        self.events.append(("fill", row, col, value))

    def cell_cleared(self, row: int, col: int) -> None:
        self.events.append(("clear", row, col, None))

    @property
    def placements(self) -> int:
        return sum(1 for kind, *_ in self.events if kind == "fill")
