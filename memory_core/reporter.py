from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from .records import (
    GRID_SIZE_KEY,
    PersistedState,
    db_lookup_best,
    db_store_best,
    db_store_setting,
    grid_key,
    load_state,
)

logger = logging.getLogger(__name__)


def format_time(seconds: float) -> str:
    """MM:SS, both parts floored."""
    seconds = max(0.0, float(seconds))
    m = int(math.floor(seconds / 60.0))
    s = int(math.floor(seconds % 60.0))
    return f"{m:02d}:{s:02d}"


@dataclass(frozen=True)
class WinResult:
    rows: int
    cols: int
    elapsed: float
    moves: int
    best: float
    new_best: bool
    previous_best: Optional[float] = None


class SessionReporter:
    """Owns the persisted state: best time per grid size and the chosen grid size.

    With `db_path=None` everything stays in memory.
    """

    def __init__(self, db_path: Optional[str] = None) -> None:
        self.db_path = db_path
        self.state = load_state(db_path) if db_path else PersistedState()

    def best_time(self, rows: int, cols: int) -> Optional[float]:
        return self.state.best_times.get(grid_key(rows, cols))

    def best_moves(self, rows: int, cols: int) -> Optional[int]:
        return self.state.best_moves.get(grid_key(rows, cols))

    def saved_grid_size(self) -> Optional[Tuple[int, int]]:
        return self.state.grid_size

    def save_grid_size(self, rows: int, cols: int) -> None:
        self.state.grid_size = (rows, cols)
        if self.db_path:
            db_store_setting(self.db_path, GRID_SIZE_KEY, grid_key(rows, cols))

    def _refresh_best(self, rows: int, cols: int) -> None:
        # Another process sharing the file may have stored a faster time since load.
        stored = db_lookup_best(self.db_path, rows, cols)
        key = grid_key(rows, cols)
        if stored is not None and (key not in self.state.best_times or stored[0] < self.state.best_times[key]):
            self.state.best_times[key], self.state.best_moves[key] = stored

    def report_win(self, rows: int, cols: int, elapsed: float, moves: int) -> WinResult:
        key = grid_key(rows, cols)
        if self.db_path:
            self._refresh_best(rows, cols)
        previous = self.state.best_times.get(key)
        new_best = previous is None or elapsed < previous
        if new_best:
            self.state.best_times[key] = elapsed
            self.state.best_moves[key] = moves
            if self.db_path:
                db_store_best(self.db_path, rows, cols, elapsed, moves)
            logger.info("You win! New best for %s: %s in %d moves", key, format_time(elapsed), moves)
        else:
            logger.info("You win! %s in %d moves (best %s)", format_time(elapsed), moves, format_time(previous))
        return WinResult(
            rows=rows,
            cols=cols,
            elapsed=elapsed,
            moves=moves,
            best=elapsed if new_best else float(previous),
            new_best=new_best,
            previous_best=previous,
        )
