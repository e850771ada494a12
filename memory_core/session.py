from __future__ import annotations

import logging
import random
from typing import Optional, Sequence

from .animator import CardAnimator, NullAnimator
from .board import Board, BoardConfigError
from .config import GameConfig
from .deal import DEFAULT_FACES, deal_board
from .grid_sizes import validate_grid_size
from .reporter import SessionReporter, WinResult
from .scheduler import Scheduler
from .turn import TurnController

logger = logging.getLogger(__name__)


class GameSession:
    """One player's game: the current board, its controller, the clock and the reporter.

    Collaborators are injected; anything left out gets a default (in-memory
    reporter, fresh scheduler, an animator that ignores transitions).
    """

    def __init__(
        self,
        rows: Optional[int] = None,
        cols: Optional[int] = None,
        faces: Optional[Sequence[str]] = None,
        seed: Optional[int] = None,
        reporter: Optional[SessionReporter] = None,
        config: Optional[GameConfig] = None,
        animator: Optional[CardAnimator] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self.config = config or GameConfig(db_path=None)
        self.reporter = reporter or SessionReporter(None)
        self.faces = tuple(faces) if faces is not None else DEFAULT_FACES
        self.animator: CardAnimator = animator if animator is not None else NullAnimator()
        self.scheduler = scheduler or Scheduler()
        self.controller = TurnController(
            self.scheduler,
            settle_delay=self.config.settle_delay,
            mismatch_delay=self.config.mismatch_delay,
            on_win=self._on_win,
        )
        self._rng = random.Random(seed)
        self._generation = 0
        self._tick_start: Optional[float] = None
        self.last_win: Optional[WinResult] = None

        if rows is None or cols is None:
            saved = self.reporter.saved_grid_size()
            if saved is not None and self._playable(*saved):
                rows, cols = saved
                logger.info("Loaded grid size: %dx%d", rows, cols)
            else:
                rows, cols = self.config.rows, self.config.cols
                logger.info("Using default grid size: %dx%d", rows, cols)
        self.rows = rows
        self.cols = cols
        self.board: Board = self.new_board()

    def _playable(self, rows: int, cols: int) -> bool:
        try:
            validate_grid_size(rows, cols, self.faces)
        except BoardConfigError as e:
            logger.warning("Ignoring saved grid size %dx%d: %s", rows, cols, e)
            return False
        return True

    def new_board(self) -> Board:
        self._generation += 1
        board = deal_board(
            self.rows,
            self.cols,
            faces=self.faces,
            rng=self._rng,
            generation=self._generation,
            animator=self.animator,
        )
        self.controller.attach(board)
        self.board = board
        self.last_win = None
        return board

    def reset(self) -> Board:
        board = self.new_board()
        logger.info("Game reset! (%dx%d, generation %d)", self.rows, self.cols, board.generation)
        return board

    def change_grid_size(self, rows: int, cols: int) -> Board:
        validate_grid_size(rows, cols, self.faces)
        self.rows, self.cols = rows, cols
        self.reporter.save_grid_size(rows, cols)
        board = self.reset()
        logger.info("Grid size changed to: %dx%d", rows, cols)
        return board

    def reveal(self, index: int) -> bool:
        return self.controller.reveal(index)

    def tick(self, dt: float) -> None:
        """Per-update step: fire whatever waits fell due, then run the game timer."""
        if dt < 0:
            raise ValueError(f"dt must be non-negative, got {dt}")
        board = self.board
        self._tick_start = self.scheduler.now
        try:
            self.scheduler.advance(dt)
        finally:
            self._tick_start = None
        # A win during this tick already credited its share in _on_win.
        if board.running:
            board.elapsed += dt

    @property
    def best_time(self) -> Optional[float]:
        return self.reporter.best_time(self.rows, self.cols)

    @property
    def solved(self) -> bool:
        return not self.board.running

    def _on_win(self, board: Board) -> None:
        if self._tick_start is not None:
            # Stop the clock at the continuation that solved the board.
            board.elapsed += self.scheduler.now - self._tick_start
        self.last_win = self.reporter.report_win(board.rows, board.cols, board.elapsed, board.moves)
