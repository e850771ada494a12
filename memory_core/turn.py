from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional, cast

from .board import Board
from .card import Card
from .scheduler import Scheduler

logger = logging.getLogger(__name__)

DEFAULT_SETTLE_DELAY = 0.2    # wait after the second reveal before evaluating
DEFAULT_MISMATCH_DELAY = 0.8  # extra time mismatched cards stay visible


class TurnPhase(str, Enum):
    IDLE = "idle"
    ONE_SELECTED = "one_selected"
    EVALUATING = "evaluating"


class TurnController:
    """Board-level selection state: collects two reveals, evaluates them, locks input meanwhile.

    Waits are continuations on the injected scheduler, tagged with the board
    generation, so attaching a new board drops whatever the old one had pending.
    A tap arriving while a pair is being evaluated is dropped, not queued.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        settle_delay: float = DEFAULT_SETTLE_DELAY,
        mismatch_delay: float = DEFAULT_MISMATCH_DELAY,
        on_win: Optional[Callable[[Board], None]] = None,
    ) -> None:
        if settle_delay < 0 or mismatch_delay < 0:
            raise ValueError("delays must be non-negative")
        self.scheduler = scheduler
        self.settle_delay = settle_delay
        self.mismatch_delay = mismatch_delay
        self.on_win = on_win
        self._board: Optional[Board] = None
        self._first: Optional[Card] = None
        self._second: Optional[Card] = None
        self._input_locked = False

    @property
    def board(self) -> Optional[Board]:
        return self._board

    @property
    def first(self) -> Optional[Card]:
        return self._first

    @property
    def second(self) -> Optional[Card]:
        return self._second

    @property
    def input_locked(self) -> bool:
        return self._input_locked

    @property
    def phase(self) -> TurnPhase:
        if self._second is not None:
            return TurnPhase.EVALUATING
        if self._first is not None:
            return TurnPhase.ONE_SELECTED
        return TurnPhase.IDLE

    def attach(self, board: Board) -> None:
        """Takes over a freshly dealt board, abandoning any evaluation on the old one."""
        old = self._board
        if old is not None:
            dropped = self.scheduler.cancel_generation(old.generation)
            if dropped:
                logger.debug("cancelled %d pending step(s) of board generation %d", dropped, old.generation)
            for card in old.cards:
                card.attach(None)
        self._first = None
        self._second = None
        self._board = board
        for card in board.cards:
            card.attach(self)
        self._lock_input(False)

    def reveal(self, index: int) -> bool:
        """Forwards a tap to the card at `index`."""
        if self._board is None:
            return False
        if not (0 <= index < len(self._board)):
            raise IndexError(f"card index {index} out of range 0..{len(self._board) - 1}")
        return self._board.cards[index].request_reveal()

    def on_card_revealed(self, card: Card) -> None:
        board = self._board
        if board is None or not board.owns(card):
            logger.debug("ignored reveal from a card outside the current board: %r", card)
            return

        if self._first is None:
            self._first = card
            return

        if self._second is None and card is not self._first:
            self._second = card
            # Lock before anything else so a third tap cannot sneak in.
            self._lock_input(True)
            board.moves += 1
            self.scheduler.call_later(
                self.settle_delay, lambda: self._evaluate(board.generation), generation=board.generation
            )

    def _current(self, generation: int) -> bool:
        return self._board is not None and self._board.generation == generation

    def _selection_valid(self) -> bool:
        board = self._board
        return board is not None and board.owns(self._first) and board.owns(self._second)

    def _evaluate(self, generation: int) -> None:
        if not self._current(generation):
            # The board this step belonged to is gone; its replacement owns the state now.
            return
        if not self._selection_valid():
            logger.debug("selection went stale before evaluation; aborting")
            self._abort()
            return
        first, second = cast(Card, self._first), cast(Card, self._second)
        if first.id == second.id:
            first.set_matched()
            second.set_matched()
            self._complete()
            return
        logger.debug("Mismatch: %d vs %d. Hiding after %ss", first.id, second.id, self.mismatch_delay)
        self.scheduler.call_later(
            self.mismatch_delay, lambda: self._hide_pair(generation), generation=generation
        )

    def _hide_pair(self, generation: int) -> None:
        if not self._current(generation):
            return
        if not self._selection_valid():
            logger.debug("selection went stale before hiding; aborting")
            self._abort()
            return
        cast(Card, self._first).hide()
        cast(Card, self._second).hide()
        self._complete()

    def _abort(self) -> None:
        self._first = None
        self._second = None
        self._lock_input(False)

    def _complete(self) -> None:
        self._first = None
        self._second = None
        self._lock_input(False)
        board = self._board
        if board is not None and board.running and board.all_matched():
            board.running = False
            logger.info("Board solved in %d moves", board.moves)
            if self.on_win is not None:
                self.on_win(board)

    def _lock_input(self, value: bool) -> None:
        self._input_locked = value
        if self._board is not None:
            for card in self._board.cards:
                card.set_locked(value)
