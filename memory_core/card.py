from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .animator import CardAnimator
    from .turn import TurnController

logger = logging.getLogger(__name__)


class CardState(str, Enum):
    HIDDEN = "hidden"
    REVEALED = "revealed"
    MATCHED = "matched"


class Card:
    """One playing piece: its pair id, its face and where it is in its lifecycle.

    MATCHED is terminal. The animator is told about every transition after the
    state has already changed, so presentation never holds up the game.
    """

    def __init__(
        self,
        card_id: int,
        face: str,
        index: int = 0,
        generation: int = 0,
        animator: Optional["CardAnimator"] = None,
    ) -> None:
        self.id = card_id
        self.face = face
        self.index = index
        self.generation = generation
        self.state = CardState.HIDDEN
        self.locked = False
        self._animator = animator
        self._controller: Optional["TurnController"] = None

    def __repr__(self) -> str:
        lock = " locked" if self.locked else ""
        return f"Card(#{self.index} id={self.id} {self.state.value}{lock})"

    @property
    def is_hidden(self) -> bool:
        return self.state is CardState.HIDDEN

    @property
    def is_revealed(self) -> bool:
        return self.state is CardState.REVEALED

    @property
    def is_matched(self) -> bool:
        return self.state is CardState.MATCHED

    def attach(self, controller: Optional["TurnController"]) -> None:
        """Wires the card to the controller that receives its reveal signals."""
        self._controller = controller

    def request_reveal(self) -> bool:
        """Handles a tap. Returns True when the card was turned face up."""
        if self.state is not CardState.HIDDEN or self.locked:
            logger.debug("ignored tap on %r", self)
            return False
        if self._controller is not None and self._controller.input_locked:
            logger.debug("ignored tap on %r while input is locked", self)
            return False
        self._transition(CardState.REVEALED)
        if self._controller is not None:
            self._controller.on_card_revealed(self)
        return True

    def hide(self) -> bool:
        if self.state is not CardState.REVEALED:
            return False
        self._transition(CardState.HIDDEN)
        return True

    def set_matched(self) -> bool:
        if self.state is not CardState.REVEALED:
            return False
        self._transition(CardState.MATCHED)
        return True

    def set_locked(self, value: bool) -> None:
        self.locked = bool(value)

    def _transition(self, new: CardState) -> None:
        old = self.state
        self.state = new
        if self._animator is not None:
            self._animator.card_changed(self, old, new)
