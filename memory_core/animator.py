from __future__ import annotations

import itertools
from collections import deque
from dataclasses import dataclass
from typing import Deque, List

from .card import Card, CardState

FLIP_TIME = 0.15     # seconds per half of a flip (shrink, swap face, grow)
MATCH_PULSE = 0.1    # scale-up before a matched card disappears
MATCH_FADE = 0.3     # fade-out and scale-down of a matched card


class CardAnimator:
    """Receives card transitions. Implementations must not touch card state."""

    def card_changed(self, card: Card, old: CardState, new: CardState) -> None:
        raise NotImplementedError


class NullAnimator(CardAnimator):
    def card_changed(self, card: Card, old: CardState, new: CardState) -> None:
        pass


@dataclass(frozen=True)
class Transition:
    seq: int
    generation: int
    index: int
    old: CardState
    new: CardState
    effect: str       # "flip" or "vanish"
    duration: float

    def to_json(self) -> dict:
        return {
            "seq": self.seq,
            "generation": self.generation,
            "index": self.index,
            "from": self.old.value,
            "to": self.new.value,
            "effect": self.effect,
            "duration": self.duration,
        }


def effect_for(new: CardState) -> tuple:
    if new is CardState.MATCHED:
        return "vanish", MATCH_PULSE + MATCH_FADE
    return "flip", 2 * FLIP_TIME


class TransitionLog(CardAnimator):
    """Keeps the most recent transitions so a renderer can replay them at its own pace."""

    def __init__(self, maxlen: int = 512) -> None:
        self._seq = itertools.count(1)
        self._entries: Deque[Transition] = deque(maxlen=maxlen)

    def card_changed(self, card: Card, old: CardState, new: CardState) -> None:
        effect, duration = effect_for(new)
        self._entries.append(
            Transition(next(self._seq), card.generation, card.index, old, new, effect, duration)
        )

    @property
    def last_seq(self) -> int:
        return self._entries[-1].seq if self._entries else 0

    def since(self, seq: int) -> List[Transition]:
        return [t for t in self._entries if t.seq > seq]

    def __len__(self) -> int:
        return len(self._entries)
