from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from .card import Card, CardState

Coord = Tuple[int, int]


class BoardConfigError(ValueError):
    """Raised when a board cannot be built: bad dimensions, odd size or broken pairs."""


def check_dimensions(rows: int, cols: int) -> None:
    if rows <= 0 or cols <= 0:
        raise BoardConfigError(f"Invalid grid size: {rows}x{cols}")
    if (rows * cols) % 2 != 0:
        raise BoardConfigError(f"Grid size must have an even number of cards: {rows}x{cols}")


@dataclass
class Board:
    """All cards of one game session plus the per-session counters."""
    rows: int
    cols: int
    cards: List[Card]
    generation: int = 0
    moves: int = 0
    elapsed: float = 0.0
    running: bool = True
    _by_index: Optional[Tuple[Card, ...]] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        check_dimensions(self.rows, self.cols)
        if len(self.cards) != self.rows * self.cols:
            raise BoardConfigError(
                f"Board {self.rows}x{self.cols} needs {self.rows * self.cols} cards, got {len(self.cards)}"
            )
        counts = Counter(card.id for card in self.cards)
        unpaired = sorted(cid for cid, n in counts.items() if n != 2)
        if unpaired:
            raise BoardConfigError(f"Every pair id must appear exactly twice; bad ids: {unpaired}")
        for i, card in enumerate(self.cards):
            if card.index != i:
                raise BoardConfigError(f"Card at position {i} reports index {card.index}")
        self._by_index = tuple(self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def index(self, r: int, c: int) -> int:
        """Calculates the 1D index for a given row and column."""
        return r * self.cols + c

    def coord(self, index: int) -> Coord:
        return divmod(index, self.cols)

    def at(self, r: int, c: int) -> Card:
        if not (0 <= r < self.rows and 0 <= c < self.cols):
            raise IndexError(f"invalid coordinate ({r}, {c})")
        return self.cards[self.index(r, c)]

    def owns(self, card: Optional[Card]) -> bool:
        """True if the card was dealt into this board (and not a previous one)."""
        if card is None or card.generation != self.generation or self._by_index is None:
            return False
        return 0 <= card.index < len(self._by_index) and self._by_index[card.index] is card

    def matched_count(self) -> int:
        return sum(1 for card in self.cards if card.is_matched)

    def all_matched(self) -> bool:
        return self.matched_count() == len(self.cards)

    def revealed(self) -> List[Card]:
        return [card for card in self.cards if card.state is CardState.REVEALED]

    def pretty(self, show_all: bool = False) -> str:
        """Text rendering: '#' for a hidden card, the face when visible, '.' once matched."""
        width = max([len(card.face) for card in self.cards] + [1])
        lines: List[str] = []
        for r in range(self.rows):
            row: List[str] = []
            for c in range(self.cols):
                card = self.at(r, c)
                if card.is_matched:
                    cell = "." if not show_all else card.face
                elif card.is_revealed or show_all:
                    cell = card.face
                else:
                    cell = "#"
                row.append(cell.ljust(width))
            lines.append(" ".join(row).rstrip())
        return "\n".join(lines)
