from __future__ import annotations

import random
from typing import List, Optional, Sequence, Tuple

from .board import Board, BoardConfigError, check_dimensions
from .card import Card

# Enough faces for the largest built-in grid (6x6 -> 18 pairs) with room to spare.
DEFAULT_FACES: Tuple[str, ...] = (
    "apple", "banana", "cherry", "grape", "lemon", "lime", "mango", "melon",
    "orange", "peach", "pear", "plum", "kiwi", "fig", "coconut", "papaya",
    "apricot", "berry", "date", "guava", "lychee", "olive", "quince", "tomato",
)


def build_deck(pair_count: int, faces: Sequence[str]) -> List[Tuple[int, str]]:
    """Two (id, face) entries for each of the first `pair_count` faces, in order."""
    if pair_count <= 0:
        raise BoardConfigError("A board needs at least one pair")
    if len(faces) < pair_count:
        raise BoardConfigError(f"Not enough card faces. Need {pair_count}, have {len(faces)}.")
    if len(set(faces[:pair_count])) != pair_count:
        raise BoardConfigError("Card faces must be distinct")
    deck: List[Tuple[int, str]] = []
    for i in range(pair_count):
        deck.append((i, faces[i]))
        deck.append((i, faces[i]))
    return deck


def shuffle(deck: list, rng: random.Random) -> None:
    """In-place Fisher-Yates pass."""
    for i in range(len(deck) - 1):
        j = rng.randint(i, len(deck) - 1)
        deck[i], deck[j] = deck[j], deck[i]


def deal_board(
    rows: int,
    cols: int,
    faces: Optional[Sequence[str]] = None,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
    generation: int = 0,
    animator=None,
) -> Board:
    """Creates and deals a rows x cols board of shuffled pairs.

    The configuration is validated before anything is dealt. `rng` wins over
    `seed` when both are given.
    """
    check_dimensions(rows, cols)
    deck = build_deck((rows * cols) // 2, DEFAULT_FACES if faces is None else faces)
    shuffle(deck, rng if rng is not None else random.Random(seed))
    cards = [
        Card(card_id, face, index=i, generation=generation, animator=animator)
        for i, (card_id, face) in enumerate(deck)
    ]
    return Board(rows=rows, cols=cols, cards=cards, generation=generation)


def board_from_ids(rows: int, cols: int, ids: Sequence[int], generation: int = 0, animator=None) -> Board:
    """Builds an unshuffled board with the given pair ids, mostly for tests and replays."""
    cards = [
        Card(int(card_id), str(card_id), index=i, generation=generation, animator=animator)
        for i, card_id in enumerate(ids)
    ]
    return Board(rows=rows, cols=cols, cards=cards, generation=generation)
