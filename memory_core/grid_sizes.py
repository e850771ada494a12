from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .board import check_dimensions
from .deal import DEFAULT_FACES, build_deck


@dataclass(frozen=True)
class GridSize:
    rows: int
    cols: int
    display_name: str
    description: str

    @property
    def cards(self) -> int:
        return self.rows * self.cols

    def to_json(self) -> dict:
        return {
            "rows": self.rows,
            "cols": self.cols,
            "name": self.display_name,
            "description": self.description,
            "cards": self.cards,
        }


DEFAULT_GRID_SIZES: Tuple[GridSize, ...] = (
    GridSize(4, 4, "4x4", "Classic - 16 cards"),
    GridSize(5, 4, "5x4", "Medium - 20 cards"),
    GridSize(6, 4, "6x4", "Hard - 24 cards"),
    GridSize(5, 6, "5x6", "Very hard - 30 cards"),
    GridSize(6, 6, "6x6", "Expert - 36 cards"),
)


def select_grid_size(index: int, sizes: Sequence[GridSize] = DEFAULT_GRID_SIZES) -> GridSize:
    if not (0 <= index < len(sizes)):
        raise IndexError(f"Invalid grid size index: {index}")
    return sizes[index]


def find_grid_size(rows: int, cols: int, sizes: Sequence[GridSize] = DEFAULT_GRID_SIZES) -> Optional[GridSize]:
    for size in sizes:
        if size.rows == rows and size.cols == cols:
            return size
    return None


def validate_grid_size(rows: int, cols: int, faces: Sequence[str] = DEFAULT_FACES) -> None:
    """Raises BoardConfigError unless a rows x cols board can be dealt from `faces`."""
    check_dimensions(rows, cols)
    build_deck((rows * cols) // 2, faces)
