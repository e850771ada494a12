from __future__ import annotations

from dataclasses import dataclass

MIN_CARD_SIZE = 60.0
MAX_CARD_SIZE = 120.0
SCREEN_PADDING = 20.0
HEADER_HEIGHT = 100.0        # moves / timer / best labels
RESET_BUTTON_HEIGHT = 50.0
TARGET_ASPECT = 16.0 / 9.0


@dataclass(frozen=True)
class GridLayout:
    cell_size: float
    spacing: float
    columns: int

    def to_json(self) -> dict:
        return {"cellSize": self.cell_size, "spacing": self.spacing, "columns": self.columns}


def compute_layout(
    canvas_width: float,
    canvas_height: float,
    rows: int,
    cols: int,
    min_card: float = MIN_CARD_SIZE,
    max_card: float = MAX_CARD_SIZE,
    padding: float = SCREEN_PADDING,
    header: float = HEADER_HEIGHT,
    footer: float = RESET_BUTTON_HEIGHT,
) -> GridLayout:
    """Square card size that fits rows x cols into the canvas, clamped to [min_card, max_card]."""
    if rows <= 0 or cols <= 0:
        raise ValueError(f"Invalid grid size: {rows}x{cols}")
    if min_card > max_card:
        raise ValueError("min_card must not exceed max_card")
    available_w = canvas_width - padding * 2
    available_h = canvas_height - padding * 2 - header - footer
    size = min(available_w / cols, available_h / rows)
    size = max(min_card, min(max_card, size))
    return GridLayout(cell_size=size, spacing=size * 0.1, columns=cols)


def choose_scale_mode(screen_width: float, screen_height: float, target_aspect: float = TARGET_ASPECT) -> str:
    """'scale_with_screen' for screens far from the target aspect ratio, else 'constant_pixel'."""
    if screen_height <= 0:
        raise ValueError("screen height must be positive")
    if abs(screen_width / screen_height - target_aspect) > 0.2:
        return "scale_with_screen"
    return "constant_pixel"
