"""
Settings for Memory Match, read from the environment.

MEMORY_ROWS / MEMORY_COLS      default grid size when nothing was saved (4x4)
MEMORY_SETTLE_DELAY            seconds between the second reveal and evaluation (0.2)
MEMORY_MISMATCH_DELAY          seconds a mismatched pair stays visible (0.8)
MEMORY_DB                      SQLite file for best times and grid choice
MEMORY_DEBUG                   1/true/yes/on for debug logging
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_DB = os.path.join("data", "memory.db")


def env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw not in (None, "") else default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    return float(raw) if raw not in (None, "") else default


@dataclass(frozen=True)
class GameConfig:
    rows: int = 4
    cols: int = 4
    settle_delay: float = 0.2
    mismatch_delay: float = 0.8
    db_path: Optional[str] = DEFAULT_DB
    debug: bool = False

    @classmethod
    def from_env(cls) -> "GameConfig":
        return cls(
            rows=_env_int("MEMORY_ROWS", cls.rows),
            cols=_env_int("MEMORY_COLS", cls.cols),
            settle_delay=_env_float("MEMORY_SETTLE_DELAY", cls.settle_delay),
            mismatch_delay=_env_float("MEMORY_MISMATCH_DELAY", cls.mismatch_delay),
            db_path=os.getenv("MEMORY_DB", DEFAULT_DB),
            debug=env_flag("MEMORY_DEBUG"),
        )


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(levelname)s - [%(name)s] - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
