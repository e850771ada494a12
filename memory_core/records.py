from __future__ import annotations

import logging
import os
import sqlite3
import tempfile
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

GRID_SIZE_KEY = "grid_size"


def grid_key(rows: int, cols: int) -> str:
    return f"{rows}x{cols}"


def _parse_grid_key(key: str) -> Optional[Tuple[int, int]]:
    try:
        r_s, c_s = key.split("x")
        return (int(r_s), int(c_s))
    except ValueError:
        return None


def _writable_db_path(db_path: str) -> str:
    """`db_path` when its directory can be created, else the same file name in a fallback directory."""
    directory = os.path.dirname(db_path)
    if not directory:
        return db_path
    try:
        os.makedirs(directory, exist_ok=True)
        return db_path
    except PermissionError:
        logger.warning("Cannot create %s; storing records elsewhere", directory)
    name = os.path.basename(db_path) or "memory.db"
    for fallback in (os.getenv("MEMORY_DB_DIR"), os.path.join(os.getcwd(), "data"), tempfile.gettempdir()):
        if not fallback:
            continue
        try:
            os.makedirs(fallback, exist_ok=True)
        except OSError:
            continue
        return os.path.join(fallback, name)
    return name


def _ensure_db(conn: sqlite3.Connection) -> None:
    """Ensures the best-time and settings tables exist."""
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS best_times (
            grid TEXT PRIMARY KEY,
            rows INTEGER NOT NULL,
            cols INTEGER NOT NULL,
            seconds REAL NOT NULL,
            moves INTEGER NOT NULL,
            achieved_at TEXT NOT NULL
        )
        """
    )
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS settings (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )
        """
    )
    conn.commit()


def _connect(db_path: str) -> sqlite3.Connection:
    conn = sqlite3.connect(_writable_db_path(db_path))
    _ensure_db(conn)
    return conn


def db_lookup_best(db_path: str, rows: int, cols: int) -> Optional[Tuple[float, int]]:
    """Looks up the best (seconds, moves) for a grid size."""
    conn = _connect(db_path)
    try:
        cur = conn.execute("SELECT seconds, moves FROM best_times WHERE grid = ?", (grid_key(rows, cols),))
        row = cur.fetchone()
        if not row:
            return None
        return (float(row[0]), int(row[1]))
    finally:
        conn.close()


def db_store_best(db_path: str, rows: int, cols: int, seconds: float, moves: int) -> None:
    """Stores a best time, replacing whatever was recorded for that grid size."""
    conn = _connect(db_path)
    try:
        conn.execute(
            """
            INSERT OR REPLACE INTO best_times (grid, rows, cols, seconds, moves, achieved_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                grid_key(rows, cols),
                rows,
                cols,
                float(seconds),
                int(moves),
                datetime.now(timezone.utc).isoformat(timespec='seconds'),
            ),
        )
        conn.commit()
    finally:
        conn.close()


def db_list_best(db_path: str) -> List[Tuple[str, float, int, str]]:
    """All recorded best times as (grid, seconds, moves, achieved_at), smallest grids first."""
    conn = _connect(db_path)
    try:
        cur = conn.execute(
            "SELECT grid, seconds, moves, achieved_at FROM best_times ORDER BY rows * cols, rows"
        )
        return [(str(g), float(s), int(m), str(a)) for g, s, m, a in cur.fetchall()]
    finally:
        conn.close()


def db_load_setting(db_path: str, key: str) -> Optional[str]:
    conn = _connect(db_path)
    try:
        row = conn.execute("SELECT value FROM settings WHERE key = ?", (key,)).fetchone()
        return str(row[0]) if row else None
    finally:
        conn.close()


def db_store_setting(db_path: str, key: str, value: str) -> None:
    conn = _connect(db_path)
    try:
        conn.execute("INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)", (key, value))
        conn.commit()
    finally:
        conn.close()


@dataclass
class PersistedState:
    """Everything the game keeps between runs."""
    best_times: Dict[str, float] = field(default_factory=dict)
    best_moves: Dict[str, int] = field(default_factory=dict)
    grid_size: Optional[Tuple[int, int]] = None


def load_state(db_path: str) -> PersistedState:
    state = PersistedState()
    for grid, seconds, moves, _ in db_list_best(db_path):
        state.best_times[grid] = seconds
        state.best_moves[grid] = moves
    saved = db_load_setting(db_path, GRID_SIZE_KEY)
    if saved:
        state.grid_size = _parse_grid_key(saved)
    return state

