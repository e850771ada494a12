from __future__ import annotations

import os
import sys
import threading
import time
import uuid
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request, send_from_directory

# Ensure package imports work when executed directly from repo root or as module
if __package__ in (None, ""):
    sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

try:
    from .game import (  # type: ignore
        Board,
        BoardConfigError,
        Card,
        DEFAULT_GRID_SIZES,
        GameConfig,
        GameSession,
        SessionReporter,
        TransitionLog,
        WinResult,
        choose_scale_mode,
        compute_layout,
        configure_logging,
        find_grid_size,
        format_time,
        select_grid_size,
    )
except ImportError:
    from game import (  # type: ignore
        Board,
        BoardConfigError,
        Card,
        DEFAULT_GRID_SIZES,
        GameConfig,
        GameSession,
        SessionReporter,
        TransitionLog,
        WinResult,
        choose_scale_mode,
        compute_layout,
        configure_logging,
        find_grid_size,
        format_time,
        select_grid_size,
    )

CONFIG = GameConfig.from_env()
MAX_SESSIONS = int(os.getenv("MEMORY_MAX_SESSIONS", "256"))

# Serve static assets from ./static (explicit absolute path)
STATIC_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "static"))
app = Flask(__name__, static_url_path="/static", static_folder=STATIC_DIR)


def _now() -> float:
    return time.monotonic()


@dataclass
class _Entry:
    session: GameSession
    log: TransitionLog
    last: float


_SESSIONS: "OrderedDict[str, _Entry]" = OrderedDict()
_LOCK = threading.Lock()
_REPORTER: Optional[SessionReporter] = None


def _get_reporter() -> SessionReporter:
    global _REPORTER
    if _REPORTER is None:
        _REPORTER = SessionReporter(CONFIG.db_path)
    return _REPORTER


class _UnknownSession(KeyError):
    pass


def _lookup(game_id: Any) -> _Entry:
    entry = _SESSIONS.get(str(game_id)) if game_id is not None else None
    if entry is None:
        raise _UnknownSession(game_id)
    _SESSIONS.move_to_end(str(game_id))
    _pump(entry)
    return entry


def _pump(entry: _Entry) -> None:
    """Feeds wall-clock time into the session before it is read or changed."""
    now = _now()
    dt = max(0.0, now - entry.last)
    entry.last = now
    entry.session.tick(dt)


def _int_field(body: Dict[str, Any], name: str, default: Optional[int] = None) -> Optional[int]:
    raw = body.get(name, default)
    if raw is None:
        return None
    if isinstance(raw, (bool, float)):
        raise ValueError(f"{name} must be an integer")
    return int(raw)


# ---------- JSON helpers ----------

def card_to_json(card: Card) -> Dict[str, Any]:
    # Hidden faces never leave the server.
    return {
        "index": card.index,
        "state": card.state.value,
        "face": None if card.is_hidden else card.face,
        "locked": card.locked,
    }


def board_to_json(board: Board) -> Dict[str, Any]:
    return {
        "rows": board.rows,
        "cols": board.cols,
        "generation": board.generation,
        "moves": board.moves,
        "elapsed": round(board.elapsed, 3),
        "running": board.running,
        "matched": board.matched_count(),
        "cards": [card_to_json(c) for c in board.cards],
    }


def win_to_json(win: Optional[WinResult]) -> Optional[Dict[str, Any]]:
    if win is None:
        return None
    return {
        "elapsed": round(win.elapsed, 3),
        "moves": win.moves,
        "best": round(win.best, 3),
        "newBest": win.new_best,
        "timeText": format_time(win.elapsed),
    }


def session_to_json(game_id: str, entry: _Entry, since: int = 0) -> Dict[str, Any]:
    s = entry.session
    best = s.best_time
    size = find_grid_size(s.rows, s.cols)
    return {
        "id": game_id,
        "board": board_to_json(s.board),
        "grid": size.to_json() if size is not None else None,
        "phase": s.controller.phase.value,
        "inputLocked": s.controller.input_locked,
        "best": best,
        "bestText": format_time(best) if best is not None else None,
        "timeText": format_time(s.board.elapsed),
        "win": win_to_json(s.last_win),
        "transitions": [t.to_json() for t in entry.log.since(since)],
        "seq": entry.log.last_seq,
    }


def _error(message: str, status: int) -> Any:
    return jsonify({"ok": False, "error": message}), status


# ---------- Static routes ----------

@app.get("/")
def index() -> Any:
    return send_from_directory(app.static_folder, "index.html")


@app.get("/main.js")
def main_js() -> Any:
    resp = send_from_directory(app.static_folder, "main.js")
    resp.headers["Content-Type"] = "application/javascript; charset=utf-8"
    return resp


@app.get("/styles.css")
def styles_css() -> Any:
    resp = send_from_directory(app.static_folder, "styles.css")
    resp.headers["Content-Type"] = "text/css; charset=utf-8"
    return resp


# ---------- Game API (required by main.js) ----------

@app.get("/api/grid_sizes")
def api_grid_sizes() -> Any:
    with _LOCK:
        saved = _get_reporter().saved_grid_size()
    return jsonify({
        "ok": True,
        "sizes": [g.to_json() for g in DEFAULT_GRID_SIZES],
        "selected": list(saved) if saved else [CONFIG.rows, CONFIG.cols],
    })


@app.post("/api/new")
def api_new() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        rows = _int_field(body, "rows")
        cols = _int_field(body, "cols")
        seed = _int_field(body, "seed")
    except (TypeError, ValueError) as e:
        return _error(f"bad request: {e}", 400)
    log = TransitionLog()
    with _LOCK:
        reporter = _get_reporter()
        try:
            session = GameSession(rows=rows, cols=cols, seed=seed, reporter=reporter, config=CONFIG, animator=log)
        except BoardConfigError as e:
            return _error(str(e), 400)
        if rows is not None and cols is not None:
            reporter.save_grid_size(rows, cols)
        game_id = uuid.uuid4().hex
        entry = _Entry(session=session, log=log, last=_now())
        _SESSIONS[game_id] = entry
        while len(_SESSIONS) > MAX_SESSIONS:
            _SESSIONS.popitem(last=False)
        return jsonify({"ok": True, "state": session_to_json(game_id, entry)})


@app.post("/api/state")
def api_state() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        since = _int_field(body, "since", 0) or 0
    except (TypeError, ValueError) as e:
        return _error(f"bad request: {e}", 400)
    with _LOCK:
        try:
            entry = _lookup(body.get("id"))
        except _UnknownSession:
            return _error("unknown game id", 404)
        return jsonify({"ok": True, "state": session_to_json(str(body["id"]), entry, since)})


@app.post("/api/reveal")
def api_reveal() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        index = _int_field(body, "index")
        since = _int_field(body, "since", 0) or 0
    except (TypeError, ValueError) as e:
        return _error(f"bad request: {e}", 400)
    if index is None:
        return _error("index required", 400)
    with _LOCK:
        try:
            entry = _lookup(body.get("id"))
        except _UnknownSession:
            return _error("unknown game id", 404)
        try:
            accepted = entry.session.reveal(index)
        except IndexError as e:
            return _error(str(e), 400)
        return jsonify({
            "ok": True,
            "accepted": accepted,
            "state": session_to_json(str(body["id"]), entry, since),
        })


@app.post("/api/reset")
def api_reset() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    with _LOCK:
        try:
            entry = _lookup(body.get("id"))
        except _UnknownSession:
            return _error("unknown game id", 404)
        entry.session.reset()
        return jsonify({"ok": True, "state": session_to_json(str(body["id"]), entry, entry.log.last_seq)})


@app.post("/api/grid")
def api_grid() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        size_index = _int_field(body, "size")
        if size_index is not None:
            chosen = select_grid_size(size_index)
            rows, cols = chosen.rows, chosen.cols
        else:
            rows = _int_field(body, "rows")
            cols = _int_field(body, "cols")
    except (IndexError, TypeError, ValueError) as e:
        return _error(f"bad request: {e}", 400)
    if rows is None or cols is None:
        return _error("rows and cols (or size) required", 400)
    with _LOCK:
        try:
            entry = _lookup(body.get("id"))
        except _UnknownSession:
            return _error("unknown game id", 404)
        try:
            entry.session.change_grid_size(rows, cols)
        except BoardConfigError as e:
            return _error(str(e), 400)
        return jsonify({"ok": True, "state": session_to_json(str(body["id"]), entry, entry.log.last_seq)})


@app.post("/api/layout")
def api_layout() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        width = float(body["width"])
        height = float(body["height"])
        rows = int(body.get("rows", CONFIG.rows))
        cols = int(body.get("cols", CONFIG.cols))
        layout = compute_layout(width, height, rows, cols)
        mode = choose_scale_mode(width, height)
    except (KeyError, TypeError, ValueError) as e:
        return _error(f"bad layout request: {e}", 400)
    return jsonify({"ok": True, "layout": layout.to_json(), "scaleMode": mode})


# Entrypoint for "python app.py"
if __name__ == "__main__":
    configure_logging(CONFIG.debug)
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=debug)
