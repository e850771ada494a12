#!/usr/bin/env python3
"""
Random self-play on a virtual clock. Taps random cards (including invalid
ones) and checks the turn invariants after every step.
Usage: python tools/play_random.py [games] [rows] [cols]
"""
import random
import sys
from typing import List

sys.path.append('.')
import game  # type: ignore  # noqa: E402

GAMES = int(sys.argv[1]) if len(sys.argv) > 1 else 200
ROWS = int(sys.argv[2]) if len(sys.argv) > 2 else 4
COLS = int(sys.argv[3]) if len(sys.argv) > 3 else 4
TICK = 0.05


def check(session: game.GameSession) -> None:
    board = session.board
    revealed = board.revealed()
    assert len(revealed) <= 2, f"{len(revealed)} cards face up"
    ctrl = session.controller
    if ctrl.phase is game.TurnPhase.EVALUATING:
        assert all(c.locked for c in board.cards), "input open during evaluation"
    if not board.running:
        assert board.all_matched(), "board stopped before every card was matched"


def play_one(rng: random.Random) -> int:
    wins: List[game.WinResult] = []
    session = game.GameSession(rows=ROWS, cols=COLS, seed=rng.randrange(1_000_000))
    original = session._on_win

    def _count(board):
        original(board)
        wins.append(session.last_win)

    session.controller.on_win = _count
    steps = 0
    while session.board.running:
        session.reveal(rng.randrange(len(session.board)))
        session.tick(TICK)
        check(session)
        steps += 1
        if steps > 100_000:
            raise RuntimeError("game did not finish")
    for _ in range(40):
        session.tick(TICK)
    assert len(wins) == 1, f"win reported {len(wins)} times"
    return session.board.moves


def main() -> None:
    rng = random.Random(0)
    moves = [play_one(rng) for _ in range(GAMES)]
    print(f"{GAMES} games on {ROWS}x{COLS}: min {min(moves)} / avg {sum(moves) / len(moves):.1f} / max {max(moves)} moves")


if __name__ == '__main__':
    main()
