from __future__ import annotations

import argparse
import time
from typing import Optional

from .board import Board, BoardConfigError
from .config import GameConfig, configure_logging
from .grid_sizes import DEFAULT_GRID_SIZES, find_grid_size, select_grid_size
from .reporter import SessionReporter, format_time
from .scheduler import WallClock
from .session import GameSession
from .turn import TurnPhase


def parse_pick(text: str, board: Board) -> Optional[int]:
    """Parses 'index', 'r,c' or 'r c' into a card index; None if it cannot be read."""
    text = text.strip()
    if not text:
        return None
    sep = ',' if ',' in text else ' '
    parts = [t for t in text.split(sep) if t != '']
    try:
        if len(parts) == 1:
            index = int(parts[0])
        elif len(parts) == 2:
            r, c = int(parts[0]), int(parts[1])
            if not (0 <= r < board.rows and 0 <= c < board.cols):
                return None
            index = board.index(r, c)
        else:
            return None
    except ValueError:
        return None
    return index if 0 <= index < len(board) else None


def _status(session: GameSession) -> str:
    best = session.best_time
    best_s = format_time(best) if best is not None else "-"
    size = find_grid_size(session.rows, session.cols)
    grid = size.description if size is not None else f"{session.rows}x{session.cols}"
    return f"Grid: {grid}  Moves: {session.board.moves}  Time: {format_time(session.board.elapsed)}  Best: {best_s}"


def _settle(session: GameSession, clock: WallClock, poll: float = 0.05) -> None:
    """Lets the wall clock run until the current pair has been evaluated."""
    while session.controller.phase is TurnPhase.EVALUATING:
        time.sleep(poll)
        session.tick(clock.elapsed())


def main() -> None:
    env = GameConfig.from_env()
    parser = argparse.ArgumentParser(description='Memory Match in the terminal')
    parser.add_argument('--rows', type=int, default=None, help='Grid rows (default: saved or 4)')
    parser.add_argument('--cols', type=int, default=None, help='Grid columns (default: saved or 4)')
    parser.add_argument(
        '--size',
        type=int,
        default=None,
        help='Built-in grid size: ' + ', '.join(f'{i}={g.display_name}' for i, g in enumerate(DEFAULT_GRID_SIZES)),
    )
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for the deal')
    parser.add_argument('--db', default=env.db_path, help='SQLite file for best times')
    parser.add_argument('--settle', type=float, default=env.settle_delay, help='Delay before a pair is evaluated')
    parser.add_argument('--mismatch', type=float, default=env.mismatch_delay, help='How long a mismatch stays visible')
    parser.add_argument('--debug', action='store_true', default=env.debug, help='Verbose logging')
    args = parser.parse_args()
    rows, cols = args.rows, args.cols
    if args.size is not None:
        if rows is not None or cols is not None:
            parser.error('--size cannot be combined with --rows/--cols')
        try:
            chosen = select_grid_size(args.size)
        except IndexError as e:
            parser.error(str(e))
        rows, cols = chosen.rows, chosen.cols

    configure_logging(args.debug)
    config = GameConfig(
        rows=env.rows,
        cols=env.cols,
        settle_delay=args.settle,
        mismatch_delay=args.mismatch,
        db_path=args.db,
        debug=args.debug,
    )
    reporter = SessionReporter(args.db)
    try:
        session = GameSession(rows=rows, cols=cols, seed=args.seed, reporter=reporter, config=config)
    except BoardConfigError as e:
        parser.error(str(e))
        return
    if rows is not None and cols is not None:
        reporter.save_grid_size(rows, cols)

    clock = WallClock()
    print("Pick cards as 'index' or 'row,col'. Commands: reset, quit.")
    while True:
        session.tick(clock.elapsed())
        print()
        print(session.board.pretty())
        print(_status(session))
        if session.solved:
            win = session.last_win
            if win is not None:
                note = "New best!" if win.new_best else f"Best: {format_time(win.best)}"
                print(f"You win! {format_time(win.elapsed)} in {win.moves} moves. {note}")
            text = input("Play again? [y/N] ").strip().lower()
            if text not in ('y', 'yes'):
                break
            session.reset()
            continue

        text = input('> ').strip().lower()
        session.tick(clock.elapsed())
        if text in ('q', 'quit', 'exit'):
            break
        if text == 'reset':
            session.reset()
            continue
        index = parse_pick(text, session.board)
        if index is None:
            print('Could not parse. Try again.')
            continue
        if not session.reveal(index):
            r, c = session.board.coord(index)
            print(f'Card at {r},{c} cannot be turned right now.')
            continue
        if session.controller.phase is TurnPhase.EVALUATING:
            print(session.board.pretty())
            _settle(session, clock)
