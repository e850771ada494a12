#!/usr/bin/env python3
"""
Prints the best times stored in a Memory Match records DB.
Usage: python tools/read_records.py [path/to/memory.db]
"""
import os
import sys

sys.path.append('.')
import game  # type: ignore  # noqa: E402

PATH = sys.argv[1] if len(sys.argv) > 1 else os.getenv("MEMORY_DB", os.path.join("data", "memory.db"))


def main() -> None:
    if not os.path.isfile(PATH):
        print(f"No records DB at {PATH}")
        return
    state = game.load_state(PATH)
    if state.grid_size is not None:
        print(f"Selected grid: {game.grid_key(*state.grid_size)}")
    rows = game.db_list_best(PATH)
    if not rows:
        print("No best times yet.")
        return
    print(f"{'grid':<6} {'time':>6} {'moves':>6}  achieved")
    for grid, seconds, moves, achieved_at in rows:
        print(f"{grid:<6} {game.format_time(seconds):>6} {moves:>6}  {achieved_at}")


if __name__ == '__main__':
    main()
