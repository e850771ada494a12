from __future__ import annotations

# Facade module that re-exports the Memory Match core.
# Used by the Flask app, the tools and the tests; the single-responsibility
# modules live under memory_core/*.

try:
    from .memory_core.card import Card, CardState  # type: ignore
    from .memory_core.board import Board, BoardConfigError, Coord  # type: ignore
    from .memory_core.deal import DEFAULT_FACES, build_deck, shuffle, deal_board, board_from_ids  # type: ignore
    from .memory_core.scheduler import Scheduler, ScheduledCall, WallClock  # type: ignore
    from .memory_core.turn import (  # type: ignore
        TurnController,
        TurnPhase,
        DEFAULT_SETTLE_DELAY,
        DEFAULT_MISMATCH_DELAY,
    )
    from .memory_core.animator import CardAnimator, NullAnimator, Transition, TransitionLog  # type: ignore
    from .memory_core.config import GameConfig, configure_logging  # type: ignore
    from .memory_core.records import (  # type: ignore
        PersistedState,
        grid_key,
        load_state,
        db_store_setting,
        db_lookup_best,
        db_store_best,
        db_list_best,
    )
    from .memory_core.reporter import SessionReporter, WinResult, format_time  # type: ignore
    from .memory_core.grid_sizes import (  # type: ignore
        GridSize,
        DEFAULT_GRID_SIZES,
        select_grid_size,
        find_grid_size,
        validate_grid_size,
    )
    from .memory_core.layout import GridLayout, compute_layout, choose_scale_mode  # type: ignore
    from .memory_core.session import GameSession  # type: ignore
except ImportError:
    from memory_core.card import Card, CardState  # type: ignore
    from memory_core.board import Board, BoardConfigError, Coord  # type: ignore
    from memory_core.deal import DEFAULT_FACES, build_deck, shuffle, deal_board, board_from_ids  # type: ignore
    from memory_core.scheduler import Scheduler, ScheduledCall, WallClock  # type: ignore
    from memory_core.turn import (  # type: ignore
        TurnController,
        TurnPhase,
        DEFAULT_SETTLE_DELAY,
        DEFAULT_MISMATCH_DELAY,
    )
    from memory_core.animator import CardAnimator, NullAnimator, Transition, TransitionLog  # type: ignore
    from memory_core.config import GameConfig, configure_logging  # type: ignore
    from memory_core.records import (  # type: ignore
        PersistedState,
        grid_key,
        load_state,
        db_store_setting,
        db_lookup_best,
        db_store_best,
        db_list_best,
    )
    from memory_core.reporter import SessionReporter, WinResult, format_time  # type: ignore
    from memory_core.grid_sizes import (  # type: ignore
        GridSize,
        DEFAULT_GRID_SIZES,
        select_grid_size,
        find_grid_size,
        validate_grid_size,
    )
    from memory_core.layout import GridLayout, compute_layout, choose_scale_mode  # type: ignore
    from memory_core.session import GameSession  # type: ignore


def new_session(rows=None, cols=None, seed=None, db_path=None, config=None, animator=None) -> GameSession:
    """Builds a session wired to a reporter on `db_path` (in-memory when None)."""
    cfg = config or GameConfig(db_path=db_path)
    return GameSession(
        rows=rows,
        cols=cols,
        seed=seed,
        reporter=SessionReporter(db_path),
        config=cfg,
        animator=animator,
    )


def main() -> None:
    # CLI driver delegated to memory_core.cli
    try:
        from .memory_core.cli import main as _main  # type: ignore
    except ImportError:
        from memory_core.cli import main as _main  # type: ignore
    _main()


if __name__ == '__main__':
    main()
