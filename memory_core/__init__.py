"""
Memory Match core Python package.

This package contains the card and turn state machines plus the small
collaborators around them, kept free of any UI so they stay easy to test.
Modules:
- card.py: Card, CardState (card lifecycle)
- board.py: Board, BoardConfigError
- deal.py: deck building and shuffle-and-deal
- turn.py: TurnController (selection, evaluation, input lock)
- scheduler.py: cooperative timer queue and wall-clock pump
- session.py: GameSession (timer, reset, grid-size change)
- records.py / reporter.py: best-time persistence and win reporting
- grid_sizes.py / layout.py: grid options and responsive sizing
- animator.py: transition sinks for renderers
- config.py: environment-driven settings and logging setup
"""
