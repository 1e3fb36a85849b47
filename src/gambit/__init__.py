"""gambit: chess rules, game state machine and alpha-beta search."""

__version__ = "0.1.0"
