"""Notation package: placement / FEN and move-history notation."""

from gambit.core.notation.fen import (
    STARTING_FEN,
    STARTING_PLACEMENT,
    board_from_placement,
    board_to_placement,
    load_placement,
    position_from_fen,
    position_to_fen,
)
from gambit.core.notation.moves import (
    KINGSIDE_CASTLE,
    QUEENSIDE_CASTLE,
    castle_notation,
    move_to_notation,
    parse_move_notation,
)

__all__ = [
    "KINGSIDE_CASTLE",
    "QUEENSIDE_CASTLE",
    "STARTING_FEN",
    "STARTING_PLACEMENT",
    "board_from_placement",
    "board_to_placement",
    "castle_notation",
    "load_placement",
    "move_to_notation",
    "parse_move_notation",
    "position_from_fen",
    "position_to_fen",
]
