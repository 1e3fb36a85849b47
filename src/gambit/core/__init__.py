"""Core domain layer: board, position, move generation and legality.

Quick start::

    from gambit.core import LegalityFilter, position_from_fen, STARTING_FEN, parse_square

    pos = position_from_fen(STARTING_FEN)
    legality = LegalityFilter(pos)
    print(legality.legal_moves(parse_square("g1")))
"""

from gambit.core.board import Board
from gambit.core.enums import (
    PROMOTION_TYPES,
    CastlingRights,
    Color,
    GameResult,
    MoveFlag,
    PieceType,
)
from gambit.core.legality import LegalityFilter
from gambit.core.move import NO_MOVE, Move
from gambit.core.move_generator import MoveGenerator
from gambit.core.notation import (
    STARTING_FEN,
    STARTING_PLACEMENT,
    board_from_placement,
    board_to_placement,
    move_to_notation,
    position_from_fen,
    position_to_fen,
)
from gambit.core.piece import Piece
from gambit.core.position import Position
from gambit.core.rules import Rules
from gambit.core.types import Square, parse_square, square_name

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "GameResult",
    "MoveFlag",
    "PieceType",
    "PROMOTION_TYPES",
    # Types / helpers
    "Square",
    "parse_square",
    "square_name",
    # Domain objects
    "Board",
    "LegalityFilter",
    "Move",
    "MoveGenerator",
    "NO_MOVE",
    "Piece",
    "Position",
    "Rules",
    # Notation
    "STARTING_FEN",
    "STARTING_PLACEMENT",
    "board_from_placement",
    "board_to_placement",
    "move_to_notation",
    "position_from_fen",
    "position_to_fen",
]
