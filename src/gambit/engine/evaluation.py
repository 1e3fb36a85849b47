"""Static evaluation: material plus a small positional bonus."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from gambit.core.enums import Color, PieceType
from gambit.core.piece import Piece
from gambit.core.types import Square
from gambit.engine.search import DEFAULT_PIECE_VALUES

if TYPE_CHECKING:
    from gambit.core.position import Position

_PAWN_ADVANCE_BONUS = 10
_CENTRE_BONUS_SCALE = 5
_CENTRE = 3.5


def positional_bonus(piece: Piece, sq: Square) -> int:
    """Bonus for where *piece* stands.

    Pawns earn 10 per rank advanced; knights and bishops earn more the closer
    (Manhattan distance) they are to the centre. Rooks, queens and kings get
    nothing yet.
    """
    ptype = piece.piece_type
    if ptype == PieceType.PAWN:
        advanced = sq.rank if piece.color == Color.WHITE else 7 - sq.rank
        return advanced * _PAWN_ADVANCE_BONUS
    if ptype in (PieceType.KNIGHT, PieceType.BISHOP):
        distance = abs(_CENTRE - sq.file) + abs(_CENTRE - sq.rank)
        return int((7 - distance) * _CENTRE_BONUS_SCALE)
    return 0


class Evaluator:
    """Scores a position from one side's point of view."""

    __slots__ = ("_values",)

    def __init__(self, piece_values: Mapping[PieceType, int] | None = None) -> None:
        values = dict(DEFAULT_PIECE_VALUES)
        if piece_values is not None:
            values.update(piece_values)
        self._values = values

    @property
    def piece_values(self) -> dict[PieceType, int]:
        return dict(self._values)

    def piece_score(self, piece: Piece, sq: Square) -> int:
        return self._values[piece.piece_type] + positional_bonus(piece, sq)

    def evaluate(self, position: Position, side: Color) -> int:
        score = 0
        for sq, piece in position.board.occupied():
            value = self.piece_score(piece, sq)
            score += value if piece.color == side else -value
        return score
