"""Own-king-safety filtering plus check, checkmate and stalemate detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gambit.core.enums import Color
from gambit.core.move import Move
from gambit.core.move_generator import MoveGenerator
from gambit.core.types import Square

if TYPE_CHECKING:
    from gambit.core.position import Position


class LegalityFilter:
    """Filters pseudo-legal moves down to legal ones.

    Each candidate is played on the position with ``make_move``, the mover's
    king is tested, and ``unmake_move`` restores the exact prior state
    (captured pieces, castling rook and en-passant pawn included).
    """

    __slots__ = ("_pos", "_gen")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._gen = MoveGenerator(position)

    @property
    def generator(self) -> MoveGenerator:
        return self._gen

    # -- Check detection ----------------------------------------------------

    def is_king_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked? A side without a king is never in check."""
        king_sq = self._pos.board.king_square(color)
        if king_sq is None:
            return False
        return self._gen.is_square_attacked(king_sq, color.opposite)

    # -- Legal moves --------------------------------------------------------

    def legal_moves(self, sq: Square) -> list[Square]:
        """Legal destinations for the piece on *sq*."""
        piece = self._pos.board[sq]
        if piece is None:
            return []
        return [
            to_sq
            for to_sq in self._gen.pseudo_moves(sq)
            if self._keeps_king_safe(Move(piece, sq, to_sq), piece.color)
        ]

    def legal_moves_for(self, color: Color) -> list[Move]:
        """All legal moves for *color*, captures first."""
        return [m for m in self._gen.moves_for(color) if self._keeps_king_safe(m, color)]

    def has_legal_moves(self, color: Color) -> bool:
        board = self._pos.board
        for sq in board.all_pieces(color):
            piece = board[sq]
            for to_sq in self._gen.pseudo_moves(sq):
                if self._keeps_king_safe(Move(piece, sq, to_sq), color):
                    return True
        return False

    def is_checkmate(self, color: Color) -> bool:
        return self.is_king_in_check(color) and not self.has_legal_moves(color)

    def is_stalemate(self, color: Color) -> bool:
        return not self.is_king_in_check(color) and not self.has_legal_moves(color)

    # -- Internal -----------------------------------------------------------

    def _keeps_king_safe(self, move: Move, color: Color) -> bool:
        self._pos.make_move(move)
        try:
            return not self.is_king_in_check(color)
        finally:
            self._pos.unmake_move()
