"""Draw rules and game-result helpers built on :class:`LegalityFilter`."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gambit.core.enums import Color, GameResult, PieceType
from gambit.core.legality import LegalityFilter

if TYPE_CHECKING:
    from gambit.core.position import Position

_MINOR_PIECES = (PieceType.KNIGHT, PieceType.BISHOP)


class Rules:
    """Static rule-checker that operates on a :class:`Position`."""

    @staticmethod
    def is_fifty_move_rule(position: Position) -> bool:
        return position.halfmove_clock >= 100  # 100 half-moves = 50 full moves

    @staticmethod
    def is_threefold_repetition(position: Position, side: Color | None = None) -> bool:
        return position.repetition_count(side) >= 3

    @staticmethod
    def is_insufficient_material(position: Position) -> bool:
        """K vs K, K+B vs K, K+N vs K, K+B vs K+B (same-colour bishops)."""
        others = [
            (sq, piece)
            for sq, piece in position.board.occupied()
            if piece.piece_type != PieceType.KING
        ]
        if not others:
            return True
        if len(others) == 1:
            return others[0][1].piece_type in _MINOR_PIECES
        if len(others) == 2:
            (sq_a, a), (sq_b, b) = others
            return (
                a.piece_type == PieceType.BISHOP
                and b.piece_type == PieceType.BISHOP
                and a.color != b.color
                and sq_a.is_light == sq_b.is_light
            )
        return False

    @staticmethod
    def game_result(position: Position, side: Color | None = None) -> GameResult:
        """Result with *side* (default: side to move) about to move."""
        mover = position.side_to_move if side is None else side
        legality = LegalityFilter(position)
        if not legality.has_legal_moves(mover):
            if legality.is_king_in_check(mover):
                return GameResult.win_for(mover.opposite)
            return GameResult.DRAW
        if (
            Rules.is_fifty_move_rule(position)
            or Rules.is_threefold_repetition(position, mover)
            or Rules.is_insufficient_material(position)
        ):
            return GameResult.DRAW
        return GameResult.IN_PROGRESS
