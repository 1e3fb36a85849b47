"""Move request/record."""

from __future__ import annotations

from dataclasses import dataclass

from gambit.core.enums import MoveFlag, PieceType
from gambit.core.piece import Piece
from gambit.core.types import A1, Square

_PROMO_CHARS: dict[PieceType, str] = {
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
}


@dataclass(frozen=True, slots=True)
class Move:
    """A move request or record. Applying it is the caller's job.

    ``Move.invalid()`` is the "no move available" sentinel returned by the
    search when the side to move has no legal moves.
    """

    piece: Piece | None
    from_sq: Square
    to_sq: Square
    flag: MoveFlag = MoveFlag.NORMAL
    promotion: PieceType | None = None
    is_valid: bool = True

    @classmethod
    def invalid(cls) -> Move:
        return NO_MOVE

    @property
    def is_castle(self) -> bool:
        return self.flag in (MoveFlag.CASTLE_KINGSIDE, MoveFlag.CASTLE_QUEENSIDE)

    def __str__(self) -> str:
        """Coordinate notation, e.g. 'e2e4' or 'e7e8q'."""
        if not self.is_valid:
            return "0000"
        s = f"{self.from_sq.name}{self.to_sq.name}"
        if self.promotion is not None:
            s += _PROMO_CHARS[self.promotion]
        return s


NO_MOVE = Move(None, A1, A1, is_valid=False)
