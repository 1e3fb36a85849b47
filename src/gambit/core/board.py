"""Board - piece placement on an 8x8 grid."""

from __future__ import annotations

from collections.abc import Iterator

from gambit.core.enums import Color, PieceType
from gambit.core.piece import Piece
from gambit.core.types import ALL_SQUARES, Square
from gambit.core.zobrist import piece_key

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


class Board:
    """Mutable 64-square board with a king cache and an incremental placement hash."""

    __slots__ = ("_squares", "_king_squares", "_placement_hash")

    def __init__(self) -> None:
        self._squares: list[Piece | None] = [None] * 64
        # [color] -> king square cache (None if king missing).
        self._king_squares: list[Square | None] = [None, None]
        self._placement_hash = 0

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares[sq.index]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        idx = sq.index
        old_piece = self._squares[idx]
        if old_piece is piece:
            return

        if old_piece is not None:
            self._placement_hash ^= piece_key(old_piece, sq)
            color_idx = int(old_piece.color)
            if old_piece.piece_type == PieceType.KING and self._king_squares[color_idx] == sq:
                self._king_squares[color_idx] = None

        self._squares[idx] = piece

        if piece is None:
            return

        self._placement_hash ^= piece_key(piece, sq)
        if piece.piece_type == PieceType.KING:
            self._king_squares[int(piece.color)] = sq

    def is_empty(self, sq: Square) -> bool:
        return self._squares[sq.index] is None

    def promote(self, sq: Square, piece_type: PieceType) -> Piece:
        """Rewrite the type of the piece on *sq* in place and return it."""
        piece = self._squares[sq.index]
        if piece is None:
            raise ValueError(f"No piece on {sq.name} to promote")
        if piece_type == PieceType.KING or piece.piece_type == PieceType.KING:
            raise ValueError(f"Cannot change piece type to or from king on {sq.name}")
        self._placement_hash ^= piece_key(piece, sq)
        piece.piece_type = piece_type
        self._placement_hash ^= piece_key(piece, sq)
        return piece

    # -- Query helpers ------------------------------------------------------

    def occupied(self) -> Iterator[tuple[Square, Piece]]:
        """Yield ``(square, piece)`` for every occupied square, a1 first."""
        for sq, piece in zip(ALL_SQUARES, self._squares):
            if piece is not None:
                yield sq, piece

    def all_pieces(self, color: Color) -> list[Square]:
        """All squares occupied by *color*."""
        return [sq for sq, piece in self.occupied() if piece.color == color]

    def find(self, piece: Piece) -> Square | None:
        """Square holding this exact piece object, if it is on the board."""
        for sq, occupant in zip(ALL_SQUARES, self._squares):
            if occupant is piece:
                return sq
        return None

    def king_square(self, color: Color) -> Square | None:
        return self._king_squares[int(color)]

    def piece_count(self) -> int:
        return sum(1 for p in self._squares if p is not None)

    @property
    def placement_hash(self) -> int:
        """Zobrist key over piece placement only."""
        return self._placement_hash

    # -- Mutation / copying -------------------------------------------------

    def copy(self) -> Board:
        """Copy with fresh piece objects so the copy can be mutated freely."""
        b = Board()
        for sq, piece in self.occupied():
            b[sq] = Piece(piece.color, piece.piece_type)
        return b

    def clear(self) -> None:
        self._squares = [None] * 64
        self._king_squares = [None, None]
        self._placement_hash = 0

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        b = cls()
        for f, pt in enumerate(_BACK_RANK):
            b[Square(f, 0)] = Piece(Color.WHITE, pt)
            b[Square(f, 1)] = Piece(Color.WHITE, PieceType.PAWN)
            b[Square(f, 6)] = Piece(Color.BLACK, PieceType.PAWN)
            b[Square(f, 7)] = Piece(Color.BLACK, pt)
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._squares == other._squares

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank in range(7, -1, -1):
            row = []
            for file in range(8):
                p = self[Square(file, rank)]
                row.append(str(p) if p else ".")
            rows.append(f"{rank + 1} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
