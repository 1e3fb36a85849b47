"""Pseudo-legal move generation, attack detection and castling legality."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from gambit.core.enums import CastlingRights, Color, MoveFlag, PieceType
from gambit.core.move import Move
from gambit.core.piece import Piece
from gambit.core.types import ALL_SQUARES, Square

if TYPE_CHECKING:
    from gambit.core.position import Position


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> dict[Square, tuple[Square, ...]]:
    targets: dict[Square, tuple[Square, ...]] = {}
    for sq in ALL_SQUARES:
        moves = (sq.offset(df, dr) for df, dr in offsets)
        targets[sq] = tuple(m for m in moves if m is not None)
    return targets


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> dict[Square, tuple[tuple[Square, ...], ...]]:
    rays_per_square: dict[Square, tuple[tuple[Square, ...], ...]] = {}
    for sq in ALL_SQUARES:
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in directions:
            ray: list[Square] = []
            cur = sq.offset(df, dr)
            while cur is not None:
                ray.append(cur)
                cur = cur.offset(df, dr)
            square_rays.append(tuple(ray))
        rays_per_square[sq] = tuple(square_rays)
    return rays_per_square


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)
_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)
_QUEEN_RAYS = _build_rays(QUEEN_DIRS)

_SLIDER_RAYS: dict[PieceType, dict[Square, tuple[tuple[Square, ...], ...]]] = {
    PieceType.BISHOP: _BISHOP_RAYS,
    PieceType.ROOK: _ROOK_RAYS,
    PieceType.QUEEN: _QUEEN_RAYS,
}


class MoveGenerator:
    """Per-square pseudo-legal destinations for a :class:`Position`.

    The generator does not care whose turn it is: any piece on the board can
    be asked for its destinations. In check-simulation mode (``for_check``)
    castling is never produced and pawns report the two squares they attack,
    which keeps attack tests free of castling recursion.
    """

    __slots__ = ("_pos",)

    def __init__(self, position: Position) -> None:
        self._pos = position

    # -- Public API ---------------------------------------------------------

    def pseudo_moves(self, sq: Square, *, for_check: bool = False) -> list[Square]:
        """Destinations of the piece on *sq* (empty list if *sq* is empty)."""
        piece = self._pos.board[sq]
        if piece is None:
            return []
        return _GENERATORS[piece.piece_type](self, sq, piece, for_check)

    def moves_for(self, color: Color) -> list[Move]:
        """Pseudo-legal :class:`Move` objects for *color*, captures first.

        Promotions are generated once, to a queen.
        """
        board = self._pos.board
        captures: list[Move] = []
        quiet: list[Move] = []
        for from_sq in board.all_pieces(color):
            piece = board[from_sq]
            for to_sq in self.pseudo_moves(from_sq):
                flag = self.classify(from_sq, to_sq)
                promotion = PieceType.QUEEN if flag == MoveFlag.PROMOTION else None
                move = Move(piece, from_sq, to_sq, flag, promotion)
                if flag == MoveFlag.EN_PASSANT or not board.is_empty(to_sq):
                    captures.append(move)
                else:
                    quiet.append(move)
        return captures + quiet

    def classify(self, from_sq: Square, to_sq: Square) -> MoveFlag:
        """Special-move flag for the piece on *from_sq* moving to *to_sq*."""
        piece = self._pos.board[from_sq]
        if piece is None:
            return MoveFlag.NORMAL
        if piece.piece_type == PieceType.KING and abs(to_sq.file - from_sq.file) == 2:
            if to_sq.file > from_sq.file:
                return MoveFlag.CASTLE_KINGSIDE
            return MoveFlag.CASTLE_QUEENSIDE
        if piece.piece_type != PieceType.PAWN:
            return MoveFlag.NORMAL
        if to_sq.rank == piece.color.promotion_rank:
            return MoveFlag.PROMOTION
        if abs(to_sq.rank - from_sq.rank) == 2:
            return MoveFlag.DOUBLE_PAWN
        if self._pos.en_passant_capture_square(piece, from_sq, to_sq) is not None:
            return MoveFlag.EN_PASSANT
        return MoveFlag.NORMAL

    # -- Attack detection ---------------------------------------------------

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* attacked by any piece of *by_color*?

        Reverse lookup from the target square; gives the same answer as
        scanning every *by_color* piece's check-simulation destinations for
        any square not occupied by *by_color* itself.
        """
        board = self._pos.board

        pawn_rank = sq.rank - by_color.forward
        if 0 <= pawn_rank < 8:
            for df in (-1, 1):
                f = sq.file + df
                if 0 <= f < 8:
                    p = board[Square(f, pawn_rank)]
                    if p is not None and p.color == by_color and p.piece_type == PieceType.PAWN:
                        return True

        for origin in _KNIGHT_TARGETS[sq]:
            p = board[origin]
            if p is not None and p.color == by_color and p.piece_type == PieceType.KNIGHT:
                return True

        for origin in _KING_TARGETS[sq]:
            p = board[origin]
            if p is not None and p.color == by_color and p.piece_type == PieceType.KING:
                return True

        for rays, sliders in (
            (_BISHOP_RAYS[sq], (PieceType.BISHOP, PieceType.QUEEN)),
            (_ROOK_RAYS[sq], (PieceType.ROOK, PieceType.QUEEN)),
        ):
            for ray in rays:
                for origin in ray:
                    p = board[origin]
                    if p is None:
                        continue
                    if p.color == by_color and p.piece_type in sliders:
                        return True
                    break

        return False

    def is_castling_legal(self, color: Color, kingside: bool) -> bool:
        """Right held, king and rook at home, path clear, no check on the way."""
        pos = self._pos
        if not pos.castling & CastlingRights.for_side(color, kingside):
            return False

        board = pos.board
        rank = color.home_rank
        king_sq = Square(4, rank)
        rook_sq = Square(7 if kingside else 0, rank)
        king = board[king_sq]
        rook = board[rook_sq]
        if king is None or king.color != color or king.piece_type != PieceType.KING:
            return False
        if rook is None or rook.color != color or rook.piece_type != PieceType.ROOK:
            return False

        between = range(5, 7) if kingside else range(1, 4)
        if any(not board.is_empty(Square(f, rank)) for f in between):
            return False

        enemy = color.opposite
        if self.is_square_attacked(king_sq, enemy):
            return False
        step = 1 if kingside else -1
        for f in (4 + step, 4 + 2 * step):
            if self.is_square_attacked(Square(f, rank), enemy):
                return False
        return True

    # -- Piece-specific generators -----------------------------------------

    def _pawn_targets(self, sq: Square, piece: Piece, for_check: bool) -> list[Square]:
        board = self._pos.board
        forward = piece.color.forward
        diagonals = [d for d in (sq.offset(-1, forward), sq.offset(1, forward)) if d is not None]
        if for_check:
            return diagonals

        targets: list[Square] = []
        one_step = sq.offset(0, forward)
        if one_step is not None and board.is_empty(one_step):
            targets.append(one_step)
            if sq.rank == piece.color.pawn_rank:
                two_step = sq.offset(0, 2 * forward)
                if two_step is not None and board.is_empty(two_step):
                    targets.append(two_step)

        # Only the side that can legally take on the target square may use it.
        ep = self._pos.en_passant
        ep_rank = 5 if piece.color == Color.WHITE else 2
        for cap_sq in diagonals:
            target = board[cap_sq]
            if target is not None:
                if target.color != piece.color:
                    targets.append(cap_sq)
            elif cap_sq == ep and ep.rank == ep_rank:
                targets.append(cap_sq)
        return targets

    def _step_targets(
        self,
        sq: Square,
        piece: Piece,
        table: dict[Square, tuple[Square, ...]],
    ) -> list[Square]:
        board = self._pos.board
        targets: list[Square] = []
        for to_sq in table[sq]:
            occupant = board[to_sq]
            if occupant is None or occupant.color != piece.color:
                targets.append(to_sq)
        return targets

    def _knight_targets(self, sq: Square, piece: Piece, for_check: bool) -> list[Square]:
        return self._step_targets(sq, piece, _KNIGHT_TARGETS)

    def _sliding_targets(self, sq: Square, piece: Piece, for_check: bool) -> list[Square]:
        board = self._pos.board
        targets: list[Square] = []
        for ray in _SLIDER_RAYS[piece.piece_type][sq]:
            for to_sq in ray:
                occupant = board[to_sq]
                if occupant is None:
                    targets.append(to_sq)
                    continue
                if occupant.color != piece.color:
                    targets.append(to_sq)
                break
        return targets

    def _king_targets(self, sq: Square, piece: Piece, for_check: bool) -> list[Square]:
        targets = self._step_targets(sq, piece, _KING_TARGETS)
        if for_check or sq != Square(4, piece.color.home_rank):
            return targets
        for kingside in (True, False):
            if self.is_castling_legal(piece.color, kingside):
                targets.append(Square(6 if kingside else 2, sq.rank))
        return targets


_Generator = Callable[[MoveGenerator, Square, Piece, bool], list[Square]]

_GENERATORS: dict[PieceType, _Generator] = {
    PieceType.PAWN: MoveGenerator._pawn_targets,
    PieceType.KNIGHT: MoveGenerator._knight_targets,
    PieceType.BISHOP: MoveGenerator._sliding_targets,
    PieceType.ROOK: MoveGenerator._sliding_targets,
    PieceType.QUEEN: MoveGenerator._sliding_targets,
    PieceType.KING: MoveGenerator._king_targets,
}
