"""Position - board plus turn, rights and counters, with make/unmake."""

from __future__ import annotations

from dataclasses import dataclass

from gambit.core.board import Board
from gambit.core.enums import CastlingRights, Color, PieceType
from gambit.core.move import Move
from gambit.core.piece import Piece
from gambit.core.types import Square
from gambit.core.zobrist import castling_key, en_passant_key, side_to_move_key


@dataclass(slots=True)
class _UndoRecord:
    """Everything :meth:`Position.unmake_move` needs to restore one ply."""

    piece: Piece
    from_sq: Square
    to_sq: Square
    captured: Piece | None
    capture_sq: Square
    promoted: bool
    castled: bool
    castling: CastlingRights
    en_passant: Square | None
    halfmove_clock: int
    fullmove_number: int
    side_to_move: Color


# Rook home corner -> the right lost when anything moves from or to it.
_ROOK_CORNERS: dict[Square, CastlingRights] = {
    Square(0, 0): CastlingRights.WHITE_QUEENSIDE,
    Square(7, 0): CastlingRights.WHITE_KINGSIDE,
    Square(0, 7): CastlingRights.BLACK_QUEENSIDE,
    Square(7, 7): CastlingRights.BLACK_KINGSIDE,
}


def castling_rook_squares(color: Color, kingside: bool) -> tuple[Square, Square]:
    """``(rook_from, rook_to)`` for a castling move of *color*."""
    rank = color.home_rank
    if kingside:
        return Square(7, rank), Square(5, rank)
    return Square(0, rank), Square(3, rank)


class Position:
    """Full chess position: board, side to move, castling, en passant, clocks.

    :meth:`make_move` / :meth:`unmake_move` form a reversible log (one undo
    record per ply, restored in strict reverse order). They are used for
    speculative play by the legality filter and the search, and never touch
    :attr:`position_history`, which only the game state machine updates.
    """

    __slots__ = (
        "board",
        "side_to_move",
        "castling",
        "en_passant",
        "halfmove_clock",
        "fullmove_number",
        "position_history",
        "_undo",
    )

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.castling = castling
        self.en_passant = en_passant
        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number
        self.position_history: dict[int, int] = {}
        self._undo: list[_UndoRecord] = []

    @classmethod
    def initial(cls) -> Position:
        return cls()

    # ── Core move operations ─────────────────────────────────────────────

    def make_move(self, move: Move) -> None:
        """Apply *move*, pushing an undo record.

        Castling, en passant and promotion are recognised from the board
        geometry, so moves built without a flag are handled too. A pawn
        reaching the last rank becomes ``move.promotion`` (queen by default).
        """
        board = self.board
        from_sq, to_sq = move.from_sq, move.to_sq
        piece = board[from_sq]
        if piece is None:
            raise ValueError(f"No piece on {from_sq.name}")

        capture_sq = to_sq
        ep_sq = self.en_passant_capture_square(piece, from_sq, to_sq)
        if ep_sq is not None:
            capture_sq = ep_sq
        captured = board[capture_sq]
        is_pawn = piece.piece_type == PieceType.PAWN
        castled = piece.piece_type == PieceType.KING and abs(to_sq.file - from_sq.file) == 2
        promoted = is_pawn and to_sq.rank == piece.color.promotion_rank

        self._undo.append(
            _UndoRecord(
                piece=piece,
                from_sq=from_sq,
                to_sq=to_sq,
                captured=captured,
                capture_sq=capture_sq,
                promoted=promoted,
                castled=castled,
                castling=self.castling,
                en_passant=self.en_passant,
                halfmove_clock=self.halfmove_clock,
                fullmove_number=self.fullmove_number,
                side_to_move=self.side_to_move,
            )
        )

        board[from_sq] = None
        if captured is not None:
            board[capture_sq] = None
        board[to_sq] = piece

        if promoted:
            board.promote(to_sq, move.promotion or PieceType.QUEEN)
        if castled:
            self.relocate_castling_rook(piece.color, to_sq.file > from_sq.file)

        self.en_passant = self.double_step_target(piece, from_sq, to_sq)
        self.update_castling_rights(piece, from_sq, to_sq)

        if is_pawn or captured is not None:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1
        if piece.color == Color.BLACK:
            self.fullmove_number += 1
        self.side_to_move = piece.color.opposite

    def unmake_move(self) -> None:
        """Undo the last :meth:`make_move`."""
        if not self._undo:
            raise IndexError("unmake_move() without a matching make_move()")
        rec = self._undo.pop()
        board = self.board

        if rec.castled:
            rook_from, rook_to = castling_rook_squares(
                rec.piece.color, rec.to_sq.file > rec.from_sq.file
            )
            board[rook_from] = board[rook_to]
            board[rook_to] = None
        if rec.promoted:
            board.promote(rec.to_sq, PieceType.PAWN)

        board[rec.to_sq] = None
        board[rec.from_sq] = rec.piece
        if rec.captured is not None:
            board[rec.capture_sq] = rec.captured

        self.castling = rec.castling
        self.en_passant = rec.en_passant
        self.halfmove_clock = rec.halfmove_clock
        self.fullmove_number = rec.fullmove_number
        self.side_to_move = rec.side_to_move

    @property
    def ply_depth(self) -> int:
        """Number of plies currently applied with :meth:`make_move`."""
        return len(self._undo)

    # ── Special-move helpers ─────────────────────────────────────────────

    def en_passant_capture_square(
        self, piece: Piece, from_sq: Square, to_sq: Square
    ) -> Square | None:
        """Square of the pawn captured en passant by this move, if it is one."""
        if (
            piece.piece_type != PieceType.PAWN
            or to_sq != self.en_passant
            or from_sq.file == to_sq.file
            or not self.board.is_empty(to_sq)
        ):
            return None
        return Square(to_sq.file, from_sq.rank)

    @staticmethod
    def double_step_target(piece: Piece, from_sq: Square, to_sq: Square) -> Square | None:
        """En-passant target created by a pawn's double step, else ``None``."""
        if piece.piece_type == PieceType.PAWN and abs(to_sq.rank - from_sq.rank) == 2:
            return Square(from_sq.file, (from_sq.rank + to_sq.rank) // 2)
        return None

    def relocate_castling_rook(self, color: Color, kingside: bool) -> None:
        rook_from, rook_to = castling_rook_squares(color, kingside)
        rook = self.board[rook_from]
        if rook is None:
            raise ValueError(f"No rook on {rook_from.name} to castle with")
        self.board[rook_from] = None
        self.board[rook_to] = rook

    def update_castling_rights(self, piece: Piece, from_sq: Square, to_sq: Square) -> None:
        """Clear rights lost by *piece* moving ``from_sq -> to_sq``.

        Rights are never re-granted. Moving to a rook corner covers the
        capture of a rook on its home square.
        """
        rights = self.castling
        if piece.piece_type == PieceType.KING:
            rights &= ~CastlingRights.both(piece.color)
        for sq in (from_sq, to_sq):
            corner = _ROOK_CORNERS.get(sq)
            if corner is not None:
                rights &= ~corner
        self.castling = rights

    # ── Hashing / repetition ─────────────────────────────────────────────

    def hash_for(self, side: Color) -> int:
        """Zobrist key of the current placement, rights and en-passant state
        with *side* to move. Move counters are not part of the key."""
        key = self.board.placement_hash ^ castling_key(self.castling)
        if side == Color.BLACK:
            key ^= side_to_move_key()
        if self.en_passant is not None:
            key ^= en_passant_key(self.en_passant)
        return key

    @property
    def zobrist_hash(self) -> int:
        return self.hash_for(self.side_to_move)

    def record_position(self, side: Color) -> int:
        """Count one more occurrence of the current position and return the total."""
        key = self.hash_for(side)
        count = self.position_history.get(key, 0) + 1
        self.position_history[key] = count
        return count

    def repetition_count(self, side: Color | None = None) -> int:
        key = self.hash_for(self.side_to_move if side is None else side)
        return self.position_history.get(key, 0)

    # ── Utilities ────────────────────────────────────────────────────────

    def copy(self) -> Position:
        """Independent copy with fresh pieces; history kept, undo log dropped."""
        pos = Position(
            board=self.board.copy(),
            side_to_move=self.side_to_move,
            castling=self.castling,
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
        )
        pos.position_history = self.position_history.copy()
        return pos

    def __repr__(self) -> str:
        return (
            f"{self.board!r}\n"
            f"side={self.side_to_move} castling={int(self.castling)} "
            f"ep={self.en_passant} halfmove={self.halfmove_clock} "
            f"fullmove={self.fullmove_number}"
        )
