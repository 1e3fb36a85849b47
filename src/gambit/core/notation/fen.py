"""Placement and FEN parsing and serialization."""

from __future__ import annotations

from gambit.core.board import Board
from gambit.core.enums import CastlingRights, Color
from gambit.core.piece import Piece
from gambit.core.position import Position
from gambit.core.types import Square, parse_square

STARTING_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
STARTING_FEN = f"{STARTING_PLACEMENT} w KQkq - 0 1"

_CASTLING_CHARS: tuple[tuple[str, CastlingRights], ...] = (
    ("K", CastlingRights.WHITE_KINGSIDE),
    ("Q", CastlingRights.WHITE_QUEENSIDE),
    ("k", CastlingRights.BLACK_KINGSIDE),
    ("q", CastlingRights.BLACK_QUEENSIDE),
)


def board_from_placement(placement: str) -> Board:
    """Parse the rank-by-rank placement field (rank 8 first) into a new board."""
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise ValueError(f"Invalid placement (must contain 8 ranks): {placement!r}")
    board = Board()
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        for ch in rank_text:
            if ch.isdigit():
                step = int(ch)
                if not (1 <= step <= 8):
                    raise ValueError(f"Invalid placement digit {ch!r}: {placement!r}")
                file += step
            else:
                if file >= 8:
                    raise ValueError(f"Invalid placement rank width: {placement!r}")
                board[Square(file, rank)] = Piece.from_char(ch)
                file += 1
            if file > 8:
                raise ValueError(f"Invalid placement rank width: {placement!r}")
        if file != 8:
            raise ValueError(f"Invalid placement rank width: {placement!r}")
    return board


def board_to_placement(board: Board) -> str:
    rows: list[str] = []
    for rank in range(7, -1, -1):
        empty = 0
        row = ""
        for file in range(8):
            piece = board[Square(file, rank)]
            if piece is None:
                empty += 1
                continue
            if empty:
                row += str(empty)
                empty = 0
            row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    return "/".join(rows)


def load_placement(position: Position, placement: str) -> None:
    """Replace *position*'s pieces with *placement*.

    The string is fully parsed before anything is touched, so a malformed
    placement raises ``ValueError`` and leaves *position* unchanged.
    """
    position.board = board_from_placement(placement)


def position_from_fen(fen: str) -> Position:
    """Parse a FEN string into a :class:`Position`.

    Only the placement field is mandatory; missing trailing fields default to
    white to move, no castling, no en passant and fresh counters.
    """
    parts = fen.split()
    if not (1 <= len(parts) <= 6):
        raise ValueError(f"Invalid FEN (need 1-6 fields): {fen!r}")
    parts += ["w", "-", "-", "0", "1"][len(parts) - 1 :]
    placement, side_part, castling_part, ep_part, half_part, full_part = parts

    board = board_from_placement(placement)

    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise ValueError(f"Invalid FEN side-to-move field: {side_part!r}")

    castling = CastlingRights.NONE
    if castling_part != "-":
        lookup = dict(_CASTLING_CHARS)
        seen: set[str] = set()
        for ch in castling_part:
            right = lookup.get(ch)
            if right is None or ch in seen:
                raise ValueError(f"Invalid FEN castling field: {castling_part!r}")
            seen.add(ch)
            castling |= right

    ep: Square | None = None
    if ep_part != "-":
        ep = parse_square(ep_part)
        expected_rank = 5 if side == Color.WHITE else 2
        if ep.rank != expected_rank:
            raise ValueError(f"Invalid FEN en-passant square for side-to-move: {ep_part!r}")

    try:
        halfmove = int(half_part)
        fullmove = int(full_part)
    except ValueError:
        raise ValueError(f"Invalid FEN move counters: {fen!r}") from None
    if halfmove < 0 or fullmove < 1:
        raise ValueError(f"Invalid FEN move counters: {fen!r}")

    return Position(board, side, castling, ep, halfmove, fullmove)


def position_to_fen(pos: Position) -> str:
    """Serialise a :class:`Position` to FEN."""
    side = "w" if pos.side_to_move == Color.WHITE else "b"
    castling = "".join(ch for ch, right in _CASTLING_CHARS if pos.castling & right) or "-"
    ep = pos.en_passant.name if pos.en_passant is not None else "-"
    return (
        f"{board_to_placement(pos.board)} {side} {castling} {ep} "
        f"{pos.halfmove_clock} {pos.fullmove_number}"
    )
