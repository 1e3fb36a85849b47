"""Zobrist keys for position hashing.

Keys are drawn once, at import, from a fixed-seed splitmix64 stream, so a
position hashes to the same value in every process.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Final

from gambit.core.enums import CastlingRights, Color, PieceType
from gambit.core.piece import Piece
from gambit.core.types import Square

_MASK_64: Final = (1 << 64) - 1
_GOLDEN_GAMMA: Final = 0x9E3779B97F4A7C15


def _key_stream(seed: int) -> Iterator[int]:
    state = seed
    while True:
        state = (state + _GOLDEN_GAMMA) & _MASK_64
        z = state
        z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & _MASK_64
        z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & _MASK_64
        yield z ^ (z >> 31)


_stream = _key_stream(0x6A09E667F3BCC908)

# (color, piece type) -> one key per square index
_PIECE_KEYS: Final[dict[tuple[Color, PieceType], tuple[int, ...]]] = {
    (color, ptype): tuple(next(_stream) for _ in range(64))
    for color in Color
    for ptype in PieceType
}
_BLACK_TO_MOVE: Final = next(_stream)
_CASTLING_KEYS: Final = tuple(next(_stream) for _ in range(16))
_EN_PASSANT_KEYS: Final = tuple(next(_stream) for _ in range(64))

del _stream


def piece_key(piece: Piece, sq: Square) -> int:
    return _PIECE_KEYS[(piece.color, piece.piece_type)][sq.index]


def side_to_move_key() -> int:
    """Mixed into the hash when Black is to move."""
    return _BLACK_TO_MOVE


def castling_key(castling: CastlingRights) -> int:
    return _CASTLING_KEYS[int(castling) & 0xF]


def en_passant_key(ep_square: Square) -> int:
    return _EN_PASSANT_KEYS[ep_square.index]
