"""Square value type and coordinate helpers.

A square is a ``(file, rank)`` pair, both zero-based::

    a1 = Square(0, 0), h1 = Square(7, 0), ..., h8 = Square(7, 7)
"""

from __future__ import annotations

from typing import NamedTuple

_FILES = "abcdefgh"
_RANKS = "12345678"


class _SquareFields(NamedTuple):
    file: int
    rank: int


class Square(_SquareFields):
    """Board coordinate. Construction outside the 8x8 board raises ``ValueError``."""

    __slots__ = ()

    def __new__(cls, file: int, rank: int) -> Square:
        if not (0 <= file < 8 and 0 <= rank < 8):
            raise ValueError(f"Square out of range: ({file}, {rank})")
        return super().__new__(cls, file, rank)

    @property
    def index(self) -> int:
        """Little-endian rank-file index, a1=0 ... h8=63."""
        return self.rank * 8 + self.file

    @property
    def name(self) -> str:
        return _FILES[self.file] + _RANKS[self.rank]

    @property
    def is_light(self) -> bool:
        return (self.file + self.rank) % 2 == 1

    def offset(self, df: int, dr: int) -> Square | None:
        """Neighbouring square shifted by *df* files and *dr* ranks, if on board."""
        f = self.file + df
        r = self.rank + dr
        if 0 <= f < 8 and 0 <= r < 8:
            return Square(f, r)
        return None

    @classmethod
    def parse(cls, name: str) -> Square:
        """Parse square name, e.g. 'e4' -> Square(4, 3)."""
        if len(name) != 2 or name[0] not in _FILES or name[1] not in _RANKS:
            raise ValueError(f"Invalid square name: {name!r}")
        return cls(_FILES.index(name[0]), _RANKS.index(name[1]))

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Square({self.name})"


def parse_square(name: str) -> Square:
    return Square.parse(name)


def square_name(sq: Square) -> str:
    return sq.name


ALL_SQUARES: tuple[Square, ...] = tuple(
    Square(file, rank) for rank in range(8) for file in range(8)
)


# ── Named square constants ──────────────────────────────────────────────────

A1, B1, C1, D1, E1, F1, G1, H1 = ALL_SQUARES[0:8]
A2, B2, C2, D2, E2, F2, G2, H2 = ALL_SQUARES[8:16]
A3, B3, C3, D3, E3, F3, G3, H3 = ALL_SQUARES[16:24]
A4, B4, C4, D4, E4, F4, G4, H4 = ALL_SQUARES[24:32]
A5, B5, C5, D5, E5, F5, G5, H5 = ALL_SQUARES[32:40]
A6, B6, C6, D6, E6, F6, G6, H6 = ALL_SQUARES[40:48]
A7, B7, C7, D7, E7, F7, G7, H7 = ALL_SQUARES[48:56]
A8, B8, C8, D8, E8, F8, G8, H8 = ALL_SQUARES[56:64]
