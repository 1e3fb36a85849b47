"""Human-readable move notation used for the game's move history."""

from __future__ import annotations

from gambit.core.types import Square, parse_square

KINGSIDE_CASTLE = "O-O"
QUEENSIDE_CASTLE = "O-O-O"


def move_to_notation(from_sq: Square, to_sq: Square) -> str:
    """``'e2 to e4'``."""
    return f"{from_sq.name} to {to_sq.name}"


def castle_notation(kingside: bool) -> str:
    return KINGSIDE_CASTLE if kingside else QUEENSIDE_CASTLE


def parse_move_notation(text: str) -> tuple[Square, Square]:
    """Inverse of :func:`move_to_notation` for plain moves."""
    parts = text.split()
    if len(parts) != 3 or parts[1] != "to":
        raise ValueError(f"Invalid move notation: {text!r}")
    return parse_square(parts[0]), parse_square(parts[2])
