"""Shared engine search models: budget, settings and result."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING

from gambit.core.enums import PieceType

if TYPE_CHECKING:
    from gambit.core.move import Move

DEFAULT_PIECE_VALUES: dict[PieceType, int] = {
    PieceType.PAWN: 100,
    PieceType.KNIGHT: 320,
    PieceType.BISHOP: 330,
    PieceType.ROOK: 500,
    PieceType.QUEEN: 900,
    PieceType.KING: 20000,
}


class Difficulty(IntEnum):
    """Automated opponent strength; the value is the search depth."""

    EASY = 1
    MEDIUM = 2
    HARD = 3
    EXPERT = 4
    MASTER = 5

    @classmethod
    def clamp(cls, level: int) -> Difficulty:
        return cls(min(max(level, cls.EASY), cls.MASTER))


@dataclass(slots=True, frozen=True)
class SearchBudget:
    """Constraints for a single move computation.

    ``max_nodes_per_second`` throttles the search once it has run for more
    than 0.1s; ``None`` disables the throttle.
    """

    max_depth: int = 3
    max_wall_clock_seconds: float = 2.0
    max_nodes_per_second: float | None = None

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError("Search depth must be >= 1")
        if self.max_wall_clock_seconds < 0:
            raise ValueError("Wall-clock budget must be >= 0")
        if self.max_nodes_per_second is not None and self.max_nodes_per_second <= 0:
            raise ValueError("Node rate budget must be > 0")


@dataclass(slots=True, frozen=True)
class SearchResult:
    """Result produced by the engine search.

    ``best_move`` is ``Move.invalid()`` when the side had no legal move.
    """

    best_move: Move
    score: int
    nodes: int
    completed_moves: int
    total_moves: int
    elapsed: float
    exhausted: bool = False


@dataclass(slots=True)
class EngineSettings:
    """Tunable engine parameters."""

    depth: int = 3
    max_wall_clock_seconds: float = 2.0
    max_nodes_per_second: float | None = 5000
    batch_size: int = 5
    piece_values: dict[PieceType, int] = field(
        default_factory=lambda: dict(DEFAULT_PIECE_VALUES)
    )

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise ValueError("Batch size must be >= 1")

    def budget(self, depth: int | None = None) -> SearchBudget:
        return SearchBudget(
            max_depth=self.depth if depth is None else depth,
            max_wall_clock_seconds=self.max_wall_clock_seconds,
            max_nodes_per_second=self.max_nodes_per_second,
        )
