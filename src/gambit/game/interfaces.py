"""Game-layer types: phases of the turn state machine, end reasons, clocks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum, auto
from typing import TypeAlias

from gambit.core.enums import Color
from gambit.core.piece import Piece
from gambit.core.types import Square

# ── Game phase FSM states ────────────────────────────────────────────────────


class GameEndReason(IntEnum):
    """Why a game finished."""

    CHECKMATE = auto()
    STALEMATE = auto()
    FIFTY_MOVE_RULE = auto()
    THREEFOLD_REPETITION = auto()
    INSUFFICIENT_MATERIAL = auto()
    AGREEMENT = auto()
    TIMEOUT = auto()

    @property
    def is_draw(self) -> bool:
        return self not in (GameEndReason.CHECKMATE, GameEndReason.TIMEOUT)


@dataclass(frozen=True, slots=True)
class AwaitingMove:
    """The side to move may submit a move."""


@dataclass(frozen=True, slots=True)
class AwaitingPromotion:
    """A pawn reached the last rank; only a promotion choice is accepted."""

    pawn: Piece
    square: Square
    origin: Square


@dataclass(frozen=True, slots=True)
class GameOver:
    """Terminal phase. ``winner`` is ``None`` for draws."""

    reason: GameEndReason
    winner: Color | None = None


GamePhase: TypeAlias = AwaitingMove | AwaitingPromotion | GameOver


# ── Time control presets ─────────────────────────────────────────────────────


class TimeControl:
    """Immutable time-control definition.

    Args:
        initial_seconds: Starting time per player.
        increment_seconds: Per-move increment (Fischer).
    """

    __slots__ = ("initial_seconds", "increment_seconds")

    def __init__(self, initial_seconds: float, increment_seconds: float = 0.0) -> None:
        if initial_seconds <= 0 or increment_seconds < 0:
            raise ValueError("Time control needs positive time and non-negative increment")
        self.initial_seconds = initial_seconds
        self.increment_seconds = increment_seconds

    @classmethod
    def rapid_10m(cls) -> TimeControl:
        return cls(600, 0)

    @classmethod
    def blitz_5m(cls) -> TimeControl:
        return cls(300, 0)

    @classmethod
    def bullet_3m(cls) -> TimeControl:
        return cls(180, 0)

    @classmethod
    def unlimited(cls) -> TimeControl:
        """No time limit."""
        return cls(float("inf"), 0)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeControl):
            return NotImplemented
        return (self.initial_seconds, self.increment_seconds) == (
            other.initial_seconds,
            other.increment_seconds,
        )

    def __hash__(self) -> int:
        return hash((self.initial_seconds, self.increment_seconds))

    def __repr__(self) -> str:
        mins = self.initial_seconds / 60
        if self.increment_seconds:
            return f"TimeControl({mins:.0f}m+{self.increment_seconds:.0f}s)"
        return f"TimeControl({mins:.0f}m)"


# ── Abstract interfaces ─────────────────────────────────────────────────────


class IClock(ABC):
    """Interface for a chess clock."""

    @abstractmethod
    def start(self, color: Color) -> None:
        """Start the clock for *color*."""

    @abstractmethod
    def stop(self) -> None:
        """Pause the running clock."""

    @abstractmethod
    def switch(self) -> None:
        """Switch to the other player's clock."""

    @abstractmethod
    def remaining(self, color: Color) -> float:
        """Seconds remaining for *color*."""

    @abstractmethod
    def is_flag_fallen(self, color: Color) -> bool:
        """Has *color* run out of time?"""

    @abstractmethod
    def add_increment(self, color: Color) -> None:
        """Add Fischer increment after a move."""
