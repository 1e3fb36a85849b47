"""GameState - the turn and rule state machine of one game.

Owns the authoritative :class:`Position` and applies submitted moves with all
their side effects (castling rook, en-passant capture, promotion), keeps the
draw counters, evaluates end conditions after every ply and notifies
listeners through :class:`GameEvents`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from gambit.core.enums import PROMOTION_TYPES, Color, GameResult, PieceType
from gambit.core.legality import LegalityFilter
from gambit.core.notation import (
    castle_notation,
    move_to_notation,
    position_from_fen,
    position_to_fen,
)
from gambit.core.piece import Piece
from gambit.core.position import Position
from gambit.core.rules import Rules
from gambit.core.types import Square
from gambit.game.clock import Clock
from gambit.game.interfaces import (
    AwaitingMove,
    AwaitingPromotion,
    GameEndReason,
    GameOver,
    GamePhase,
    TimeControl,
)

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

ColorCallback = Callable[[Color], None]
DrawCallback = Callable[[GameEndReason], None]
GameEndCallback = Callable[[], None]
MoveCallback = Callable[[str], None]  # notation


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_turn_changed: list[ColorCallback] = field(default_factory=list)
    on_check: list[ColorCallback] = field(default_factory=list)
    on_checkmate: list[ColorCallback] = field(default_factory=list)  # winner
    on_draw: list[DrawCallback] = field(default_factory=list)
    on_timeout: list[ColorCallback] = field(default_factory=list)  # flagged side
    on_game_end: list[GameEndCallback] = field(default_factory=list)
    on_promotion_required: list[ColorCallback] = field(default_factory=list)
    on_move: list[MoveCallback] = field(default_factory=list)


# ── State machine ────────────────────────────────────────────────────────────


class GameState:
    """Sequences moves and evaluates end conditions for one game.

    Illegal requests (wrong side, unreachable square, own king left in check,
    anything while a promotion is pending or after the game ended) are
    rejected by returning ``False`` without touching any state.
    """

    __slots__ = (
        "_position",
        "_legality",
        "_phase",
        "_history",
        "_turn_number",
        "_time_control",
        "_time_source",
        "_clock",
        "events",
    )

    def __init__(
        self,
        fen: str | None = None,
        *,
        time_control: TimeControl | None = None,
        time_source: Callable[[], float] | None = None,
        events: GameEvents | None = None,
    ) -> None:
        self.events = events if events is not None else GameEvents()
        self._time_control = time_control
        self._time_source = time_source
        self._clock: Clock | None = None
        self._reset(self._parse(fen))

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def position(self) -> Position:
        return self._position

    @property
    def legality(self) -> LegalityFilter:
        return self._legality

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def side_to_move(self) -> Color:
        return self._position.side_to_move

    @property
    def turn_number(self) -> int:
        """Plies completed plus one; bumped on every turn switch."""
        return self._turn_number

    @property
    def move_history(self) -> list[str]:
        return list(self._history)

    @property
    def clock(self) -> Clock | None:
        return self._clock

    @property
    def is_game_over(self) -> bool:
        return isinstance(self._phase, GameOver)

    @property
    def result(self) -> GameResult:
        phase = self._phase
        if not isinstance(phase, GameOver):
            return GameResult.IN_PROGRESS
        if phase.winner is None:
            return GameResult.DRAW
        return GameResult.win_for(phase.winner)

    def legal_moves(self, sq: Square) -> list[Square]:
        """Legal destinations for the piece on *sq* if it may move right now."""
        piece = self._position.board[sq]
        if (
            piece is None
            or piece.color != self._position.side_to_move
            or not isinstance(self._phase, AwaitingMove)
        ):
            return []
        return self._legality.legal_moves(sq)

    # ── Inbound operations ───────────────────────────────────────────────

    def submit_move(self, piece: Piece, target: Square) -> bool:
        """Move *piece* to *target*. Returns ``True`` if the move was applied."""
        if not isinstance(self._phase, AwaitingMove):
            _LOGGER.debug("move rejected: game is not awaiting a move")
            return False

        pos = self._position
        board = pos.board
        origin = board.find(piece)
        if origin is None or piece.color != pos.side_to_move:
            _LOGGER.debug("move rejected: %s is not a piece of the side to move", piece)
            return False
        if target not in self._legality.legal_moves(origin):
            _LOGGER.debug("move rejected: %s to %s is illegal", origin, target)
            return False

        if piece.piece_type == PieceType.KING and abs(target.file - origin.file) == 2:
            kingside = target.file > origin.file
            board[origin] = None
            board[target] = piece
            pos.relocate_castling_rook(piece.color, kingside)
            pos.halfmove_clock += 1
            self._complete_ply(piece, origin, target, castle_notation(kingside))
            return True

        capture_sq = pos.en_passant_capture_square(piece, origin, target) or target
        captured = board[capture_sq]
        if captured is not None:
            board[capture_sq] = None
        board[origin] = None
        board[target] = piece

        if piece.piece_type == PieceType.PAWN or captured is not None:
            pos.halfmove_clock = 0
        else:
            pos.halfmove_clock += 1

        if piece.piece_type == PieceType.PAWN and target.rank == piece.color.promotion_rank:
            self._phase = AwaitingPromotion(piece, target, origin)
            self._emit(self.events.on_promotion_required, piece.color)
            return True

        self._complete_ply(piece, origin, target, move_to_notation(origin, target))
        return True

    def submit_square_move(self, from_sq: Square, target: Square) -> bool:
        """Like :meth:`submit_move`, naming the piece by its square."""
        piece = self._position.board[from_sq]
        if piece is None:
            return False
        return self.submit_move(piece, target)

    def choose_promotion(self, piece_type: PieceType) -> bool:
        """Complete a pending promotion with *piece_type* (Q, R, B or N)."""
        phase = self._phase
        if not isinstance(phase, AwaitingPromotion) or piece_type not in PROMOTION_TYPES:
            return False
        self._position.board.promote(phase.square, piece_type)
        self._phase = AwaitingMove()
        self._complete_ply(
            phase.pawn,
            phase.origin,
            phase.square,
            move_to_notation(phase.origin, phase.square),
        )
        return True

    def agree_draw(self) -> bool:
        """End a running game as a draw by agreement."""
        if self.is_game_over:
            return False
        self._end(GameEndReason.AGREEMENT, None)
        return True

    def tick(self) -> bool:
        """Poll the clock; ends the game on timeout. Returns ``True`` if it did."""
        if self._clock is None or self.is_game_over:
            return False
        color = self._position.side_to_move
        if not self._clock.is_flag_fallen(color):
            return False
        self._end(GameEndReason.TIMEOUT, color.opposite)
        return True

    def restart(self, fen: str | None = None) -> None:
        """Start over from the standard setup (or *fen*).

        A malformed *fen* raises ``ValueError`` and leaves the game untouched.
        """
        self._reset(self._parse(fen))
        if not self.is_game_over:
            self._emit(self.events.on_turn_changed, self._position.side_to_move)

    def load_fen(self, fen: str) -> None:
        self.restart(fen)

    def export_fen(self) -> str:
        return position_to_fen(self._position)

    # ── Ply completion ───────────────────────────────────────────────────

    def _complete_ply(self, piece: Piece, origin: Square, target: Square, notation: str) -> None:
        pos = self._position
        pos.update_castling_rights(piece, origin, target)
        pos.en_passant = pos.double_step_target(piece, origin, target)
        self._history.append(notation)
        _LOGGER.debug("ply %d: %s", self._turn_number, notation)
        self._emit(self.events.on_move, notation)

        mover = piece.color
        if mover == Color.BLACK:
            pos.fullmove_number += 1
        next_color = mover.opposite
        pos.record_position(next_color)

        if self._check_game_over(next_color):
            return
        self._switch_turn(mover, next_color)

    def _check_game_over(self, color: Color) -> bool:
        """Evaluate end conditions for *color*, the player about to move."""
        pos = self._position
        in_check = self._legality.is_king_in_check(color)
        if not self._legality.has_legal_moves(color):
            if in_check:
                self._end(GameEndReason.CHECKMATE, color.opposite)
            else:
                self._end(GameEndReason.STALEMATE, None)
            return True
        if Rules.is_fifty_move_rule(pos):
            self._end(GameEndReason.FIFTY_MOVE_RULE, None)
            return True
        if Rules.is_threefold_repetition(pos, color):
            self._end(GameEndReason.THREEFOLD_REPETITION, None)
            return True
        if Rules.is_insufficient_material(pos):
            self._end(GameEndReason.INSUFFICIENT_MATERIAL, None)
            return True
        if in_check:
            self._emit(self.events.on_check, color)
        return False

    def _switch_turn(self, mover: Color, next_color: Color) -> None:
        self._turn_number += 1
        self._position.side_to_move = next_color
        if self._clock is not None:
            self._clock.add_increment(mover)
            self._clock.switch()
        self._emit(self.events.on_turn_changed, next_color)

    def _end(self, reason: GameEndReason, winner: Color | None) -> None:
        self._phase = GameOver(reason, winner)
        if self._clock is not None:
            self._clock.stop()
        _LOGGER.info("game over: %s, winner: %s", reason.name, winner or "none")
        if reason == GameEndReason.CHECKMATE and winner is not None:
            self._emit(self.events.on_checkmate, winner)
        elif reason == GameEndReason.TIMEOUT and winner is not None:
            self._emit(self.events.on_timeout, winner.opposite)
        elif reason.is_draw:
            self._emit(self.events.on_draw, reason)
        self._emit(self.events.on_game_end)

    # ── Setup ────────────────────────────────────────────────────────────

    @staticmethod
    def _parse(fen: str | None) -> Position:
        return Position.initial() if fen is None else position_from_fen(fen)

    def _reset(self, position: Position) -> None:
        self._position = position
        self._legality = LegalityFilter(position)
        self._phase: GamePhase = AwaitingMove()
        self._history: list[str] = []
        self._turn_number = 1
        position.position_history.clear()
        position.record_position(position.side_to_move)

        if self._time_control is None:
            self._clock = None
        else:
            if self._time_source is None:
                self._clock = Clock(self._time_control)
            else:
                self._clock = Clock(self._time_control, self._time_source)
            self._clock.start(position.side_to_move)

        # A loaded position may already be decided.
        self._check_game_over(position.side_to_move)

    @staticmethod
    def _emit(callbacks: list[Callable[..., None]], *args: object) -> None:
        for callback in callbacks:
            callback(*args)
