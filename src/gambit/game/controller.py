"""GameController - inbound boundary of a game, including the automated opponent.

Wraps a :class:`GameState` and a :class:`MinimaxEngine`. Human input goes
through :meth:`submit_move`; the engine plays the side given by ``ai_color``
either in one blocking call (:meth:`play_ai_turn`) or cooperatively
(:meth:`begin_ai_turn` / :meth:`finish_ai_turn`).
"""

from __future__ import annotations

import logging

from gambit.core.enums import Color, PieceType
from gambit.core.move import NO_MOVE, Move
from gambit.core.piece import Piece
from gambit.core.types import Square
from gambit.engine.minimax import MinimaxEngine, SearchTask
from gambit.engine.search import Difficulty, EngineSettings, SearchBudget
from gambit.game.interfaces import AwaitingMove, AwaitingPromotion, TimeControl
from gambit.game.state import GameEvents, GameState

_LOGGER = logging.getLogger(__name__)


class GameController:
    """Routes player input and engine moves into one game."""

    __slots__ = (
        "_state",
        "_engine",
        "_settings",
        "_ai_color",
        "_ai_enabled",
        "_difficulty",
        "_task",
    )

    def __init__(
        self,
        state: GameState | None = None,
        engine: MinimaxEngine | None = None,
        settings: EngineSettings | None = None,
        *,
        ai_color: Color = Color.BLACK,
        ai_enabled: bool = True,
    ) -> None:
        self._settings = settings if settings is not None else EngineSettings()
        self._state = state if state is not None else GameState()
        self._engine = engine if engine is not None else MinimaxEngine.from_settings(self._settings)
        self._ai_color = ai_color
        self._ai_enabled = ai_enabled
        self._difficulty = Difficulty.clamp(self._settings.depth)
        self._task: SearchTask | None = None

    @classmethod
    def new_game(
        cls,
        *,
        player_color: Color = Color.WHITE,
        time_control: TimeControl | None = None,
        fen: str | None = None,
        settings: EngineSettings | None = None,
        ai_enabled: bool = True,
    ) -> GameController:
        """Human plays *player_color*, the engine the other side."""
        state = GameState(fen, time_control=time_control)
        return cls(
            state,
            settings=settings,
            ai_color=player_color.opposite,
            ai_enabled=ai_enabled,
        )

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def events(self) -> GameEvents:
        return self._state.events

    @property
    def engine(self) -> MinimaxEngine:
        return self._engine

    @property
    def ai_color(self) -> Color:
        return self._ai_color

    def set_player_color(self, color: Color) -> None:
        """The engine always plays the opposite of the human."""
        self._ai_color = color.opposite

    @property
    def ai_enabled(self) -> bool:
        return self._ai_enabled

    @ai_enabled.setter
    def ai_enabled(self, enabled: bool) -> None:
        if not enabled:
            self.cancel_ai_turn()
        self._ai_enabled = enabled

    def toggle_ai(self) -> bool:
        self.ai_enabled = not self._ai_enabled
        return self._ai_enabled

    @property
    def difficulty(self) -> Difficulty:
        return self._difficulty

    @difficulty.setter
    def difficulty(self, level: int) -> None:
        self._difficulty = Difficulty.clamp(level)

    @property
    def is_ai_turn(self) -> bool:
        return (
            self._ai_enabled
            and isinstance(self._state.phase, AwaitingMove)
            and self._state.side_to_move == self._ai_color
        )

    def budget(self) -> SearchBudget:
        """Search budget for the current difficulty."""
        return self._settings.budget(depth=int(self._difficulty))

    # ── Inbound operations ───────────────────────────────────────────────

    def submit_move(self, piece: Piece, target: Square) -> bool:
        """Human move; refused while it is the engine's turn."""
        if self.is_ai_turn:
            return False
        return self._state.submit_move(piece, target)

    def choose_promotion(self, piece_type: PieceType) -> bool:
        return self._state.choose_promotion(piece_type)

    def restart(self, fen: str | None = None) -> None:
        self.cancel_ai_turn()
        self._state.restart(fen)

    def request_best_move(self, budget: SearchBudget | None = None) -> Move:
        """Engine's choice for the side to move, or ``Move.invalid()``."""
        if not isinstance(self._state.phase, AwaitingMove):
            return NO_MOVE
        return self._engine.best_move(
            self._state.position,
            self._state.side_to_move,
            budget if budget is not None else self.budget(),
        )

    # ── Automated opponent ───────────────────────────────────────────────

    def play_ai_turn(self) -> bool:
        """Search and play the engine's move in one call."""
        if not self.is_ai_turn:
            return False
        return self.finish_ai_turn(self.request_best_move())

    def begin_ai_turn(self) -> SearchTask | None:
        """Start a cooperative search; step the task from the host loop."""
        if not self.is_ai_turn:
            return None
        self.cancel_ai_turn()
        self._task = self._engine.start(
            self._state.position, self._state.side_to_move, self.budget()
        )
        return self._task

    def cancel_ai_turn(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def finish_ai_turn(self, move: Move | None = None) -> bool:
        """Play *move* (or the running task's best move) for the engine.

        Promotions are completed with the move's piece type (queen by default).
        """
        if move is None:
            if self._task is None:
                return False
            move = self._task.best_move
        self._task = None

        if not move.is_valid or move.piece is None:
            _LOGGER.debug("engine had no move for %s", self._state.side_to_move)
            return False
        if not self._state.submit_move(move.piece, move.to_sq):
            _LOGGER.warning("engine move %s was rejected", move)
            return False
        if isinstance(self._state.phase, AwaitingPromotion):
            self._state.choose_promotion(move.promotion or PieceType.QUEEN)
        return True
