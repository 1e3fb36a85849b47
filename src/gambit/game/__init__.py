"""Game management layer: turn state machine, clock and controller.

Quick start::

    from gambit.game import GameController, TimeControl

    ctrl = GameController.new_game(time_control=TimeControl.blitz_5m())
    ctrl.events.on_check.append(lambda color: print(f"{color} is in check"))
"""

from gambit.game.clock import Clock
from gambit.game.controller import GameController
from gambit.game.interfaces import (
    AwaitingMove,
    AwaitingPromotion,
    GameEndReason,
    GameOver,
    GamePhase,
    IClock,
    TimeControl,
)
from gambit.game.state import GameEvents, GameState

__all__ = [
    # Phases / interfaces
    "AwaitingMove",
    "AwaitingPromotion",
    "GameEndReason",
    "GameOver",
    "GamePhase",
    "IClock",
    "TimeControl",
    # Concrete
    "Clock",
    "GameController",
    "GameEvents",
    "GameState",
]
