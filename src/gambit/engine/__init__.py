"""Engine package: static evaluation and minimax search.

The Qt host-loop bridge lives in :mod:`gambit.engine.qt_bridge` so that this
package imports without PyQt6 loaded.
"""

from gambit.engine.evaluation import Evaluator, positional_bonus
from gambit.engine.minimax import MATE_SCORE, MinimaxEngine, SearchTask
from gambit.engine.search import (
    DEFAULT_PIECE_VALUES,
    Difficulty,
    EngineSettings,
    SearchBudget,
    SearchResult,
)

__all__ = [
    "DEFAULT_PIECE_VALUES",
    "Difficulty",
    "EngineSettings",
    "Evaluator",
    "MATE_SCORE",
    "MinimaxEngine",
    "SearchBudget",
    "SearchResult",
    "SearchTask",
    "positional_bonus",
]
