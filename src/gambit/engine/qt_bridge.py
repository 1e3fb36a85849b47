"""Qt bridge that runs a cooperative search from the host event loop."""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, QTimer, pyqtSignal, pyqtSlot

from gambit.core.enums import Color
from gambit.core.position import Position
from gambit.engine.minimax import MinimaxEngine, SearchTask
from gambit.engine.search import SearchBudget

_LOGGER = logging.getLogger(__name__)


class EngineWorker(QObject):
    """Steps a :class:`SearchTask` one batch of root moves per event-loop tick.

    Everything runs on the thread that owns the worker; between batches the
    event loop is free to repaint and handle input.
    """

    best_move_ready = pyqtSignal(int, object, int, int)  # request, move, score, nodes
    search_cancelled = pyqtSignal(int)
    search_no_move = pyqtSignal(int)
    search_error = pyqtSignal(int, str)
    progress = pyqtSignal(int, int, int)  # request, searched, total

    def __init__(
        self,
        engine: MinimaxEngine | None = None,
        budget: SearchBudget | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._engine = engine if engine is not None else MinimaxEngine()
        self._budget = budget if budget is not None else SearchBudget()
        self._task: SearchTask | None = None
        self._request_id = 0
        self._timer = QTimer(self)
        self._timer.setInterval(0)
        self._timer.timeout.connect(self._step)

    @property
    def is_searching(self) -> bool:
        return self._task is not None

    @pyqtSlot(object, object, int)
    def request_move(self, position_obj: object, side_obj: object, request_id: int) -> None:
        """Start searching *position_obj* for *side_obj*; results arrive as signals."""
        if not isinstance(position_obj, Position) or not isinstance(side_obj, Color):
            self.search_error.emit(request_id, "Engine received invalid position")
            return

        self.cancel()
        self._request_id = request_id
        try:
            task = self._engine.start(position_obj, side_obj, self._budget)
        except Exception as exc:
            _LOGGER.warning("Engine search failed to start: %s", exc)
            self.search_error.emit(request_id, str(exc))
            return

        if task.done:
            self.search_no_move.emit(request_id)
            return
        self._task = task
        self._timer.start()

    @pyqtSlot()
    def cancel(self) -> None:
        """Abandon the running search, if any."""
        task = self._task
        if task is None:
            return
        self._timer.stop()
        self._task = None
        task.cancel()
        self.search_cancelled.emit(self._request_id)

    def set_budget(self, budget: SearchBudget) -> None:
        """Takes effect on the next search."""
        self._budget = budget

    def _step(self) -> None:
        task = self._task
        if task is None:
            self._timer.stop()
            return
        try:
            finished = task.step()
        except Exception as exc:
            _LOGGER.warning("Engine search failed: %s", exc)
            self._timer.stop()
            self._task = None
            self.search_error.emit(self._request_id, str(exc))
            return

        searched, total = task.progress
        self.progress.emit(self._request_id, searched, total)
        if not finished:
            return

        self._timer.stop()
        self._task = None
        result = task.result
        self.best_move_ready.emit(self._request_id, result.best_move, result.score, result.nodes)
