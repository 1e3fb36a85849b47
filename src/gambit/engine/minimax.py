"""Minimax search with alpha-beta pruning under a time and node-rate budget."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from time import perf_counter

from gambit.core.enums import Color
from gambit.core.legality import LegalityFilter
from gambit.core.move import NO_MOVE, Move
from gambit.core.position import Position
from gambit.engine.evaluation import Evaluator
from gambit.engine.search import EngineSettings, SearchBudget, SearchResult

_LOGGER = logging.getLogger(__name__)

_INF_SCORE = 1_000_000
MATE_SCORE = 100_000
# The node-rate throttle only applies after this much wall-clock time.
_NPS_GRACE_SECONDS = 0.1
DEFAULT_BATCH_SIZE = 5

TimeSource = Callable[[], float]


class SearchTask:
    """One top-level search, advanced a batch of root moves at a time.

    The task works on its own copy of the position. Blocking and cooperative
    callers drive the same :meth:`step` loop, so both produce the same move
    for the same budget and board.
    """

    __slots__ = (
        "_pos",
        "_side",
        "_budget",
        "_evaluator",
        "_legality",
        "_batch_size",
        "_clock",
        "_tt",
        "_start",
        "_elapsed",
        "_nodes",
        "_root_moves",
        "_index",
        "_alpha",
        "_best_move",
        "_best_score",
        "_done",
        "_cancelled",
        "_exhausted",
    )

    def __init__(
        self,
        position: Position,
        side: Color,
        budget: SearchBudget,
        evaluator: Evaluator,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        clock: TimeSource = perf_counter,
    ) -> None:
        self._pos = position.copy()
        self._pos.side_to_move = side
        self._side = side
        self._budget = budget
        self._evaluator = evaluator
        self._legality = LegalityFilter(self._pos)
        self._batch_size = max(1, batch_size)
        self._clock = clock
        # Transposition cache: position hash -> static evaluation.
        self._tt: dict[int, int] = {}
        self._start = clock()
        self._elapsed = 0.0
        self._nodes = 0
        self._cancelled = False
        self._exhausted = False

        # Root moves name the caller's pieces, so they can be submitted as-is.
        live = position.board
        self._root_moves = [
            replace(move, piece=live[move.from_sq])
            for move in self._legality.legal_moves_for(side)
        ]
        self._index = 0
        self._alpha = -_INF_SCORE
        # A legal move is always available once there is one, whatever the budget.
        self._best_move = self._root_moves[0] if self._root_moves else NO_MOVE
        self._best_score = -_INF_SCORE
        self._done = False
        if not self._root_moves:
            _LOGGER.debug("no legal move for %s", side)
            self._finish()

    # ── Driving the search ───────────────────────────────────────────────

    @property
    def done(self) -> bool:
        return self._done

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def progress(self) -> tuple[int, int]:
        """``(root moves searched, root moves total)``."""
        return self._index, len(self._root_moves)

    def step(self) -> bool:
        """Search the next batch of root moves. Returns ``True`` once finished."""
        if self._done:
            return True

        end = min(self._index + self._batch_size, len(self._root_moves))
        depth = self._budget.max_depth
        while self._index < end:
            if self._budget_exhausted():
                self._exhausted = True
                _LOGGER.debug(
                    "search budget exhausted after %d of %d root moves, "
                    "using best move found so far",
                    self._index,
                    len(self._root_moves),
                )
                self._finish()
                return True

            move = self._root_moves[self._index]
            self._pos.make_move(move)
            try:
                score = self._minimax(depth - 1, self._alpha, _INF_SCORE, maximizing=False)
            finally:
                self._pos.unmake_move()
            self._index += 1

            if score > self._best_score:
                self._best_score = score
                self._best_move = move
            self._alpha = max(self._alpha, score)

        if self._index >= len(self._root_moves):
            self._finish()
        return self._done

    def run(self) -> SearchResult:
        """Drive the search to completion without yielding."""
        while not self.step():
            pass
        return self.result

    def cancel(self) -> None:
        """Abandon the search; the best move found so far stays usable."""
        if self._done:
            return
        self._cancelled = True
        _LOGGER.debug("search cancelled after %d root moves", self._index)
        self._finish()

    @property
    def best_move(self) -> Move:
        return self._best_move

    @property
    def result(self) -> SearchResult:
        elapsed = self._elapsed if self._done else self._clock() - self._start
        if self._index:
            score = self._best_score
        elif self._root_moves:
            score = self._evaluator.evaluate(self._pos, self._side)
        elif self._legality.is_king_in_check(self._side):
            score = -MATE_SCORE
        else:
            score = 0
        return SearchResult(
            best_move=self._best_move,
            score=score,
            nodes=self._nodes,
            completed_moves=self._index,
            total_moves=len(self._root_moves),
            elapsed=elapsed,
            exhausted=self._exhausted,
        )

    # ── Tree search ──────────────────────────────────────────────────────

    def _minimax(self, depth: int, alpha: int, beta: int, maximizing: bool) -> int:
        if self._budget_exhausted():
            self._exhausted = True
            return self._evaluate()

        self._nodes += 1
        if depth == 0:
            return self._evaluate()

        mover = self._side if maximizing else self._side.opposite
        moves = self._legality.legal_moves_for(mover)
        if not moves:
            if self._legality.is_king_in_check(mover):
                # Sooner mates (more depth left) score further from zero.
                mate = MATE_SCORE + depth
                return -mate if maximizing else mate
            return 0

        pos = self._pos
        if maximizing:
            value = -_INF_SCORE
            for move in moves:
                pos.make_move(move)
                try:
                    value = max(value, self._minimax(depth - 1, alpha, beta, False))
                finally:
                    pos.unmake_move()
                alpha = max(alpha, value)
                if beta <= alpha:
                    break
            return value

        value = _INF_SCORE
        for move in moves:
            pos.make_move(move)
            try:
                value = min(value, self._minimax(depth - 1, alpha, beta, True))
            finally:
                pos.unmake_move()
            beta = min(beta, value)
            if beta <= alpha:
                break
        return value

    def _evaluate(self) -> int:
        key = self._pos.zobrist_hash
        cached = self._tt.get(key)
        if cached is not None:
            return cached
        score = self._evaluator.evaluate(self._pos, self._side)
        self._tt[key] = score
        return score

    # ── Budget ───────────────────────────────────────────────────────────

    def _budget_exhausted(self) -> bool:
        elapsed = self._clock() - self._start
        if elapsed > self._budget.max_wall_clock_seconds:
            return True
        max_nps = self._budget.max_nodes_per_second
        return (
            max_nps is not None
            and elapsed > _NPS_GRACE_SECONDS
            and self._nodes / elapsed > max_nps
        )

    def _finish(self) -> None:
        self._done = True
        self._elapsed = self._clock() - self._start
        self._tt.clear()
        _LOGGER.info(
            "search for %s finished: best %s, %d nodes in %.3fs",
            self._side,
            self._best_move,
            self._nodes,
            self._elapsed,
        )


class MinimaxEngine:
    """Alpha-beta minimax engine with a per-search transposition cache."""

    __slots__ = ("_evaluator", "_batch_size", "_clock")

    def __init__(
        self,
        evaluator: Evaluator | None = None,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        clock: TimeSource = perf_counter,
    ) -> None:
        if batch_size < 1:
            raise ValueError("Batch size must be >= 1")
        self._evaluator = evaluator if evaluator is not None else Evaluator()
        self._batch_size = batch_size
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: EngineSettings) -> MinimaxEngine:
        return cls(Evaluator(settings.piece_values), batch_size=settings.batch_size)

    @property
    def evaluator(self) -> Evaluator:
        return self._evaluator

    def start(self, position: Position, side: Color, budget: SearchBudget) -> SearchTask:
        """Begin a cooperative search; call :meth:`SearchTask.step` per tick."""
        return SearchTask(
            position,
            side,
            budget,
            self._evaluator,
            batch_size=self._batch_size,
            clock=self._clock,
        )

    def search(self, position: Position, side: Color, budget: SearchBudget) -> SearchResult:
        return self.start(position, side, budget).run()

    def best_move(self, position: Position, side: Color, budget: SearchBudget) -> Move:
        """Best move for *side*, or ``Move.invalid()`` if it has none."""
        return self.search(position, side, budget).best_move
