"""Per-side countdown clock with Fischer increment support."""

from __future__ import annotations

import time
from collections.abc import Callable

from gambit.core.enums import Color
from gambit.game.interfaces import IClock, TimeControl


class Clock(IClock):
    """Two countdowns, at most one of them running.

    Each side owns an allowance (initial time plus increments earned) and the
    time already spent. Only the running side accrues time, read from
    *time_source* (monotonic by default) so tests can drive it by hand.
    """

    __slots__ = (
        "_time_control",
        "_time_source",
        "_allowance",
        "_spent",
        "_active_color",
        "_turn_started",
    )

    def __init__(
        self,
        time_control: TimeControl,
        time_source: Callable[[], float] = time.monotonic,
    ) -> None:
        self._time_control = time_control
        self._time_source = time_source
        self._allowance: dict[Color, float] = {}
        self._spent: dict[Color, float] = {}
        self._active_color: Color | None = None
        self._turn_started: float | None = None
        self.reset()

    # ── IClock implementation ────────────────────────────────────────────

    def start(self, color: Color) -> None:
        self._active_color = color
        self._turn_started = self._time_source()

    def stop(self) -> None:
        self._bank_running_time()
        self._turn_started = None

    def switch(self) -> None:
        """Hand the move to the other side; its countdown resumes at once."""
        if self._active_color is None:
            return
        was_running = self._turn_started is not None
        self._bank_running_time()
        self._active_color = self._active_color.opposite
        if was_running:
            self._turn_started = self._time_source()

    def remaining(self, color: Color) -> float:
        left = self._allowance[color] - self._spent[color] - self._running_time(color)
        return max(0.0, left)

    def is_flag_fallen(self, color: Color) -> bool:
        return self.remaining(color) <= 0.0

    def add_increment(self, color: Color) -> None:
        self._allowance[color] += self._time_control.increment_seconds

    # ── Extra helpers ────────────────────────────────────────────────────

    def reset(self) -> None:
        """Stop and give both sides their full initial time."""
        initial = self._time_control.initial_seconds
        for color in Color:
            self._allowance[color] = initial
            self._spent[color] = 0.0
        self._active_color = None
        self._turn_started = None

    @property
    def time_control(self) -> TimeControl:
        return self._time_control

    @property
    def is_running(self) -> bool:
        return self._turn_started is not None

    @property
    def active_color(self) -> Color | None:
        return self._active_color

    # ── Internal ─────────────────────────────────────────────────────────

    def _running_time(self, color: Color) -> float:
        if self._turn_started is None or color != self._active_color:
            return 0.0
        return self._time_source() - self._turn_started

    def _bank_running_time(self) -> None:
        color = self._active_color
        if color is None or self._turn_started is None:
            return
        now = self._time_source()
        self._spent[color] += now - self._turn_started
        self._turn_started = now
