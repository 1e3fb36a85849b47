"""Tests for Clock."""

import pytest

from gambit.core.enums import Color
from gambit.game.clock import Clock
from gambit.game.interfaces import TimeControl


class TestClockBasics:
    def test_initial_remaining(self, fake_time) -> None:
        clock = Clock(TimeControl(300, 0), fake_time)
        assert clock.remaining(Color.WHITE) == 300.0
        assert clock.remaining(Color.BLACK) == 300.0
        assert not clock.is_running

    def test_time_decreases_for_active_side_only(self, fake_time) -> None:
        clock = Clock(TimeControl(300, 0), fake_time)
        clock.start(Color.WHITE)
        fake_time.advance(12.5)
        assert clock.remaining(Color.WHITE) == pytest.approx(287.5)
        assert clock.remaining(Color.BLACK) == 300.0

    def test_switch(self, fake_time) -> None:
        clock = Clock(TimeControl(300, 0), fake_time)
        clock.start(Color.WHITE)
        fake_time.advance(10)
        clock.switch()
        assert clock.active_color == Color.BLACK
        fake_time.advance(4)
        assert clock.remaining(Color.WHITE) == pytest.approx(290)
        assert clock.remaining(Color.BLACK) == pytest.approx(296)

    def test_stop_pauses(self, fake_time) -> None:
        clock = Clock(TimeControl(300, 0), fake_time)
        clock.start(Color.WHITE)
        fake_time.advance(5)
        clock.stop()
        fake_time.advance(100)
        assert not clock.is_running
        assert clock.remaining(Color.WHITE) == pytest.approx(295)

    def test_flag_falls(self, fake_time) -> None:
        clock = Clock(TimeControl(60, 0), fake_time)
        clock.start(Color.BLACK)
        fake_time.advance(61)
        assert clock.is_flag_fallen(Color.BLACK)
        assert clock.remaining(Color.BLACK) == 0.0
        assert not clock.is_flag_fallen(Color.WHITE)

    def test_increment(self, fake_time) -> None:
        clock = Clock(TimeControl(300, 5), fake_time)
        clock.add_increment(Color.WHITE)
        assert clock.remaining(Color.WHITE) == 305.0

    def test_reset(self, fake_time) -> None:
        clock = Clock(TimeControl(300, 0), fake_time)
        clock.start(Color.WHITE)
        fake_time.advance(50)
        clock.reset()
        assert clock.remaining(Color.WHITE) == 300.0
        assert clock.active_color is None


class TestTimeControl:
    def test_presets(self) -> None:
        assert TimeControl.rapid_10m().initial_seconds == 600
        assert TimeControl.blitz_5m().initial_seconds == 300
        assert TimeControl.bullet_3m().initial_seconds == 180
        assert TimeControl.unlimited().initial_seconds == float("inf")

    def test_equality_and_repr(self) -> None:
        assert TimeControl(300, 2) == TimeControl(300, 2)
        assert repr(TimeControl(300, 2)) == "TimeControl(5m+2s)"
        assert repr(TimeControl.rapid_10m()) == "TimeControl(10m)"

    def test_rejects_bad_values(self) -> None:
        with pytest.raises(ValueError):
            TimeControl(0)
        with pytest.raises(ValueError):
            TimeControl(60, -1)
