"""Unit tests for /src/chess/clock.py"""

from unittest.mock import Mock, patch

import pytest

from src.chess.clock import TurnClock
from src.core.shared_types import Color


@pytest.fixture
def clock() -> TurnClock:
    """Manual clock: only moves when the test calls tick()"""
    return TurnClock(initial_seconds=600, interval_seconds=1.0, autorun=False)


def test_initial_state(clock: TurnClock) -> None:
    assert clock.snapshot() == {Color.WHITE: 600, Color.BLACK: 600}
    assert clock.active_color == Color.WHITE
    assert not clock.is_running


def test_tick_only_counts_down_when_running(clock: TurnClock) -> None:
    clock.tick()
    assert clock.remaining(Color.WHITE) == 600

    clock.start(Color.WHITE)
    clock.tick()
    clock.tick()
    assert clock.remaining(Color.WHITE) == 598
    assert clock.remaining(Color.BLACK) == 600


def test_switch_hands_clock_to_opponent(clock: TurnClock) -> None:
    clock.start(Color.WHITE)
    clock.switch()
    assert clock.active_color == Color.BLACK
    clock.tick()
    assert clock.remaining(Color.BLACK) == 599
    assert clock.remaining(Color.WHITE) == 600

    clock.switch(Color.BLACK)
    assert clock.active_color == Color.BLACK


def test_clock_never_goes_negative() -> None:
    clock = TurnClock(initial_seconds=2, interval_seconds=1.5, autorun=False)
    clock.start()
    clock.tick()
    clock.tick()
    clock.tick()
    assert clock.remaining(Color.WHITE) == 0
    assert clock.is_flag_fallen(Color.WHITE)
    assert not clock.is_flag_fallen(Color.BLACK)


def test_stop_freezes_clock(clock: TurnClock) -> None:
    clock.start()
    clock.tick()
    clock.stop()
    clock.tick()
    assert clock.remaining(Color.WHITE) == 599
    assert not clock.is_running


def test_reset(clock: TurnClock) -> None:
    clock.start(Color.BLACK)
    clock.tick()
    clock.reset(300)
    assert clock.snapshot() == {Color.WHITE: 300, Color.BLACK: 300}
    assert clock.active_color == Color.WHITE
    assert not clock.is_running


@patch("src.chess.clock.threading.Timer")
def test_autorun_schedules_background_timer(mock_timer_cls: Mock) -> None:
    clock = TurnClock(initial_seconds=600, interval_seconds=1.0, autorun=True)
    clock.start(Color.WHITE)

    mock_timer_cls.assert_called_once_with(1.0, clock._on_timer, args=(0,))
    mock_timer = mock_timer_cls.return_value
    mock_timer.start.assert_called_once()
    assert mock_timer.daemon is True

    # the timer firing ticks once and re-arms itself
    clock._on_timer(0)
    assert clock.remaining(Color.WHITE) == 599
    assert mock_timer_cls.call_count == 2

    clock.stop()
    mock_timer.cancel.assert_called()


@patch("src.chess.clock.threading.Timer")
def test_manual_clock_never_schedules(mock_timer_cls: Mock, clock: TurnClock) -> None:
    clock.start()
    mock_timer_cls.assert_not_called()


@patch("src.chess.clock.threading.Timer")
def test_stale_timer_after_restart_is_ignored(mock_timer_cls: Mock) -> None:
    """A timer from before a reset must not tick nor re-arm next to the new timer chain"""
    clock = TurnClock(initial_seconds=600, interval_seconds=1.0, autorun=True)
    clock.start(Color.WHITE)
    stale_generation = mock_timer_cls.call_args.kwargs["args"][0]

    clock.reset()
    clock.start(Color.WHITE)
    assert mock_timer_cls.call_count == 2

    clock._on_timer(stale_generation)
    assert clock.remaining(Color.WHITE) == 600
    assert mock_timer_cls.call_count == 2

    current_generation = mock_timer_cls.call_args.kwargs["args"][0]
    clock._on_timer(current_generation)
    assert clock.remaining(Color.WHITE) == 599
    assert mock_timer_cls.call_count == 3
