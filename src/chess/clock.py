"""
Countdown clocks for both seats.

Every tick (1 second by default) takes one tick-interval off the clock of the side on the move.
A host can either let the clock run its own background ticker, or call `tick()` itself.
"""

import logging
import threading
from typing import Optional

from src.chess.pieces import opponent
from src.core.shared_types import Color

logger = logging.getLogger(__name__)


class TurnClock:
    def __init__(
        self,
        initial_seconds: int = 600,
        interval_seconds: float = 1.0,
        autorun: bool = True,
    ) -> None:
        self.initial_seconds = initial_seconds
        self.interval_seconds = interval_seconds
        self.autorun = autorun
        self._remaining: dict[Color, float] = {
            Color.WHITE: initial_seconds,
            Color.BLACK: initial_seconds,
        }
        self._active_color: Color = Color.WHITE
        self._running = False
        self._timer: Optional[threading.Timer] = None
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def active_color(self) -> Color:
        return self._active_color

    @property
    def is_running(self) -> bool:
        return self._running

    def remaining(self, color: Color) -> float:
        with self._lock:
            return self._remaining[color]

    def snapshot(self) -> dict[Color, float]:
        with self._lock:
            return dict(self._remaining)

    def is_flag_fallen(self, color: Color) -> bool:
        return self.remaining(color) <= 0
    def start(self, color: Color = Color.WHITE) -> None:
        """Run the clock of `color`. Starting an already running clock only changes whose time is ticking."""
        with self._lock:
            self._active_color = color
            if self._running:
                return
            self._running = True
            if self.autorun:
                self._schedule()

    def stop(self) -> None:
        """Stop ticking and cancel the background timer (game over / session torn down)"""
        with self._lock:
            self._running = False
            # a timer that already fired but is still waiting for the lock sees a newer generation and quits
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def switch(self, color: Optional[Color] = None) -> None:
        """Hand the clock over to the other side (or to `color`)"""
        with self._lock:
            self._active_color = color if color is not None else opponent(self._active_color)

    def reset(self, initial_seconds: Optional[int] = None) -> None:
        """Stop and put both clocks back to the starting time"""
        self.stop()
        with self._lock:
            if initial_seconds is not None:
                self.initial_seconds = initial_seconds
            self._remaining = {
                Color.WHITE: self.initial_seconds,
                Color.BLACK: self.initial_seconds,
            }
            self._active_color = Color.WHITE

    def tick(self) -> None:
        """Count down one interval for the side on the move. Clocks never go below zero."""
        with self._lock:
            if self._running:
                self._count_down()

    # --- background ticker ---
    def _count_down(self) -> None:
        """Caller holds the lock"""
        color = self._active_color
        self._remaining[color] = max(0, self._remaining[color] - self.interval_seconds)
        if self._remaining[color] == 0:
            logger.debug("Clock of %s reached zero", color)

    def _schedule(self) -> None:
        """Caller holds the lock"""
        self._timer = threading.Timer(self.interval_seconds, self._on_timer, args=(self._generation,))
        self._timer.daemon = True
        self._timer.start()

    def _on_timer(self, generation: int) -> None:
        with self._lock:
            if not self._running or generation != self._generation:
                return
            self._count_down()
            self._schedule()
