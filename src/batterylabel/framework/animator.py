"""
Tick-based value animator driven by the Looper.
"""

import logging
from typing import Callable, List, Optional

from .looper import Looper

log = logging.getLogger(__name__)

# ~60 frames per second
DEFAULT_FRAME_INTERVAL_MS = 16


class ValueAnimator:
    """Animates a fraction from 0.0 to 1.0 over a fixed duration.

    Each tick is a short callback on the looper thread. Update listeners get
    the animated fraction; end listeners get a flag telling whether the
    animation was cancelled. Restarting or cancelling bumps a generation
    counter so ticks still queued from an earlier run do nothing.

    Args:
        looper: Loop the ticks run on.
        duration_ms: Animation length in milliseconds.
        frame_interval_ms: Delay between ticks in milliseconds.
    """

    def __init__(self, looper: Looper, duration_ms: float,
                 frame_interval_ms: float = DEFAULT_FRAME_INTERVAL_MS):
        self._looper = looper
        self.duration_ms = max(0.0, float(duration_ms))
        self.frame_interval_ms = max(1.0, float(frame_interval_ms))
        self._update_listeners: List[Callable[[float], None]] = []
        self._end_listeners: List[Callable[[bool], None]] = []
        self._generation = 0
        self._running = False
        self._start_time = 0.0
        self._pending_token: Optional[int] = None
        self.tick_count = 0

    def add_update_listener(self, listener: Callable[[float], None]) -> None:
        if listener not in self._update_listeners:
            self._update_listeners.append(listener)

    def add_end_listener(self, listener: Callable[[bool], None]) -> None:
        if listener not in self._end_listeners:
            self._end_listeners.append(listener)

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Start the animation from fraction 0.

        A running animation is restarted without notifying end listeners.
        """
        if self._running:
            log.debug("[ValueAnimator] Restarting running animation")
        self._drop_pending()
        self._generation += 1
        self._running = True
        self.tick_count = 0
        self._start_time = self._looper.now()
        self._schedule(self._generation, 0)

    def cancel(self) -> None:
        """Stop the animation where it is. End listeners see cancelled=True."""
        if not self._running:
            return
        self._stop()
        self._notify_end(True)

    def end(self) -> None:
        """Jump to fraction 1.0 and finish normally."""
        if not self._running:
            return
        self._stop()
        self._notify_update(1.0)
        self._notify_end(False)

    def _stop(self) -> None:
        self._drop_pending()
        self._generation += 1
        self._running = False

    def _drop_pending(self) -> None:
        self._looper.remove(self._pending_token)
        self._pending_token = None

    def _schedule(self, generation: int, delay_ms: float) -> None:
        self._pending_token = self._looper.post_delayed(lambda: self._tick(generation), delay_ms)

    def _tick(self, generation: int) -> None:
        if generation != self._generation or not self._running:
            return
        self._pending_token = None
        # Microsecond resolution keeps float clock noise out of the fraction
        elapsed_ms = round((self._looper.now() - self._start_time) * 1000.0, 3)
        if self.duration_ms <= 0:
            fraction = 1.0
        else:
            fraction = max(0.0, min(1.0, elapsed_ms / self.duration_ms))
        self.tick_count += 1
        self._notify_update(fraction)
        if generation != self._generation:
            # A listener restarted or cancelled the animation
            return
        if fraction >= 1.0:
            self._running = False
            self._generation += 1
            self._notify_end(False)
        else:
            self._schedule(generation, self.frame_interval_ms)

    def _notify_update(self, fraction: float) -> None:
        for listener in list(self._update_listeners):
            listener(fraction)

    def _notify_end(self, cancelled: bool) -> None:
        for listener in list(self._end_listeners):
            listener(cancelled)
