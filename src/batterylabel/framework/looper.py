"""
Cooperative single-thread event loop.

All view state is touched from one logical thread. Event sources running on
other threads (polling services, settings watchers) hand their work to the
Looper, which runs it in order on the owning thread. Timed work such as
animation ticks is queued with a delay and runs once the clock reaches it.
"""

import heapq
import itertools
import logging
import threading
import time
from typing import Callable, List, Optional, Tuple

log = logging.getLogger(__name__)

# Float clocks drift by ulps; treat callbacks this close to now as due
DUE_TOLERANCE = 1e-9


class Looper:
    """Runs posted callbacks on a single thread in due-time order.

    The thread that creates the Looper owns it until start() moves the loop to
    a background thread. Tests drive the loop by hand with run_pending() and an
    injected clock.

    Args:
        clock: Function returning the current time in seconds
            (default: time.monotonic).
        name: Thread name used by start().
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic, name: str = "batterylabel-looper"):
        self._clock = clock
        self._name = name
        # Heap entries: (due_time, sequence, token)
        self._heap: List[Tuple[float, int, int]] = []
        self._callbacks = {}  # token -> callback
        self._sequence = itertools.count()
        self._lock = threading.Lock()
        self._wake_event = threading.Event()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._owner = threading.get_ident()

    # -------------------------------------------------------------------------
    # Posting
    # -------------------------------------------------------------------------

    def now(self) -> float:
        """Current loop time in seconds."""
        return self._clock()

    def post(self, callback: Callable[[], None]) -> int:
        """Queue a callback to run as soon as possible.

        Returns:
            Token that can be passed to remove().
        """
        return self.post_delayed(callback, 0)

    def post_delayed(self, callback: Callable[[], None], delay_ms: float) -> int:
        """Queue a callback to run after delay_ms milliseconds.

        Returns:
            Token that can be passed to remove().
        """
        due = self._clock() + max(0.0, delay_ms) / 1000.0
        with self._lock:
            token = next(self._sequence)
            self._callbacks[token] = callback
            heapq.heappush(self._heap, (due, token, token))
        self._wake_event.set()
        return token

    def remove(self, token: Optional[int]) -> bool:
        """Cancel a pending callback.

        Returns:
            True if the callback was still pending.
        """
        if token is None:
            return False
        with self._lock:
            return self._callbacks.pop(token, None) is not None

    def is_loop_thread(self) -> bool:
        """True when called from the thread that owns the loop."""
        return threading.get_ident() == self._owner

    def run_or_post(self, callback: Callable[[], None]) -> None:
        """Run the callback now on the loop thread, or marshal it there."""
        if self.is_loop_thread():
            callback()
        else:
            self.post(callback)

    @property
    def pending_count(self) -> int:
        """Number of callbacks waiting to run."""
        with self._lock:
            return len(self._callbacks)

    # -------------------------------------------------------------------------
    # Running
    # -------------------------------------------------------------------------

    def _pop_due(self, now: float) -> Optional[Callable[[], None]]:
        with self._lock:
            while self._heap:
                due, _, token = self._heap[0]
                if token not in self._callbacks:
                    # Removed while queued
                    heapq.heappop(self._heap)
                    continue
                if due > now + DUE_TOLERANCE:
                    return None
                heapq.heappop(self._heap)
                return self._callbacks.pop(token)
            return None

    def _next_due(self) -> Optional[float]:
        with self._lock:
            while self._heap and self._heap[0][2] not in self._callbacks:
                heapq.heappop(self._heap)
            return self._heap[0][0] if self._heap else None

    def run_pending(self) -> int:
        """Run every callback that is due at the current clock time.

        Returns:
            Number of callbacks run.
        """
        ran = 0
        now = self._clock()
        while True:
            callback = self._pop_due(now)
            if callback is None:
                return ran
            ran += 1
            try:
                callback()
            except Exception as e:
                log.error(f"[Looper] Error in posted callback {callback!r}: {e}", exc_info=True)

    def run_forever(self) -> None:
        """Run the loop on the calling thread until stop() is called."""
        previous_owner = self._owner
        self._owner = threading.get_ident()
        log.debug(f"[Looper] {self._name} running")
        while not self._stop_event.is_set():
            self.run_pending()
            next_due = self._next_due()
            timeout = 0.1 if next_due is None else max(0.0, min(0.1, next_due - self._clock()))
            self._wake_event.wait(timeout=timeout)
            self._wake_event.clear()
        self._owner = previous_owner
        log.debug(f"[Looper] {self._name} stopped")

    def start(self) -> None:
        """Run the loop on a background thread."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self.run_forever, name=self._name, daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 2.0) -> None:
        """Stop the loop thread. Safe to call when not running."""
        self._stop_event.set()
        self._wake_event.set()
        if self._thread is not None:
            if self._thread is not threading.current_thread():
                self._thread.join(timeout=timeout)
            self._thread = None
