"""
Battery polling service.

Polls the host battery through psutil and updates the BatteryController.
Runs on its own thread; the controller marshals notifications onto the
looper so views only ever see them on the loop thread.
"""

import logging
import threading
from typing import Callable, Optional, Tuple

import psutil

from batterylabel.state.battery import BatteryController, get_battery_controller

log = logging.getLogger(__name__)

# Polling interval in seconds
BATTERY_POLL_INTERVAL = 5

BatteryReading = Tuple[int, bool, bool]


def read_host_battery() -> Optional[BatteryReading]:
    """Read (level, plugged_in, charging) from the host.

    Returns:
        The reading, or None when the host has no battery.
    """
    battery = psutil.sensors_battery()
    if battery is None:
        return None
    level = int(round(battery.percent))
    plugged_in = bool(battery.power_plugged)
    # psutil has no charging flag; a full battery on mains is not charging
    charging = plugged_in and level < 100
    return level, plugged_in, charging


class BatteryPollingService:
    """Service that polls battery status and updates a BatteryController.

    Args:
        controller: Controller to update (default: the singleton).
        interval: Seconds between polls.
        reader: Battery reading function (default: read_host_battery).
    """

    def __init__(self, controller: Optional[BatteryController] = None,
                 interval: float = BATTERY_POLL_INTERVAL,
                 reader: Callable[[], Optional[BatteryReading]] = read_host_battery):
        self._controller = controller if controller is not None else get_battery_controller()
        self._interval = interval
        self._reader = reader

        # Thread control
        self._running = False
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._missing_logged = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Start the polling thread."""
        if self._running:
            return

        self._running = True
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._poll_loop,
            name="battery-poll",
            daemon=True
        )
        self._thread.start()
        log.info("[BatteryPollingService] Started polling thread")

    def stop(self) -> None:
        """Stop the polling thread."""
        if not self._running:
            return

        self._running = False
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=2.0)
            self._thread = None
        log.info("[BatteryPollingService] Stopped polling thread")

    def _poll_loop(self) -> None:
        """Background thread that polls battery status every interval."""
        while self._running and not self._stop_event.is_set():
            self.poll_once()
            # Interruptible sleep
            self._stop_event.wait(timeout=self._interval)

    def poll_once(self) -> bool:
        """Read the battery once and push the result to the controller.

        Returns:
            True if a reading was pushed.
        """
        try:
            reading = self._reader()
        except (OSError, RuntimeError) as e:
            log.debug(f"[BatteryPollingService] Error reading battery: {e}")
            return False

        if reading is None:
            if not self._missing_logged:
                log.info("[BatteryPollingService] No battery found on this host")
                self._missing_logged = True
            return False

        level, plugged_in, charging = reading
        self._controller.set_battery_level(level, plugged_in, charging)
        return True
