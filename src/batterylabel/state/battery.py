"""
Battery state - level, charging, power save and display style.

BatteryController holds the battery status reported by the host and notifies
registered callbacks when it changes. The actual polling is handled elsewhere
(services.power). BatteryState is the per-view record the label's decisions
are made from.
"""

import enum
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from batterylabel.framework.looper import Looper

log = logging.getLogger(__name__)


class BatteryStyle(enum.Enum):
    """Presentation of the battery indicator as a whole."""
    GONE = "gone"        # Nothing shown
    TEXT = "text"        # Percentage text only
    DEFAULT = "default"  # Icon, percentage optional


class PercentMode(enum.Enum):
    """Where the percentage goes relative to the icon."""
    OFF = "off"
    INSIDE = "inside"
    OUTSIDE = "outside"


class Visibility(enum.Enum):
    VISIBLE = "visible"
    INVISIBLE = "invisible"  # Keeps its space, draws nothing
    GONE = "gone"            # Takes no space


def clamp_level(level) -> int:
    """Clamp a reported battery level into 0-100."""
    return max(0, min(100, int(level)))


@dataclass
class BatteryState:
    """Inputs the battery label decides its appearance from."""
    level: int = 0
    is_charging: bool = False
    style: BatteryStyle = BatteryStyle.DEFAULT
    percent_mode: PercentMode = PercentMode.OFF
    requested_visibility: Visibility = Visibility.VISIBLE
    force_show: bool = False
    attached: bool = False


class BatteryStateChangeCallback(ABC):
    """Receiver of battery events from a BatteryController."""

    @abstractmethod
    def on_battery_level_changed(self, level: int, plugged_in: bool, charging: bool) -> None:
        """Battery level or charger state changed."""

    @abstractmethod
    def on_power_save_changed(self) -> None:
        """Power save mode was toggled."""

    @abstractmethod
    def on_battery_style_changed(self, style: BatteryStyle, percent_mode: PercentMode) -> None:
        """Indicator style or percent mode changed."""


class BatteryController:
    """Observable battery status.

    Holds:
    - Battery level (0-100), plugged-in and charging flags
    - Power save flag
    - Indicator style and percent mode

    Callbacks are notified on the looper thread when a looper is given, so
    setters may be called from polling threads. A newly added callback is
    immediately sent the current level and style.

    Args:
        looper: Optional loop to marshal notifications onto.
    """

    def __init__(self, looper: Optional["Looper"] = None):
        self._looper = looper
        # (level, plugged_in, charging), replaced as a whole under _lock
        self._reading: Tuple[int, bool, bool] = (0, False, False)
        self._lock = threading.Lock()
        self._power_save = False
        self._style = BatteryStyle.DEFAULT
        self._percent_mode = PercentMode.OFF
        self._callbacks: List[BatteryStateChangeCallback] = []

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def reading(self) -> Tuple[int, bool, bool]:
        """Consistent (level, plugged_in, charging) snapshot."""
        with self._lock:
            return self._reading

    @property
    def level(self) -> int:
        """Battery level 0-100."""
        return self.reading[0]

    @property
    def plugged_in(self) -> bool:
        return self.reading[1]

    @property
    def charging(self) -> bool:
        return self.reading[2]

    @property
    def power_save(self) -> bool:
        return self._power_save

    @property
    def style(self) -> BatteryStyle:
        return self._style

    @property
    def percent_mode(self) -> PercentMode:
        return self._percent_mode

    @property
    def callback_count(self) -> int:
        """Number of registered callbacks."""
        return len(self._callbacks)

    # -------------------------------------------------------------------------
    # Observer management
    # -------------------------------------------------------------------------

    def add_state_changed_callback(self, callback: BatteryStateChangeCallback) -> bool:
        """Register a callback and send it the current state.

        Returns:
            True if the callback was added, False if it was already registered.
        """
        if callback in self._callbacks:
            log.debug(f"[BatteryController] {callback!r} already registered")
            return False
        self._callbacks.append(callback)
        self._dispatch(lambda: self._deliver_current(callback))
        return True

    def remove_state_changed_callback(self, callback: BatteryStateChangeCallback) -> bool:
        """Unregister a callback.

        Returns:
            True if the callback was removed, False if it was not registered.
        """
        if callback not in self._callbacks:
            return False
        self._callbacks.remove(callback)
        return True

    def _deliver_current(self, callback: BatteryStateChangeCallback) -> None:
        if callback not in self._callbacks:
            return
        callback.on_battery_level_changed(*self.reading)
        callback.on_battery_style_changed(self._style, self._percent_mode)

    def _dispatch(self, action) -> None:
        if self._looper is None:
            action()
        else:
            self._looper.run_or_post(action)

    def _notify(self, name: str, *args) -> None:
        def deliver():
            for callback in list(self._callbacks):
                try:
                    getattr(callback, name)(*args)
                except Exception as e:
                    log.error(f"[BatteryController] Error in {name} callback {callback!r}: {e}", exc_info=True)
        self._dispatch(deliver)

    # -------------------------------------------------------------------------
    # State mutations
    # -------------------------------------------------------------------------

    def set_battery_level(self, level: int, plugged_in: bool, charging: bool) -> None:
        """Update battery level and charger state.

        Args:
            level: Battery level, clamped into 0-100.
            plugged_in: Whether external power is connected.
            charging: Whether the battery is charging.
        """
        reading = (clamp_level(level), bool(plugged_in), bool(charging))
        with self._lock:
            changed = reading != self._reading
            self._reading = reading
        if changed:
            level, plugged_in, charging = reading
            log.debug(f"[BatteryController] level={level} plugged_in={plugged_in} charging={charging}")
            self._notify("on_battery_level_changed", level, plugged_in, charging)

    def set_power_save(self, enabled: bool) -> None:
        """Update the power save flag."""
        if enabled != self._power_save:
            self._power_save = enabled
            self._notify("on_power_save_changed")

    def set_style(self, style: BatteryStyle, percent_mode: PercentMode) -> None:
        """Update the indicator style and percent mode."""
        if style == self._style and percent_mode == self._percent_mode:
            return
        self._style = style
        self._percent_mode = percent_mode
        log.debug(f"[BatteryController] style={style.name} percent_mode={percent_mode.name}")
        self._notify("on_battery_style_changed", style, percent_mode)


# -----------------------------------------------------------------------------
# Singleton instance
# -----------------------------------------------------------------------------

_instance: Optional[BatteryController] = None


def get_battery_controller() -> BatteryController:
    """Get the singleton BatteryController instance."""
    global _instance
    if _instance is None:
        _instance = BatteryController()
    return _instance


def reset_battery_controller(looper: Optional["Looper"] = None) -> BatteryController:
    """Reset the singleton to a fresh instance.

    Args:
        looper: Optional loop the new controller notifies on.

    Returns:
        The new BatteryController instance.
    """
    global _instance
    _instance = BatteryController(looper)
    return _instance
