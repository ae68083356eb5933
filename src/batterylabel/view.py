"""
Battery percentage label.

BatteryLevelView turns battery events, the battery style, the text color
setting and the owner's visibility requests into render effects: text,
text color (faded on change), visibility and text size.

Every handler runs on the looper thread. Battery and settings callbacks are
marshalled there by the sources or by the view itself.
"""

import logging
from typing import Optional

from babel import Locale, UnknownLocaleError, default_locale
from babel.numbers import format_percent as babel_format_percent

from batterylabel.config.settings import (
    DEFAULT_BATTERY_TEXT_COLOR,
    STATUS_BAR_BATTERY_STATUS_TEXT_COLOR,
    SystemSettings,
)
from batterylabel.framework.looper import Looper
from batterylabel.policy.color import ColorPolicy, ColorState
from batterylabel.policy.visibility import resolve_visibility
from batterylabel.render.sink import RenderSink
from batterylabel.resources import ResourceLoader
from batterylabel.state.battery import (
    BatteryController,
    BatteryState,
    BatteryStateChangeCallback,
    BatteryStyle,
    PercentMode,
    Visibility,
    clamp_level,
)

log = logging.getLogger(__name__)

TEXT_SIZE_DIMENSION = "battery_level_text_size"

FALLBACK_LOCALE = "en_US"


def number_locale(name: Optional[str] = None) -> Locale:
    """Resolve the locale percentages are formatted in.

    Args:
        name: Locale identifier such as "de_DE". Defaults to the LC_NUMERIC
            locale of the environment, or en_US when that is C/POSIX or
            unknown.

    Raises:
        ValueError: If name is not a known locale.
    """
    if name is None:
        name = default_locale("LC_NUMERIC") or FALLBACK_LOCALE
        if name in ("C", "POSIX", "en_US_POSIX"):
            name = FALLBACK_LOCALE
        try:
            return Locale.parse(name)
        except (UnknownLocaleError, ValueError):
            log.warning(f"[number_locale] Environment locale {name!r} unknown, using {FALLBACK_LOCALE}")
            return Locale.parse(FALLBACK_LOCALE)
    try:
        return Locale.parse(name)
    except (UnknownLocaleError, ValueError) as e:
        raise ValueError(f"Unknown locale {name!r}: {e}")


def format_percent(level: int, locale: Optional[Locale] = None) -> str:
    """Format a 0-100 level with the locale's percent pattern.

    en_US gives "42%", de_DE puts a no-break space before the sign and tr_TR
    puts the sign first.
    """
    if locale is None:
        locale = number_locale()
    return babel_format_percent(clamp_level(level) / 100, locale=locale)


class BatteryLevelView(BatteryStateChangeCallback):
    """Battery percentage label state machine.

    Args:
        sink: Receiver of render effects.
        settings: Source of the text color setting.
        looper: Loop the view runs on.
        resources: Resolves the text size on configuration changes.
        requested_visibility: Visibility the owner starts the label with.
        locale: Locale identifier the percentage is formatted in (default:
            the environment's LC_NUMERIC locale).
    """

    def __init__(self, sink: RenderSink, settings: SystemSettings, looper: Looper,
                 resources: Optional[ResourceLoader] = None,
                 requested_visibility: Visibility = Visibility.VISIBLE,
                 locale: Optional[str] = None):
        self._sink = sink
        self._settings = settings
        self._looper = looper
        self._resources = resources if resources is not None else ResourceLoader()
        self._battery_controller: Optional[BatteryController] = None
        self._state = BatteryState(requested_visibility=requested_visibility)
        self._locale = number_locale(locale)
        self._text = ""
        self._visibility: Optional[Visibility] = None

        color = self._read_color()
        self._color_state = ColorState(current_color=color, target_color=color)
        self._color_policy = ColorPolicy(self._color_state, sink, looper)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def state(self) -> BatteryState:
        return self._state

    @property
    def color_state(self) -> ColorState:
        return self._color_state

    @property
    def color_policy(self) -> ColorPolicy:
        return self._color_policy

    @property
    def text(self) -> str:
        """Last text pushed to the sink."""
        return self._text

    @property
    def visibility(self) -> Optional[Visibility]:
        """Last visibility pushed to the sink, None before the first push."""
        return self._visibility

    @property
    def attached(self) -> bool:
        return self._state.attached

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def set_battery_controller(self, controller: Optional[BatteryController]) -> None:
        """Bind the battery event source, subscribing at once if attached."""
        if controller is self._battery_controller:
            return
        if self._state.attached and self._battery_controller is not None:
            self._battery_controller.remove_state_changed_callback(self)
        self._battery_controller = controller
        if self._state.attached and controller is not None:
            controller.add_state_changed_callback(self)

    def attach(self) -> None:
        """Start observing battery and settings; show the current color."""
        if self._state.attached:
            log.debug("[BatteryLevelView] attach() while attached, ignored")
            return
        self._state.attached = True
        if self._battery_controller is not None:
            self._battery_controller.add_state_changed_callback(self)
        self._settings.register_observer(STATUS_BAR_BATTERY_STATUS_TEXT_COLOR, self._on_setting_changed)
        # Nothing was on screen to fade from
        self._color_policy.apply_immediately(self._read_color())
        self.update_visibility()
        log.debug("[BatteryLevelView] Attached")

    def detach(self) -> None:
        """Stop observing. Safe to call when not attached."""
        if not self._state.attached:
            return
        self._color_policy.cancel()
        self._settings.unregister_observer(self._on_setting_changed)
        if self._battery_controller is not None:
            self._battery_controller.remove_state_changed_callback(self)
        self._state.attached = False
        log.debug("[BatteryLevelView] Detached")

    # -------------------------------------------------------------------------
    # Battery events
    # -------------------------------------------------------------------------

    def on_battery_level_changed(self, level: int, plugged_in: bool, charging: bool) -> None:
        self._state.level = clamp_level(level)
        self._text = format_percent(self._state.level, self._locale)
        self._sink.set_text(self._text)
        if self._state.is_charging != charging:
            self._state.is_charging = charging
            self.update_visibility()

    def on_power_save_changed(self) -> None:
        """Power save does not change the label."""

    def on_battery_style_changed(self, style: BatteryStyle, percent_mode: PercentMode) -> None:
        self._state.style = style
        self._state.percent_mode = percent_mode
        self.update_visibility()

    # -------------------------------------------------------------------------
    # Owner requests
    # -------------------------------------------------------------------------

    def set_force_shown(self, force_show: bool) -> None:
        self._state.force_show = force_show
        self.update_visibility()

    def set_visibility(self, visibility: Visibility) -> None:
        """Record the visibility the owner wants when the label is shown."""
        self._state.requested_visibility = visibility
        self.update_visibility()

    def on_configuration_changed(self) -> None:
        """Re-apply the text size after a font scale or configuration change."""
        self._sink.set_text_size_px(self._resources.get_dimension_px(TEXT_SIZE_DIMENSION))

    # -------------------------------------------------------------------------
    # Color
    # -------------------------------------------------------------------------

    def on_color_setting_changed(self, color: int) -> None:
        self._color_policy.on_color_setting_changed(color, self._state.level, self._state.is_charging)

    def _read_color(self) -> int:
        return self._settings.get_color(STATUS_BAR_BATTERY_STATUS_TEXT_COLOR, DEFAULT_BATTERY_TEXT_COLOR)

    def _on_setting_changed(self, key: str) -> None:
        # Settings may change on any thread
        self._looper.run_or_post(lambda: self._update_from_settings(key))

    def _update_from_settings(self, key: str) -> None:
        if key != STATUS_BAR_BATTERY_STATUS_TEXT_COLOR or not self._state.attached:
            return
        self.on_color_setting_changed(self._read_color())
        self.update_visibility()

    # -------------------------------------------------------------------------
    # Visibility
    # -------------------------------------------------------------------------

    def update_visibility(self) -> Visibility:
        """Recompute visibility from the current state and push it."""
        visibility = resolve_visibility(self._state)
        if visibility != self._visibility:
            log.debug(f"[BatteryLevelView] visibility {self._visibility} -> {visibility.name}")
        self._visibility = visibility
        self._sink.set_visibility(visibility)
        return visibility
