"""Tests for BatteryLevelView.

The view is driven the way its host drives it: attach/detach, battery and
style events from a BatteryController, settings changes and owner requests.
Effects are read back from a recording sink.
"""

from unittest.mock import MagicMock

import pytest

from batterylabel.color import WHITE
from batterylabel.config.settings import STATUS_BAR_BATTERY_STATUS_TEXT_COLOR
from batterylabel.policy.color import COLOR_TRANSITION_DURATION_MS
from batterylabel.resources import ResourceLoader
from batterylabel.state.battery import (
    BatteryController,
    BatteryStyle,
    PercentMode,
    Visibility,
)
from batterylabel.view import BatteryLevelView, format_percent, number_locale

RED = 0xFFFF0000
GREEN = 0xFF00FF00


@pytest.fixture
def view(sink, system_settings, looper):
    return BatteryLevelView(sink, system_settings, looper, locale="en_US")


@pytest.fixture
def attached_view(view, controller, sink):
    view.set_battery_controller(controller)
    view.attach()
    sink.clear()
    return view


class TestFormatPercent:
    """Percent text in the locale's own pattern."""

    @pytest.mark.parametrize("level,text", [(0, "0%"), (5, "5%"), (50, "50%"), (100, "100%")])
    def test_english(self, level, text):
        assert format_percent(level, number_locale("en_US")) == text

    def test_german_spaces_the_sign(self):
        assert format_percent(42, number_locale("de_DE")) == "42\u00a0%"

    def test_turkish_sign_first(self):
        assert format_percent(42, number_locale("tr_TR")) == "%42"

    def test_out_of_range_is_clamped(self):
        en = number_locale("en_US")
        assert format_percent(150, en) == "100%"
        assert format_percent(-3, en) == "0%"

    def test_default_locale_from_environment(self, monkeypatch):
        """LC_NUMERIC picks the pattern when no locale is given."""
        for var in ("LANGUAGE", "LC_ALL", "LC_CTYPE", "LANG"):
            monkeypatch.delenv(var, raising=False)
        monkeypatch.setenv("LC_NUMERIC", "de_DE.UTF-8")
        assert format_percent(42) == "42\u00a0%"

    def test_c_locale_falls_back_to_english(self, monkeypatch):
        for var in ("LANGUAGE", "LC_ALL", "LC_CTYPE", "LANG"):
            monkeypatch.delenv(var, raising=False)
        monkeypatch.setenv("LC_NUMERIC", "C")
        assert format_percent(42) == "42%"

    def test_unknown_locale(self):
        with pytest.raises(ValueError):
            number_locale("xx_QQ")

    def test_view_uses_its_locale(self, sink, system_settings, looper):
        view = BatteryLevelView(sink, system_settings, looper, locale="tr_TR")
        view.on_battery_level_changed(42, False, False)
        assert sink.texts == ["%42"]


class TestLifecycle:
    """attach()/detach() and subscriptions."""

    def test_construction_reads_color_without_effects(self, sink, system_settings, looper):
        """The view starts on the stored color and pushes nothing yet."""
        system_settings.put_color(STATUS_BAR_BATTERY_STATUS_TEXT_COLOR, RED)
        view = BatteryLevelView(sink, system_settings, looper)

        assert view.color_state.current_color == RED
        assert view.color_state.target_color == RED
        assert sink.effects == []
        assert view.attached is False

    def test_default_color_when_unset(self, view):
        assert view.color_state.current_color == WHITE

    def test_attach_subscribes_once(self, view, controller, system_settings):
        """Attaching twice keeps one registration per source.

        Expected: one battery callback, one settings observer.
        Why: duplicate registrations would double every event.
        """
        view.set_battery_controller(controller)
        view.attach()
        view.attach()

        assert controller.callback_count == 1
        assert system_settings.observer_count(STATUS_BAR_BATTERY_STATUS_TEXT_COLOR) == 1
        assert view.attached is True

    def test_attach_applies_color_and_visibility(self, view, sink):
        """Attach shows the stored color without a fade and pushes visibility."""
        view.attach()

        assert sink.colors == [WHITE]
        assert sink.visibilities == [Visibility.GONE]
        assert view.color_policy.animator.is_running is False

    def test_attach_receives_current_battery_state(self, view, controller, sink):
        """The controller replays its state to a new subscriber."""
        controller.set_battery_level(42, True, True)
        controller.set_style(BatteryStyle.DEFAULT, PercentMode.INSIDE)
        view.set_battery_controller(controller)
        view.attach()

        assert view.state.level == 42
        assert view.state.is_charging is True
        assert "42%" in sink.texts
        assert view.visibility == Visibility.VISIBLE

    def test_detach_unsubscribes(self, attached_view, controller, system_settings):
        attached_view.detach()

        assert controller.callback_count == 0
        assert system_settings.observer_count(STATUS_BAR_BATTERY_STATUS_TEXT_COLOR) == 0
        assert attached_view.attached is False

    def test_detach_twice_unsubscribes_once(self, sink, system_settings, looper):
        """A second detach does nothing.

        Expected: one remove call on the controller, no error.
        Why: hosts may detach more than once.
        """
        controller = MagicMock(spec=BatteryController)
        view = BatteryLevelView(sink, system_settings, looper)
        view.set_battery_controller(controller)
        view.attach()

        view.detach()
        view.detach()

        controller.remove_state_changed_callback.assert_called_once_with(view)

    def test_detach_without_attach_is_noop(self, view, sink):
        view.detach()
        assert sink.effects == []
        assert view.attached is False

    def test_detach_cancels_fade(self, attached_view, sink, looper, clock):
        """Detaching mid-fade leaves the sink on the color the state reports.

        Expected: the target is pushed once and queued ticks do nothing.
        Why: a half-blended color would stay on screen otherwise.
        """
        attached_view.on_battery_level_changed(50, False, False)
        attached_view.on_color_setting_changed(RED)
        looper.run_pending()
        clock.advance(200)
        looper.run_pending()
        sink.clear()

        attached_view.detach()
        assert sink.colors == [RED]
        assert sink.colors[-1] == attached_view.color_state.current_color

        clock.advance(COLOR_TRANSITION_DURATION_MS)
        looper.run_pending()

        assert sink.colors == [RED]
        assert attached_view.color_state.current_color == RED
        assert attached_view.color_state.transition_in_progress is False

    def test_reattach_without_color_change_has_no_transition(self, attached_view, sink, looper):
        """Re-attaching re-applies the stored color without a fade.

        Expected: one color effect with the same color, nothing queued.
        Why: nothing changed, so nothing should animate.
        """
        attached_view.on_battery_level_changed(50, False, False)
        attached_view.detach()
        sink.clear()

        attached_view.attach()

        assert sink.colors == [WHITE]
        assert attached_view.color_policy.animator.is_running is False
        assert looper.run_pending() == 0

    def test_reattach_after_color_change_applies_immediately(self, attached_view, system_settings, sink):
        """A color changed while detached is applied on attach without a fade."""
        attached_view.on_battery_level_changed(50, False, False)
        attached_view.detach()
        system_settings.put_color(STATUS_BAR_BATTERY_STATUS_TEXT_COLOR, GREEN)
        sink.clear()

        attached_view.attach()

        assert sink.colors == [GREEN]
        assert attached_view.color_state.current_color == GREEN
        assert attached_view.color_policy.animator.is_running is False

    def test_set_battery_controller_while_attached(self, attached_view, controller, looper):
        """Replacing the controller moves the subscription."""
        other = BatteryController(looper)
        attached_view.set_battery_controller(other)

        assert controller.callback_count == 0
        assert other.callback_count == 1

    def test_set_battery_controller_while_detached(self, view, controller):
        view.set_battery_controller(controller)
        assert controller.callback_count == 0


class TestBatteryEvents:
    """Battery level, charging and style events."""

    def test_level_change_sets_text(self, attached_view, sink):
        attached_view.on_battery_level_changed(73, False, False)
        assert sink.texts == ["73%"]
        assert attached_view.text == "73%"

    def test_level_is_clamped(self, attached_view, sink):
        """Out-of-range levels are clamped, not rejected."""
        attached_view.on_battery_level_changed(120, False, False)
        assert attached_view.state.level == 100
        attached_view.on_battery_level_changed(-5, False, False)
        assert attached_view.state.level == 0
        assert sink.texts == ["100%", "0%"]

    def test_text_pushed_even_without_change(self, attached_view, sink):
        attached_view.on_battery_level_changed(60, False, False)
        attached_view.on_battery_level_changed(60, False, False)
        assert sink.texts == ["60%", "60%"]

    def test_charging_change_updates_visibility(self, attached_view, sink):
        """INSIDE mode shows the label when charging starts and hides it when it stops."""
        attached_view.on_battery_style_changed(BatteryStyle.DEFAULT, PercentMode.INSIDE)
        sink.clear()

        attached_view.on_battery_level_changed(40, True, True)
        assert sink.visibilities == [Visibility.VISIBLE]

        attached_view.on_battery_level_changed(40, True, False)
        assert sink.visibilities == [Visibility.VISIBLE, Visibility.GONE]

    def test_unchanged_charging_does_not_push_visibility(self, attached_view, sink):
        attached_view.on_battery_level_changed(40, False, False)
        attached_view.on_battery_level_changed(41, False, False)
        assert sink.visibilities == []

    def test_style_change_updates_visibility(self, attached_view, sink):
        attached_view.on_battery_style_changed(BatteryStyle.TEXT, PercentMode.OFF)
        assert sink.visibilities == [Visibility.VISIBLE]
        attached_view.on_battery_style_changed(BatteryStyle.GONE, PercentMode.OUTSIDE)
        assert sink.visibilities == [Visibility.VISIBLE, Visibility.GONE]

    def test_power_save_is_noop(self, attached_view, sink):
        """Power save changes produce no effects."""
        attached_view.on_power_save_changed()
        assert sink.effects == []

    def test_controller_events_reach_view(self, attached_view, controller, sink):
        controller.set_style(BatteryStyle.DEFAULT, PercentMode.OUTSIDE)
        controller.set_battery_level(88, False, False)

        assert attached_view.visibility == Visibility.VISIBLE
        assert sink.texts[-1] == "88%"

    def test_no_events_after_detach(self, attached_view, controller, sink):
        attached_view.detach()
        sink.clear()
        controller.set_battery_level(12, False, False)
        assert sink.effects == []


class TestOwnerRequests:
    """Force-show and requested visibility."""

    def test_force_show_overrides_hidden(self, attached_view, sink):
        attached_view.set_force_shown(True)
        assert sink.visibilities == [Visibility.VISIBLE]
        attached_view.set_force_shown(False)
        assert sink.visibilities == [Visibility.VISIBLE, Visibility.GONE]

    def test_requested_visibility_passes_through_when_shown(self, attached_view, sink):
        attached_view.on_battery_style_changed(BatteryStyle.TEXT, PercentMode.OFF)
        sink.clear()

        attached_view.set_visibility(Visibility.INVISIBLE)

        assert sink.visibilities == [Visibility.INVISIBLE]
        assert attached_view.state.requested_visibility == Visibility.INVISIBLE

    def test_requested_visibility_ignored_when_hidden(self, attached_view, sink):
        """A hidden label stays GONE whatever the owner requests."""
        attached_view.set_visibility(Visibility.VISIBLE)
        assert sink.visibilities == [Visibility.GONE]

    def test_initial_requested_visibility(self, sink, system_settings, looper):
        view = BatteryLevelView(sink, system_settings, looper, requested_visibility=Visibility.INVISIBLE)
        view.set_force_shown(True)
        assert sink.visibilities == [Visibility.INVISIBLE]

    def test_configuration_change_pushes_text_size(self, sink, system_settings, looper, settings_store):
        """Text size comes from the resource loader, scaled by font_scale."""
        settings_store.write("display", "font_scale", "1.5")
        resources = ResourceLoader(settings=settings_store)
        view = BatteryLevelView(sink, system_settings, looper, resources)

        view.on_configuration_changed()

        assert sink.of("text_size") == [18]


class TestColorSetting:
    """Color changes through the view and the settings observer."""

    def test_fade_while_discharging(self, attached_view, sink, looper, clock):
        attached_view.on_battery_level_changed(50, False, False)
        sink.clear()

        attached_view.on_color_setting_changed(RED)
        assert attached_view.color_state.current_color == WHITE
        assert sink.colors == []

        clock.advance(COLOR_TRANSITION_DURATION_MS)
        looper.run_pending()
        assert attached_view.color_state.current_color == RED
        assert sink.colors[-1] == RED

    def test_no_fade_while_charging(self, attached_view, sink, looper):
        attached_view.on_battery_level_changed(50, True, True)
        sink.clear()

        attached_view.on_color_setting_changed(RED)

        assert sink.colors == [RED]
        assert looper.run_pending() == 0

    @pytest.mark.parametrize("level,animated", [(16, False), (17, True)])
    def test_low_level_boundary(self, attached_view, level, animated):
        attached_view.on_battery_level_changed(level, False, False)
        attached_view.on_color_setting_changed(RED)
        assert attached_view.color_state.transition_in_progress is animated

    def test_settings_change_triggers_update(self, attached_view, system_settings, sink, looper, clock):
        """Writing the color setting notifies the view, which fades to it and re-pushes visibility."""
        attached_view.on_battery_level_changed(50, False, False)
        sink.clear()

        system_settings.put_color(STATUS_BAR_BATTERY_STATUS_TEXT_COLOR, GREEN)

        assert attached_view.color_state.target_color == GREEN
        assert sink.visibilities == [Visibility.GONE]
        clock.advance(COLOR_TRANSITION_DURATION_MS)
        looper.run_pending()
        assert sink.colors[-1] == GREEN

    def test_other_setting_keys_ignored(self, attached_view, system_settings, sink):
        system_settings.put_int("some_other_key", 3)
        assert sink.effects == []

    def test_settings_change_ignored_after_detach(self, attached_view, system_settings, sink):
        attached_view.detach()
        sink.clear()
        system_settings.put_color(STATUS_BAR_BATTERY_STATUS_TEXT_COLOR, GREEN)
        assert sink.effects == []
