"""
Pytest configuration and fixtures for batterylabel tests.

This module provides:
- A fake clock and a Looper driven by it, so animation ticks run on demand
- A recording render sink
- A settings store backed by a temporary ini file
"""

import pytest

from batterylabel.config.settings import Settings, SystemSettings
from batterylabel.framework.looper import Looper
from batterylabel.render.sink import RenderSink
from batterylabel.state.battery import BatteryController


class FakeClock:
    """Manually advanced clock in seconds."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms / 1000.0


class RecordingSink(RenderSink):
    """Render sink that records every effect in order."""

    def __init__(self):
        self.effects = []

    def set_text(self, text):
        self.effects.append(("text", text))

    def set_text_color(self, color):
        self.effects.append(("color", color))

    def set_visibility(self, visibility):
        self.effects.append(("visibility", visibility))

    def set_text_size_px(self, size):
        self.effects.append(("text_size", size))

    def of(self, kind):
        return [value for name, value in self.effects if name == kind]

    @property
    def colors(self):
        return self.of("color")

    @property
    def visibilities(self):
        return self.of("visibility")

    @property
    def texts(self):
        return self.of("text")

    def clear(self):
        self.effects.clear()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def looper(clock):
    return Looper(clock=clock)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "batterylabel.ini"


@pytest.fixture
def settings_store(config_path, tmp_path):
    """Settings on a temporary ini file with an empty defaults file."""
    return Settings(str(config_path), str(tmp_path / "defaults.ini"))


@pytest.fixture
def system_settings(settings_store):
    return SystemSettings(settings_store)


@pytest.fixture
def controller(looper):
    return BatteryController(looper)
