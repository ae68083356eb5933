"""Status bar battery percentage label.

Decides whether the battery percentage is shown, what it says and which
color it is drawn in, from battery events, the indicator style, a color
setting and the owner's visibility requests.
"""

from __future__ import annotations

import importlib
from typing import Any

__version__ = "1.0.0"

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "BatteryLevelView": ("batterylabel.view", "BatteryLevelView"),
    "format_percent": ("batterylabel.view", "format_percent"),
    "BatteryController": ("batterylabel.state.battery", "BatteryController"),
    "BatteryState": ("batterylabel.state.battery", "BatteryState"),
    "BatteryStyle": ("batterylabel.state.battery", "BatteryStyle"),
    "PercentMode": ("batterylabel.state.battery", "PercentMode"),
    "Visibility": ("batterylabel.state.battery", "Visibility"),
    "ColorPolicy": ("batterylabel.policy.color", "ColorPolicy"),
    "ColorState": ("batterylabel.policy.color", "ColorState"),
    "compute_visible": ("batterylabel.policy.visibility", "compute_visible"),
    "resolve_visibility": ("batterylabel.policy.visibility", "resolve_visibility"),
    "Looper": ("batterylabel.framework.looper", "Looper"),
    "SystemSettings": ("batterylabel.config.settings", "SystemSettings"),
    "RenderSink": ("batterylabel.render.sink", "RenderSink"),
}


def __getattr__(name: str) -> Any:
    target = _LAZY_IMPORTS.get(name)
    if target is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module_name, attr_name = target
    module = importlib.import_module(module_name)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(_LAZY_IMPORTS.keys()))


__all__ = list(_LAZY_IMPORTS.keys())
