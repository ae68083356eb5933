"""Framework core components: event loop, animator and widget base.

Widget pulls in Pillow, so exports are imported lazily to keep the policy
modules importable on their own.
"""

from __future__ import annotations

import importlib
from typing import Any

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "Looper": ("batterylabel.framework.looper", "Looper"),
    "ValueAnimator": ("batterylabel.framework.animator", "ValueAnimator"),
    "Widget": ("batterylabel.framework.widget", "Widget"),
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
