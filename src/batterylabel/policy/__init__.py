"""
Decision rules for the battery label: visibility and text color.
"""

from .color import (
    COLOR_TRANSITION_DURATION_MS,
    LOW_BATTERY_LEVEL,
    ColorPolicy,
    ColorState,
    should_animate,
)
from .visibility import compute_visible, resolve_visibility

__all__ = [
    'COLOR_TRANSITION_DURATION_MS', 'LOW_BATTERY_LEVEL',
    'ColorPolicy', 'ColorState', 'should_animate',
    'compute_visible', 'resolve_visibility',
]
