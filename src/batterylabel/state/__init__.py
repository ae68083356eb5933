"""
State module - battery status and the label's decision inputs.
"""

from .battery import (
    BatteryController,
    BatteryState,
    BatteryStateChangeCallback,
    BatteryStyle,
    PercentMode,
    Visibility,
    clamp_level,
    get_battery_controller,
    reset_battery_controller,
)

__all__ = [
    'BatteryController', 'BatteryState', 'BatteryStateChangeCallback',
    'BatteryStyle', 'PercentMode', 'Visibility', 'clamp_level',
    'get_battery_controller', 'reset_battery_controller',
]
