from .settings import (
    DEFAULT_BATTERY_TEXT_COLOR,
    DISPLAY_SECTION,
    STATUS_BAR_BATTERY_STATUS_TEXT_COLOR,
    SYSTEM_SECTION,
    Settings,
    SystemSettings,
)

__all__ = [
    'DEFAULT_BATTERY_TEXT_COLOR', 'DISPLAY_SECTION',
    'STATUS_BAR_BATTERY_STATUS_TEXT_COLOR', 'SYSTEM_SECTION',
    'Settings', 'SystemSettings',
]
