"""Typed settings helpers.

Generic helpers for loading values from a Settings store.
Does not contain any knowledge of specific setting names.
"""

from .settings import Settings


def load_str(settings: Settings, section: str, key: str, default: str = "") -> str:
    """Load a string setting.

    Args:
        settings: Backing store
        section: Section name in config file
        key: Setting key
        default: Default value if not present

    Returns:
        String value of the setting
    """
    return settings.read(section, key, default)


def load_int(settings: Settings, section: str, key: str, default: int = 0) -> int:
    """Load an integer setting, falling back to default when unparsable."""
    value = settings.read(section, key, str(default))
    try:
        return int(value, 0)
    except ValueError:
        return default


def load_float(settings: Settings, section: str, key: str, default: float = 0.0) -> float:
    """Load a float setting, falling back to default when unparsable."""
    value = settings.read(section, key, str(default))
    try:
        return float(value)
    except ValueError:
        return default
