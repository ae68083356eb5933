""" Handles config in batterylabel.ini """

# This file is part of the batterylabel project.
#
# Licensed under the GNU General Public License v3.0 or later.
# See LICENSE.md for details.

import configparser
import logging
import os
import threading
from typing import Callable, Dict, Final, List, Optional

from batterylabel.color import format_color, normalize_color

log = logging.getLogger(__name__)

CONFIG_ENV: Final[str] = "BATTERYLABEL_CONFIG_PATH"
DEFAULT_CONFIG_ENV: Final[str] = "BATTERYLABEL_DEFAULT_CONFIG_PATH"

DEFAULT_CONFIG_PATH: Final[str] = os.path.expanduser("~/.config/batterylabel/batterylabel.ini")
DEFAULT_DEFAULTS_PATH: Final[str] = "/etc/batterylabel/batterylabel.ini"

SYSTEM_SECTION: Final[str] = "system"
DISPLAY_SECTION: Final[str] = "display"

STATUS_BAR_BATTERY_STATUS_TEXT_COLOR: Final[str] = "status_bar_battery_status_text_color"
DEFAULT_BATTERY_TEXT_COLOR: Final[int] = 0xFFFFFFFF


class Settings:
    """Handles an ini settings file with a read-only defaults file behind it.

    Paths come from the arguments, then $BATTERYLABEL_CONFIG_PATH and
    $BATTERYLABEL_DEFAULT_CONFIG_PATH, then the built-in locations.
    """

    def __init__(self, configfile: Optional[str] = None, defconfigfile: Optional[str] = None):
        self.configfile = configfile or os.environ.get(CONFIG_ENV, DEFAULT_CONFIG_PATH)
        self.defconfigfile = defconfigfile or os.environ.get(DEFAULT_CONFIG_ENV, DEFAULT_DEFAULTS_PATH)
        self._lock = threading.RLock()

    def read(self, section, key, default=''):
        """ Read a value from the key in the section """
        with self._lock:
            config = self.get_config()
            if config.has_option(section, key):
                return config[section][key]
            value = self._read_default(section, key)
            return default if value == '' else value

    def write(self, section, key, value):
        """ Write a value to the key in the section """
        with self._lock:
            config = self.get_config()
            if not config.has_section(section):
                config.add_section(section)
            config.set(section, key, str(value))
            self.write_config(config)

    def _read_default(self, section, key):
        defconfig = configparser.ConfigParser()
        defconfig.read(self.defconfigfile)
        if defconfig.has_option(section, key):
            return defconfig[section][key]
        return ''

    def get_config(self):
        config = configparser.ConfigParser()
        config.read(self.configfile)
        return config

    def write_config(self, config):
        """ Writes the settings file """
        config_dir = os.path.dirname(self.configfile)
        if config_dir:
            os.makedirs(config_dir, exist_ok=True)
        with open(self.configfile, 'w', encoding="utf-8") as f:
            config.write(f)

    def mtime(self) -> float:
        """Modification time of the settings file, 0.0 if it does not exist."""
        try:
            return os.path.getmtime(self.configfile)
        except OSError:
            return 0.0


SettingsObserver = Callable[[str], None]


class SystemSettings:
    """Typed access to the [system] settings with change notification.

    Observers register for a single key and are called with that key when
    its value changes, either through put_int() or through an edit of the
    settings file picked up by check_for_changes().

    Args:
        settings: Backing ini store.
    """

    def __init__(self, settings: Optional[Settings] = None, section: str = SYSTEM_SECTION):
        self._settings = settings if settings is not None else Settings()
        self._section = section
        self._observers: Dict[str, List[SettingsObserver]] = {}
        self._lock = threading.RLock()
        self._last_mtime = self._settings.mtime()
        self._snapshot: Dict[str, str] = self._read_section()

    @property
    def settings(self) -> Settings:
        return self._settings

    # -------------------------------------------------------------------------
    # Values
    # -------------------------------------------------------------------------

    def get_int(self, key: str, default: int = 0) -> int:
        """Read an integer setting; hex (0x...) values are accepted.

        Unset or unparsable values yield the default.
        """
        value = self._settings.read(self._section, key, '')
        if value == '':
            return default
        try:
            return int(value, 0)
        except ValueError:
            log.warning(f"[SystemSettings] Invalid integer for {key}: {value!r}, using {default}")
            return default

    def get_color(self, key: str, default: int = DEFAULT_BATTERY_TEXT_COLOR) -> int:
        """Read an ARGB color setting."""
        return normalize_color(self.get_int(key, default))

    def put_int(self, key: str, value: int) -> None:
        """Write an integer setting and notify observers if it changed."""
        self._write(key, str(int(value)))

    def put_color(self, key: str, color: int) -> None:
        """Write an ARGB color setting and notify observers if it changed."""
        self._write(key, format_color(color))

    def _write(self, key: str, text: str) -> None:
        with self._lock:
            old = self._settings.read(self._section, key, '')
            self._settings.write(self._section, key, text)
            self._snapshot = self._read_section()
            self._last_mtime = self._settings.mtime()
        if old != text:
            self._notify(key)

    # -------------------------------------------------------------------------
    # Observer management
    # -------------------------------------------------------------------------

    def register_observer(self, key: str, callback: SettingsObserver) -> bool:
        """Observe changes of one key.

        Returns:
            True if registered, False if the callback already observed the key.
        """
        with self._lock:
            callbacks = self._observers.setdefault(key, [])
            if callback in callbacks:
                return False
            callbacks.append(callback)
            return True

    def unregister_observer(self, callback: SettingsObserver) -> bool:
        """Remove a callback from every key it observes.

        Returns:
            True if the callback was registered anywhere.
        """
        removed = False
        with self._lock:
            for callbacks in self._observers.values():
                if callback in callbacks:
                    callbacks.remove(callback)
                    removed = True
        return removed

    def observer_count(self, key: str) -> int:
        with self._lock:
            return len(self._observers.get(key, []))

    def _notify(self, key: str) -> None:
        with self._lock:
            callbacks = list(self._observers.get(key, []))
        for callback in callbacks:
            try:
                callback(key)
            except Exception as e:
                log.error(f"[SystemSettings] Error in observer for {key}: {e}", exc_info=True)

    # -------------------------------------------------------------------------
    # File watching
    # -------------------------------------------------------------------------

    def _read_section(self) -> Dict[str, str]:
        config = self._settings.get_config()
        if not config.has_section(self._section):
            return {}
        return dict(config[self._section])

    def check_for_changes(self) -> List[str]:
        """Notify observers of keys changed by edits to the settings file.

        Returns:
            Keys whose values changed since the last check.
        """
        with self._lock:
            mtime = self._settings.mtime()
            if mtime == self._last_mtime:
                return []
            self._last_mtime = mtime
            current = self._read_section()
            changed = sorted(
                key for key in set(current) | set(self._snapshot)
                if current.get(key) != self._snapshot.get(key)
            )
            self._snapshot = current
        for key in changed:
            log.info(f"[SystemSettings] {key} changed on disk")
            self._notify(key)
        return changed
