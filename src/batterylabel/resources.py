"""Resource loader for batterylabel.

Resolves fonts and dimensions used by the status bar widgets. Fonts are
looked up in the user directory first (for overrides), then the system
directory, and cached per (path, size).

Usage:
    from batterylabel.resources import ResourceLoader

    loader = ResourceLoader("/usr/share/batterylabel", "~/.local/share/batterylabel")
    size_px = loader.get_dimension_px("battery_level_text_size")
    font = loader.get_font(size_px)
"""

import logging
import os
from typing import Dict, Optional, Tuple

from PIL import ImageFont

from batterylabel.config.persistence import load_float, load_int, load_str
from batterylabel.config.settings import DISPLAY_SECTION, Settings

log = logging.getLogger(__name__)

DEFAULT_FONT_NAME = "DejaVuSans.ttf"

# Unscaled dimensions in pixels
DIMENSIONS: Dict[str, int] = {
    "battery_level_text_size": 12,
}


class ResourceLoader:
    """Loads and caches fonts; resolves scaled dimensions.

    Args:
        system_dir: Path to the system resources directory.
        user_dir: Optional path to user resources directory (checked first).
        settings: Optional settings store; the [display] section may set
            font_scale, font_path and per-dimension overrides.
    """

    def __init__(self, system_dir: str = "", user_dir: str = None, settings: Optional[Settings] = None):
        self.system_dir = system_dir
        self.user_dir = os.path.expanduser(user_dir) if user_dir else None
        self._settings = settings

        # Font cache: {(path, size): ImageFont}
        self._font_cache: Dict[Tuple[Optional[str], int], ImageFont.ImageFont] = {}

    def get_resource_path(self, filename: str) -> Optional[str]:
        """Get full path to a resource file, or None if not found."""
        if ".." in filename:
            return None

        if os.path.isabs(filename):
            return filename if os.path.exists(filename) else None

        if self.user_dir:
            user_path = os.path.join(self.user_dir, filename)
            if os.path.exists(user_path):
                return user_path

        if self.system_dir:
            system_path = os.path.join(self.system_dir, filename)
            if os.path.exists(system_path):
                return system_path

        return None

    @property
    def font_scale(self) -> float:
        """User font scale from [display] font_scale (default 1.0)."""
        if self._settings is None:
            return 1.0
        scale = load_float(self._settings, DISPLAY_SECTION, "font_scale", 1.0)
        return scale if scale > 0 else 1.0

    def get_dimension_px(self, name: str) -> int:
        """Resolve a named dimension in pixels, applying the font scale.

        Raises:
            KeyError: If the dimension is unknown.
        """
        base = DIMENSIONS[name]
        if self._settings is not None:
            base = load_int(self._settings, DISPLAY_SECTION, name, base)
        return max(1, round(base * self.font_scale))

    def _default_font_path(self) -> Optional[str]:
        name = DEFAULT_FONT_NAME
        if self._settings is not None:
            name = load_str(self._settings, DISPLAY_SECTION, "font_path", DEFAULT_FONT_NAME) or DEFAULT_FONT_NAME
        return self.get_resource_path(name)

    def get_font(self, size: int, path: str = None) -> ImageFont.ImageFont:
        """Get a font at the given pixel size.

        Falls back to Pillow's built-in font when no font file is found.
        """
        if path is None:
            path = self._default_font_path()

        cache_key = (path, size)
        if cache_key in self._font_cache:
            return self._font_cache[cache_key]

        font = None
        if path:
            try:
                font = ImageFont.truetype(path, size)
            except OSError as e:
                log.warning(f"[ResourceLoader] Unable to load font {path}: {e}")

        if font is None:
            font = ImageFont.load_default(size=size)

        self._font_cache[cache_key] = font
        return font
