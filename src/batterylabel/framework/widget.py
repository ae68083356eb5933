"""
Base widget class for status bar rendering.
"""

import logging
from abc import ABC
from typing import Callable, Optional

from PIL import Image

log = logging.getLogger(__name__)

RedrawCallback = Callable[[bool], object]


def _require_callback(owner: str, callback: Optional[RedrawCallback]) -> RedrawCallback:
    if callback is None:
        raise ValueError(f"{owner}: a redraw callback is required")
    return callback


class Widget(ABC):
    """Base class for status bar widgets.

    A widget paints into its own transparent RGBA sprite, which is kept until
    the widget's content changes and is then composited onto the status bar
    canvas. Content changes call the redraw callback with a 'full' flag.

    Args:
        x: Left edge on the status bar canvas.
        y: Top edge on the status bar canvas.
        width: Sprite width in pixels.
        height: Sprite height in pixels.
        update_callback: Redraw callback taking the 'full' flag.

    Raises:
        ValueError: If update_callback is None.
    """

    def __init__(self, x: int, y: int, width: int, height: int,
                 update_callback: RedrawCallback):
        self._update_callback = _require_callback(type(self).__name__, update_callback)
        self.x, self.y = x, y
        self.width, self.height = width, height
        self.visible = True
        self._cached_sprite: Optional[Image.Image] = None
        log.debug(f"[{type(self).__name__}] {width}x{height} at ({x}, {y})")

    def request_update(self, full: bool = False, forced: bool = False):
        """Call the redraw callback.

        A hidden widget draws nothing, so only forced requests (from show and
        hide, which change the covered region) get through.
        """
        if self.visible or forced:
            return self._update_callback(full)
        log.debug(f"[{type(self).__name__}] hidden, redraw request dropped")
        return None

    def invalidate_cache(self) -> None:
        self._cached_sprite = None

    def _sprite(self) -> Image.Image:
        # Local reference: invalidate_cache() may run between render and paste
        sprite = self._cached_sprite
        if sprite is None:
            sprite = Image.new("RGBA", (self.width, self.height), (0, 0, 0, 0))
            self.render(sprite)
            self._cached_sprite = sprite
        return sprite

    def draw_on(self, canvas: Image.Image, draw_x: int, draw_y: int) -> None:
        """Composite the widget onto canvas with its top-left at (draw_x, draw_y)."""
        if not self.visible:
            return
        sprite = self._sprite()
        if canvas.mode == "RGBA":
            canvas.alpha_composite(sprite, (draw_x, draw_y))
        else:
            canvas.paste(sprite, (draw_x, draw_y), sprite)

    def render(self, sprite: Image.Image) -> None:
        """Paint the widget into its blank, widget-sized sprite."""
        raise NotImplementedError(f"{type(self).__name__}.render()")

    def _set_visible(self, visible: bool) -> None:
        if visible == self.visible:
            return
        self.visible = visible
        self.invalidate_cache()
        log.debug(f"[{type(self).__name__}] {'shown' if visible else 'hidden'}")
        self.request_update(full=False, forced=True)

    def show(self) -> None:
        self._set_visible(True)

    def hide(self) -> None:
        self._set_visible(False)
