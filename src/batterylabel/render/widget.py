"""
Battery percentage text widget.
"""

import enum
import logging
from typing import Callable, Optional

from PIL import Image, ImageDraw

from batterylabel.color import WHITE, normalize_color, to_rgba
from batterylabel.framework.widget import Widget
from batterylabel.resources import ResourceLoader
from batterylabel.render.sink import RenderSink
from batterylabel.state.battery import Visibility

log = logging.getLogger(__name__)


class Justify(enum.Enum):
    """Text justification options."""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class BatteryLevelTextWidget(Widget, RenderSink):
    """Draws the battery percentage with Pillow.

    Acts as the render sink of a BatteryLevelView. Each effect updates the
    widget and asks for a redraw only when something visible changed.
    INVISIBLE keeps the widget's slot in the layout; GONE gives it up.

    Args:
        x: X position
        y: Y position
        width: Widget width in pixels
        height: Widget height in pixels
        update_callback: Redraw callback. Must not be None.
        resources: Font source. A bare ResourceLoader is used if omitted.
        justify: Horizontal text placement.
    """

    def __init__(self, x: int, y: int, width: int, height: int,
                 update_callback: Callable[[bool], object],
                 resources: Optional[ResourceLoader] = None,
                 justify: Justify = Justify.RIGHT):
        super().__init__(x, y, width, height, update_callback)
        self._resources = resources if resources is not None else ResourceLoader()
        self.justify = justify
        self.text = ""
        self.text_color = WHITE
        self.text_size_px = 12
        self.visibility = Visibility.VISIBLE

    @property
    def takes_space(self) -> bool:
        """Whether a layout should reserve room for the widget."""
        return self.visibility != Visibility.GONE

    # -------------------------------------------------------------------------
    # RenderSink
    # -------------------------------------------------------------------------

    def set_text(self, text: str) -> None:
        if text != self.text:
            self.text = text
            self.invalidate_cache()
            self.request_update(full=False)

    def set_text_color(self, color: int) -> None:
        color = normalize_color(color)
        if color != self.text_color:
            self.text_color = color
            self.invalidate_cache()
            self.request_update(full=False)

    def set_visibility(self, visibility: Visibility) -> None:
        if visibility == self.visibility:
            return
        self.visibility = visibility
        if visibility == Visibility.VISIBLE:
            self.show()
        else:
            self.hide()

    def set_text_size_px(self, size: float) -> None:
        size = max(1, int(round(size)))
        if size != self.text_size_px:
            self.text_size_px = size
            self.invalidate_cache()
            self.request_update(full=False)

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render(self, sprite: Image.Image) -> None:
        """Draw the text vertically centered with the configured justification."""
        if not self.text:
            return
        draw = ImageDraw.Draw(sprite)
        font = self._resources.get_font(self.text_size_px)
        left, top, right, bottom = draw.textbbox((0, 0), self.text, font=font)
        text_w = right - left
        text_h = bottom - top

        if self.justify == Justify.CENTER:
            x = (self.width - text_w) // 2
        elif self.justify == Justify.RIGHT:
            x = self.width - text_w
        else:
            x = 0
        y = (self.height - text_h) // 2

        draw.text((x - left, y - top), self.text, font=font, fill=to_rgba(self.text_color))
