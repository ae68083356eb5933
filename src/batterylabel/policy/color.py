"""
Text color policy for the battery percentage label.

Color changes fade over COLOR_TRANSITION_DURATION_MS, except while charging or
at low battery where the new color is applied at once.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from batterylabel.color import blend_color, format_color, normalize_color, WHITE
from batterylabel.framework.animator import ValueAnimator
from batterylabel.framework.looper import Looper

if TYPE_CHECKING:
    from batterylabel.render.sink import RenderSink

log = logging.getLogger(__name__)

COLOR_TRANSITION_DURATION_MS = 500

# No fade at or below this level
LOW_BATTERY_LEVEL = 16


@dataclass
class ColorState:
    """Color on screen and the color it is heading to."""
    current_color: int = WHITE
    target_color: int = WHITE
    transition_in_progress: bool = False


def should_animate(level: int, charging: bool) -> bool:
    """Whether a color change at this battery state fades instead of switching."""
    return not charging and level > LOW_BATTERY_LEVEL


class ColorPolicy:
    """Drives the label's text color.

    Args:
        state: Color state owned by the view.
        sink: Receiver of set_text_color effects.
        looper: Loop the transition ticks run on.
        duration_ms: Transition length.
    """

    def __init__(self, state: ColorState, sink: "RenderSink", looper: Looper,
                 duration_ms: float = COLOR_TRANSITION_DURATION_MS):
        self.state = state
        self._sink = sink
        self._start_color = state.current_color
        self._animator = ValueAnimator(looper, duration_ms)
        self._animator.add_update_listener(self._on_transition_update)
        self._animator.add_end_listener(self._on_transition_end)

    @property
    def animator(self) -> ValueAnimator:
        return self._animator

    def on_color_setting_changed(self, new_color: int, level: int, charging: bool) -> bool:
        """Handle a new desired text color.

        Args:
            new_color: Color read from settings.
            level: Current battery level.
            charging: Whether the battery is charging.

        Returns:
            True if the target color changed.
        """
        new_color = normalize_color(new_color)
        if new_color == self.state.target_color:
            return False

        self.state.target_color = new_color
        if should_animate(level, charging):
            # Fade from whatever is on screen, including a half-finished fade
            self._start_color = self.state.current_color
            self.state.transition_in_progress = True
            log.debug(f"[ColorPolicy] Fading {format_color(self._start_color)} -> {format_color(new_color)}")
            self._animator.start()
        else:
            self._animator.cancel()
            self._apply(new_color)
            log.debug(f"[ColorPolicy] Applied {format_color(new_color)} without fade "
                      f"(level={level}, charging={charging})")
        return True

    def apply_immediately(self, color: int) -> None:
        """Show a color with no transition, whatever the battery state."""
        color = normalize_color(color)
        self._animator.cancel()
        self.state.target_color = color
        self._apply(color)

    def cancel(self) -> None:
        """Stop any running transition and show its target color."""
        if not self._animator.is_running:
            return
        self._animator.cancel()
        self._apply(self.state.target_color)

    def _apply(self, color: int) -> None:
        self.state.current_color = color
        self.state.transition_in_progress = False
        self._sink.set_text_color(color)

    def _on_transition_update(self, fraction: float) -> None:
        blended = blend_color(self._start_color, self.state.target_color, fraction)
        self.state.current_color = blended
        self._sink.set_text_color(blended)

    def _on_transition_end(self, cancelled: bool) -> None:
        self.state.current_color = self.state.target_color
        self.state.transition_in_progress = False
        if cancelled:
            log.debug("[ColorPolicy] Transition cancelled")
