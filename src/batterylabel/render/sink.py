"""
Render sinks: receivers of the battery label's output.
"""

import logging
from abc import ABC, abstractmethod

from batterylabel.color import format_color
from batterylabel.state.battery import Visibility

log = logging.getLogger(__name__)


class RenderSink(ABC):
    """Something that can show the battery label."""

    @abstractmethod
    def set_text(self, text: str) -> None:
        pass

    @abstractmethod
    def set_text_color(self, color: int) -> None:
        pass

    @abstractmethod
    def set_visibility(self, visibility: Visibility) -> None:
        pass

    @abstractmethod
    def set_text_size_px(self, size: float) -> None:
        pass


class LoggingSink(RenderSink):
    """Logs every effect. Used by the command line watcher."""

    def __init__(self, logger: logging.Logger = None):
        self._log = logger or log

    def set_text(self, text: str) -> None:
        self._log.info(f"[LoggingSink] text={text!r}")

    def set_text_color(self, color: int) -> None:
        self._log.debug(f"[LoggingSink] color={format_color(color)}")

    def set_visibility(self, visibility: Visibility) -> None:
        self._log.info(f"[LoggingSink] visibility={visibility.name}")

    def set_text_size_px(self, size: float) -> None:
        self._log.info(f"[LoggingSink] text_size={size}px")
