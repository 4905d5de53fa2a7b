"""
Test doubles shared by the suite: a recording terminal and an in-memory mask source.
"""

import os
import sys
from typing import List, Optional, Tuple

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from matrix_rain.config import RainColor
from matrix_rain.errors import MaskSourceError
from matrix_rain.mask import MaskSource
from matrix_rain.terminal import TerminalOutput

RESIZE_KEY = -2


class RecordingTerminal(TerminalOutput):
    """Terminal that records every write and mode change."""

    def __init__(self, width: int = 80, height: int = 24, keys: Optional[List[int]] = None):
        self.width = width
        self.height = height
        self.keys = list(keys or [])
        self.pending: List[Tuple[int, int, Optional[RainColor], str]] = []
        self.frames: List[List[Tuple[int, int, Optional[RainColor], str]]] = []
        self.events: List[str] = []
        self._pos = (0, 0)
        self._color: Optional[RainColor] = None

    def move_cursor(self, row, col):
        self._pos = (row, col)

    def set_color(self, color):
        self._color = color

    def write_text(self, text):
        row, col = self._pos
        self.pending.append((row, col, self._color, text))

    def enter_alternate_buffer(self):
        self.events.append("enter")

    def leave_alternate_buffer(self):
        self.events.append("leave")

    def hide_cursor(self):
        self.events.append("hide_cursor")

    def show_cursor(self):
        self.events.append("show_cursor")

    def clear_screen(self):
        self.events.append("clear")

    def cursor_home(self):
        self.events.append("home")
        self._pos = (0, 0)

    def flush(self):
        self.frames.append(self.pending)
        self.pending = []

    def get_size(self):
        return self.width, self.height

    def read_key(self, timeout_ms):
        if self.keys:
            return self.keys.pop(0)
        return None

    def is_resize_key(self, key):
        return key == RESIZE_KEY

    @property
    def writes(self):
        """Every write flushed so far, in order."""
        return [w for frame in self.frames for w in frame]


class StaticMaskSource(MaskSource):
    """Mask source returning fixed rows and remembering its calls."""

    def __init__(self, rows=None, error: Optional[str] = None):
        self.rows = list(rows or [])
        self.error = error
        self.calls = []

    def render(self, path, width, height, font_ratio=2):
        self.calls.append((path, width, height, font_ratio))
        if self.error:
            raise MaskSourceError(self.error)
        return list(self.rows)
