"""
Terminal Output Interface

Defines the abstract terminal the renderer writes through, and the curses
implementation used when running in a real terminal.

Writes are buffered by the implementation and only reach the terminal on
flush(), so a whole frame is emitted as a single batch.

Usage:
    from matrix_rain.terminal import TerminalOutput

    class MyTerminal(TerminalOutput):
        def move_cursor(self, row, col):
            ...
        # ... implement other methods
"""

import logging
import shutil
from abc import ABC, abstractmethod
from typing import Optional, Tuple

# Handle curses import for Windows compatibility
try:
    import curses
    CURSES_AVAILABLE = True
except ImportError:
    curses = None
    CURSES_AVAILABLE = False

from .colors import Colors
from .config import RainColor

logger = logging.getLogger(__name__)


class TerminalOutput(ABC):
    """
    Abstract interface for terminal output and input.

    Coordinates are physical: row 0 is the top line, column 0 the left edge.
    """

    @abstractmethod
    def move_cursor(self, row: int, col: int):
        """Position the cursor for the next write_text()."""
        pass

    @abstractmethod
    def set_color(self, color: Optional[RainColor]):
        """Select the foreground color; None selects the background color."""
        pass

    @abstractmethod
    def write_text(self, text: str):
        """Write text at the cursor in the current color."""
        pass

    @abstractmethod
    def enter_alternate_buffer(self):
        """Switch to the alternate screen and raw keyboard input."""
        pass

    @abstractmethod
    def leave_alternate_buffer(self):
        """Restore the normal screen and terminal mode."""
        pass

    @abstractmethod
    def hide_cursor(self):
        pass

    @abstractmethod
    def show_cursor(self):
        pass

    @abstractmethod
    def clear_screen(self):
        pass

    @abstractmethod
    def cursor_home(self):
        pass

    @abstractmethod
    def flush(self):
        """Send everything buffered since the last flush to the terminal."""
        pass

    @abstractmethod
    def get_size(self) -> Tuple[int, int]:
        """Return the terminal size as (width, height)."""
        pass

    @abstractmethod
    def read_key(self, timeout_ms: int) -> Optional[int]:
        """Wait up to timeout_ms for a key press, None on timeout."""
        pass

    def is_resize_key(self, key: int) -> bool:
        """True when ``key`` is a resize notification rather than a key press."""
        return False


class CursesTerminal(TerminalOutput):
    """Terminal backed by curses.

    initscr()/endwin() switch to and from the alternate screen, the curses
    window is the output buffer and refresh() is the flush.
    """

    def __init__(self):
        if not CURSES_AVAILABLE:
            raise RuntimeError("curses library not available (on Windows: pip install windows-curses)")
        self.screen = None
        self._row = 0
        self._col = 0
        self._attr = 0
        self._timeout_ms: Optional[int] = None

    def enter_alternate_buffer(self):
        if self.screen is not None:
            return
        self.screen = curses.initscr()
        curses.noecho()
        curses.cbreak()
        self.screen.keypad(True)
        try:
            Colors.init_colors()
            self.screen.bkgd(' ', curses.color_pair(Colors.pair_for(RainColor.GREEN)))
        except curses.error as e:
            logger.debug(f"Terminal has no color support: {e}")
        self._attr = 0
        logger.debug("Entered curses screen")

    def leave_alternate_buffer(self):
        if self.screen is None:
            return
        try:
            self.screen.keypad(False)
            curses.nocbreak()
            curses.echo()
        finally:
            curses.endwin()
            self.screen = None
        logger.debug("Left curses screen")

    def hide_cursor(self):
        self._set_cursor_visibility(0)

    def show_cursor(self):
        self._set_cursor_visibility(1)

    def _set_cursor_visibility(self, visibility: int):
        if self.screen is None:
            return
        try:
            curses.curs_set(visibility)
        except curses.error:
            pass  # Not supported by every terminal

    def clear_screen(self):
        if self.screen is not None:
            self.screen.clear()

    def cursor_home(self):
        self.move_cursor(0, 0)

    def move_cursor(self, row: int, col: int):
        self._row = row
        self._col = col

    def set_color(self, color: Optional[RainColor]):
        if color is None:
            self._attr = 0
        else:
            self._attr = Colors.attr_for(color)

    def write_text(self, text: str):
        if self.screen is None or not text:
            return
        try:
            self.screen.addstr(self._row, self._col, text, self._attr)
        except curses.error:
            # Writing the bottom-right cell moves the cursor off screen
            pass
        self._col += len(text)

    def flush(self):
        if self.screen is not None:
            self.screen.refresh()

    def get_size(self) -> Tuple[int, int]:
        if self.screen is not None:
            height, width = self.screen.getmaxyx()
            return width, height
        size = shutil.get_terminal_size()
        return size.columns, size.lines

    def read_key(self, timeout_ms: int) -> Optional[int]:
        if self.screen is None:
            return None
        timeout_ms = max(0, int(timeout_ms))
        if timeout_ms != self._timeout_ms:
            self.screen.timeout(timeout_ms)
            self._timeout_ms = timeout_ms
        key = self.screen.getch()
        if key == -1:
            return None
        return key

    def is_resize_key(self, key: int) -> bool:
        return key == curses.KEY_RESIZE
