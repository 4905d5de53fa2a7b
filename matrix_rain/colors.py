"""
Rain Color Definitions - Curses color pair management.

One color pair per RainColor, all on a black background.
"""

from typing import Dict

# Handle curses import for Windows compatibility
try:
    import curses
    CURSES_AVAILABLE = True
except ImportError:
    curses = None
    CURSES_AVAILABLE = False

from .config import RainColor

# Droplet heads are always drawn in this color
LEAD_COLOR = RainColor.WHITE


class Colors:
    """Color pairs for curses."""
    NORMAL = 0
    GREEN = 1
    RED = 2
    BLUE = 3
    YELLOW = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7

    PAIRS: Dict[RainColor, int] = {
        RainColor.GREEN: GREEN,
        RainColor.RED: RED,
        RainColor.BLUE: BLUE,
        RainColor.YELLOW: YELLOW,
        RainColor.MAGENTA: MAGENTA,
        RainColor.CYAN: CYAN,
        RainColor.WHITE: WHITE,
    }

    @staticmethod
    def pair_for(color: RainColor) -> int:
        """Color pair number for a rain color."""
        return Colors.PAIRS[color]

    @staticmethod
    def init_colors():
        """Initialize curses color pairs, foreground color on black."""
        if not CURSES_AVAILABLE or curses is None:
            return
        curses.start_color()
        foregrounds = {
            RainColor.GREEN: curses.COLOR_GREEN,
            RainColor.RED: curses.COLOR_RED,
            RainColor.BLUE: curses.COLOR_BLUE,
            RainColor.YELLOW: curses.COLOR_YELLOW,
            RainColor.MAGENTA: curses.COLOR_MAGENTA,
            RainColor.CYAN: curses.COLOR_CYAN,
            RainColor.WHITE: curses.COLOR_WHITE,
        }
        for color, fg in foregrounds.items():
            curses.init_pair(Colors.pair_for(color), fg, curses.COLOR_BLACK)

    @staticmethod
    def attr_for(color: RainColor) -> int:
        """Curses attribute for drawing in ``color``. The lead color is bold."""
        attr = curses.color_pair(Colors.pair_for(color))
        if color is LEAD_COLOR:
            attr |= curses.A_BOLD
        return attr
