"""
Rain Configuration - Option enums and startup resolution.

Turns the raw options handed over by the command line into a ResolvedConfig.
Options with side effects (custom character file, the lil-guys alphabet) are
resolved here exactly once, before any simulation state exists.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class Direction(Enum):
    """Direction the droplets travel in."""
    VERTICAL = "v"
    HORIZONTAL = "h"

    @property
    def is_transposed(self) -> bool:
        return self is Direction.HORIZONTAL


class RainColor(Enum):
    """Named rain colors. The droplet head is always white."""
    GREEN = "green"
    RED = "red"
    BLUE = "blue"
    YELLOW = "yellow"
    MAGENTA = "magenta"
    CYAN = "cyan"
    WHITE = "white"


class CharRange(Enum):
    """Alphabets the rain characters are drawn from."""
    ASCII = "ascii"
    BINARY = "binary"
    BRAILLE = "braille"
    EMOJI = "emoji"
    KATAKANA = "katakana"
    LIL_GUYS = "lil-guys"
    PICTO = "picto"
    FILE = "file"

    @classmethod
    def selectable(cls) -> List["CharRange"]:
        """Ranges that can be picked directly (FILE comes from --file-path)."""
        return [r for r in cls if r is not CharRange.FILE]


@dataclass
class RainConfig:
    """Options as given by the operator"""
    direction: Direction = Direction.VERTICAL
    color: RainColor = RainColor.GREEN
    char_range: CharRange = CharRange.ASCII
    file_path: Optional[str] = None
    mask_path: Optional[str] = None
    invert_mask: bool = False
    offset_row: int = 0
    offset_col: int = 0
    font_ratio: int = 2              # Terminal cell height over width
    print_mask: bool = False


@dataclass
class ResolvedConfig:
    """Configuration with every derived setting fixed for the process lifetime"""
    direction: Direction
    color: RainColor
    char_range: CharRange
    file_chars: List[str] = field(default_factory=list)
    mask_path: Optional[str] = None
    invert_mask: bool = False
    offset_row: int = 0
    offset_col: int = 0
    font_ratio: int = 2
    print_mask: bool = False

    @property
    def has_mask(self) -> bool:
        return bool(self.mask_path)


def load_file_chars(path: str) -> List[str]:
    """Read the custom character source, stripped of surrounding whitespace."""
    if not os.path.isfile(path):
        raise ConfigurationError(f"{path} doesn't exist")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            content = f.read().strip()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e
    if not content:
        raise ConfigurationError(f"{path} contains no characters")
    return list(content)


def resolve_config(config: RainConfig) -> ResolvedConfig:
    """
    Validate options and fix all derived settings.

    Raises:
        ConfigurationError: the character file is missing, unreadable or
            empty, or the font ratio is not positive.
    """
    if config.font_ratio < 1:
        raise ConfigurationError(f"font ratio must be at least 1, got {config.font_ratio}")

    direction = config.direction
    color = config.color
    char_range = config.char_range
    file_chars: List[str] = []

    if config.file_path:
        file_chars = load_file_chars(config.file_path)
        char_range = CharRange.FILE
        logger.info(f"Loaded {len(file_chars)} characters from {config.file_path}")
    elif char_range is CharRange.FILE:
        raise ConfigurationError("char range 'file' requires a file path")

    if char_range is CharRange.LIL_GUYS:
        # lil-guys only swim sideways, and only in white
        direction = Direction.HORIZONTAL
        color = RainColor.WHITE

    return ResolvedConfig(
        direction=direction,
        color=color,
        char_range=char_range,
        file_chars=file_chars,
        mask_path=config.mask_path,
        invert_mask=config.invert_mask,
        offset_row=config.offset_row,
        offset_col=config.offset_col,
        font_ratio=config.font_ratio,
        print_mask=config.print_mask,
    )
