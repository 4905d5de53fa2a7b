"""
Character Generator - Glyphs for the droplet buffers.

Each CharRange maps to a code point range, a fixed literal, or the
characters of a user supplied file.
"""

import random
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .config import CharRange
from .errors import ConfigurationError

# Half-open code point ranges [start, end)
CODE_POINT_RANGES: Dict[CharRange, Tuple[int, int]] = {
    CharRange.ASCII: (0x21, 0x7E),
    CharRange.BINARY: (0x30, 0x32),
    CharRange.BRAILLE: (0x2840, 0x28FF),
    CharRange.KATAKANA: (0x30A0, 0x30FF),
    CharRange.PICTO: (0x4E00, 0x9FA5),
}

# Emoji are a surrogate pair: fixed high half, random low half
EMOJI_HIGH_SURROGATE = 0xD83D
EMOJI_LOW_SURROGATES = (0xDE01, 0xDE4A)

LIL_GUY = "  ~~o "


def rand(start: int, end: int) -> int:
    """Uniform integer in the half-open interval [start, end), start if empty."""
    if end <= start:
        return start
    return random.randrange(start, end)


def combine_surrogates(high: int, low: int) -> str:
    """Join a UTF-16 surrogate pair into a single character."""
    return chr(0x10000 + ((high - 0xD800) << 10) + (low - 0xDC00))


class CharacterGenerator:
    """Produces glyph sequences for one alphabet.

    The file alphabet keeps a read position shared by every call, so
    consecutive droplets continue where the previous one stopped.
    """

    def __init__(self, char_range: CharRange, file_chars: Optional[Sequence[str]] = None):
        self.char_range = char_range
        self._file_chars: List[str] = list(file_chars or [])
        self._file_pos = 0

        if char_range is CharRange.FILE and not self._file_chars:
            raise ConfigurationError("file alphabet needs at least one character")

        self._producers: Dict[CharRange, Callable[[], str]] = {
            CharRange.EMOJI: self._emoji,
            CharRange.LIL_GUYS: self._lil_guy,
            CharRange.FILE: self._next_file_char,
        }
        for rng in CODE_POINT_RANGES:
            self._producers[rng] = self._code_point_producer(*CODE_POINT_RANGES[rng])

    @property
    def file_position(self) -> int:
        return self._file_pos

    def generate(self, count: int) -> List[str]:
        """Return ``count`` glyphs from the configured alphabet."""
        produce = self._producers[self.char_range]
        return [produce() for _ in range(max(0, count))]

    @staticmethod
    def _code_point_producer(start: int, end: int) -> Callable[[], str]:
        return lambda: chr(rand(start, end))

    @staticmethod
    def _emoji() -> str:
        return combine_surrogates(EMOJI_HIGH_SURROGATE, rand(*EMOJI_LOW_SURROGATES))

    @staticmethod
    def _lil_guy() -> str:
        return LIL_GUY

    def _next_file_char(self) -> str:
        if self._file_pos >= len(self._file_chars):
            self._file_pos = 0
        char = self._file_chars[self._file_pos]
        self._file_pos += 1
        return char
