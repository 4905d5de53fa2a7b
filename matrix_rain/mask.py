"""
Mask Builder - Image derived stencils that hide parts of the rain.

A mask source turns an image into rows of text where '#' marks foreground
and ' ' marks background. The stencil blanks every cell holding the blank
marker; inverting the mask swaps which of the two counts as blank.

Usage:
    from matrix_rain.mask import ImageMaskSource, build_stencil

    stencil = build_stencil(ImageMaskSource(), "logo.png", width=80, height=24)
    if stencil.is_blank(row, col):
        ...
"""

import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from PIL import Image, UnidentifiedImageError

from .errors import MaskSourceError, MaskUnavailable

logger = logging.getLogger(__name__)

FOREGROUND_CHAR = "#"
BACKGROUND_CHAR = " "
LUMA_THRESHOLD = 128


@dataclass(frozen=True)
class Stencil:
    """Immutable mask grid positioned on the physical screen."""
    rows: Tuple[str, ...]
    offset_row: int = 0
    offset_col: int = 0
    blank_char: str = BACKGROUND_CHAR

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    def is_blank(self, row: int, col: int) -> bool:
        """True when physical (row, col) falls on a blank mask cell."""
        mask_row = row - self.offset_row
        mask_col = col - self.offset_col
        if not (0 <= mask_row < self.height and 0 <= mask_col < self.width):
            return False
        line = self.rows[mask_row]
        return mask_col < len(line) and line[mask_col] == self.blank_char


class MaskSource(ABC):
    """
    Abstract producer of mask rows.

    Implementations return a rectangular list of strings made of
    FOREGROUND_CHAR and BACKGROUND_CHAR, or raise MaskSourceError.
    """

    @abstractmethod
    def render(self, path: str, width: int, height: int, font_ratio: int = 2) -> List[str]:
        """Render the image at ``path`` to fit a width x height pixel box.

        One text column spans one pixel and one text row spans
        ``font_ratio`` pixels, so the result has at most
        ``height // font_ratio`` rows.
        """
        pass


class ImageMaskSource(MaskSource):
    """Mask source backed by Pillow."""

    def __init__(self, threshold: int = LUMA_THRESHOLD):
        self.threshold = threshold

    def render(self, path: str, width: int, height: int, font_ratio: int = 2) -> List[str]:
        try:
            with Image.open(path) as img:
                img.load()
                gray = self._to_grayscale(img)
        except (OSError, UnidentifiedImageError) as e:
            raise MaskSourceError(f"Cannot read mask image {path}: {e}") from e

        cols, rows = self.fit(gray.width, gray.height, width, height, font_ratio)
        if cols <= 0 or rows <= 0:
            return []

        small = gray.resize((cols, rows), Image.Resampling.BILINEAR)
        pixels = small.tobytes()  # one byte per pixel in mode "L"
        lines = []
        for r in range(rows):
            row_pixels = pixels[r * cols:(r + 1) * cols]
            lines.append("".join(
                FOREGROUND_CHAR if p >= self.threshold else BACKGROUND_CHAR
                for p in row_pixels
            ))
        return lines

    @staticmethod
    def fit(img_width: int, img_height: int, width: int, height: int,
            font_ratio: int = 2) -> Tuple[int, int]:
        """Fit the image into width x height pixels, return (columns, text rows)."""
        if img_width <= 0 or img_height <= 0:
            return 0, 0
        font_ratio = max(1, font_ratio)
        scale = min(width / img_width, height / img_height)
        cols = int(round(img_width * scale))
        rows = int(round(img_height * scale / font_ratio))
        return min(cols, width), min(rows, height // font_ratio)

    @staticmethod
    def _to_grayscale(img):
        # Transparent pixels count as background
        if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
            rgba = img.convert("RGBA")
            background = Image.new("RGBA", rgba.size, (0, 0, 0, 255))
            background.alpha_composite(rgba)
            return background.convert("L")
        return img.convert("L")


def build_stencil(source: MaskSource, path: str, width: int, height: int,
                  offset_row: int = 0, offset_col: int = 0, inverted: bool = False,
                  font_ratio: int = 2) -> Stencil:
    """
    Build a stencil for a width x height terminal.

    Raises:
        MaskUnavailable: the viewport is empty, the source failed, or the
            source produced no rows.
    """
    if width <= 0 or height <= 0:
        raise MaskUnavailable(f"viewport {width}x{height} is too small for a mask")

    try:
        rows = source.render(path, width, height * font_ratio, font_ratio)
    except MaskSourceError as e:
        raise MaskUnavailable(str(e)) from e

    rows = _strip_trailing_empty(rows)
    if not rows:
        raise MaskUnavailable(f"mask {path} rendered no rows")

    blank_char = FOREGROUND_CHAR if inverted else BACKGROUND_CHAR
    logger.debug(f"Built {len(rows[0])}x{len(rows)} stencil from {path} (blank={blank_char!r})")
    return Stencil(rows=tuple(rows), offset_row=offset_row,
                   offset_col=offset_col, blank_char=blank_char)


def _strip_trailing_empty(rows: Sequence[str]) -> List[str]:
    rows = list(rows)
    while rows and rows[-1] == "":
        rows.pop()
    return rows


@dataclass
class MaskResult:
    """Outcome of one background build."""
    stencil: Optional[Stencil] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.stencil is not None


class MaskLoader:
    """
    Builds stencils on a background thread.

    Only the most recent request matters: older jobs are cancelled when
    possible and their results are discarded otherwise. poll() never blocks.
    """

    def __init__(self, source: MaskSource, path: str, offset_row: int = 0,
                 offset_col: int = 0, inverted: bool = False, font_ratio: int = 2):
        self.source = source
        self.path = path
        self.offset_row = offset_row
        self.offset_col = offset_col
        self.inverted = inverted
        self.font_ratio = font_ratio
        self._executor: Optional[ThreadPoolExecutor] = None
        self._future: Optional[Future] = None
        self._lock = threading.Lock()

    def request(self, width: int, height: int):
        """Start building a stencil for the given terminal size."""
        with self._lock:
            if self._future is not None:
                self._future.cancel()
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="mask")
            self._future = self._executor.submit(
                build_stencil, self.source, self.path, width, height,
                self.offset_row, self.offset_col, self.inverted, self.font_ratio,
            )
        logger.debug(f"Requested mask for {width}x{height}")

    def poll(self) -> Optional[MaskResult]:
        """Return the finished result of the latest request, once."""
        with self._lock:
            future = self._future
            if future is None or not future.done():
                return None
            self._future = None

        error = future.exception()
        if error is not None:
            return MaskResult(error=error)
        return MaskResult(stencil=future.result())

    def shutdown(self):
        with self._lock:
            if self._future is not None:
                self._future.cancel()
                self._future = None
            if self._executor is not None:
                self._executor.shutdown(wait=False)
                self._executor = None
