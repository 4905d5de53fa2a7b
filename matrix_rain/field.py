"""
Droplet Field - Droplets, viewport orientation and per-column bookkeeping.

Everything here works in logical coordinates: rows run in the direction of
travel and columns across it. The Viewport is the single place where logical
coordinates turn into physical terminal coordinates.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Tuple

from .charset import CharacterGenerator, rand
from .config import Direction

logger = logging.getLogger(__name__)

MAX_SPEED = 20
DROPLETS_PER_COLUMN = 2


@dataclass
class Droplet:
    """A single falling trail."""
    column: int
    current_row: int
    trail_length: int
    speed: int                       # Ticks per visual advance
    glyphs: List[str] = field(default_factory=list)
    ticks_elapsed: int = 0

    def glyph_at(self, row: int) -> str:
        """Glyph for a logical row, empty when the row has no glyph."""
        if 0 <= row < len(self.glyphs):
            return self.glyphs[row]
        return ""

    @property
    def tail_row(self) -> int:
        return self.current_row - self.trail_length


class Viewport:
    """Logical viewport size plus the orientation transform."""

    def __init__(self, direction: Direction = Direction.VERTICAL):
        self.direction = direction
        self.num_rows = 0
        self.num_cols = 0

    @property
    def transposed(self) -> bool:
        return self.direction.is_transposed

    def set_physical_size(self, width: int, height: int) -> Tuple[int, int]:
        """Set the size from terminal dimensions, returns (num_cols, num_rows)."""
        width, height = max(0, width), max(0, height)
        if self.transposed:
            width, height = height, width
        self.num_cols, self.num_rows = width, height
        return self.num_cols, self.num_rows

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.num_rows and 0 <= col < self.num_cols

    def to_physical(self, row: int, col: int) -> Tuple[int, int]:
        """Map logical (row, col) to terminal (row, col)."""
        if self.transposed:
            return col, row
        return row, col


class DropletField:
    """Owns every droplet, two per logical column."""

    def __init__(self, generator: CharacterGenerator, viewport: Viewport):
        self.generator = generator
        self.viewport = viewport
        self.columns: List[List[Droplet]] = []

    @property
    def num_rows(self) -> int:
        return self.viewport.num_rows

    @property
    def num_cols(self) -> int:
        return self.viewport.num_cols

    def make_droplet(self, col: int) -> Droplet:
        """Create a droplet with random phase, trail and speed."""
        num_rows = self.num_rows
        return Droplet(
            column=col,
            current_row=rand(0, num_rows),
            trail_length=rand(num_rows // 2, num_rows),
            speed=rand(1, MAX_SPEED),
            glyphs=self.generator.generate(num_rows),
        )

    def regenerate(self, droplet: Droplet) -> Droplet:
        """Replace a retired droplet in place, restarting it at row 0."""
        fresh = self.make_droplet(droplet.column)
        droplet.current_row = 0
        droplet.trail_length = fresh.trail_length
        droplet.speed = fresh.speed
        droplet.glyphs = fresh.glyphs
        droplet.ticks_elapsed = 0
        return droplet

    def resize(self, physical_width: int, physical_height: int):
        """Match the number of column slots to the new terminal size.

        Droplets in columns that survive the resize are left as they are.
        """
        num_cols, num_rows = self.viewport.set_physical_size(physical_width, physical_height)

        if num_rows == 0 or num_cols == 0:
            self.columns = []
        elif num_cols > len(self.columns):
            for col in range(len(self.columns), num_cols):
                self.columns.append([self.make_droplet(col) for _ in range(DROPLETS_PER_COLUMN)])
        else:
            del self.columns[num_cols:]

        logger.debug(f"Field resized to {num_cols}x{num_rows} ({len(self.columns)} column slots)")

    def droplets(self) -> Iterator[Droplet]:
        for slot in self.columns:
            yield from slot

    def __len__(self) -> int:
        return len(self.columns)
