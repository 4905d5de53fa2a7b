"""
Frame Renderer - Advances droplets and writes one frame per tick.

All simulation state lives in a RainContext that is handed to the renderer
and to the resize handler explicitly.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .charset import CharacterGenerator
from .colors import LEAD_COLOR
from .config import RainColor, ResolvedConfig
from .field import Droplet, DropletField, Viewport
from .mask import Stencil
from .terminal import TerminalOutput

logger = logging.getLogger(__name__)

BLANK_GLYPH = " "
FRAME_INTERVAL_MS = 16  # ~60 FPS


@dataclass
class RainContext:
    """Everything the frame loop mutates: the field and the stencil."""
    config: ResolvedConfig
    viewport: Viewport
    field: DropletField
    stencil: Optional[Stencil] = None

    @classmethod
    def create(cls, config: ResolvedConfig) -> "RainContext":
        generator = CharacterGenerator(config.char_range, config.file_chars)
        viewport = Viewport(config.direction)
        return cls(config=config, viewport=viewport, field=DropletField(generator, viewport))

    def resize(self, width: int, height: int):
        self.field.resize(width, height)

    def install_stencil(self, stencil: Optional[Stencil]):
        """Swap in a new stencil (or none) as a whole."""
        self.stencil = stencil


class FrameRenderer:
    """Draws the droplet field through a TerminalOutput."""

    def __init__(self, context: RainContext, terminal: TerminalOutput):
        self.context = context
        self.terminal = terminal
        self.frame_count = 0

    @property
    def rain_color(self) -> RainColor:
        return self.context.config.color

    def render_frame(self):
        """Advance every droplet by one tick and flush the frame."""
        field = self.context.field
        num_rows = field.num_rows

        for droplet in field.droplets():
            droplet.ticks_elapsed += 1

            if droplet.ticks_elapsed % droplet.speed == 0:
                self._advance(droplet)

            if droplet.current_row - droplet.trail_length > num_rows:
                field.regenerate(droplet)

        self.frame_count += 1
        self.terminal.flush()

    def _advance(self, droplet: Droplet):
        row, col = droplet.current_row, droplet.column
        # Trail first, then the head, then the erase
        self.write_at(row - 1, col, droplet.glyph_at(row - 1), self.rain_color)
        self.write_at(row, col, droplet.glyph_at(row), LEAD_COLOR)
        self.write_at(droplet.tail_row, col, BLANK_GLYPH)
        droplet.current_row += 1

    def write_at(self, row: int, col: int, glyph: str, color: Optional[RainColor] = None) -> bool:
        """
        Write a glyph at logical (row, col).

        Returns False without writing when the cell is outside the viewport.
        Cells blanked by the stencil receive a space instead of the glyph.
        """
        viewport = self.context.viewport
        if not viewport.contains(row, col):
            return False

        phys_row, phys_col = viewport.to_physical(row, col)
        stencil = self.context.stencil
        if stencil is not None and stencil.is_blank(phys_row, phys_col):
            glyph = BLANK_GLYPH

        self.terminal.move_cursor(phys_row, phys_col)
        self.terminal.set_color(color)
        self.terminal.write_text(glyph)
        return True
