"""
Rain Application - Frame loop, resize handling and shutdown.

Runs the renderer on a fixed timer, rebuilds the field and the stencil when
the terminal changes size, and restores the terminal on any exit path.
"""

import logging
import sys
import time
from typing import List, Optional, TextIO

from .config import ResolvedConfig
from .errors import MaskSourceError, MaskUnavailable
from .mask import MaskLoader, MaskResult, MaskSource, build_stencil
from .renderer import FRAME_INTERVAL_MS, FrameRenderer, RainContext
from .terminal import TerminalOutput

logger = logging.getLogger(__name__)


class RainApp:
    """
    Matrix rain in a terminal.

    Owns the simulation context, the renderer and the background mask
    loader. Everything runs on the calling thread except stencil builds.
    """

    def __init__(self, config: ResolvedConfig, terminal: TerminalOutput,
                 mask_source: Optional[MaskSource] = None,
                 frame_interval_ms: int = FRAME_INTERVAL_MS):
        self.config = config
        self.terminal = terminal
        self.frame_interval_ms = frame_interval_ms
        self.context = RainContext.create(config)
        self.renderer = FrameRenderer(self.context, terminal)
        self.running = False
        self.started = False
        self.mask_errors: List[Exception] = []

        self.mask_loader: Optional[MaskLoader] = None
        if config.has_mask and mask_source is not None:
            self.mask_loader = MaskLoader(
                mask_source, config.mask_path,
                offset_row=config.offset_row,
                offset_col=config.offset_col,
                inverted=config.invert_mask,
                font_ratio=config.font_ratio,
            )

    def start(self):
        """Take over the terminal and size the field."""
        self.terminal.enter_alternate_buffer()
        self.started = True
        self.terminal.hide_cursor()
        self.terminal.clear_screen()
        self.terminal.flush()
        self.running = True
        self.handle_resize()
        logger.info(f"Rain started: direction={self.config.direction.value} "
                    f"color={self.config.color.value} chars={self.config.char_range.value}")

    def handle_resize(self):
        """Resize the field and request a stencil for the new size."""
        width, height = self.terminal.get_size()
        self.context.resize(width, height)
        if self.mask_loader is not None:
            self.mask_loader.request(width, height)
        self.terminal.clear_screen()
        logger.debug(f"Terminal resized to {width}x{height}")

    def tick(self):
        """Install a finished stencil, if any, and render one frame."""
        if self.mask_loader is not None:
            result = self.mask_loader.poll()
            if result is not None:
                self._install_mask(result)
        self.renderer.render_frame()

    def _install_mask(self, result: MaskResult):
        if result.ok:
            self.context.install_stencil(result.stencil)
            logger.debug(f"Installed {result.stencil.width}x{result.stencil.height} stencil")
            return
        # A broken mask only costs the mask, never the rain
        self.context.install_stencil(None)
        self.mask_errors.append(result.error)
        logger.warning(f"Mask disabled: {result.error}")
        if isinstance(result.error.__cause__, MaskSourceError):
            # The image itself is unreadable, later sizes won't help
            self.mask_loader.shutdown()
            self.mask_loader = None

    def run(self):
        """Render until a key press or interrupt, then restore the terminal."""
        try:
            if not self.started:
                self.start()
            next_frame = time.monotonic()
            while self.running:
                now = time.monotonic()
                if now >= next_frame:
                    self.tick()
                    next_frame += self.frame_interval_ms / 1000.0
                    if next_frame < now:
                        # Fell behind, don't try to catch up
                        next_frame = now + self.frame_interval_ms / 1000.0
                wait_ms = max(0, int((next_frame - time.monotonic()) * 1000))
                key = self.terminal.read_key(wait_ms)
                if key is None:
                    continue
                if self.terminal.is_resize_key(key):
                    self.handle_resize()
                else:
                    logger.info("Key pressed, shutting down")
                    self.running = False
        except KeyboardInterrupt:
            logger.info("Interrupted, shutting down")
        finally:
            self.stop()

    def stop(self):
        """Restore the terminal. Safe to call more than once."""
        self.running = False
        if self.mask_loader is not None:
            self.mask_loader.shutdown()
        if not self.started:
            return
        self.started = False
        try:
            self.terminal.show_cursor()
            self.terminal.clear_screen()
            self.terminal.cursor_home()
            self.terminal.flush()
        finally:
            self.terminal.leave_alternate_buffer()
        logger.info(f"Rain stopped after {self.renderer.frame_count} frames")


def print_mask(config: ResolvedConfig, mask_source: MaskSource, width: int, height: int,
               stream: Optional[TextIO] = None):
    """
    Print the mask for a width x height terminal, shifted by the offsets.

    Raises:
        MaskUnavailable: no mask path configured, or the mask cannot be built.
    """
    stream = stream or sys.stdout
    if not config.has_mask:
        raise MaskUnavailable("no mask file provided.")

    stencil = build_stencil(
        mask_source, config.mask_path, width, height,
        offset_row=config.offset_row, offset_col=config.offset_col,
        inverted=config.invert_mask, font_ratio=config.font_ratio,
    )
    for _ in range(max(0, config.offset_row)):
        stream.write("\n")
    prefix = " " * max(0, config.offset_col)
    for row in stencil.rows:
        stream.write(f"{prefix}{row}\n")
    stream.flush()
