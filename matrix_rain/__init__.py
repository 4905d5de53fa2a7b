"""
Matrix Rain - Falling characters in the terminal

Renders the digital rain effect with configurable direction, color and
alphabet, optionally constrained by an image mask.

Basic Usage:
    from matrix_rain import main
    main()

With Custom Terminal:
    from matrix_rain import RainApp, RainConfig, TerminalOutput, resolve_config

    class MyTerminal(TerminalOutput):
        def write_text(self, text):
            ...
        # ... implement other methods

    app = RainApp(resolve_config(RainConfig()), MyTerminal())
    app.run()
"""

import logging

__version__ = "1.0.0"

# Log records go nowhere unless the application configures logging
logging.getLogger(__name__).addHandler(logging.NullHandler())

# Configuration
from .config import (
    Direction,
    RainColor,
    CharRange,
    RainConfig,
    ResolvedConfig,
    resolve_config,
)
from .errors import MatrixRainError, ConfigurationError, MaskSourceError, MaskUnavailable

# Simulation
from .charset import CharacterGenerator
from .field import Droplet, DropletField, Viewport
from .mask import Stencil, MaskSource, ImageMaskSource, MaskLoader, build_stencil
from .renderer import FrameRenderer, RainContext

# Terminal and application
from .colors import Colors
from .terminal import TerminalOutput, CursesTerminal
from .app import RainApp, print_mask
from .cli import main

__all__ = [
    # Version
    "__version__",
    # Configuration
    "Direction",
    "RainColor",
    "CharRange",
    "RainConfig",
    "ResolvedConfig",
    "resolve_config",
    # Errors
    "MatrixRainError",
    "ConfigurationError",
    "MaskSourceError",
    "MaskUnavailable",
    # Simulation
    "CharacterGenerator",
    "Droplet",
    "DropletField",
    "Viewport",
    "Stencil",
    "MaskSource",
    "ImageMaskSource",
    "MaskLoader",
    "build_stencil",
    "FrameRenderer",
    "RainContext",
    # Terminal
    "Colors",
    "TerminalOutput",
    "CursesTerminal",
    "RainApp",
    "print_mask",
    "main",
]
