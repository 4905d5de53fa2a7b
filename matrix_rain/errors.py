"""
Exceptions raised by the rain engine.

Configuration errors are fatal and surface before the terminal is touched.
Mask errors only disable the stencil.
"""


class MatrixRainError(Exception):
    """Base class for all matrix rain errors"""
    pass


class ConfigurationError(MatrixRainError):
    """Raised when options cannot be resolved into a runnable configuration"""
    pass


class MaskSourceError(MatrixRainError):
    """Raised by a mask source when the image cannot be read or decoded"""
    pass


class MaskUnavailable(MatrixRainError):
    """Raised when no stencil can be built for the current viewport"""
    pass
