# ==============================================================================
# CORE MODULE INIT
# ==============================================================================
# Building blocks shared by every asset type:
#   - ByteCursor: exact-size reads/writes over a seekable stream
#   - Config:     JSON backed settings
#   - errors:     exception hierarchy
# ==============================================================================

from .cursor import ByteCursor
from .errors import (
    GenieAssetError,
    UnexpectedEndOfData,
    UnsupportedVersion,
    SerializationError,
    InvalidSignature,
    UnsupportedFormat,
    PaletteFormatError,
    PaletteIndexError,
    DecodeError,
    PixelOutOfBounds,
    OverlayOutOfBounds,
    FrameTooLarge,
)
from .config import Config, get_config

__all__ = [
    'ByteCursor',

    # Errors
    'GenieAssetError',
    'UnexpectedEndOfData',
    'UnsupportedVersion',
    'SerializationError',
    'InvalidSignature',
    'UnsupportedFormat',
    'PaletteFormatError',
    'PaletteIndexError',
    'DecodeError',
    'PixelOutOfBounds',
    'OverlayOutOfBounds',
    'FrameTooLarge',

    # Configuration
    'Config',
    'get_config',
]
