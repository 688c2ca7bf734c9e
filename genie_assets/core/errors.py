# ==============================================================================
# ERRORS MODULE
# ==============================================================================
# Exception types raised while reading or writing Genie engine assets.
#
# Every error here is a data-integrity condition for a single entity. The
# library raises them and never retries; batch loaders and the CLI catch
# them per frame/file, print a message and carry on with the rest.
#
# Hierarchy:
#   GenieAssetError
#     +-- UnexpectedEndOfData      cursor exhausted / sink rejected a write
#     +-- UnsupportedVersion       entity has no layout for a GameVersion
#     +-- SerializationError       layout misuse (wrong list length, ...)
#     +-- InvalidSignature         magic bytes do not match
#     +-- UnsupportedFormat        recognised container, unknown payload
#     +-- PaletteFormatError       malformed JASC-PAL text
#     +-- PaletteIndexError        color lookup outside the palette
#     +-- DecodeError
#           +-- PixelOutOfBounds
#           +-- OverlayOutOfBounds
#           +-- FrameTooLarge
# ==============================================================================

from typing import Optional


class GenieAssetError(Exception):
    """Base class for all asset reading/writing errors."""


class UnexpectedEndOfData(GenieAssetError):
    """
    Raised when the cursor has fewer bytes than a read requires, or when
    the underlying sink refuses (part of) a write.

    Attributes:
        offset (int):    Cursor position where the operation started
        requested (int): Number of bytes the operation needed
        available (int): Number of bytes that were actually there
    """

    def __init__(self, offset: int, requested: int, available: int, message: Optional[str] = None):
        self.offset = offset
        self.requested = requested
        self.available = available
        if message is None:
            message = (f"Unexpected end of data at offset {offset}: "
                       f"needed {requested} bytes, {available} available")
        super().__init__(message)


class UnsupportedVersion(GenieAssetError):
    """Raised when an entity is asked to lay out fields for a version it does not know."""

    def __init__(self, version, entity: str = ""):
        self.version = version
        self.entity = entity
        where = f" for {entity}" if entity else ""
        super().__init__(f"Unsupported game version{where}: {version!r}")


class SerializationError(GenieAssetError):
    """Raised when a layout callback is used inconsistently (e.g. list length mismatch)."""


class InvalidSignature(GenieAssetError):
    """Raised when a file does not start with the expected magic bytes."""

    def __init__(self, expected: bytes, found: bytes):
        self.expected = expected
        self.found = found
        super().__init__(f"Invalid signature: expected {expected!r}, found {found!r}")


class UnsupportedFormat(GenieAssetError):
    """Raised for a recognised container whose payload format we cannot describe."""


class PaletteFormatError(GenieAssetError):
    """Raised for malformed JASC-PAL palette text."""


class PaletteIndexError(GenieAssetError, IndexError):
    """Raised when a palette lookup is outside the palette."""


# ==============================================================================
# DECODE ERRORS
# ==============================================================================

class DecodeError(GenieAssetError):
    """Base class for sprite image decoding failures."""


class _RunOutOfBounds(DecodeError):
    kind = "Pixel"

    def __init__(self, row: int, col: int, count: int, width: int):
        self.row = row
        self.col = col
        self.count = count
        self.width = width
        super().__init__(
            f"{self.kind} run out of bounds in row {row}: "
            f"columns {col}..{col + count - 1} exceed frame width {width}"
        )


class PixelOutOfBounds(_RunOutOfBounds):
    """A direct color run would write past the end of its row."""
    kind = "Pixel"


class OverlayOutOfBounds(_RunOutOfBounds):
    """A player color run would place overlay entries past the end of its row."""
    kind = "Overlay"


class FrameTooLarge(DecodeError):
    """Frame header declares dimensions above the configured sanity limit."""

    def __init__(self, width: int, height: int, limit: int):
        self.width = width
        self.height = height
        self.limit = limit
        super().__init__(f"Frame too large: {width}x{height} (limit {limit})")
