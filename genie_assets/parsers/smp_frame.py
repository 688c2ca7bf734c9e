# ==============================================================================
# SMP FRAME MODULE
# ==============================================================================
# Sprite frame (one layer of an SMP sprite) and its image codec.
#
# Frame header (32 bytes, little-endian):
#   - width                 u32
#   - height                u32
#   - hotspot_x             i32
#   - hotspot_y             i32
#   - layer_type            u32   (main / shadow / outline)
#   - outline_table_offset  u32   relative to the frame's base offset
#   - cmd_table_offset      u32   relative to the frame's base offset
#   - flags                 u32   meaning mostly unknown, kept verbatim
#
# Edge (outline) table, one entry per row:
#   - left   u16   transparent pixels on the left side
#   - right  u16   transparent pixels on the right side
#   0xFFFF in either field means the whole row is transparent and the row
#   has NO commands in the command stream.
#
# Command stream, rows back to back, each row ending with 0x03:
#   op = one byte
#     op == 3        end of row
#     count = (op >> 2) + 1
#     op & 3 == 0    skip `count` transparent pixels
#     op & 3 == 1    `count` pixels follow (u32 each)
#     op & 3 == 2    `count` intensity bytes, then `count` player color
#                    pixels (u32 each)
#
# Player color pixels do not go into the pixel buffer. They are kept as a
# sparse (col, row, pixel) list and get tinted per player at render time.
#
# Writing covers the header only; there is no encoder for the image payload.
# ==============================================================================

from enum import IntEnum
from typing import List, NamedTuple, Optional

import numpy as np

from genie_assets.core.cursor import ByteCursor
from genie_assets.core.errors import (
    DecodeError, FrameTooLarge, OverlayOutOfBounds, PixelOutOfBounds,
)
from genie_assets.serialization import Field, GameVersion, Mode, VersionedEntity, run_pass


# ==============================================================================
# CONSTANTS
# ==============================================================================

HEADER_SIZE = 32

# Edge value marking a fully transparent row
TRANSPARENT_ROW = 0xFFFF

# Command byte values / modes
CMD_END_OF_ROW = 0x03
CMD_SKIP = 0
CMD_COLOR = 1
CMD_PLAYER_COLOR = 2

PIXEL_SIZE = 4

# Sanity limit for header dimensions (checked before allocating)
MAX_FRAME_DIMENSION = 8192


class LayerType(IntEnum):
    MAIN = 0x02
    SHADOW = 0x04
    OUTLINE = 0x08


class SmpPixel(NamedTuple):
    """A raw 32-bit SMP pixel split into its bytes."""
    index: int
    palette: int
    damage_modifier_1: int
    damage_modifier_2: int

    @classmethod
    def from_raw(cls, raw: int) -> 'SmpPixel':
        return cls(raw & 0xFF, (raw >> 8) & 0xFF, (raw >> 16) & 0xFF, (raw >> 24) & 0xFF)

    def to_raw(self) -> int:
        return (self.index | (self.palette << 8)
                | (self.damage_modifier_1 << 16) | (self.damage_modifier_2 << 24))


class PlayerColorPixel(NamedTuple):
    """Overlay entry: position plus the raw pixel to tint."""
    col: int
    row: int
    pixel: int


# ==============================================================================
# SMP FRAME
# ==============================================================================

class SmpFrame(VersionedEntity):
    """
    One SMP sprite frame/layer.

    Attributes:
        width, height (int):        Pixel dimensions (both forced to 0, and the
                                    edge tables cleared, if the image turns out
                                    to have no pixels at all)
        hotspot_x, hotspot_y (int): Anchor offsets
        layer_type (int):           See LayerType; unknown values kept as-is
        outline_table_offset (int): Edge table offset from base_offset
        cmd_table_offset (int):     Command stream offset from base_offset
        flags (int):                Raw flag bits
        base_offset (int):          Absolute position the table offsets are
                                    relative to
        left_edges, right_edges:    Per-row transparent counts (u16)
        pixels (np.ndarray):        uint32 buffer, width * height, row-major
        player_color_overlay (list): PlayerColorPixel entries
    """

    FIELDS = [
        Field('width', 'I'),
        Field('height', 'I'),
        Field('hotspot_x', 'i'),
        Field('hotspot_y', 'i'),
        Field('layer_type', 'I', default=LayerType.MAIN),
        Field('outline_table_offset', 'I'),
        Field('cmd_table_offset', 'I'),
        Field('flags', 'I'),
    ]
    SUPPORTED_VERSIONS = frozenset({GameVersion.DE2})
    DEFAULT_VERSION = GameVersion.DE2

    def __init__(self, version: Optional[GameVersion] = None, base_offset: int = 0,
                 max_dimension: int = MAX_FRAME_DIMENSION, **values):
        super().__init__(version=version, **values)
        self.base_offset = base_offset
        self.max_dimension = max_dimension
        self.left_edges: List[int] = []
        self.right_edges: List[int] = []
        self.pixels = np.zeros(0, dtype=np.uint32)
        self.player_color_overlay: List[PlayerColorPixel] = []

    @classmethod
    def read(cls, cursor: ByteCursor, version: Optional[GameVersion] = None,
             base_offset: Optional[int] = None, max_dimension: int = MAX_FRAME_DIMENSION) -> 'SmpFrame':
        """
        Read header, edge table and image starting at the cursor position.

        Args:
            cursor:        Cursor positioned at the frame header
            version:       Game version (SMP frames only exist in DE2)
            base_offset:   Position the table offsets are relative to;
                           defaults to the header position
            max_dimension: Reject headers declaring more than this
        """
        if base_offset is None:
            base_offset = cursor.tell()
        frame = cls(version=version, base_offset=base_offset, max_dimension=max_dimension)
        return run_pass(frame, cursor, Mode.READ)

    def load(self, cursor: ByteCursor) -> 'SmpFrame':
        return run_pass(self, cursor, Mode.READ)

    # -------------------------------------------------------------------------
    # LAYOUT
    # -------------------------------------------------------------------------

    def layout(self, ser):
        ser.apply(self, self.FIELDS)
        if not ser.is_reading:
            return
        self._check_dimensions()
        ser.seek(self.base_offset + self.outline_table_offset)
        self.read_edges(ser.cursor)
        self.decode_image(ser.cursor)

    def read_edges(self, cursor: ByteCursor):
        """Read the per-row (left, right) edge table at the cursor position."""
        edges = cursor.unpack(f'<{2 * self.height}H')
        self.left_edges = list(edges[0::2])
        self.right_edges = list(edges[1::2])

    def _check_dimensions(self):
        if self.max_dimension and (self.width > self.max_dimension or self.height > self.max_dimension):
            raise FrameTooLarge(self.width, self.height, self.max_dimension)

    # -------------------------------------------------------------------------
    # IMAGE CODEC
    # -------------------------------------------------------------------------

    def decode_image(self, cursor: ByteCursor):
        """
        Decode the command stream into ``pixels`` and ``player_color_overlay``.

        The cursor is moved to ``base_offset + cmd_table_offset`` and then
        only advances. Transparent rows consume no command bytes.

        Raises:
            UnexpectedEndOfData: stream ends before a row terminator
            PixelOutOfBounds:    skip/color run passes the row end
            OverlayOutOfBounds:  player color run passes the row end
        """
        width, height = self.width, self.height
        if len(self.left_edges) != height or len(self.right_edges) != height:
            raise DecodeError(
                f"Edge table has {len(self.left_edges)}/{len(self.right_edges)} rows, frame has {height}"
            )
        self._check_dimensions()

        self.pixels = np.zeros(width * height, dtype=np.uint32)
        self.player_color_overlay = []
        cursor.seek(self.base_offset + self.cmd_table_offset)

        pixels_read = 0
        for row in range(height):
            left = self.left_edges[row]
            if left == TRANSPARENT_ROW or self.right_edges[row] == TRANSPARENT_ROW:
                continue

            col = left
            while True:
                op = cursor.read_u8()
                if op == CMD_END_OF_ROW:
                    break

                count = (op >> 2) + 1
                mode = op & 0b11

                if mode == CMD_COLOR:
                    self._check_run(PixelOutOfBounds, row, col, count)
                    start = row * width + col
                    run = np.frombuffer(cursor.read_exact(count * PIXEL_SIZE), dtype='<u4')
                    self.pixels[start:start + count] = run
                elif mode == CMD_PLAYER_COLOR:
                    self._check_run(OverlayOutOfBounds, row, col, count)
                    self._read_player_colors(cursor, row, col, count)
                else:
                    # skip; mode 3 only occurs as the terminator
                    self._check_run(PixelOutOfBounds, row, col, count)

                col += count
                pixels_read += count

        if pixels_read == 0:
            # TODO: confirm against real DE2 data whether an all-transparent
            # frame should keep its declared size.
            self.width = 0
            self.height = 0
            self.left_edges = []
            self.right_edges = []
            self.pixels = np.zeros(0, dtype=np.uint32)

    def _read_player_colors(self, cursor: ByteCursor, row: int, col: int, count: int):
        # Intensity bytes come first and are not kept.
        cursor.read_exact(count)
        for offset in range(count):
            pixel, = cursor.unpack('<I')
            self.player_color_overlay.append(PlayerColorPixel(col + offset, row, pixel))

    def _check_run(self, error, row: int, col: int, count: int):
        if col + count > self.width:
            raise error(row, col, count, self.width)

    def encode_image(self, cursor: ByteCursor):
        raise NotImplementedError("SMP image encoding is not supported")

    # -------------------------------------------------------------------------
    # ACCESSORS
    # -------------------------------------------------------------------------

    def as_array(self) -> np.ndarray:
        """Pixel buffer as a (height, width) view."""
        return self.pixels.reshape((self.height, self.width))

    def pixel_at(self, col: int, row: int) -> SmpPixel:
        if not (0 <= col < self.width and 0 <= row < self.height):
            raise IndexError(f"Pixel ({col}, {row}) outside {self.width}x{self.height} frame")
        return SmpPixel.from_raw(int(self.pixels[row * self.width + col]))

    def player_color_mask(self) -> np.ndarray:
        """Boolean (height, width) array, True where an overlay entry sits."""
        mask = np.zeros((self.height, self.width), dtype=bool)
        for entry in self.player_color_overlay:
            mask[entry.row, entry.col] = True
        return mask

    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return (super().__eq__(other)
                and self.base_offset == other.base_offset
                and self.left_edges == other.left_edges
                and self.right_edges == other.right_edges
                and np.array_equal(self.pixels, other.pixels)
                and self.player_color_overlay == other.player_color_overlay)

    __hash__ = None

    def __repr__(self):
        return (f"<SmpFrame({self.width}x{self.height}, hotspot=({self.hotspot_x}, {self.hotspot_y}), "
                f"layer_type={self.layer_type:#x}, overlay={len(self.player_color_overlay)})>")
