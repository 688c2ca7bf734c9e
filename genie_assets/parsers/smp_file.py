# ==============================================================================
# SMP FILE MODULE
# ==============================================================================
# Container for SMP sprites (Definitive Edition sprite format).
#
# File layout:
#   Header (64 bytes):
#     - signature         4s    b"SMP$"
#     - version           i32
#     - frame_count       i32
#     - facet_count       i32   number of animation facets (directions)
#     - frames_per_facet  i32
#     - checksum          u32
#     - file_size         i32
#     - source_format     i32
#     - comment           32s
#   Frame offset table: frame_count x u32 (absolute offsets)
#
#   Frame record at each offset:
#     - 28 unknown bytes
#     - layer_count       u32
#     - layer_count x 32-byte SmpFrame headers, back to back
#   Each layer's table offsets are relative to its frame record.
#
# Frames are decoded independently. A broken frame is logged and skipped
# (recorded in SmpFile.errors) unless fail_fast is set.
#
# Usage:
#   smp = SmpFile.load_file("u_inf_archer_idleA_x1.smp")
#   for frame_index, layers in enumerate(smp.frames):
#       main = layers[0]
#       print(main.width, main.height, len(main.player_color_overlay))
# ==============================================================================

from typing import Iterator, List, NamedTuple, Optional, Tuple

from genie_assets.core.cursor import ByteCursor
from genie_assets.core.errors import GenieAssetError, InvalidSignature
from genie_assets.serialization import RAW, STRING, Field, GameVersion, VersionedEntity
from genie_assets.parsers.smp_frame import HEADER_SIZE, MAX_FRAME_DIMENSION, SmpFrame


SMP_SIGNATURE = b"SMP$"
FRAME_RECORD_SIZE = 32


class SmpHeader(VersionedEntity):
    """File header plus the frame offset table."""

    FIELDS = [
        Field('signature', '4s', default=SMP_SIGNATURE),
        Field('file_version', 'i'),
        Field('frame_count', 'i'),
        Field('facet_count', 'i'),
        Field('frames_per_facet', 'i'),
        Field('checksum', 'I'),
        Field('file_size', 'i'),
        Field('source_format', 'i'),
        Field('comment', STRING, 32),
        Field('frame_offsets', 'I', count=lambda h: max(0, h.frame_count)),
    ]
    SUPPORTED_VERSIONS = frozenset({GameVersion.DE2})
    DEFAULT_VERSION = GameVersion.DE2


class SmpFrameRecord(VersionedEntity):
    FIELDS = [
        Field('unknown', RAW, 28, default=bytes(28)),
        Field('layer_count', 'I'),
    ]
    SUPPORTED_VERSIONS = frozenset({GameVersion.DE2})
    DEFAULT_VERSION = GameVersion.DE2


class SmpFrameError(NamedTuple):
    frame: int
    layer: int
    message: str


class SmpFile:
    """
    A decoded SMP file.

    Attributes:
        header (SmpHeader):          File header and frame offsets
        frames (list):               Per frame, the list of decoded layers.
                                     A frame that failed keeps the layers
                                     decoded before the failure.
        errors (list):               SmpFrameError entries for skipped layers
        filepath (str):              Source path if loaded from disk
    """

    def __init__(self, header: Optional[SmpHeader] = None):
        self.header = header or SmpHeader()
        self.frames: List[List[SmpFrame]] = []
        self.errors: List[SmpFrameError] = []
        self.filepath = ""

    # -------------------------------------------------------------------------
    # LOADING
    # -------------------------------------------------------------------------

    @classmethod
    def load(cls, cursor: ByteCursor, version: GameVersion = GameVersion.DE2,
             fail_fast: bool = False, max_dimension: int = MAX_FRAME_DIMENSION,
             debug: bool = False) -> 'SmpFile':
        """
        Parse the header and decode every layer of every frame.

        Args:
            cursor:        Cursor positioned at the start of the file
            version:       Game version used for all entities
            fail_fast:     Re-raise the first per-layer error instead of
                           logging and continuing
            max_dimension: Per-frame sanity limit for width/height
            debug:         Print a [DEBUG] line per decoded layer

        Raises:
            InvalidSignature:    not an SMP file
            UnexpectedEndOfData: header or offset table truncated
        """
        start = cursor.tell()
        header = SmpHeader.read(cursor, version)
        if header.signature != SMP_SIGNATURE:
            raise InvalidSignature(SMP_SIGNATURE, header.signature)

        smp = cls(header)
        for frame_index, offset in enumerate(header.frame_offsets):
            layers: List[SmpFrame] = []
            smp.frames.append(layers)
            try:
                cursor.seek(start + offset)
                record = SmpFrameRecord.read(cursor, version)
            except GenieAssetError as e:
                if fail_fast:
                    raise
                smp._record_error(frame_index, -1, e)
                continue

            for layer_index in range(record.layer_count):
                header_pos = start + offset + FRAME_RECORD_SIZE + layer_index * HEADER_SIZE
                try:
                    cursor.seek(header_pos)
                    layer = SmpFrame.read(cursor, version, base_offset=start + offset,
                                          max_dimension=max_dimension)
                except GenieAssetError as e:
                    if fail_fast:
                        raise
                    smp._record_error(frame_index, layer_index, e)
                    break
                layers.append(layer)
                if debug:
                    print(f"[DEBUG] Frame {frame_index} layer {layer_index}: {layer!r}")

        if smp.errors:
            print(f"[WARN] {len(smp.errors)} of {len(header.frame_offsets)} SMP frames failed to decode")
        return smp

    @classmethod
    def load_file(cls, filepath: str, **kwargs) -> 'SmpFile':
        """Load an SMP file from disk. Keyword arguments go to load()."""
        smp = cls.load(ByteCursor.from_path(filepath), **kwargs)
        smp.filepath = filepath
        return smp

    def _record_error(self, frame_index: int, layer_index: int, error: Exception):
        where = f"frame {frame_index}" if layer_index < 0 else f"frame {frame_index} layer {layer_index}"
        print(f"[WARN] Skipping {where}: {error}")
        self.errors.append(SmpFrameError(frame_index, layer_index, str(error)))

    # -------------------------------------------------------------------------
    # ACCESS
    # -------------------------------------------------------------------------

    @property
    def frame_count(self) -> int:
        return len(self.frames)

    def get_frame(self, index: int, layer: int = 0) -> Optional[SmpFrame]:
        """Get a layer of a frame, None if either index is out of range."""
        if 0 <= index < len(self.frames) and 0 <= layer < len(self.frames[index]):
            return self.frames[index][layer]
        return None

    def find_layer(self, index: int, layer_type: int) -> Optional[SmpFrame]:
        """First layer of frame ``index`` with the given layer type."""
        if not 0 <= index < len(self.frames):
            return None
        for layer in self.frames[index]:
            if layer.layer_type == layer_type:
                return layer
        return None

    def iter_layers(self) -> Iterator[Tuple[int, int, SmpFrame]]:
        """Yield (frame_index, layer_index, layer) for every decoded layer."""
        for frame_index, layers in enumerate(self.frames):
            for layer_index, layer in enumerate(layers):
                yield frame_index, layer_index, layer

    def __repr__(self):
        return f"<SmpFile(frames={self.frame_count}, errors={len(self.errors)})>"
