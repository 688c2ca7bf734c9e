# ==============================================================================
# BYTE CURSOR MODULE
# ==============================================================================
# A seekable, position-tracked read/write view over a byte source.
#
# All asset entities are read and written through a ByteCursor. It wraps a
# binary stream (io.BytesIO, an open file) and guarantees that reads return
# exactly the number of bytes asked for, raising UnexpectedEndOfData instead
# of silently returning short data the way file.read() does.
#
# Usage:
#   cursor = ByteCursor(data)                 # bytes -> read-only BytesIO
#   cursor = ByteCursor.from_path("a.smp")
#   width, height = cursor.unpack("<II")
#
#   out = ByteCursor()                        # empty in-memory sink
#   out.pack("<I", 42)
#   out.getvalue()
# ==============================================================================

import io
import os
import struct
from typing import BinaryIO, Tuple, Union

from .errors import UnexpectedEndOfData


class ByteCursor:
    """
    Seekable binary cursor with exact-size reads.

    Attributes:
        stream: Underlying binary stream
    """

    def __init__(self, source: Union[bytes, bytearray, memoryview, BinaryIO, None] = None):
        """
        Args:
            source: Bytes to read from, an existing seekable binary stream,
                    or None for an empty in-memory sink.
        """
        if source is None:
            self.stream = io.BytesIO()
        elif isinstance(source, (bytes, bytearray, memoryview)):
            self.stream = io.BytesIO(bytes(source))
        else:
            self.stream = source

    @classmethod
    def from_path(cls, path: str) -> 'ByteCursor':
        """Read a whole file into memory and return a cursor over it."""
        with open(path, 'rb') as f:
            data = f.read()
        return cls(data)

    # -------------------------------------------------------------------------
    # POSITION
    # -------------------------------------------------------------------------

    def tell(self) -> int:
        return self.stream.tell()

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        if whence == os.SEEK_SET and offset < 0:
            raise UnexpectedEndOfData(offset, 0, 0, f"Cannot seek to negative offset {offset}")
        return self.stream.seek(offset, whence)

    @property
    def size(self) -> int:
        """Total size of the underlying stream in bytes."""
        position = self.stream.tell()
        end = self.stream.seek(0, os.SEEK_END)
        self.stream.seek(position)
        return end

    @property
    def remaining(self) -> int:
        """Bytes left between the current position and the end of the stream."""
        return max(0, self.size - self.tell())

    # -------------------------------------------------------------------------
    # RAW ACCESS
    # -------------------------------------------------------------------------

    def read_exact(self, count: int) -> bytes:
        """
        Read exactly ``count`` bytes.

        Raises:
            UnexpectedEndOfData: if fewer than ``count`` bytes are left.
                The cursor is left where the short read stopped.
        """
        offset = self.tell()
        data = self.stream.read(count)
        if len(data) != count:
            raise UnexpectedEndOfData(offset, count, len(data))
        return data

    def write(self, data: bytes) -> int:
        """
        Write all of ``data`` at the current position.

        Raises:
            UnexpectedEndOfData: if the sink is closed or accepts fewer bytes.
        """
        offset = self.tell() if not self.stream.closed else 0
        try:
            written = self.stream.write(data)
        except (ValueError, OSError) as e:
            raise UnexpectedEndOfData(offset, len(data), 0, f"Write rejected at offset {offset}: {e}") from e
        if written is not None and written != len(data):
            raise UnexpectedEndOfData(offset, len(data), written)
        return len(data)

    # -------------------------------------------------------------------------
    # STRUCT HELPERS
    # -------------------------------------------------------------------------

    def unpack(self, fmt: str) -> Tuple:
        """Read and unpack a little-endian struct format."""
        _check_format(fmt)
        return struct.unpack(fmt, self.read_exact(struct.calcsize(fmt)))

    def pack(self, fmt: str, *values) -> int:
        """Pack values with a little-endian struct format and write them."""
        _check_format(fmt)
        return self.write(struct.pack(fmt, *values))

    def read_u8(self) -> int:
        return self.read_exact(1)[0]

    def getvalue(self) -> bytes:
        """Return the full contents of an in-memory stream."""
        getvalue = getattr(self.stream, 'getvalue', None)
        if getvalue is not None:
            return getvalue()
        position = self.tell()
        self.stream.seek(0)
        data = self.stream.read()
        self.stream.seek(position)
        return data

    def __repr__(self):
        return f"<ByteCursor(pos={self.tell()}, size={self.size})>"


def _check_format(fmt: str):
    # Genie files are little-endian and unpadded throughout.
    if not fmt.startswith('<'):
        raise ValueError(f"struct format must be little-endian ('<'): {fmt!r}")
