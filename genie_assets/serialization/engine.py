# ==============================================================================
# SERIALIZATION ENGINE
# ==============================================================================
# One engine for both directions.
#
# An entity describes its wire shape exactly once, in its layout callback:
# an ordered sequence of field() / array() / string() / bytes() / sub()
# calls. The same callback runs for reading and for writing, so the field
# order cannot drift between the two directions. There is no framing on the
# wire (no names, no length prefixes): the order of the calls IS the format.
#
# Most entities never write the callback by hand. They declare FIELDS, a
# table of Field entries, optionally gated by game version, and the default
# layout walks that table:
#
#   class FrameData(VersionedEntity):
#       FIELDS = [
#           Field('frame_count', 'h'),
#           Field('angle_count', 'h'),
#           Field('shape_id', 'h'),
#       ]
#
# Entities that need more (seeking to a sub table, decoding a payload)
# override layout() and call ser.apply(self, self.FIELDS) for the header.
#
# Errors (UnexpectedEndOfData, UnsupportedVersion, SerializationError) are
# never caught here. They propagate to whoever called run_pass().
# ==============================================================================

import copy
import struct
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Sequence, Union

from genie_assets.core.cursor import ByteCursor
from genie_assets.core.errors import SerializationError
from genie_assets.serialization.versions import GameVersion


class Mode(Enum):
    """Direction of a serialization pass."""
    READ = "read"
    WRITE = "write"


# Pseudo formats understood by Field besides single struct codes
STRING = "str"
RAW = "raw"

_FLOAT_CODES = ('f', 'd', 'e')


# ==============================================================================
# FIELD TABLE ENTRY
# ==============================================================================

@dataclass(frozen=True)
class Field:
    """
    One entry of a table-driven layout.

    Attributes:
        name:    Attribute name on the entity
        fmt:     struct code ('B', 'h', 'I', 'f', ...), STRING, RAW, or a
                 VersionedEntity subclass for nested records
        count:   None for a scalar, otherwise the element count (or byte
                 length for STRING/RAW). May be a callable taking the entity.
        since:   First version that has the field (inclusive)
        until:   First version that no longer has it (exclusive)
        default: Initial value; copied per instance
    """
    name: str
    fmt: Union[str, type]
    count: Union[int, Callable[[Any], int], None] = None
    since: Optional[GameVersion] = None
    until: Optional[GameVersion] = None
    default: Any = None

    @property
    def is_entity(self) -> bool:
        return isinstance(self.fmt, type)

    def applies(self, version: GameVersion) -> bool:
        if self.since is not None and version < self.since:
            return False
        if self.until is not None and version >= self.until:
            return False
        return True

    def resolve_count(self, entity) -> Optional[int]:
        if callable(self.count):
            return self.count(entity)
        return self.count

    def make_default(self, entity):
        if self.default is not None:
            return copy.deepcopy(self.default)
        count = self.resolve_count(entity)
        if self.is_entity:
            return [self.fmt(version=entity.version) for _ in range(count or 0)]
        if self.fmt == STRING:
            return ""
        if self.fmt == RAW:
            return b""
        zero = 0.0 if self.fmt in _FLOAT_CODES else 0
        if count is None:
            return zero
        return [zero] * count


# ==============================================================================
# SERIALIZER
# ==============================================================================

class Serializer:
    """
    The primitives handed to a layout callback for one pass.

    Each primitive copies one value between the cursor and an attribute of
    the entity, in the direction given by ``mode``.

    Attributes:
        cursor:  ByteCursor being read or written
        mode:    Mode.READ or Mode.WRITE
        version: GameVersion of the entity being laid out
    """

    def __init__(self, cursor: ByteCursor, mode: Mode, version: GameVersion):
        self.cursor = cursor
        self.mode = mode
        self.version = version

    @property
    def is_reading(self) -> bool:
        return self.mode is Mode.READ

    # -------------------------------------------------------------------------
    # DRIVING ENTITIES
    # -------------------------------------------------------------------------

    def run(self, entity):
        """
        Lay out one entity through this pass.

        The cursor is bound to the entity only while its layout runs.
        """
        entity.check_version()
        outer_version = self.version
        previous_cursor = entity.cursor
        self.version = entity.version
        entity.cursor = self.cursor
        try:
            entity.layout(self)
        finally:
            entity.cursor = previous_cursor
            self.version = outer_version
        return entity

    def apply(self, entity, fields: Sequence[Field]):
        """Walk a field table, skipping entries gated out by version."""
        for f in fields:
            if not f.applies(self.version):
                continue
            count = f.resolve_count(entity)
            if f.is_entity:
                self.sub(entity, f.name, f.fmt, count)
            elif f.fmt == STRING:
                self.string(entity, f.name, count)
            elif f.fmt == RAW:
                self.bytes(entity, f.name, count)
            elif count is None:
                self.field(entity, f.name, f.fmt)
            else:
                self.array(entity, f.name, f.fmt, count)

    def seek(self, offset: int):
        """Explicit absolute seek, issued by an entity (never implicit)."""
        self.cursor.seek(offset)

    # -------------------------------------------------------------------------
    # PRIMITIVES
    # -------------------------------------------------------------------------

    def field(self, entity, name: str, fmt: str):
        """Copy a single scalar of struct type ``fmt``."""
        if self.is_reading:
            setattr(entity, name, self.cursor.unpack('<' + fmt)[0])
        else:
            self._pack(name, '<' + fmt, getattr(entity, name))

    def array(self, entity, name: str, fmt: str, count: int):
        """Copy a fixed-length list of scalars."""
        if self.is_reading:
            setattr(entity, name, list(self.cursor.unpack(f'<{count}{fmt}')))
            return
        values = list(getattr(entity, name))
        _check_length(entity, name, values, count)
        self._pack(name, f'<{count}{fmt}', *values)

    def sub(self, entity, name: str, cls: type, count: int):
        """Copy a fixed-length list of nested entities, same version as the parent."""
        if self.is_reading:
            items = []
            for _ in range(count):
                items.append(self.run(cls(version=self.version)))
            setattr(entity, name, items)
            return
        items = list(getattr(entity, name))
        _check_length(entity, name, items, count)
        for item in items:
            item.version = self.version
            self.run(item)

    def string(self, entity, name: str, length: int):
        """Copy a fixed-width, NUL padded latin-1 string."""
        if self.is_reading:
            raw = self.cursor.read_exact(length)
            setattr(entity, name, raw.split(b'\x00', 1)[0].decode('latin-1'))
            return
        encoded = getattr(entity, name).encode('latin-1')
        if len(encoded) > length:
            raise SerializationError(
                f"{type(entity).__name__}.{name}: {len(encoded)} bytes do not fit in {length}"
            )
        self.cursor.write(encoded.ljust(length, b'\x00'))

    def _pack(self, name: str, fmt: str, *values):
        try:
            data = struct.pack(fmt, *values)
        except struct.error as e:
            raise SerializationError(f"Cannot encode field '{name}' as {fmt!r}: {e}") from e
        self.cursor.write(data)

    def bytes(self, entity, name: str, length: int):
        """Copy a raw span of ``length`` bytes."""
        if self.is_reading:
            setattr(entity, name, self.cursor.read_exact(length))
            return
        data = getattr(entity, name)
        if len(data) != length:
            raise SerializationError(
                f"{type(entity).__name__}.{name}: expected {length} bytes, got {len(data)}"
            )
        self.cursor.write(data)


def _check_length(entity, name, values, count):
    if len(values) != count:
        raise SerializationError(
            f"{type(entity).__name__}.{name}: expected {count} entries, got {len(values)}"
        )


# ==============================================================================
# ENTRY POINT
# ==============================================================================

def run_pass(entity, cursor: ByteCursor, mode: Union[Mode, str] = Mode.READ):
    """
    Run one read or write pass of ``entity`` over ``cursor``.

    Args:
        entity: VersionedEntity to fill (read) or emit (write)
        cursor: ByteCursor positioned at the entity's first byte
        mode:   Mode.READ / Mode.WRITE (or "read" / "write")

    Returns:
        The entity

    Raises:
        UnexpectedEndOfData: cursor exhausted or sink rejected a write
        UnsupportedVersion:  entity has no layout for its version
        SerializationError:  a value does not fit its declared field
    """
    serializer = Serializer(cursor, Mode(mode), entity.version)
    return serializer.run(entity)
