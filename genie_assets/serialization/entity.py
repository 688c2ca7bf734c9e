# ==============================================================================
# VERSIONED ENTITY
# ==============================================================================
# Base class of every asset record (terrain border, sprite frame, texture
# format tag, ...).
#
# An entity owns a reference to the active ByteCursor only while a
# serialization pass is running over it; otherwise ``cursor`` is None.
# It exposes a single polymorphic operation, layout(ser), invoked once per
# pass. The default layout walks the FIELDS table.
#
# Usage:
#   border = TerrainBorder.read(cursor, GameVersion.AOK)
#   border.name = "Beach"
#   data = border.to_bytes()
# ==============================================================================

from abc import ABC
from typing import Any, ClassVar, Collection, Dict, List, Optional

from genie_assets.core.cursor import ByteCursor
from genie_assets.core.errors import UnsupportedVersion
from genie_assets.serialization.engine import Field, Mode, Serializer, run_pass
from genie_assets.serialization.versions import GameVersion


class VersionedEntity(ABC):
    """
    Abstract asset record with a version-aware field layout.

    Class attributes:
        FIELDS:             Ordered field table used by the default layout
        SUPPORTED_VERSIONS: Versions this entity can lay out (None = all)
        DEFAULT_VERSION:    Version used when none is given

    Attributes:
        version: GameVersion this instance is laid out for
        cursor:  Bound ByteCursor during a pass, None otherwise
    """

    FIELDS: ClassVar[List[Field]] = []
    SUPPORTED_VERSIONS: ClassVar[Optional[Collection[GameVersion]]] = None
    DEFAULT_VERSION: ClassVar[GameVersion] = GameVersion.AOK

    def __init__(self, version: Optional[GameVersion] = None, **values):
        self.version = GameVersion.parse(version) if version is not None else self.DEFAULT_VERSION
        self.cursor: Optional[ByteCursor] = None
        for f in self.FIELDS:
            setattr(self, f.name, f.make_default(self))
        field_names = {f.name for f in self.FIELDS}
        for name, value in values.items():
            if name not in field_names:
                raise TypeError(f"{type(self).__name__} has no field '{name}'")
            setattr(self, name, value)

    # -------------------------------------------------------------------------
    # LAYOUT
    # -------------------------------------------------------------------------

    def layout(self, ser: Serializer):
        """
        Issue the ordered field operations for this pass.

        Subclasses with a FIELDS table get this for free; others override it.
        """
        if not self.FIELDS:
            raise NotImplementedError(f"{type(self).__name__} defines no layout")
        ser.apply(self, self.FIELDS)

    def check_version(self):
        """Raise UnsupportedVersion if this entity has no layout for its version."""
        if not isinstance(self.version, GameVersion):
            raise UnsupportedVersion(self.version, type(self).__name__)
        if self.SUPPORTED_VERSIONS is not None and self.version not in self.SUPPORTED_VERSIONS:
            raise UnsupportedVersion(self.version, type(self).__name__)

    # -------------------------------------------------------------------------
    # CONVENIENCE
    # -------------------------------------------------------------------------

    @classmethod
    def read(cls, cursor: ByteCursor, version: Optional[GameVersion] = None):
        """Create an entity and fill it from ``cursor``."""
        return run_pass(cls(version=version), cursor, Mode.READ)

    @classmethod
    def from_bytes(cls, data: bytes, version: Optional[GameVersion] = None):
        return cls.read(ByteCursor(data), version)

    def write(self, cursor: ByteCursor):
        """Emit this entity at the cursor's current position."""
        return run_pass(self, cursor, Mode.WRITE)

    def to_bytes(self) -> bytes:
        cursor = ByteCursor()
        self.write(cursor)
        return cursor.getvalue()

    def as_dict(self) -> Dict[str, Any]:
        """Field values by name, nested entities expanded (all versions' fields)."""
        result = {}
        for f in self.FIELDS:
            value = getattr(self, f.name)
            if f.is_entity:
                value = [item.as_dict() for item in value]
            result[f.name] = value
        return result

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.version == other.version and self.as_dict() == other.as_dict()

    __hash__ = None

    def __repr__(self):
        return f"<{type(self).__name__}(version={self.version.name})>"
