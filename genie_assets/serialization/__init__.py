# ==============================================================================
# SERIALIZATION PACKAGE
# ==============================================================================
# Versioned, bidirectional binary serialization shared by every asset type.
#
#   - GameVersion:     ordered engine releases
#   - run_pass / Mode: one read or write pass over an entity
#   - Field:           table-driven layout entry
#   - VersionedEntity: base class of all asset records
# ==============================================================================

from .versions import GameVersion
from .engine import Field, Mode, Serializer, run_pass, STRING, RAW
from .entity import VersionedEntity

__all__ = [
    'GameVersion',
    'Field',
    'Mode',
    'Serializer',
    'run_pass',
    'STRING',
    'RAW',
    'VersionedEntity',
]
