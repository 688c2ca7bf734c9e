# ==============================================================================
# GENIE ASSETS - SOURCE PACKAGE
# ==============================================================================
# Readers (and header writers) for Genie engine asset files.
#
# Subpackages:
#   - core:          byte cursor, configuration, errors
#   - serialization: versioned bidirectional serialization engine
#   - parsers:       SMP sprites, terrain borders, palettes, DDS textures
#
# Entry points:
#   - main.py:             launcher
#   - genie_assets/cli.py: command-line interface
# ==============================================================================

__version__ = "1.0.0"
__description__ = "Genie engine asset reader"

from .core import ByteCursor, GenieAssetError, Config, get_config
from .serialization import GameVersion, Mode, VersionedEntity, run_pass

__all__ = [
    '__version__',
    '__description__',

    'ByteCursor',
    'GenieAssetError',
    'Config',
    'get_config',

    'GameVersion',
    'Mode',
    'VersionedEntity',
    'run_pass',
]
