# ==============================================================================
# GENIE ASSETS - CONFIGURATION MODULE
# ==============================================================================
# Centralized configuration management.
#
# This module handles:
#   - Loading/saving configuration from a JSON file
#   - Default values for all settings
#   - Validation of the configured game version
#
# Configuration is stored in: data/config.json
#
# Usage:
#   from genie_assets.core.config import Config
#   config = Config()
#   config.load()
#   print(config.game_version)
#   config.fail_fast = True
#   config.save()
# ==============================================================================

import os
import json
from typing import Optional, Dict, Any

from genie_assets.serialization.versions import GameVersion


# ==============================================================================
# DEFAULT CONFIGURATION VALUES
# ==============================================================================
# These are used when no config file exists or when values are missing.

DEFAULT_CONFIG = {
    # -------------------------------------------------------------------------
    # DECODING
    # -------------------------------------------------------------------------
    # Game version entities are laid out for (GameVersion name)
    "game_version": "DE2",

    # Re-raise the first broken frame instead of skipping it
    "fail_fast": False,

    # Reject frames whose header declares more pixels than this per side
    "max_frame_dimension": 8192,

    # -------------------------------------------------------------------------
    # OUTPUT
    # -------------------------------------------------------------------------
    # Default folder for PNG exports
    "export_path": "export",

    # -------------------------------------------------------------------------
    # ADVANCED
    # -------------------------------------------------------------------------
    # Print [DEBUG] lines
    "debug_mode": False,
}


# ==============================================================================
# CONFIGURATION CLASS
# ==============================================================================
class Config:
    """
    Configuration manager.

    Settings are stored in a JSON file and can be accessed as properties
    on this object.

    Attributes:
        config_path: Path to the configuration file
        data: Dictionary containing all settings
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Args:
            config_path: Path to config file. If None, uses data/config.json
                         under the project root.
        """
        if config_path:
            self.config_path = config_path
        else:
            project_root = os.path.dirname(
                os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
            )
            self.config_path = os.path.join(project_root, 'data', 'config.json')

        self.data: Dict[str, Any] = DEFAULT_CONFIG.copy()
        self._modified = False

    # -------------------------------------------------------------------------
    # LOADING AND SAVING
    # -------------------------------------------------------------------------

    def load(self) -> bool:
        """
        Load configuration from file.

        If the file doesn't exist, defaults are used. Unknown keys are
        ignored, missing keys keep their defaults.

        Returns:
            True if file was loaded, False if using defaults
        """
        if not os.path.isfile(self.config_path):
            print(f"[INFO] Config file not found, using defaults")
            return False

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = json.load(f)
        except json.JSONDecodeError as e:
            print(f"[ERROR] Invalid config file: {e}")
            return False
        except OSError as e:
            print(f"[ERROR] Failed to load config: {e}")
            return False

        for key, value in loaded.items():
            if key in self.data:
                self.data[key] = value

        print(f"[INFO] Loaded config from {self.config_path}")
        self._modified = False
        return True

    def save(self) -> bool:
        """
        Save configuration to file, creating its directory if needed.

        Returns:
            True if saved successfully
        """
        try:
            os.makedirs(os.path.dirname(os.path.abspath(self.config_path)), exist_ok=True)
            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(self.data, f, indent=4, sort_keys=True)
        except OSError as e:
            print(f"[ERROR] Failed to save config: {e}")
            return False

        print(f"[INFO] Saved config to {self.config_path}")
        self._modified = False
        return True

    def reset_to_defaults(self):
        """Reset all settings to their default values."""
        self.data = DEFAULT_CONFIG.copy()
        self._modified = True

    @property
    def modified(self) -> bool:
        return self._modified

    # -------------------------------------------------------------------------
    # PROPERTY ACCESS
    # -------------------------------------------------------------------------

    @property
    def game_version(self) -> GameVersion:
        """Configured game version (raises UnsupportedVersion if the file holds garbage)."""
        return GameVersion.parse(self.data.get('game_version', 'DE2'))

    @game_version.setter
    def game_version(self, value):
        self.data['game_version'] = GameVersion.parse(value).name
        self._modified = True

    @property
    def fail_fast(self) -> bool:
        return bool(self.data.get('fail_fast', False))

    @fail_fast.setter
    def fail_fast(self, value: bool):
        self.data['fail_fast'] = bool(value)
        self._modified = True

    @property
    def max_frame_dimension(self) -> int:
        """Per-side frame size limit, clamped to 1..65535."""
        return max(1, min(65535, int(self.data.get('max_frame_dimension', 8192))))

    @max_frame_dimension.setter
    def max_frame_dimension(self, value: int):
        self.data['max_frame_dimension'] = max(1, min(65535, int(value)))
        self._modified = True

    @property
    def export_path(self) -> str:
        return self.data.get('export_path', 'export')

    @export_path.setter
    def export_path(self, value: str):
        self.data['export_path'] = value
        self._modified = True

    @property
    def debug_mode(self) -> bool:
        """Check if debug mode is enabled."""
        return self.data.get('debug_mode', False)

    @debug_mode.setter
    def debug_mode(self, value: bool):
        self.data['debug_mode'] = bool(value)
        self._modified = True

    # -------------------------------------------------------------------------
    # GENERIC ACCESS
    # -------------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def set(self, key: str, value: Any):
        self.data[key] = value
        self._modified = True

    def __getitem__(self, key: str) -> Any:
        """Allow dictionary-style access: config['key']"""
        return self.data[key]

    def __setitem__(self, key: str, value: Any):
        """Allow dictionary-style setting: config['key'] = value"""
        self.data[key] = value
        self._modified = True


# ==============================================================================
# GLOBAL CONFIG INSTANCE
# ==============================================================================

_global_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance.

    Creates and loads config on first call.
    """
    global _global_config

    if _global_config is None:
        _global_config = Config()
        _global_config.load()

    return _global_config
