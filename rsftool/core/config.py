# ==============================================================================
# RSF TOOL - CONFIGURATION MODULE
# ==============================================================================
# Centralized configuration management for the application.
#
# This module handles:
#   - Loading/saving configuration from JSON file
#   - Default values for all settings
#
# Configuration is stored in the user data directory (see paths.py):
#   Windows: %APPDATA%/RSFTool/config.json
#   Linux:   ~/.config/RSFTool/config.json
#
# Usage:
#   from rsftool.core.config import get_config
#   config = get_config()
#   print(config.palette_name)
#   config.palette_name = "L23.PAL"
#   config.save()
# ==============================================================================

import os
import json
from typing import Optional, Dict, Any

from .paths import Paths


# ==============================================================================
# DEFAULT CONFIGURATION VALUES
# ==============================================================================
# These are used when no config file exists or when values are missing.

DEFAULT_CONFIG = {
    # -------------------------------------------------------------------------
    # EXTRACTION SETTINGS
    # -------------------------------------------------------------------------
    # Palette entry (in the archive's PAL directory) used for bitmaps
    "palette_name": "TRUERGB.PAL",

    # Default output folder for extractions ("" = named after the archive)
    "default_output_path": "",

    # Write _rsf_manifest.json next to extracted files
    "write_manifest": True,

    # -------------------------------------------------------------------------
    # BUILD SETTINGS
    # -------------------------------------------------------------------------
    # Pad character for names in the directory and file tables
    "pad_char": "x",

    # -------------------------------------------------------------------------
    # ADVANCED
    # -------------------------------------------------------------------------
    # Print tracebacks for failed commands
    "debug_mode": False,
}


# ==============================================================================
# CONFIGURATION CLASS
# ==============================================================================
class Config:
    """
    Configuration manager for RSF Tool.

    Attributes:
        config_path: Path to the configuration file
        data: Dictionary containing all settings

    Example:
        >>> config = Config()
        >>> config.load()
        >>> print(config.palette_name)
        >>> config.pad_char = "x"
        >>> config.save()
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to config file. If None, uses default location.
        """
        self.config_path = config_path or Paths.get_config_path()

        # Initialize with defaults
        self.data: Dict[str, Any] = DEFAULT_CONFIG.copy()

        # Track if config has been modified
        self._modified = False

    # -------------------------------------------------------------------------
    # LOADING AND SAVING
    # -------------------------------------------------------------------------

    def load(self) -> bool:
        """
        Load configuration from file.

        If the file doesn't exist, defaults are used.
        Missing keys are filled with defaults.

        Returns:
            True if file was loaded, False if using defaults
        """
        if not os.path.isfile(self.config_path):
            return False

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = json.load(f)
        except json.JSONDecodeError as e:
            print(f"[ERROR] Invalid config file {self.config_path}: {e}")
            return False

        # Merge with defaults (so new settings get default values)
        for key, value in loaded.items():
            if key in self.data:
                self.data[key] = value

        self._modified = False
        return True

    def save(self) -> bool:
        """
        Save configuration to file.

        Creates the directory if it doesn't exist.

        Returns:
            True if saved successfully
        """
        os.makedirs(os.path.dirname(self.config_path) or '.', exist_ok=True)

        with open(self.config_path, 'w', encoding='utf-8') as f:
            json.dump(self.data, f, indent=4, sort_keys=True)

        print(f"[INFO] Saved config to {self.config_path}")
        self._modified = False
        return True

    # -------------------------------------------------------------------------
    # PROPERTY ACCESS
    # -------------------------------------------------------------------------

    @property
    def palette_name(self) -> str:
        """Get the bitmap palette name."""
        return self.data.get('palette_name', 'TRUERGB.PAL')

    @palette_name.setter
    def palette_name(self, value: str):
        """Set the bitmap palette name."""
        self.data['palette_name'] = value
        self._modified = True

    @property
    def default_output_path(self) -> str:
        """Get the default extraction directory."""
        return self.data.get('default_output_path', '')

    @default_output_path.setter
    def default_output_path(self, value: str):
        """Set the default extraction directory."""
        self.data['default_output_path'] = value
        self._modified = True

    @property
    def write_manifest(self) -> bool:
        """Check if the extraction manifest is written."""
        return self.data.get('write_manifest', True)

    @write_manifest.setter
    def write_manifest(self, value: bool):
        self.data['write_manifest'] = bool(value)
        self._modified = True

    @property
    def pad_char(self) -> bytes:
        """Pad character for table names, as a single byte."""
        return self.data.get('pad_char', 'x').encode('latin-1')

    @pad_char.setter
    def pad_char(self, value: str):
        """Set the pad character."""
        if len(value) != 1:
            raise ValueError("pad_char must be a single character")
        self.data['pad_char'] = value
        self._modified = True

    @property
    def debug_mode(self) -> bool:
        """Check if debug mode is enabled."""
        return self.data.get('debug_mode', False)

    @debug_mode.setter
    def debug_mode(self, value: bool):
        """Set debug mode."""
        self.data['debug_mode'] = bool(value)
        self._modified = True


# ==============================================================================
# GLOBAL CONFIG INSTANCE
# ==============================================================================
# This provides a singleton-like access to configuration

_global_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance.

    Creates and loads config on first call.

    Returns:
        The global Config instance
    """
    global _global_config

    if _global_config is None:
        _global_config = Config()
        _global_config.load()

    return _global_config
