# ==============================================================================
# RSF TOOL - PATH UTILITIES
# ==============================================================================
# Centralized path handling for per-user data.
#
# User data (config) is stored in:
#   - Windows: %APPDATA%/RSFTool/
#   - Linux:   $XDG_CONFIG_HOME/RSFTool/ (~/.config/RSFTool/)
#   - macOS:   ~/Library/Application Support/RSFTool/
#
# Usage:
#   from rsftool.core.paths import Paths
#   config_path = Paths.get_config_path()
# ==============================================================================

import os
import sys
from typing import Optional


class Paths:
    """Centralized path management for RSF Tool."""

    # Application name for folder creation
    APP_NAME = "RSFTool"

    # Cache for computed paths
    _user_data_dir: Optional[str] = None

    @classmethod
    def get_user_data_dir(cls) -> str:
        """
        Get the per-user data directory (not created here).

        Returns:
            Absolute path to user data directory
        """
        if cls._user_data_dir is None:
            if sys.platform == 'win32':
                base = os.environ.get('APPDATA', os.path.expanduser('~'))
                cls._user_data_dir = os.path.join(base, cls.APP_NAME)
            elif sys.platform == 'darwin':
                cls._user_data_dir = os.path.join(
                    os.path.expanduser('~'),
                    'Library', 'Application Support', cls.APP_NAME
                )
            else:
                base = os.environ.get('XDG_CONFIG_HOME',
                                      os.path.join(os.path.expanduser('~'), '.config'))
                cls._user_data_dir = os.path.join(base, cls.APP_NAME)

        return cls._user_data_dir

    @classmethod
    def get_config_path(cls) -> str:
        """
        Get the path to the configuration file.

        Returns:
            Absolute path to config.json
        """
        return os.path.join(cls.get_user_data_dir(), 'config.json')
