# ==============================================================================
# CORE MODULE INIT
# ==============================================================================
# Building blocks shared by the codecs and the CLI:
#   - Errors: RSFError and its subclasses
#   - Config: Application configuration management
#   - Paths: Per-user data locations
#
# Usage:
#   from rsftool.core import RSFError, get_config
# ==============================================================================

from .errors import (
    RSFError,
    TruncatedInputError,
    UnrecognizedFormatError,
    UnsupportedLegacyFormatError,
    PaletteNotFoundError,
    UnsafeEntryNameError,
)
from .config import Config, get_config
from .paths import Paths

__all__ = [
    # Errors
    'RSFError',
    'TruncatedInputError',
    'UnrecognizedFormatError',
    'UnsupportedLegacyFormatError',
    'PaletteNotFoundError',
    'UnsafeEntryNameError',

    # Configuration
    'Config',
    'get_config',

    # Paths
    'Paths',
]
