# ==============================================================================
# RSF TOOL - SOURCE PACKAGE
# ==============================================================================
# Reader and builder for RSF game-asset archives.
#
# Subpackages:
#   - core: Errors, configuration, user paths
#   - parsers: Binary layout, palette, bitmap and text codecs
#   - extractors: Archive extraction (decode) and building (encode)
#
# Entry points:
#   - main.py: launcher
#   - rsftool/cli.py: Command-line interface
# ==============================================================================

__version__ = "1.0.0"
__description__ = "RSF game-asset archive extractor and builder"

# Convenience imports
from .core import RSFError, get_config
from .extractors import RSFArchive, RSFEditor, RSFExtractor, ExtractorRegistry, get_extractor

__all__ = [
    '__version__',
    '__description__',

    # Core
    'RSFError',
    'get_config',

    # Extractors
    'RSFArchive',
    'RSFEditor',
    'RSFExtractor',
    'ExtractorRegistry',
    'get_extractor',
]
