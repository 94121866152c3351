# ==============================================================================
# EXTRACTORS MODULE INIT
# ==============================================================================
# Archive readers and writers:
#   - BaseExtractor: Abstract base class defining the reader interface
#   - ExtractorRegistry: Registry for managing available extractors
#   - RSFExtractor / RSFArchive: RSF reading and extraction
#   - RSFEditor: RSF building from a directory tree
#
# Usage:
#   from rsftool.extractors import get_extractor
#   extractor = get_extractor("GAME.RSF")
#   if extractor:
#       extractor.extract_all("output/")
#       extractor.close()
# ==============================================================================

# Import base classes first (required by other extractors)
from .base_extractor import BaseExtractor, ExtractorRegistry, FileEntry

# Import specific extractors (each one registers itself)
from .rsf_extractor import RSFArchive, RSFExtractor
from .rsf_editor import RSFEditor, build_archive, create_rsf_from_directory

__all__ = [
    'BaseExtractor',
    'ExtractorRegistry',
    'FileEntry',
    'RSFArchive',
    'RSFExtractor',
    'RSFEditor',
    'build_archive',
    'create_rsf_from_directory',
]


# ==============================================================================
# CONVENIENCE FUNCTION
# ==============================================================================
def get_extractor(archive_path: str) -> BaseExtractor:
    """
    Get an open extractor for the given archive.

    Returns:
        An initialized extractor, or None if no suitable extractor found
    """
    return ExtractorRegistry.get_extractor_for_file(archive_path)
