# ==============================================================================
# BASE EXTRACTOR MODULE
# ==============================================================================
# Abstract base class that archive extractors implement, and an
# ExtractorRegistry for finding the right one for a file.
#
# To add support for another container:
#   1. Create a new extractor class that inherits from BaseExtractor
#   2. Implement all abstract methods
#   3. Register the extractor with ExtractorRegistry
#
# Example:
#   class MyFormatExtractor(BaseExtractor):
#       @property
#       def format_name(self): return "My Format"
#       ...
#
#   ExtractorRegistry.register(MyFormatExtractor)
# ==============================================================================

import os
from abc import ABC, abstractmethod
from typing import List, Dict, Optional, Callable
from dataclasses import dataclass


# ==============================================================================
# FILE ENTRY DATA CLASS
# ==============================================================================
@dataclass
class FileEntry:
    """
    A file as listed by an extractor.

    Attributes:
        path (str):      Relative output path ("<directory>/<name>")
        size (int):      Stored payload size
        offset (int):    Byte offset within the archive file
        type_tag (int):  Format-specific payload type
    """
    path: str
    size: int
    offset: int = 0
    type_tag: int = 0


# ==============================================================================
# BASE EXTRACTOR ABSTRACT CLASS
# ==============================================================================
class BaseExtractor(ABC):
    """
    Abstract base class for archive extractors.

    The typical workflow is:
        1. Create extractor instance
        2. Open an archive with open()
        3. List files with list_files()
        4. Extract files with extract_all() or extract_file()
        5. Close with close()

    Or use as a context manager:
        with RSFExtractor("GAME.RSF") as ext:
            ext.extract_all("output/")
    """

    def __init__(self, archive_path: str = None):
        """
        Initialize the extractor.

        Args:
            archive_path: Optional path to archive to open immediately
        """
        self.archive_path = archive_path
        self._is_open = False
        self._file_list: List[FileEntry] = []

        if archive_path:
            self.open(archive_path)

    # ==========================================================================
    # ABSTRACT PROPERTIES - Must be implemented by subclasses
    # ==========================================================================

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Human-readable name of the container format."""
        pass

    @property
    @abstractmethod
    def supported_extensions(self) -> List[str]:
        """File extensions handled, including the dot (e.g. ['.rsf'])."""
        pass

    @property
    @abstractmethod
    def extractor_id(self) -> str:
        """Short unique identifier (e.g. "rsf")."""
        pass

    # ==========================================================================
    # ABSTRACT METHODS - Must be implemented by subclasses
    # ==========================================================================

    @abstractmethod
    def detect(self, path: str) -> bool:
        """
        Check if this extractor can handle the given file.

        Args:
            path: Path to a file to check

        Returns:
            True if this extractor can handle the path, False otherwise
        """
        pass

    @abstractmethod
    def open(self, archive_path: str) -> bool:
        """
        Open an archive for reading.

        This should validate the format, parse the tables and populate
        self._file_list with FileEntry objects.
        """
        pass

    @abstractmethod
    def close(self):
        """Close the archive and release resources."""
        pass

    @abstractmethod
    def list_files(self) -> List[FileEntry]:
        """Get a list of all files in the archive."""
        pass

    @abstractmethod
    def get_file_data(self, file_path: str) -> Optional[bytes]:
        """
        Get the decoded data of a file without writing to disk.

        Args:
            file_path: Path of the file within the archive

        Returns:
            File contents as bytes, or None if file not found
        """
        pass

    # ==========================================================================
    # COMMON METHODS - Can be overridden but have default implementations
    # ==========================================================================

    def extract_file(self, file_path: str, output_path: str) -> bool:
        """
        Extract a single file from the archive.

        Args:
            file_path: Path of the file within the archive
            output_path: Destination path to write the extracted file

        Returns:
            True if extraction successful, False if the file is not listed
        """
        if not self._is_open:
            raise RuntimeError("Archive is not open")

        data = self.get_file_data(file_path)
        if data is None:
            return False

        os.makedirs(os.path.dirname(output_path) or '.', exist_ok=True)
        with open(output_path, 'wb') as f:
            f.write(data)
        return True

    def extract_all(self, output_dir: str,
                    progress_callback: Callable[[int, int, str], None] = None,
                    file_filter: Callable[[FileEntry], bool] = None) -> int:
        """
        Extract all files from the archive.

        Args:
            output_dir: Directory to extract files to
            progress_callback: Optional callback(current, total, filename)
            file_filter: Optional function to filter which files to extract
                        Returns True to include file, False to skip

        Returns:
            Number of files successfully extracted
        """
        if not self._is_open:
            raise RuntimeError("Archive is not open")

        files = self.list_files()

        if file_filter:
            files = [f for f in files if file_filter(f)]

        total = len(files)
        extracted = 0

        for idx, entry in enumerate(files):
            if progress_callback:
                progress_callback(idx + 1, total, entry.path)

            output_path = os.path.join(output_dir, entry.path)
            if self.extract_file(entry.path, output_path):
                extracted += 1

        return extracted

    def find_files(self, pattern: str) -> List[FileEntry]:
        """
        Find files matching a glob pattern.

        Args:
            pattern: Glob pattern (e.g., "*.BMP", "TXT/*")

        Returns:
            List of matching FileEntry objects
        """
        import fnmatch

        pattern_lower = pattern.lower()
        return [
            entry for entry in self.list_files()
            if fnmatch.fnmatch(entry.path.lower(), pattern_lower)
        ]

    def get_file_count(self) -> int:
        """Get the total number of files in the archive."""
        return len(self._file_list)

    # ==========================================================================
    # CONTEXT MANAGER SUPPORT
    # ==========================================================================

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensure archive is closed."""
        self.close()
        return False


# ==============================================================================
# EXTRACTOR REGISTRY
# ==============================================================================
class ExtractorRegistry:
    """
    Registry for managing available extractors.

    Usage:
        # Register an extractor
        ExtractorRegistry.register(RSFExtractor)

        # Find extractor for a file
        extractor = ExtractorRegistry.get_extractor_for_file("GAME.RSF")
    """

    # Class-level storage for registered extractors
    _extractors: Dict[str, type] = {}

    @classmethod
    def register(cls, extractor_class: type):
        """
        Register an extractor class.

        Args:
            extractor_class: Class that inherits from BaseExtractor
        """
        cls._extractors[extractor_class().extractor_id] = extractor_class

    @classmethod
    def get_extractor_for_file(cls, file_path: str) -> Optional[BaseExtractor]:
        """
        Find and instantiate an appropriate extractor for a file.

        The returned extractor has the archive already open. Format errors
        raised while opening propagate to the caller.

        Args:
            file_path: Path to the archive file

        Returns:
            An open extractor instance, or None if no extractor matches
        """
        for extractor_class in cls._extractors.values():
            if extractor_class().detect(file_path):
                return extractor_class(file_path)
        return None
