# ==============================================================================
# RSF EXTRACTOR MODULE
# ==============================================================================
# Reader for RSF game-asset archives.
#
# RSF Format Overview:
#   - Header: 0xB4 bytes, first byte 0x41 (0x6C = old-style, unsupported)
#   - Directory table: named runs of file-table entries ("BMP", "PAL", ...)
#   - File table: name, type tag, size and offset of every payload
#   - Payload data: raw blobs, indexed bitmaps (0x200), obfuscated text (0x1000)
#
# Bitmaps are written out as BMP files using the archive's TRUERGB.PAL
# palette; text is written as plain newline-delimited text; everything else
# is copied unchanged.
#
# Usage:
#   with RSFExtractor("GAME.RSF") as rsf:
#       files = rsf.list_files()
#       rsf.extract_all("output/")
# ==============================================================================

import os
from typing import Iterator, List, Optional, Tuple

from ..core.errors import TruncatedInputError, UnsafeEntryNameError
from ..parsers.bmp_codec import decode_bitmap
from ..parsers.pal_parser import DEFAULT_PALETTE_NAME, Palette, find_palette
from ..parsers.rsf_layout import (
    RSFDirectory, RSFFileEntry,
    TYPE_BITMAP, TYPE_RAW, TYPE_TEXT,
    DIRECTORY_ENTRY_SIZE,
    decode_directory_table, decode_file_table, decode_header, detect_format,
)
from ..parsers.txt_codec import decode_text
from .base_extractor import BaseExtractor, ExtractorRegistry, FileEntry
from .manifest import build_manifest, write_manifest


# ==============================================================================
# RSF ARCHIVE
# ==============================================================================
class RSFArchive:
    """
    Decoded tables of an RSF archive held in memory.

    The palette is loaded the first time a bitmap is decoded and kept for
    the lifetime of this object.

    Attributes:
        data (bytes):        Whole archive buffer
        header (RSFHeader):  Decoded header
        directories (list):  Directory table
        files (list):        File table
        palette_name (str):  Palette used for bitmaps
    """

    def __init__(self, data: bytes, palette_name: str = DEFAULT_PALETTE_NAME):
        self.data = data
        self.palette_name = palette_name
        self._palette: Optional[Palette] = None

        header_size = detect_format(data)
        self.header = decode_header(data)
        self.directories = decode_directory_table(
            data, self.header.directory_count, header_size)
        self.files = decode_file_table(
            data, self.header.file_count,
            header_size + self.header.directory_count * DIRECTORY_ENTRY_SIZE)

        for directory in self.directories:
            if directory.end > len(self.files):
                raise TruncatedInputError(
                    f"file table entries of directory {directory.tag}",
                    directory.end, len(self.files))

        for first, second in self.overlapping_directories():
            print(f"[WARN] Directories {first.tag} and {second.tag} share file-table entries")

    @classmethod
    def from_file(cls, path: str, palette_name: str = DEFAULT_PALETTE_NAME) -> 'RSFArchive':
        """Read a whole archive file and decode its tables."""
        with open(path, 'rb') as f:
            data = f.read()
        return cls(data, palette_name)

    # --------------------------------------------------------------------------
    # TABLE ACCESS
    # --------------------------------------------------------------------------

    def iter_entries(self) -> Iterator[Tuple[RSFDirectory, RSFFileEntry]]:
        """Yield (directory, file entry) pairs in directory order."""
        for directory in self.directories:
            for entry in self.files[directory.start:directory.end]:
                yield directory, entry

    def directory_ranges(self) -> List[range]:
        """File-table index range of every directory, in table order."""
        return [range(d.start, d.end) for d in self.directories]

    def overlapping_directories(self) -> List[Tuple[RSFDirectory, RSFDirectory]]:
        """
        Pairs of directories whose file-table ranges intersect.

        Overlap is reported by the constructor, not rejected.
        """
        ordered = sorted((d for d in self.directories if d.count),
                         key=lambda d: d.start)
        pairs = []
        for i, first in enumerate(ordered):
            for second in ordered[i + 1:]:
                if second.start >= first.end:
                    break
                pairs.append((first, second))
        return pairs

    def payload(self, entry: RSFFileEntry) -> bytes:
        """
        Slice the stored payload of an entry.

        Raises:
            TruncatedInputError: the entry runs past the end of the archive
        """
        end = entry.start + entry.size
        if end > len(self.data):
            raise TruncatedInputError(f"payload of {entry.name}", end, len(self.data))
        return self.data[entry.start:end]

    @property
    def palette(self) -> Palette:
        """The bitmap palette, resolved on first use."""
        if self._palette is None:
            self._palette = find_palette(self.directories, self.files,
                                         self.data, self.palette_name)
        return self._palette

    # --------------------------------------------------------------------------
    # DECODING
    # --------------------------------------------------------------------------

    def decode_entry(self, entry: RSFFileEntry) -> bytes:
        """
        Decode an entry's payload according to its type tag.

        Unknown type tags are reported and passed through unchanged.
        """
        data = self.payload(entry)

        if entry.type_tag == TYPE_BITMAP:
            return decode_bitmap(data, self.palette)
        if entry.type_tag == TYPE_TEXT:
            return decode_text(data)
        if entry.type_tag != TYPE_RAW:
            print(f"[WARN] Unexpected format: {entry.type_tag:x} ({entry.name}), writing raw data")
        return data


# ==============================================================================
# RSF EXTRACTOR CLASS
# ==============================================================================
class RSFExtractor(BaseExtractor):
    """
    Extractor for RSF archives.

    Files are listed as "<directory tag>/<file name>", which is also their
    path below the extraction directory.

    Attributes:
        archive (RSFArchive): Decoded archive while open
        palette_name (str):   Palette used for bitmap entries
        write_manifest (bool): Write _rsf_manifest.json on extract_all()
    """

    def __init__(self, archive_path: str = None,
                 palette_name: str = DEFAULT_PALETTE_NAME,
                 write_manifest: bool = True):
        self.archive: Optional[RSFArchive] = None
        self.palette_name = palette_name
        self.write_manifest = write_manifest
        self._entries = {}

        super().__init__(archive_path)

    # ==========================================================================
    # ABSTRACT PROPERTY IMPLEMENTATIONS
    # ==========================================================================

    @property
    def format_name(self) -> str:
        return "RSF archive"

    @property
    def supported_extensions(self) -> List[str]:
        return ['.rsf']

    @property
    def extractor_id(self) -> str:
        return "rsf"

    # ==========================================================================
    # ABSTRACT METHOD IMPLEMENTATIONS
    # ==========================================================================

    def detect(self, path: str) -> bool:
        """Check the extension and that the file exists."""
        ext = os.path.splitext(path)[1].lower()
        return ext in self.supported_extensions and os.path.isfile(path)

    def open(self, archive_path: str) -> bool:
        """
        Open an RSF archive and decode its tables.

        Raises:
            RSFError: the archive is not a supported RSF file
        """
        if self._is_open:
            self.close()

        self.archive_path = archive_path
        self.archive = RSFArchive.from_file(archive_path, self.palette_name)

        print(f"[INFO] {archive_path} opened")
        print("[INFO] Valid RSF format found")
        header = self.archive.header
        print(f"[INFO] {header.license}")
        print(f"[INFO] {header.name} {header.version} {header.timestamp}")
        print(f"[INFO] Filesize: {header.file_size}, "
              f"Directories: {header.directory_count}, Files: {header.file_count}")

        self._file_list = []
        self._entries = {}
        for directory, entry in self.archive.iter_entries():
            path = f"{safe_component(directory.tag)}/{safe_component(entry.name)}"
            if path.lower() in self._entries:
                print(f"[WARN] Duplicate entry {path}, keeping the first one")
                continue
            self._entries[path.lower()] = entry
            self._file_list.append(FileEntry(
                path=path,
                size=entry.size,
                offset=entry.start,
                type_tag=entry.type_tag,
            ))

        self._is_open = True
        return True

    def close(self):
        """Release the archive buffer."""
        self.archive = None
        self._is_open = False
        self._file_list = []
        self._entries = {}

    def list_files(self) -> List[FileEntry]:
        """Get list of all files in the archive."""
        if not self._is_open:
            return []
        return self._file_list.copy()

    def get_file_data(self, file_path: str) -> Optional[bytes]:
        """
        Get the decoded contents of a file.

        Args:
            file_path: "<directory tag>/<file name>" (case-insensitive)

        Returns:
            Decoded bytes, or None if the path is not in the archive
        """
        if not self._is_open:
            return None

        entry = self._entries.get(file_path.replace('\\', '/').lower())
        if entry is None:
            return None
        return self.archive.decode_entry(entry)

    # ==========================================================================
    # EXTRACTION
    # ==========================================================================

    def extract_all(self, output_dir: str = None, progress_callback=None,
                    file_filter=None) -> int:
        """
        Extract every file below output_dir.

        Without output_dir, files go to a directory named after the archive
        (first 8 characters of the header name) in the working directory.
        """
        if not self._is_open:
            raise RuntimeError("Archive is not open")

        if not output_dir:
            output_dir = default_output_dir(self.archive.header.name)

        print(f"[INFO] Extracting to: {output_dir}")
        for directory in self.archive.directories:
            print(f"[INFO]   {directory.tag}/ ({directory.count} files)")

        count = super().extract_all(output_dir, progress_callback, file_filter)

        if self.write_manifest:
            write_manifest(output_dir, build_manifest(self.archive))

        return count


def safe_component(name: str) -> str:
    """
    Check that a table name can be used as a single path component.

    Raises:
        UnsafeEntryNameError: empty, '.', or containing '/', '\\', '..' or NUL
    """
    if (not name or name == '.' or '..' in name
            or any(c in name for c in '/\\\x00')):
        raise UnsafeEntryNameError(name)
    return name


def default_output_dir(archive_name: str) -> str:
    """Extraction directory used when none is given."""
    # Header names are only NUL-trimmed; drop any 'x' fill here
    folder = archive_name[:8].split('\x00')[0].rstrip('x')
    return os.path.join('.', folder or 'RSF')


# ==============================================================================
# REGISTER EXTRACTOR
# ==============================================================================
ExtractorRegistry.register(RSFExtractor)
