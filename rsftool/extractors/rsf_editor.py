# ==============================================================================
# RSF EDITOR MODULE
# ==============================================================================
# Builds RSF archives from a directory tree. This complements rsf_extractor,
# which only reads.
#
# Source tree layout (the same layout extraction produces):
#   SOURCE/
#     _rsf_manifest.json   (optional, written by the extractor)
#     BMP/ TITLE.BMP ...
#     PAL/ TRUERGB.PAL ...
#     TXT/ HELP.TXT ...
#
# Each subdirectory becomes one directory-table entry. Files are encoded by
# extension:
#   .BMP -> bitmap payload (type 0x200)
#   .TXT -> obfuscated text payload (type 0x1000)
#   else -> raw (type 0)
#
# Archive positions matter to the game, so directories and files are taken
# in a fixed order: the manifest's order when there is one, otherwise the
# caller's sort key (modification time by default).
#
# Usage:
#   editor = RSFEditor()
#   editor.create("GAME.RSF")
#   editor.load_tree("extracted/GAME")
#   editor.save()
#   editor.close()
# ==============================================================================

import os
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..parsers.bmp_codec import encode_bitmap
from ..parsers.rsf_layout import (
    RSFDirectory, RSFFileEntry, RSFHeader,
    PAD_CHAR, TYPE_BITMAP, TYPE_RAW, TYPE_TEXT,
    detect_format, encode_tables, pad_field, table_size,
    LICENSE_WIDTH,
)
from ..parsers.txt_codec import encode_text
from .manifest import MANIFEST_NAME, header_from_manifest, load_manifest


# ==============================================================================
# CONSTANTS
# ==============================================================================

# License text for archives built without a manifest. It must start with
# the current-format byte (0x41).
DEFAULT_LICENSE = "All rights reserved."
DEFAULT_VERSION = "1.0"

MAX_UINT16 = 0xFFFF
MAX_UINT32 = 0xFFFFFFFF


# ==============================================================================
# DATA CLASSES
# ==============================================================================

@dataclass
class SourceFile:
    """
    A file to be packed.

    Attributes:
        name (str):       Archive entry name (max 12 characters)
        data (bytes):     File contents as found on disk
        text_tag (int):   Format tag for .TXT entries
    """
    name: str
    data: bytes
    text_tag: int = 0


@dataclass
class SourceDirectory:
    """A directory-table entry to be packed, with its files in order."""
    name: str
    files: List[SourceFile] = field(default_factory=list)


# ==============================================================================
# ORDERING HELPERS
# ==============================================================================

def mtime_key(path: str) -> Tuple[float, str]:
    """Default sort key: modification time, then name."""
    return (os.stat(path).st_mtime, os.path.basename(path))


def list_sorted(directory: str, key: Callable[[str], Any] = mtime_key,
                dirs: bool = False) -> List[str]:
    """
    List the files (or subdirectories) of a directory ordered by key.

    Args:
        directory: Directory to list
        key: Called with the full path of each entry
        dirs: List subdirectories instead of files

    Returns:
        Entry names in order
    """
    names = []
    for name in os.listdir(directory):
        full_path = os.path.join(directory, name)
        if os.path.isdir(full_path) == dirs and name != MANIFEST_NAME:
            names.append(name)
    return sorted(names, key=lambda n: key(os.path.join(directory, n)))


def _ordered(names: List[str], preferred: List[str]) -> List[str]:
    """Names in manifest order first, then the remaining names as given."""
    by_upper = {n.upper(): n for n in names}
    ordered = [by_upper.pop(p.upper()) for p in preferred if p.upper() in by_upper]
    return ordered + [n for n in names if n.upper() in by_upper]


# ==============================================================================
# PAYLOAD ENCODING
# ==============================================================================

def encode_entry(source: SourceFile) -> Tuple[int, bytes]:
    """
    Encode one file by extension.

    Returns:
        (type tag, payload)
    """
    ext = os.path.splitext(source.name)[1].upper()
    if ext == '.BMP':
        return TYPE_BITMAP, encode_bitmap(source.data)
    if ext == '.TXT':
        return TYPE_TEXT, encode_text(source.data, source.text_tag)
    return TYPE_RAW, source.data


def default_header(name: str) -> RSFHeader:
    """Header for an archive built without a manifest."""
    return RSFHeader(
        license=DEFAULT_LICENSE,
        name=name.upper()[:12],
        version=DEFAULT_VERSION,
        timestamp=time.strftime("%a %b %d %H:%M:%S %Y"),
    )


def build_archive(directories: List[SourceDirectory],
                  header: Optional[RSFHeader] = None,
                  pad_char: bytes = PAD_CHAR) -> bytes:
    """
    Build a complete RSF archive.

    Payloads are laid out after the tables in directory order. Each file
    entry records its absolute start offset, size and end offset.

    Args:
        directories: Directories with their files, in archive order
        header: Header template; counts and size are overwritten
        pad_char: Pad character for table names

    Returns:
        Archive bytes

    Raises:
        RSFError: the header's license does not carry the current-format byte
        ValueError: a name or count does not fit its field
    """
    header = header or default_header("")

    # Same detection the reader applies
    detect_format(pad_field(header.license, LICENSE_WIDTH, b'\x00'))

    file_count = sum(len(d.files) for d in directories)
    if len(directories) > MAX_UINT16 or file_count > MAX_UINT16:
        raise ValueError(f"Too many entries: {len(directories)} directories, {file_count} files")

    prefix_size = table_size(len(directories), file_count)
    payload = bytearray()
    dir_table: List[RSFDirectory] = []
    file_table: List[RSFFileEntry] = []

    for directory in directories:
        dir_table.append(RSFDirectory(
            name=directory.name,
            count=len(directory.files),
            start=len(file_table),
        ))
        for source in directory.files:
            type_tag, data = encode_entry(source)
            start = prefix_size + len(payload)
            file_table.append(RSFFileEntry(
                name=source.name,
                type_tag=type_tag,
                size=len(data),
                start=start,
                end=start + len(data),
            ))
            payload.extend(data)

    total = prefix_size + len(payload)
    if total > MAX_UINT32:
        raise ValueError(f"Archive would be {total} bytes, the format allows {MAX_UINT32}")

    header.file_size = total
    header.directory_count = len(dir_table)
    header.file_count = len(file_table)

    return encode_tables(header, dir_table, file_table, pad_char) + bytes(payload)


# ==============================================================================
# RSF EDITOR CLASS
# ==============================================================================

class RSFEditor:
    """
    Collects directories and files in memory, then writes an RSF archive.

    Example:
        editor = RSFEditor()
        editor.create("GAME.RSF")
        editor.add_directory("extracted/GAME/BMP")
        editor.save()
        editor.close()
    """

    def __init__(self, sort_key: Callable[[str], Any] = mtime_key,
                 pad_char: bytes = PAD_CHAR):
        self.rsf_path: Optional[str] = None
        self.header: Optional[RSFHeader] = None
        self.directories: List[SourceDirectory] = []
        self.sort_key = sort_key
        self.pad_char = pad_char
        self.modified = False

    def create(self, rsf_path: str) -> bool:
        """Start a new, empty archive that will be saved to rsf_path."""
        self.rsf_path = rsf_path
        self.header = None
        self.directories = []
        self.modified = True
        return True

    def add_file(self, directory_name: str, name: str, data: bytes,
                 text_tag: int = 0) -> SourceFile:
        """Append a file to a directory, creating the directory if needed."""
        directory = self._get_directory(directory_name)
        source = SourceFile(name=name, data=data, text_tag=text_tag)
        directory.files.append(source)
        self.modified = True
        return source

    def add_directory(self, local_dir: str, name: Optional[str] = None,
                      order: Optional[List[Dict[str, Any]]] = None) -> int:
        """
        Add every file of a local directory as one archive directory.

        Args:
            local_dir: Directory on disk
            name: Directory tag (defaults to the folder name, upper-cased)
            order: Manifest file records giving the entry order

        Returns:
            Number of files added
        """
        if not os.path.isdir(local_dir):
            raise FileNotFoundError(f"Directory not found: {local_dir}")

        name = name or os.path.basename(os.path.normpath(local_dir)).upper()
        print(f"[INFO] Reading directory: {name}")

        text_tags = {}
        names = list_sorted(local_dir, self.sort_key)
        if order:
            text_tags = {r["name"].upper(): r.get("text_tag", 0) for r in order}
            names = _ordered(names, [r["name"] for r in order])

        self._get_directory(name)
        for filename in names:
            print(f"[INFO] \t{filename}")
            with open(os.path.join(local_dir, filename), 'rb') as f:
                data = f.read()
            self.add_file(name, filename, data, text_tags.get(filename.upper(), 0))

        return len(names)

    def load_tree(self, source_dir: str) -> int:
        """
        Add every subdirectory of source_dir, honouring its manifest.

        Returns:
            Number of files added
        """
        if not os.path.isdir(source_dir):
            raise FileNotFoundError(f"Directory not found: {source_dir}")

        manifest = load_manifest(source_dir)
        folders = list_sorted(source_dir, self.sort_key, dirs=True)
        records = {}

        if manifest:
            self.header = header_from_manifest(manifest)
            for record in manifest.get("directories", []):
                records[record["folder"].upper()] = record
            folders = _ordered(folders, [r["folder"] for r in manifest.get("directories", [])])
        else:
            self.header = default_header(os.path.basename(os.path.normpath(source_dir)))

        count = 0
        for folder in folders:
            record = records.get(folder.upper(), {})
            count += self.add_directory(
                os.path.join(source_dir, folder),
                name=record.get("name"),
                order=record.get("files"),
            )
        return count

    def build(self) -> bytes:
        """Encode the collected directories into archive bytes."""
        header = self.header
        if header is None:
            base = os.path.splitext(os.path.basename(self.rsf_path or ""))[0]
            header = default_header(base)
        return build_archive(self.directories, header, self.pad_char)

    def save(self, output_path: Optional[str] = None) -> bool:
        """
        Write the archive to disk.

        Args:
            output_path: Optional different path to save to

        Returns:
            True once written
        """
        if output_path:
            self.rsf_path = output_path
        if not self.rsf_path:
            raise ValueError("No output path specified")

        data = self.build()

        print(f"[INFO] Writing to file: {self.rsf_path}")
        with open(self.rsf_path, 'wb') as f:
            f.write(data)

        self.modified = False
        print(f"[SUCCESS] RSF saved: {self.rsf_path} ({len(data)} bytes)")
        return True

    def close(self):
        """Forget the collected files, warning about unsaved changes."""
        if self.modified:
            print("[WARN] Closing RSF editor with unsaved changes!")
        self.rsf_path = None
        self.header = None
        self.directories = []
        self.modified = False

    def _get_directory(self, name: str) -> SourceDirectory:
        for directory in self.directories:
            if directory.name == name:
                return directory
        directory = SourceDirectory(name=name)
        self.directories.append(directory)
        return directory


# ==============================================================================
# CONVENIENCE FUNCTIONS
# ==============================================================================

def create_rsf_from_directory(directory: str, output_path: Optional[str] = None,
                              sort_key: Callable[[str], Any] = mtime_key,
                              pad_char: bytes = PAD_CHAR) -> str:
    """
    Build an RSF archive from a directory tree.

    Args:
        directory: Source tree (one subdirectory per archive directory)
        output_path: Archive to write (default: "<directory>.RSF")
        sort_key: Ordering for entries when no manifest is present

    Returns:
        Path of the written archive
    """
    output_path = output_path or os.path.normpath(directory) + ".RSF"

    editor = RSFEditor(sort_key=sort_key, pad_char=pad_char)
    editor.create(output_path)
    count = editor.load_tree(directory)
    if count == 0:
        print("[WARN] No files added to RSF")
    editor.save()
    editor.close()
    return output_path
