# ==============================================================================
# RSF BINARY LAYOUT MODULE
# ==============================================================================
# Fixed-size structures of the RSF archive container.
#
# RSF FILE FORMAT:
# ----------------
#   [Header           - 0xB4 bytes]
#   [Directory table  - DirectoryCount * 8 bytes]
#   [File table       - FileCount * 26 bytes]
#   [Payload data     - concatenated entry payloads]
#
# All integers are little-endian.
#
# Header (0xB4 bytes):
#   - License:        100 bytes (text, NUL padded)
#   - Name:           12 bytes
#   - Version:        8 bytes
#   - Timestamp:      42 bytes
#   - File size:      uint32
#   - Directory count: uint16
#   - File count:     uint16
#   - 5 x uint16:     unidentified, preserved as-is
#
# Directory entry (8 bytes):
#   - Name tag:       4 bytes (first 3 significant, e.g. "BMP", "PAL")
#   - Entry count:    uint16
#   - Start index:    uint16 (index into the file table)
#
# File entry (26 bytes):
#   - Name:           12 bytes (padded with NUL then 'x')
#   - Type tag:       uint16 (0 = raw, 0x200 = bitmap, 0x1000 = text)
#   - Size:           uint32
#   - Start offset:   uint32 (absolute offset in the archive)
#   - End offset:     uint32 (start + size, not authoritative)
#
# FORMAT DETECTION:
# -----------------
# The first byte of the archive (first byte of the license text) tells
# the variants apart: 0x41 is the current format, 0x6C is the old-style
# format which is rejected.
# ==============================================================================

import struct
from dataclasses import dataclass, field
from typing import List, Tuple

from ..core.errors import (
    TruncatedInputError,
    UnrecognizedFormatError,
    UnsupportedLegacyFormatError,
)


# ==============================================================================
# CONSTANTS
# ==============================================================================

# Format-detection byte values
RSF_MAGIC_CURRENT = 0x41
RSF_MAGIC_LEGACY = 0x6C

# Struct layouts
HEADER_FORMAT = '<100s12s8s42sIHH5H'
DIRECTORY_FORMAT = '<4sHH'
FILE_FORMAT = '<12sHIII'

HEADER_SIZE = struct.calcsize(HEADER_FORMAT)        # 0xB4
DIRECTORY_ENTRY_SIZE = struct.calcsize(DIRECTORY_FORMAT)  # 8
FILE_ENTRY_SIZE = struct.calcsize(FILE_FORMAT)      # 26

# Fixed string widths
LICENSE_WIDTH = 100
NAME_WIDTH = 12
VERSION_WIDTH = 8
TIMESTAMP_WIDTH = 42
TAG_WIDTH = 4

# File entry type tags
TYPE_RAW = 0x0000
TYPE_BITMAP = 0x0200
TYPE_TEXT = 0x1000

# Pad character used by the game's archive tooling
PAD_CHAR = b'x'

# Values seen in the unidentified header fields of shipped archives
DEFAULT_UNIDENTIFIED = (0x0008, 0x001A, 0x0006, 0x1A64, 0xA26B)


# ==============================================================================
# DATA CLASSES
# ==============================================================================

@dataclass
class RSFHeader:
    """
    The archive header.

    Attributes:
        license (str):          License/copyright text
        name (str):             Archive name
        version (str):          Version string
        timestamp (str):        Build timestamp text
        file_size (int):        Total archive size in bytes
        directory_count (int):  Entries in the directory table
        file_count (int):       Entries in the file table
        unidentified (tuple):   Five unknown uint16 values, kept verbatim
    """
    license: str = ""
    name: str = ""
    version: str = ""
    timestamp: str = ""
    file_size: int = 0
    directory_count: int = 0
    file_count: int = 0
    unidentified: Tuple[int, ...] = DEFAULT_UNIDENTIFIED


@dataclass
class RSFDirectory:
    """
    A directory-table entry: a named run of file-table entries.

    Attributes:
        name (str):   Name tag (up to 4 characters, e.g. "BMP")
        count (int):  Number of file-table entries in this directory
        start (int):  Index of the first entry in the file table
    """
    name: str
    count: int = 0
    start: int = 0

    @property
    def tag(self) -> str:
        """The significant part of the name tag (first 3 characters)."""
        return self.name[:3]

    @property
    def end(self) -> int:
        """One past the last file-table index of this directory."""
        return self.start + self.count


@dataclass
class RSFFileEntry:
    """
    A file-table entry.

    Attributes:
        name (str):       File name (max 12 characters)
        type_tag (int):   TYPE_RAW, TYPE_BITMAP, TYPE_TEXT or an unknown value
        size (int):       Payload size in bytes
        start (int):      Absolute byte offset of the payload in the archive
        end (int):        Offset one past the payload (start + size)
    """
    name: str
    type_tag: int = TYPE_RAW
    size: int = 0
    start: int = 0
    end: int = field(default=0)

    def __post_init__(self):
        # End offset is derivable; fill it when not given
        if self.end == 0 and self.size:
            self.end = self.start + self.size


# ==============================================================================
# STRING HELPERS
# ==============================================================================

def trim_field(raw: bytes, pad_char: bytes = PAD_CHAR) -> str:
    """Strip trailing NUL and pad characters from a fixed-width field."""
    return raw.rstrip(b'\x00' + pad_char).decode('latin-1')


def pad_field(text: str, width: int, pad_char: bytes = PAD_CHAR) -> bytes:
    """
    Encode text into a fixed-width field.

    A short value is terminated with one NUL byte and the remainder is
    filled with pad_char.

    Raises:
        ValueError: text does not fit in the field
    """
    data = text.encode('latin-1')
    if len(data) > width:
        raise ValueError(f"'{text}' is longer than {width} bytes")
    if len(data) == width:
        return data
    return data + b'\x00' + pad_char * (width - len(data) - 1)


def _require(data: bytes, offset: int, size: int, what: str):
    available = max(0, len(data) - offset)
    if available < size:
        raise TruncatedInputError(what, size, available)


# ==============================================================================
# FORMAT DETECTION
# ==============================================================================

def detect_format(data: bytes) -> int:
    """
    Check the format-detection byte and return the header size.

    Raises:
        TruncatedInputError:          data is empty
        UnsupportedLegacyFormatError: old-style archive (0x6C)
        UnrecognizedFormatError:      anything else that isn't 0x41
    """
    _require(data, 0, 1, "format byte")
    magic = data[0]
    if magic == RSF_MAGIC_CURRENT:
        return HEADER_SIZE
    if magic == RSF_MAGIC_LEGACY:
        raise UnsupportedLegacyFormatError(magic)
    raise UnrecognizedFormatError(magic)


# ==============================================================================
# HEADER
# ==============================================================================

def decode_header(data: bytes, offset: int = 0) -> RSFHeader:
    """Decode the 0xB4-byte archive header; text fields are NUL filled."""
    _require(data, offset, HEADER_SIZE, "header")
    fields = struct.unpack_from(HEADER_FORMAT, data, offset)
    return RSFHeader(
        license=trim_field(fields[0], b'\x00'),
        name=trim_field(fields[1], b'\x00'),
        version=trim_field(fields[2], b'\x00'),
        timestamp=trim_field(fields[3], b'\x00'),
        file_size=fields[4],
        directory_count=fields[5],
        file_count=fields[6],
        unidentified=tuple(fields[7:12]),
    )


def encode_header(header: RSFHeader) -> bytes:
    """Encode an RSFHeader; text fields are NUL filled."""
    if len(header.unidentified) != 5:
        raise ValueError("Header needs exactly 5 unidentified values")
    return struct.pack(
        HEADER_FORMAT,
        pad_field(header.license, LICENSE_WIDTH, b'\x00'),
        pad_field(header.name, NAME_WIDTH, b'\x00'),
        pad_field(header.version, VERSION_WIDTH, b'\x00'),
        pad_field(header.timestamp, TIMESTAMP_WIDTH, b'\x00'),
        header.file_size,
        header.directory_count,
        header.file_count,
        *header.unidentified
    )


# ==============================================================================
# DIRECTORY TABLE
# ==============================================================================

def decode_directory_entry(data: bytes, offset: int = 0) -> RSFDirectory:
    """Decode one 8-byte directory-table entry."""
    _require(data, offset, DIRECTORY_ENTRY_SIZE, "directory entry")
    name, count, start = struct.unpack_from(DIRECTORY_FORMAT, data, offset)
    return RSFDirectory(name=trim_field(name), count=count, start=start)


def encode_directory_entry(entry: RSFDirectory, pad_char: bytes = PAD_CHAR) -> bytes:
    """Encode one directory-table entry."""
    return struct.pack(
        DIRECTORY_FORMAT,
        pad_field(entry.name, TAG_WIDTH, pad_char),
        entry.count,
        entry.start,
    )


def decode_directory_table(data: bytes, count: int, offset: int) -> List[RSFDirectory]:
    """Decode `count` consecutive directory entries starting at offset."""
    _require(data, offset, count * DIRECTORY_ENTRY_SIZE, "directory table")
    return [
        decode_directory_entry(data, offset + i * DIRECTORY_ENTRY_SIZE)
        for i in range(count)
    ]


# ==============================================================================
# FILE TABLE
# ==============================================================================

def decode_file_entry(data: bytes, offset: int = 0) -> RSFFileEntry:
    """Decode one 26-byte file-table entry."""
    _require(data, offset, FILE_ENTRY_SIZE, "file entry")
    name, type_tag, size, start, end = struct.unpack_from(FILE_FORMAT, data, offset)
    return RSFFileEntry(name=trim_field(name), type_tag=type_tag,
                        size=size, start=start, end=end)


def encode_file_entry(entry: RSFFileEntry, pad_char: bytes = PAD_CHAR) -> bytes:
    """Encode one file-table entry."""
    return struct.pack(
        FILE_FORMAT,
        pad_field(entry.name, NAME_WIDTH, pad_char),
        entry.type_tag,
        entry.size,
        entry.start,
        entry.end,
    )


def decode_file_table(data: bytes, count: int, offset: int) -> List[RSFFileEntry]:
    """Decode `count` consecutive file entries starting at offset."""
    _require(data, offset, count * FILE_ENTRY_SIZE, "file table")
    return [
        decode_file_entry(data, offset + i * FILE_ENTRY_SIZE)
        for i in range(count)
    ]


# ==============================================================================
# WHOLE TABLE PREFIX
# ==============================================================================

def table_size(directory_count: int, file_count: int) -> int:
    """Size of header + directory table + file table."""
    return (HEADER_SIZE
            + directory_count * DIRECTORY_ENTRY_SIZE
            + file_count * FILE_ENTRY_SIZE)


def encode_tables(header: RSFHeader, directories: List[RSFDirectory],
                  files: List[RSFFileEntry], pad_char: bytes = PAD_CHAR) -> bytes:
    """Serialize header, directory table and file table as one prefix."""
    out = bytearray(encode_header(header))
    for directory in directories:
        out.extend(encode_directory_entry(directory, pad_char))
    for entry in files:
        out.extend(encode_file_entry(entry, pad_char))
    return bytes(out)
