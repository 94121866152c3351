# ==============================================================================
# RSF TEXT CODEC
# ==============================================================================
# Converts between RSF text payloads (type tag 0x1000) and plain text.
#
# TEXT PAYLOAD FORMAT:
# --------------------
#   Header (8 bytes):
#     - Format tag:   uint16 (differs per text file, see below)
#     - Line count:   uint16 (L)
#     - Reserved:     uint16
#     - Entry count:  uint16 (E, length of the data region in bytes)
#   Line descriptors (L * 6 bytes):
#     - Size:         uint16 (line length including its terminator)
#     - Start:        uint32 (offset of the line within the data region)
#   Data region (E bytes):
#     Lines with '\n' replaced by 0x00, then obfuscated.
#
# OBFUSCATION:
# ------------
# Byte i of each line (counting from the line start) is XORed with i & 0xFF.
# The transform is its own inverse, so the same function encodes and decodes.
#
# Format tags seen in shipped archives:
#   HELP 0x0E, NPC 0x24-0x27, GAMETEXT 0x29, SUPERID 0x2D, REGO 0x35,
#   CREDITS 0x3C, RACEDESC/STORY 0x3D, ID 0x4C, LOGFLAGS 0x55,
#   LOCKHINT 0x58, DICTION 0x62, MASTER 0x7E, SPELLTXT 0x01AF,
#   NPCCLUE 0x030F
# ==============================================================================

import struct
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from ..core.errors import TruncatedInputError


# ==============================================================================
# CONSTANTS
# ==============================================================================

TEXT_HEADER_FORMAT = '<HHHH'
LINE_DESCRIPTOR_FORMAT = '<HI'

TEXT_HEADER_SIZE = struct.calcsize(TEXT_HEADER_FORMAT)          # 8
LINE_DESCRIPTOR_SIZE = struct.calcsize(LINE_DESCRIPTOR_FORMAT)  # 6

LINE_TERMINATOR = b'\n'
STORED_TERMINATOR = b'\x00'

MAX_UINT16 = 0xFFFF


# ==============================================================================
# DATA CLASSES
# ==============================================================================

@dataclass
class TextHeader:
    """Fixed header at the start of a text payload."""
    format_tag: int = 0
    line_count: int = 0
    reserved: int = 0
    entry_count: int = 0


# (size, start) of one line in the data region
LineDescriptor = Tuple[int, int]


# ==============================================================================
# OBFUSCATION
# ==============================================================================

def xor_lines(data: bytes, descriptors: List[LineDescriptor]) -> bytes:
    """
    XOR every byte of every described line with its position in the line.

    Applying this twice with the same descriptors gives back the input.

    Raises:
        TruncatedInputError: a descriptor reaches past the end of data
    """
    buf = np.frombuffer(data, dtype=np.uint8).copy()
    for size, start in descriptors:
        if start + size > len(buf):
            raise TruncatedInputError("text line", start + size, len(buf))
        buf[start:start + size] ^= (np.arange(size) & 0xFF).astype(np.uint8)
    return buf.tobytes()


# ==============================================================================
# DECODE
# ==============================================================================

def read_text_header(payload: bytes) -> TextHeader:
    """Decode the 8-byte text header."""
    if len(payload) < TEXT_HEADER_SIZE:
        raise TruncatedInputError("text header", TEXT_HEADER_SIZE, len(payload))
    return TextHeader(*struct.unpack_from(TEXT_HEADER_FORMAT, payload, 0))


def read_line_descriptors(payload: bytes, line_count: int) -> List[LineDescriptor]:
    """Decode the descriptor table that follows the text header."""
    needed = TEXT_HEADER_SIZE + line_count * LINE_DESCRIPTOR_SIZE
    if len(payload) < needed:
        raise TruncatedInputError("text line table", needed, len(payload))
    return [
        struct.unpack_from(LINE_DESCRIPTOR_FORMAT, payload,
                           TEXT_HEADER_SIZE + i * LINE_DESCRIPTOR_SIZE)
        for i in range(line_count)
    ]


def decode_text(payload: bytes) -> bytes:
    """
    Convert a text payload into plain newline-delimited text.

    Returns:
        The text as bytes (the game uses a single-byte code page)
    """
    header = read_text_header(payload)
    descriptors = read_line_descriptors(payload, header.line_count)

    base = TEXT_HEADER_SIZE + header.line_count * LINE_DESCRIPTOR_SIZE
    data = payload[base:base + header.entry_count]
    if len(data) < header.entry_count:
        raise TruncatedInputError("text data", header.entry_count, len(data))

    plain = xor_lines(bytes(data), descriptors)
    return plain.replace(STORED_TERMINATOR, LINE_TERMINATOR)


# ==============================================================================
# ENCODE
# ==============================================================================

def split_lines(text: bytes) -> List[LineDescriptor]:
    """
    Build (size, start) descriptors for text.

    Every line keeps its terminator. Text after the last '\n' gets a
    descriptor of its own.
    """
    descriptors = []
    start = 0
    while True:
        end = text.find(LINE_TERMINATOR, start)
        if end < 0:
            break
        descriptors.append((end + 1 - start, start))
        start = end + 1
    if start < len(text):
        descriptors.append((len(text) - start, start))
    return descriptors


def encode_text(text: bytes, format_tag: int = 0) -> bytes:
    """
    Convert plain text into an obfuscated text payload.

    Args:
        text: Newline-delimited text
        format_tag: Value for the header's format tag field

    Raises:
        ValueError: text or one of its lines is too long for the format
    """
    descriptors = split_lines(text)

    if len(text) > MAX_UINT16:
        raise ValueError(f"Text is {len(text)} bytes, the format allows {MAX_UINT16}")
    if len(descriptors) > MAX_UINT16:
        raise ValueError(f"Text has {len(descriptors)} lines, the format allows {MAX_UINT16}")

    data = text.replace(LINE_TERMINATOR, STORED_TERMINATOR)

    out = bytearray(struct.pack(TEXT_HEADER_FORMAT, format_tag,
                                len(descriptors), 0, len(data)))
    for size, start in descriptors:
        out.extend(struct.pack(LINE_DESCRIPTOR_FORMAT, size, start))
    out.extend(xor_lines(data, descriptors))
    return bytes(out)
