# ==============================================================================
# RSF BITMAP CODEC
# ==============================================================================
# Converts between RSF bitmap payloads (type tag 0x200) and Windows BMP files.
#
# RSF BITMAP PAYLOAD:
# -------------------
#   - Width:   uint16
#   - Height:  uint16
#   - Pixels:  width * height palette indices, one byte each, no row padding
#
# BMP OUTPUT:
# -----------
#   - BITMAPFILEHEADER  14 bytes  ("BM", file size, pixel data offset)
#   - BITMAPINFOHEADER  40 bytes  (width, height, 1 plane, 8 bpp)
#   - Colour table      1024 bytes (see pal_parser.Palette.to_bmp_table)
#   - Pixel data        rows padded to a multiple of 4 bytes
#
# Row order is copied as stored; the game keeps its bitmaps bottom-up like
# BMP does.
#
# ENCODING:
# ---------
# encode_bitmap() strips the BMP headers and colour table and prefixes the
# pixel buffer with width/height. Row padding added on decode is NOT removed,
# so bitmaps whose width is not a multiple of 4 do not survive a round trip.
# ==============================================================================

import struct

import numpy as np

from ..core.errors import TruncatedInputError
from .pal_parser import Palette


# ==============================================================================
# CONSTANTS
# ==============================================================================

BMP_SIGNATURE = b'BM'

FILE_HEADER_FORMAT = '<2sIHHI'
INFO_HEADER_FORMAT = '<IiiHHIIiiII'

FILE_HEADER_SIZE = struct.calcsize(FILE_HEADER_FORMAT)   # 14
INFO_HEADER_SIZE = struct.calcsize(INFO_HEADER_FORMAT)   # 40

COLOR_TABLE_SIZE = 256 * 4
PIXEL_DATA_OFFSET = FILE_HEADER_SIZE + INFO_HEADER_SIZE + COLOR_TABLE_SIZE  # 0x436

# Payload dimension prefix
DIMENSION_FORMAT = '<HH'
DIMENSION_SIZE = struct.calcsize(DIMENSION_FORMAT)

# Row alignment required by BMP
ROW_ALIGNMENT = 4


# ==============================================================================
# ROW PADDING
# ==============================================================================

def row_padding(width: int) -> int:
    """Number of zero bytes appended to each row of the given width."""
    return (ROW_ALIGNMENT - width % ROW_ALIGNMENT) % ROW_ALIGNMENT


def pad_rows(pixels: bytes, width: int, height: int) -> bytes:
    """
    Pad every row of an indexed pixel buffer to a 4-byte boundary.

    The output buffer is allocated at its final size (height * stride) and
    the rows are copied into it. A short input is zero-filled; bytes past
    width * height are ignored.
    """
    count = width * height
    source = np.zeros(count, dtype=np.uint8)
    available = np.frombuffer(pixels, dtype=np.uint8)[:count]
    source[:len(available)] = available

    stride = width + row_padding(width)
    padded = np.zeros((height, stride), dtype=np.uint8)
    padded[:, :width] = source.reshape(height, width)
    return padded.tobytes()


# ==============================================================================
# DECODE / ENCODE
# ==============================================================================

def read_dimensions(payload: bytes):
    """Return (width, height) from a bitmap payload prefix."""
    if len(payload) < DIMENSION_SIZE:
        raise TruncatedInputError("bitmap dimensions", DIMENSION_SIZE, len(payload))
    return struct.unpack_from(DIMENSION_FORMAT, payload, 0)


def decode_bitmap(payload: bytes, palette: Palette) -> bytes:
    """
    Convert an RSF bitmap payload into a complete BMP file.

    Args:
        payload: Raw entry payload (dimension prefix + indices)
        palette: Palette shared by the archive's bitmaps

    Returns:
        BMP file contents
    """
    width, height = read_dimensions(payload)
    pixels = pad_rows(payload[DIMENSION_SIZE:], width, height)

    file_header = struct.pack(
        FILE_HEADER_FORMAT,
        BMP_SIGNATURE,
        PIXEL_DATA_OFFSET + len(pixels),
        0,
        0,
        PIXEL_DATA_OFFSET,
    )
    info_header = struct.pack(
        INFO_HEADER_FORMAT,
        INFO_HEADER_SIZE,
        width,
        height,
        1,              # colour planes
        8,              # bits per pixel
        0,              # BI_RGB
        len(pixels),
        0,
        0,
        256,            # colours used
        0,
    )
    return file_header + info_header + palette.to_bmp_table() + pixels


def encode_bitmap(image: bytes) -> bytes:
    """
    Convert a BMP file back into an RSF bitmap payload.

    The pixel buffer is copied from the BMP pixel data offset to the end of
    the file, row padding included.

    Raises:
        TruncatedInputError: file is too short for its headers
        ValueError: dimensions don't fit the uint16 payload prefix
    """
    needed = FILE_HEADER_SIZE + 12
    if len(image) < needed:
        raise TruncatedInputError("BMP header", needed, len(image))

    data_offset = struct.unpack_from('<I', image, 10)[0]
    width, height = struct.unpack_from('<ii', image, FILE_HEADER_SIZE + 4)

    if not (0 <= width <= 0xFFFF and 0 <= height <= 0xFFFF):
        raise ValueError(f"Bitmap size {width}x{height} does not fit an RSF payload")
    if data_offset > len(image):
        raise TruncatedInputError("BMP pixel data", data_offset, len(image))

    return struct.pack(DIMENSION_FORMAT, width, height) + image[data_offset:]
