import io
import struct

import pytest
from PIL import Image

from rsftool.core.errors import TruncatedInputError
from rsftool.parsers.bmp_codec import (
    PIXEL_DATA_OFFSET, decode_bitmap, encode_bitmap, pad_rows, row_padding,
)
from rsftool.parsers.pal_parser import Palette

from rsf_samples import bitmap_payload, palette_bytes


@pytest.fixture
def palette():
    return Palette.from_bytes(palette_bytes(), "TRUERGB.PAL")


@pytest.mark.parametrize("width,padding", [(1, 3), (4, 0), (5, 3), (6, 2), (7, 1), (8, 0)])
def test_row_padding(width, padding):
    assert row_padding(width) == padding


def test_pad_rows_unaligned_width():
    pixels = bytes(range(1, 16))
    padded = pad_rows(pixels, 5, 3)

    assert len(padded) == 24
    for row in range(3):
        line = padded[row * 8:(row + 1) * 8]
        assert line[:5] == pixels[row * 5:(row + 1) * 5]
        assert line[5:8] == b"\x00\x00\x00"


def test_pad_rows_aligned_width_unchanged():
    pixels = bytes(range(16))
    assert pad_rows(pixels, 8, 2) == pixels


def test_pad_rows_short_input_zero_filled():
    assert pad_rows(b"\x01\x02\x03", 4, 2) == b"\x01\x02\x03" + bytes(5)


def test_decoded_bitmap_headers(palette):
    bmp = decode_bitmap(bitmap_payload(5, 3), palette)

    assert PIXEL_DATA_OFFSET == 0x436
    assert bmp[:2] == b"BM"
    assert struct.unpack_from('<I', bmp, 2)[0] == len(bmp)
    assert struct.unpack_from('<I', bmp, 10)[0] == 0x436
    assert struct.unpack_from('<IiiHH', bmp, 14) == (40, 5, 3, 1, 8)
    assert len(bmp) == 0x436 + 24
    assert bmp[54:58] == b"\x00\x40\xfc\x00"


def test_decoded_bitmap_opens_as_image(palette):
    bmp = decode_bitmap(bitmap_payload(5, 3), palette)
    img = Image.open(io.BytesIO(bmp))

    assert img.size == (5, 3)
    assert img.mode == 'P'
    # Rows are stored bottom-up
    assert img.getpixel((0, 2)) == 1
    assert img.getpixel((0, 0)) == (10 * 7 + 1) % 256
    assert img.getpalette()[:3] == [0xFC, 0x40, 0x00]


def test_decode_truncated_prefix(palette):
    with pytest.raises(TruncatedInputError):
        decode_bitmap(b"\x05\x00", palette)


def test_aligned_bitmap_round_trip(palette):
    payload = bitmap_payload(8, 2)
    assert encode_bitmap(decode_bitmap(payload, palette)) == payload


@pytest.mark.xfail(strict=True, reason="row padding is kept when re-encoding")
def test_unaligned_bitmap_round_trip(palette):
    payload = bitmap_payload(5, 3)
    assert encode_bitmap(decode_bitmap(payload, palette)) == payload


def test_encode_keeps_row_padding(palette):
    encoded = encode_bitmap(decode_bitmap(bitmap_payload(5, 3), palette))
    assert struct.unpack_from('<HH', encoded, 0) == (5, 3)
    assert len(encoded) == 4 + 24


def test_encode_rejects_top_down_bitmap(palette):
    bmp = bytearray(decode_bitmap(bitmap_payload(4, 2), palette))
    struct.pack_into('<i', bmp, 22, -2)
    with pytest.raises(ValueError):
        encode_bitmap(bytes(bmp))


def test_encode_truncated_header():
    with pytest.raises(TruncatedInputError):
        encode_bitmap(b"BM\x00\x00")
