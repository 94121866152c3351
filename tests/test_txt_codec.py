import struct

import pytest

from rsftool.core.errors import TruncatedInputError
from rsftool.parsers.txt_codec import (
    decode_text, encode_text, read_text_header, split_lines, xor_lines,
)


# XOR positions 0-255; with a newline the terminator sits at position 256
LINE_256 = bytes(i % 9 + 0x20 for i in range(256))


@pytest.mark.parametrize("text", [
    b"",
    b"single line",
    b"first\nsecond\n\nfourth\n",
    b"no trailing newline\nend",
    bytes(range(1, 10)) * 28 + b"\n",
    LINE_256,
    LINE_256 + b"\n" + LINE_256,
])
def test_text_round_trip(text):
    assert decode_text(encode_text(text)) == text


def test_encoded_layout():
    payload = encode_text(b"ab\nc", format_tag=0x0E)
    header = read_text_header(payload)

    assert (header.format_tag, header.line_count, header.reserved, header.entry_count) == (0x0E, 2, 0, 4)
    assert struct.unpack_from('<HIHI', payload, 8) == (3, 0, 1, 3)
    # "ab\0" -> a^0 b^1 0^2, "c" -> c^0
    assert payload[20:] == b"ac\x02c"


def test_empty_text_payload():
    assert encode_text(b"") == bytes(8)


def test_split_lines():
    assert split_lines(b"one\ntwo\n") == [(4, 0), (4, 4)]
    assert split_lines(b"one\ntwo") == [(4, 0), (3, 4)]
    assert split_lines(b"\n\n") == [(1, 0), (1, 1)]


def test_xor_is_self_inverse():
    data = bytes(range(256)) * 2
    descriptors = [(300, 0), (212, 300)]
    scrambled = xor_lines(data, descriptors)

    assert scrambled != data
    assert xor_lines(scrambled, descriptors) == data


def test_xor_position_wraps_at_256():
    data = bytes(300)
    out = xor_lines(data, [(300, 0)])
    assert out[255] == 0xFF
    assert out[256] == 0x00
    assert out[257] == 0x01


def test_descriptor_past_data_region():
    payload = struct.pack('<HHHH', 0, 1, 0, 2) + struct.pack('<HI', 5, 0) + b"ab"
    with pytest.raises(TruncatedInputError):
        decode_text(payload)


def test_data_region_cut_short():
    payload = struct.pack('<HHHH', 0, 1, 0, 10) + struct.pack('<HI', 10, 0) + b"abc"
    with pytest.raises(TruncatedInputError):
        decode_text(payload)


def test_truncated_header():
    with pytest.raises(TruncatedInputError):
        decode_text(b"\x00\x00\x01")


def test_text_too_long():
    with pytest.raises(ValueError):
        encode_text(b"x" * 0x10000)


def test_terminator_after_256_bytes_is_not_masked():
    payload = encode_text(LINE_256 + b"\n")

    assert read_text_header(payload).entry_count == 257
    assert struct.unpack_from('<HI', payload, 8) == (257, 0)
    # position 256 wraps to key 0, so the stored terminator stays 0x00
    assert payload[14 + 256] == 0x00
    assert payload[14 + 255] == LINE_256[255] ^ 0xFF
