import struct

import pytest

from rsftool.core.errors import (
    TruncatedInputError, UnrecognizedFormatError, UnsupportedLegacyFormatError,
)
from rsftool.parsers.rsf_layout import (
    DIRECTORY_ENTRY_SIZE, FILE_ENTRY_SIZE, HEADER_SIZE,
    RSFDirectory, RSFFileEntry, RSFHeader, TYPE_TEXT,
    decode_directory_entry, decode_directory_table, decode_file_entry,
    decode_header, detect_format, encode_directory_entry, encode_file_entry,
    encode_header, pad_field, trim_field,
)


def test_structure_sizes():
    assert HEADER_SIZE == 0xB4
    assert DIRECTORY_ENTRY_SIZE == 8
    assert FILE_ENTRY_SIZE == 26


def test_header_keeps_unidentified_fields():
    header = RSFHeader(license="All rights reserved.", name="GAME",
                       version="1.02", timestamp="Tue Mar 12 10:00:00 1996",
                       file_size=123456, directory_count=4, file_count=99,
                       unidentified=(0x0008, 0x001A, 0x0006, 0x1A64, 0xA26B))
    raw = encode_header(header)

    assert len(raw) == HEADER_SIZE
    assert raw[0] == 0x41
    assert struct.unpack_from('<IHH', raw, 162) == (123456, 4, 99)
    assert struct.unpack_from('<5H', raw, 170) == (0x0008, 0x001A, 0x0006, 0x1A64, 0xA26B)
    assert decode_header(raw) == header


def test_header_truncated():
    with pytest.raises(TruncatedInputError) as info:
        decode_header(b"A" * (HEADER_SIZE - 1))
    assert info.value.wanted == HEADER_SIZE
    assert info.value.got == HEADER_SIZE - 1


def test_file_entry_name_padding():
    entry = RSFFileEntry(name="HELP.TXT", type_tag=TYPE_TEXT, size=10, start=500)
    raw = encode_file_entry(entry)

    assert len(raw) == FILE_ENTRY_SIZE
    assert raw[:12] == b"HELP.TXT\x00xxx"
    assert struct.unpack_from('<HIII', raw, 12) == (TYPE_TEXT, 10, 500, 510)

    decoded = decode_file_entry(raw)
    assert decoded.name == "HELP.TXT"
    assert decoded.end == 510


def test_file_entry_full_width_name():
    raw = encode_file_entry(RSFFileEntry(name="TRUERGB1.PAL", size=768, start=0))
    assert raw[:12] == b"TRUERGB1.PAL"
    assert decode_file_entry(raw).name == "TRUERGB1.PAL"


def test_file_entry_truncated():
    with pytest.raises(TruncatedInputError):
        decode_file_entry(bytes(FILE_ENTRY_SIZE), offset=1)


def test_directory_entry():
    raw = encode_directory_entry(RSFDirectory(name="PAL", count=3, start=5))
    assert raw == b"PAL\x00" + struct.pack('<HH', 3, 5)

    decoded = decode_directory_entry(raw)
    assert decoded.name == "PAL"
    assert decoded.tag == "PAL"
    assert (decoded.start, decoded.end) == (5, 8)


def test_directory_table_truncated():
    raw = encode_directory_entry(RSFDirectory(name="BMP", count=1, start=0))
    assert len(decode_directory_table(raw, 1, 0)) == 1
    with pytest.raises(TruncatedInputError):
        decode_directory_table(raw, 2, 0)


def test_trim_field_strips_nul_and_pad():
    assert trim_field(b"FOO.BMP\x00xxxx") == "FOO.BMP"
    assert trim_field(b"FOO.BMPxxxxx") == "FOO.BMP"
    assert trim_field(b"\x00" * 12) == ""
    # Upper-case X is part of the name
    assert trim_field(b"BOX.BMX\x00xxxx") == "BOX.BMX"


def test_pad_field_overflow():
    with pytest.raises(ValueError):
        pad_field("THIRTEEN.CHRS", 12)


def test_detect_format():
    assert detect_format(b"\x41rest") == HEADER_SIZE


def test_detect_legacy_format():
    with pytest.raises(UnsupportedLegacyFormatError):
        detect_format(b"\x6crest")


@pytest.mark.parametrize("first", [0x00, 0x40, 0x42, 0x6B, 0xFF])
def test_detect_unknown_format(first):
    with pytest.raises(UnrecognizedFormatError) as info:
        detect_format(bytes([first]) + b"rest")
    assert info.value.magic == first


def test_detect_empty_input():
    with pytest.raises(TruncatedInputError):
        detect_format(b"")


def test_header_text_keeps_trailing_x():
    header = RSFHeader(license="All rights reserved by Max", name="BOX",
                       version="1.0x", timestamp="Fri Jan 05 12:00:00 1996x")
    decoded = decode_header(encode_header(header))

    assert decoded.license == "All rights reserved by Max"
    assert decoded.version == "1.0x"
    assert decoded.timestamp == "Fri Jan 05 12:00:00 1996x"


def test_header_name_keeps_stored_fill():
    raw = bytearray(encode_header(RSFHeader(license="All rights reserved.")))
    raw[100:112] = b"GAME\x00xxxxxxx"

    header = decode_header(bytes(raw))
    assert header.name == "GAME\x00xxxxxxx"
    assert encode_header(header) == bytes(raw)
