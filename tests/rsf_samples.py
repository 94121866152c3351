"""Synthetic RSF data shared by the tests."""

import struct

from rsftool.extractors.rsf_editor import SourceDirectory, SourceFile, build_archive
from rsftool.parsers.bmp_codec import decode_bitmap
from rsftool.parsers.pal_parser import Palette
from rsftool.parsers.rsf_layout import (
    RSFDirectory, RSFFileEntry, RSFHeader, encode_tables, table_size,
)


def palette_bytes() -> bytes:
    """768 bytes of 6-bit palette data; index 0 is (0x3F, 0x10, 0x00)."""
    out = bytearray()
    for i in range(256):
        out += bytes((i % 64, (i * 2) % 64, 63 - i % 64))
    out[0:3] = bytes((0x3F, 0x10, 0x00))
    return bytes(out)


def bitmap_payload(width: int, height: int) -> bytes:
    pixels = bytes((i * 7 + 1) % 256 for i in range(width * height))
    return struct.pack('<HH', width, height) + pixels


def bmp_file(width: int, height: int) -> bytes:
    """A BMP as the extractor would write it, using palette_bytes()."""
    return decode_bitmap(bitmap_payload(width, height), Palette.from_bytes(palette_bytes()))


HELP_TEXT = b"Welcome to the game.\nPress F1 for help.\n"


def sample_directories():
    return [
        SourceDirectory("BMP", [SourceFile("TITLE.BMP", bmp_file(8, 2))]),
        SourceDirectory("PAL", [SourceFile("TRUERGB.PAL", palette_bytes()),
                                SourceFile("L23.PAL", bytes(768))]),
        SourceDirectory("TXT", [SourceFile("HELP.TXT", HELP_TEXT, text_tag=0x0E)]),
        SourceDirectory("DAT", [SourceFile("LEVEL1.DAT", b"\x01\x02\x03\x04")]),
    ]


def sample_archive() -> bytes:
    header = RSFHeader(license="All rights reserved.", name="GAME",
                       version="1.0", timestamp="Mon Jan 01 00:00:00 1996")
    return build_archive(sample_directories(), header)


def raw_archive(directories, payloads, license="All rights reserved."):
    """
    Assemble an archive by hand.

    directories: list of (name, count)
    payloads: list of (name, type_tag, data), in file-table order
    """
    dir_table = []
    start = 0
    for name, count in directories:
        dir_table.append(RSFDirectory(name=name, count=count, start=start))
        start += count

    offset = table_size(len(dir_table), len(payloads))
    file_table = []
    blob = bytearray()
    for name, type_tag, data in payloads:
        file_table.append(RSFFileEntry(name=name, type_tag=type_tag, size=len(data),
                                       start=offset + len(blob),
                                       end=offset + len(blob) + len(data)))
        blob += data

    header = RSFHeader(license=license, name="TEST",
                       file_size=offset + len(blob),
                       directory_count=len(dir_table), file_count=len(file_table))
    return encode_tables(header, dir_table, file_table) + bytes(blob)
