import pytest

from rsftool.core.errors import PaletteNotFoundError, TruncatedInputError
from rsftool.extractors.rsf_extractor import RSFArchive
from rsftool.parsers.pal_parser import Palette, find_palette, list_palettes

from rsf_samples import palette_bytes, raw_archive, sample_archive


def test_palette_scaling_swaps_first_and_last_channel():
    palette = Palette.from_bytes(palette_bytes())

    assert palette.colors[0] == (0x3F, 0x10, 0x00)
    assert palette.scaled()[0] == (0xFC, 0x40, 0x00)
    assert palette.output_entries()[0] == (0x00, 0x40, 0xFC)
    assert palette.to_bmp_table()[:4] == b"\x00\x40\xfc\x00"


def test_bmp_table_size_and_order():
    palette = Palette.from_bytes(palette_bytes())
    table = palette.to_bmp_table()

    assert len(table) == 1024
    # index 5 raw = (5, 10, 58)
    assert table[20:24] == bytes((58 * 4, 10 * 4, 5 * 4, 0))


def test_palette_too_short():
    with pytest.raises(TruncatedInputError):
        Palette.from_bytes(bytes(767))


def test_find_palette():
    archive = RSFArchive(sample_archive())
    palette = find_palette(archive.directories, archive.files, archive.data, "TRUERGB.PAL")

    assert palette.name == "TRUERGB.PAL"
    assert len(palette.colors) == 256
    assert palette.colors == Palette.from_bytes(palette_bytes()).colors


def test_find_second_palette():
    archive = RSFArchive(sample_archive())
    palette = find_palette(archive.directories, archive.files, archive.data, "L23.PAL")
    assert palette.colors == [(0, 0, 0)] * 256


def test_list_palettes():
    archive = RSFArchive(sample_archive())
    assert list_palettes(archive.directories, archive.files) == ["TRUERGB.PAL", "L23.PAL"]


def test_missing_palette_entry():
    archive = RSFArchive(sample_archive())
    with pytest.raises(PaletteNotFoundError) as info:
        find_palette(archive.directories, archive.files, archive.data, "NOPE.PAL")
    assert info.value.name == "NOPE.PAL"


def test_missing_palette_directory():
    data = raw_archive([("DAT", 1)], [("A.DAT", 0, b"abc")])
    archive = RSFArchive(data)
    with pytest.raises(PaletteNotFoundError):
        find_palette(archive.directories, archive.files, archive.data, "TRUERGB.PAL")
    assert list_palettes(archive.directories, archive.files) == []


def test_palette_entry_cut_short():
    data = raw_archive([("PAL", 1)], [("TRUERGB.PAL", 0, bytes(100))])
    archive = RSFArchive(data)
    with pytest.raises(TruncatedInputError):
        find_palette(archive.directories, archive.files, archive.data, "TRUERGB.PAL")


def test_palette_preview_image():
    img = Palette.from_bytes(palette_bytes()).to_image(cell_size=4)

    assert img.size == (64, 64)
    assert img.getpixel((0, 0)) == (0xFC, 0x40, 0x00)
    # index 17 -> row 1, column 1; raw = (17, 34, 46)
    assert img.getpixel((5, 5)) == (68, 136, 184)
