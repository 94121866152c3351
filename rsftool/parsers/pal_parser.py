# ==============================================================================
# PAL (PALETTE) RESOLVER
# ==============================================================================
# Finds and loads 256-colour palettes stored inside an RSF archive.
#
# PAL ENTRY FORMAT:
# -----------------
# Palettes live in the archive directory tagged "PAL". Each palette entry is
# 768 bytes: 256 RGB triples, one byte per channel.
#
# Channel values are 6-bit (0x00 - 0x3F, VGA DAC style) and must be
# multiplied by 4 to get 8-bit colour. Bitmap output stores colours as
# B, G, R, reserved, so channels 0 and 2 are swapped when the BMP colour
# table is built.
#
# USAGE EXAMPLE:
# --------------
#   palette = find_palette(archive.directories, archive.files,
#                          archive.data, "TRUERGB.PAL")
#
#   # 1024-byte colour table for a BMP file
#   table = palette.to_bmp_table()
#
#   # Preview swatch
#   palette.to_image().save("palette.png")
# ==============================================================================

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np
from PIL import Image

from ..core.errors import PaletteNotFoundError, TruncatedInputError
from .rsf_layout import RSFDirectory, RSFFileEntry


# ==============================================================================
# CONSTANTS
# ==============================================================================

# Directory tag holding the palettes
PALETTE_DIRECTORY = "PAL"

# Number of colours in a palette
PALETTE_COLOR_COUNT = 256

# Raw palette size (256 colours * 3 bytes)
PALETTE_SIZE = PALETTE_COLOR_COUNT * 3

# 6-bit channel -> 8-bit channel
CHANNEL_SCALE = 4

# Default palette used by the game's bitmaps
DEFAULT_PALETTE_NAME = "TRUERGB.PAL"


# ==============================================================================
# PALETTE CLASS
# ==============================================================================

@dataclass
class Palette:
    """
    A 256-colour palette read from an archive.

    Attributes:
        name (str):     Palette entry name (e.g. "TRUERGB.PAL")
        colors (list):  256 raw triples in storage order, 6-bit channels
    """
    name: str = ""
    colors: List[Tuple[int, int, int]] = field(default_factory=list)

    @classmethod
    def from_bytes(cls, data: bytes, name: str = "") -> 'Palette':
        """
        Decode 768 raw bytes into a palette, index 0 = first triple.

        Raises:
            TruncatedInputError: fewer than 768 bytes
        """
        if len(data) < PALETTE_SIZE:
            raise TruncatedInputError(f"palette {name}".strip(), PALETTE_SIZE, len(data))
        colors = [
            (data[i], data[i + 1], data[i + 2])
            for i in range(0, PALETTE_SIZE, 3)
        ]
        return cls(name=name, colors=colors)

    def _scaled_array(self) -> np.ndarray:
        # Byte arithmetic: out-of-range input wraps like the game's tools
        raw = np.array(self.colors, dtype=np.uint16).reshape(-1, 3)
        return ((raw * CHANNEL_SCALE) & 0xFF).astype(np.uint8)

    def scaled(self) -> List[Tuple[int, int, int]]:
        """8-bit colours in storage channel order."""
        return [tuple(int(c) for c in row) for row in self._scaled_array()]

    def output_entries(self) -> List[Tuple[int, int, int]]:
        """8-bit colours with channels 0 and 2 swapped, as written to bitmaps."""
        return [tuple(int(c) for c in row) for row in self._scaled_array()[:, ::-1]]

    def to_bmp_table(self) -> bytes:
        """
        Build the 1024-byte BMP colour table.

        Each entry is 4 bytes: the swapped, scaled triple plus a zero
        reserved byte.
        """
        table = np.zeros((PALETTE_COLOR_COUNT, 4), dtype=np.uint8)
        entries = self._scaled_array()[:, ::-1]
        table[:len(entries), :3] = entries[:PALETTE_COLOR_COUNT]
        return table.tobytes()

    def to_image(self, cell_size: int = 16) -> Image.Image:
        """
        Create a visual representation of the palette.

        Creates a 16x16 grid showing all 256 colours.

        Args:
            cell_size: Size of each colour cell in pixels

        Returns:
            PIL.Image in RGB mode
        """
        size = 16 * cell_size
        img = Image.new('RGB', (size, size), (0, 0, 0))

        for i, color in enumerate(self.scaled()):
            x1 = (i % 16) * cell_size
            y1 = (i // 16) * cell_size
            img.paste(color, (x1, y1, x1 + cell_size, y1 + cell_size))

        return img


# ==============================================================================
# RESOLVER FUNCTIONS
# ==============================================================================

def _palette_directory(directories: List[RSFDirectory]) -> Optional[RSFDirectory]:
    for directory in directories:
        if directory.tag == PALETTE_DIRECTORY:
            return directory
    return None


def list_palettes(directories: List[RSFDirectory],
                  files: List[RSFFileEntry]) -> List[str]:
    """Names of all entries in the archive's PAL directory."""
    pal_dir = _palette_directory(directories)
    if pal_dir is None:
        return []
    return [entry.name for entry in files[pal_dir.start:pal_dir.end]]


def find_palette(directories: List[RSFDirectory], files: List[RSFFileEntry],
                 archive_data: bytes, name: str = DEFAULT_PALETTE_NAME) -> Palette:
    """
    Locate a named palette in the archive and load it.

    Args:
        directories: Decoded directory table
        files: Decoded file table
        archive_data: Whole archive buffer
        name: Palette entry name to look for

    Returns:
        The loaded Palette

    Raises:
        PaletteNotFoundError: no PAL directory, or no entry with that name
        TruncatedInputError: the entry runs past the end of the archive
    """
    pal_dir = _palette_directory(directories)
    if pal_dir is None:
        raise PaletteNotFoundError(name, "archive has no PAL directory")

    print("[INFO] PAL directory found")

    for entry in files[pal_dir.start:pal_dir.end]:
        if entry.name == name:
            print(f"[INFO] Unpacking palette: {entry.name}")
            data = archive_data[entry.start:entry.start + PALETTE_SIZE]
            return Palette.from_bytes(bytes(data), entry.name)

    raise PaletteNotFoundError(name)
