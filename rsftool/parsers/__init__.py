# ==============================================================================
# PARSERS MODULE
# ==============================================================================
# Codecs for the RSF container and the payloads it carries.
#
# Supported formats:
#   - RSF layout: header, directory table and file table structures
#   - PAL: 256-colour palettes stored in the archive's PAL directory
#   - BMP: indexed bitmap payloads <-> Windows BMP files
#   - TXT: obfuscated line-indexed text payloads <-> plain text
# ==============================================================================

from .rsf_layout import (
    RSFHeader, RSFDirectory, RSFFileEntry,
    TYPE_RAW, TYPE_BITMAP, TYPE_TEXT,
    detect_format,
    decode_header, encode_header,
    decode_directory_entry, encode_directory_entry,
    decode_file_entry, encode_file_entry,
)
from .pal_parser import Palette, find_palette, list_palettes
from .bmp_codec import decode_bitmap, encode_bitmap
from .txt_codec import decode_text, encode_text, xor_lines

__all__ = [
    # Layout
    'RSFHeader', 'RSFDirectory', 'RSFFileEntry',
    'TYPE_RAW', 'TYPE_BITMAP', 'TYPE_TEXT',
    'detect_format',
    'decode_header', 'encode_header',
    'decode_directory_entry', 'encode_directory_entry',
    'decode_file_entry', 'encode_file_entry',

    # Palette
    'Palette', 'find_palette', 'list_palettes',

    # Payload codecs
    'decode_bitmap', 'encode_bitmap',
    'decode_text', 'encode_text', 'xor_lines',
]
