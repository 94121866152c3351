# ==============================================================================
# RSF TOOL - ERROR TYPES
# ==============================================================================
# Exceptions raised by the RSF codecs.
#
# Every structural problem aborts the current operation. The CLI catches
# RSFError, prints it and exits with status 1; library callers decide for
# themselves.
#
# Unknown file-table type tags are NOT an error: the entry is written raw
# and a [WARN] line is printed (see rsf_extractor.py).
# ==============================================================================


class RSFError(Exception):
    """Base class for all RSF format errors."""
    pass


class TruncatedInputError(RSFError):
    """
    Fewer bytes are available than a fixed-width field requires.

    Attributes:
        what (str):     Name of the structure being decoded
        wanted (int):   Number of bytes required
        got (int):      Number of bytes available
    """

    def __init__(self, what: str, wanted: int, got: int):
        self.what = what
        self.wanted = wanted
        self.got = got
        super().__init__(f"Ran out of bytes reading {what} (wanted: {wanted}, got: {got})")


class UnrecognizedFormatError(RSFError):
    """The format-detection byte is not a known RSF magic value."""

    def __init__(self, magic: int):
        self.magic = magic
        super().__init__(f"Unknown file format (first byte 0x{magic:02X})")


class UnsupportedLegacyFormatError(RSFError):
    """The archive is the old-style RSF variant, which is not supported."""

    def __init__(self, magic: int):
        self.magic = magic
        super().__init__(f"Cannot handle old-style RSF format (first byte 0x{magic:02X})")


class PaletteNotFoundError(RSFError):
    """The requested palette is missing from the archive's PAL directory."""

    def __init__(self, name: str, reason: str = ""):
        self.name = name
        message = f"Couldn't find requested PAL file: {name}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class UnsafeEntryNameError(RSFError):
    """A directory tag or file name would escape the extraction directory."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Refusing to extract entry with unsafe name: {name!r}")
