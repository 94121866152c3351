# ==============================================================================
# RSF TOOL - COMMAND LINE INTERFACE
# ==============================================================================
# Commands:
#   - extract: Extract an RSF archive (bitmaps -> BMP, text -> plain text)
#   - build:   Build an RSF archive from a directory tree
#   - list:    Show the header and tables of an archive
#   - palette: Save a preview image of an archive palette
#
# Usage:
#   rsftool extract --archive GAME.RSF --output extracted/
#   rsftool build --directory extracted/ --output GAME.RSF
#   rsftool list --archive GAME.RSF --verbose
#   rsftool palette --archive GAME.RSF --name TRUERGB.PAL --output pal.png
#
# Any format error ends the command with exit status 1.
# ==============================================================================

import os
import sys
import argparse
import traceback
from typing import List, Optional

from .core.config import get_config
from .core.errors import RSFError
from .parsers.rsf_layout import TYPE_BITMAP, TYPE_RAW, TYPE_TEXT


# ==============================================================================
# COLOR HELPERS FOR TERMINAL OUTPUT
# ==============================================================================
class Colors:
    """ANSI color codes for terminal output."""
    HEADER = '\033[95m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    BOLD = '\033[1m'
    END = '\033[0m'

    @classmethod
    def disable(cls):
        """Disable colors (for non-supporting terminals)."""
        cls.HEADER = ''
        cls.BLUE = ''
        cls.CYAN = ''
        cls.GREEN = ''
        cls.YELLOW = ''
        cls.RED = ''
        cls.BOLD = ''
        cls.END = ''


def print_header(text: str):
    """Print a header."""
    print(f"\n{Colors.BOLD}{Colors.CYAN}{'=' * 60}{Colors.END}")
    print(f"{Colors.BOLD}{Colors.CYAN}  {text}{Colors.END}")
    print(f"{Colors.BOLD}{Colors.CYAN}{'=' * 60}{Colors.END}\n")


def print_success(text: str):
    """Print a success message."""
    print(f"{Colors.GREEN}✓ {text}{Colors.END}")


def print_error(text: str):
    """Print an error message."""
    print(f"{Colors.RED}✗ {text}{Colors.END}")


def print_info(text: str):
    """Print an info message."""
    print(f"{Colors.BLUE}ℹ {text}{Colors.END}")


def progress_callback(current: int, total: int, filename: str):
    """Progress callback for long operations."""
    percent = (current / total) * 100 if total > 0 else 0
    bar_length = 30
    filled = int(bar_length * current / total) if total > 0 else 0
    bar = '█' * filled + '░' * (bar_length - filled)

    max_name_len = 40
    if len(filename) > max_name_len:
        filename = '...' + filename[-(max_name_len-3):]

    print(f"\r[{bar}] {percent:5.1f}% | {current}/{total} | {filename}", end='', flush=True)

    if current >= total:
        print()


TYPE_NAMES = {TYPE_RAW: "raw", TYPE_BITMAP: "bitmap", TYPE_TEXT: "text"}


# ==============================================================================
# EXTRACT COMMAND
# ==============================================================================
def cmd_extract(args) -> int:
    """Extract every entry of an archive."""
    print_header("Extracting Archive")

    from .extractors.rsf_extractor import RSFExtractor

    if not os.path.isfile(args.archive):
        print_error(f"Archive not found: {args.archive}")
        return 1

    config = get_config()
    palette_name = args.palette or config.palette_name
    output = args.output or config.default_output_path or None

    print_info(f"Archive: {args.archive}")
    print_info(f"Palette: {palette_name}")

    with RSFExtractor(args.archive, palette_name=palette_name,
                      write_manifest=config.write_manifest) as extractor:
        count = extractor.extract_all(output, progress_callback=progress_callback)

    print_success(f"Extracted {count} files")
    return 0


# ==============================================================================
# BUILD COMMAND
# ==============================================================================
def cmd_build(args) -> int:
    """Build an archive from a directory tree."""
    print_header("Building Archive")

    from .extractors.rsf_editor import create_rsf_from_directory

    if not os.path.isdir(args.directory):
        print_error(f"Directory not found: {args.directory}")
        return 1

    print_info(f"Source: {args.directory}")

    path = create_rsf_from_directory(args.directory, args.output,
                                     pad_char=get_config().pad_char)
    print_success(f"Wrote {path}")
    return 0


# ==============================================================================
# LIST COMMAND
# ==============================================================================
def cmd_list(args) -> int:
    """Show the header and tables of an archive."""
    print_header("Archive Contents")

    from .extractors.rsf_extractor import RSFArchive

    archive = RSFArchive.from_file(args.archive)
    header = archive.header

    print(f"License:     {header.license}")
    print(f"Name:        {header.name}")
    print(f"Version:     {header.version}")
    print(f"Timestamp:   {header.timestamp}")
    print(f"Filesize:    {header.file_size}")
    print(f"Directories: {header.directory_count}  Files: {header.file_count}")
    print(f"Unknown:     {' '.join(f'{v:04X}' for v in header.unidentified)}")
    print()

    for directory in archive.directories:
        print(f"{Colors.BOLD}{directory.tag}/{Colors.END} "
              f"{directory.count} files from index {directory.start}")

        if args.verbose:
            for entry in archive.files[directory.start:directory.end]:
                kind = TYPE_NAMES.get(entry.type_tag, f"0x{entry.type_tag:X}")
                print(f"    {entry.name:<14} {kind:<8} {entry.size:>10} @ 0x{entry.start:08X}")

    return 0


# ==============================================================================
# PALETTE COMMAND
# ==============================================================================
def cmd_palette(args) -> int:
    """Save a palette preview image."""
    from .extractors.rsf_extractor import RSFArchive
    from .parsers.pal_parser import find_palette, list_palettes

    archive = RSFArchive.from_file(args.archive)
    name = args.name or get_config().palette_name

    if args.output is None:
        print_info("Palettes: " + ", ".join(list_palettes(archive.directories, archive.files)))
        return 0

    palette = find_palette(archive.directories, archive.files, archive.data, name)
    palette.to_image().save(args.output)
    print_success(f"Saved palette preview to: {args.output}")
    return 0


# ==============================================================================
# MAIN ARGUMENT PARSER
# ==============================================================================
def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="rsftool",
        description="RSF Tool - extract and build RSF game-asset archives",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s extract --archive GAME.RSF       Extract to ./<archive name>/
  %(prog)s build --directory GAME           Build GAME.RSF
  %(prog)s list --archive GAME.RSF -v       Show all table entries
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    extract_parser = subparsers.add_parser('extract', help='Extract an archive')
    extract_parser.add_argument('--archive', '-x', required=True, help='Archive to extract')
    extract_parser.add_argument('--output', help='Output directory')
    extract_parser.add_argument('--palette', help='Palette used for bitmaps')
    extract_parser.set_defaults(func=cmd_extract)

    pack_parser = subparsers.add_parser('build', help='Build an archive from a directory')
    pack_parser.add_argument('--directory', '-c', required=True, help='Source directory')
    pack_parser.add_argument('--output', help='Archive to write (default: <directory>.RSF)')
    pack_parser.set_defaults(func=cmd_build)

    list_parser = subparsers.add_parser('list', help='List archive contents')
    list_parser.add_argument('--archive', required=True, help='Archive to list')
    list_parser.add_argument('--verbose', '-v', action='store_true', help='Show every file')
    list_parser.set_defaults(func=cmd_list)

    palette_parser = subparsers.add_parser('palette', help='Preview an archive palette')
    palette_parser.add_argument('--archive', required=True, help='Archive holding the palette')
    palette_parser.add_argument('--name', help='Palette entry name')
    palette_parser.add_argument('--output', help='PNG to write (omit to list palettes)')
    palette_parser.set_defaults(func=cmd_palette)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    if sys.platform == 'win32':
        # Enable ANSI colors on Windows
        try:
            import ctypes
            kernel32 = ctypes.windll.kernel32
            kernel32.SetConsoleMode(kernel32.GetStdHandle(-11), 7)
        except (AttributeError, OSError):
            Colors.disable()

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except (RSFError, ValueError, OSError) as e:
        print(f"[ERROR] {e}")
        if get_config().debug_mode:
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
