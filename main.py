# ==============================================================================
# RSF TOOL - MAIN ENTRY POINT
# ==============================================================================
# Launcher for the RSF Tool command-line interface.
#
# Usage:
#   python main.py extract --archive GAME.RSF    # Extract an archive
#   python main.py build --directory GAME        # Build GAME.RSF
#   python main.py --check                       # Check dependencies
#   python main.py --paths                       # Show data paths
#   python main.py --version
# ==============================================================================

import sys
import traceback


# ==============================================================================
# BANNER
# ==============================================================================

def print_banner():
    """Print the application banner."""
    banner = """
    ╔═══════════════════════════════════════════════════════╗
    ║                                                       ║
    ║    ██████╗ ███████╗███████╗                           ║
    ║    ██╔══██╗██╔════╝██╔════╝                           ║
    ║    ██████╔╝███████╗█████╗                             ║
    ║    ██╔══██╗╚════██║██╔══╝                             ║
    ║    ██║  ██║███████║██║       TOOL                     ║
    ║    ╚═╝  ╚═╝╚══════╝╚═╝                                ║
    ║                                                       ║
    ║    RSF Game-Asset Archive Extractor & Builder         ║
    ║                    Version 1.0.0                      ║
    ║                                                       ║
    ╚═══════════════════════════════════════════════════════╝
    """
    print(banner)


# ==============================================================================
# DEPENDENCY CHECKS
# ==============================================================================

def check_dependencies():
    """
    Check if required dependencies are installed.

    Returns:
        Tuple of (all_ok, missing_packages)
    """
    missing = []

    for module, package in (('numpy', 'numpy'), ('PIL', 'Pillow')):
        try:
            __import__(module)
        except ImportError:
            missing.append(package)

    return (len(missing) == 0, missing)


# ==============================================================================
# MAIN FUNCTION
# ==============================================================================

def main():
    """
    Main entry point for RSF Tool.

    Handles the launcher flags and hands everything else to the CLI.
    """
    argv = sys.argv[1:]

    if '--version' in argv:
        print("RSF Tool v1.0.0")
        return 0

    if '--check' in argv:
        print("Checking dependencies...")
        print(f"  Python: {sys.version}")
        all_ok, missing = check_dependencies()
        if all_ok:
            print("[OK] All dependencies installed")
        else:
            print(f"[MISSING] {', '.join(missing)}")
        return 0 if all_ok else 1

    all_ok, missing = check_dependencies()
    if not all_ok:
        print(f"[ERROR] Missing required packages: {', '.join(missing)}")
        print(f"Install with: pip install {' '.join(missing)}")
        return 1

    if '--paths' in argv:
        from rsftool.core.paths import Paths
        print("RSF Tool Paths:")
        print(f"  User Data:      {Paths.get_user_data_dir()}")
        print(f"  Config:         {Paths.get_config_path()}")
        return 0

    if not argv:
        print_banner()

    try:
        from rsftool.cli import main as cli_main
        return cli_main(argv)
    except Exception as e:
        print(f"\n[FATAL ERROR] {e}")
        traceback.print_exc()
        return 1


# ==============================================================================
# SCRIPT ENTRY POINT
# ==============================================================================
if __name__ == "__main__":
    exit_code = main()
    sys.exit(exit_code)
