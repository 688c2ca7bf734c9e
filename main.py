# ==============================================================================
# GENIE ASSETS - MAIN ENTRY POINT
# ==============================================================================
# Launcher for the Genie Assets command line tools.
#
# Usage:
#   python main.py smp info archer.smp
#   python main.py --check      # Verify dependencies
#   python main.py --version    # Show version
#   python main.py --help       # Show help
# ==============================================================================

import sys

# ==============================================================================
# BANNER
# ==============================================================================

def print_banner():
    """Print the application banner."""
    banner = """
    ╔═══════════════════════════════════════════════════════════════╗
    ║                                                               ║
    ║                       G E N I E   A S S E T S                 ║
    ║                                                               ║
    ║        Sprite, palette and texture tools for Genie games      ║
    ║                        Version 1.0.0                          ║
    ║                                                               ║
    ╚═══════════════════════════════════════════════════════════════╝
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

    # Import name -> package name on the index
    core_deps = {'numpy': 'numpy', 'PIL': 'Pillow'}

    for module, package in core_deps.items():
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
    Main entry point.

    Handles the launcher-only flags and hands everything else to the CLI.
    """
    argv = sys.argv[1:]

    if '--version' in argv[:1] or '-v' in argv[:1]:
        from genie_assets import __version__
        print(f"Genie Assets v{__version__}")
        return 0

    if '--check' in argv[:1]:
        print("Checking dependencies...")
        print(f"  Python: {sys.version}")
        all_ok, missing = check_dependencies()
        if all_ok:
            print("[OK] All core dependencies installed")
        else:
            print(f"[MISSING] {', '.join(missing)}")
            print(f"Install with: pip install {' '.join(missing)}")
        return 0 if all_ok else 1

    if not argv:
        print_banner()

    all_ok, missing = check_dependencies()
    if not all_ok:
        print(f"[ERROR] Missing dependencies: {', '.join(missing)}")
        print(f"Install with: pip install {' '.join(missing)}")
        return 1

    from genie_assets.cli import main as cli_main
    return cli_main(argv)


if __name__ == "__main__":
    sys.exit(main())
