# ==============================================================================
# GENIE ASSETS - COMMAND LINE INTERFACE
# ==============================================================================
# Inspect Genie engine asset files from a terminal.
#
# Commands:
#   - smp info:      header and per-layer summary of an SMP sprite
#   - smp export:    dump index planes / player color masks to PNG
#   - palette show:  list colors of a JASC-PAL palette
#   - dds info:      texture dimensions, format and subresource sizes
#
# Usage:
#   python -m genie_assets.cli smp info u_inf_archer_idleA_x1.smp
#   python -m genie_assets.cli smp export archer.smp out/ --fail-fast
#   python -m genie_assets.cli palette show b_west.pal --count 16
#   python -m genie_assets.cli dds info texture.dds
# ==============================================================================

import os
import sys
import argparse
from typing import List, Optional

from genie_assets.core.config import Config, get_config
from genie_assets.core.errors import GenieAssetError


# ==============================================================================
# COLOR HELPERS FOR TERMINAL OUTPUT
# ==============================================================================
class Colors:
    """ANSI color codes for terminal output."""
    CYAN = '\033[96m'
    BLUE = '\033[94m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    BOLD = '\033[1m'
    END = '\033[0m'

    @classmethod
    def disable(cls):
        """Disable colors (for non-supporting terminals)."""
        cls.CYAN = ''
        cls.BLUE = ''
        cls.GREEN = ''
        cls.YELLOW = ''
        cls.RED = ''
        cls.BOLD = ''
        cls.END = ''


def print_header(text: str):
    print(f"\n{Colors.BOLD}{Colors.CYAN}{'=' * 60}{Colors.END}")
    print(f"{Colors.BOLD}{Colors.CYAN}  {text}{Colors.END}")
    print(f"{Colors.BOLD}{Colors.CYAN}{'=' * 60}{Colors.END}\n")


def print_success(text: str):
    print(f"{Colors.GREEN}✓ {text}{Colors.END}")


def print_error(text: str):
    print(f"{Colors.RED}✗ {text}{Colors.END}")


def print_warning(text: str):
    print(f"{Colors.YELLOW}⚠ {text}{Colors.END}")


def _config(args) -> Config:
    if getattr(args, 'config', None):
        config = Config(args.config)
        config.load()
    else:
        config = get_config()
    if getattr(args, 'debug', False):
        config.debug_mode = True
    return config


def _load_smp(args, config: Config):
    from genie_assets.parsers.smp_file import SmpFile

    version = args.version or config.game_version
    fail_fast = args.fail_fast or config.fail_fast
    return SmpFile.load_file(
        args.file,
        version=version,
        fail_fast=fail_fast,
        max_dimension=config.max_frame_dimension,
        debug=config.debug_mode,
    )


# ==============================================================================
# SMP COMMANDS
# ==============================================================================
def cmd_smp_info(args) -> int:
    """Show header and layer summary of an SMP file."""
    config = _config(args)
    smp = _load_smp(args, config)
    header = smp.header

    print_header(f"SMP: {os.path.basename(args.file)}")
    print(f"File version:       {header.file_version}")
    print(f"Frames:             {header.frame_count}")
    print(f"Facets:             {header.facet_count} x {header.frames_per_facet} frames")
    print(f"Checksum:           {header.checksum:#010x}")
    if header.comment:
        print(f"Comment:            {header.comment}")
    print()

    for frame_index, layer_index, layer in smp.iter_layers():
        print(f"  [{frame_index:4d}:{layer_index}] {layer.width:4d}x{layer.height:<4d} "
              f"hotspot=({layer.hotspot_x}, {layer.hotspot_y}) "
              f"type={layer.layer_type:#04x} flags={layer.flags:#x} "
              f"player_pixels={len(layer.player_color_overlay)}")

    if smp.errors:
        print()
        for error in smp.errors:
            print_warning(f"frame {error.frame} layer {error.layer}: {error.message}")
        return 1
    return 0


def cmd_smp_export(args) -> int:
    """Write index plane / player color mask PNGs for every layer."""
    from genie_assets.parsers.smp_export import save_frame_planes

    config = _config(args)
    smp = _load_smp(args, config)
    output = args.output or config.export_path
    stem = os.path.splitext(os.path.basename(args.file))[0]

    print_header(f"Exporting {os.path.basename(args.file)} -> {output}")
    written = 0
    for frame_index, layer_index, layer in smp.iter_layers():
        if layer.is_empty():
            if config.debug_mode:
                print(f"[DEBUG] Skipping empty frame {frame_index} layer {layer_index}")
            continue
        paths = save_frame_planes(layer, output, f"{stem}_{frame_index:04d}_{layer_index}")
        written += len(paths)

    print_success(f"Wrote {written} images")
    if smp.errors:
        print_warning(f"{len(smp.errors)} layers could not be decoded")
        return 1
    return 0


# ==============================================================================
# PALETTE COMMANDS
# ==============================================================================
def cmd_palette_show(args) -> int:
    from genie_assets.parsers.color_palette import ColorPalette

    palette = ColorPalette.load(args.file)
    print_header(f"Palette: {os.path.basename(args.file)} ({palette.num_colors} colors)")

    count = palette.num_colors if args.count is None else min(args.count, palette.num_colors)
    for i in range(count):
        r, g, b = palette.get_color(i)
        print(f"  {i:3d}: R={r:3d} G={g:3d} B={b:3d}")
    return 0


# ==============================================================================
# DDS COMMANDS
# ==============================================================================
def cmd_dds_info(args) -> int:
    from genie_assets.parsers.dds_file import DdsFile

    dds = DdsFile.load_file(args.file)
    fmt = dds.format

    print_header(f"DDS: {os.path.basename(args.file)}")
    print(f"Dimensions:         {dds.width} x {dds.height} x {dds.depth}")
    print(f"Mips:               {dds.mips}")
    print(f"Slices:             {dds.slices}{' (cubemap)' if dds.cubemap else ''}")
    print(f"Format:             {fmt.type.name} {fmt.comp_type.name} "
          f"{fmt.comp_count}x{fmt.comp_byte_width}{' BGRA' if fmt.bgra_order() else ''}")
    print(f"Element size:       {fmt.element_size()} bytes"
          f"{' per 4x4 block' if fmt.is_block_compressed() else ''}")
    print(f"Total data:         {sum(dds.subsizes)} bytes")
    return 0


# ==============================================================================
# MAIN ARGUMENT PARSER
# ==============================================================================
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="genie-assets",
        description="Genie Assets - inspect Genie engine asset files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s smp info archer.smp              Show frames of an SMP sprite
  %(prog)s smp export archer.smp out/       Dump frames to PNG
  %(prog)s palette show b_west.pal          List palette colors
  %(prog)s dds info texture.dds             Describe a DDS texture
        """
    )
    parser.add_argument('--config', help='Path to config.json')
    parser.add_argument('--debug', action='store_true', help='Print debug output')
    parser.add_argument('--no-color', action='store_true', help='Disable colored output')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # -------------------------------------------------------------------------
    # SMP commands
    # -------------------------------------------------------------------------
    smp_parser = subparsers.add_parser('smp', help='SMP sprite files')
    smp_sub = smp_parser.add_subparsers(dest='subcommand')

    smp_info = smp_sub.add_parser('info', help='Show SMP header and layers')
    smp_info.add_argument('file', help='SMP file')
    smp_info.add_argument('--version', help='Game version (default from config)')
    smp_info.add_argument('--fail-fast', action='store_true', help='Stop at the first broken frame')
    smp_info.set_defaults(func=cmd_smp_info)

    smp_export = smp_sub.add_parser('export', help='Export frames to PNG')
    smp_export.add_argument('file', help='SMP file')
    smp_export.add_argument('output', nargs='?', help='Output directory (default from config)')
    smp_export.add_argument('--version', help='Game version (default from config)')
    smp_export.add_argument('--fail-fast', action='store_true', help='Stop at the first broken frame')
    smp_export.set_defaults(func=cmd_smp_export)

    # -------------------------------------------------------------------------
    # PALETTE commands
    # -------------------------------------------------------------------------
    palette_parser = subparsers.add_parser('palette', help='JASC-PAL palettes')
    palette_sub = palette_parser.add_subparsers(dest='subcommand')

    palette_show = palette_sub.add_parser('show', help='List palette colors')
    palette_show.add_argument('file', help='Palette file')
    palette_show.add_argument('--count', type=int, help='Only show the first N colors')
    palette_show.set_defaults(func=cmd_palette_show)

    # -------------------------------------------------------------------------
    # DDS commands
    # -------------------------------------------------------------------------
    dds_parser = subparsers.add_parser('dds', help='DDS textures')
    dds_sub = dds_parser.add_subparsers(dest='subcommand')

    dds_info = dds_sub.add_parser('info', help='Describe a DDS texture')
    dds_info.add_argument('file', help='DDS file')
    dds_info.set_defaults(func=cmd_dds_info)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.no_color or not sys.stdout.isatty():
        Colors.disable()

    if not args.command:
        parser.print_help()
        return 1
    if not hasattr(args, 'func'):
        subparsers_action = next(a for a in parser._actions if isinstance(a, argparse._SubParsersAction))
        subparsers_action.choices[args.command].print_help()
        return 1

    try:
        return args.func(args)
    except GenieAssetError as e:
        print_error(str(e))
        return 1
    except OSError as e:
        print_error(f"{e.filename or 'I/O error'}: {e.strerror or e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
