# ==============================================================================
# PARSERS MODULE
# ==============================================================================
# File format readers for Genie engine assets.
#
# Supported formats:
#   - SMP:  Definitive Edition sprites (frame codec + container)
#   - DAT:  terrain border records
#   - PAL:  JASC-PAL color palettes
#   - DDS:  texture headers and resource format descriptors
#
# Decoded SMP frames can be dumped to PNG with smp_export.
# ==============================================================================

from .smp_frame import SmpFrame, SmpPixel, PlayerColorPixel, LayerType
from .smp_file import SmpFile, SmpHeader, SmpFrameError
from .terrain_border import TerrainBorder, BorderTileType, FrameData
from .color_palette import ColorPalette
from .dds_file import (
    DdsFile, ResourceFormat, ResourceFormatType, CompType,
    dxgi_to_resource_format, resource_format_to_dxgi,
)

__all__ = [
    # SMP
    'SmpFrame', 'SmpPixel', 'PlayerColorPixel', 'LayerType',
    'SmpFile', 'SmpHeader', 'SmpFrameError',

    # DAT
    'TerrainBorder', 'BorderTileType', 'FrameData',

    # PAL
    'ColorPalette',

    # DDS
    'DdsFile', 'ResourceFormat', 'ResourceFormatType', 'CompType',
    'dxgi_to_resource_format', 'resource_format_to_dxgi',
]
