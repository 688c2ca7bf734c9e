# ==============================================================================
# DDS FILE MODULE
# ==============================================================================
# DirectDraw Surface textures used by the Definitive Editions.
#
# This module only describes textures: what format the texels are in and how
# many bytes each mip/slice takes. Texel data is kept as raw bytes; nothing
# is decompressed or converted.
#
# File layout:
#   - magic            "DDS "
#   - DDS_HEADER       124 bytes (size, flags, height, width, pitch/linear
#                      size, depth, mip count, reserved, pixel format, caps)
#   - DDS_HEADER_DXT10 20 bytes, only when the pixel format FourCC is "DX10"
#   - subresources     for each array slice (6 per cube), each mip level
#
# ResourceFormat is a compact tag (type, component type/count/width, flags)
# describing the physical texel layout. element_size() is bytes per texel
# for regular formats and bytes per 4x4 block for block-compressed ones.
#
# References:
#   - https://learn.microsoft.com/windows/win32/direct3ddds/dx-graphics-dds-pguide
# ==============================================================================

import os
from enum import IntEnum
from functools import total_ordering
from typing import Dict, List, Optional, Tuple

from genie_assets.core.cursor import ByteCursor
from genie_assets.core.errors import InvalidSignature, UnsupportedFormat
from genie_assets.serialization import Field, GameVersion, VersionedEntity


DDS_MAGIC = b"DDS "
DDS_HEADER_SIZE = 124
DDS_PIXELFORMAT_SIZE = 32
FOURCC_DX10 = b"DX10"

# DDS_HEADER.flags
DDSD_CAPS = 0x1
DDSD_HEIGHT = 0x2
DDSD_WIDTH = 0x4
DDSD_PITCH = 0x8
DDSD_PIXELFORMAT = 0x1000
DDSD_MIPMAPCOUNT = 0x20000
DDSD_LINEARSIZE = 0x80000
DDSD_DEPTH = 0x800000

# DDS_PIXELFORMAT.flags
DDPF_ALPHAPIXELS = 0x1
DDPF_ALPHA = 0x2
DDPF_FOURCC = 0x4
DDPF_RGB = 0x40
DDPF_LUMINANCE = 0x20000

# caps / caps2
DDSCAPS_COMPLEX = 0x8
DDSCAPS_TEXTURE = 0x1000
DDSCAPS_MIPMAP = 0x400000
DDSCAPS2_CUBEMAP = 0x200
DDSCAPS2_CUBEMAP_ALLFACES = 0xFC00
DDSCAPS2_VOLUME = 0x200000

# DDS_HEADER_DXT10
DIMENSION_TEXTURE2D = 3
DIMENSION_TEXTURE3D = 4
MISC_TEXTURECUBE = 0x4


# ==============================================================================
# RESOURCE FORMAT
# ==============================================================================

class CompType(IntEnum):
    TYPELESS = 0
    FLOAT = 1
    UNORM = 2
    SNORM = 3
    UINT = 4
    SINT = 5
    USCALED = 6
    SSCALED = 7
    DEPTH = 8
    DOUBLE = 9
    UNORM_SRGB = 10


class ResourceFormatType(IntEnum):
    REGULAR = 0
    UNDEFINED = 1
    BC1 = 2
    BC2 = 3
    BC3 = 4
    BC4 = 5
    BC5 = 6
    BC6 = 7
    BC7 = 8
    ETC2 = 9
    EAC = 10
    ASTC = 11
    R10G10B10A2 = 12
    R11G11B10 = 13
    R5G6B5 = 14
    R5G5B5A1 = 15
    R9G9B9E5 = 16
    R4G4B4A4 = 17
    R4G4 = 18
    D16S8 = 19
    D24S8 = 20
    D32S8 = 21
    S8 = 22
    YUV8 = 23
    YUV10 = 24
    YUV12 = 25
    YUV16 = 26
    PVRTC = 27
    A8 = 28


BLOCK_COMPRESSED = frozenset({
    ResourceFormatType.BC1, ResourceFormatType.BC2, ResourceFormatType.BC3,
    ResourceFormatType.BC4, ResourceFormatType.BC5, ResourceFormatType.BC6,
    ResourceFormatType.BC7, ResourceFormatType.ETC2, ResourceFormatType.EAC,
    ResourceFormatType.ASTC, ResourceFormatType.PVRTC,
})

YUV_TYPES = frozenset({
    ResourceFormatType.YUV8, ResourceFormatType.YUV10,
    ResourceFormatType.YUV12, ResourceFormatType.YUV16,
})

# Flag bits
FLAG_BGRA = 0x001
FLAG_444 = 0x004
FLAG_422 = 0x008
FLAG_420 = 0x010
FLAG_SUBSAMPLE_MASK = 0x01C
FLAG_2PLANES = 0x020
FLAG_3PLANES = 0x040
FLAG_PLANES_MASK = 0x060


@total_ordering
class ResourceFormat(VersionedEntity):
    """
    Physical texel layout tag (6 bytes on the wire).

    Attributes:
        type (ResourceFormatType): Regular or a special packed/compressed type
        comp_type (CompType):      How components are interpreted
        comp_count (int):          Number of components
        comp_byte_width (int):     Bytes per component (regular formats)
        flags (int):               BGRA order, YUV subsampling and planes
    """

    FIELDS = [
        Field('type', 'B', default=ResourceFormatType.UNDEFINED),
        Field('comp_type', 'B', default=CompType.TYPELESS),
        Field('comp_count', 'B'),
        Field('comp_byte_width', 'B'),
        Field('flags', 'H'),
    ]
    DEFAULT_VERSION = GameVersion.DE2

    def layout(self, ser):
        ser.apply(self, self.FIELDS)
        if ser.is_reading:
            try:
                self.type = ResourceFormatType(self.type)
                self.comp_type = CompType(self.comp_type)
            except ValueError as e:
                raise UnsupportedFormat(f"Unknown resource format tag: {e}") from e

    def _key(self) -> Tuple[int, int, int, int, int]:
        return (int(self.type), self.comp_count, self.comp_byte_width, int(self.comp_type), self.flags)

    def __eq__(self, other):
        if not isinstance(other, ResourceFormat):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other):
        if not isinstance(other, ResourceFormat):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self):
        return hash(self._key())

    # -------------------------------------------------------------------------
    # QUERIES
    # -------------------------------------------------------------------------

    def special(self) -> bool:
        return self.type != ResourceFormatType.REGULAR

    def is_block_compressed(self) -> bool:
        return self.type in BLOCK_COMPRESSED

    def bgra_order(self) -> bool:
        return bool(self.flags & FLAG_BGRA)

    def srgb_corrected(self) -> bool:
        return self.comp_type == CompType.UNORM_SRGB

    def yuv_subsampling(self) -> int:
        if self.flags & FLAG_444:
            return 444
        if self.flags & FLAG_422:
            return 422
        if self.flags & FLAG_420:
            return 420
        return 0

    def yuv_plane_count(self) -> int:
        if self.flags & FLAG_3PLANES:
            return 3
        if self.flags & FLAG_2PLANES:
            return 2
        return 1

    def set_bgra_order(self, flag: bool):
        if flag:
            self.flags |= FLAG_BGRA
        else:
            self.flags &= ~FLAG_BGRA

    def set_yuv_subsampling(self, subsampling: int):
        self.flags &= ~FLAG_SUBSAMPLE_MASK
        if subsampling == 444:
            self.flags |= FLAG_444
        elif subsampling == 422:
            self.flags |= FLAG_422
        elif subsampling == 420:
            self.flags |= FLAG_420

    def set_yuv_plane_count(self, planes: int):
        self.flags &= ~FLAG_PLANES_MASK
        if planes == 2:
            self.flags |= FLAG_2PLANES
        elif planes == 3:
            self.flags |= FLAG_3PLANES

    def element_size(self) -> int:
        """
        Bytes per texel (regular/packed) or per 4x4 block (compressed).

        Returns 0 for UNDEFINED. YUV sizes are per-component guesses since
        the texel size varies with subsampling.
        """
        t = self.type
        if t == ResourceFormatType.REGULAR:
            return self.comp_byte_width * self.comp_count
        if t in (ResourceFormatType.BC1, ResourceFormatType.BC4, ResourceFormatType.ETC2,
                 ResourceFormatType.PVRTC):
            return 8
        if t in (ResourceFormatType.BC2, ResourceFormatType.BC3, ResourceFormatType.BC5,
                 ResourceFormatType.BC6, ResourceFormatType.BC7, ResourceFormatType.ASTC):
            return 16
        if t == ResourceFormatType.EAC:
            return 8 if self.comp_count == 1 else 16
        if t in (ResourceFormatType.R10G10B10A2, ResourceFormatType.R11G11B10,
                 ResourceFormatType.R9G9B9E5, ResourceFormatType.D24S8):
            return 4
        if t in (ResourceFormatType.R5G6B5, ResourceFormatType.R5G5B5A1,
                 ResourceFormatType.R4G4B4A4):
            return 2
        if t in (ResourceFormatType.R4G4, ResourceFormatType.S8, ResourceFormatType.A8):
            return 1
        # depth/stencil sizes are tightly packed
        if t == ResourceFormatType.D16S8:
            return 3
        if t == ResourceFormatType.D32S8:
            return 5
        if t == ResourceFormatType.YUV8:
            return self.comp_count
        if t in (ResourceFormatType.YUV10, ResourceFormatType.YUV12, ResourceFormatType.YUV16):
            return self.comp_count * 2
        return 0

    def subresource_size(self, width: int, height: int, depth: int = 1) -> int:
        """Bytes taken by one mip level of the given dimensions."""
        if self.type in YUV_TYPES or self.type == ResourceFormatType.UNDEFINED:
            raise UnsupportedFormat(f"Cannot size subresources of {self.type.name} textures")
        if self.is_block_compressed():
            blocks = max(1, (width + 3) // 4) * max(1, (height + 3) // 4)
            return blocks * self.element_size() * depth
        return width * height * depth * self.element_size()

    def __repr__(self):
        return (f"<ResourceFormat({self.type.name}, {self.comp_type.name}, "
                f"count={self.comp_count}, width={self.comp_byte_width}, flags={self.flags:#x})>")


def _fmt(type_, comp_count, comp_byte_width, comp_type, bgra=False) -> ResourceFormat:
    fmt = ResourceFormat(type=ResourceFormatType(type_), comp_type=CompType(comp_type),
                         comp_count=comp_count, comp_byte_width=comp_byte_width)
    fmt.set_bgra_order(bgra)
    return fmt


_R = ResourceFormatType
_C = CompType

# DXGI_FORMAT code -> (type, comp_count, comp_byte_width, comp_type, bgra)
DXGI_FORMATS: Dict[int, tuple] = {
    2: (_R.REGULAR, 4, 4, _C.FLOAT),         # R32G32B32A32_FLOAT
    3: (_R.REGULAR, 4, 4, _C.UINT),
    4: (_R.REGULAR, 4, 4, _C.SINT),
    6: (_R.REGULAR, 3, 4, _C.FLOAT),         # R32G32B32_FLOAT
    10: (_R.REGULAR, 4, 2, _C.FLOAT),        # R16G16B16A16_FLOAT
    11: (_R.REGULAR, 4, 2, _C.UNORM),
    13: (_R.REGULAR, 4, 2, _C.SNORM),
    24: (_R.R10G10B10A2, 4, 1, _C.UNORM),
    26: (_R.R11G11B10, 3, 1, _C.FLOAT),
    28: (_R.REGULAR, 4, 1, _C.UNORM),        # R8G8B8A8_UNORM
    29: (_R.REGULAR, 4, 1, _C.UNORM_SRGB),
    30: (_R.REGULAR, 4, 1, _C.UINT),
    31: (_R.REGULAR, 4, 1, _C.SNORM),
    32: (_R.REGULAR, 4, 1, _C.SINT),
    34: (_R.REGULAR, 2, 2, _C.FLOAT),        # R16G16_FLOAT
    35: (_R.REGULAR, 2, 2, _C.UNORM),
    40: (_R.REGULAR, 1, 4, _C.DEPTH),        # D32_FLOAT
    41: (_R.REGULAR, 1, 4, _C.FLOAT),        # R32_FLOAT
    42: (_R.REGULAR, 1, 4, _C.UINT),
    45: (_R.D24S8, 2, 1, _C.DEPTH),
    49: (_R.REGULAR, 2, 1, _C.UNORM),        # R8G8_UNORM
    54: (_R.REGULAR, 1, 2, _C.FLOAT),        # R16_FLOAT
    55: (_R.REGULAR, 1, 2, _C.DEPTH),        # D16_UNORM
    56: (_R.REGULAR, 1, 2, _C.UNORM),
    61: (_R.REGULAR, 1, 1, _C.UNORM),        # R8_UNORM
    65: (_R.A8, 1, 1, _C.UNORM),
    67: (_R.R9G9B9E5, 3, 1, _C.FLOAT),
    71: (_R.BC1, 4, 1, _C.UNORM),
    72: (_R.BC1, 4, 1, _C.UNORM_SRGB),
    74: (_R.BC2, 4, 1, _C.UNORM),
    75: (_R.BC2, 4, 1, _C.UNORM_SRGB),
    77: (_R.BC3, 4, 1, _C.UNORM),
    78: (_R.BC3, 4, 1, _C.UNORM_SRGB),
    80: (_R.BC4, 1, 1, _C.UNORM),
    81: (_R.BC4, 1, 1, _C.SNORM),
    83: (_R.BC5, 2, 1, _C.UNORM),
    84: (_R.BC5, 2, 1, _C.SNORM),
    85: (_R.R5G6B5, 3, 1, _C.UNORM, True),   # B5G6R5_UNORM
    86: (_R.R5G5B5A1, 4, 1, _C.UNORM, True), # B5G5R5A1_UNORM
    87: (_R.REGULAR, 4, 1, _C.UNORM, True),  # B8G8R8A8_UNORM
    91: (_R.REGULAR, 4, 1, _C.UNORM_SRGB, True),
    95: (_R.BC6, 3, 2, _C.FLOAT),            # BC6H_UF16
    96: (_R.BC6, 3, 2, _C.SNORM),            # BC6H_SF16
    98: (_R.BC7, 4, 1, _C.UNORM),
    99: (_R.BC7, 4, 1, _C.UNORM_SRGB),
    115: (_R.R4G4B4A4, 4, 1, _C.UNORM, True),
}

# Legacy FourCC codes -> DXGI code
FOURCC_FORMATS: Dict[bytes, int] = {
    b"DXT1": 71,
    b"DXT2": 74,
    b"DXT3": 74,
    b"DXT4": 77,
    b"DXT5": 77,
    b"ATI1": 80,
    b"BC4U": 80,
    b"BC4S": 81,
    b"ATI2": 83,
    b"BC5U": 83,
    b"BC5S": 84,
}


def dxgi_to_resource_format(code: int) -> ResourceFormat:
    """
    Describe a DXGI_FORMAT code.

    Raises:
        UnsupportedFormat: code not in the table
    """
    entry = DXGI_FORMATS.get(code)
    if entry is None:
        raise UnsupportedFormat(f"Unsupported DXGI format: {code}")
    return _fmt(*entry)


def resource_format_to_dxgi(fmt: ResourceFormat) -> int:
    """Reverse of dxgi_to_resource_format (first matching code)."""
    for code in DXGI_FORMATS:
        if dxgi_to_resource_format(code) == fmt:
            return code
    raise UnsupportedFormat(f"No DXGI format for {fmt!r}")


# ==============================================================================
# HEADERS
# ==============================================================================

class DdsHeader(VersionedEntity):
    """DDS_HEADER including its embedded DDS_PIXELFORMAT (124 bytes)."""

    FIELDS = [
        Field('size', 'I', default=DDS_HEADER_SIZE),
        Field('flags', 'I'),
        Field('height', 'I'),
        Field('width', 'I'),
        Field('pitch_or_linear_size', 'I'),
        Field('depth', 'I'),
        Field('mip_map_count', 'I'),
        Field('reserved1', 'I', 11),
        Field('pf_size', 'I', default=DDS_PIXELFORMAT_SIZE),
        Field('pf_flags', 'I'),
        Field('pf_fourcc', '4s', default=bytes(4)),
        Field('pf_rgb_bit_count', 'I'),
        Field('pf_r_mask', 'I'),
        Field('pf_g_mask', 'I'),
        Field('pf_b_mask', 'I'),
        Field('pf_a_mask', 'I'),
        Field('caps', 'I'),
        Field('caps2', 'I'),
        Field('caps3', 'I'),
        Field('caps4', 'I'),
        Field('reserved2', 'I'),
    ]
    DEFAULT_VERSION = GameVersion.DE2


class DdsHeaderDX10(VersionedEntity):
    FIELDS = [
        Field('dxgi_format', 'I'),
        Field('resource_dimension', 'I', default=DIMENSION_TEXTURE2D),
        Field('misc_flag', 'I'),
        Field('array_size', 'I', default=1),
        Field('misc_flags2', 'I'),
    ]
    DEFAULT_VERSION = GameVersion.DE2


def _legacy_format(header: DdsHeader) -> ResourceFormat:
    """Describe a pre-DX10 pixel format."""
    if header.pf_flags & DDPF_FOURCC:
        code = FOURCC_FORMATS.get(header.pf_fourcc)
        if code is None:
            raise UnsupportedFormat(f"Unsupported FourCC: {header.pf_fourcc!r}")
        return dxgi_to_resource_format(code)

    bits = header.pf_rgb_bit_count
    if header.pf_flags & DDPF_RGB:
        if bits == 32:
            bgra = header.pf_r_mask == 0x00FF0000
            return _fmt(ResourceFormatType.REGULAR, 4, 1, CompType.UNORM, bgra)
        if bits == 24:
            bgra = header.pf_r_mask == 0x00FF0000
            return _fmt(ResourceFormatType.REGULAR, 3, 1, CompType.UNORM, bgra)
        if bits == 16 and header.pf_g_mask == 0x07E0:
            return _fmt(ResourceFormatType.R5G6B5, 3, 1, CompType.UNORM, True)
    if header.pf_flags & DDPF_LUMINANCE and bits in (8, 16):
        return _fmt(ResourceFormatType.REGULAR, 1, bits // 8, CompType.UNORM)
    if header.pf_flags & DDPF_ALPHA and bits == 8:
        return _fmt(ResourceFormatType.A8, 1, 1, CompType.UNORM)
    raise UnsupportedFormat(
        f"Unsupported pixel format: flags={header.pf_flags:#x} bits={bits} "
        f"masks=({header.pf_r_mask:#x}, {header.pf_g_mask:#x}, {header.pf_b_mask:#x}, {header.pf_a_mask:#x})"
    )


# ==============================================================================
# DDS FILE
# ==============================================================================

class DdsFile:
    """
    A DDS texture: dimensions, format and raw subresource bytes.

    Subresources are ordered slice-major: for each array slice (cube faces
    count as slices), every mip level from largest to smallest.

    Attributes:
        width, height, depth (int)
        mips (int):            Mip levels per slice
        slices (int):          Array slices, 6 per cube
        cubemap (bool)
        format (ResourceFormat)
        subdata (list):        Raw bytes per subresource
        subsizes (list):       Byte size per subresource
    """

    def __init__(self, width: int = 0, height: int = 0, format: Optional[ResourceFormat] = None,
                 depth: int = 1, mips: int = 1, slices: int = 1, cubemap: bool = False):
        self.width = width
        self.height = height
        self.depth = depth
        self.mips = mips
        self.slices = slices
        self.cubemap = cubemap
        self.format = format or ResourceFormat()
        self.subdata: List[bytes] = []
        self.subsizes: List[int] = []

    # -------------------------------------------------------------------------
    # READING
    # -------------------------------------------------------------------------

    @staticmethod
    def is_dds_file(cursor: ByteCursor) -> bool:
        """Check the magic without moving the cursor."""
        position = cursor.tell()
        try:
            return cursor.stream.read(4) == DDS_MAGIC
        finally:
            cursor.seek(position)

    @classmethod
    def load(cls, cursor: ByteCursor) -> 'DdsFile':
        """
        Parse a DDS file at the cursor position.

        Raises:
            InvalidSignature:    missing "DDS " magic
            UnsupportedFormat:   pixel format we cannot describe
            UnexpectedEndOfData: truncated header or texel data
        """
        magic = cursor.read_exact(4)
        if magic != DDS_MAGIC:
            raise InvalidSignature(DDS_MAGIC, magic)

        header = DdsHeader.read(cursor)
        dds = cls(width=header.width, height=max(1, header.height))
        dds.depth = max(1, header.depth) if header.flags & DDSD_DEPTH else 1
        dds.mips = max(1, header.mip_map_count) if header.flags & DDSD_MIPMAPCOUNT else 1
        dds.cubemap = bool(header.caps2 & DDSCAPS2_CUBEMAP)

        if header.pf_flags & DDPF_FOURCC and header.pf_fourcc == FOURCC_DX10:
            ext = DdsHeaderDX10.read(cursor)
            dds.format = dxgi_to_resource_format(ext.dxgi_format)
            if ext.misc_flag & MISC_TEXTURECUBE:
                dds.cubemap = True
            if ext.resource_dimension == DIMENSION_TEXTURE3D:
                dds.depth = max(1, header.depth)
            array_size = max(1, ext.array_size)
        else:
            dds.format = _legacy_format(header)
            array_size = 1

        dds.slices = array_size * 6 if dds.cubemap else array_size

        for _ in range(dds.slices):
            for mip in range(dds.mips):
                size = dds.format.subresource_size(*dds.mip_dimensions(mip))
                dds.subsizes.append(size)
                dds.subdata.append(cursor.read_exact(size))
        return dds

    @classmethod
    def load_file(cls, path: str) -> 'DdsFile':
        return cls.load(ByteCursor.from_path(path))

    def mip_dimensions(self, mip: int) -> Tuple[int, int, int]:
        """(width, height, depth) of a mip level."""
        return (max(1, self.width >> mip), max(1, self.height >> mip), max(1, self.depth >> mip))

    # -------------------------------------------------------------------------
    # WRITING
    # -------------------------------------------------------------------------

    def write(self, cursor: ByteCursor):
        """Write the texture with a DX10 header followed by all subresources."""
        expected = self.slices * self.mips
        if len(self.subdata) != expected:
            raise UnsupportedFormat(f"Expected {expected} subresources, have {len(self.subdata)}")

        header = DdsHeader(
            flags=DDSD_CAPS | DDSD_HEIGHT | DDSD_WIDTH | DDSD_PIXELFORMAT | DDSD_LINEARSIZE,
            height=self.height,
            width=self.width,
            pitch_or_linear_size=self.format.subresource_size(*self.mip_dimensions(0)),
            depth=self.depth if self.depth > 1 else 0,
            mip_map_count=self.mips,
            pf_flags=DDPF_FOURCC,
            pf_fourcc=FOURCC_DX10,
            caps=DDSCAPS_TEXTURE,
        )
        if self.mips > 1:
            header.flags |= DDSD_MIPMAPCOUNT
            header.caps |= DDSCAPS_COMPLEX | DDSCAPS_MIPMAP
        if self.depth > 1:
            header.flags |= DDSD_DEPTH
            header.caps2 |= DDSCAPS2_VOLUME
        if self.cubemap:
            header.caps |= DDSCAPS_COMPLEX
            header.caps2 |= DDSCAPS2_CUBEMAP | DDSCAPS2_CUBEMAP_ALLFACES
        elif self.slices > 1:
            header.caps |= DDSCAPS_COMPLEX

        ext = DdsHeaderDX10(
            dxgi_format=resource_format_to_dxgi(self.format),
            resource_dimension=DIMENSION_TEXTURE3D if self.depth > 1 else DIMENSION_TEXTURE2D,
            misc_flag=MISC_TEXTURECUBE if self.cubemap else 0,
            array_size=self.slices // 6 if self.cubemap else self.slices,
        )

        cursor.write(DDS_MAGIC)
        header.write(cursor)
        ext.write(cursor)
        for data in self.subdata:
            cursor.write(data)

    def save(self, path: str):
        cursor = ByteCursor()
        self.write(cursor)
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        with open(path, 'wb') as f:
            f.write(cursor.getvalue())

    def __repr__(self):
        return (f"<DdsFile({self.width}x{self.height}x{self.depth}, mips={self.mips}, "
                f"slices={self.slices}, cubemap={self.cubemap}, format={self.format!r})>")
