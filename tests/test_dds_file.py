import pytest

from genie_assets.core.cursor import ByteCursor
from genie_assets.core.errors import InvalidSignature, UnexpectedEndOfData, UnsupportedFormat
from genie_assets.parsers.dds_file import (
    DDPF_FOURCC, DDPF_RGB, DDS_MAGIC, CompType, DdsFile, DdsHeader, ResourceFormat,
    ResourceFormatType, dxgi_to_resource_format, resource_format_to_dxgi,
)


# ==============================================================================
# RESOURCE FORMAT
# ==============================================================================

@pytest.mark.parametrize("code, size", [
    (28, 4),    # R8G8B8A8_UNORM
    (2, 16),    # R32G32B32A32_FLOAT
    (71, 8),    # BC1
    (77, 16),   # BC3
    (80, 8),    # BC4
    (98, 16),   # BC7
    (85, 2),    # B5G6R5
    (24, 4),    # R10G10B10A2
    (65, 1),    # A8
])
def test_element_size(code, size):
    assert dxgi_to_resource_format(code).element_size() == size


def test_packed_depth_sizes():
    assert ResourceFormat(type=ResourceFormatType.D16S8).element_size() == 3
    assert ResourceFormat(type=ResourceFormatType.D32S8).element_size() == 5
    assert ResourceFormat(type=ResourceFormatType.EAC, comp_count=1).element_size() == 8
    assert ResourceFormat(type=ResourceFormatType.EAC, comp_count=2).element_size() == 16
    assert ResourceFormat().element_size() == 0


def test_subresource_size():
    bc1 = dxgi_to_resource_format(71)
    assert bc1.is_block_compressed()
    assert bc1.subresource_size(1, 1) == 8
    assert bc1.subresource_size(8, 8) == 32
    assert bc1.subresource_size(5, 4) == 16
    rgba = dxgi_to_resource_format(28)
    assert not rgba.is_block_compressed()
    assert rgba.subresource_size(4, 2, 3) == 96


def test_subresource_size_needs_a_known_layout():
    with pytest.raises(UnsupportedFormat):
        ResourceFormat().subresource_size(4, 4)
    with pytest.raises(UnsupportedFormat):
        ResourceFormat(type=ResourceFormatType.YUV8, comp_count=3).subresource_size(4, 4)


def test_flags():
    fmt = ResourceFormat(type=ResourceFormatType.YUV8, comp_count=3)
    assert not fmt.bgra_order()
    assert fmt.yuv_subsampling() == 0
    assert fmt.yuv_plane_count() == 1

    fmt.set_bgra_order(True)
    fmt.set_yuv_subsampling(422)
    fmt.set_yuv_plane_count(3)
    assert fmt.bgra_order()
    assert fmt.yuv_subsampling() == 422
    assert fmt.yuv_plane_count() == 3

    fmt.set_yuv_subsampling(420)
    fmt.set_yuv_plane_count(2)
    fmt.set_bgra_order(False)
    assert (fmt.yuv_subsampling(), fmt.yuv_plane_count(), fmt.bgra_order()) == (420, 2, False)


def test_special_and_srgb():
    assert not dxgi_to_resource_format(28).special()
    assert dxgi_to_resource_format(71).special()
    assert dxgi_to_resource_format(29).srgb_corrected()
    assert dxgi_to_resource_format(87).bgra_order()


@pytest.mark.parametrize("code", [2, 28, 29, 61, 71, 78, 84, 87, 96, 115])
def test_dxgi_mapping_is_reversible(code):
    assert resource_format_to_dxgi(dxgi_to_resource_format(code)) == code


def test_unknown_dxgi_code():
    with pytest.raises(UnsupportedFormat):
        dxgi_to_resource_format(1000)
    with pytest.raises(UnsupportedFormat):
        resource_format_to_dxgi(ResourceFormat(type=ResourceFormatType.PVRTC))


def test_ordering_and_hashing():
    rgba, bc1, bc7 = (dxgi_to_resource_format(c) for c in (28, 71, 98))
    assert sorted([bc7, bc1, rgba]) == [rgba, bc1, bc7]
    assert len({rgba, dxgi_to_resource_format(28), bc1}) == 2
    assert rgba != bc1


def test_wire_format():
    fmt = dxgi_to_resource_format(87)
    data = fmt.to_bytes()
    assert data == bytes([0, CompType.UNORM, 4, 1, 1, 0])
    loaded = ResourceFormat.from_bytes(data)
    assert loaded == fmt
    assert loaded.type is ResourceFormatType.REGULAR


def test_wire_format_unknown_tag():
    with pytest.raises(UnsupportedFormat):
        ResourceFormat.from_bytes(bytes([200, 0, 4, 1, 0, 0]))


# ==============================================================================
# DDS FILE
# ==============================================================================

def test_write_and_load():
    dds = DdsFile(8, 8, dxgi_to_resource_format(71), mips=2)
    dds.subdata = [bytes(range(32)), b'\x01' * 8]

    cursor = ByteCursor()
    dds.write(cursor)
    cursor.seek(0)
    assert DdsFile.is_dds_file(cursor)
    assert cursor.tell() == 0

    loaded = DdsFile.load(cursor)
    assert (loaded.width, loaded.height, loaded.depth) == (8, 8, 1)
    assert (loaded.mips, loaded.slices, loaded.cubemap) == (2, 1, False)
    assert loaded.format == dds.format
    assert loaded.subsizes == [32, 8]
    assert loaded.subdata == dds.subdata


def test_cubemap_round_trip(tmp_path):
    dds = DdsFile(2, 2, dxgi_to_resource_format(28), slices=6, cubemap=True)
    dds.subdata = [bytes([face]) * 16 for face in range(6)]
    path = tmp_path / 'sky.dds'
    dds.save(str(path))

    loaded = DdsFile.load_file(str(path))
    assert loaded.cubemap
    assert loaded.slices == 6
    assert loaded.subdata[5] == b'\x05' * 16


def test_mip_dimensions():
    dds = DdsFile(16, 4, mips=4)
    assert dds.mip_dimensions(0) == (16, 4, 1)
    assert dds.mip_dimensions(3) == (2, 1, 1)


def test_legacy_fourcc_header():
    header = DdsHeader(width=4, height=4, pf_flags=DDPF_FOURCC, pf_fourcc=b'DXT1')
    loaded = DdsFile.load(ByteCursor(DDS_MAGIC + header.to_bytes() + bytes(8)))
    assert loaded.format == dxgi_to_resource_format(71)
    assert loaded.subsizes == [8]


def test_legacy_rgb_header():
    header = DdsHeader(width=2, height=2, pf_flags=DDPF_RGB, pf_rgb_bit_count=32,
                       pf_r_mask=0x00FF0000, pf_g_mask=0x0000FF00, pf_b_mask=0x000000FF)
    loaded = DdsFile.load(ByteCursor(DDS_MAGIC + header.to_bytes() + bytes(16)))
    assert loaded.format.bgra_order()
    assert loaded.format.element_size() == 4


def test_unknown_legacy_format():
    header = DdsHeader(width=2, height=2, pf_flags=DDPF_FOURCC, pf_fourcc=b'ABCD')
    with pytest.raises(UnsupportedFormat):
        DdsFile.load(ByteCursor(DDS_MAGIC + header.to_bytes()))


def test_bad_magic():
    with pytest.raises(InvalidSignature):
        DdsFile.load(ByteCursor(b'PNG ' + bytes(124)))


def test_truncated_texel_data():
    header = DdsHeader(width=4, height=4, pf_flags=DDPF_FOURCC, pf_fourcc=b'DXT1')
    with pytest.raises(UnexpectedEndOfData):
        DdsFile.load(ByteCursor(DDS_MAGIC + header.to_bytes() + bytes(4)))


def test_write_needs_every_subresource():
    dds = DdsFile(4, 4, dxgi_to_resource_format(71), mips=3)
    dds.subdata = [bytes(8)]
    with pytest.raises(UnsupportedFormat):
        dds.write(ByteCursor())
