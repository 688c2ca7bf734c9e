# ==============================================================================
# TEST FIXTURES
# ==============================================================================
# Builders for small synthetic asset files.
#
# SMP rows are given as (left, right, commands) tuples, or None for a fully
# transparent row. The row terminator is appended by the builder.
# ==============================================================================

import struct

import pytest

from genie_assets.core.config import Config


END = b'\x03'
SMP_HEADER_FORMAT = '<4siiiiIii32s'


def op(mode, count):
    return bytes([((count - 1) << 2) | mode])


def skip(count):
    return op(0, count)


def color(*pixels):
    return op(1, len(pixels)) + struct.pack(f'<{len(pixels)}I', *pixels)


def player(*pixels, intensity=0x80):
    return (op(2, len(pixels)) + bytes([intensity] * len(pixels))
            + struct.pack(f'<{len(pixels)}I', *pixels))


def layer_parts(width, height, rows, data_offset=32, hotspot_x=0, hotspot_y=0,
                layer_type=2, flags=0):
    """Return (header, payload) of one layer whose tables start at data_offset."""
    edges = b''
    commands = b''
    for row in rows:
        if row is None:
            edges += struct.pack('<HH', 0xFFFF, 0xFFFF)
            continue
        left, right, cmds = row
        edges += struct.pack('<HH', left, right)
        if left != 0xFFFF and right != 0xFFFF:
            commands += cmds + END
    header = struct.pack('<IIiiIIII', width, height, hotspot_x, hotspot_y, layer_type,
                         data_offset, data_offset + len(edges), flags)
    return header, edges + commands


def build_frame(width, height, rows, **kwargs):
    """Standalone frame: header immediately followed by its tables."""
    header, payload = layer_parts(width, height, rows, **kwargs)
    return header + payload


def build_smp(frames, signature=b'SMP$', comment=b'test', extra_offsets=()):
    """
    Build an SMP container.

    Args:
        frames:        list of frames, each a list of layer kwargs for layer_parts()
        extra_offsets: additional (bogus) frame offsets appended to the table
    """
    records = []
    for layers in frames:
        headers = b''
        payloads = b''
        data_start = 32 + 32 * len(layers)
        for layer in layers:
            header, payload = layer_parts(data_offset=data_start + len(payloads), **layer)
            headers += header
            payloads += payload
        records.append(bytes(28) + struct.pack('<I', len(layers)) + headers + payloads)

    frame_count = len(records) + len(extra_offsets)
    offset = 64 + 4 * frame_count
    offsets = []
    for record in records:
        offsets.append(offset)
        offset += len(record)
    offsets.extend(extra_offsets)

    header = struct.pack(SMP_HEADER_FORMAT, signature, 0x20, frame_count, 1, frame_count,
                         0xDEADBEEF, offset, 0, comment)
    return header + struct.pack(f'<{frame_count}I', *offsets) + b''.join(records)


def sample_layer(layer_type=2):
    """3x2 layer: two direct pixels and one player color pixel."""
    return dict(width=3, height=2, layer_type=layer_type, hotspot_x=1, hotspot_y=2, rows=[
        (0, 0, color(0x0101, 0x0102) + player(0x0203)),
        None,
    ])


def broken_layer():
    """Direct color run wider than the frame."""
    return dict(width=2, height=1, rows=[(1, 0, color(1, 2))])


@pytest.fixture
def smp_bytes():
    return build_smp([
        [sample_layer(), sample_layer(layer_type=4)],
        [sample_layer()],
    ])


@pytest.fixture
def config(tmp_path):
    return Config(str(tmp_path / 'config.json'))
