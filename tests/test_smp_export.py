import os

import pytest

from conftest import build_frame, color, player
from genie_assets.core.cursor import ByteCursor
from genie_assets.parsers.smp_export import (
    index_plane_image, player_color_mask_image, save_frame_planes,
)
from genie_assets.parsers.smp_frame import SmpFrame
from genie_assets.serialization import GameVersion


@pytest.fixture
def frame():
    data = build_frame(3, 2, [(0, 0, color(0x0710, 0x0711) + player(0x0312)), None])
    return SmpFrame.read(ByteCursor(data), GameVersion.DE2)


@pytest.fixture
def empty_frame():
    return SmpFrame.read(ByteCursor(build_frame(2, 1, [None])), GameVersion.DE2)


def test_index_plane(frame):
    image = index_plane_image(frame)
    assert image.size == (3, 2)
    assert image.mode == 'L'
    assert image.getpixel((0, 0)) == 0x10
    assert image.getpixel((1, 0)) == 0x11
    assert image.getpixel((2, 0)) == 0


def test_player_color_mask(frame):
    image = player_color_mask_image(frame)
    assert image.size == (3, 2)
    assert image.getpixel((2, 0)) == 255
    assert image.getpixel((0, 0)) == 0


def test_empty_frame_cannot_be_exported(empty_frame):
    with pytest.raises(ValueError):
        index_plane_image(empty_frame)
    with pytest.raises(ValueError):
        player_color_mask_image(empty_frame)


def test_save_frame_planes(frame, tmp_path):
    out = tmp_path / 'out'
    paths = save_frame_planes(frame, str(out), 'archer_0000')
    assert [os.path.basename(p) for p in paths] == ["archer_0000_index.png", "archer_0000_player.png"]
    assert all(os.path.isfile(p) for p in paths)


def test_save_without_player_colors(tmp_path):
    data = build_frame(1, 1, [(0, 0, color(1))])
    frame = SmpFrame.read(ByteCursor(data), GameVersion.DE2)
    assert len(save_frame_planes(frame, str(tmp_path), 'plain')) == 1
