import pytest

from genie_assets.core.errors import SerializationError, UnexpectedEndOfData, UnsupportedVersion
from genie_assets.parsers.terrain_border import (
    FRAMES_PER_TILE_TYPE, TILE_TYPE_COUNT, TerrainBorder,
)
from genie_assets.serialization import GameVersion


# fixed part + 19 x 12 x 6 bytes of frame data
@pytest.mark.parametrize("version, size", [
    (GameVersion.MATT, 1436),
    (GameVersion.AOE_BETA, 1440),
    (GameVersion.AOK, 1440),
    (GameVersion.DE2, 1440),
    (GameVersion.SWGB, 1448),
    (GameVersion.CC, 1448),
])
def test_record_size(version, size):
    assert len(TerrainBorder(version=version).to_bytes()) == size


def make_border(version):
    border = TerrainBorder(version=version, enabled=1, name='Beach', name2='BEACH',
                           slp=20000, sound_id=-1, colors=[10, 20, 30], interval=0.5,
                           animate_last=1.25, underlay_terrain=2, border_style=1)
    frame = border.get_frame_data(3, 4)
    frame.frame_count = 12
    frame.angle_count = 1
    frame.shape_id = 40
    return border


@pytest.mark.parametrize("version", [GameVersion.ROR, GameVersion.TC, GameVersion.CC])
def test_round_trip(version):
    border = make_border(version)
    loaded = TerrainBorder.from_bytes(border.to_bytes(), version)
    assert loaded == border
    assert loaded.name == 'Beach'
    assert loaded.get_frame_data(3, 4).shape_id == 40
    assert loaded.get_frame_data(0, 0).shape_id == 0
    assert len(loaded.borders) == TILE_TYPE_COUNT
    assert all(len(t.frames) == FRAMES_PER_TILE_TYPE for t in loaded.borders)


def test_slp_absent_before_aoe_beta():
    border = make_border(GameVersion.MATT)
    loaded = TerrainBorder.from_bytes(border.to_bytes(), GameVersion.MATT)
    assert loaded.slp == -1
    assert loaded.name == 'Beach'


def test_swgb_names_are_longer():
    long_name = 'SandDuneBorder01'
    border = TerrainBorder(version=GameVersion.SWGB, name=long_name)
    assert TerrainBorder.from_bytes(border.to_bytes(), GameVersion.SWGB).name == long_name
    with pytest.raises(SerializationError):
        TerrainBorder(version=GameVersion.AOK, name=long_name).to_bytes()


def test_unsupported_version():
    with pytest.raises(UnsupportedVersion):
        TerrainBorder(version=GameVersion.DAVE).to_bytes()


def test_truncated_record():
    data = TerrainBorder(version=GameVersion.AOK).to_bytes()
    with pytest.raises(UnexpectedEndOfData):
        TerrainBorder.from_bytes(data[:-1], GameVersion.AOK)
