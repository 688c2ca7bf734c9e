# ==============================================================================
# TERRAIN BORDER MODULE
# ==============================================================================
# Terrain border records from the engine's .dat file.
#
# Terrain borders describe the blend graphics drawn between two terrains.
# Only the early games (up to Rise of Rome) actually use them, but every
# .dat file still carries the table, so later versions keep the layout.
#
# Layout (all little-endian):
#   enabled i8, random i8, name, name2 (13 bytes each, 17 for SWGB/CC),
#   slp i32 (AoE beta and later), shape_ptr i32, sound_id i32,
#   colors 3 x u8, is_animated i8, animation_frames i16, pause_frames i16,
#   interval f32, pause_between_loops f32, frame i16, draw_frame i16,
#   animate_last f32, frame_changed i8, drawn i8,
#   borders 19 tile types x 12 FrameData (frame_count, angle_count, shape_id),
#   draw_terrain i16, underlay_terrain i16, border_style i16
# ==============================================================================

from genie_assets.serialization import STRING, Field, GameVersion, VersionedEntity


TILE_TYPE_COUNT = 19
FRAMES_PER_TILE_TYPE = 12

_TERRAIN_VERSIONS = frozenset(v for v in GameVersion if v >= GameVersion.MATT)


def name_size(entity) -> int:
    """Fixed name width in bytes for the entity's version."""
    return 17 if entity.version.is_swgb() else 13


class FrameData(VersionedEntity):
    """Graphic frame range used for one border shape."""
    FIELDS = [
        Field('frame_count', 'h'),
        Field('angle_count', 'h'),
        Field('shape_id', 'h'),
    ]
    SUPPORTED_VERSIONS = _TERRAIN_VERSIONS


class BorderTileType(VersionedEntity):
    """The FrameData entries of one of the 19 tile types."""
    FIELDS = [
        Field('frames', FrameData, FRAMES_PER_TILE_TYPE),
    ]
    SUPPORTED_VERSIONS = _TERRAIN_VERSIONS


class TerrainBorder(VersionedEntity):
    """
    A terrain border record.

    Attributes (besides the animation fields shared with terrains):
        borders (list):         TILE_TYPE_COUNT BorderTileType entries
        draw_terrain (int):     Always 0 in shipped data
        underlay_terrain (int): Terrain used for passability checks (-1 = none)
        border_style (int):     Tile type shape style
    """

    FIELDS = [
        Field('enabled', 'b'),
        Field('random', 'b'),
        Field('name', STRING, name_size),
        Field('name2', STRING, name_size),
        Field('slp', 'i', since=GameVersion.AOE_BETA, default=-1),
        Field('shape_ptr', 'i'),
        Field('sound_id', 'i', default=-1),
        Field('colors', 'B', 3),
        Field('is_animated', 'b'),
        Field('animation_frames', 'h'),
        Field('pause_frames', 'h'),
        Field('interval', 'f'),
        Field('pause_between_loops', 'f'),
        Field('frame', 'h'),
        Field('draw_frame', 'h'),
        Field('animate_last', 'f'),
        Field('frame_changed', 'b'),
        Field('drawn', 'b'),
        Field('borders', BorderTileType, TILE_TYPE_COUNT),
        Field('draw_terrain', 'h'),
        Field('underlay_terrain', 'h', default=-1),
        Field('border_style', 'h'),
    ]
    SUPPORTED_VERSIONS = _TERRAIN_VERSIONS

    def get_frame_data(self, tile_type: int, index: int) -> FrameData:
        return self.borders[tile_type].frames[index]

    def __repr__(self):
        return f"<TerrainBorder(name='{self.name}', enabled={self.enabled}, version={self.version.name})>"
