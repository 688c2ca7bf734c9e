import pytest

from genie_assets.core.errors import PaletteFormatError, PaletteIndexError
from genie_assets.parsers.color_palette import ColorPalette


PALETTE = "JASC-PAL\r\n0100\r\n3\r\n0 0 0\r\n255 128 1\r\n10 20 30\r\n"


def test_parse():
    palette = ColorPalette.parse(PALETTE)
    assert palette.num_colors == 3
    assert palette.get_color(1) == (255, 128, 1)


def test_parse_unix_line_endings():
    assert len(ColorPalette.parse(PALETTE.replace("\r\n", "\n"))) == 3


@pytest.mark.parametrize("text", [
    "",
    "RIFF\r\n0100\r\n0\r\n",
    "JASC-PAL\r\n0200\r\n0\r\n",
    "JASC-PAL\r\n0100\r\nmany\r\n",
    "JASC-PAL\r\n0100\r\n2\r\n0 0 0\r\n",
    "JASC-PAL\r\n0100\r\n1\r\n0 0\r\n",
    "JASC-PAL\r\n0100\r\n1\r\n0 0 256\r\n",
])
def test_malformed(text):
    with pytest.raises(PaletteFormatError):
        ColorPalette.parse(text)


def test_index_errors():
    palette = ColorPalette.parse(PALETTE)
    with pytest.raises(PaletteIndexError):
        palette.get_color(3)
    with pytest.raises(IndexError):
        palette.set_color(-1, (0, 0, 0))


def test_dumps_round_trip():
    palette = ColorPalette.parse(PALETTE)
    assert palette.dumps() == PALETTE
    palette.set_color(0, (1, 2, 3))
    assert ColorPalette.parse(palette.dumps()).get_color(0) == (1, 2, 3)


def test_save_and_load(tmp_path):
    path = tmp_path / 'test.pal'
    ColorPalette.parse(PALETTE).save(str(path))
    assert path.read_bytes() == PALETTE.encode('ascii')
    loaded = ColorPalette.load(str(path))
    assert loaded.filename == str(path)
    assert loaded.colors == ColorPalette.parse(PALETTE).colors


def test_grayscale():
    palette = ColorPalette.create_grayscale()
    assert palette.num_colors == 256
    assert palette.get_color(0) == (0, 0, 0)
    assert palette.get_color(255) == (255, 255, 255)
