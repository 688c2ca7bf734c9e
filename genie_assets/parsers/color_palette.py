# ==============================================================================
# COLOR PALETTE MODULE
# ==============================================================================
# Reader/writer for the JASC-PAL text palettes shipped with Genie games.
#
# PALETTE FILE FORMAT:
# --------------------
#   JASC-PAL          magic line
#   0100              format version
#   256               number of colors
#   R G B             one line per color, decimal 0-255
#
# Lines may end in CRLF (the shipped files do). Extra whitespace is ignored.
# Index 0 has no special meaning here; transparency is decided by the
# sprite format, not the palette.
#
# USAGE EXAMPLE:
# --------------
#   palette = ColorPalette.load("b_west.pal")
#   r, g, b = palette.get_color(16)
#
#   palette.set_color(16, (255, 0, 0))
#   palette.save("b_west_red.pal")
# ==============================================================================

from typing import List, Tuple

from genie_assets.core.errors import PaletteFormatError, PaletteIndexError


# ==============================================================================
# CONSTANTS
# ==============================================================================

PALETTE_MAGIC = "JASC-PAL"
PALETTE_VERSION = "0100"

Color = Tuple[int, int, int]


class ColorPalette:
    """
    A list of RGB colors addressed by index.

    Attributes:
        colors (list): RGB tuples
        filename (str): Path the palette was loaded from, if any
    """

    def __init__(self, colors: List[Color] = None):
        self.colors: List[Color] = list(colors) if colors else []
        self.filename: str = ""

    # ==========================================================================
    # PARSING
    # ==========================================================================

    @classmethod
    def parse(cls, text: str) -> 'ColorPalette':
        """
        Parse JASC-PAL text.

        Raises:
            PaletteFormatError: wrong magic/version, bad count, bad color line
        """
        lines = [line.strip() for line in text.splitlines()]
        while lines and not lines[-1]:
            lines.pop()

        if len(lines) < 3:
            raise PaletteFormatError("Palette is missing its header lines")
        if lines[0] != PALETTE_MAGIC:
            raise PaletteFormatError(f"Not a JASC-PAL palette: {lines[0]!r}")
        if lines[1] != PALETTE_VERSION:
            raise PaletteFormatError(f"Unsupported palette version: {lines[1]!r}")

        try:
            num_colors = int(lines[2])
        except ValueError:
            raise PaletteFormatError(f"Invalid color count: {lines[2]!r}") from None
        if num_colors < 0:
            raise PaletteFormatError(f"Invalid color count: {num_colors}")

        color_lines = lines[3:]
        if len(color_lines) < num_colors:
            raise PaletteFormatError(
                f"Palette declares {num_colors} colors but has {len(color_lines)}"
            )

        colors = []
        for number, line in enumerate(color_lines[:num_colors], start=4):
            parts = line.split()
            try:
                r, g, b = (int(p) for p in parts)
            except ValueError:
                raise PaletteFormatError(f"Line {number}: expected 'R G B', got {line!r}") from None
            if not all(0 <= c <= 255 for c in (r, g, b)):
                raise PaletteFormatError(f"Line {number}: component out of range in {line!r}")
            colors.append((r, g, b))

        return cls(colors)

    @classmethod
    def load(cls, file_path: str) -> 'ColorPalette':
        """Load a palette file from disk."""
        with open(file_path, 'r', encoding='ascii', newline='') as f:
            palette = cls.parse(f.read())
        palette.filename = file_path
        return palette

    # ==========================================================================
    # WRITING
    # ==========================================================================

    def dumps(self) -> str:
        """Render the palette as JASC-PAL text with CRLF line endings."""
        lines = [PALETTE_MAGIC, PALETTE_VERSION, str(len(self.colors))]
        lines.extend(f"{r} {g} {b}" for r, g, b in self.colors)
        return "\r\n".join(lines) + "\r\n"

    def save(self, file_path: str):
        with open(file_path, 'w', encoding='ascii', newline='') as f:
            f.write(self.dumps())

    # ==========================================================================
    # ACCESS
    # ==========================================================================

    @property
    def num_colors(self) -> int:
        return len(self.colors)

    def get_color(self, index: int) -> Color:
        """
        Get the color at ``index``.

        Raises:
            PaletteIndexError: index outside the palette
        """
        if not 0 <= index < len(self.colors):
            raise PaletteIndexError(f"Color index {index} outside palette of {len(self.colors)}")
        return self.colors[index]

    def set_color(self, index: int, color: Color):
        if not 0 <= index < len(self.colors):
            raise PaletteIndexError(f"Color index {index} outside palette of {len(self.colors)}")
        self.colors[index] = tuple(int(c) for c in color)

    @staticmethod
    def create_grayscale(num_colors: int = 256) -> 'ColorPalette':
        """Grayscale ramp, mostly useful as a stand-in when no palette is at hand."""
        step = 255 / max(1, num_colors - 1)
        return ColorPalette([(round(i * step),) * 3 for i in range(num_colors)])

    def __len__(self):
        return len(self.colors)

    def __repr__(self):
        return f"<ColorPalette(colors={len(self.colors)})>"
