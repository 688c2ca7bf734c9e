# ==============================================================================
# SMP FRAME EXPORT
# ==============================================================================
# Dump decoded SMP frames to PNG for inspection.
#
# No palette lookup or color conversion happens here: the images show the
# raw data planes of a frame.
#   - index plane:        palette index byte of every pixel ("L" image)
#   - player color mask:  255 where a player color overlay entry sits
#
# Usage:
#   frame = smp.get_frame(0)
#   index_plane_image(frame).save("frame0_index.png")
#   save_frame_planes(frame, "out/", "archer_000")
# ==============================================================================

import os
from typing import List

import numpy as np
from PIL import Image

from genie_assets.parsers.smp_frame import SmpFrame


def index_plane_image(frame: SmpFrame) -> Image.Image:
    """Palette index byte of each pixel as a grayscale image."""
    if frame.is_empty():
        raise ValueError("Cannot export an empty frame")
    indices = (frame.as_array() & 0xFF).astype(np.uint8)
    return Image.fromarray(indices)


def player_color_mask_image(frame: SmpFrame) -> Image.Image:
    """Player color overlay positions as a black/white image."""
    if frame.is_empty():
        raise ValueError("Cannot export an empty frame")
    mask = frame.player_color_mask().astype(np.uint8) * 255
    return Image.fromarray(mask)


def save_frame_planes(frame: SmpFrame, directory: str, stem: str) -> List[str]:
    """
    Write ``<stem>_index.png`` and, if the frame has player colors,
    ``<stem>_player.png`` into ``directory``.

    Returns:
        Paths of the written files
    """
    os.makedirs(directory, exist_ok=True)
    written = []

    path = os.path.join(directory, f"{stem}_index.png")
    index_plane_image(frame).save(path)
    written.append(path)

    if frame.player_color_overlay:
        path = os.path.join(directory, f"{stem}_player.png")
        player_color_mask_image(frame).save(path)
        written.append(path)

    return written
