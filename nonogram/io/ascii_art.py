"""ASCII-art rendering of arbitrary bitmaps."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from .bitmap import Bitmap, read_bitmap

# Ordered from the darkest pixel (space) to the brightest.
RAMP = ' ^",:;Il!i~+_-?][}{1)(|\\/tfjrxnuvczXYUJCLQ0OZmwqpdbkhao*#MW&8%B@$'


def luminance(pixel: Sequence[int]) -> int:
    """Integer mean of the blue, green and red channels.

    Only bytes 0-2 count. The fourth byte of a 32-bit pixel is left out on
    purpose instead of averaging the last three bytes of the pixel.
    """
    return (pixel[0] + pixel[1] + pixel[2]) // 3


def glyph_for(value: int, ramp: str = RAMP) -> str:
    index = int(value / (255.0 / len(ramp)))
    if index >= len(ramp):
        index = len(ramp) - 1
    return ramp[index]


def render_ascii(bitmap: Bitmap, ramp: str = RAMP) -> str:
    return "\n".join(
        "".join(glyph_for(luminance(pixel), ramp) for pixel in row)
        for row in bitmap.rows
    )


def ascii_art_file(path: Path | str, ramp: str = RAMP) -> str:
    return render_ascii(read_bitmap(path), ramp)
