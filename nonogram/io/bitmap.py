"""Bitmap (.bmp) encoding of solved grids and the matching read path.

The writer emits a fixed 0x7A-byte header (14-byte file header plus a
108-byte info header, of which only the classic 40-byte part is populated)
followed by bottom-up rows of 24-bit BGR pixels. FILLED cells are black,
everything else white.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from pathlib import Path
from typing import List, Protocol, Tuple

from ..core.constants import CellState
from ..core.exceptions import FormatError
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

SIGNATURE = b"BM"
PIXEL_DATA_OFFSET = 0x7A
INFO_HEADER_SIZE = 0x6C
RESOLUTION = 0xB13
BITS_PER_PIXEL = 24

# signature, file size, reserved, pixel offset, info header size, width,
# height, planes, bpp, compression, image size, x/y resolution, palette
# colors, important colors
_HEADER = struct.Struct("<2sIIIIiiHHIIiiII")
# The subset of the header the reader needs, up to and including image size.
_READ_HEADER = struct.Struct("<2sIIIIiiHHII")

BLACK = b"\x00\x00\x00"
WHITE = b"\xff\xff\xff"


class GridView(Protocol):
    """Read-only grid surface consumed by the encoder."""

    width: int
    height: int

    def cell(self, row: int, col: int) -> CellState:
        ...


def row_padding(width: int, bytes_per_pixel: int = 3) -> int:
    return (4 - (width * bytes_per_pixel) % 4) % 4


def encode_bitmap(grid: GridView) -> bytes:
    width, height = grid.width, grid.height
    padding = b"\x00" * row_padding(width)
    image_size = (3 * width + len(padding)) * height

    header = _HEADER.pack(
        SIGNATURE,
        PIXEL_DATA_OFFSET + image_size,
        0,
        PIXEL_DATA_OFFSET,
        INFO_HEADER_SIZE,
        width,
        height,
        1,
        BITS_PER_PIXEL,
        0,
        image_size,
        RESOLUTION,
        RESOLUTION,
        0,
        0,
    )
    chunks = [header, b"\x00" * (PIXEL_DATA_OFFSET - len(header))]
    for row in range(height - 1, -1, -1):
        for col in range(width):
            chunks.append(BLACK if grid.cell(row, col) is CellState.FILLED else WHITE)
        chunks.append(padding)
    return b"".join(chunks)


def write_bitmap(grid: GridView, path: Path | str) -> Path:
    """Encode ``grid`` and write it to ``path``; OSError propagates untouched."""
    path = Path(path)
    data = encode_bitmap(grid)
    path.write_bytes(data)
    LOGGER.info("Bitmap written: %s (%dx%d, %d bytes)", path, grid.width, grid.height, len(data))
    return path


# ----------------------------------------------------------------------
# Read path
# ----------------------------------------------------------------------
@dataclass
class Bitmap:
    width: int
    height: int
    bits_per_pixel: int
    rows: List[List[Tuple[int, ...]]]  # top row first, pixel bytes in file order

    def pixel(self, row: int, col: int) -> Tuple[int, ...]:
        return self.rows[row][col]


def decode_bitmap(data: bytes) -> Bitmap:
    if len(data) < _READ_HEADER.size:
        raise FormatError(f"Bitmap header truncated: {len(data)} bytes")
    (
        signature,
        _file_size,
        _reserved,
        offset,
        _info_size,
        width,
        height,
        _planes,
        bpp,
        compression,
        _image_size,
    ) = _READ_HEADER.unpack_from(data)

    if signature != SIGNATURE:
        raise FormatError(f"Not a bitmap: signature {signature!r}")
    if bpp not in (24, 32):
        raise FormatError(f"Unsupported bit depth {bpp}")
    if compression not in (0, 3):
        raise FormatError(f"Unsupported compression method {compression}")
    if width <= 0 or height == 0:
        raise FormatError(f"Invalid bitmap dimensions {width}x{height}")

    top_down = height < 0
    height = abs(height)
    bytes_per_pixel = bpp // 8
    stride = width * bytes_per_pixel + row_padding(width, bytes_per_pixel)
    if offset < _READ_HEADER.size or offset + stride * height > len(data):
        raise FormatError(
            f"Pixel data truncated: need {stride * height} bytes at offset {offset}, "
            f"file has {len(data)}"
        )

    rows: List[List[Tuple[int, ...]]] = []
    for index in range(height):
        start = offset + index * stride
        rows.append(
            [
                tuple(data[start + col * bytes_per_pixel:start + (col + 1) * bytes_per_pixel])
                for col in range(width)
            ]
        )
    if not top_down:
        rows.reverse()
    return Bitmap(width=width, height=height, bits_per_pixel=bpp, rows=rows)


def read_bitmap(path: Path | str) -> Bitmap:
    path = Path(path)
    bitmap = decode_bitmap(path.read_bytes())
    LOGGER.debug("Bitmap read: %s (%dx%d, %d bpp)", path, bitmap.width, bitmap.height, bitmap.bits_per_pixel)
    return bitmap
