import io
import struct
import tempfile
import unittest
from pathlib import Path

from PIL import Image

from nonogram import solve
from nonogram.core.exceptions import FormatError
from nonogram.engine.grid import Grid
from nonogram.io.ascii_art import RAMP, ascii_art_file, glyph_for, luminance, render_ascii
from nonogram.io.bitmap import (
    BLACK,
    PIXEL_DATA_OFFSET,
    WHITE,
    decode_bitmap,
    encode_bitmap,
    read_bitmap,
    row_padding,
    write_bitmap,
)

from sample_puzzles import SCENARIO_A, SCENARIO_A_SOLUTION, grid_from_bits

HEADER = struct.Struct("<2sIIIIiiHHIIiiII")


def raw_bitmap(width, height, bpp, pixel_rows, compression=0):
    """Assemble a bitmap file from ``pixel_rows`` given in file order."""
    bytes_per_pixel = bpp // 8
    padding = b"\x00" * row_padding(width, bytes_per_pixel)
    body = b"".join(b"".join(bytes(pixel) for pixel in row) + padding for row in pixel_rows)
    header = HEADER.pack(
        b"BM", PIXEL_DATA_OFFSET + len(body), 0, PIXEL_DATA_OFFSET, 0x6C,
        width, height, 1, bpp, compression, len(body), 0xB13, 0xB13, 0, 0,
    )
    return header + b"\x00" * (PIXEL_DATA_OFFSET - len(header)) + body


class RowPaddingTests(unittest.TestCase):
    def test_pads_rows_to_four_bytes(self) -> None:
        self.assertEqual(row_padding(1), 1)
        self.assertEqual(row_padding(2), 2)
        self.assertEqual(row_padding(3), 3)
        self.assertEqual(row_padding(5), 1)

    def test_aligned_rows_get_no_padding(self) -> None:
        self.assertEqual(row_padding(4), 0)
        self.assertEqual(row_padding(8), 0)
        self.assertEqual(row_padding(3, bytes_per_pixel=4), 0)


class EncodeBitmapTests(unittest.TestCase):
    def setUp(self) -> None:
        self.grid = solve(SCENARIO_A).grid
        self.data = encode_bitmap(self.grid)

    def test_header_fields(self) -> None:
        fields = HEADER.unpack_from(self.data)

        self.assertEqual(len(self.data), 202)
        self.assertEqual(fields[0], b"BM")
        self.assertEqual(fields[1], 202)
        self.assertEqual(fields[3], 0x7A)
        self.assertEqual(fields[4], 0x6C)
        self.assertEqual(fields[5:7], (5, 5))
        self.assertEqual(fields[7:10], (1, 24, 0))
        self.assertEqual(fields[10], 80)
        self.assertEqual(fields[11:13], (0xB13, 0xB13))
        self.assertEqual(self.data[HEADER.size:PIXEL_DATA_OFFSET], b"\x00" * 68)

    def test_rows_are_stored_bottom_up(self) -> None:
        bottom = self.data[PIXEL_DATA_OFFSET:PIXEL_DATA_OFFSET + 16]
        self.assertEqual(bottom, BLACK * 4 + WHITE + b"\x00")
        top = self.data[-16:]
        self.assertEqual(top, BLACK * 2 + WHITE + BLACK * 2 + b"\x00")

    def test_unknown_cells_render_white(self) -> None:
        data = encode_bitmap(Grid(width=4, height=1))
        self.assertEqual(len(data), PIXEL_DATA_OFFSET + 12)
        self.assertEqual(data[PIXEL_DATA_OFFSET:], WHITE * 4)

    def test_pillow_reads_encoded_file(self) -> None:
        image = Image.open(io.BytesIO(self.data))
        image.load()

        self.assertEqual(image.size, (5, 5))
        for r, row in enumerate(SCENARIO_A_SOLUTION):
            for c, bit in enumerate(row):
                expected = (0, 0, 0) if bit else (255, 255, 255)
                self.assertEqual(image.convert("RGB").getpixel((c, r)), expected)


class WriteBitmapTests(unittest.TestCase):
    def test_writes_file(self) -> None:
        grid = grid_from_bits(SCENARIO_A_SOLUTION)
        with tempfile.TemporaryDirectory() as tmp:
            path = write_bitmap(grid, Path(tmp) / "solved.bmp")
            self.assertEqual(path.read_bytes(), encode_bitmap(grid))

    def test_os_error_propagates_and_leaves_grid_untouched(self) -> None:
        grid = grid_from_bits(SCENARIO_A_SOLUTION)
        before = grid.rows()
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(OSError):
                write_bitmap(grid, Path(tmp) / "missing" / "solved.bmp")
        self.assertEqual(grid.rows(), before)


class DecodeBitmapTests(unittest.TestCase):
    def test_decodes_encoded_grid_top_row_first(self) -> None:
        bitmap = decode_bitmap(encode_bitmap(grid_from_bits(SCENARIO_A_SOLUTION)))

        self.assertEqual((bitmap.width, bitmap.height, bitmap.bits_per_pixel), (5, 5, 24))
        self.assertEqual(bitmap.pixel(0, 0), (0, 0, 0))
        self.assertEqual(bitmap.pixel(0, 2), (255, 255, 255))
        self.assertEqual(bitmap.pixel(4, 4), (255, 255, 255))

    def test_decodes_32_bit_pixels(self) -> None:
        data = raw_bitmap(2, 1, 32, [[(10, 20, 30, 255), (200, 200, 200, 0)]], compression=3)
        bitmap = decode_bitmap(data)
        self.assertEqual(bitmap.rows, [[(10, 20, 30, 255), (200, 200, 200, 0)]])

    def test_negative_height_is_top_down(self) -> None:
        data = raw_bitmap(1, -2, 24, [[(0, 0, 0)], [(255, 255, 255)]])
        bitmap = decode_bitmap(data)
        self.assertEqual(bitmap.height, 2)
        self.assertEqual(bitmap.rows, [[(0, 0, 0)], [(255, 255, 255)]])

    def test_malformed_files_raise_format_error(self) -> None:
        valid = raw_bitmap(2, 2, 24, [[(0, 0, 0)] * 2] * 2)
        broken = {
            "truncated header": valid[:20],
            "bad signature": b"XX" + valid[2:],
            "unsupported depth": valid[:28] + struct.pack("<H", 8) + valid[30:],
            "unsupported compression": valid[:30] + struct.pack("<I", 1) + valid[34:],
            "truncated pixels": valid[:-3],
        }
        for name, data in broken.items():
            with self.subTest(name):
                with self.assertRaises(FormatError):
                    decode_bitmap(data)

    def test_read_bitmap_from_disk(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "image.bmp"
            path.write_bytes(raw_bitmap(1, 1, 24, [[(1, 2, 3)]]))
            self.assertEqual(read_bitmap(path).rows, [[(1, 2, 3)]])


class AsciiArtTests(unittest.TestCase):
    def test_ramp_runs_from_space_to_dollar(self) -> None:
        self.assertEqual(len(RAMP), 65)
        self.assertEqual(RAMP[0], " ")
        self.assertEqual(RAMP[-1], "$")

    def test_glyph_scale(self) -> None:
        self.assertEqual(glyph_for(0), " ")
        self.assertEqual(glyph_for(20), ";")
        self.assertEqual(glyph_for(255), "$")

    def test_luminance_ignores_alpha(self) -> None:
        self.assertEqual(luminance((10, 20, 30)), 20)
        self.assertEqual(luminance((10, 20, 30, 255)), 20)

    def test_renders_solved_grid(self) -> None:
        bitmap = decode_bitmap(encode_bitmap(grid_from_bits(SCENARIO_A_SOLUTION)))
        lines = render_ascii(bitmap).split("\n")

        self.assertEqual(len(lines), 5)
        self.assertEqual(lines[0], "  $  ")
        self.assertEqual(lines[4], "    $")

    def test_ascii_art_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "image.bmp"
            path.write_bytes(raw_bitmap(2, 1, 32, [[(10, 20, 30, 255), (255, 255, 255, 0)]]))
            self.assertEqual(ascii_art_file(path), ";$")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
