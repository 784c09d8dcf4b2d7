"""Tests for the PGM raster codec."""

import io
import os
import tempfile
import unittest
from unittest import mock
import numpy as np
from PIL import Image

import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from config.settings import SETTINGS
from codec import (PGMImage, FormatError, TruncatedDataError, decode, encode,
                   decode_bytes, encode_bytes, read_pgm, write_pgm)


class TestPGMImage(unittest.TestCase):
    """Test the in-memory image model."""

    def test_pixels_reshaped_row_major(self):
        """Test flat pixel buffer is stored row-major."""
        image = PGMImage(width=3, height=2, pixels=[1, 2, 3, 4, 5, 6])
        self.assertEqual(image.pixels.shape, (2, 3))
        self.assertEqual(image.pixels[1, 0], 4)
        self.assertEqual(image.flat_pixels[1 * 3 + 2], 6)

    def test_length_mismatch_rejected(self):
        """Test pixel count must equal width times height."""
        with self.assertRaises(ValueError):
            PGMImage(width=3, height=2, pixels=[0] * 5)

    def test_non_positive_dimensions_rejected(self):
        """Test zero width is rejected."""
        with self.assertRaises(ValueError):
            PGMImage(width=0, height=2, pixels=[])

    def test_depth_other_than_255_rejected(self):
        """Test only 8-bit depth is accepted."""
        with self.assertRaises(ValueError):
            PGMImage(width=1, height=1, pixels=[0], max_intensity=65535)

    def test_from_array_range_checked(self):
        """Test from_array rejects out-of-range values and non 2-D arrays."""
        with self.assertRaises(ValueError):
            PGMImage.from_array(np.array([[0, 256]]))
        with self.assertRaises(ValueError):
            PGMImage.from_array(np.zeros((2, 2, 3)))

    def test_pil_conversion(self):
        """Test conversion to and from Pillow grayscale images."""
        pil_image = Image.new('L', (4, 3), 77)
        image = PGMImage.from_pil(pil_image)
        self.assertEqual(image.size, (4, 3))
        self.assertTrue(np.all(image.pixels == 77))
        self.assertEqual(image.to_pil().size, (4, 3))
        self.assertEqual(image.to_pil().mode, 'L')

        with self.assertRaises(ValueError):
            PGMImage.from_pil(Image.new('RGB', (2, 2)))


class TestDecode(unittest.TestCase):
    """Test P5 header parsing and body reading."""

    def test_simple_file(self):
        """Test decoding a minimal P5 file."""
        image = decode_bytes(b"P5\n3 2\n255\n" + bytes([0, 1, 2, 3, 4, 255]))
        self.assertEqual((image.width, image.height, image.max_intensity), (3, 2, 255))
        self.assertEqual(list(image.flat_pixels), [0, 1, 2, 3, 4, 255])

    def test_comments_and_whitespace_in_header(self):
        """Test comments and mixed whitespace between header tokens."""
        data = (b"# leading comment\nP5\n# created by hand\n  2\t# width\n"
                b"2 # height\n#depth next\n255\n" + bytes([9, 8, 7, 6]))
        image = decode_bytes(data)
        self.assertEqual(image.size, (2, 2))
        self.assertEqual(list(image.flat_pixels), [9, 8, 7, 6])

    def test_single_whitespace_terminates_header(self):
        """Test only one byte after maxval belongs to the header."""
        # The body starts with bytes that look like whitespace
        body = bytes([10, 32, 9, 13])
        image = decode_bytes(b"P5 2 2 255\n" + body)
        self.assertEqual(image.tobytes(), body)

    def test_trailing_bytes_ignored(self):
        """Test bytes after the pixel body are ignored."""
        image = decode_bytes(b"P5\n1 1\n255\n" + b"\x05extra")
        self.assertEqual(list(image.flat_pixels), [5])

    def test_wrong_magic(self):
        """Test non-P5 streams raise FormatError."""
        for data in (b"P2\n1 1\n255\n0", b"P6\n1 1\n255\n\x00\x00\x00", b"GIF89a"):
            with self.assertRaises(FormatError) as ctx:
                decode_bytes(data)
            self.assertEqual(str(ctx.exception), "unsupported format")

    def test_unsupported_depth(self):
        """Test maxval other than 255 raises FormatError."""
        for max_value in (b"1", b"65535", b"254"):
            with self.assertRaises(FormatError) as ctx:
                decode_bytes(b"P5\n1 1\n" + max_value + b"\n\x00\x00")
            self.assertEqual(str(ctx.exception), "unsupported depth")

    def test_non_numeric_field(self):
        """Test header field without digits raises FormatError."""
        with self.assertRaises(FormatError):
            decode_bytes(b"P5\nabc 1\n255\n\x00")

    def test_zero_dimensions(self):
        """Test zero width raises FormatError."""
        with self.assertRaises(FormatError):
            decode_bytes(b"P5\n0 4\n255\n")

    def test_truncated_body(self):
        """Test short pixel body raises TruncatedDataError."""
        with self.assertRaises(TruncatedDataError):
            decode_bytes(b"P5\n4 4\n255\n" + bytes(10))

    def test_truncated_body_is_os_error(self):
        """Test short pixel body is an OSError."""
        with self.assertRaises(OSError):
            decode_bytes(b"P5\n2 2\n255\n\x00")

    def test_eof_in_header(self):
        """Test end of file inside the header raises TruncatedDataError."""
        with self.assertRaises(TruncatedDataError):
            decode_bytes(b"P5\n4 ")

    def test_oversized_header_with_short_body(self):
        """Test huge declared dimensions with a short body raise OSError."""
        with tempfile.TemporaryDirectory() as tmp_dir:
            for dimension in (b"3000000000", b"99999999999"):
                path = os.path.join(tmp_dir, "huge.pgm")
                with open(path, 'wb') as f:
                    f.write(b"P5\n" + dimension + b" " + dimension + b"\n255\n" + bytes(4))
                with self.assertRaises(OSError):
                    read_pgm(path)

    def test_body_read_in_chunks(self):
        """Test pixel body spanning several read chunks."""
        pixels = np.arange(5000, dtype=np.uint32).astype(np.uint8).reshape(50, 100)
        data = encode_bytes(PGMImage.from_array(pixels))
        with mock.patch.object(SETTINGS["codec"], "READ_CHUNK_SIZE", 64):
            image = decode_bytes(data)
            with self.assertRaises(TruncatedDataError):
                decode_bytes(data[:-1])
        np.testing.assert_array_equal(image.pixels, pixels)


class TestEncode(unittest.TestCase):
    """Test P5 serialization."""

    def test_exact_layout(self):
        """Test encoded header and body layout."""
        image = PGMImage(width=2, height=3, pixels=[1, 2, 3, 4, 5, 6])
        self.assertEqual(encode_bytes(image), b"P5\n2 3\n255\n\x01\x02\x03\x04\x05\x06")

    def test_encode_to_stream(self):
        """Test encoding into a caller-supplied stream."""
        stream = io.BytesIO()
        encode(PGMImage(width=1, height=1, pixels=[200]), stream)
        self.assertEqual(stream.getvalue(), b"P5\n1 1\n255\n\xc8")

    def test_round_trip(self):
        """Test encoded image decodes back to an equal image."""
        rng = np.random.default_rng(7)
        original = PGMImage.from_array(rng.integers(0, 256, (17, 23), dtype=np.uint8))
        decoded = decode(io.BytesIO(encode_bytes(original)))
        self.assertEqual(decoded, original)
        self.assertEqual(decoded.max_intensity, 255)

    def test_header_normalized(self):
        """Test re-encoding writes the canonical header."""
        data = b"P5 # c\n3   1\n255\n" + bytes([1, 2, 3])
        self.assertEqual(encode_bytes(decode_bytes(data)), b"P5\n3 1\n255\n\x01\x02\x03")

    def test_file_round_trip(self):
        """Test write_pgm and read_pgm round trip through disk."""
        image = PGMImage.from_array(np.arange(12, dtype=np.uint8).reshape(3, 4))
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = os.path.join(tmp_dir, "image.pgm")
            write_pgm(image, path)
            self.assertEqual(read_pgm(path), image)

    def test_missing_file(self):
        """Test reading a missing file raises OSError."""
        with self.assertRaises(OSError):
            read_pgm(os.path.join(tempfile.gettempdir(), "does-not-exist.pgm"))


if __name__ == '__main__':
    unittest.main()
