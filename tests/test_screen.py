"""
Unit tests for screen.py

Tests decoding of the 12-bit packed StarBook framebuffer and image export.
"""

import tempfile
import unittest
from pathlib import Path

import numpy as np
from PIL import Image

from starbook.api.core.constants import FRAMEBUFFER_SIZE
from starbook.api.core.exceptions import UnsupportedFormatError
from starbook.api.telescope.screen import (
    decode_framebuffer,
    placeholder_screen,
    save_screen,
    unpack_framebuffer,
)


class TestUnpackFramebuffer(unittest.TestCase):
    """Test suite for framebuffer unpacking"""

    def test_zero_buffer(self):
        """Test an all-zero buffer gives a black raster"""
        raster = unpack_framebuffer(bytes(FRAMEBUFFER_SIZE))
        self.assertEqual(raster.shape, (240, 320, 3))
        self.assertEqual(raster.dtype, np.uint8)
        self.assertFalse(raster.any())

    def test_nibble_layout(self):
        """Test the first triplet expands to the first two pixels"""
        raw = bytearray(FRAMEBUFFER_SIZE)
        raw[0:3] = b"\x21\x43\x65"
        raster = unpack_framebuffer(bytes(raw))
        self.assertEqual(tuple(raster[0, 0]), (0x10, 0x20, 0x30))
        self.assertEqual(tuple(raster[0, 1]), (0x40, 0x50, 0x60))
        self.assertFalse(raster[0, 2:].any())

    def test_all_ones(self):
        """Test 0xFF bytes give the brightest 12-bit white"""
        raster = unpack_framebuffer(b"\xff" * FRAMEBUFFER_SIZE)
        self.assertTrue((raster == 0xF0).all())

    def test_row_major_order(self):
        """Test the second row starts after 480 bytes"""
        raw = bytearray(FRAMEBUFFER_SIZE)
        raw[480:483] = b"\x0f\x00\x00"
        raster = unpack_framebuffer(bytes(raw))
        self.assertEqual(tuple(raster[1, 0]), (0xF0, 0, 0))
        self.assertFalse(raster[0].any())

    def test_wrong_length(self):
        """Test a short buffer is rejected"""
        with self.assertRaises(UnsupportedFormatError):
            unpack_framebuffer(bytes(FRAMEBUFFER_SIZE - 3))


class TestDecodeFramebuffer(unittest.TestCase):
    """Test suite for the non-raising decoder"""

    def test_wrong_length_gives_none(self):
        """Test bad input gives None instead of raising"""
        with self.assertLogs("starbook.api.telescope.screen", level="WARNING"):
            self.assertIsNone(decode_framebuffer(b"<html>busy</html>"))

    def test_valid_buffer(self):
        """Test a valid buffer decodes"""
        self.assertEqual(decode_framebuffer(bytes(FRAMEBUFFER_SIZE)).shape, (240, 320, 3))


class TestSaveScreen(unittest.TestCase):
    """Test suite for image export"""

    def setUp(self):
        """Create a scratch directory"""
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def test_save_png(self):
        """Test a raster is written as a 320x240 PNG"""
        raster = placeholder_screen()
        raster[0, 0] = (0xF0, 0x10, 0x20)
        written = save_screen(raster, Path(self.tmp.name) / "screen.png")
        with Image.open(written) as image:
            self.assertEqual(image.size, (320, 240))
            self.assertEqual(image.getpixel((0, 0)), (0xF0, 0x10, 0x20))

    def test_suffix_added(self):
        """Test .png is added when the path has no extension"""
        written = save_screen(placeholder_screen(), Path(self.tmp.name) / "capture")
        self.assertEqual(written.suffix, ".png")
        self.assertTrue(written.exists())


if __name__ == "__main__":
    unittest.main()
