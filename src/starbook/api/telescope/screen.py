"""
StarBook Screen Decoding

The controller exposes its 320x240 display as ``getscreen.bin``: 12-bit
packed RGB, three bytes per pair of pixels, row-major. For each byte triplet
(W0, W1, W2) the nibbles are laid out as:

    even pixel: R = W0 low,  G = W0 high, B = W1 low
    odd pixel:  R = W1 high, G = W2 low,  B = W2 high

Each 4-bit channel is expanded to 8 bits by placing it in the high nibble.
"""

from __future__ import annotations

import logging
from pathlib import Path

import deal
import numpy as np
import numpy.typing as npt
from PIL import Image

from starbook.api.core.constants import FRAMEBUFFER_SIZE, SCREEN_HEIGHT, SCREEN_WIDTH
from starbook.api.core.exceptions import UnsupportedFormatError


__all__ = [
    "Raster",
    "decode_framebuffer",
    "placeholder_screen",
    "save_screen",
    "unpack_framebuffer",
]


logger = logging.getLogger(__name__)


Raster = npt.NDArray[np.uint8]
"""Decoded screen image, shape (240, 320, 3)."""


@deal.raises(UnsupportedFormatError)
@deal.post(lambda result: result.shape == (SCREEN_HEIGHT, SCREEN_WIDTH, 3), message="Raster must be 240x320 RGB")
def unpack_framebuffer(raw: bytes) -> Raster:
    """
    Unpack a raw 12-bit framebuffer into an RGB raster.

    Args:
        raw: Exactly 115200 bytes as returned by ``getscreen.bin``

    Returns:
        uint8 array of shape (240, 320, 3)

    Raises:
        UnsupportedFormatError: If the buffer does not have the expected size
    """
    if len(raw) != FRAMEBUFFER_SIZE:
        raise UnsupportedFormatError(f"Framebuffer must be {FRAMEBUFFER_SIZE} bytes, got {len(raw)}")

    triplets = np.frombuffer(raw, dtype=np.uint8).reshape(-1, 3)
    w0, w1, w2 = triplets[:, 0], triplets[:, 1], triplets[:, 2]

    pixels = np.empty((triplets.shape[0], 2, 3), dtype=np.uint8)
    # Even pixel
    pixels[:, 0, 0] = (w0 & 0x0F) << 4
    pixels[:, 0, 1] = w0 & 0xF0
    pixels[:, 0, 2] = (w1 & 0x0F) << 4
    # Odd pixel
    pixels[:, 1, 0] = w1 & 0xF0
    pixels[:, 1, 1] = (w2 & 0x0F) << 4
    pixels[:, 1, 2] = w2 & 0xF0

    return pixels.reshape(SCREEN_HEIGHT, SCREEN_WIDTH, 3)


def decode_framebuffer(raw: bytes) -> Raster | None:
    """
    Decode a framebuffer, returning None instead of raising on bad input.

    Args:
        raw: Bytes received from the device

    Returns:
        RGB raster, or None if the buffer could not be decoded
    """
    try:
        return unpack_framebuffer(raw)
    except UnsupportedFormatError as e:
        logger.warning(f"Could not decode StarBook screen: {e}")
        return None


def placeholder_screen() -> Raster:
    """Blank raster for views that need an image when the device gives none."""
    return np.zeros((SCREEN_HEIGHT, SCREEN_WIDTH, 3), dtype=np.uint8)


@deal.pre(lambda raster, path: raster.ndim == 3 and raster.shape[2] == 3, message="Raster must be RGB")  # type: ignore[misc,arg-type]
def save_screen(raster: Raster, path: str | Path) -> Path:
    """
    Write a raster to disk; the format follows the file extension (PNG by default).

    Args:
        raster: RGB raster from :func:`unpack_framebuffer`
        path: Destination file

    Returns:
        Path written
    """
    destination = Path(path)
    if not destination.suffix:
        destination = destination.with_suffix(".png")
    Image.fromarray(raster).save(destination)
    logger.info(f"Saved StarBook screen to {destination}")
    return destination
