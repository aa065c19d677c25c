"""
Shared builders for pixel buffers and encoded images.
"""
import io

import numpy as np
from PIL import Image

from smart_palette.services.colors.extraction import PixelBuffer


def make_buffer(pixels):
    """Build a 1-row PixelBuffer from a list of RGBA tuples."""
    rgba = np.array([pixels], dtype=np.uint8)
    return PixelBuffer.from_array(rgba)


def make_png_bytes(rgba: np.ndarray) -> bytes:
    """Encode an (H, W, 4) uint8 array as PNG."""
    buffer = io.BytesIO()
    Image.fromarray(rgba).save(buffer, format="PNG")
    return buffer.getvalue()
