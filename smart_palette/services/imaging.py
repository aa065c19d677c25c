"""
Smart Palette Imaging Utilities
Handles image decoding into RGBA pixel buffers, validation and thumbnails.
"""
import base64
import io

import numpy as np
from fastapi import UploadFile
from loguru import logger
from PIL import Image, UnidentifiedImageError

from smart_palette.config import config
from smart_palette.services.colors.extraction import PixelBuffer


class ImageDecodeError(RuntimeError):
    """An uploaded image could not be read or decoded into pixels."""
    pass


# Magic byte prefixes for supported formats
_MAGIC_BYTES = [
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"BM", "image/bmp"),
]


def validate_magic_bytes(file_bytes: bytes) -> str:
    """
    Validate file magic bytes to ensure it's actually an image.

    Args:
        file_bytes: Raw file bytes

    Returns:
        Detected MIME type

    Raises:
        ImageDecodeError: For truncated or unrecognized files
    """
    if len(file_bytes) < 12:
        raise ImageDecodeError("File too small or corrupt")

    if file_bytes[:4] == b"RIFF" and file_bytes[8:12] == b"WEBP":
        detected = "image/webp"
    else:
        detected = next((mime for prefix, mime in _MAGIC_BYTES if file_bytes.startswith(prefix)), None)

    if detected is None or detected not in config.SUPPORTED_MIME_TYPES:
        raise ImageDecodeError("Invalid image file. Magic bytes don't match supported formats.")
    return detected


def validate_file_size(file_bytes: bytes) -> None:
    """Reject files above the configured upload limit."""
    if len(file_bytes) > config.MAX_FILE_MB * 1024 * 1024:
        raise ImageDecodeError(f"File too large. Maximum size: {config.MAX_FILE_MB}MB")


def decode_image(file_bytes: bytes) -> PixelBuffer:
    """
    Decode image bytes into an RGBA pixel buffer.

    Args:
        file_bytes: Encoded PNG, JPEG, GIF, WEBP or BMP data

    Returns:
        PixelBuffer with row-major RGBA bytes

    Raises:
        ImageDecodeError: For oversized, unrecognized or corrupt images
    """
    validate_file_size(file_bytes)
    mime_type = validate_magic_bytes(file_bytes)

    try:
        with Image.open(io.BytesIO(file_bytes)) as pil_image:
            width, height = pil_image.size
            if width * height > config.MAX_PIXELS:
                raise ImageDecodeError(
                    f"Image too large: {width}×{height} exceeds {config.MAX_PIXELS} pixels"
                )
            rgba = np.array(pil_image.convert("RGBA"), dtype=np.uint8)
    except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as e:
        raise ImageDecodeError(f"Failed to decode image: {e}") from e

    logger.info(f"Decoded {mime_type} image: {width}×{height}")
    return PixelBuffer.from_array(rgba)


async def read_upload(file: UploadFile) -> bytes:
    """
    Read an uploaded file, enforcing the configured size limit.

    Raises:
        ImageDecodeError: If the upload cannot be read or is too large
    """
    try:
        file_bytes = await file.read()
    except OSError as e:
        raise ImageDecodeError(f"Failed to read file: {e}") from e

    validate_file_size(file_bytes)
    return file_bytes


def make_thumbnail_data_url(file_bytes: bytes, max_edge: int = 160) -> str:
    """
    Build a small JPEG data URL for the image history list.

    Raises:
        ImageDecodeError: If the image cannot be decoded
    """
    try:
        with Image.open(io.BytesIO(file_bytes)) as pil_image:
            thumbnail = pil_image.convert("RGB")
            thumbnail.thumbnail((max_edge, max_edge))
            buffer = io.BytesIO()
            thumbnail.save(buffer, format="JPEG", quality=80)
    except (UnidentifiedImageError, OSError) as e:
        raise ImageDecodeError(f"Failed to create thumbnail: {e}") from e

    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/jpeg;base64,{encoded}"
