"""
Swatch Strip Rendering

Renders a palette as a horizontal strip of equal square tiles in palette
order: raster variants (PNG, JPEG, PDF) through Pillow and an SVG variant as
plain markup.
"""

import io
from typing import List

from loguru import logger
from PIL import Image

from smart_palette.config import config
from smart_palette.schemas import ColorSample


class SwatchRenderError(RuntimeError):
    """A drawing surface could not be created or encoded."""
    pass


# Pillow save() format names
RASTER_SAVE_FORMATS = {
    "png": "PNG",
    "jpeg": "JPEG",
    "pdf": "PDF",
}


def create_color_chip(color: ColorSample, chip_size: int) -> Image.Image:
    """
    Create a single color chip image.

    Args:
        color: Color to render
        chip_size: Size of the square chip in pixels

    Returns:
        PIL Image of the color chip
    """
    return Image.new("RGB", (chip_size, chip_size), color.rgb.as_tuple())


def create_swatch_strip(colors: List[ColorSample], chip_size: int = None) -> Image.Image:
    """
    Create a horizontal row of touching color chips.

    Raises:
        SwatchRenderError: If there is nothing to draw or the surface fails
    """
    chip_size = chip_size or config.SWATCH_SIZE
    if not colors:
        raise SwatchRenderError("Cannot render a swatch strip without colors")

    try:
        strip = Image.new("RGB", (len(colors) * chip_size, chip_size), (255, 255, 255))
        for index, color in enumerate(colors):
            strip.paste(create_color_chip(color, chip_size), (index * chip_size, 0))
    except (ValueError, MemoryError) as e:
        raise SwatchRenderError(f"Could not create drawing surface: {e}") from e

    return strip


def render_swatch_image(colors: List[ColorSample], image_format: str, chip_size: int = None) -> bytes:
    """
    Render a swatch strip and encode it.

    Args:
        colors: Colors in palette order
        image_format: One of 'png', 'jpeg', 'pdf'
        chip_size: Tile edge in pixels (defaults to ``config.SWATCH_SIZE``)

    Returns:
        Encoded image bytes

    Raises:
        SwatchRenderError: If rendering or encoding fails
    """
    save_format = RASTER_SAVE_FORMATS.get(image_format.lower())
    if save_format is None:
        raise SwatchRenderError(f"Unsupported raster format: {image_format}")

    strip = create_swatch_strip(colors, chip_size)

    buffer = io.BytesIO()
    try:
        if save_format == "PDF":
            strip.save(buffer, format=save_format, resolution=72.0)
        else:
            strip.save(buffer, format=save_format)
    except (OSError, ValueError, KeyError) as e:
        logger.error(f"Failed to encode swatch strip as {save_format}: {e}")
        raise SwatchRenderError(f"Swatch encoding failed: {e}") from e

    data = buffer.getvalue()
    logger.debug(f"Encoded swatch strip {strip.width}×{strip.height} as {save_format}: {len(data)} bytes")
    return data


def render_swatch_svg(colors: List[ColorSample], chip_size: int = None) -> str:
    """Render a swatch strip as SVG markup."""
    chip_size = chip_size or config.SWATCH_SIZE
    lines = [f'<svg width="{len(colors) * chip_size}" height="{chip_size}" xmlns="http://www.w3.org/2000/svg">']
    for index, color in enumerate(colors):
        lines.append(
            f'  <rect x="{index * chip_size}" y="0" width="{chip_size}" height="{chip_size}" fill="{color.hex}" />'
        )
    lines.append("</svg>")
    return "\n".join(lines)
