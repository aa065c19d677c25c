"""
Binary palette encoders.

Adobe Swatch Exchange (.ase), Adobe Color Swatch (.aco) and Procreate
(.swatches) archives. ASE and ACO are big-endian throughout; readers validate
block lengths strictly, so every length field is computed from the encoded
payload rather than assumed.
"""

import colorsys
import io
import json
import struct
import zipfile
from typing import List

from loguru import logger

from smart_palette.schemas import ColorSample


ASE_SIGNATURE = b"ASEF"
ASE_VERSION = (1, 0)
ASE_BLOCK_COLOR = 0x0001
ASE_COLOR_GLOBAL = 0
ASE_MODEL_RGB = b"RGB "

ACO_COLORSPACE_RGB = 0

PROCREATE_MAX_SWATCHES = 30


def swatch_name(color: ColorSample) -> str:
    """Name written into swatch files; falls back to the hex value."""
    return color.name or color.hex


def _utf16_units(text: str) -> int:
    return len(text.encode("utf-16-be")) // 2


def encode_ase(colors: List[ColorSample]) -> bytes:
    """
    Encode colors as global RGB swatches in Adobe Swatch Exchange format.

    Layout:
        header:  'ASEF', u16 major, u16 minor, u32 block count
        block:   u16 type (0x0001 color entry), u32 block length
        payload: u16 name length in UTF-16 units including the terminator,
                 UTF-16BE name, u16 0 terminator, 4-byte model 'RGB ',
                 3 × f32 channels in [0, 1], u16 color type (0 = global)

    Args:
        colors: Colors in palette order

    Returns:
        ASE file bytes
    """
    output = io.BytesIO()

    output.write(ASE_SIGNATURE)
    output.write(struct.pack(">HH", *ASE_VERSION))
    output.write(struct.pack(">I", len(colors)))

    for color in colors:
        name = swatch_name(color)
        name_encoded = name.encode("utf-16-be")
        name_length = _utf16_units(name) + 1

        payload = io.BytesIO()
        payload.write(struct.pack(">H", name_length))
        payload.write(name_encoded)
        payload.write(b"\x00\x00")
        payload.write(ASE_MODEL_RGB)
        payload.write(struct.pack(">fff", color.rgb.r / 255, color.rgb.g / 255, color.rgb.b / 255))
        payload.write(struct.pack(">H", ASE_COLOR_GLOBAL))
        block = payload.getvalue()

        output.write(struct.pack(">H", ASE_BLOCK_COLOR))
        output.write(struct.pack(">I", len(block)))
        output.write(block)

    data = output.getvalue()
    logger.debug(f"Encoded ASE with {len(colors)} swatches ({len(data)} bytes)")
    return data


def encode_aco(colors: List[ColorSample]) -> bytes:
    """
    Encode colors as an Adobe Color Swatch file.

    Writes a version 1 section (unnamed) followed by a version 2 section
    carrying swatch names, as Photoshop does. RGB channels are scaled to
    16 bits (``value * 257``).
    """
    output = io.BytesIO()

    def write_color(color: ColorSample):
        output.write(struct.pack(
            ">5H",
            ACO_COLORSPACE_RGB,
            color.rgb.r * 257,
            color.rgb.g * 257,
            color.rgb.b * 257,
            0
        ))

    output.write(struct.pack(">HH", 1, len(colors)))
    for color in colors:
        write_color(color)

    output.write(struct.pack(">HH", 2, len(colors)))
    for color in colors:
        write_color(color)
        name = swatch_name(color)
        output.write(struct.pack(">I", _utf16_units(name) + 1))
        output.write(name.encode("utf-16-be"))
        output.write(b"\x00\x00")

    return output.getvalue()


def encode_procreate(palette_name: str, colors: List[ColorSample]) -> bytes:
    """
    Encode a Procreate ``.swatches`` archive.

    The archive is a zip holding ``Swatches.json``: a one-element list with the
    palette name and up to 30 HSB swatches in [0, 1]. Entry timestamps are
    fixed so identical palettes produce identical bytes.
    """
    if len(colors) > PROCREATE_MAX_SWATCHES:
        logger.warning(
            f"Procreate palettes hold {PROCREATE_MAX_SWATCHES} swatches; "
            f"dropping {len(colors) - PROCREATE_MAX_SWATCHES}"
        )

    swatches = []
    for color in colors[:PROCREATE_MAX_SWATCHES]:
        hue, saturation, brightness = colorsys.rgb_to_hsv(
            color.rgb.r / 255, color.rgb.g / 255, color.rgb.b / 255
        )
        swatches.append({
            "hue": hue,
            "saturation": saturation,
            "brightness": brightness,
            "alpha": 1,
            "colorSpace": 0
        })

    document = [{"name": palette_name, "swatches": swatches}]

    output = io.BytesIO()
    with zipfile.ZipFile(output, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        entry = zipfile.ZipInfo("Swatches.json", date_time=(1980, 1, 1, 0, 0, 0))
        entry.compress_type = zipfile.ZIP_DEFLATED
        archive.writestr(entry, json.dumps(document))

    return output.getvalue()
