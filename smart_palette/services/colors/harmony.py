"""
Color Harmony Generator

Derives related colors from one base color by rotating hue around the color
wheel or, for monochromatic palettes, by stepping lightness. Saturation is
always inherited from the base color.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from loguru import logger

from smart_palette.schemas import ColorSample, Palette
from smart_palette.utils.ids import generate_palette_id
from .colorspace import color_from_hsl


class HarmonyKind(str, Enum):
    """Supported harmony kinds."""
    COMPLEMENTARY = "complementary"
    TRIADIC = "triadic"
    ANALOGOUS = "analogous"
    MONOCHROMATIC = "monochromatic"
    TETRADIC = "tetradic"


# Hue offsets in degrees for the rotation-based kinds
HUE_OFFSETS = {
    HarmonyKind.COMPLEMENTARY: [180],
    HarmonyKind.TRIADIC: [120, 240],
    HarmonyKind.ANALOGOUS: [30, 60, 90, 120],
    HarmonyKind.TETRADIC: [90, 180, 270],
}

MONOCHROMATIC_STEPS = [15, 30, 45, 60]
MONOCHROMATIC_MIN_L = 10
MONOCHROMATIC_MAX_L = 90

HARMONY_KINDS = [kind.value for kind in HarmonyKind]


def parse_harmony_kind(kind) -> Optional[HarmonyKind]:
    """Map a kind name to HarmonyKind, or None when it is not recognized."""
    if isinstance(kind, HarmonyKind):
        return kind
    try:
        return HarmonyKind(kind)
    except ValueError:
        return None


def rotate_hue(h: int, degrees: int) -> int:
    """
    Rotate hue by specified degrees.

    Args:
        h: Original hue in degrees
        degrees: Rotation in degrees (can be negative)

    Returns:
        Rotated hue in [0, 360)
    """
    return (h + degrees) % 360


def clamp_lightness(l: int) -> int:
    """Keep monochromatic steps inside the usable lightness band."""
    return max(MONOCHROMATIC_MIN_L, min(MONOCHROMATIC_MAX_L, l))


def generate_harmony(base: ColorSample, kind) -> List[ColorSample]:
    """
    Generate a harmony palette for a base color.

    Args:
        base: Base color, always returned first
        kind: HarmonyKind or its string value

    Returns:
        Base color followed by the derived colors. An unrecognized kind
        yields ``[base]`` and logs a warning instead of raising.
    """
    harmony_kind = parse_harmony_kind(kind)
    if harmony_kind is None:
        logger.warning(f"Unsupported harmony kind '{kind}', returning base color only")
        return [base]

    h, s, l = base.hsl.as_tuple()
    colors = [base]

    if harmony_kind is HarmonyKind.MONOCHROMATIC:
        for step in MONOCHROMATIC_STEPS:
            colors.append(color_from_hsl(h, s, clamp_lightness(l + step)))
    else:
        for offset in HUE_OFFSETS[harmony_kind]:
            colors.append(color_from_hsl(rotate_hue(h, offset), s, l))

    logger.debug(f"Generated {harmony_kind.value} harmony from {base.hex}: {[c.hex for c in colors]}")
    return colors


def harmony_palette(base: ColorSample, kind, name: Optional[str] = None) -> Palette:
    """Build a new Palette value holding the harmony for ``base``."""
    kind_name = kind.value if isinstance(kind, HarmonyKind) else str(kind)
    return Palette(
        id=generate_palette_id(),
        name=name or f"{kind_name} Palette",
        colors=generate_harmony(base, kind),
        harmony=kind_name,
        created_at=datetime.now(timezone.utc).isoformat()
    )
