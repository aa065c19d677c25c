"""
Color space conversions between RGB, HEX and HSL.

HSL values are integers: hue in degrees [0, 360), saturation and lightness in
percent [0, 100]. All rounding is round-half-up (``floor(x + 0.5)``), which is
the same as rounding ties away from zero for the non-negative values used here.
Hue values that round up to 360 wrap to 0.
"""

import colorsys
import math
import re
from typing import List, Optional, Tuple

import numpy as np

from smart_palette.schemas import RGB, HSL, ColorSample


_HEX_RE = re.compile(r"#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})", re.IGNORECASE)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties towards +infinity."""
    return int(math.floor(value + 0.5))


def clamp_channel(value) -> int:
    """Clamp a channel value into the byte range."""
    return max(0, min(255, round_half_up(float(value))))


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Convert RGB channels to a lowercase ``#rrggbb`` string."""
    return "#" + "".join(f"{clamp_channel(c):02x}" for c in (r, g, b))


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """
    Convert a hex color string to an RGB tuple.

    Accepts an optional leading ``#`` and exactly six hex digits, in any case.
    Any other shape yields ``(0, 0, 0)``; use :func:`validate_hex` when
    malformed input has to be reported.
    """
    match = _HEX_RE.fullmatch(hex_color) if isinstance(hex_color, str) else None
    if match is None:
        return (0, 0, 0)
    return tuple(int(part, 16) for part in match.groups())


def rgb_to_hsl_array(rgb_u8: np.ndarray) -> np.ndarray:
    """
    Convert an (N, 3) array of RGB bytes to an (N, 3) int array of HSL.

    This is the single HSL implementation; :func:`rgb_to_hsl` delegates to it
    so that per-color and bulk classification always agree.
    """
    rgb = np.asarray(rgb_u8, dtype=np.float64).reshape(-1, 3) / 255.0
    r, g, b = rgb[:, 0], rgb[:, 1], rgb[:, 2]

    mx = rgb.max(axis=1)
    mn = rgb.min(axis=1)
    lightness = (mx + mn) / 2
    delta = mx - mn

    chroma = delta > 0
    safe_delta = np.where(chroma, delta, 1.0)

    # Saturation denominators are only evaluated where chroma exists
    denom = np.where(lightness > 0.5, 2 - mx - mn, mx + mn)
    denom = np.where(chroma, denom, 1.0)
    saturation = np.where(chroma, delta / denom, 0.0)

    r_max = chroma & (mx == r)
    g_max = chroma & ~r_max & (mx == g)
    b_max = chroma & ~r_max & ~g_max

    hue = np.zeros_like(mx)
    hue = np.where(r_max, (g - b) / safe_delta + np.where(g < b, 6.0, 0.0), hue)
    hue = np.where(g_max, (b - r) / safe_delta + 2.0, hue)
    hue = np.where(b_max, (r - g) / safe_delta + 4.0, hue)
    hue = hue / 6

    h = np.floor(hue * 360 + 0.5).astype(np.int64) % 360
    s = np.floor(saturation * 100 + 0.5).astype(np.int64)
    l = np.floor(lightness * 100 + 0.5).astype(np.int64)

    return np.stack([h, s, l], axis=1)


def rgb_to_hsl(r: int, g: int, b: int) -> Tuple[int, int, int]:
    """Convert RGB bytes to integer HSL."""
    rgb = np.array([[clamp_channel(r), clamp_channel(g), clamp_channel(b)]])
    h, s, l = rgb_to_hsl_array(rgb)[0]
    return int(h), int(s), int(l)


def hsl_to_rgb(h: float, s: float, l: float) -> Tuple[int, int, int]:
    """
    Convert HSL (degrees, percent, percent) to RGB bytes.

    Grayscale input short-circuits to ``round(l * 255 / 100)`` on every channel.
    Round-tripping an RGB color through :func:`rgb_to_hsl` and back is exact for
    primaries, secondaries and grays and within one step per channel for most
    colors; integer percent quantization can push arbitrary colors further.
    """
    s_pct = max(0.0, min(100.0, float(s)))
    l_pct = max(0.0, min(100.0, float(l)))

    if s_pct == 0:
        gray = round_half_up(l_pct * 255 / 100)
        return gray, gray, gray

    s = s_pct / 100.0
    l = l_pct / 100.0
    hue = (float(h) % 360) / 360.0
    r, g, b = colorsys.hls_to_rgb(hue, l, s)
    return clamp_channel(r * 255), clamp_channel(g * 255), clamp_channel(b * 255)


def make_color(r: int, g: int, b: int, name: Optional[str] = None) -> ColorSample:
    """Build a ColorSample from RGB bytes."""
    r, g, b = clamp_channel(r), clamp_channel(g), clamp_channel(b)
    h, s, l = rgb_to_hsl(r, g, b)
    return ColorSample(
        hex=rgb_to_hex(r, g, b),
        rgb=RGB(r=r, g=g, b=b),
        hsl=HSL(h=h, s=s, l=l),
        name=name
    )


def color_from_hex(hex_color: str, name: Optional[str] = None) -> ColorSample:
    """Build a ColorSample from a hex string (malformed input yields black)."""
    return make_color(*hex_to_rgb(hex_color), name=name)


def color_from_hsl(h: int, s: int, l: int) -> ColorSample:
    """
    Build a ColorSample from HSL, keeping the given HSL values verbatim.

    Derived harmony colors carry the HSL they were generated from rather than
    the HSL recomputed from their rounded RGB.
    """
    h = int(h) % 360
    s = max(0, min(100, int(s)))
    l = max(0, min(100, int(l)))
    r, g, b = hsl_to_rgb(h, s, l)
    return ColorSample(
        hex=rgb_to_hex(r, g, b),
        rgb=RGB(r=r, g=g, b=b),
        hsl=HSL(h=h, s=s, l=l)
    )


class ValidationResult:
    """Result of validating untrusted color input."""

    def __init__(self, is_valid: bool, color: Optional[ColorSample] = None, errors: List[str] = None):
        self.is_valid = is_valid
        self.color = color
        self.errors = errors or []

    def __bool__(self):
        return self.is_valid


def validate_hex(text: str) -> ValidationResult:
    """
    Validate a manually entered hex color.

    Surrounding whitespace is ignored; the leading ``#`` is optional. Shorthand
    three-digit forms are rejected.
    """
    if text is None or not str(text).strip():
        return ValidationResult(False, None, ["Color hex is required"])

    candidate = str(text).strip()
    if _HEX_RE.fullmatch(candidate) is None:
        return ValidationResult(False, None, [f"Invalid hex color format: {candidate}"])

    return ValidationResult(True, color_from_hex(candidate))
