"""
Unit tests for RGB / HEX / HSL conversions.
"""

import math

import numpy as np
import pytest

from smart_palette.services.colors.colorspace import (
    color_from_hex, color_from_hsl, hex_to_rgb, hsl_to_rgb, make_color,
    rgb_to_hex, rgb_to_hsl, rgb_to_hsl_array, round_half_up, validate_hex
)


class TestRgbToHex:
    """Test RGB to hex conversion"""

    def test_basic_colors(self):
        assert rgb_to_hex(255, 0, 0) == "#ff0000"
        assert rgb_to_hex(0, 0, 0) == "#000000"
        assert rgb_to_hex(255, 255, 255) == "#ffffff"

    def test_zero_padding(self):
        """Single-digit channels are zero padded to two characters"""
        assert rgb_to_hex(1, 2, 3) == "#010203"
        assert len(rgb_to_hex(0, 10, 15)) == 7

    def test_out_of_range_channels_are_clamped(self):
        assert rgb_to_hex(300, -5, 128) == "#ff0080"


class TestHexToRgb:
    """Test hex parsing"""

    def test_with_and_without_hash(self):
        assert hex_to_rgb("#336699") == (51, 102, 153)
        assert hex_to_rgb("336699") == (51, 102, 153)

    def test_case_insensitive(self):
        assert hex_to_rgb("#FF8800") == (255, 136, 0)
        assert hex_to_rgb("#fF8800") == (255, 136, 0)

    @pytest.mark.parametrize("malformed", ["#fff", "#gggggg", "#ff88000", "", "##ff8800", "#ff8800\n", " #ff8800"])
    def test_malformed_input_yields_black(self, malformed):
        assert hex_to_rgb(malformed) == (0, 0, 0)

    def test_non_string_yields_black(self):
        assert hex_to_rgb(None) == (0, 0, 0)

    def test_roundtrip_over_byte_grid(self):
        """hex_to_rgb(rgb_to_hex(c)) is exact for valid byte triples"""
        values = list(range(0, 256, 15)) + [1, 127, 128, 254, 255]
        for r in values:
            for g in values:
                for b in values:
                    assert hex_to_rgb(rgb_to_hex(r, g, b)) == (r, g, b)


class TestRgbToHsl:
    """Test RGB to HSL conversion"""

    @pytest.mark.parametrize("rgb, expected", [
        ((255, 0, 0), (0, 100, 50)),
        ((0, 255, 0), (120, 100, 50)),
        ((0, 0, 255), (240, 100, 50)),
        ((255, 255, 0), (60, 100, 50)),
        ((0, 255, 255), (180, 100, 50)),
        ((255, 0, 255), (300, 100, 50)),
        ((255, 255, 255), (0, 0, 100)),
        ((0, 0, 0), (0, 0, 0)),
        ((128, 128, 128), (0, 0, 50)),
        ((51, 102, 153), (210, 50, 40)),
    ])
    def test_reference_colors(self, rgb, expected):
        assert rgb_to_hsl(*rgb) == expected

    def test_hue_rounding_to_360_wraps(self):
        """A hue of 359.76° rounds to 360 and wraps to 0"""
        h, s, l = rgb_to_hsl(255, 0, 1)
        assert h == 0
        assert (s, l) == (100, 50)

    def test_array_matches_scalar(self):
        rng = np.random.default_rng(7)
        rgb = rng.integers(0, 256, size=(500, 3), dtype=np.uint8)
        bulk = rgb_to_hsl_array(rgb)
        for row, hsl in zip(rgb, bulk):
            assert rgb_to_hsl(*(int(c) for c in row)) == tuple(int(v) for v in hsl)

    def test_ranges(self):
        rng = np.random.default_rng(11)
        hsl = rgb_to_hsl_array(rng.integers(0, 256, size=(2000, 3), dtype=np.uint8))
        assert hsl[:, 0].min() >= 0 and hsl[:, 0].max() < 360
        assert hsl[:, 1].min() >= 0 and hsl[:, 1].max() <= 100
        assert hsl[:, 2].min() >= 0 and hsl[:, 2].max() <= 100


class TestHslToRgb:
    """Test HSL to RGB conversion"""

    @pytest.mark.parametrize("hsl, expected", [
        ((0, 100, 50), (255, 0, 0)),
        ((120, 100, 50), (0, 255, 0)),
        ((240, 100, 50), (0, 0, 255)),
        ((180, 100, 50), (0, 255, 255)),
        ((210, 50, 40), (51, 102, 153)),
    ])
    def test_reference_colors(self, hsl, expected):
        assert hsl_to_rgb(*hsl) == expected

    @pytest.mark.parametrize("l", range(0, 101))
    def test_grayscale_short_circuit(self, l):
        """With s=0 every channel is round(l * 255 / 100), for any hue"""
        gray = int(math.floor(l * 255 / 100 + 0.5))
        assert hsl_to_rgb(0, 0, l) == (gray, gray, gray)
        assert hsl_to_rgb(217, 0, l) == (gray, gray, gray)

    def test_hue_wraps_modulo_360(self):
        assert hsl_to_rgb(360, 100, 50) == hsl_to_rgb(0, 100, 50)
        assert hsl_to_rgb(-120, 100, 50) == hsl_to_rgb(240, 100, 50)

    @pytest.mark.parametrize("hex_color", [
        "#ff0000", "#00ff00", "#0000ff", "#ffff00", "#00ffff", "#ff00ff",
        "#ffffff", "#000000", "#808080", "#336699",
    ])
    def test_roundtrip_within_one_step(self, hex_color):
        """hsl_to_rgb(rgb_to_hsl(c)) stays within ±1 per channel"""
        original = hex_to_rgb(hex_color)
        restored = hsl_to_rgb(*rgb_to_hsl(*original))
        for a, b in zip(original, restored):
            assert abs(a - b) <= 1


class TestRounding:
    """Round-half-up behaviour"""

    def test_ties_round_up(self):
        assert round_half_up(0.5) == 1
        assert round_half_up(127.5) == 128
        assert round_half_up(2.5) == 3

    def test_non_ties(self):
        assert round_half_up(2.49) == 2
        assert round_half_up(2.51) == 3


class TestColorBuilders:
    """Test ColorSample construction"""

    def test_make_color(self):
        color = make_color(255, 0, 0)
        assert color.hex == "#ff0000"
        assert color.rgb.as_tuple() == (255, 0, 0)
        assert color.hsl.as_tuple() == (0, 100, 50)
        assert color.name is None

    def test_color_from_hex_keeps_name(self):
        color = color_from_hex("#336699", name="Steel")
        assert color.name == "Steel"
        assert color.hsl.as_tuple() == (210, 50, 40)

    def test_color_from_hsl_keeps_given_hsl(self):
        color = color_from_hsl(180, 100, 50)
        assert color.hex == "#00ffff"
        assert color.hsl.as_tuple() == (180, 100, 50)

    def test_color_sample_is_immutable(self):
        color = make_color(1, 2, 3)
        with pytest.raises(Exception):
            color.hex = "#000000"


class TestValidateHex:
    """Test boundary validation of manually typed colors"""

    def test_valid_input_is_normalized(self):
        result = validate_hex("  #FF8800 ")
        assert result.is_valid
        assert result.color.hex == "#ff8800"
        assert result.errors == []

    def test_hash_is_optional(self):
        assert validate_hex("336699").color.hex == "#336699"

    @pytest.mark.parametrize("bad", ["#fff", "orange", "#12345g"])
    def test_invalid_input_reports_error(self, bad):
        result = validate_hex(bad)
        assert not result.is_valid
        assert result.color is None
        assert "Invalid hex color format" in result.errors[0]

    def test_empty_input(self):
        result = validate_hex("")
        assert not result
        assert result.errors == ["Color hex is required"]
