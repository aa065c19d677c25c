"""
Unit tests for the palette codec.
"""

import asyncio
import json

import pytest

from smart_palette.schemas import Palette
from smart_palette.services.colors.colorspace import color_from_hex
from smart_palette.services.export import (
    FORMAT_NAMES, ExportFormat, SwatchRenderError, export_palette, export_palette_async,
    list_formats, parse_format
)
from smart_palette.services.export.codec import (
    cmyk_percentages, export_filename, js_identifier, sanitize_name
)


def steel_palette(name="Steel"):
    return Palette(name=name, colors=[color_from_hex("#336699")])


class TestNamingHelpers:
    """Test identifier and filename derivation"""

    def test_sanitize_name(self):
        assert sanitize_name("Ocean Breeze") == "ocean-breeze"
        assert sanitize_name("Ocean  Breeze") == "ocean--breeze"
        assert sanitize_name("Tab\tName") == "tab-name"

    @pytest.mark.parametrize("name, expected", [
        ("Ocean Breeze", "ocean_breeze"),
        ("2 Tone Mix!", "_2_tone_mix"),
        ("my-palette", "mypalette"),
        ("", "palette"),
        ("   ", "palette"),
    ])
    def test_js_identifier(self, name, expected):
        assert js_identifier(name) == expected

    def test_export_filename(self):
        assert export_filename("Ocean Breeze", "csv") == "ocean-breeze.csv"
        assert export_filename("  a/b  c ", "txt") == "ab-c.txt"
        assert export_filename("", "json") == "palette.json"


class TestCmyk:
    """Test naive RGB → CMYK"""

    @pytest.mark.parametrize("hex_color, expected", [
        ("#ff0000", (0, 100, 100, 0)),
        ("#000000", (0, 0, 0, 100)),
        ("#ffffff", (0, 0, 0, 0)),
        ("#336699", (67, 33, 0, 40)),
    ])
    def test_percentages(self, hex_color, expected):
        assert cmyk_percentages(color_from_hex(hex_color)) == expected


class TestTextFormats:
    """Test the exact text produced by each encoder"""

    def test_csv_data(self, sample_palette):
        result = export_palette(sample_palette, "CSV Data")
        assert result.payload == (
            "Hex,R,G,B,Name\n"
            "#336699,51,102,153,\n"
            "#ff0000,255,0,0,Signal Red\n"
            "#ffffff,255,255,255,\n"
        )
        assert result.mime_type == "text/csv"
        assert result.filename == "ocean-breeze.csv"

    def test_csv_single_color(self):
        payload = export_palette(steel_palette(), "CSV Data").payload
        assert payload.startswith("Hex,R,G,B,Name\n#336699,51,102,153,\n")

    def test_excel_matches_csv(self, sample_palette):
        excel = export_palette(sample_palette, "Excel Spreadsheet")
        assert excel.payload == export_palette(sample_palette, "CSV Data").payload

    def test_css_custom_properties(self, sample_palette):
        assert export_palette(sample_palette, "CSS Custom Properties").payload == (
            ":root {\n"
            "  --color-ocean-breeze-0: #336699;\n"
            "  --color-ocean-breeze-1: #ff0000;\n"
            "  --color-ocean-breeze-2: #ffffff;\n"
            "}"
        )

    def test_scss_variables(self, sample_palette):
        assert export_palette(sample_palette, "SCSS/SASS Variables").payload == (
            "$ocean-breeze-0: #336699;\n"
            "$ocean-breeze-1: #ff0000;\n"
            "$ocean-breeze-2: #ffffff;\n"
        )

    def test_bootstrap_theme(self, sample_palette):
        payload = export_palette(sample_palette, "Bootstrap Theme").payload
        assert payload.startswith("// Bootstrap theme variables for Ocean Breeze\n")
        assert "$ocean-breeze-1: #ff0000;\n" in payload

    def test_tailwind_config(self, sample_palette):
        result = export_palette(sample_palette, "Tailwind CSS Config")
        assert result.payload.startswith("module.exports = {")
        assert "'ocean-breeze': {" in result.payload
        assert "0: '#336699'," in result.payload
        assert "2: '#ffffff'," in result.payload
        assert result.extension == "js"

    def test_css_classes(self, sample_palette):
        payload = export_palette(sample_palette, "CSS Classes").payload
        assert payload.startswith(".color-ocean-breeze-0 {\n  background-color: #336699;\n}\n")
        assert payload.count("background-color") == 3

    def test_gimp_gpl(self, sample_palette):
        lines = export_palette(sample_palette, "GIMP GPL").payload.splitlines()
        assert lines[:4] == ["GIMP Palette", "Name: Ocean Breeze", "Columns: 3", "#"]
        assert lines[4] == "51\t102\t153\t#336699"
        assert lines[5] == "255\t0\t0\tSignal Red"

    def test_javascript_array(self, sample_palette):
        payload = export_palette(sample_palette, "JavaScript Array").payload
        assert payload.startswith("const ocean_breeze = [")
        assert payload.endswith("];")
        assert json.loads(payload[len("const ocean_breeze = "):-1]) == ["#336699", "#ff0000", "#ffffff"]

    def test_python_dictionary(self, sample_palette):
        assert export_palette(sample_palette, "Python Dictionary").payload == (
            "{\n"
            '    "#336699": "#336699",\n'
            '    "Signal Red": "#ff0000",\n'
            '    "#ffffff": "#ffffff",\n'
            "}"
        )

    def test_xml(self, sample_palette):
        payload = export_palette(sample_palette, "XML Format").payload
        assert payload.startswith("<palette>\n")
        assert '  <color hex="#336699" r="51" g="102" b="153" />' in payload
        assert payload.endswith("</palette>")

    def test_cmyk_csv(self, sample_palette):
        lines = export_palette(sample_palette, "CMYK Values CSV").payload.splitlines()
        assert lines[0] == "Hex,R,G,B,C,M,Y,K"
        assert lines[1] == "#336699,51,102,153,67,33,0,40"
        assert lines[2] == "#ff0000,255,0,0,0,100,100,0"

    def test_lab_values_are_zero_filled(self, sample_palette):
        lines = export_palette(sample_palette, "LAB Color Values").payload.splitlines()
        assert lines[0] == "Hex,R,G,B,L,A,B"
        assert lines[1] == "#336699,51,102,153,0,0,0"

    def test_plain_text(self, sample_palette):
        assert export_palette(sample_palette, "Plain Text List").payload == (
            "#336699 (R:51, G:102, B:153)\n"
            "#ff0000 (R:255, G:0, B:0)\n"
            "#ffffff (R:255, G:255, B:255)\n"
        )

    def test_svg_image(self, sample_palette):
        payload = export_palette(sample_palette, "SVG Image").payload
        assert payload.startswith('<svg width="300" height="100"')
        assert payload.count("<rect") == 3


class TestJsonFormats:
    """JSON outputs parse back to the palette's colors"""

    def test_figma(self, sample_palette):
        document = json.loads(export_palette(sample_palette, "Figma JSON").payload)
        assert [entry["name"] for entry in document] == ["#336699", "Signal Red", "#ffffff"]
        assert document[0]["type"] == "PAINT"
        assert document[1]["value"] == {"r": 1.0, "g": 0.0, "b": 0.0, "a": 1}
        assert round(document[0]["value"]["g"] * 255) == 102

    def test_sketch(self, sample_palette):
        document = json.loads(export_palette(sample_palette, "Sketch Palette").payload)
        assert document["compatibleVersion"] == "1.0"
        assert [round(c["blue"] * 255) for c in document["colors"]] == [153, 0, 255]
        assert document["colors"][1]["name"] == "Signal Red"

    def test_json_object(self, sample_palette):
        document = json.loads(export_palette(sample_palette, "JSON Object").payload)
        assert [c["hex"] for c in document] == [c.hex for c in sample_palette.colors]
        assert document[0] == {
            "hex": "#336699",
            "rgb": {"r": 51, "g": 102, "b": 153},
            "hsl": {"h": 210, "s": 50, "l": 40},
        }
        assert document[1]["name"] == "Signal Red"
        assert "name" not in document[2]

    def test_material(self, sample_palette):
        document = json.loads(export_palette(sample_palette, "Material Design JSON").payload)
        assert document == {
            "ocean-breeze0": "#336699",
            "ocean-breeze1": "#ff0000",
            "ocean-breeze2": "#ffffff",
        }


class TestBinaryDispatch:
    """Binary formats are delivered as bytes"""

    @pytest.mark.parametrize("format_name, magic", [
        ("Adobe ASE", b"ASEF"),
        ("Adobe ACO", b"\x00\x01"),
        ("Procreate", b"PK"),
        ("PNG Image", b"\x89PNG"),
        ("JPEG Image", b"\xff\xd8"),
        ("Print-Ready PDF", b"%PDF"),
    ])
    def test_magic_bytes(self, sample_palette, format_name, magic):
        result = export_palette(sample_palette, format_name)
        assert result.supported
        assert result.is_binary
        assert result.payload.startswith(magic)

    def test_as_bytes_encodes_text(self, sample_palette):
        result = export_palette(sample_palette, "Plain Text List")
        assert not result.is_binary
        assert result.as_bytes() == result.payload.encode("utf-8")


class TestUnsupported:
    """Unknown and unimplemented formats"""

    def test_unknown_format(self, sample_palette):
        result = export_palette(sample_palette, "Foo Bar")
        assert result.payload == "Unsupported format: Foo Bar"
        assert not result.supported

    def test_names_match_exactly(self, sample_palette):
        assert not export_palette(sample_palette, "csv data").supported
        assert not export_palette(sample_palette, "JSON").supported

    @pytest.mark.parametrize("format_name", ["CorelDRAW CPL", "Adobe Illustrator AI", "Pantone Color List"])
    def test_placeholder_formats(self, sample_palette, format_name):
        result = export_palette(sample_palette, format_name)
        assert not result.supported
        assert result.payload == f"// {format_name} export for Ocean Breeze is not yet implemented."

    def test_empty_palette_raster_fails(self):
        with pytest.raises(SwatchRenderError):
            export_palette(Palette(name="Empty", colors=[]), "PNG Image")

    def test_empty_palette_text(self):
        assert export_palette(Palette(name="Empty", colors=[]), "CSV Data").payload == "Hex,R,G,B,Name\n"


class TestRegistry:
    """Test format listing and lookup"""

    def test_format_names(self):
        assert len(FORMAT_NAMES) == 28
        assert len(set(FORMAT_NAMES)) == 28

    def test_parse_format(self):
        assert parse_format("Adobe ASE") is ExportFormat.ADOBE_ASE
        assert parse_format(ExportFormat.CSV_DATA) is ExportFormat.CSV_DATA
        assert parse_format("Adobe") is None

    def test_list_formats(self):
        formats = list_formats()
        assert [f["name"] for f in formats] == FORMAT_NAMES
        unsupported = {f["name"] for f in formats if not f["supported"]}
        assert unsupported == {"CorelDRAW CPL", "Adobe Illustrator AI", "Pantone Color List"}

    @pytest.mark.parametrize("format_name", FORMAT_NAMES)
    def test_every_format_produces_output(self, sample_palette, format_name):
        result = export_palette(sample_palette, format_name)
        assert result.payload
        assert result.filename.startswith("ocean-breeze.")

    def test_deterministic(self, sample_palette):
        for format_name in ["Adobe ASE", "Procreate", "JSON Object", "Tailwind CSS Config"]:
            first = export_palette(sample_palette, format_name).payload
            assert export_palette(sample_palette, format_name).payload == first


class TestAsyncExport:

    def test_async_export_matches_sync(self, sample_palette):
        result = asyncio.run(export_palette_async(sample_palette, "CSV Data"))
        assert result.payload == export_palette(sample_palette, "CSV Data").payload
