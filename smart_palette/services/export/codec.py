"""
Palette Codec

Serializes a palette into one of the named export formats. Every encoder is a
pure function of the palette's name and colors. Formats that are declared but
not implemented, and names that are not recognized at all, produce an
ExportResult with ``supported=False`` so callers can refuse to deliver the
placeholder text as if it were a real file.
"""

import asyncio
import csv
import io
import json
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Union

from loguru import logger

from smart_palette.schemas import ColorSample, Palette
from smart_palette.services.colors.colorspace import round_half_up
from smart_palette.utils.metrics import get_metrics, performance_monitor
from .binary import encode_aco, encode_ase, encode_procreate, swatch_name
from .formats import ExportFormat, FormatSpec, get_format_spec, parse_format
from .swatches import render_swatch_image, render_swatch_svg


Payload = Union[str, bytes]


@dataclass(frozen=True)
class ExportResult:
    """Encoded palette plus delivery metadata."""
    format_name: str
    payload: Payload
    mime_type: str
    extension: str
    filename: str
    supported: bool = True

    @property
    def is_binary(self) -> bool:
        return isinstance(self.payload, bytes)

    def as_bytes(self) -> bytes:
        """Payload as bytes; text payloads are UTF-8 encoded."""
        if isinstance(self.payload, bytes):
            return self.payload
        return self.payload.encode("utf-8")


# ============================================================================
# NAMING HELPERS
# ============================================================================

def sanitize_name(name: str) -> str:
    """Lowercase a palette name and turn each whitespace character into '-'."""
    return re.sub(r"\s", "-", name.lower())


def js_identifier(name: str) -> str:
    """Turn a palette name into a valid JavaScript identifier."""
    identifier = re.sub(r"\s+", "_", name.strip().lower())
    identifier = re.sub(r"[^a-z0-9_$]", "", identifier)
    if not identifier:
        return "palette"
    if identifier[0].isdigit():
        identifier = "_" + identifier
    return identifier


def export_filename(name: str, extension: str) -> str:
    """Download filename: whitespace runs become '-', lowercased."""
    stem = re.sub(r"\s+", "-", name.strip()).lower()
    stem = re.sub(r'[\\/:*?"<>|]', "", stem) or "palette"
    return f"{stem}.{extension}"


def cmyk_percentages(color: ColorSample):
    """
    Naive RGB → CMYK conversion in integer percent.

    ``k = 1 - max(r, g, b)``; the chromatic channels are 0 when ``1 - k`` is 0.
    """
    r, g, b = color.rgb.r / 255, color.rgb.g / 255, color.rgb.b / 255
    k = 1 - max(r, g, b)
    if 1 - k == 0:
        c = m = y = 0.0
    else:
        c = (1 - r - k) / (1 - k)
        m = (1 - g - k) / (1 - k)
        y = (1 - b - k) / (1 - k)
    return tuple(round_half_up(v * 100) for v in (c, m, y, k))


def _csv_text(header: List[str], rows: List[List]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue()


# ============================================================================
# STRUCTURED DATA
# ============================================================================

def encode_figma_json(palette: Palette) -> str:
    colors = [
        {
            "name": swatch_name(color),
            "type": "PAINT",
            "value": {
                "r": color.rgb.r / 255,
                "g": color.rgb.g / 255,
                "b": color.rgb.b / 255,
                "a": 1
            }
        }
        for color in palette.colors
    ]
    return json.dumps(colors, indent=2)


def encode_sketch_palette(palette: Palette) -> str:
    document = {
        "compatibleVersion": "1.0",
        "pluginVersion": "1.0",
        "colors": [
            {
                "red": color.rgb.r / 255,
                "green": color.rgb.g / 255,
                "blue": color.rgb.b / 255,
                "alpha": 1,
                "name": swatch_name(color)
            }
            for color in palette.colors
        ]
    }
    return json.dumps(document, indent=2)


def encode_material_json(palette: Palette) -> str:
    slug = sanitize_name(palette.name)
    return json.dumps({f"{slug}{index}": color.hex for index, color in enumerate(palette.colors)}, indent=2)


def encode_json_object(palette: Palette) -> str:
    return json.dumps([color.model_dump(exclude_none=True) for color in palette.colors], indent=2)


# ============================================================================
# DESIGN TOOL TEXT
# ============================================================================

def encode_gimp_gpl(palette: Palette) -> str:
    lines = ["GIMP Palette", f"Name: {palette.name}", "Columns: 3", "#"]
    for color in palette.colors:
        lines.append(f"{color.rgb.r}\t{color.rgb.g}\t{color.rgb.b}\t{swatch_name(color)}")
    return "\n".join(lines) + "\n"


# ============================================================================
# WEB DEVELOPMENT
# ============================================================================

def encode_css_custom_properties(palette: Palette) -> str:
    slug = sanitize_name(palette.name)
    lines = [":root {"]
    lines.extend(f"  --color-{slug}-{index}: {color.hex};" for index, color in enumerate(palette.colors))
    lines.append("}")
    return "\n".join(lines)


def _scss_lines(palette: Palette) -> List[str]:
    slug = sanitize_name(palette.name)
    return [f"${slug}-{index}: {color.hex};\n" for index, color in enumerate(palette.colors)]


def encode_scss_variables(palette: Palette) -> str:
    return "".join(_scss_lines(palette))


def encode_bootstrap_theme(palette: Palette) -> str:
    return f"// Bootstrap theme variables for {palette.name}\n" + "".join(_scss_lines(palette))


def encode_tailwind_config(palette: Palette) -> str:
    slug = sanitize_name(palette.name).replace("\\", "\\\\").replace("'", "\\'")
    lines = [
        "module.exports = {",
        "  theme: {",
        "    extend: {",
        "      colors: {",
        f"        '{slug}': {{",
    ]
    lines.extend(f"          {index}: '{color.hex}'," for index, color in enumerate(palette.colors))
    lines.extend([
        "        },",
        "      },",
        "    },",
        "  },",
        "};",
    ])
    return "\n".join(lines) + "\n"


def encode_css_classes(palette: Palette) -> str:
    slug = sanitize_name(palette.name)
    return "".join(
        f".color-{slug}-{index} {{\n  background-color: {color.hex};\n}}\n"
        for index, color in enumerate(palette.colors)
    )


# ============================================================================
# PROGRAMMING & API
# ============================================================================

def encode_javascript_array(palette: Palette) -> str:
    hexes = json.dumps([color.hex for color in palette.colors], indent=2)
    return f"const {js_identifier(palette.name)} = {hexes};"


def encode_python_dictionary(palette: Palette) -> str:
    lines = ["{"]
    lines.extend(f"    {json.dumps(swatch_name(color))}: {json.dumps(color.hex)}," for color in palette.colors)
    lines.append("}")
    return "\n".join(lines)


def encode_xml(palette: Palette) -> str:
    lines = ["<palette>"]
    lines.extend(
        f'  <color hex="{color.hex}" r="{color.rgb.r}" g="{color.rgb.g}" b="{color.rgb.b}" />'
        for color in palette.colors
    )
    lines.append("</palette>")
    return "\n".join(lines)


# ============================================================================
# TABULAR
# ============================================================================

def encode_cmyk_csv(palette: Palette) -> str:
    rows = []
    for color in palette.colors:
        c, m, y, k = cmyk_percentages(color)
        rows.append([color.hex, color.rgb.r, color.rgb.g, color.rgb.b, c, m, y, k])
    return _csv_text(["Hex", "R", "G", "B", "C", "M", "Y", "K"], rows)


def encode_lab_values(palette: Palette) -> str:
    # L, a, b are zero-filled: no CIE LAB conversion is performed
    rows = [[color.hex, color.rgb.r, color.rgb.g, color.rgb.b, 0, 0, 0] for color in palette.colors]
    return _csv_text(["Hex", "R", "G", "B", "L", "A", "B"], rows)


def encode_csv_data(palette: Palette) -> str:
    rows = [[color.hex, color.rgb.r, color.rgb.g, color.rgb.b, color.name or ""] for color in palette.colors]
    return _csv_text(["Hex", "R", "G", "B", "Name"], rows)


def encode_plain_text(palette: Palette) -> str:
    return "".join(
        f"{color.hex} (R:{color.rgb.r}, G:{color.rgb.g}, B:{color.rgb.b})\n"
        for color in palette.colors
    )


# ============================================================================
# DISPATCH
# ============================================================================

ENCODERS: Dict[ExportFormat, Callable[[Palette], Payload]] = {
    ExportFormat.ADOBE_ASE: lambda palette: encode_ase(palette.colors),
    ExportFormat.ADOBE_ACO: lambda palette: encode_aco(palette.colors),
    ExportFormat.FIGMA_JSON: encode_figma_json,
    ExportFormat.SKETCH_PALETTE: encode_sketch_palette,
    ExportFormat.GIMP_GPL: encode_gimp_gpl,
    ExportFormat.PROCREATE: lambda palette: encode_procreate(palette.name, palette.colors),
    ExportFormat.CSS_CUSTOM_PROPERTIES: encode_css_custom_properties,
    ExportFormat.SCSS_VARIABLES: encode_scss_variables,
    ExportFormat.TAILWIND_CONFIG: encode_tailwind_config,
    ExportFormat.BOOTSTRAP_THEME: encode_bootstrap_theme,
    ExportFormat.MATERIAL_JSON: encode_material_json,
    ExportFormat.CSS_CLASSES: encode_css_classes,
    ExportFormat.JSON_OBJECT: encode_json_object,
    ExportFormat.JAVASCRIPT_ARRAY: encode_javascript_array,
    ExportFormat.PYTHON_DICTIONARY: encode_python_dictionary,
    ExportFormat.XML_FORMAT: encode_xml,
    ExportFormat.CMYK_CSV: encode_cmyk_csv,
    ExportFormat.LAB_VALUES: encode_lab_values,
    ExportFormat.PRINT_PDF: lambda palette: render_swatch_image(palette.colors, "pdf"),
    ExportFormat.EXCEL_SPREADSHEET: encode_csv_data,
    ExportFormat.CSV_DATA: encode_csv_data,
    ExportFormat.PLAIN_TEXT: encode_plain_text,
    ExportFormat.PNG_IMAGE: lambda palette: render_swatch_image(palette.colors, "png"),
    ExportFormat.JPEG_IMAGE: lambda palette: render_swatch_image(palette.colors, "jpeg"),
    ExportFormat.SVG_IMAGE: lambda palette: render_swatch_svg(palette.colors),
}


def is_supported(fmt: ExportFormat) -> bool:
    return get_format_spec(fmt).implemented and fmt in ENCODERS


def export_palette(palette: Palette, format_name) -> ExportResult:
    """
    Encode a palette into the named format.

    Args:
        palette: Palette to encode; only ``name`` and ``colors`` are read
        format_name: ExportFormat or its exact display name

    Returns:
        ExportResult. Unknown names give ``supported=False`` with the payload
        ``Unsupported format: <name>``; declared but unimplemented formats give
        ``supported=False`` with a placeholder note.

    Raises:
        SwatchRenderError: Raster formats only, when drawing or encoding fails
    """
    metrics = get_metrics()
    fmt = parse_format(format_name)

    if fmt is None:
        logger.warning(f"Unsupported export format requested: {format_name}")
        metrics.increment_unsupported_count("export")
        return ExportResult(
            format_name=str(format_name),
            payload=f"Unsupported format: {format_name}",
            mime_type="text/plain",
            extension="txt",
            filename=export_filename(palette.name, "txt"),
            supported=False
        )

    spec: FormatSpec = get_format_spec(fmt)

    if not is_supported(fmt):
        logger.warning(f"Export format '{fmt.value}' is not implemented")
        metrics.increment_unsupported_count("export")
        return ExportResult(
            format_name=fmt.value,
            payload=f"// {fmt.value} export for {palette.name} is not yet implemented.",
            mime_type=spec.mime_type,
            extension=spec.extension,
            filename=export_filename(palette.name, spec.extension),
            supported=False
        )

    with performance_monitor("export", format=fmt.value, colors=len(palette.colors)):
        payload = ENCODERS[fmt](palette)

    metrics.increment_export_count(spec.extension)
    metrics.record_palette_size(len(palette.colors))
    logger.info(f"Exported palette '{palette.name}' as {fmt.value} ({len(palette.colors)} colors)")

    return ExportResult(
        format_name=fmt.value,
        payload=payload,
        mime_type=spec.mime_type,
        extension=spec.extension,
        filename=export_filename(palette.name, spec.extension),
        supported=True
    )


async def export_palette_async(palette: Palette, format_name) -> ExportResult:
    """Run :func:`export_palette` in a worker thread; raster encodes can be slow."""
    return await asyncio.to_thread(export_palette, palette, format_name)


def list_formats() -> List[dict]:
    """Describe every recognized format in declaration order."""
    formats = []
    for fmt in ExportFormat:
        spec = get_format_spec(fmt)
        formats.append({
            "name": fmt.value,
            "mime_type": spec.mime_type,
            "extension": spec.extension,
            "binary": spec.binary,
            "supported": is_supported(fmt)
        })
    return formats
