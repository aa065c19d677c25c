"""
Export format registry.

The set of export formats is closed: every recognized name maps to exactly one
encoder and one (MIME type, file extension) pair. Names are matched exactly,
never by substring.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class ExportFormat(str, Enum):
    """Recognized export format identifiers."""
    # Design software
    ADOBE_ASE = "Adobe ASE"
    ADOBE_ACO = "Adobe ACO"
    FIGMA_JSON = "Figma JSON"
    SKETCH_PALETTE = "Sketch Palette"
    GIMP_GPL = "GIMP GPL"
    CORELDRAW_CPL = "CorelDRAW CPL"
    PROCREATE = "Procreate"
    ADOBE_ILLUSTRATOR_AI = "Adobe Illustrator AI"
    # Web development
    CSS_CUSTOM_PROPERTIES = "CSS Custom Properties"
    SCSS_VARIABLES = "SCSS/SASS Variables"
    TAILWIND_CONFIG = "Tailwind CSS Config"
    BOOTSTRAP_THEME = "Bootstrap Theme"
    MATERIAL_JSON = "Material Design JSON"
    CSS_CLASSES = "CSS Classes"
    # Programming & API
    JSON_OBJECT = "JSON Object"
    JAVASCRIPT_ARRAY = "JavaScript Array"
    PYTHON_DICTIONARY = "Python Dictionary"
    XML_FORMAT = "XML Format"
    # Print & production
    PANTONE_LIST = "Pantone Color List"
    CMYK_CSV = "CMYK Values CSV"
    LAB_VALUES = "LAB Color Values"
    PRINT_PDF = "Print-Ready PDF"
    # Data & documentation
    EXCEL_SPREADSHEET = "Excel Spreadsheet"
    CSV_DATA = "CSV Data"
    PLAIN_TEXT = "Plain Text List"
    # Images
    PNG_IMAGE = "PNG Image"
    JPEG_IMAGE = "JPEG Image"
    SVG_IMAGE = "SVG Image"


@dataclass(frozen=True)
class FormatSpec:
    """Delivery metadata for one format."""
    mime_type: str
    extension: str
    binary: bool = False
    implemented: bool = True


FORMAT_SPECS: Dict[ExportFormat, FormatSpec] = {
    ExportFormat.ADOBE_ASE: FormatSpec("application/octet-stream", "ase", binary=True),
    ExportFormat.ADOBE_ACO: FormatSpec("application/octet-stream", "aco", binary=True),
    ExportFormat.FIGMA_JSON: FormatSpec("application/json", "json"),
    ExportFormat.SKETCH_PALETTE: FormatSpec("application/json", "sketchpalette"),
    ExportFormat.GIMP_GPL: FormatSpec("application/x-gimp-palette", "gpl"),
    ExportFormat.CORELDRAW_CPL: FormatSpec("text/plain", "txt", implemented=False),
    ExportFormat.PROCREATE: FormatSpec("application/zip", "swatches", binary=True),
    ExportFormat.ADOBE_ILLUSTRATOR_AI: FormatSpec("text/plain", "txt", implemented=False),
    ExportFormat.CSS_CUSTOM_PROPERTIES: FormatSpec("text/css", "css"),
    ExportFormat.SCSS_VARIABLES: FormatSpec("text/x-scss", "scss"),
    ExportFormat.TAILWIND_CONFIG: FormatSpec("application/javascript", "js"),
    ExportFormat.BOOTSTRAP_THEME: FormatSpec("text/x-scss", "scss"),
    ExportFormat.MATERIAL_JSON: FormatSpec("application/json", "json"),
    ExportFormat.CSS_CLASSES: FormatSpec("text/css", "css"),
    ExportFormat.JSON_OBJECT: FormatSpec("application/json", "json"),
    ExportFormat.JAVASCRIPT_ARRAY: FormatSpec("application/javascript", "js"),
    ExportFormat.PYTHON_DICTIONARY: FormatSpec("text/x-python", "py"),
    ExportFormat.XML_FORMAT: FormatSpec("application/xml", "xml"),
    ExportFormat.PANTONE_LIST: FormatSpec("text/plain", "txt", implemented=False),
    ExportFormat.CMYK_CSV: FormatSpec("text/csv", "csv"),
    ExportFormat.LAB_VALUES: FormatSpec("text/csv", "csv"),
    ExportFormat.PRINT_PDF: FormatSpec("application/pdf", "pdf", binary=True),
    ExportFormat.EXCEL_SPREADSHEET: FormatSpec("text/csv", "csv"),
    ExportFormat.CSV_DATA: FormatSpec("text/csv", "csv"),
    ExportFormat.PLAIN_TEXT: FormatSpec("text/plain", "txt"),
    ExportFormat.PNG_IMAGE: FormatSpec("image/png", "png", binary=True),
    ExportFormat.JPEG_IMAGE: FormatSpec("image/jpeg", "jpeg", binary=True),
    ExportFormat.SVG_IMAGE: FormatSpec("image/svg+xml", "svg"),
}


FORMAT_NAMES: List[str] = [fmt.value for fmt in ExportFormat]


def parse_format(name) -> Optional[ExportFormat]:
    """Exact lookup of a format name; None when unrecognized."""
    if isinstance(name, ExportFormat):
        return name
    try:
        return ExportFormat(name)
    except ValueError:
        return None


def get_format_spec(fmt: ExportFormat) -> FormatSpec:
    return FORMAT_SPECS[fmt]
