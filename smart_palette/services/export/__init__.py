"""
Palette export: format registry, text/structured/binary encoders and
swatch image rendering.
"""

from .codec import ExportResult, export_palette, export_palette_async, list_formats
from .formats import ExportFormat, FORMAT_NAMES, parse_format
from .swatches import SwatchRenderError

__all__ = [
    'ExportResult',
    'ExportFormat',
    'FORMAT_NAMES',
    'SwatchRenderError',
    'export_palette',
    'export_palette_async',
    'list_formats',
    'parse_format'
]
