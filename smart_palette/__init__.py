"""
Smart Palette

Color extraction, palette categorization, harmony generation and
multi-format palette export.
"""

__version__ = "1.0.0"
