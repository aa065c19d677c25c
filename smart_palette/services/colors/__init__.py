"""
Smart Palette Colors Module

Provides color space conversions, frequency-ranked color extraction,
HSL-based palette categorization and color harmony generation.
"""

__version__ = "1.0.0"
