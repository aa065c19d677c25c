"""
Smart Palette Schemas
Pydantic models for color values, palettes, history records and API bodies.
"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from smart_palette.utils.ids import generate_palette_id


# ============================================================================
# COLOR VALUES
# ============================================================================

class RGB(BaseModel):
    """Red/green/blue channels as bytes."""
    model_config = ConfigDict(frozen=True)

    r: int = Field(..., ge=0, le=255)
    g: int = Field(..., ge=0, le=255)
    b: int = Field(..., ge=0, le=255)

    def as_tuple(self):
        return (self.r, self.g, self.b)


class HSL(BaseModel):
    """Hue in degrees, saturation and lightness in integer percent."""
    model_config = ConfigDict(frozen=True)

    h: int = Field(..., ge=0, lt=360)
    s: int = Field(..., ge=0, le=100)
    l: int = Field(..., ge=0, le=100)

    def as_tuple(self):
        return (self.h, self.s, self.l)


class ColorSample(BaseModel):
    """A single extracted or derived color."""
    model_config = ConfigDict(frozen=True)

    hex: str = Field(
        ...,
        pattern=r"^#[0-9a-f]{6}$",
        description="Canonical lowercase hex color in format #rrggbb"
    )
    rgb: RGB
    hsl: HSL
    name: Optional[str] = Field(None, description="Optional display name")


class Palette(BaseModel):
    """An ordered, named color list; order drives export order."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=generate_palette_id, min_length=1)
    name: str = Field(..., description="Display name, also used for export identifiers")
    colors: List[ColorSample] = Field(default_factory=list)
    harmony: str = Field("custom", description="Harmony kind or palette category")
    created_at: Optional[str] = Field(
        None,
        alias="createdAt",
        description="ISO-8601 creation timestamp"
    )


class ImageHistoryItem(BaseModel):
    """A previously analyzed image."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    timestamp: datetime
    palette_count: int = Field(..., ge=0)
    dominant_colors: List[str] = Field(default_factory=list)
    image_data: str = Field("", description="Base64-encoded thumbnail or source image")


# ============================================================================
# API BODIES
# ============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("smart-palette", description="Service name")


class ExtractResponse(BaseModel):
    """Result of analyzing an uploaded image."""
    request_id: str
    width: int
    height: int
    ranked: List[ColorSample] = Field(..., description="Frequency-ranked colors")
    palettes: Dict[str, List[ColorSample]] = Field(
        ...,
        description="Categorized palettes: dominant, vibrant, muted, light, dark"
    )
    history_id: Optional[str] = None


class HarmonyRequest(BaseModel):
    """Harmony generation request."""
    base_hex: str = Field(..., pattern=r"^#?[0-9A-Fa-f]{6}$", description="Base color")
    kind: str = Field("complementary", description="Harmony kind")
    name: Optional[str] = Field(None, description="Name for the generated palette")


class HarmonyResponse(BaseModel):
    """Generated harmony palette."""
    kind: str
    palette: Palette


class ValidateColorRequest(BaseModel):
    """Untrusted hex input from a manual entry box."""
    hex: str


class ValidateColorResponse(BaseModel):
    """Result of validating a hex string."""
    valid: bool
    color: Optional[ColorSample] = None
    errors: List[str] = Field(default_factory=list)


class ExportRequest(BaseModel):
    """Export a palette into one of the named formats."""
    format: str = Field(..., description="Exact export format name, e.g. 'CSV Data'")
    palette: Palette


class FormatInfo(BaseModel):
    """Description of one export format."""
    name: str
    mime_type: str
    extension: str
    binary: bool
    supported: bool
