"""
Smart Palette Analysis Orchestrator

Coordinates the image pipeline: decode → ranked extraction → classification
pool → categorization, and records the analyzed image in history when a
history store is supplied.
"""
from dataclasses import dataclass
from typing import List, Optional

from loguru import logger

from smart_palette.schemas import ColorSample, ImageHistoryItem
from smart_palette.services.colors.categorize import CategorizedPalettes, categorize
from smart_palette.services.colors.extraction import PixelBuffer, build_classification_pool, extract_colors
from smart_palette.services.imaging import decode_image, make_thumbnail_data_url
from smart_palette.services.storage import ImageHistoryStore
from smart_palette.utils.ids import generate_request_id
from smart_palette.utils.metrics import get_metrics, performance_monitor


@dataclass(frozen=True)
class AnalysisResult:
    """Everything extracted from one image."""
    request_id: str
    width: int
    height: int
    ranked: List[ColorSample]
    palettes: CategorizedPalettes
    history_item: Optional[ImageHistoryItem] = None


def analyze_buffer(buffer: PixelBuffer, request_id: Optional[str] = None) -> AnalysisResult:
    """Run ranked extraction and categorization over a decoded buffer."""
    request_id = request_id or generate_request_id("extract")

    with performance_monitor("extraction", request_id=request_id):
        ranked = extract_colors(buffer)

    with performance_monitor("categorization", request_id=request_id):
        palettes = categorize(build_classification_pool(buffer))

    get_metrics().increment_extraction_count()

    return AnalysisResult(
        request_id=request_id,
        width=buffer.width,
        height=buffer.height,
        ranked=ranked,
        palettes=palettes
    )


def analyze_image(
    file_bytes: bytes,
    name: str = "Uploaded image",
    history: Optional[ImageHistoryStore] = None
) -> AnalysisResult:
    """
    Decode an image and extract its palettes.

    Args:
        file_bytes: Encoded image data
        name: Display name recorded in history
        history: Optional history store to record the image in

    Returns:
        AnalysisResult

    Raises:
        ImageDecodeError: If the image cannot be decoded
    """
    request_id = generate_request_id("extract")
    logger.bind(request_id=request_id).info(f"Starting palette extraction for '{name}'")

    with performance_monitor("decode", request_id=request_id):
        buffer = decode_image(file_bytes)

    result = analyze_buffer(buffer, request_id)

    if history is None:
        return result

    item = history.add(
        name=name,
        palette_count=result.palettes.palette_count(),
        dominant_colors=[color.hex for color in result.palettes.dominant[:5]],
        image_data=make_thumbnail_data_url(file_bytes)
    )
    logger.bind(request_id=request_id).info(f"Recorded image history entry {item.id}")

    return AnalysisResult(
        request_id=result.request_id,
        width=result.width,
        height=result.height,
        ranked=result.ranked,
        palettes=result.palettes,
        history_item=item
    )
