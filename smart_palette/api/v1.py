"""
Smart Palette v1 API Routes
Thin HTTP adapter over extraction, harmony, export and persistence.
"""
import asyncio
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile

from smart_palette.schemas import (
    ExportRequest, ExtractResponse, FormatInfo, HarmonyRequest, HarmonyResponse,
    ImageHistoryItem, Palette, ValidateColorRequest, ValidateColorResponse
)
from smart_palette.services.colors.colorspace import color_from_hex, validate_hex
from smart_palette.services.colors.harmony import harmony_palette, parse_harmony_kind, HARMONY_KINDS
from smart_palette.services.export import SwatchRenderError, export_palette_async, list_formats
from smart_palette.services.imaging import ImageDecodeError, read_upload
from smart_palette.services.orchestrator import analyze_image
from smart_palette.services.storage import ImageHistoryStore, PaletteStore, create_stores
from smart_palette.utils.logging import get_logger
from smart_palette.utils.metrics import get_metrics

router = APIRouter(prefix="/v1", tags=["Palettes"])
logger = get_logger()

_stores = None


def _get_stores():
    global _stores
    if _stores is None:
        _stores = create_stores()
    return _stores


def get_palette_store() -> PaletteStore:
    """Dependency providing the saved-palette store."""
    return _get_stores()[0]


def get_history_store() -> ImageHistoryStore:
    """Dependency providing the image history store."""
    return _get_stores()[1]


# ============================================================================
# EXTRACTION
# ============================================================================

@router.post("/extract", response_model=ExtractResponse, summary="Extract palettes from an image")
async def extract(
    file: UploadFile = File(..., description="Image to analyze"),
    record_history: bool = Query(True, description="Record the image in history"),
    history: ImageHistoryStore = Depends(get_history_store)
) -> ExtractResponse:
    """Decode the upload, rank its colors and categorize them."""
    try:
        file_bytes = await read_upload(file)
        result = await asyncio.to_thread(
            analyze_image,
            file_bytes,
            file.filename or "Uploaded image",
            history if record_history else None
        )
    except ImageDecodeError as e:
        get_metrics().increment_failure_count("decode")
        logger.warning("Image decode failed", extra={"filename": file.filename, "error": str(e)})
        raise HTTPException(status_code=400, detail=str(e))

    return ExtractResponse(
        request_id=result.request_id,
        width=result.width,
        height=result.height,
        ranked=result.ranked,
        palettes=result.palettes.as_dict(),
        history_id=result.history_item.id if result.history_item else None
    )


# ============================================================================
# COLORS & HARMONY
# ============================================================================

@router.post("/colors/validate", response_model=ValidateColorResponse)
async def validate_color(body: ValidateColorRequest) -> ValidateColorResponse:
    """Validate a manually entered hex value."""
    result = validate_hex(body.hex)
    return ValidateColorResponse(valid=result.is_valid, color=result.color, errors=result.errors)


@router.post("/harmony", response_model=HarmonyResponse)
async def harmony(body: HarmonyRequest) -> HarmonyResponse:
    """Generate a harmony palette from a base color."""
    if parse_harmony_kind(body.kind) is None:
        get_metrics().increment_unsupported_count("harmony")
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported harmony kind: {body.kind}. Supported: {', '.join(HARMONY_KINDS)}"
        )

    palette = harmony_palette(color_from_hex(body.base_hex), body.kind, body.name)
    return HarmonyResponse(kind=body.kind, palette=palette)


# ============================================================================
# EXPORT
# ============================================================================

@router.get("/formats", response_model=List[FormatInfo])
async def formats() -> List[Dict[str, Any]]:
    """List export formats with their delivery metadata."""
    return list_formats()


@router.post("/export", summary="Export a palette", response_class=Response)
async def export(body: ExportRequest) -> Response:
    """Encode a palette and return it as a downloadable file."""
    if not body.palette.colors:
        raise HTTPException(status_code=400, detail="No colors to export")

    try:
        result = await export_palette_async(body.palette, body.format)
    except SwatchRenderError as e:
        get_metrics().increment_failure_count("render")
        logger.error("Swatch rendering failed", extra={"format": body.format, "error": str(e)})
        raise HTTPException(status_code=500, detail=str(e))

    if not result.supported:
        raise HTTPException(status_code=400, detail=result.payload)

    return Response(
        content=result.as_bytes(),
        media_type=result.mime_type,
        headers={"Content-Disposition": f'attachment; filename="{result.filename}"'}
    )


# ============================================================================
# SAVED PALETTES
# ============================================================================

@router.get("/palettes", response_model=List[Palette], response_model_by_alias=True)
async def list_palettes(store: PaletteStore = Depends(get_palette_store)) -> List[Palette]:
    return store.list()


@router.put("/palettes", response_model=Palette, response_model_by_alias=True)
async def save_palette(palette: Palette, store: PaletteStore = Depends(get_palette_store)) -> Palette:
    """Insert a new palette at the front or replace the one with the same id."""
    saved = store.upsert(palette)
    logger.info("Palette saved", extra={"palette_id": saved.id, "colors": len(saved.colors)})
    return saved


@router.delete("/palettes/{palette_id}", status_code=204)
async def delete_palette(palette_id: str, store: PaletteStore = Depends(get_palette_store)) -> Response:
    store.remove(palette_id)
    return Response(status_code=204)


@router.delete("/palettes", status_code=204)
async def clear_palettes(store: PaletteStore = Depends(get_palette_store)) -> Response:
    store.clear()
    return Response(status_code=204)


# ============================================================================
# IMAGE HISTORY
# ============================================================================

@router.get("/history", response_model=List[ImageHistoryItem])
async def list_history(history: ImageHistoryStore = Depends(get_history_store)) -> List[ImageHistoryItem]:
    return history.list()


@router.delete("/history/{item_id}", status_code=204)
async def delete_history_item(item_id: str, history: ImageHistoryStore = Depends(get_history_store)) -> Response:
    history.remove(item_id)
    return Response(status_code=204)


@router.delete("/history", status_code=204)
async def clear_history(history: ImageHistoryStore = Depends(get_history_store)) -> Response:
    history.clear()
    return Response(status_code=204)


# ============================================================================
# METRICS
# ============================================================================

@router.get("/metrics")
async def metrics() -> Dict[str, Any]:
    """In-process counters and timing statistics."""
    return get_metrics().get_summary()
