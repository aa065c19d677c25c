"""
Test configuration and fixtures for Smart Palette tests.
"""
import numpy as np
import pytest
from fastapi.testclient import TestClient

from smart_palette.api.v1 import get_history_store, get_palette_store
from smart_palette.main import app
from smart_palette.schemas import Palette
from smart_palette.services.colors.colorspace import color_from_hex
from smart_palette.services.storage import InMemoryImageHistoryStore, InMemoryPaletteStore

from tests.helpers import make_png_bytes


@pytest.fixture
def palette_store():
    return InMemoryPaletteStore()


@pytest.fixture
def history_store():
    return InMemoryImageHistoryStore()


@pytest.fixture
def test_client(palette_store, history_store):
    """Create test client with fresh in-memory stores."""
    app.dependency_overrides[get_palette_store] = lambda: palette_store
    app.dependency_overrides[get_history_store] = lambda: history_store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics before each test."""
    from smart_palette.utils.metrics import reset_metrics
    reset_metrics()


@pytest.fixture
def sample_palette():
    """Three-color palette with one named color."""
    return Palette(
        id="palette-1",
        name="Ocean Breeze",
        colors=[
            color_from_hex("#336699"),
            color_from_hex("#ff0000", name="Signal Red"),
            color_from_hex("#ffffff"),
        ],
        harmony="custom"
    )


@pytest.fixture
def two_block_png():
    """20×10 PNG: left half red, right half blue, top row transparent."""
    rgba = np.zeros((10, 20, 4), dtype=np.uint8)
    rgba[:, :10] = (255, 0, 0, 255)
    rgba[:, 10:] = (0, 0, 255, 255)
    rgba[0, :] = (0, 0, 0, 0)
    return make_png_bytes(rgba)
