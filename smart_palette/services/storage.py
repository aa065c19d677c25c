"""
Smart Palette Persistence
Saved palette and image history stores behind abstract interfaces, with an
in-memory backend and a JSON-file key-value backend.
"""
import json
import os
import tempfile
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import List, Optional

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from smart_palette.config import config
from smart_palette.schemas import ImageHistoryItem, Palette
from smart_palette.utils.ids import generate_history_id


SAVED_PALETTES_KEY = "savedPalettes"
IMAGE_HISTORY_KEY = "smart_palette_image_history"

_palette_list = TypeAdapter(List[Palette])
_history_list = TypeAdapter(List[ImageHistoryItem])


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ============================================================================
# SAVED PALETTES
# ============================================================================

class PaletteStore(ABC):
    """Abstract saved-palette collection keyed by palette id."""

    @abstractmethod
    def list(self) -> List[Palette]:
        """All saved palettes, most recently inserted first."""
        pass

    @abstractmethod
    def upsert(self, palette: Palette) -> Palette:
        """Insert at the front if the id is new, otherwise replace in place."""
        pass

    @abstractmethod
    def remove(self, palette_id: str) -> None:
        """Delete a palette; unknown ids are ignored."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Delete every saved palette."""
        pass

    def get(self, palette_id: str) -> Optional[Palette]:
        for palette in self.list():
            if palette.id == palette_id:
                return palette
        return None


def _upsert_into(palettes: List[Palette], palette: Palette) -> Palette:
    for index, existing in enumerate(palettes):
        if existing.id == palette.id:
            palettes[index] = palette
            return palette

    if not palette.created_at:
        palette = palette.model_copy(update={"created_at": _utc_now_iso()})
    palettes.insert(0, palette)
    return palette


class InMemoryPaletteStore(PaletteStore):
    """Process-local palette store, used by default and in tests."""

    def __init__(self):
        self._lock = Lock()
        self._palettes: List[Palette] = []

    def list(self) -> List[Palette]:
        with self._lock:
            return list(self._palettes)

    def upsert(self, palette: Palette) -> Palette:
        with self._lock:
            return _upsert_into(self._palettes, palette)

    def remove(self, palette_id: str) -> None:
        with self._lock:
            self._palettes = [p for p in self._palettes if p.id != palette_id]

    def clear(self) -> None:
        with self._lock:
            self._palettes = []


class JsonFileStore:
    """Minimal key-value store persisting one JSON document per key."""

    def __init__(self, directory):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write(self, key: str, value: str) -> None:
        # Write to a sibling temp file and rename so readers never see partial JSON
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_path, self._path(key))
        except BaseException:
            os.unlink(tmp_path)
            raise

    def delete(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()


class JsonFilePaletteStore(PaletteStore):
    """Palette store persisted as a JSON list in a key-value file store."""

    def __init__(self, kv: JsonFileStore, key: str = SAVED_PALETTES_KEY):
        self._kv = kv
        self._key = key
        self._lock = Lock()

    def _load(self) -> List[Palette]:
        raw = self._kv.read(self._key)
        if not raw:
            return []
        try:
            return _palette_list.validate_json(raw)
        except ValidationError as e:
            logger.error(f"Discarding unreadable saved palettes: {e}")
            return []

    def _save(self, palettes: List[Palette]) -> None:
        self._kv.write(self._key, _palette_list.dump_json(palettes, by_alias=True).decode("utf-8"))

    def list(self) -> List[Palette]:
        with self._lock:
            return self._load()

    def upsert(self, palette: Palette) -> Palette:
        with self._lock:
            palettes = self._load()
            stored = _upsert_into(palettes, palette)
            self._save(palettes)
            return stored

    def remove(self, palette_id: str) -> None:
        with self._lock:
            self._save([p for p in self._load() if p.id != palette_id])

    def clear(self) -> None:
        with self._lock:
            self._kv.delete(self._key)


# ============================================================================
# IMAGE HISTORY
# ============================================================================

class ImageHistoryStore(ABC):
    """Abstract list of analyzed images, newest first and capped."""

    def __init__(self, limit: Optional[int] = None):
        self.limit = config.HISTORY_LIMIT if limit is None else limit
        # Guards the list() → _replace() sequence in add/remove/clear
        self._lock = Lock()

    @abstractmethod
    def list(self) -> List[ImageHistoryItem]:
        pass

    @abstractmethod
    def _replace(self, items: List[ImageHistoryItem]) -> None:
        pass

    def add(self, name: str, palette_count: int, dominant_colors: List[str], image_data: str) -> ImageHistoryItem:
        """Record an analyzed image at the front, dropping the oldest beyond the cap."""
        item = ImageHistoryItem(
            id=generate_history_id(),
            name=name,
            timestamp=datetime.now(timezone.utc),
            palette_count=palette_count,
            dominant_colors=dominant_colors,
            image_data=image_data
        )
        with self._lock:
            self._replace(([item] + self.list())[:self.limit])
        return item

    def remove(self, item_id: str) -> None:
        with self._lock:
            self._replace([item for item in self.list() if item.id != item_id])

    def clear(self) -> None:
        with self._lock:
            self._replace([])


class InMemoryImageHistoryStore(ImageHistoryStore):
    """Process-local image history."""

    def __init__(self, limit: Optional[int] = None):
        super().__init__(limit)
        self._items: List[ImageHistoryItem] = []

    def list(self) -> List[ImageHistoryItem]:
        return list(self._items)

    def _replace(self, items: List[ImageHistoryItem]) -> None:
        self._items = list(items)


class JsonFileImageHistoryStore(ImageHistoryStore):
    """Image history persisted in a key-value file store."""

    def __init__(self, kv: JsonFileStore, key: str = IMAGE_HISTORY_KEY, limit: Optional[int] = None):
        super().__init__(limit)
        self._kv = kv
        self._key = key

    def list(self) -> List[ImageHistoryItem]:
        raw = self._kv.read(self._key)
        if not raw:
            return []
        try:
            return _history_list.validate_json(raw)
        except ValidationError as e:
            logger.error(f"Error parsing image history: {e}")
            return []

    def _replace(self, items: List[ImageHistoryItem]) -> None:
        if not items:
            self._kv.delete(self._key)
            return
        self._kv.write(self._key, _history_list.dump_json(items).decode("utf-8"))


def create_stores(store_path: Optional[str] = None):
    """Build the palette and history stores for the configured backend."""
    store_path = store_path or config.STORE_PATH
    if store_path:
        kv = JsonFileStore(store_path)
        logger.info(f"Using JSON file stores in {store_path}")
        return JsonFilePaletteStore(kv), JsonFileImageHistoryStore(kv)
    return InMemoryPaletteStore(), InMemoryImageHistoryStore()
