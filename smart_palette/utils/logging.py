"""
Smart Palette Logging
loguru sink setup and a small wrapper that binds structured fields.
"""
import sys
from typing import Any, Dict, Optional

from loguru import logger

from smart_palette.config import config

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message} | {extra}"


def configure_logging(level: Optional[str] = None, serialize: bool = False) -> None:
    """Route every log record to stdout; ``serialize`` switches to JSON lines."""
    logger.remove()
    logger.add(sys.stdout, format=LOG_FORMAT, level=level or config.LOG_LEVEL, serialize=serialize)


class StructuredLogger:
    """Logger facade for the HTTP layer: ``extra`` dicts become bound fields."""

    def _emit(self, level: str, message: str, extra: Optional[Dict[str, Any]]):
        logger.opt(depth=2).bind(**(extra or {})).log(level, message)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit("INFO", message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit("WARNING", message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit("ERROR", message, extra)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit("DEBUG", message, extra)


_logger: Optional[StructuredLogger] = None


def get_logger() -> StructuredLogger:
    global _logger
    if _logger is None:
        _logger = StructuredLogger()
    return _logger
