"""
Smart Palette Configuration
Manages environment variables and defaults for extraction, export and storage.
"""
import os
from typing import Optional


class Config:
    """Configuration class for Smart Palette services."""

    # Logging
    LOG_LEVEL: str = os.environ.get("PALETTE_LOG_LEVEL", "INFO")

    # Upload limits
    MAX_FILE_MB: int = int(os.environ.get("PALETTE_MAX_FILE_MB", "10"))
    MAX_PIXELS: int = int(os.environ.get("PALETTE_MAX_PIXELS", "40000000"))

    # Sampling (strides are in pixels, not bytes)
    RANKED_STRIDE: int = int(os.environ.get("PALETTE_RANKED_STRIDE", "5"))
    POOL_STRIDE: int = int(os.environ.get("PALETTE_POOL_STRIDE", "4"))
    ALPHA_THRESHOLD: int = int(os.environ.get("PALETTE_ALPHA_THRESHOLD", "125"))

    # Palette sizes
    RANKED_LIMIT: int = int(os.environ.get("PALETTE_RANKED_LIMIT", "20"))
    DOMINANT_LIMIT: int = int(os.environ.get("PALETTE_DOMINANT_LIMIT", "12"))

    # Export rendering
    SWATCH_SIZE: int = int(os.environ.get("PALETTE_SWATCH_SIZE", "100"))

    # Persistence
    HISTORY_LIMIT: int = int(os.environ.get("PALETTE_HISTORY_LIMIT", "20"))
    STORE_PATH: Optional[str] = os.environ.get("PALETTE_STORE_PATH")

    # CORS settings
    ALLOWED_ORIGINS: str = os.environ.get("PALETTE_ALLOWED_ORIGINS", "http://localhost:3000")

    # Supported upload formats
    SUPPORTED_MIME_TYPES = ["image/jpeg", "image/png", "image/gif", "image/webp", "image/bmp"]

    @classmethod
    def validate_stride(cls, stride: int) -> bool:
        """Validate a pixel sampling stride."""
        return 1 <= stride <= 1024

    @classmethod
    def validate_alpha_threshold(cls, threshold: int) -> bool:
        """Validate opacity threshold."""
        return 0 <= threshold <= 255

    @classmethod
    def allowed_origins(cls) -> list:
        """Split the configured CORS origins."""
        return [origin.strip() for origin in cls.ALLOWED_ORIGINS.split(",") if origin.strip()]


# Global config instance
config = Config()
