"""
Smart Palette ID Utilities
Generate unique identifiers for palettes, history entries and requests.
"""
import uuid
from datetime import datetime


def generate_request_id(prefix: str = "req") -> str:
    """
    Generate a unique request ID for tracking.

    Args:
        prefix: Short tag identifying the operation

    Returns:
        Unique request ID string
    """
    timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
    short_uuid = str(uuid.uuid4())[:8]
    return f"{prefix}-{timestamp}-{short_uuid}"


def generate_palette_id() -> str:
    """Generate an identifier for a saved palette."""
    return str(uuid.uuid4())


def generate_history_id() -> str:
    """Generate an identifier for an image history entry."""
    return str(uuid.uuid4())
