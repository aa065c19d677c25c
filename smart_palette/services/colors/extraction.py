"""
Color extraction service for raster images.

This module implements strided pixel sampling over an RGBA pixel buffer,
frequency ranking of exact colors and the classification pool consumed by
the palette categorizer. Everything here is deterministic: the same buffer,
strides and threshold always produce the same colors in the same order.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from smart_palette.config import config
from smart_palette.schemas import RGB, HSL, ColorSample
from .colorspace import rgb_to_hex, rgb_to_hsl_array


@dataclass(frozen=True)
class PixelBuffer:
    """Row-major RGBA pixel data, 4 bytes per pixel, no padding."""
    width: int
    height: int
    data: bytes = field(repr=False)

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Invalid buffer dimensions: {self.width}×{self.height}")
        expected = self.width * self.height * 4
        if len(self.data) != expected:
            raise ValueError(
                f"Pixel buffer size mismatch: expected {expected} bytes for "
                f"{self.width}×{self.height} RGBA, got {len(self.data)}"
            )

    @classmethod
    def from_array(cls, rgba: np.ndarray) -> "PixelBuffer":
        """Build a buffer from an (H, W, 4) uint8 array."""
        if rgba.ndim != 3 or rgba.shape[2] != 4:
            raise ValueError(f"Expected RGBA array of shape (H, W, 4), got {rgba.shape}")
        height, width = rgba.shape[:2]
        return cls(width=width, height=height, data=np.ascontiguousarray(rgba, dtype=np.uint8).tobytes())

    def pixels(self) -> np.ndarray:
        """View the buffer as an (N, 4) uint8 array."""
        return np.frombuffer(self.data, dtype=np.uint8).reshape(-1, 4)


@dataclass(frozen=True)
class ClassificationPool:
    """
    Distinct sampled colors in first-seen order.

    ``rgb`` and ``hsl`` are (N, 3) arrays aligned with ``counts`` (occurrences
    of each color among the sampled pixels) and ``first_seen`` (index of its
    first occurrence in sampling order).
    """
    rgb: np.ndarray
    hsl: np.ndarray
    counts: np.ndarray
    first_seen: np.ndarray

    def __len__(self) -> int:
        return int(self.rgb.shape[0])

    @property
    def total(self) -> int:
        """Number of sampled opaque pixels the pool was built from."""
        return int(self.counts.sum())

    def sample(self, index: int) -> ColorSample:
        """Materialize the color at ``index``."""
        r, g, b = (int(c) for c in self.rgb[index])
        h, s, l = (int(c) for c in self.hsl[index])
        return ColorSample(hex=rgb_to_hex(r, g, b), rgb=RGB(r=r, g=g, b=b), hsl=HSL(h=h, s=s, l=l))

    def samples(self, indices: Optional[Sequence[int]] = None) -> List[ColorSample]:
        """Materialize colors at ``indices`` (all colors by default)."""
        if indices is None:
            indices = range(len(self))
        return [self.sample(int(i)) for i in indices]

    @classmethod
    def from_rgb(cls, rgb_u8: np.ndarray) -> "ClassificationPool":
        """Group an (N, 3) array of sampled RGB bytes into a pool."""
        rgb_u8 = np.asarray(rgb_u8, dtype=np.uint8).reshape(-1, 3)
        if rgb_u8.shape[0] == 0:
            empty = np.zeros((0, 3), dtype=np.int64)
            return cls(rgb=empty, hsl=empty, counts=np.zeros(0, dtype=np.int64),
                       first_seen=np.zeros(0, dtype=np.int64))

        keys = (rgb_u8[:, 0].astype(np.int64) << 16) | (rgb_u8[:, 1].astype(np.int64) << 8) | rgb_u8[:, 2]
        unique_keys, first_index, counts = np.unique(keys, return_index=True, return_counts=True)

        # np.unique sorts by key; restore encounter order
        order = np.argsort(first_index, kind="stable")
        unique_keys = unique_keys[order]
        first_index = first_index[order]
        counts = counts[order]

        rgb = np.stack([(unique_keys >> 16) & 0xFF, (unique_keys >> 8) & 0xFF, unique_keys & 0xFF], axis=1)
        hsl = rgb_to_hsl_array(rgb)

        return cls(rgb=rgb, hsl=hsl, counts=counts.astype(np.int64), first_seen=first_index.astype(np.int64))

    @classmethod
    def from_samples(cls, samples: Sequence[ColorSample]) -> "ClassificationPool":
        """Build a pool from existing colors, e.g. a categorizer's own output."""
        rgb = np.array([s.rgb.as_tuple() for s in samples], dtype=np.uint8).reshape(-1, 3)
        return cls.from_rgb(rgb)


def sample_opaque_pixels(buffer: PixelBuffer, stride: int, alpha_threshold: int) -> np.ndarray:
    """
    Visit every ``stride``-th pixel and keep the opaque ones.

    Args:
        buffer: Source pixel buffer
        stride: Pixel step between samples (1 samples every pixel)
        alpha_threshold: Pixels with alpha below this are treated as background

    Returns:
        Sampled RGB pixels (N, 3) uint8 in sampling order
    """
    if not config.validate_stride(stride):
        raise ValueError(f"Invalid sampling stride: {stride}")
    if not config.validate_alpha_threshold(alpha_threshold):
        raise ValueError(f"Invalid alpha threshold: {alpha_threshold}")

    sampled = buffer.pixels()[::stride]
    opaque = sampled[sampled[:, 3] >= alpha_threshold]

    logger.debug(f"Sampled {len(sampled)} pixels at stride {stride}, {len(opaque)} opaque")
    return opaque[:, :3]


def rank_indices(pool: ClassificationPool, limit: int) -> np.ndarray:
    """Pool indices ordered by descending count, ties by first appearance."""
    # Pool order is first-seen order, so a stable sort on -count breaks ties correctly
    order = np.argsort(-pool.counts, kind="stable")
    return order[:max(0, limit)]


def rank_colors(pool: ClassificationPool, limit: int) -> List[ColorSample]:
    """Return the ``limit`` most frequent colors of a pool."""
    return pool.samples(rank_indices(pool, limit))


def build_classification_pool(
    buffer: PixelBuffer,
    stride: Optional[int] = None,
    alpha_threshold: Optional[int] = None
) -> ClassificationPool:
    """
    Sample the buffer at the fine stride used for categorization.

    Args:
        buffer: Source pixel buffer
        stride: Pixel step (defaults to ``config.POOL_STRIDE``)
        alpha_threshold: Opacity cutoff (defaults to ``config.ALPHA_THRESHOLD``)
    """
    stride = config.POOL_STRIDE if stride is None else stride
    alpha_threshold = config.ALPHA_THRESHOLD if alpha_threshold is None else alpha_threshold

    pixels = sample_opaque_pixels(buffer, stride, alpha_threshold)
    pool = ClassificationPool.from_rgb(pixels)

    logger.info(f"Classification pool: {len(pool)} distinct colors from {pool.total} samples")
    return pool


def extract_colors(
    buffer: PixelBuffer,
    limit: Optional[int] = None,
    stride: Optional[int] = None,
    alpha_threshold: Optional[int] = None
) -> List[ColorSample]:
    """
    Extract the most frequent exact colors of an image.

    Args:
        buffer: Source pixel buffer
        limit: Maximum number of colors (defaults to ``config.RANKED_LIMIT``)
        stride: Pixel step (defaults to ``config.RANKED_STRIDE``)
        alpha_threshold: Opacity cutoff (defaults to ``config.ALPHA_THRESHOLD``)

    Returns:
        Colors ordered by descending frequency, ties by first appearance
    """
    limit = config.RANKED_LIMIT if limit is None else limit
    stride = config.RANKED_STRIDE if stride is None else stride
    alpha_threshold = config.ALPHA_THRESHOLD if alpha_threshold is None else alpha_threshold

    pixels = sample_opaque_pixels(buffer, stride, alpha_threshold)
    pool = ClassificationPool.from_rgb(pixels)
    ranked = rank_colors(pool, limit)

    logger.info(f"Extracted {len(ranked)} ranked colors from {len(pool)} distinct")
    return ranked


def extract_palettes(buffer: PixelBuffer) -> Tuple[List[ColorSample], ClassificationPool]:
    """Run both samplings with configured defaults."""
    return extract_colors(buffer), build_classification_pool(buffer)
