"""
Palette categorization.

Splits a classification pool into dominant, vibrant, muted, light and dark
palettes. Only ``dominant`` is frequency ranked; the HSL-filtered palettes keep
the pool's first-seen order. Categories may overlap and may be empty.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List

import numpy as np
from loguru import logger

from smart_palette.config import config
from smart_palette.schemas import ColorSample
from .extraction import ClassificationPool, rank_indices


@dataclass(frozen=True)
class CategoryRule:
    """HSL predicate and size cap for one palette category."""
    name: str
    predicate: Callable[[np.ndarray, np.ndarray, np.ndarray], np.ndarray]
    cap: int

    def matches(self, color: ColorSample) -> bool:
        """Whether a single color satisfies this rule's predicate."""
        h, s, l = (np.array([v]) for v in color.hsl.as_tuple())
        return bool(self.predicate(h, s, l)[0])


# Predicates take hue, saturation and lightness arrays
CATEGORY_RULES: List[CategoryRule] = [
    CategoryRule("vibrant", lambda h, s, l: (s > 60) & (l > 20) & (l < 80), 10),
    CategoryRule("muted", lambda h, s, l: (s < 50) & (l > 30) & (l < 70), 8),
    CategoryRule("light", lambda h, s, l: l > 70, 8),
    CategoryRule("dark", lambda h, s, l: l < 30, 8),
]

CATEGORY_NAMES = ["dominant"] + [rule.name for rule in CATEGORY_RULES]


@dataclass(frozen=True)
class CategorizedPalettes:
    """The five named palettes produced from one image."""
    dominant: List[ColorSample]
    vibrant: List[ColorSample]
    muted: List[ColorSample]
    light: List[ColorSample]
    dark: List[ColorSample]

    def as_dict(self) -> Dict[str, List[ColorSample]]:
        return {name: getattr(self, name) for name in CATEGORY_NAMES}

    def palette_count(self) -> int:
        """Number of non-empty categories."""
        return sum(1 for colors in self.as_dict().values() if colors)


def filter_pool(pool: ClassificationPool, rule: CategoryRule) -> List[ColorSample]:
    """
    Apply one category rule, keeping first-seen order and the rule's cap.

    The rule runs over distinct pool colors, so a category never lists the
    same color twice. Filtering the raw per-pixel samples instead would let
    one frequent color fill several slots of the cap.
    """
    if len(pool) == 0:
        return []
    h, s, l = pool.hsl[:, 0], pool.hsl[:, 1], pool.hsl[:, 2]
    indices = np.flatnonzero(rule.predicate(h, s, l))[:rule.cap]
    return pool.samples(indices)


def categorize(pool: ClassificationPool, dominant_limit: int = None) -> CategorizedPalettes:
    """
    Partition a classification pool into named palettes.

    Args:
        pool: Distinct sampled colors with occurrence counts
        dominant_limit: Cap for the frequency-ranked palette
            (defaults to ``config.DOMINANT_LIMIT``)

    Returns:
        CategorizedPalettes; empty categories are empty lists
    """
    dominant_limit = config.DOMINANT_LIMIT if dominant_limit is None else dominant_limit

    palettes = {"dominant": pool.samples(rank_indices(pool, dominant_limit))}
    for rule in CATEGORY_RULES:
        palettes[rule.name] = filter_pool(pool, rule)

    sizes = {name: len(colors) for name, colors in palettes.items()}
    logger.info(f"Categorized {len(pool)} distinct colors: {sizes}")

    return CategorizedPalettes(**palettes)
