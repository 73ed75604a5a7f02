"""
Paint matching engine.

Ranks catalog paints against extracted wall colors by CIE76 ΔE in Lab space.
A distance maps to a match percentage with a linear falloff:
``round(max(0, 100 - ΔE * 1.5))``. ΔE ≈ 2.3 is a just-noticeable difference,
so near-identical paints land in the high 90s.
"""

import math
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Mapping, Optional, Sequence, Union

from loguru import logger

from paintmatch.errors import InvalidInputError, MalformedCatalogEntry
from paintmatch.utils.metrics import get_metrics
from paintmatch.utils.rounding import round_half_up
from .catalog import entry_lab, load_catalog
from .colorspace import Lab, delta_e_cie76, hex_to_lab, normalize_hex
from .models import (
    ColorMatchResult, ExtractedColor, PaintCatalog, PaintCatalogEntry,
    PaintMatch, VendorMatchGroup
)

MATCH_SLOPE = 1.5
DEFAULT_MAX_MATCHES = 3

ColorLike = Union[ExtractedColor, Mapping]


def color_distance(hex1: str, hex2: str) -> float:
    """CIE76 ΔE between two hex colors; symmetric, zero for identical colors."""
    return delta_e_cie76(hex_to_lab(hex1), hex_to_lab(hex2))


def calculate_match_percentage(distance: float) -> int:
    """Map a Lab distance to an integer match percentage in [0, 100]."""
    percentage = max(0.0, 100.0 - distance * MATCH_SLOPE)
    return min(100, max(0, round_half_up(percentage)))


def _entry_distance(target_lab: Lab, entry: PaintCatalogEntry) -> float:
    try:
        return delta_e_cie76(target_lab, entry_lab(entry))
    except MalformedCatalogEntry as e:
        logger.warning(f"{e}; scoring as non-match")
        get_metrics().increment_malformed_entry_count()
        return math.inf


def find_closest_matches(target: ColorLike, vendor_colors: Iterable[PaintCatalogEntry],
                         max_matches: int = DEFAULT_MAX_MATCHES) -> List[PaintMatch]:
    """
    Score every vendor color against ``target`` and keep the best.

    Ties keep catalog declaration order.

    Raises:
        InvalidColorFormat: If the target's hex is malformed
    """
    target = coerce_extracted_color(target)
    target_lab = hex_to_lab(target.hex)

    scored = [
        PaintMatch.from_entry(entry, calculate_match_percentage(_entry_distance(target_lab, entry)))
        for entry in vendor_colors
    ]
    scored.sort(key=lambda match: -match.match_percentage)
    return scored[:max_matches]


def match_color(color: ColorLike, catalog: PaintCatalog,
                max_matches: int = DEFAULT_MAX_MATCHES) -> ColorMatchResult:
    """Build the per-vendor match report for a single extracted color."""
    color = coerce_extracted_color(color)
    vendor_matches = tuple(
        VendorMatchGroup(
            vendor=vendor.name,
            matches=tuple(find_closest_matches(color, vendor.colours, max_matches)),
        )
        for vendor in catalog.vendors
    )
    return ColorMatchResult(color=color, vendor_matches=vendor_matches)


def coerce_extracted_color(color: ColorLike) -> ExtractedColor:
    """Accept an ExtractedColor or a ``{"hex", "percentage"}`` mapping."""
    if isinstance(color, ExtractedColor):
        return color
    try:
        return ExtractedColor(hex=color["hex"], percentage=int(color.get("percentage", 0)))
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise InvalidInputError(f"Not an extracted color: {color!r}") from e


def get_paint_matches(extracted_colors: Sequence[ColorLike],
                      catalog: Optional[PaintCatalog] = None,
                      max_matches: int = DEFAULT_MAX_MATCHES,
                      max_workers: Optional[int] = None) -> List[ColorMatchResult]:
    """
    Match each extracted color against every vendor in the catalog.

    Args:
        extracted_colors: Colors to match, in the order results are wanted
        catalog: Paint catalog; defaults to the packaged catalog
        max_matches: Maximum matches kept per vendor
        max_workers: Thread pool size for matching colors concurrently;
            ``None`` or 1 runs sequentially

    Returns:
        One ColorMatchResult per input color, in input order

    Raises:
        InvalidInputError: If max_matches < 1 or an input is not a color
        InvalidColorFormat: If an extracted color's hex is malformed
    """
    if max_matches < 1:
        raise InvalidInputError(f"max_matches must be at least 1, got {max_matches}")
    if catalog is None:
        catalog = load_catalog()

    colors = [coerce_extracted_color(c) for c in extracted_colors]
    # Fail before any matching work on a malformed upstream color
    for color in colors:
        normalize_hex(color.hex)

    logger.info(f"Matching {len(colors)} colors against {len(catalog.vendors)} vendors "
                f"({len(catalog)} paints), max_matches={max_matches}")

    if max_workers and max_workers > 1 and len(colors) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            return list(pool.map(lambda c: match_color(c, catalog, max_matches), colors))

    return [match_color(color, catalog, max_matches) for color in colors]
