"""
Color extraction service for wall photos.

Reduces a decoded photo to at most three representative colors with integer
percentage weights. Quantization is delegated to an injected callable; this
module screens the quantizer's palette for near-duplicates, weights the
survivors and normalizes the weights to percentages.
"""

import time
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from paintmatch.errors import PaintMatchError, QuantizationFailure
from paintmatch.utils.rounding import percentages_summing_to
from .colorspace import rgb_distance, rgb_to_hex
from .models import ExtractedColor, QuantizationResult
from .quantization import KMeansQuantizer, validate_pixel_buffer

RGB = Tuple[int, int, int]
Quantizer = Callable[[np.ndarray], QuantizationResult]

DOMINANT_WEIGHT = 60
DUPLICATE_DISTANCE = 25.0
MAX_COLORS = 3


def palette_weight(index: int) -> int:
    """Pre-normalization weight of the palette candidate at ``index``."""
    return max(5, 30 - 5 * index)


def _as_rgb(color) -> RGB:
    r, g, b = [int(c) for c in color]
    return r, g, b


def screen_palette(dominant, palette: Sequence,
                   duplicate_distance: float = DUPLICATE_DISTANCE) -> List[Tuple[RGB, int]]:
    """
    Weight the dominant color and every palette color that is not a duplicate.

    A candidate is a duplicate when its RGB distance to the dominant color or
    to any already accepted color is below ``duplicate_distance``. Accepted
    candidates keep the weight of their position in the quantizer's palette,
    not their position among survivors.

    Args:
        dominant: Dominant RGB triple
        palette: Candidate RGB triples, most prevalent first
        duplicate_distance: RGB distance below which colors are merged

    Returns:
        List of (rgb, weight) pairs, dominant first
    """
    dominant = _as_rgb(dominant)
    accepted: List[Tuple[RGB, int]] = [(dominant, DOMINANT_WEIGHT)]

    for index, candidate in enumerate(palette):
        candidate = _as_rgb(candidate)

        if any(rgb_distance(rgb, candidate) < duplicate_distance for rgb, _ in accepted):
            logger.debug(f"Skipping palette[{index}] {rgb_to_hex(candidate)}: too close to an accepted color")
            continue

        accepted.append((candidate, palette_weight(index)))

    return accepted


def normalize_weights(weighted: Sequence[Tuple[RGB, int]],
                      max_colors: int = MAX_COLORS) -> List[ExtractedColor]:
    """
    Turn weighted colors into at most ``max_colors`` percentages summing to 100.

    Colors are ranked by weight (stable, so equal weights keep input order)
    and the top ``max_colors`` are normalized; the result is sorted by
    descending percentage, ties keeping rank order.
    """
    if not weighted:
        raise ValueError("No weighted colors to normalize")

    ranked = sorted(weighted, key=lambda item: -item[1])[:max_colors]
    percentages = percentages_summing_to([weight for _, weight in ranked])

    colors = [
        ExtractedColor(hex=rgb_to_hex(rgb), percentage=percentage)
        for (rgb, _), percentage in zip(ranked, percentages)
    ]
    colors.sort(key=lambda c: -c.percentage)
    return colors


def extract_colors(pixels: np.ndarray, quantizer: Optional[Quantizer] = None,
                   max_colors: int = MAX_COLORS) -> List[ExtractedColor]:
    """
    Extract up to three representative colors from a wall photo.

    Args:
        pixels: Decoded RGB pixel buffer (H, W, 3)
        quantizer: Callable returning the dominant color and palette;
            defaults to a seeded KMeansQuantizer
        max_colors: Maximum number of colors to return

    Returns:
        ExtractedColor list, descending by percentage, percentages summing to 100

    Raises:
        InvalidInputError: For an empty or malformed pixel buffer
        QuantizationFailure: If the quantizer cannot produce a palette
    """
    pixels = validate_pixel_buffer(pixels)
    height, width = pixels.shape[:2]
    if quantizer is None:
        quantizer = KMeansQuantizer()

    logger.info(f"Starting color extraction on {width}×{height} image")
    start_time = time.time()

    try:
        result = quantizer(pixels)
    except PaintMatchError:
        raise
    except Exception as e:
        logger.error(f"Quantization failed: {str(e)}")
        raise QuantizationFailure(f"Could not quantize image: {str(e)}") from e

    if result is None or result.dominant is None:
        raise QuantizationFailure("Quantizer did not return a dominant color")

    weighted = screen_palette(result.dominant, result.palette)
    colors = normalize_weights(weighted, max_colors=max_colors)

    duration_ms = (time.time() - start_time) * 1000
    summary = ", ".join(f"{c.hex}={c.percentage}%" for c in colors)
    logger.info(f"Color extraction complete in {duration_ms:.1f}ms: {summary}")

    return colors
