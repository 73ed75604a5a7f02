"""
Swatch Rendering Module

Renders extracted wall colors as a PNG strip, each chip as wide as its
percentage share, for quick visual QA of an extraction.
"""

import base64
from typing import List, Sequence, Tuple

import cv2
import numpy as np
from loguru import logger

from .colorspace import hex_to_rgb
from .models import ExtractedColor


def hex_to_bgr(hex_color: str) -> Tuple[int, int, int]:
    """Convert hex color to BGR tuple for OpenCV."""
    r, g, b = hex_to_rgb(hex_color)
    return (b, g, r)


def chip_widths(percentages: Sequence[int], total_width: int) -> List[int]:
    """Split ``total_width`` pixels proportionally; the last chip absorbs rounding."""
    total = sum(percentages) or 1
    widths = [int(total_width * p / total) for p in percentages]
    if widths:
        widths[-1] += total_width - sum(widths)
    return widths


def render_swatch_strip(colors: Sequence[ExtractedColor],
                        width: int = 300,
                        height: int = 40,
                        border_color: Tuple[int, int, int] = (200, 200, 200)) -> str:
    """
    Render extracted colors as a horizontal strip.

    Args:
        colors: Extracted colors, in display order
        width: Strip width in pixels
        height: Strip height in pixels
        border_color: BGR color of chip separators

    Returns:
        Base64-encoded PNG image string
    """
    if not colors:
        raise ValueError("Empty colors list provided")
    if width < len(colors) or height <= 0:
        raise ValueError(f"Strip {width}×{height} too small for {len(colors)} chips")

    img = np.zeros((height, width, 3), dtype=np.uint8)

    x_start = 0
    for color, chip_width in zip(colors, chip_widths([c.percentage for c in colors], width)):
        x_end = x_start + chip_width
        img[:, x_start:x_end, :] = hex_to_bgr(color.hex)
        if x_start > 0:
            cv2.line(img, (x_start, 0), (x_start, height - 1), border_color, 1)
        logger.debug(f"Chip {color.hex} {color.percentage}% at x={x_start}-{x_end}")
        x_start = x_end

    success, buffer = cv2.imencode('.png', img)
    if not success:
        raise RuntimeError("Failed to encode swatch strip as PNG")

    b64_string = base64.b64encode(buffer.tobytes()).decode('ascii')
    logger.debug(f"Encoded swatch strip: {width}×{height} -> {len(b64_string)} chars")
    return b64_string
