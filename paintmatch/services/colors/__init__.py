"""
Paint Matcher Colors Module

Provides color extraction from wall photos, sRGB/Lab conversions and
perceptual matching against vendor paint catalogs.
"""

from .extraction import extract_colors
from .matching import get_paint_matches

__all__ = ["extract_colors", "get_paint_matches"]
