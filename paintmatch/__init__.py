"""
Paint Matcher

Matches the colors of a wall photo to commercial paint catalogs using
CIE L*a*b* distances.
"""

__version__ = "1.0.0"
