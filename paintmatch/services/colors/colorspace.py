"""
Color Space Conversions

sRGB <-> CIE L*a*b* transforms and the two distance metrics used by the
pipeline: Euclidean RGB distance for palette deduplication and CIE76 ΔE for
paint matching. Lab uses the D65 reference white (95.047, 100.0, 108.883).
"""

import math
import re
from typing import Tuple

import numpy as np

from paintmatch.errors import InvalidColorFormat

RGB = Tuple[int, int, int]
Lab = Tuple[float, float, float]

HEX_RE = re.compile(r"^#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")

# D65 reference white
REF_WHITE = np.array([95.047, 100.0, 108.883])

SRGB_TO_XYZ = np.array([
    [0.4124, 0.3576, 0.1805],
    [0.2126, 0.7152, 0.0722],
    [0.0193, 0.1192, 0.9505],
])
XYZ_TO_SRGB = np.linalg.inv(SRGB_TO_XYZ)

LAB_EPSILON = 0.008856
LAB_KAPPA = 7.787
LAB_OFFSET = 16.0 / 116.0


def hex_to_rgb(hex_color: str) -> RGB:
    """
    Parse ``#RRGGBB`` (leading ``#`` optional, any case) into an RGB tuple.

    Raises:
        InvalidColorFormat: If the string is not six hex digits
    """
    if not isinstance(hex_color, str):
        raise InvalidColorFormat(hex_color)
    match = HEX_RE.match(hex_color.strip())
    if match is None:
        raise InvalidColorFormat(hex_color)
    return tuple(int(group, 16) for group in match.groups())


def rgb_to_hex(rgb) -> str:
    """Convert an RGB triple (tuple or uint8 array) to an uppercase hex string."""
    r, g, b = [int(x) for x in rgb]
    for channel in (r, g, b):
        if not 0 <= channel <= 255:
            raise ValueError(f"RGB channel out of range: {channel}")
    return f"#{r:02X}{g:02X}{b:02X}"


def normalize_hex(hex_color: str) -> str:
    """Canonical ``#RRGGBB`` uppercase form of a hex color."""
    return rgb_to_hex(hex_to_rgb(hex_color))


def srgb_to_lab(rgb: np.ndarray) -> np.ndarray:
    """
    Convert 8-bit sRGB values to CIE L*a*b*.

    Args:
        rgb: Array of shape (..., 3) with channels in [0, 255]

    Returns:
        Float array of shape (..., 3) holding (L, a, b)
    """
    c = np.asarray(rgb, dtype=np.float64) / 255.0
    linear = np.where(c > 0.04045, ((c + 0.055) / 1.055) ** 2.4, c / 12.92) * 100.0

    xyz = linear @ SRGB_TO_XYZ.T
    norm = xyz / REF_WHITE
    f = np.where(norm > LAB_EPSILON, np.cbrt(norm), LAB_KAPPA * norm + LAB_OFFSET)

    L = 116.0 * f[..., 1] - 16.0
    a = 500.0 * (f[..., 0] - f[..., 1])
    b = 200.0 * (f[..., 1] - f[..., 2])
    return np.stack([L, a, b], axis=-1)


def lab_to_srgb(lab: np.ndarray) -> np.ndarray:
    """
    Inverse of :func:`srgb_to_lab`, rounded and clipped to 8-bit channels.

    Args:
        lab: Array of shape (..., 3) holding (L, a, b)

    Returns:
        uint8 array of shape (..., 3)
    """
    lab = np.asarray(lab, dtype=np.float64)
    fy = (lab[..., 0] + 16.0) / 116.0
    fx = fy + lab[..., 1] / 500.0
    fz = fy - lab[..., 2] / 200.0
    f = np.stack([fx, fy, fz], axis=-1)

    cubed = f ** 3
    norm = np.where(cubed > LAB_EPSILON, cubed, (f - LAB_OFFSET) / LAB_KAPPA)
    xyz = norm * REF_WHITE

    linear = np.clip((xyz @ XYZ_TO_SRGB.T) / 100.0, 0.0, 1.0)
    c = np.where(linear > 0.0031308, 1.055 * linear ** (1.0 / 2.4) - 0.055, 12.92 * linear)
    return np.clip(np.rint(c * 255.0), 0, 255).astype(np.uint8)


def rgb_to_lab(rgb) -> Lab:
    """Convert a single RGB triple to an (L, a, b) tuple."""
    L, a, b = srgb_to_lab(np.asarray(rgb, dtype=np.float64))
    return float(L), float(a), float(b)


def lab_to_rgb(lab) -> RGB:
    """Convert a single (L, a, b) triple back to an RGB tuple."""
    r, g, b = lab_to_srgb(np.asarray(lab, dtype=np.float64))
    return int(r), int(g), int(b)


def hex_to_lab(hex_color: str) -> Lab:
    """Convert a hex color to Lab; raises InvalidColorFormat on bad input."""
    return rgb_to_lab(hex_to_rgb(hex_color))


def delta_e_cie76(lab1, lab2) -> float:
    """Unweighted Euclidean distance in Lab space (CIE76 ΔE)."""
    dl = lab1[0] - lab2[0]
    da = lab1[1] - lab2[1]
    db = lab1[2] - lab2[2]
    return math.sqrt(dl * dl + da * da + db * db)


def rgb_distance(rgb1, rgb2) -> float:
    """Euclidean distance between two RGB triples."""
    dr = int(rgb1[0]) - int(rgb2[0])
    dg = int(rgb1[1]) - int(rgb2[1])
    db = int(rgb1[2]) - int(rgb2[2])
    return math.sqrt(dr * dr + dg * dg + db * db)
