"""
Color quantization for wall photos.

Reduces a decoded pixel buffer to one dominant color and an ordered palette
using KMeans clustering. Sampling and clustering are seeded, so identical
pixel input always yields the identical palette.
"""

from collections import Counter
from typing import List, Tuple

import numpy as np
from loguru import logger
from sklearn.cluster import KMeans

from paintmatch.config import config
from paintmatch.errors import InvalidInputError, QuantizationFailure
from .models import QuantizationResult


def validate_pixel_buffer(pixels: np.ndarray) -> np.ndarray:
    """
    Check a pixel buffer is a non-empty H×W×3 grid and return it as uint8.

    Raises:
        InvalidInputError: For zero-dimension or wrongly shaped buffers
    """
    pixels = np.asarray(pixels)
    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise InvalidInputError(f"Expected an H×W×3 RGB pixel buffer, got shape {pixels.shape}")

    height, width = pixels.shape[:2]
    if height * width == 0:
        raise InvalidInputError(f"Empty pixel buffer: {width}×{height}")

    if pixels.dtype != np.uint8:
        pixels = np.clip(pixels, 0, 255).astype(np.uint8)
    return pixels


def sample_pixels(pixels_rgb_u8: np.ndarray, max_samples: int = 20000,
                  rng_seed: int = 42) -> np.ndarray:
    """
    Flatten a pixel grid and deterministically downsample it.

    Args:
        pixels_rgb_u8: RGB image (H, W, 3) uint8
        max_samples: Maximum number of pixels to keep
        rng_seed: Random seed for deterministic sampling

    Returns:
        Pixel array (N, 3) uint8 with N <= max_samples
    """
    flat = pixels_rgb_u8.reshape(-1, 3)
    initial_count = flat.shape[0]

    if initial_count > max_samples:
        rng = np.random.default_rng(rng_seed)
        indices = rng.choice(initial_count, size=max_samples, replace=False)
        flat = flat[np.sort(indices)]
        logger.debug(f"Downsampled {initial_count} pixels to {max_samples}")

    return flat


def cluster_palette(pixels_rgb_u8: np.ndarray, k: int = 5,
                    rng_seed: int = 42) -> Tuple[List[Tuple[int, int, int]], List[float]]:
    """
    Cluster pixels into a palette ordered by cluster population.

    Args:
        pixels_rgb_u8: Sampled RGB pixels (N, 3) uint8
        k: Maximum number of clusters; capped at the number of unique colors
        rng_seed: Random seed for deterministic clustering

    Returns:
        Tuple of (ordered RGB centers, matching population ratios)

    Raises:
        QuantizationFailure: If clustering fails
    """
    unique_colors = np.unique(pixels_rgb_u8, axis=0)
    n_clusters = min(k, len(unique_colors))
    logger.debug(f"Clustering {len(pixels_rgb_u8)} pixels ({len(unique_colors)} unique) into k={n_clusters}")

    if n_clusters == 1:
        only = tuple(int(c) for c in unique_colors[0])
        return [only], [1.0]

    try:
        kmeans = KMeans(n_clusters=n_clusters, n_init=5, random_state=rng_seed)
        labels = kmeans.fit_predict(pixels_rgb_u8.astype(np.float32))
        centers = np.clip(np.rint(kmeans.cluster_centers_), 0, 255).astype(np.uint8)
    except Exception as e:
        logger.error(f"Clustering failed: {str(e)}")
        raise QuantizationFailure(f"K-means clustering failed: {str(e)}") from e

    label_counts = Counter(labels.tolist())
    total_pixels = len(labels)

    # Most populous first, ties by cluster index
    order = sorted(range(n_clusters), key=lambda i: (-label_counts.get(i, 0), i))
    ordered_centers = [tuple(int(c) for c in centers[i]) for i in order]
    ordered_ratios = [label_counts.get(i, 0) / total_pixels for i in order]

    ratios_str = [f"{r:.3f}" for r in ordered_ratios]
    logger.debug(f"Clustering successful: {ratios_str}")
    return ordered_centers, ordered_ratios


class KMeansQuantizer:
    """
    Default quantization collaborator.

    Callable mapping a pixel buffer to a QuantizationResult. The dominant
    color is the center of the most populous cluster, which is also the first
    palette entry.
    """

    def __init__(self, palette_size: int = None, max_samples: int = None,
                 rng_seed: int = None):
        self.palette_size = palette_size if palette_size is not None else config.PALETTE_SIZE
        self.max_samples = max_samples if max_samples is not None else config.MAX_SAMPLES
        self.rng_seed = rng_seed if rng_seed is not None else config.RNG_SEED

        if not config.validate_palette_size(self.palette_size):
            raise ValueError(f"palette_size out of range: {self.palette_size}")

    def __call__(self, pixels: np.ndarray) -> QuantizationResult:
        pixels = validate_pixel_buffer(pixels)
        sampled = sample_pixels(pixels, max_samples=self.max_samples, rng_seed=self.rng_seed)

        palette, _ = cluster_palette(sampled, k=self.palette_size, rng_seed=self.rng_seed)
        if not palette:
            raise QuantizationFailure("Quantizer returned an empty palette")

        return QuantizationResult(dominant=palette[0], palette=tuple(palette))

    def __repr__(self) -> str:
        return (f"KMeansQuantizer(palette_size={self.palette_size}, "
                f"max_samples={self.max_samples}, rng_seed={self.rng_seed})")
