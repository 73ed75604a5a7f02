"""
Analysis API Orchestrator

Coordinates the photo → colors → paint matches pipeline for the HTTP layer:
decoding, extraction, storage of the extracted colors under a request ID,
and matching of stored or caller-supplied colors. Records metrics and
structured logs for each stage.
"""

import time
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from paintmatch.errors import InvalidInputError, PaintMatchError, QuantizationFailure
from paintmatch.services.imaging import decode_data_url, decode_image_bytes, encode_data_url, validate_magic_bytes
from paintmatch.services.storage import ResultStore, StoredAnalysis
from paintmatch.utils.ids import generate_request_id
from paintmatch.utils.logging import get_logger
from paintmatch.utils.metrics import get_metrics
from .extraction import Quantizer, extract_colors
from .matching import get_paint_matches
from .models import ExtractedColor, PaintCatalog
from .swatches import render_swatch_strip

logger = get_logger()


def _error_kind(error: Exception) -> str:
    if isinstance(error, QuantizationFailure):
        return "extraction_failed"
    if isinstance(error, InvalidInputError):
        return "invalid_input"
    return "internal"


def analyze_pixels(pixels: np.ndarray, quantizer: Optional[Quantizer], store: ResultStore,
                   image_data_url: Optional[str] = None,
                   include_swatch: bool = False) -> Dict[str, Any]:
    """
    Extract colors from a decoded photo and store them under a new ID.

    Returns:
        Dict matching AnalyzeResponse (without processing time)

    Raises:
        InvalidInputError, QuantizationFailure: Extraction failures; nothing is stored
    """
    request_id = generate_request_id("wall")
    metrics = get_metrics()
    metrics.increment_analyze_count()

    log = logger.bind(request_id=request_id)

    height, width = pixels.shape[:2]
    log.info("Starting photo analysis", extra={"width": width, "height": height})

    extract_start = time.time()
    try:
        colors = extract_colors(pixels, quantizer=quantizer)
    except PaintMatchError as e:
        metrics.increment_failure_count(_error_kind(e))
        log.error(f"Color extraction failed: {e}")
        raise
    extract_ms = (time.time() - extract_start) * 1000
    metrics.record_timing("extraction", extract_ms)
    metrics.record_palette_size(len(colors))

    store.put(StoredAnalysis(
        image_id=request_id,
        extracted_colors=tuple(colors),
        image_data_url=image_data_url,
    ))

    swatch = render_swatch_strip(colors) if include_swatch else None

    log.info("Photo analysis complete", extra={"ms_extract": extract_ms, "colors": len(colors)})

    return {
        "id": request_id,
        "width": int(width),
        "height": int(height),
        "colors": [c.to_dict() for c in colors],
        "swatch_png_b64": swatch,
    }


def handle_analyze_bytes(file_bytes: bytes, quantizer: Optional[Quantizer], store: ResultStore,
                         include_swatch: bool = False, keep_image: bool = False) -> Dict[str, Any]:
    """Decode uploaded bytes and run :func:`analyze_pixels`."""
    start_time = time.time()
    pixels = _decode_or_count(decode_image_bytes, file_bytes)

    image_data_url = None
    if keep_image:
        image_data_url = encode_data_url(file_bytes, validate_magic_bytes(file_bytes))

    response = analyze_pixels(pixels, quantizer, store,
                              image_data_url=image_data_url, include_swatch=include_swatch)
    response["processing_time_ms"] = (time.time() - start_time) * 1000
    return response


def handle_analyze_data_url(data_url: str, quantizer: Optional[Quantizer], store: ResultStore,
                            include_swatch: bool = False, keep_image: bool = False) -> Dict[str, Any]:
    """Decode a data URL and run :func:`analyze_pixels`."""
    start_time = time.time()
    pixels = _decode_or_count(decode_data_url, data_url)

    response = analyze_pixels(pixels, quantizer, store,
                              image_data_url=data_url if keep_image else None,
                              include_swatch=include_swatch)
    response["processing_time_ms"] = (time.time() - start_time) * 1000
    return response


def _decode_or_count(decoder, payload):
    try:
        return decoder(payload)
    except InvalidInputError:
        get_metrics().increment_failure_count("invalid_input")
        raise


def handle_match(colors: Sequence, catalog: PaintCatalog, max_matches: int,
                 max_workers: Optional[int] = None) -> List[Dict[str, Any]]:
    """Match colors against the catalog and return serializable results."""
    metrics = get_metrics()
    metrics.increment_match_count()

    match_start = time.time()
    try:
        results = get_paint_matches(colors, catalog, max_matches=max_matches, max_workers=max_workers)
    except PaintMatchError as e:
        metrics.increment_failure_count(_error_kind(e))
        raise
    metrics.record_timing("matching", (time.time() - match_start) * 1000)
    for result in results:
        best = [group.matches[0].match_percentage for group in result.vendor_matches if group.matches]
        if best:
            metrics.record_best_match(max(best))

    return [result.to_dict() for result in results]


def handle_results(image_id: str, store: ResultStore, catalog: PaintCatalog, max_matches: int,
                   max_workers: Optional[int] = None, include_image: bool = False) -> Dict[str, Any]:
    """
    Fetch a stored analysis and compute its paint matches.

    Raises:
        ResultNotFound: If no analysis exists for ``image_id``
    """
    analysis = store.get(image_id)
    colors: List[ExtractedColor] = list(analysis.extracted_colors)

    logger.info("Computing paint matches", extra={"request_id": image_id, "colors": len(colors)})
    results = handle_match(colors, catalog, max_matches, max_workers=max_workers)

    return {
        "id": analysis.image_id,
        "colors": [c.to_dict() for c in colors],
        "results": results,
        "image_data_url": analysis.image_data_url if include_image else None,
    }
