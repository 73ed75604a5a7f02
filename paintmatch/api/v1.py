"""
Paint Matcher v1 API Routes
Photo analysis, stored results, direct matching and catalog listing.
"""
from fastapi import APIRouter, File, HTTPException, Query, Request, UploadFile
from fastapi.concurrency import run_in_threadpool

from paintmatch.config import Config
from paintmatch.errors import InvalidInputError, PaintMatchError, QuantizationFailure, ResultNotFound
from paintmatch.schemas import (
    AnalyzeRequest, AnalyzeResponse, ErrorResponse, MatchRequest, MatchResponse,
    MetricsResponse, ResultsResponse, VendorsResponse
)
from paintmatch.services.colors.analyze_api import (
    handle_analyze_bytes, handle_analyze_data_url, handle_match, handle_results
)
from paintmatch.services.imaging import validate_upload
from paintmatch.utils.metrics import get_metrics

config = Config()
router = APIRouter(
    prefix="/v1",
    tags=["Paint Matcher"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
        404: {"model": ErrorResponse, "description": "Unknown or expired analysis ID"},
    },
)


def _to_http_error(error: PaintMatchError) -> HTTPException:
    """Map core error kinds to distinguishable HTTP responses."""
    if isinstance(error, ResultNotFound):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, QuantizationFailure):
        return HTTPException(status_code=422, detail=f"Could not read your photo: {error}")
    if isinstance(error, InvalidInputError):
        return HTTPException(status_code=400, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))


@router.post("/analyze", response_model=AnalyzeResponse,
             summary="Analyze Wall Photo",
             description="Extract up to three wall colors from an uploaded JPG/PNG photo")
async def analyze_upload(
    request: Request,
    file: UploadFile = File(..., description="JPG or PNG photo of the wall"),
    include_swatch: bool = Query(False, description="Include a PNG swatch strip of the colors"),
    keep_image: bool = Query(False, description="Keep the photo so results can return it with include_image=true")
):
    """
    Analyze an uploaded wall photo.

    Returns the extracted colors and an ``id`` for ``GET /v1/results/{id}``.
    """
    try:
        validate_upload(file.content_type, file.filename, getattr(file, "size", None))
        file_bytes = await file.read()
        # Decoding and clustering are CPU bound; keep them off the event loop
        return await run_in_threadpool(
            handle_analyze_bytes,
            file_bytes,
            quantizer=request.app.state.quantizer,
            store=request.app.state.store,
            include_swatch=include_swatch,
            keep_image=keep_image,
        )
    except PaintMatchError as e:
        raise _to_http_error(e)


@router.post("/analyze/data-url", response_model=AnalyzeResponse,
             summary="Analyze Wall Photo (data URL)",
             description="Same as /v1/analyze with the photo sent as a base64 data URL")
def analyze_data_url(
    request: Request,
    body: AnalyzeRequest,
    include_swatch: bool = Query(False, description="Include a PNG swatch strip of the colors"),
    keep_image: bool = Query(False, description="Keep the photo so results can return it with include_image=true")
):
    try:
        return handle_analyze_data_url(
            body.image_data_url,
            quantizer=request.app.state.quantizer,
            store=request.app.state.store,
            include_swatch=include_swatch,
            keep_image=keep_image,
        )
    except PaintMatchError as e:
        raise _to_http_error(e)


@router.get("/results/{image_id}", response_model=ResultsResponse,
            summary="Paint Matches For Analysis")
def get_results(
    request: Request,
    image_id: str,
    max_matches: int = Query(config.MAX_MATCHES, ge=1, le=20, description="Matches per vendor"),
    include_image: bool = Query(False, description="Echo the photo data URL, if it was kept at analysis time")
):
    """Paint matches for every color of a stored analysis."""
    try:
        return handle_results(
            image_id,
            store=request.app.state.store,
            catalog=request.app.state.catalog,
            max_matches=max_matches,
            max_workers=config.MATCH_WORKERS,
            include_image=include_image,
        )
    except PaintMatchError as e:
        raise _to_http_error(e)


@router.post("/match", response_model=MatchResponse, summary="Match Colors")
def match_colors(request: Request, body: MatchRequest):
    """Paint matches for caller-supplied colors, without storing anything."""
    try:
        results = handle_match(
            [color.model_dump() for color in body.colors],
            catalog=request.app.state.catalog,
            max_matches=body.max_matches,
            max_workers=config.MATCH_WORKERS,
        )
    except PaintMatchError as e:
        raise _to_http_error(e)
    return {"results": results}


@router.get("/catalog/vendors", response_model=VendorsResponse, summary="List Vendors")
def list_vendors(request: Request):
    catalog = request.app.state.catalog
    return {"vendors": catalog.vendor_names, "total_colours": len(catalog)}


@router.get("/metrics", response_model=MetricsResponse, summary="Service Metrics")
def metrics_summary():
    return get_metrics().get_summary()
