"""
Paint Matcher API Schemas
Pydantic models for analysis and paint-match request/response validation.
"""
from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field

HEX_PATTERN = r"^#?[0-9A-Fa-f]{6}$"


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("paintmatch", description="Service name")


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str = Field(..., description="Error message")


# ============================================================================
# EXTRACTION SCHEMAS
# ============================================================================

class ExtractedColorModel(BaseModel):
    """A representative wall color with its share of the photo."""
    hex: str = Field(..., pattern=HEX_PATTERN, description="Hex color code #RRGGBB")
    percentage: int = Field(..., ge=0, le=100, description="Share of the wall (0-100)")


class AnalyzeRequest(BaseModel):
    """JSON-mode analysis request carrying the photo as a data URL."""
    image_data_url: str = Field(
        ...,
        min_length=1,
        description="Photo as data:image/jpeg|png;base64,... URL"
    )


class AnalyzeResponse(BaseModel):
    """Result of analyzing an uploaded photo."""
    id: str = Field(..., description="ID to fetch paint matches with")
    width: int = Field(..., description="Decoded image width in pixels")
    height: int = Field(..., description="Decoded image height in pixels")
    colors: List[ExtractedColorModel] = Field(..., min_length=1, max_length=3)
    swatch_png_b64: Optional[str] = Field(
        None,
        description="Base64-encoded PNG strip of the extracted colors"
    )
    processing_time_ms: float = Field(..., description="Total processing time")


# ============================================================================
# MATCHING SCHEMAS
# ============================================================================

class PaintMatchModel(BaseModel):
    """A catalog paint scored against an extracted color."""
    name: str
    code: str
    hex: Optional[str] = None
    url: Optional[str] = None
    match_percentage: int = Field(..., ge=0, le=100)


class VendorMatchGroupModel(BaseModel):
    """Best matches from one vendor."""
    vendor: str
    matches: List[PaintMatchModel]


class ColorMatchResultModel(BaseModel):
    """All vendor groups for one extracted color."""
    color: ExtractedColorModel
    vendor_matches: List[VendorMatchGroupModel]


class MatchRequest(BaseModel):
    """Match caller-supplied colors against the catalog."""
    colors: List[ExtractedColorModel] = Field(..., description="Colors to match, in order")
    max_matches: int = Field(3, ge=1, le=20, description="Maximum matches per vendor")


class MatchResponse(BaseModel):
    """Paint matches for a list of colors."""
    results: List[ColorMatchResultModel]


class ResultsResponse(BaseModel):
    """Stored analysis plus its paint matches."""
    id: str
    colors: List[ExtractedColorModel]
    results: List[ColorMatchResultModel]
    image_data_url: Optional[str] = None


class VendorsResponse(BaseModel):
    """Vendor names in catalog order."""
    vendors: List[str]
    total_colours: int


class MetricsResponse(BaseModel):
    """In-process metrics summary."""
    uptime_seconds: float
    counters: Dict[str, int]
    timing_stats: Dict[str, Dict[str, float]]
    palette_size_stats: Dict[str, Any]
    best_match_distribution: Dict[str, int] = Field(
        default_factory=dict,
        description="Best match per extracted color, bucketed by match percentage"
    )
