"""
Value types passed between the extractor, the matcher and the catalog.

All of them are immutable and transient: computed per request, never
persisted by the core.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class QuantizationResult:
    """Output of a quantizer: the dominant color and an ordered palette."""
    dominant: RGB
    palette: Tuple[RGB, ...]  # most prevalent first, at most 5 entries


@dataclass(frozen=True)
class ExtractedColor:
    """A representative wall color and its share of the photo."""
    hex: str
    percentage: int  # 0-100

    def to_dict(self) -> Dict[str, Any]:
        return {"hex": self.hex, "percentage": self.percentage}


@dataclass(frozen=True)
class PaintCatalogEntry:
    """A single vendor paint color, read-only."""
    name: str
    code: str
    hex: str  # stored as given; may be malformed
    url: Optional[str] = None


@dataclass(frozen=True)
class Vendor:
    """A paint vendor and its colors in declaration order."""
    name: str
    colours: Tuple[PaintCatalogEntry, ...] = ()


@dataclass(frozen=True)
class PaintCatalog:
    """Ordered vendors; order is preserved in every match report."""
    vendors: Tuple[Vendor, ...] = ()

    @property
    def vendor_names(self) -> List[str]:
        return [vendor.name for vendor in self.vendors]

    def __len__(self) -> int:
        return sum(len(vendor.colours) for vendor in self.vendors)


@dataclass(frozen=True)
class PaintMatch:
    """A catalog entry scored against an extracted color."""
    name: str
    code: str
    hex: str
    match_percentage: int  # 0-100
    url: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: PaintCatalogEntry, match_percentage: int) -> "PaintMatch":
        return cls(
            name=entry.name,
            code=entry.code,
            hex=entry.hex,
            match_percentage=match_percentage,
            url=entry.url,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "code": self.code,
            "hex": self.hex,
            "url": self.url,
            "match_percentage": self.match_percentage,
        }


@dataclass(frozen=True)
class VendorMatchGroup:
    """Best matches from one vendor, highest match first."""
    vendor: str
    matches: Tuple[PaintMatch, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"vendor": self.vendor, "matches": [m.to_dict() for m in self.matches]}


@dataclass(frozen=True)
class ColorMatchResult:
    """All vendor groups for one extracted color, in catalog order."""
    color: ExtractedColor
    vendor_matches: Tuple[VendorMatchGroup, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "color": self.color.to_dict(),
            "vendor_matches": [group.to_dict() for group in self.vendor_matches],
        }
