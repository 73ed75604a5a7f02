"""
Paint Catalog

Loads the static vendor paint catalog from JSON into immutable value types.
Hex values are kept exactly as stored; malformed ones are handled when an
entry is scored, not at load time.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Union

from loguru import logger

from paintmatch.config import config
from paintmatch.errors import InvalidColorFormat, MalformedCatalogEntry
from .colorspace import Lab, hex_to_lab
from .models import PaintCatalog, PaintCatalogEntry, Vendor


def entry_from_dict(data: Dict[str, Any]) -> PaintCatalogEntry:
    """Build a catalog entry from its JSON form."""
    hex_value = data.get("hex")
    return PaintCatalogEntry(
        name=str(data["name"]),
        code=str(data["code"]),
        hex=None if hex_value is None else str(hex_value),
        url=data.get("url"),
    )


def catalog_from_dict(data: Dict[str, Any]) -> PaintCatalog:
    """
    Build a catalog from ``{"vendors": [{"name": ..., "colours": [...]}]}``.

    Vendor and color order are preserved exactly as declared.
    """
    if not isinstance(data, dict) or not isinstance(data.get("vendors"), list):
        raise ValueError("Catalog must be an object with a 'vendors' list")

    vendors = []
    for vendor_data in data["vendors"]:
        colours = tuple(entry_from_dict(c) for c in vendor_data.get("colours", []))
        vendors.append(Vendor(name=str(vendor_data["name"]), colours=colours))

    return PaintCatalog(vendors=tuple(vendors))


def load_catalog(path: Optional[Union[str, Path]] = None) -> PaintCatalog:
    """
    Load a paint catalog from a JSON file.

    Args:
        path: Catalog file; defaults to ``config.CATALOG_PATH``

    Returns:
        PaintCatalog with vendors in file order
    """
    if path is None:
        return _load_default_catalog(config.CATALOG_PATH)

    catalog_path = Path(path)
    with catalog_path.open("r", encoding="utf-8") as fh:
        data = json.load(fh)

    catalog = catalog_from_dict(data)
    logger.info(f"Loaded paint catalog from {catalog_path}: "
                f"{len(catalog.vendors)} vendors, {len(catalog)} colours")
    return catalog


@lru_cache(maxsize=4)
def _load_default_catalog(path: str) -> PaintCatalog:
    return load_catalog(Path(path))


def entry_lab(entry: PaintCatalogEntry) -> Lab:
    """
    Lab value of a catalog entry.

    Raises:
        MalformedCatalogEntry: If the stored hex cannot be parsed
    """
    try:
        return hex_to_lab(entry.hex)
    except InvalidColorFormat as e:
        raise MalformedCatalogEntry(entry.code, entry.hex) from e
