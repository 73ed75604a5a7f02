"""
Test configuration and fixtures for Paint Matcher tests.
"""
import asyncio
import struct
import zlib

import pytest
import cv2
import numpy as np
from fastapi.testclient import TestClient

from main import create_app
from paintmatch.services.colors.catalog import catalog_from_dict
from paintmatch.services.colors.models import QuantizationResult


class StubQuantizer:
    """Quantizer returning fixed colors, recording how often it was called."""

    def __init__(self, dominant, palette):
        self.result = QuantizationResult(dominant=tuple(dominant),
                                         palette=tuple(tuple(c) for c in palette))
        self.calls = 0
        self.ran_on_event_loop = False

    def __call__(self, pixels):
        self.calls += 1
        try:
            asyncio.get_running_loop()
            self.ran_on_event_loop = True
        except RuntimeError:
            pass
        return self.result


class FailingQuantizer:
    """Quantizer that cannot read the image surface."""

    def __call__(self, pixels):
        raise RuntimeError("could not get drawing surface")


def make_png_bytes(rgb_image: np.ndarray) -> bytes:
    """Encode an RGB uint8 image as PNG bytes."""
    success, buffer = cv2.imencode('.png', cv2.cvtColor(rgb_image, cv2.COLOR_RGB2BGR))
    assert success
    return buffer.tobytes()


def _png_chunk(tag: bytes, data: bytes) -> bytes:
    crc = zlib.crc32(tag + data) & 0xFFFFFFFF
    return struct.pack(">I", len(data)) + tag + data + struct.pack(">I", crc)


def make_header_only_png(width: int, height: int) -> bytes:
    """PNG whose IHDR claims ``width``×``height`` but carries almost no pixel data."""
    ihdr = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    return (b"\x89PNG\r\n\x1a\n"
            + _png_chunk(b"IHDR", ihdr)
            + _png_chunk(b"IDAT", zlib.compress(b"\x00"))
            + _png_chunk(b"IEND", b""))


def make_two_tone_wall(primary=(200, 30, 30), secondary=(30, 30, 200),
                       split: int = 70, size: int = 100) -> np.ndarray:
    """Wall image whose first ``split`` columns are primary, the rest secondary."""
    img = np.zeros((size, size, 3), dtype=np.uint8)
    img[:, :split] = primary
    img[:, split:] = secondary
    return img


@pytest.fixture
def small_catalog():
    """Two-vendor catalog with a malformed entry and a tie."""
    return catalog_from_dict({
        "vendors": [
            {
                "name": "Dulux",
                "colours": [
                    {"name": "Tomato", "code": "DLX1", "hex": "#FF6347"},
                    {"name": "Pure Red", "code": "DLX2", "hex": "#FF0000", "url": "https://example.com/dlx2"},
                    {"name": "Broken", "code": "DLX3", "hex": "not-a-hex"},
                    {"name": "Pure Red Twin", "code": "DLX4", "hex": "#ff0000"},
                    {"name": "Navy", "code": "DLX5", "hex": "#000080"},
                ]
            },
            {
                "name": "Crown",
                "colours": [
                    {"name": "White", "code": "CRN1", "hex": "#FFFFFF"},
                    {"name": "Black", "code": "CRN2", "hex": "#000000"},
                ]
            },
        ]
    })


@pytest.fixture
def test_client():
    """Create test client for a fresh FastAPI app."""
    return TestClient(create_app())


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics before each test."""
    from paintmatch.utils.metrics import reset_metrics
    reset_metrics()
