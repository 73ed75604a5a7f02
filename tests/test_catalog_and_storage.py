"""
Tests for the paint catalog loader and the keyed result store.
"""

import json

import pytest

from paintmatch.errors import MalformedCatalogEntry, ResultNotFound
from paintmatch.services.colors.catalog import catalog_from_dict, entry_lab, load_catalog
from paintmatch.services.colors.models import ExtractedColor, PaintCatalogEntry
from paintmatch.services.storage import InMemoryResultStore, StoredAnalysis
from paintmatch.utils.ids import generate_request_id


class TestCatalog:
    """Test catalog loading"""

    def test_packaged_catalog(self):
        catalog = load_catalog()
        assert catalog.vendor_names == ["Dulux", "Crown", "Farrow & Ball"]
        assert len(catalog) > 30
        for vendor in catalog.vendors:
            for entry in vendor.colours:
                entry_lab(entry)  # every packaged hex parses

    def test_load_from_path_preserves_order(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({"vendors": [
            {"name": "B", "colours": [{"name": "x", "code": "2", "hex": "#000000"},
                                      {"name": "y", "code": "1", "hex": "#FFFFFF", "url": "https://example.com"}]},
            {"name": "A", "colours": []},
        ]}))
        catalog = load_catalog(path)

        assert catalog.vendor_names == ["B", "A"]
        assert [e.code for e in catalog.vendors[0].colours] == ["2", "1"]
        assert catalog.vendors[0].colours[1].url == "https://example.com"
        assert catalog.vendors[1].colours == ()

    def test_malformed_hex_kept_until_scored(self):
        catalog = catalog_from_dict({"vendors": [
            {"name": "V", "colours": [{"name": "bad", "code": "B1", "hex": 12345}]}
        ]})
        entry = catalog.vendors[0].colours[0]
        assert entry.hex == "12345"
        with pytest.raises(MalformedCatalogEntry) as exc_info:
            entry_lab(entry)
        assert exc_info.value.code == "B1"

    def test_missing_hex(self):
        entry = PaintCatalogEntry(name="none", code="N", hex=None)
        with pytest.raises(MalformedCatalogEntry):
            entry_lab(entry)

    def test_invalid_structure(self):
        with pytest.raises(ValueError):
            catalog_from_dict({"brands": []})


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def _analysis(image_id, hex_color="#FF0000"):
    return StoredAnalysis(image_id=image_id, extracted_colors=(ExtractedColor(hex_color, 100),))


class TestResultStore:
    """Test the in-memory keyed store"""

    def test_put_and_get(self):
        store = InMemoryResultStore()
        store.put(_analysis("a"))
        assert store.get("a").extracted_colors == (ExtractedColor("#FF0000", 100),)
        assert len(store) == 1

    def test_missing_raises(self):
        store = InMemoryResultStore()
        with pytest.raises(ResultNotFound):
            store.get("missing")

    def test_result_not_found_is_key_error(self):
        with pytest.raises(KeyError):
            InMemoryResultStore().get("missing")

    def test_lru_eviction(self):
        store = InMemoryResultStore(max_size=2)
        store.put(_analysis("a"))
        store.put(_analysis("b"))
        store.get("a")  # a becomes most recently used
        store.put(_analysis("c"))

        assert store.get("a").image_id == "a"
        assert store.get("c").image_id == "c"
        assert len(store) == 2
        with pytest.raises(ResultNotFound):
            store.get("b")

    def test_ttl_expiry(self):
        clock = FakeClock()
        store = InMemoryResultStore(ttl=60, clock=clock)
        store.put(_analysis("a"))

        clock.now += 59
        assert store.get("a").image_id == "a"

        clock.now += 1
        with pytest.raises(ResultNotFound):
            store.get("a")
        assert len(store) == 0

    def test_overwrite_and_delete(self):
        store = InMemoryResultStore()
        store.put(_analysis("a", "#FF0000"))
        store.put(_analysis("a", "#00FF00"))
        assert store.get("a").extracted_colors[0].hex == "#00FF00"
        assert len(store) == 1

        assert store.delete("a") is True
        assert store.delete("a") is False

    def test_clear(self):
        store = InMemoryResultStore()
        store.put(_analysis("a"))
        store.put(_analysis("b"))
        store.clear()
        assert len(store) == 0

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            InMemoryResultStore(max_size=0)


class TestRequestIds:
    """Test request ID generation"""

    def test_format(self):
        request_id = generate_request_id()
        prefix, timestamp, suffix = request_id.split("-")
        assert prefix == "wall"
        assert len(timestamp) == 14
        assert len(suffix) == 8
        assert timestamp.isdigit()

    def test_unique(self):
        assert len({generate_request_id() for _ in range(50)}) == 50
