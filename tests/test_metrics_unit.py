"""
Unit tests for the in-process metrics collector.
"""
import pytest

from paintmatch.utils.metrics import MetricsCollector, match_bucket


def test_counters():
    metrics = MetricsCollector()
    metrics.increment_analyze_count()
    metrics.increment_analyze_count()
    metrics.increment_failure_count("extraction_failed")

    assert metrics.get_counters() == {
        "analyze_requests_total": 2,
        "failed_total_extraction_failed": 1,
    }


def test_timing_stats():
    metrics = MetricsCollector()
    for ms in [10.0, 20.0, 30.0, 40.0, 50.0]:
        metrics.record_timing("extraction", ms)

    stats = metrics.get_timing_stats()["extraction_duration_ms"]
    assert stats["count"] == 5
    assert stats["mean"] == pytest.approx(30.0)
    assert stats["min"] == 10.0
    assert stats["max"] == 50.0
    assert stats["p50"] == pytest.approx(30.0)
    assert stats["p95"] == pytest.approx(48.0)


def test_palette_size_stats():
    metrics = MetricsCollector()
    assert metrics.get_palette_size_stats() == {}
    for size in [1, 3, 3, 2]:
        metrics.record_palette_size(size)

    stats = metrics.get_palette_size_stats()
    assert stats["count"] == 4
    assert stats["mean"] == pytest.approx(2.25)
    assert stats["distribution"] == {"1": 1, "2": 1, "3": 2}


@pytest.mark.parametrize("percentage,bucket", [
    (100, "90-100"), (90, "90-100"), (89, "75-89"), (75, "75-89"),
    (74, "50-74"), (50, "50-74"), (49, "0-49"), (0, "0-49"),
])
def test_match_bucket(percentage, bucket):
    assert match_bucket(percentage) == bucket


def test_reset():
    metrics = MetricsCollector()
    metrics.increment_match_count()
    metrics.record_best_match(97)
    assert metrics.get_best_match_stats() == {"90-100": 1}

    metrics.reset()
    summary = metrics.get_summary()
    assert summary["counters"] == {}
    assert summary["timing_stats"] == {}
    assert summary["best_match_distribution"] == {}
