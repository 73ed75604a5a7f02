"""
Paint Matcher Metrics Collection
In-process counters, stage timings and result-quality distributions.
"""
import time
from collections import Counter, defaultdict
from threading import Lock
from typing import Any, Dict, List, Optional

import numpy as np

# Lower bounds of the best-match histogram buckets, highest first
MATCH_BUCKETS = (90, 75, 50, 0)


def match_bucket(percentage: int) -> str:
    """Histogram bucket label for a best-match percentage, e.g. ``"90-100"``."""
    upper = 100
    for lower in MATCH_BUCKETS:
        if percentage >= lower:
            return f"{lower}-{upper}"
        upper = lower - 1
    return f"0-{upper}"


class MetricsCollector:
    """Thread-safe in-process metrics collector."""

    def __init__(self):
        self._lock = Lock()
        self._counters: Counter = Counter()
        self._timings: Dict[str, List[float]] = defaultdict(list)
        self._palette_sizes: Counter = Counter()
        self._best_matches: Counter = Counter()
        self._start_time = time.time()

    def _increment(self, name: str):
        with self._lock:
            self._counters[name] += 1

    def increment_analyze_count(self):
        self._increment("analyze_requests_total")

    def increment_match_count(self):
        self._increment("match_requests_total")

    def increment_malformed_entry_count(self):
        """Count a catalog entry scored as a non-match because its hex is invalid."""
        self._increment("catalog_malformed_entries_total")

    def increment_failure_count(self, error_type: str):
        self._increment(f"failed_total_{error_type}")

    def record_timing(self, operation: str, duration_ms: float):
        with self._lock:
            self._timings[f"{operation}_duration_ms"].append(duration_ms)

    def record_palette_size(self, size: int):
        """Record how many colors an extraction produced."""
        with self._lock:
            self._palette_sizes[size] += 1

    def record_best_match(self, percentage: int):
        """Record the best paint match found for one extracted color."""
        with self._lock:
            self._best_matches[match_bucket(percentage)] += 1

    def get_counters(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counters)

    def get_timing_stats(self) -> Dict[str, Dict[str, float]]:
        """Count, mean, min, max, p50 and p95 per timed operation."""
        with self._lock:
            timings = {op: list(values) for op, values in self._timings.items() if values}

        stats = {}
        for operation, values in timings.items():
            arr = np.asarray(values, dtype=float)
            p50, p95 = np.percentile(arr, [50, 95])
            stats[operation] = {
                "count": int(arr.size),
                "mean": float(arr.mean()),
                "min": float(arr.min()),
                "max": float(arr.max()),
                "p50": float(p50),
                "p95": float(p95),
            }
        return stats

    def get_palette_size_stats(self) -> Dict[str, Any]:
        with self._lock:
            if not self._palette_sizes:
                return {}
            total = sum(self._palette_sizes.values())
            return {
                "count": total,
                "mean": sum(k * v for k, v in self._palette_sizes.items()) / total,
                "distribution": {str(k): v for k, v in sorted(self._palette_sizes.items())},
            }

    def get_best_match_stats(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._best_matches)

    def get_uptime_seconds(self) -> float:
        return time.time() - self._start_time

    def get_summary(self) -> Dict[str, Any]:
        """Get complete metrics summary."""
        return {
            "uptime_seconds": self.get_uptime_seconds(),
            "counters": self.get_counters(),
            "timing_stats": self.get_timing_stats(),
            "palette_size_stats": self.get_palette_size_stats(),
            "best_match_distribution": self.get_best_match_stats(),
        }

    def reset(self):
        """Reset all metrics (for testing)."""
        with self._lock:
            self._counters.clear()
            self._timings.clear()
            self._palette_sizes.clear()
            self._best_matches.clear()
            self._start_time = time.time()


_metrics: Optional[MetricsCollector] = None


def get_metrics() -> MetricsCollector:
    """Get or create global metrics collector."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def reset_metrics():
    """Reset global metrics (for testing)."""
    global _metrics
    if _metrics is not None:
        _metrics.reset()
