"""
Smart Palette Metrics
Process-local counters and timings for extraction, harmony and export work.
"""
import time
from collections import Counter, defaultdict
from contextlib import contextmanager
from threading import Lock
from typing import Any, Dict, List, Optional

import numpy as np
from loguru import logger


class MetricsCollector:
    """Thread-safe counters plus per-operation duration samples."""

    def __init__(self):
        self._lock = Lock()
        self._counters: Counter = Counter()
        self._durations: Dict[str, List[float]] = defaultdict(list)
        self._palette_sizes: List[int] = []
        self._started = time.time()

    def increment(self, name: str, amount: int = 1):
        with self._lock:
            self._counters[name] += amount

    def increment_extraction_count(self):
        self.increment("extractions_total")

    def increment_export_count(self, extension: str):
        """Count a delivered export by file extension."""
        self.increment(f"exports_total_{extension}")

    def increment_unsupported_count(self, kind: str):
        """Count a refused harmony kind or export format ('harmony' / 'export')."""
        self.increment(f"{kind}_unsupported_total")

    def increment_failure_count(self, error_type: str):
        self.increment(f"failed_total_{error_type}")

    def record_timing(self, operation: str, duration_ms: float):
        with self._lock:
            self._durations[f"{operation}_duration_ms"].append(duration_ms)

    def record_palette_size(self, size: int):
        """Track how many colors exported palettes carry."""
        with self._lock:
            self._palette_sizes.append(size)

    def get_counters(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counters)

    def get_timing_stats(self) -> Dict[str, Dict[str, float]]:
        """Count, mean, extremes and p50/p95 per timed operation."""
        with self._lock:
            samples = {name: list(values) for name, values in self._durations.items() if values}

        stats = {}
        for name, values in samples.items():
            data = np.asarray(values, dtype=np.float64)
            p50, p95 = np.percentile(data, [50, 95])
            stats[name] = {
                "count": int(data.size),
                "mean": float(data.mean()),
                "min": float(data.min()),
                "max": float(data.max()),
                "p50": float(p50),
                "p95": float(p95)
            }
        return stats

    def get_palette_size_stats(self) -> Dict[str, float]:
        with self._lock:
            sizes = list(self._palette_sizes)
        if not sizes:
            return {}
        return {"count": len(sizes), "mean": float(np.mean(sizes)), "max": int(max(sizes))}

    def get_summary(self) -> Dict[str, Any]:
        return {
            "uptime_seconds": time.time() - self._started,
            "counters": self.get_counters(),
            "timing_stats": self.get_timing_stats(),
            "palette_sizes": self.get_palette_size_stats()
        }

    def reset(self):
        with self._lock:
            self._counters.clear()
            self._durations.clear()
            self._palette_sizes.clear()
            self._started = time.time()


_metrics: Optional[MetricsCollector] = None


def get_metrics() -> MetricsCollector:
    """Process-wide collector, created on first use."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def reset_metrics():
    if _metrics is not None:
        _metrics.reset()


@contextmanager
def performance_monitor(operation_name: str, **fields):
    """
    Time the enclosed block into the global collector.

    Failures are logged with the bound ``fields`` and re-raised.
    """
    started = time.perf_counter()
    try:
        yield
    except Exception as e:
        elapsed = (time.perf_counter() - started) * 1000
        get_metrics().record_timing(operation_name, elapsed)
        logger.bind(**fields).error(f"{operation_name} failed after {elapsed:.1f}ms: {e}")
        raise

    elapsed = (time.perf_counter() - started) * 1000
    get_metrics().record_timing(operation_name, elapsed)
    logger.bind(**fields).debug(f"{operation_name} took {elapsed:.1f}ms")
