from __future__ import annotations

import logging
import os
import time
from collections import deque
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from threading import Lock as ThreadLock
from typing import Any, Deque, Dict, Iterator, List, Optional

logger = logging.getLogger("hysio.performance")

METRICS_MAX_SAMPLES = int(os.getenv("HYSIO_METRICS_MAX_SAMPLES", "1000"))

LATENCY_ALERT_MS = 5000.0
LATENCY_WARNING_MS = 2000.0
ERROR_RATE_ALERT = 0.10
ERROR_RATE_WARNING = 0.05


@dataclass
class MetricSample:
    name: str
    value: float
    timestamp: float
    tags: Dict[str, str] = field(default_factory=dict)


@dataclass
class OperationStats:
    total_calls: int = 0
    total_errors: int = 0
    average_ms: float = 0.0
    last_call: float = 0.0

    @property
    def error_rate(self) -> float:
        return self.total_errors / self.total_calls if self.total_calls else 0.0


class PerformanceMonitor:
    """
    Timing samples in a bounded ring buffer plus per-operation running
    averages. One instance per application; nothing here is module-global.
    """

    def __init__(self, max_samples: int = METRICS_MAX_SAMPLES) -> None:
        self.lock = ThreadLock()
        self.samples: Deque[MetricSample] = deque(maxlen=max(1, int(max_samples)))
        self.operations: Dict[str, OperationStats] = {}

    def record_metric(self, name: str, value: float, tags: Optional[Dict[str, str]] = None) -> None:
        sample = MetricSample(name=name, value=float(value), timestamp=time.time(), tags=dict(tags or {}))
        with self.lock:
            self.samples.append(sample)
        logger.debug("metric %s=%s tags=%s", name, value, sample.tags)

    def record_call(self, operation: str, duration_ms: float, is_error: bool = False) -> None:
        with self.lock:
            stats = self.operations.setdefault(operation, OperationStats())
            stats.total_calls += 1
            if is_error:
                stats.total_errors += 1
            stats.average_ms = (stats.average_ms * (stats.total_calls - 1) + duration_ms) / stats.total_calls
            stats.last_call = time.time()
        self.record_metric(
            f"{operation}.duration_ms",
            duration_ms,
            {"operation": operation, "error": str(bool(is_error)).lower()},
        )

    @contextmanager
    def track(self, operation: str) -> Iterator[None]:
        start = time.perf_counter()
        failed = False
        try:
            yield
        except BaseException:
            failed = True
            raise
        finally:
            self.record_call(operation, (time.perf_counter() - start) * 1000.0, is_error=failed)

    def metrics(self, name_filter: Optional[str] = None, since: Optional[float] = None) -> List[MetricSample]:
        with self.lock:
            items = list(self.samples)
        return [
            s for s in items
            if (not name_filter or name_filter in s.name) and (since is None or s.timestamp >= since)
        ]

    def clear_older_than(self, seconds: float) -> int:
        cutoff = time.time() - seconds
        with self.lock:
            kept = [s for s in self.samples if s.timestamp > cutoff]
            removed = len(self.samples) - len(kept)
            self.samples.clear()
            self.samples.extend(kept)
        return removed

    def check_alerts(self) -> Dict[str, List[str]]:
        alerts: List[str] = []
        warnings: List[str] = []
        with self.lock:
            snapshot = dict(self.operations)
        for operation, stats in snapshot.items():
            if stats.average_ms > LATENCY_ALERT_MS:
                alerts.append(f"High response time for {operation}: {stats.average_ms:.0f}ms")
            elif stats.average_ms > LATENCY_WARNING_MS:
                warnings.append(f"Elevated response time for {operation}: {stats.average_ms:.0f}ms")
            if stats.error_rate > ERROR_RATE_ALERT:
                alerts.append(f"High error rate for {operation}: {stats.error_rate * 100:.1f}%")
            elif stats.error_rate > ERROR_RATE_WARNING:
                warnings.append(f"Elevated error rate for {operation}: {stats.error_rate * 100:.1f}%")
        return {"alerts": alerts, "warnings": warnings}

    def summary(self) -> Dict[str, Any]:
        with self.lock:
            operations = {
                name: {**asdict(stats), "error_rate": stats.error_rate}
                for name, stats in self.operations.items()
            }
            total_samples = len(self.samples)
        total_calls = sum(op["total_calls"] for op in operations.values())
        weighted = sum(op["average_ms"] * op["total_calls"] for op in operations.values())
        return {
            "operations": operations,
            "overall": {
                "total_samples": total_samples,
                "total_calls": total_calls,
                "average_ms": weighted / total_calls if total_calls else 0.0,
            },
        }
