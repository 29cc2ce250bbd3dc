"""Metrics collection for outbound FHIR requests.

Each transport owns its collector, so nothing is shared between
independently built engines. Timings are kept as running aggregates
(count, total, min, max), which keeps memory constant however many
requests a long-lived host sends.
"""

import threading
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


class MetricsBackend(ABC):
    """Abstract base class for metrics backends."""

    @abstractmethod
    def increment(self, name: str, value: int = 1, tags: dict[str, str] | None = None) -> None:
        pass

    @abstractmethod
    def timing(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        pass


@dataclass
class TimingStats:
    """Running aggregate of one timing series."""

    count: int = 0
    total: float = 0.0
    min: float = float("inf")
    max: float = float("-inf")

    def add(self, value: float) -> None:
        self.count += 1
        self.total += value
        self.min = min(self.min, value)
        self.max = max(self.max, value)

    def to_dict(self) -> dict[str, float]:
        return {
            "count": self.count,
            "avg": self.total / self.count,
            "min": self.min,
            "max": self.max,
        }


class LoggerBackend(MetricsBackend):
    """In-memory backend that aggregates counters and timings for logging."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.counters: Counter[str] = Counter()
        self.timings: dict[str, TimingStats] = {}

    def increment(self, name: str, value: int = 1, tags: dict[str, str] | None = None) -> None:
        key = self._format_key(name, tags)
        with self._lock:
            self.counters[key] += value

    def timing(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        key = self._format_key(name, tags)
        with self._lock:
            self.timings.setdefault(key, TimingStats()).add(value)

    def _format_key(self, name: str, tags: dict[str, str] | None) -> str:
        if not tags:
            return name
        tag_str = ",".join(f"{k}={v}" for k, v in sorted(tags.items()))
        return f"{name}[{tag_str}]"

    def get_summary(self) -> dict[str, Any]:
        """Return a snapshot of collected metrics."""
        with self._lock:
            return {
                "counters": dict(self.counters),
                "timings": {
                    name: stats.to_dict() for name, stats in self.timings.items() if stats.count
                },
            }


class MetricsCollector:
    """Collector for the requests sent through one transport."""

    def __init__(self, backend: LoggerBackend | None = None) -> None:
        self.backend = backend or LoggerBackend()

    def count_request(self, method: str, status: str) -> None:
        """Record one request outcome. ``status`` is the status code or "error"."""
        self.backend.increment(
            "fhir_api_requests_total", tags={"method": method, "status": status}
        )

    def record_latency(self, method: str, duration_ms: float) -> None:
        self.backend.timing("fhir_api_latency_ms", duration_ms, tags={"method": method})

    def get_summary(self) -> dict[str, Any]:
        return self.backend.get_summary()
