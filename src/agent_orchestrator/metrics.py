"""Metrics collection for the agent loop.

The controller reports named counters and gauges to an injected collector
instead of shared module-level state, so each controller (and each test)
owns its own numbers and can reset them.
"""

import threading
from abc import ABC, abstractmethod
from typing import Any


class MetricsCollector(ABC):
    """Observer interface the controller reports to."""

    @abstractmethod
    def increment(self, name: str, value: int = 1) -> None:
        """Add value to the named counter."""

    @abstractmethod
    def gauge(self, name: str, value: float) -> None:
        """Record the latest value of the named gauge."""

    @abstractmethod
    def snapshot(self) -> dict[str, Any]:
        """Return {"counters": {...}, "gauges": {...}} as plain dicts."""

    @abstractmethod
    def reset(self) -> None:
        """Drop all recorded values."""


class InMemoryMetrics(MetricsCollector):
    """Process-local collector backed by two dicts."""

    def __init__(self):
        self._counters: dict[str, int] = {}
        self._gauges: dict[str, float] = {}
        self._lock = threading.Lock()

    def increment(self, name: str, value: int = 1) -> None:
        with self._lock:
            self._counters[name] = self._counters.get(name, 0) + value

    def gauge(self, name: str, value: float) -> None:
        with self._lock:
            self._gauges[name] = value

    def counter(self, name: str) -> int:
        """Current value of a counter (0 if never incremented)."""
        return self._counters.get(name, 0)

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return {"counters": dict(self._counters), "gauges": dict(self._gauges)}

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()
            self._gauges.clear()
