"""Prometheus-style lock metrics. Thread-safe, in-memory. No real Prometheus dependency."""

import threading
from typing import Any


class MetricsCollector:
    """
    In-memory registry of lock outcome counters and store-call latencies.
    Passed to LockManager as metrics_callback.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: dict[str, float] = {}
        # name -> {"name:resource=...": value}
        self._counters_by_labels: dict[str, dict[str, float]] = {}
        # bucket -> observed latencies in ms
        self._histograms: dict[str, list[float]] = {}

    def increment(
        self,
        name: str,
        value: float = 1.0,
        *,
        resource: str | None = None,
    ) -> None:
        """Increment a counter, optionally per resource. The unlabelled total is always kept."""
        with self._lock:
            self._counters[name] = self._counters.get(name, 0) + value
            if resource is not None:
                key = f"{name}:resource={resource}"
                labels = self._counters_by_labels.setdefault(name, {})
                labels[key] = labels.get(key, 0) + value

    def observe_latency(
        self,
        name: str,
        latency_ms: float,
        *,
        operation: str | None = None,
    ) -> None:
        """Record a latency observation (histogram-style). Optional operation label."""
        with self._lock:
            bucket = name if operation is None else f"{name}:operation={operation}"
            self._histograms.setdefault(bucket, []).append(latency_ms)

    def counter(self, name: str, resource: str | None = None) -> float:
        with self._lock:
            if resource is None:
                return self._counters.get(name, 0)
            return self._counters_by_labels.get(name, {}).get(f"{name}:resource={resource}", 0)

    def export_metrics(self) -> dict[str, Any]:
        """Export all metrics as a dict (simulated Prometheus-style)."""
        with self._lock:
            return {
                "counters": dict(self._counters),
                "counters_by_labels": {k: dict(v) for k, v in self._counters_by_labels.items()},
                "histograms": {
                    k: {"count": len(v), "sum": sum(v), "values": list(v)}
                    for k, v in self._histograms.items()
                },
            }

    def reset(self) -> None:
        """Reset all metrics (for tests)."""
        with self._lock:
            self._counters.clear()
            self._counters_by_labels.clear()
            self._histograms.clear()
