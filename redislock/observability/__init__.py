"""Observability: in-memory lock metrics."""

from redislock.observability.metrics import MetricsCollector

__all__ = ["MetricsCollector"]
