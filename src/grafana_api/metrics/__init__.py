"""Metrics: Prometheus metrics collection and exposure."""

from __future__ import annotations

from grafana_api.metrics.collector import AppMetrics, MetricsCollector

__all__ = ["AppMetrics", "MetricsCollector"]
