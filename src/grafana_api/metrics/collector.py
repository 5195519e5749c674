"""Metrics collector: Prometheus counters, gauges, histograms.

Every metric is registered on a registry owned by the collector, never on
the process-wide default registry, so each app (and each test) gets an
isolated set:
- ``user_creation_total`` / ``user_update_total`` / ``user_deletion_total``
- ``active_users_total`` gauge
- ``user_age_distribution`` histogram (0-120 in 10-year buckets)
- ``api_keys_total`` gauge
- ``api_key_validation_total`` counter by result
"""

from __future__ import annotations

import logging

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

logger = logging.getLogger(__name__)

_AGE_BUCKETS = tuple(float(b) for b in range(0, 130, 10))

VALIDATION_SUCCESS = "success"
VALIDATION_MISSING = "missing"
VALIDATION_INVALID = "invalid"


class MetricsCollector:
    """Low-level Prometheus collector that owns the registry.

    Use :class:`AppMetrics` for the high-level tracking interface.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or CollectorRegistry()

    @property
    def registry(self) -> CollectorRegistry:
        """Return the underlying Prometheus registry."""
        return self._registry

    def gauge(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Gauge:
        """Register and return a Gauge."""
        return Gauge(name, doc, labels, registry=self._registry)

    def histogram(
        self,
        name: str,
        doc: str,
        labels: tuple[str, ...] = (),
        buckets: tuple[float, ...] = Histogram.DEFAULT_BUCKETS,
    ) -> Histogram:
        """Register and return a Histogram."""
        return Histogram(name, doc, labels, registry=self._registry, buckets=buckets)

    def counter(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Counter:
        """Register and return a Counter."""
        return Counter(name, doc, labels, registry=self._registry)


class AppMetrics:
    """High-level application metrics for users and API keys."""

    def __init__(self, collector: MetricsCollector | None = None) -> None:
        self._collector = collector or MetricsCollector()

        self._user_created = self._collector.counter(
            "user_creation_total",
            "Total number of users created",
        )
        self._user_deleted = self._collector.counter(
            "user_deletion_total",
            "Total number of users deleted",
        )
        self._user_updated = self._collector.counter(
            "user_update_total",
            "Total number of user updates",
        )
        self._active_users = self._collector.gauge(
            "active_users_total",
            "Total number of active users",
        )
        self._user_age = self._collector.histogram(
            "user_age_distribution",
            "Distribution of user ages",
            buckets=_AGE_BUCKETS,
        )
        self._api_keys = self._collector.gauge(
            "api_keys_total",
            "Number of stored (non-deleted) API keys",
        )
        self._api_key_validations = self._collector.counter(
            "api_key_validation_total",
            "API key validation attempts by result",
            ("result",),
        )

    @property
    def registry(self) -> CollectorRegistry:
        """Return the underlying Prometheus registry."""
        return self._collector.registry

    # -- Users --

    def record_user_creation(self) -> None:
        self._user_created.inc()
        logger.debug("User creation metric recorded")

    def record_user_deletion(self) -> None:
        self._user_deleted.inc()
        logger.debug("User deletion metric recorded")

    def record_user_update(self) -> None:
        self._user_updated.inc()
        logger.debug("User update metric recorded")

    def set_active_users(self, count: int) -> None:
        self._active_users.set(count)
        logger.debug("Active users metric updated: %d", count)

    def record_user_age(self, age: int) -> None:
        self._user_age.observe(age)

    # -- API keys --

    def set_api_key_count(self, count: int) -> None:
        """Set the current number of stored API keys."""
        self._api_keys.set(count)

    def record_api_key_validation(self, result: str) -> None:
        """Count a validation attempt (``success``, ``missing`` or ``invalid``)."""
        self._api_key_validations.labels(result=result).inc()
