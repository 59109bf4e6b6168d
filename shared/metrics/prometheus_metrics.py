"""Prometheus metrics definitions and helpers.

Provides the HTTP and database metrics exposed by the smellmap API.
"""

from typing import Callable

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    generate_latest,
    CollectorRegistry,
)


class ApiMetrics:
    """Smellmap API metrics."""

    def __init__(self, registry: CollectorRegistry) -> None:
        """Initialize API metrics.

        Args:
            registry: Prometheus registry to use
        """
        self.registry = registry

        self.http_requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status"],
            registry=registry,
        )

        self.http_request_duration_seconds = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            buckets=[0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
            registry=registry,
        )

        self.http_requests_in_progress = Gauge(
            "http_requests_in_progress",
            "HTTP requests currently in progress",
            ["method", "endpoint"],
            registry=registry,
        )

        # 1 when the last ping succeeded, 0 otherwise
        self.database_up = Gauge(
            "database_up",
            "Whether MongoDB answered the last ping",
            registry=registry,
        )


def setup_metrics() -> ApiMetrics:
    """Create API metrics on a fresh registry.

    Each application instance gets its own registry so several apps can
    coexist in one process.

    Returns:
        ApiMetrics instance
    """
    return ApiMetrics(CollectorRegistry())


def get_metrics_handler(metrics: ApiMetrics) -> Callable[[], bytes]:
    """Get metrics handler for HTTP endpoint.

    Args:
        metrics: Metrics whose registry is exposed

    Returns:
        Function that generates Prometheus metrics output
    """

    def metrics_handler() -> bytes:
        return generate_latest(metrics.registry)

    return metrics_handler
