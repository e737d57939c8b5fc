"""Operational monitoring: Prometheus metrics."""

from hashsign.infrastructure.monitoring.metrics import (
    METRICS_CONTENT_TYPE,
    OUTCOME_SUCCESS,
    MetricsCollector,
    generate_metrics,
    get_metrics_collector,
    reset_metrics_collector,
)

__all__: list[str] = [
    "METRICS_CONTENT_TYPE",
    "OUTCOME_SUCCESS",
    "MetricsCollector",
    "generate_metrics",
    "get_metrics_collector",
    "reset_metrics_collector",
]
