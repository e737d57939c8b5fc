"""Prometheus metrics infrastructure.

Operational metrics for the HTTP surface and the signing workflow:
- http_request_duration_seconds / http_requests_total / http_requests_failed_total
- hashsign_workflow_operations_total{operation, outcome}
- hashsign_orphaned_uploads_total
- hashsign_upload_bytes

Labels service and environment are attached to every series.
"""

import os
import threading

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

METRICS_CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"

_collector_lock = threading.Lock()

# 10ms to 10s
DEFAULT_HISTOGRAM_BUCKETS = (0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)

# 1 KiB to 25 MiB
UPLOAD_SIZE_BUCKETS = (1024, 16384, 131072, 1048576, 4194304, 16777216, 26214400)

OUTCOME_SUCCESS = "success"


class MetricsCollector:
    """Collects and manages operational Prometheus metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics collector.

        Args:
            registry: Optional custom registry for testing isolation.
        """
        self._registry = registry or CollectorRegistry()
        self._environment = os.environ.get("HASHSIGN_ENVIRONMENT", "production")
        self._service_name = os.environ.get("SERVICE_NAME", "hashsign-api")

        self.http_request_duration_seconds = Histogram(
            name="http_request_duration_seconds",
            documentation="HTTP request duration in seconds",
            labelnames=["service", "environment", "method", "endpoint"],
            buckets=DEFAULT_HISTOGRAM_BUCKETS,
            registry=self._registry,
        )
        self.http_requests_total = Counter(
            name="http_requests_total",
            documentation="Total HTTP requests",
            labelnames=["service", "environment", "method", "endpoint", "status"],
            registry=self._registry,
        )
        self.http_requests_failed_total = Counter(
            name="http_requests_failed_total",
            documentation="Total failed HTTP requests (4xx, 5xx)",
            labelnames=[
                "service",
                "environment",
                "method",
                "endpoint",
                "status",
                "error_type",
            ],
            registry=self._registry,
        )
        self.workflow_operations_total = Counter(
            name="hashsign_workflow_operations_total",
            documentation="Workflow operations by outcome (success or error type)",
            labelnames=["service", "environment", "operation", "outcome"],
            registry=self._registry,
        )
        self.orphaned_uploads_total = Counter(
            name="hashsign_orphaned_uploads_total",
            documentation="Uploads left without a document after a failed create",
            labelnames=["service", "environment"],
            registry=self._registry,
        )
        self.upload_bytes = Histogram(
            name="hashsign_upload_bytes",
            documentation="Size of accepted uploads in bytes",
            labelnames=["service", "environment"],
            buckets=UPLOAD_SIZE_BUCKETS,
            registry=self._registry,
        )

    def observe_request_duration(
        self, method: str, endpoint: str, duration: float
    ) -> None:
        self.http_request_duration_seconds.labels(
            service=self._service_name,
            environment=self._environment,
            method=method,
            endpoint=endpoint,
        ).observe(duration)

    def increment_requests(self, method: str, endpoint: str, status: str) -> None:
        self.http_requests_total.labels(
            service=self._service_name,
            environment=self._environment,
            method=method,
            endpoint=endpoint,
            status=status,
        ).inc()

    def increment_failed_requests(
        self, method: str, endpoint: str, status: str, error_type: str
    ) -> None:
        self.http_requests_failed_total.labels(
            service=self._service_name,
            environment=self._environment,
            method=method,
            endpoint=endpoint,
            status=status,
            error_type=error_type,
        ).inc()

    def increment_workflow_operation(self, operation: str, outcome: str) -> None:
        """Count a workflow operation.

        Args:
            operation: onboard, create_document, sign_document or view_document.
            outcome: "success" or the error class name.
        """
        self.workflow_operations_total.labels(
            service=self._service_name,
            environment=self._environment,
            operation=operation,
            outcome=outcome,
        ).inc()

    def increment_orphaned_uploads(self) -> None:
        self.orphaned_uploads_total.labels(
            service=self._service_name, environment=self._environment
        ).inc()

    def observe_upload_size(self, size: int) -> None:
        self.upload_bytes.labels(
            service=self._service_name, environment=self._environment
        ).observe(size)

    def get_registry(self) -> CollectorRegistry:
        return self._registry


_metrics_collector: MetricsCollector | None = None


def get_metrics_collector() -> MetricsCollector:
    """Get the singleton MetricsCollector instance (thread-safe)."""
    global _metrics_collector
    if _metrics_collector is None:
        with _collector_lock:
            if _metrics_collector is None:
                _metrics_collector = MetricsCollector()
    return _metrics_collector


def generate_metrics() -> bytes:
    """Generate Prometheus metrics in exposition format."""
    return generate_latest(get_metrics_collector().get_registry())


def reset_metrics_collector() -> None:
    """Reset the singleton collector (for testing only)."""
    global _metrics_collector
    with _collector_lock:
        _metrics_collector = None
