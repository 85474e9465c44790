"""
Prometheus metrics collection for order editing sessions

This module provides metrics instrumentation for monitoring session
operations (loads, saves, deletes), validation activity and failures.
"""
import os
from typing import Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Global registry for metrics
REGISTRY = CollectorRegistry()


# =======================
# SESSION METRICS
# =======================

# Session operations counter
session_operations_total = Counter(
    name="order_session_operations_total",
    documentation="Total number of session operations",
    labelnames=["operation", "status"],  # status: success, failure, rejected, noop
    registry=REGISTRY,
)

# Operation duration histogram
session_operation_duration_seconds = Histogram(
    name="order_session_operation_duration_seconds",
    documentation="Time spent in session operations in seconds",
    labelnames=["operation"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0],
    registry=REGISTRY,
)

# =======================
# VALIDATION METRICS
# =======================

# Validation passes counter
validation_passes_total = Counter(
    name="order_session_validation_passes_total",
    documentation="Total number of validation passes",
    labelnames=["mode"],  # mode: partial, full, cached
    registry=REGISTRY,
)

# Validation failures counter
validation_failures_total = Counter(
    name="order_session_validation_failures_total",
    documentation="Total number of failed validation rules",
    labelnames=["rule_type", "field_name"],
    registry=REGISTRY,
)


# =======================
# HELPER FUNCTIONS
# =======================

def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics in text format

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


def get_content_type() -> str:
    """Content type for Prometheus metrics"""
    return CONTENT_TYPE_LATEST


def start_metrics_server(port: Optional[int] = None) -> None:
    """
    Start HTTP server for Prometheus metrics

    Args:
        port: Port to listen on (defaults to env var METRICS_PORT or 8000)
    """
    # Lazy import: HTTP server only needed when the endpoint is enabled
    from prometheus_client import start_http_server

    metrics_port = port or int(os.getenv("METRICS_PORT", "8000"))
    start_http_server(metrics_port, registry=REGISTRY)


class track_duration:
    """
    Context manager for tracking operation duration

    Usage:
        with track_duration(session_operation_duration_seconds, operation="save"):
            # do work
            pass
    """

    def __init__(self, histogram: Histogram, **labels):
        self.histogram = histogram
        self.labels = labels
        self.timer = None

    def __enter__(self):
        self.timer = self.histogram.labels(**self.labels).time()
        self.timer.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.timer.__exit__(exc_type, exc_val, exc_tb)
        return False


def increment_counter(counter: Counter, value: float = 1.0, **labels) -> None:
    """
    Increment a counter metric

    Args:
        counter: Prometheus Counter metric
        value: Amount to increment (default: 1.0)
        **labels: Label values for the metric
    """
    counter.labels(**labels).inc(value)


def observe_histogram(histogram: Histogram, value: float, **labels) -> None:
    """
    Observe a value in a histogram metric

    Args:
        histogram: Prometheus Histogram metric
        value: Value to observe
        **labels: Label values for the metric
    """
    histogram.labels(**labels).observe(value)


def record_operation(operation: str, status: str) -> None:
    """Record the outcome of a session operation."""
    increment_counter(session_operations_total, 1, operation=operation, status=status)


def record_validation_pass(mode: str) -> None:
    """Record a validation pass (partial, full or cached)."""
    increment_counter(validation_passes_total, 1, mode=mode)


def record_validation_failure(rule_type: str, field_name: str) -> None:
    """
    Record a validation failure.

    Args:
        rule_type: Type of validation rule that failed
        field_name: Name of field that failed validation
    """
    increment_counter(validation_failures_total, 1, rule_type=rule_type, field_name=field_name)
