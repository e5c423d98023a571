"""Monitoring utilities leveraging Prometheus client."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

http_requests_total = Counter(
    "people_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

http_request_latency_seconds = Histogram(
    "people_http_request_latency_seconds",
    "HTTP request latency",
    ["method", "path"],
)

storage_operations_total = Counter(
    "people_storage_operations_total",
    "Person repository operations by outcome",
    ["operation", "outcome"],
)

storage_operation_latency_seconds = Histogram(
    "people_storage_operation_latency_seconds",
    "Person repository operation latency",
    ["operation"],
)


def observe_request(method: str, path: str, status: int, duration_seconds: float) -> None:
    http_requests_total.labels(method=method, path=path, status=str(status)).inc()
    http_request_latency_seconds.labels(method=method, path=path).observe(duration_seconds)


def observe_operation(operation: str, outcome: str, duration_seconds: float) -> None:
    storage_operations_total.labels(operation=operation, outcome=outcome).inc()
    storage_operation_latency_seconds.labels(operation=operation).observe(duration_seconds)
