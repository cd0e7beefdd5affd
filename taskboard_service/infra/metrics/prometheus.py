"""Prometheus metrics for monitoring."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Histogram

# Custom registry so tests and multiple app instances don't collide with
# the process-wide default registry
REGISTRY = CollectorRegistry()

# Covers response times from 1ms to 10s
DEFAULT_LATENCY_BUCKETS = (
    0.001,
    0.005,
    0.01,
    0.025,
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    2.5,
    5.0,
    10.0,
)

# Keys per downstream fetch call
BATCH_SIZE_BUCKETS = (1, 2, 5, 10, 25, 50, 100, 250, 500, 1000)

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
    registry=REGISTRY,
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=DEFAULT_LATENCY_BUCKETS,
    registry=REGISTRY,
)

errors_total = Counter(
    "errors_total",
    "Total number of errors by type and endpoint",
    ["error_type", "endpoint", "status_code"],
    registry=REGISTRY,
)

# Batch loader metrics
dataloader_batches_total = Counter(
    "dataloader_batches_total",
    "Total downstream batch fetch calls issued by loaders",
    ["loader"],
    registry=REGISTRY,
)

dataloader_batch_size = Histogram(
    "dataloader_batch_size",
    "Number of unique keys per batch fetch call",
    ["loader"],
    buckets=BATCH_SIZE_BUCKETS,
    registry=REGISTRY,
)

dataloader_batch_failures_total = Counter(
    "dataloader_batch_failures_total",
    "Batch fetch calls that failed outright or broke the result contract",
    ["loader", "reason"],
    registry=REGISTRY,
)
