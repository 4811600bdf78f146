"""Prometheus metrics for the generation relay."""

from __future__ import annotations

from prometheus_client import Counter, Histogram


# ── HTTP metrics ─────────────────────────────────────────────
HTTP_REQUESTS_TOTAL = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

HTTP_REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

# ── Key rotation metrics ─────────────────────────────────────
PROVIDER_KEY_ATTEMPTS = Counter(
    "provider_key_attempts_total",
    "Single-key provider call attempts",
    ["provider", "outcome"],  # success / failure
)

PROVIDER_INVOCATIONS = Counter(
    "provider_invocations_total",
    "Logical provider invocations across a key pool",
    ["provider", "status"],  # succeeded / exhausted
)

# ── Actions ──────────────────────────────────────────────────
GENERATE_REQUESTS = Counter(
    "generate_requests_total",
    "Generate requests by action",
    ["action", "status"],
)
