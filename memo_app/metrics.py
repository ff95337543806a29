"""Prometheus metrics for the memo client.

All metric objects are defined here so they can be imported from any module.
"""

from prometheus_client import Counter, Histogram

# ---------------------------------------------------------------------------
# Gateway metrics
# ---------------------------------------------------------------------------

GATEWAY_REQUESTS = Counter(
    "memo_gateway_requests_total",
    "Total number of gateway calls",
    ["operation", "mode", "outcome"],  # mode: http, fixture
)

GATEWAY_DURATION = Histogram(
    "memo_gateway_request_duration_seconds",
    "Duration of gateway calls in seconds",
    ["operation", "mode"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 30.0, 120.0, 600.0),
)

# ---------------------------------------------------------------------------
# Store metrics
# ---------------------------------------------------------------------------

SESSION_TEARDOWNS = Counter(
    "memo_session_teardowns_total",
    "Sessions cleared locally",
    ["reason"],  # logout, authorization_expired, corrupt_snapshot
)

STORE_ERRORS = Counter(
    "memo_store_errors_total",
    "Gateway failures absorbed at the store boundary",
    ["store", "operation"],
)
