# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metrics — single source of truth for all metric objects.
Imported by services and middleware. Never instantiated in controllers.
"""

from prometheus_client import Counter, Gauge, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "roster_requests_total",
    "Total HTTP requests to the roster service",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "roster_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
HTTP_ERRORS = Counter(
    "roster_http_errors_total",
    "Total HTTP error responses",
    ["method", "endpoint", "status"],
)
REQUESTS_IN_FLIGHT = Gauge(
    "roster_requests_in_flight",
    "Roster API requests currently being handled",
)

# ── Business Metrics (updated by service layer only) ──
ASSIGNMENTS_TOTAL = Counter(
    "roster_assignments_total",
    "Members placed into party slots",
    ["activity_type"],
)
DISPLACEMENTS_TOTAL = Counter(
    "roster_displacements_total",
    "Members pushed out of a slot by another assignment",
    ["activity_type"],
)
REMOVALS_TOTAL = Counter(
    "roster_removals_total",
    "Members removed from party slots",
    ["activity_type"],
)
SWAPS_TOTAL = Counter(
    "roster_swaps_total",
    "Member slot swaps performed",
    ["activity_type"],
)
CLEARS_TOTAL = Counter(
    "roster_clears_total",
    "Bulk roster clears performed",
)
GROUPS_CREATED = Counter(
    "roster_groups_created_total",
    "Total groups created",
    ["activity_type"],
)
PARTIES_CREATED = Counter(
    "roster_parties_created_total",
    "Total parties created",
    ["activity_type"],
)
OPERATION_FAILURES = Counter(
    "roster_operation_failures_total",
    "Roster operations rejected with a typed error",
    ["operation", "reason"],
)
COMMIT_LATENCY = Histogram(
    "roster_commit_duration_seconds",
    "Time spent writing a roster snapshot back to the store",
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)
