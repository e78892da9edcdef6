# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metrics — single source of truth for all metric objects.
Imported by services and middleware. Never instantiated in controllers.
"""

from prometheus_client import Counter, Gauge, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "booking_requests_total",
    "Total HTTP requests to booking service",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "booking_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
HTTP_ERRORS = Counter(
    "booking_http_errors_total",
    "Total HTTP error responses",
    ["method", "endpoint", "status"],
)

# ── Business Metrics (updated by service layer only) ──
PRODUCTIONS_CREATED = Counter(
    "booking_productions_created_total",
    "Total productions requested",
    ["venue"],
)
PRODUCTIONS_BY_STATUS = Gauge(
    "booking_productions",
    "Current productions by status",
    ["status"],
)
STATUS_TRANSITIONS = Counter(
    "booking_status_transitions_total",
    "Production status transitions applied",
    ["from_status", "to_status"],
)
REJECTED_TRANSITIONS = Counter(
    "booking_rejected_transitions_total",
    "Status changes refused by the lifecycle guards",
    ["from_status", "to_status"],
)
AVAILABILITY_CHECKS = Counter(
    "booking_availability_checks_total",
    "Staff availability checks performed",
    ["outcome"],
)
ASSIGNMENTS_TOTAL = Counter(
    "booking_assignments_total",
    "Staff assignments committed",
)
FORCED_CONFLICTS = Counter(
    "booking_forced_conflicts_total",
    "Assignments committed despite a scheduling conflict",
)
NOTIFICATIONS_SENT = Counter(
    "booking_notifications_sent_total",
    "Notifications fanned out, one per recipient",
    ["type"],
)
PUSH_FAILURES = Counter(
    "booking_push_failures_total",
    "Push deliveries to notification-service that failed",
)
ISSUES_REPORTED = Counter(
    "booking_issues_reported_total",
    "Issues reported by crew",
    ["priority"],
)
ANNOUNCEMENTS_PUBLISHED = Counter(
    "booking_announcements_published_total",
    "Announcements posted to the board",
    ["target_group"],
)
