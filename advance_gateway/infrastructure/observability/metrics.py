"""Prometheus metrics for lifecycle transitions, authentication and webhook performance"""

from prometheus_client import Counter, Histogram

# Lifecycle metrics
transition_counter = Counter(
    "advance_application_transitions_total",
    "Application lifecycle operations",
    ["action", "outcome"],  # outcome: ok | refused
)

amount_counter = Counter(
    "advance_amount_total",
    "Money moved through the lifecycle",
    ["kind"],  # requested | disbursed | repaid
)

# Auth metrics
auth_counter = Counter(
    "advance_auth_events_total",
    "Registration and login attempts",
    ["event", "outcome"],  # event: register | login | token
)

# Webhook metrics
webhook_latency_histogram = Histogram(
    "webhook_latency_seconds",
    "Ledger webhook response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

webhook_failure_counter = Counter(
    "webhook_failures_total",
    "Failed webhook deliveries",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_transition(action: str, ok: bool) -> None:
    transition_counter.labels(action=action, outcome="ok" if ok else "refused").inc()


def record_amount(kind: str, amount) -> None:
    """Track money totals; amounts are Decimals"""
    amount_counter.labels(kind=kind).inc(float(amount))


def record_auth(event: str, ok: bool) -> None:
    auth_counter.labels(event=event, outcome="ok" if ok else "failed").inc()
