"""Prometheus metrics for monitoring transfer outcomes, amounts and ledger bookkeeping"""

from decimal import Decimal
from prometheus_client import Counter, Histogram

# Transfer metrics
transfer_counter = Counter(
    "transfer_attempts_total",
    "Total transfer attempts handled",
    ["outcome"],  # completed | rejected | failed | error
)

transfer_amount_histogram = Histogram(
    "transfer_amount",
    "Amounts of completed transfers",
    buckets=[10, 50, 100, 500, 1_000, 5_000, 10_000, 100_000, 1_000_000],
)

rate_limited_counter = Counter(
    "transfer_rate_limited_total",
    "Transfer attempts rejected by the per-user rate limit",
)

# Ledger bookkeeping
status_stamp_failure_counter = Counter(
    "transfer_status_stamp_failures_total",
    "Debited transfers whose transaction could not be marked completed",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_transfer(outcome: str, amount: Decimal | None = None) -> None:
    """Record a transfer outcome; completed transfers also feed the amount distribution"""
    transfer_counter.labels(outcome=outcome).inc()

    if outcome == "completed" and amount is not None:
        transfer_amount_histogram.observe(float(amount))
