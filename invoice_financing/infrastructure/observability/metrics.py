"""Prometheus metrics for monitoring financing outcomes and run performance"""

from prometheus_client import Counter, Histogram

from invoice_financing.domain.models import FinancingOutcome

# Financing metrics
outcome_counter = Counter(
    "invoice_financing_outcome_total",
    "Invoices evaluated by financing outcome",
    ["status"],  # FINANCED | MISSING_FINANCIERS | SHORT_TERM | RATE_LIMIT_EXCEEDED
)

financed_value_counter = Counter(
    "invoice_financing_financed_cents_total",
    "Face value of financed invoices in cents",
)

interest_counter = Counter(
    "invoice_financing_interest_cents_total",
    "Interest earned by financiers on financed invoices in cents",
)

applied_rate_histogram = Histogram(
    "invoice_financing_applied_rate_bps",
    "Prorated rate applied to financed invoices",
    buckets=[0, 1, 2, 3, 5, 10, 25, 50, 100],
)

run_duration_histogram = Histogram(
    "invoice_financing_run_duration_seconds",
    "Duration of a full financing run",
    buckets=[0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0, 300.0],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_outcome(outcome: FinancingOutcome, value_cents: int) -> None:
    """Record one invoice outcome for monitoring financing rates"""
    outcome_counter.labels(status=outcome.status.value).inc()

    if outcome.financed:
        financed_value_counter.inc(value_cents)
        interest_counter.inc(outcome.interest_cents)
        applied_rate_histogram.observe(outcome.rate_bps)
