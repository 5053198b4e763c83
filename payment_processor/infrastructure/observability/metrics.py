"""Prometheus metrics for monitoring payment outcomes, fraud verdicts, and collaborator health"""

from prometheus_client import Counter, Histogram

from payment_processor.domain.models import PaymentStatus

# Payment metrics
payment_outcome_counter = Counter(
    "payment_outcome_total",
    "Payments reaching a terminal status",
    ["status"],  # COMPLETED | FRAUD_CHECK_FAILED | ...
)

payment_processing_histogram = Histogram(
    "payment_processing_seconds",
    "Time from pending record to terminal status",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

# Fraud metrics
fraud_verdict_counter = Counter(
    "fraud_check_total",
    "Fraud screening verdicts",
    ["verdict"],  # fraudulent | legitimate
)

# Collaborator metrics
collaborator_failure_counter = Counter(
    "collaborator_failures_total",
    "Failed account or fraud collaborator calls",
    ["collaborator"],  # accounts | fraud
)

processing_error_counter = Counter(
    "payment_processing_errors_total",
    "Unexpected errors after the pending record was created",
    ["error_type"],
)

funds_reversal_counter = Counter(
    "funds_reversals_total",
    "Compensating transfers applied after a failure",
    ["outcome"],  # applied | failed
)

# Audit metrics
audit_write_failure_counter = Counter(
    "audit_write_failures_total",
    "Audit entries that could not be persisted",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_payment_outcome(status: PaymentStatus, duration_seconds: float) -> None:
    """Record terminal status and processing time for a payment"""
    payment_outcome_counter.labels(status=status.value).inc()
    payment_processing_histogram.observe(duration_seconds)


def record_fraud_verdict(fraudulent: bool) -> None:
    fraud_verdict_counter.labels(verdict="fraudulent" if fraudulent else "legitimate").inc()
