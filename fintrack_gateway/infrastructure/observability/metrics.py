"""Prometheus metrics for import outcomes, receipt scans, reports and HTTP latency"""

from prometheus_client import Counter, Histogram

# SMS import metrics
sms_import_outcome_counter = Counter(
    "fintrack_sms_import_total",
    "SMS messages processed by import outcome",
    ["status"],  # success | duplicate | failed | error
)

# Receipt metrics
receipt_scan_outcome_counter = Counter(
    "fintrack_receipt_scan_total",
    "Receipt files processed by scan outcome",
    ["status"],  # success | error
)

storage_upload_failures_counter = Counter(
    "storage_upload_failures_total",
    "Failed object storage uploads",
)

# Report metrics
report_counter = Counter(
    "fintrack_report_total",
    "Financial reports generated",
)

financial_score_histogram = Histogram(
    "fintrack_financial_score",
    "Distribution of financial health scores",
    buckets=[10, 25, 40, 55, 70, 85, 100],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_import_outcomes(statuses) -> None:
    """Count each per-message outcome status of an import batch"""
    for status in statuses:
        sms_import_outcome_counter.labels(status=status).inc()


def record_scan_outcomes(statuses) -> None:
    for status in statuses:
        receipt_scan_outcome_counter.labels(status=status).inc()


def record_report(score: int) -> None:
    report_counter.inc()
    financial_score_histogram.observe(score)
