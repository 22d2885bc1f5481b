# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Prometheus metrics for the enrolment service."""
from prometheus_client import Counter, Histogram

EMPLOYEES_CREATED = Counter(
    "employees_created_total", "Employees enrolled", ["source"]
)
EMPLOYEES_DELETED = Counter(
    "employees_deleted_total", "Employees removed (members cascade)"
)
MEMBERS_CREATED = Counter(
    "members_created_total", "Dependents added", ["relationship"]
)
BULK_IMPORT_BATCHES = Counter(
    "bulk_import_batches_total", "Bulk import requests processed", ["result"]
)
BULK_IMPORT_ROWS = Counter(
    "bulk_import_rows_total", "Bulk import rows by outcome", ["outcome"]
)
LOGIN_ATTEMPTS = Counter(
    "login_attempts_total", "Login attempts", ["outcome"]
)
REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "endpoint", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "HTTP request latency", ["method", "endpoint"]
)
HTTP_ERRORS = Counter(
    "http_errors_total", "Total HTTP errors", ["method", "endpoint", "status"]
)
