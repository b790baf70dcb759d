"""Observability utilities."""

from .audit import AuditLogRecord, AuditMiddleware
from .metrics import (
    LOGIN_OUTCOME_COUNTER,
    REQUEST_COUNTER,
    REQUEST_ERROR_COUNTER,
    REQUEST_LATENCY_SECONDS,
    TRANSFERS_IMPORTED_COUNTER,
    PrometheusMiddleware,
    metrics_router,
    record_login_outcome,
    record_transfers_imported,
)
from .tracing import (
    initialise_tracing,
    instrument_fastapi_app,
    instrument_sqlalchemy_engine,
    operation_span,
)

__all__ = [
    "AuditLogRecord",
    "AuditMiddleware",
    "LOGIN_OUTCOME_COUNTER",
    "PrometheusMiddleware",
    "REQUEST_COUNTER",
    "REQUEST_ERROR_COUNTER",
    "REQUEST_LATENCY_SECONDS",
    "TRANSFERS_IMPORTED_COUNTER",
    "initialise_tracing",
    "instrument_fastapi_app",
    "instrument_sqlalchemy_engine",
    "metrics_router",
    "operation_span",
    "record_login_outcome",
    "record_transfers_imported",
]
