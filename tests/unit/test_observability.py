from __future__ import annotations

import json
import logging

from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from opentelemetry import trace

from transfer_agent.core.config import Settings
from transfer_agent.obs import (
    LOGIN_OUTCOME_COUNTER,
    AuditMiddleware,
    PrometheusMiddleware,
    initialise_tracing,
    metrics_router,
    operation_span,
    record_login_outcome,
)


def test_metrics_endpoint_labels_requests_by_route() -> None:
    app = FastAPI()
    app.add_middleware(PrometheusMiddleware)
    app.include_router(metrics_router)

    @app.get("/items/{item_id}")
    def read_item(item_id: str) -> dict[str, str]:
        return {"id": item_id}

    client = TestClient(app)
    client.get("/items/abc-123")
    response = client.get("/metrics")

    assert response.status_code == 200
    assert 'route="/items/{item_id}"' in response.text
    assert "abc-123" not in response.text


def test_record_login_outcome_increments_counter() -> None:
    record_login_outcome("RejectedLogin")
    record_login_outcome("RejectedLogin")
    family = next(iter(LOGIN_OUTCOME_COUNTER.collect()))
    sample = next(
        item
        for item in family.samples
        if item.name.endswith("_total") and item.labels["outcome"] == "RejectedLogin"
    )
    assert sample.value >= 2


def test_operation_span_sets_attributes() -> None:
    initialise_tracing(service_name="unit-test-service", instrument_logging=False)
    with operation_span("unit.operation", issuer_id="issuer-1", skipped=None) as span:
        assert trace.get_current_span() is span
        assert span.attributes["issuer_id"] == "issuer-1"
        assert "skipped" not in span.attributes


def test_audit_middleware_masks_pii(audit_s3_client, caplog) -> None:
    settings = Settings(enable_tracing=False, audit_log_bucket="audit-unit")
    app = FastAPI()
    app.add_middleware(AuditMiddleware, settings=settings, s3_client_factory=lambda: audit_s3_client)

    @app.post("/api/shareholders")
    async def create(request: Request) -> dict[str, bool]:
        request.state.actor_email = "ops@example.com"
        request.state.issuer_id = "issuer-1"
        await request.json()
        return {"ok": True}

    client = TestClient(app)
    with caplog.at_level(logging.INFO, logger="audit"):
        response = client.post(
            "/api/shareholders",
            json={"email": "holder@example.com", "taxpayer_id": "123456789", "first_name": "Ada"},
        )

    assert response.status_code == 200
    assert response.headers["X-Request-ID"]
    stored = next(iter(audit_s3_client.buckets["audit-unit"].values()))
    record = json.loads(stored.decode("utf-8").strip().splitlines()[-1])
    assert record["actor"] == "ops@example.com"
    assert record["issuer_id"] == "issuer-1"
    assert record["body"]["email"] == "***.com"
    assert record["body"]["taxpayer_id"] == "***6789"
    assert record["body"]["first_name"] == "Ada"
