"""Audit logging middleware for record-keeping requests."""
from __future__ import annotations

import json
import logging
import random
import time
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Callable
from uuid import uuid4

import boto3
from botocore.exceptions import BotoCoreError, ClientError  # type: ignore[import-untyped]
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

from transfer_agent.core.config import Settings

_SENSITIVE_KEYS = {
    "email",
    "phone",
    "account_number",
    "taxpayer_id",
    "tax_id",
    "dob",
    "date_of_birth",
    "code",
    "access_token",
    "refresh_token",
}
_MULTIPART_PREFIX = "multipart/"


def _mask_value(value: Any) -> Any:
    if isinstance(value, dict):
        return _mask_mapping(value)
    if isinstance(value, list):
        return [_mask_value(item) for item in value]
    if isinstance(value, str):
        if "@" in value:
            name, _, domain = value.partition("@")
            hidden = name[0] + "***" if name else "***"
            return f"{hidden}@{domain}" if domain else "***@***"
        if value.isdigit() and len(value) > 4:
            return f"***{value[-4:]}"
    return value


def _mask_mapping(mapping: dict[str, Any]) -> dict[str, Any]:
    """Mask known PII keys at any depth, then mask free-form values."""

    sanitized: dict[str, Any] = {}
    for key, value in mapping.items():
        if key.lower() in _SENSITIVE_KEYS:
            sanitized[key] = f"***{value[-4:]}" if isinstance(value, str) and len(value) > 4 else "***"
        else:
            sanitized[key] = _mask_value(value)
    return sanitized


@dataclass(slots=True)
class AuditLogRecord:
    """Structured log entry emitted by the middleware."""

    timestamp: str
    request_id: str
    method: str
    path: str
    status: int
    duration_ms: float
    actor: str | None
    issuer_id: str | None
    ip_address: str | None
    query: dict[str, Any]
    body: Any

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["duration_ms"] = round(self.duration_ms, 2)
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)


class AuditMiddleware(BaseHTTPMiddleware):
    """Append one masked JSON line per request to a daily S3 object."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        settings: Settings,
        logger: logging.Logger | None = None,
        s3_client_factory: Callable[[], Any] | None = None,
    ) -> None:
        super().__init__(app)
        self._settings = settings
        self._logger = logger or logging.getLogger("audit")
        self._s3_client_factory = s3_client_factory or self._default_client_factory
        self._s3_client: Any | None = None
        self._bucket_ready = False

    async def dispatch(self, request: Request, call_next: Callable[[Request], Any]) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        request.state.request_id = request_id
        start = time.perf_counter()

        body_bytes = await request.body()
        self._set_body(request, body_bytes)
        masked_body = self._mask_body(request, body_bytes)

        response = await call_next(request)

        record = AuditLogRecord(
            timestamp=datetime.now(timezone.utc).isoformat(),
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=(time.perf_counter() - start) * 1000,
            actor=getattr(request.state, "actor_email", None),
            issuer_id=getattr(request.state, "issuer_id", None),
            ip_address=request.client.host if request.client else None,
            query=_mask_mapping(dict(request.query_params.multi_items())),
            body=masked_body,
        )

        self._logger.info(record.to_json())
        self._persist_to_s3(record)

        response.headers["X-Request-ID"] = request_id
        return response

    @staticmethod
    def _mask_body(request: Request, body_bytes: bytes) -> Any:
        if not body_bytes:
            return None
        if request.headers.get("content-type", "").startswith(_MULTIPART_PREFIX):
            return "<multipart>"
        try:
            return _mask_value(json.loads(body_bytes))
        except (json.JSONDecodeError, UnicodeDecodeError):
            return "<binary>"

    def _default_client_factory(self) -> Any:
        return boto3.client(
            "s3",
            region_name=self._settings.aws_region,
            endpoint_url=self._settings.s3_endpoint_url,
        )

    def _get_s3_client(self) -> Any:
        if self._s3_client is None:
            self._s3_client = self._s3_client_factory()
        return self._s3_client

    def _ensure_bucket(self, client: Any) -> None:
        if self._bucket_ready:
            return
        bucket = self._settings.audit_log_bucket
        try:
            client.head_bucket(Bucket=bucket)
        except ClientError:
            create_params: dict[str, Any] = {"Bucket": bucket}
            if self._settings.aws_region != "us-east-1" and self._settings.s3_endpoint_url is None:
                create_params["CreateBucketConfiguration"] = {"LocationConstraint": self._settings.aws_region}
            client.create_bucket(**create_params)
        self._bucket_ready = True

    def _sampled_out(self) -> bool:
        rate = self._settings.audit_log_sample_rate
        return rate <= 0 or (rate < 1 and random.random() > rate)

    def _persist_to_s3(self, record: AuditLogRecord) -> None:
        if self._sampled_out():
            return

        try:
            client = self._get_s3_client()
            self._ensure_bucket(client)
            key = self._daily_key()
            try:
                existing = client.get_object(Bucket=self._settings.audit_log_bucket, Key=key)["Body"].read()
            except client.exceptions.NoSuchKey:  # type: ignore[attr-defined]
                existing = b""
            except ClientError as exc:
                if exc.response.get("Error", {}).get("Code") not in {"404", "NoSuchKey"}:
                    raise
                existing = b""
            client.put_object(
                Bucket=self._settings.audit_log_bucket,
                Key=key,
                Body=existing + record.to_json().encode("utf-8") + b"\n",
                ContentType="application/json",
            )
        except (BotoCoreError, ClientError) as exc:
            self._logger.error("failed to persist audit record", extra={"error": str(exc)})

    def _daily_key(self) -> str:
        now = datetime.now(timezone.utc)
        prefix = self._settings.audit_log_prefix.rstrip("/")
        return f"{prefix}/{now:%Y/%m/%d}/audit.log"

    @staticmethod
    def _set_body(request: Request, body: bytes) -> None:
        async def receive() -> dict[str, Any]:
            nonlocal consumed
            if consumed:
                return {"type": "http.request", "body": b"", "more_body": False}
            consumed = True
            return {"type": "http.request", "body": body, "more_body": False}

        consumed = False
        request._receive = receive  # type: ignore[attr-defined]


__all__ = ["AuditLogRecord", "AuditMiddleware"]
