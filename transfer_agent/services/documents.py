"""Issuer filings and document storage backed by S3."""
from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from typing import Any
from urllib.parse import quote

import boto3
from botocore.exceptions import BotoCoreError, ClientError  # type: ignore[import-untyped]

from transfer_agent.core.config import Settings, get_settings
from transfer_agent.core.errors import ProviderError

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9.-]")
_EDGAR = "https://www.sec.gov/Archives/edgar/data/2058359"


@dataclass(slots=True, frozen=True)
class Filing:
    id: str
    type: str
    title: str
    filing_date: date
    url: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "filing_date": self.filing_date,
            "url": self.url,
        }


FEATURED_FILINGS: tuple[Filing, ...] = (
    Filing("s1", "S-1", "Initial Registration Statement", date(2025, 3, 3),
           f"{_EDGAR}/000121390025019475/ea0232145-01.htm"),
    Filing("s1a", "S-1/A", "Amendment to Registration Statement", date(2025, 5, 21),
           f"{_EDGAR}/000121390025046176/ea0232145-08.htm"),
    Filing("424b4", "424B4", "Prospectus Filed Pursuant to Rule 424(b)(4)", date(2025, 5, 23),
           f"{_EDGAR}/000121390025047444/ea0232145-09.htm"),
    Filing("8k-1", "8-K", "Current Report - Initial Business Combination Announcement", date(2025, 6, 17),
           f"{_EDGAR}/000121390025055207/ea0245915-8k_calred.htm"),
    Filing("8k-2", "8-K", "Current Report - Management Update", date(2025, 6, 2),
           f"{_EDGAR}/000121390025050126/ea0243885-8k_calred.htm"),
    Filing("8k-3", "8-K", "Current Report - Entry into a Material Agreement", date(2025, 5, 27),
           f"{_EDGAR}/000121390025047867/ea0243417-8k_calredwood.htm"),
    Filing("IMTA", "IMTA", "Investment Management Trust Agreement", date(2025, 5, 22),
           f"{_EDGAR}/000121390025045030/ea023214507ex10-2_calred.htm"),
    Filing("onboarding-1", "Onboarding", "Cal Redwood Account Packet", date(2025, 5, 9),
           "https://rpnrtswahzutdgotkzkz.supabase.co/storage/v1/object/public/documents/"
           "Document%20Depository/CRAC/Cal%20Redwood%20Onboarding%20Packet.pdf"),
)


def featured_filings(issuer_id: str, settings: Settings | None = None) -> list[dict[str, Any]]:
    """Static filing catalogue; only the featured issuer has one."""

    settings = settings or get_settings()
    if issuer_id != settings.featured_documents_issuer_id:
        return []
    return [filing.to_dict() for filing in FEATURED_FILINGS]


def sanitise_filename(filename: str) -> str:
    return _UNSAFE_FILENAME_CHARS.sub("_", filename)


def storage_key(issuer_id: str, document_type: str, filename: str, *, epoch_ms: int | None = None) -> str:
    stamp = epoch_ms if epoch_ms is not None else int(time.time() * 1000)
    return f"{issuer_id}/{document_type}/{stamp}_{sanitise_filename(filename)}"


@dataclass(slots=True, frozen=True)
class StoredDocument:
    file_url: str
    file_name: str
    file_size: int
    file_type: str | None
    storage_path: str


class DocumentStorage:
    """Writes issuer documents to the documents bucket."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        s3_client_factory: Callable[[], Any] | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._s3_client_factory = s3_client_factory or self._default_s3_client
        self._s3_client: Any | None = None

    def _default_s3_client(self) -> Any:
        return boto3.client(
            "s3",
            region_name=self._settings.aws_region,
            endpoint_url=self._settings.s3_endpoint_url,
        )

    def _get_s3_client(self) -> Any:
        if self._s3_client is None:
            self._s3_client = self._s3_client_factory()
        return self._s3_client

    def public_url(self, key: str) -> str:
        base = self._settings.documents_public_base_url
        if base:
            return f"{base.rstrip('/')}/{quote(key)}"
        bucket = self._settings.documents_bucket
        if self._settings.s3_endpoint_url:
            return f"{self._settings.s3_endpoint_url.rstrip('/')}/{bucket}/{quote(key)}"
        return f"https://{bucket}.s3.{self._settings.aws_region}.amazonaws.com/{quote(key)}"

    def upload(
        self,
        *,
        issuer_id: str,
        document_type: str,
        filename: str,
        body: bytes,
        content_type: str | None,
    ) -> StoredDocument:
        key = storage_key(issuer_id, document_type, filename)
        try:
            self._get_s3_client().put_object(
                Bucket=self._settings.documents_bucket,
                Key=key,
                Body=body,
                ContentType=content_type or "application/octet-stream",
                CacheControl=f"max-age={self._settings.documents_cache_control}",
                Metadata={"issuer_id": issuer_id, "document_type": document_type},
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("document upload failed", extra={"key": key, "error": str(exc)})
            raise ProviderError(str(exc) or "Failed to upload file") from exc

        logger.info("document uploaded", extra={"key": key, "size": len(body)})
        return StoredDocument(
            file_url=self.public_url(key),
            file_name=filename,
            file_size=len(body),
            file_type=content_type,
            storage_path=key,
        )


__all__ = [
    "FEATURED_FILINGS",
    "DocumentStorage",
    "Filing",
    "StoredDocument",
    "featured_filings",
    "sanitise_filename",
    "storage_key",
]
