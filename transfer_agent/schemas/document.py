"""Pydantic schemas for issuer documents."""
from __future__ import annotations

from datetime import date

from pydantic import BaseModel


class FilingDocument(BaseModel):
    id: str
    type: str
    title: str
    filing_date: date
    url: str


class DocumentList(BaseModel):
    documents: list[FilingDocument]


class UploadResult(BaseModel):
    success: bool = True
    file_url: str
    file_name: str
    file_size: int
    file_type: str | None = None
    storage_path: str


__all__ = ["DocumentList", "FilingDocument", "UploadResult"]
