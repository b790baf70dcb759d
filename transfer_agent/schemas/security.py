"""Pydantic schemas for securities."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SecurityCreate(BaseModel):
    issuer_id: str | None = None
    class_name: str | None = None
    cusip: str | None = None
    issue_name: str | None = None
    issue_ticker: str | None = Field(default=None, max_length=32)
    total_authorized_shares: Decimal | None = Field(default=None, ge=0)
    trading_platform: str | None = Field(default=None, max_length=128)
    status: str | None = None

    @field_validator("status")
    @classmethod
    def _normalise_status(cls, value: str | None) -> str | None:
        return value.lower() if value else value


class SecurityRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    issuer_id: str
    class_name: str
    cusip: str
    issue_name: str
    issue_ticker: str | None = None
    total_authorized_shares: Decimal | None = None
    trading_platform: str | None = None
    status: str
    created_by: str | None = None
    created_at: datetime | None = None


__all__ = ["SecurityCreate", "SecurityRead"]
