"""Pydantic schemas for restriction templates and applied restrictions."""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class RestrictionTemplateCreate(BaseModel):
    issuer_id: str | None = None
    restriction_type: str | None = None
    description: str | None = None
    is_active: bool = True


class RestrictionTemplateRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    issuer_id: str
    restriction_type: str
    description: str
    is_active: bool
    created_by: str | None = None
    created_at: datetime | None = None


class ShareholderRestrictionCreate(BaseModel):
    issuer_id: str | None = None
    shareholder_id: str | None = None
    restriction_id: str | None = None
    cusip: str | None = None
    restricted_shares: Decimal | None = None
    restriction_date: date | None = None
    expiration_date: date | None = None
    notes: str | None = None


class RestrictedHolder(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str | None = None
    last_name: str | None = None
    account_number: str | None = None


class RestrictionSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    restriction_type: str
    description: str


class ShareholderRestrictionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    issuer_id: str
    shareholder_id: str
    restriction_id: str
    cusip: str
    restricted_shares: Decimal
    restriction_date: date
    expiration_date: date | None = None
    notes: str | None = None
    created_by: str | None = None
    created_at: datetime | None = None


class ShareholderRestrictionDetail(ShareholderRestrictionRead):
    shareholder: RestrictedHolder | None = None
    template: RestrictionSummary | None = None


__all__ = [
    "RestrictedHolder",
    "RestrictionSummary",
    "RestrictionTemplateCreate",
    "RestrictionTemplateRead",
    "ShareholderRestrictionCreate",
    "ShareholderRestrictionDetail",
    "ShareholderRestrictionRead",
]
