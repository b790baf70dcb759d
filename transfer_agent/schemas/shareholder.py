"""Pydantic schemas for shareholder resources."""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ShareholderCreate(BaseModel):
    issuer_id: str = Field(..., min_length=1, max_length=36)
    account_number: str | None = Field(default=None, max_length=64)
    first_name: str | None = Field(
        default=None,
        max_length=255,
        validation_alias=AliasChoices("first_name", "shareholder_name"),
    )
    last_name: str | None = Field(default=None, max_length=255)
    address: str | None = None
    city: str | None = Field(default=None, max_length=128)
    state: str | None = Field(default=None, max_length=64)
    zip: str | None = Field(default=None, max_length=32)
    country: str | None = Field(default=None, max_length=64)
    taxpayer_id: str | None = Field(default=None, max_length=64)
    tin_status: str | None = Field(default=None, max_length=64)
    email: str | None = Field(default=None, max_length=320)
    phone: str | None = Field(default=None, max_length=64)
    dob: date | None = Field(default=None, validation_alias=AliasChoices("dob", "date_of_birth"))
    holder_type: str | None = Field(default=None, max_length=64)
    lei: str | None = Field(default=None, max_length=64)
    ownership_percentage: Decimal = Field(default=Decimal("0"))
    ofac_date: date | None = None


class ShareholderRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    issuer_id: str
    account_number: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    country: str | None = None
    taxpayer_id: str | None = None
    tin_status: str | None = None
    email: str | None = None
    phone: str | None = None
    dob: date | None = None
    holder_type: str | None = None
    lei: str | None = None
    ownership_percentage: Decimal | None = None
    ofac_date: date | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class IssuerShareholderRead(ShareholderRead):
    current_shares: Decimal = Decimal("0")
    calculated_ownership_percentage: Decimal = Decimal("0")


class ShareholderProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str | None = None
    last_name: str | None = None
    account_number: str | None = None
    holder_type: str | None = None
    address: str | None = None
    email: str | None = None
    phone: str | None = None
    ownership_percentage: Decimal | None = None


class HoldingIssuer(BaseModel):
    id: str
    issuer_name: str


class HoldingSecurity(BaseModel):
    id: str
    class_name: str
    cusip: str
    total_authorized_shares: Decimal | None = None


class Holding(BaseModel):
    id: str
    shares_owned: Decimal
    position_date: date | None = None
    issuer_id: str
    security_id: str | None = None
    issuer: HoldingIssuer | None = None
    security: HoldingSecurity | None = None
    ownership_percentage: Decimal


class ShareholderHoldings(BaseModel):
    profile: ShareholderProfile
    holdings: list[Holding]


__all__ = [
    "Holding",
    "HoldingIssuer",
    "HoldingSecurity",
    "IssuerShareholderRead",
    "ShareholderCreate",
    "ShareholderHoldings",
    "ShareholderProfile",
    "ShareholderRead",
]
