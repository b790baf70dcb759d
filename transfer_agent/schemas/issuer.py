"""Pydantic schemas for issuer resources."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class IssuerFields(BaseModel):
    display_name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    address: str | None = None
    telephone: str | None = Field(default=None, max_length=64)
    tax_id: str | None = Field(default=None, max_length=64)
    incorporation: str | None = Field(default=None, max_length=255)
    underwriter: str | None = Field(default=None, max_length=255)
    share_info: str | None = None
    notes: str | None = None
    forms_sl_status: str | None = Field(default=None, max_length=255)
    timeframe_for_separation: str | None = Field(default=None, max_length=255)
    separation_ratio: str | None = Field(default=None, max_length=255)
    exchange_platform: str | None = Field(default=None, max_length=255)
    timeframe_for_bc: str | None = Field(default=None, max_length=255)
    us_counsel: str | None = Field(default=None, max_length=255)
    offshore_counsel: str | None = Field(default=None, max_length=255)


class IssuerUpdate(IssuerFields):
    issuer_name: str | None = Field(default=None, min_length=1, max_length=255)
    status: str | None = Field(default=None, max_length=32)

    @field_validator("issuer_name")
    @classmethod
    def _name_not_null(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("issuer_name cannot be null")
        return value


class SeparationRatioUpdate(BaseModel):
    separation_ratio: str | None = Field(default=None, max_length=255)


class IssuerImport(IssuerFields):
    issuer_name: str | None = Field(default=None, max_length=255)
    override: bool = False


class IssuerRead(IssuerFields):
    model_config = ConfigDict(from_attributes=True)

    id: str
    issuer_name: str
    status: str | None = None
    created_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class IssuerListItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    issuer_name: str
    display_name: str | None = None
    separation_ratio: str | None = None
    created_at: datetime | None = None


class IssuerPatchResponse(BaseModel):
    success: bool = True
    issuer: IssuerRead


class IssuerImportResponse(BaseModel):
    success: bool | None = None
    exists: bool | None = None
    issuer: IssuerRead | None = None


__all__ = [
    "IssuerImport",
    "IssuerImportResponse",
    "IssuerListItem",
    "IssuerPatchResponse",
    "IssuerRead",
    "IssuerUpdate",
    "SeparationRatioUpdate",
]
