"""Pydantic schemas for transfer ledger resources."""
from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

_UUID_PATTERN = re.compile(r"^[0-9a-fA-F-]{36}$")


class TransferImportRow(BaseModel):
    issuer_id: str | None = None
    cusip: str | None = None
    transaction_type: str | None = None
    share_quantity: Any = None
    shareholder_id: str | None = None
    transaction_date: date | None = None
    status: str | None = None
    notes: str | None = None
    certificate_type: str | None = None

    @field_validator("share_quantity", mode="before")
    @classmethod
    def _finite_quantity(cls, value: Any) -> Decimal:
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
            return Decimal("0")
        quantity = Decimal(str(value))
        return quantity if quantity.is_finite() else Decimal("0")

    @field_validator("shareholder_id", mode="before")
    @classmethod
    def _uuid_or_none(cls, value: Any) -> str | None:
        if isinstance(value, str) and _UUID_PATTERN.match(value):
            return value
        return None


class TransferRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    issuer_id: str
    shareholder_id: str | None = None
    cusip: str | None = None
    transaction_type: str | None = None
    share_quantity: Decimal
    transaction_date: date | None = None
    status: str
    certificate_type: str
    notes: str | None = None
    restriction_id: str | None = None
    created_by: str | None = None
    created_at: datetime | None = None


class ShareholderTransaction(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    issuer_id: str
    cusip: str | None = None
    transaction_type: str | None = None
    share_quantity: Decimal
    transaction_date: date | None = None
    status: str
    certificate_type: str
    notes: str | None = None


class ShareholderTransactions(BaseModel):
    transactions: list[ShareholderTransaction]


class TransferImportResponse(BaseModel):
    success: bool = True
    count: int
    records: list[TransferRead]


class StatementLine(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    line_date: date | None = Field(default=None, alias="date")
    type: str | None = None
    shares: Decimal
    running_total: Decimal


class StatementHoldingRead(BaseModel):
    cusip: str
    issue_name: str | None = None
    class_name: str | None = None
    shares: Decimal
    restrictions: list[str]
    transactions: list[StatementLine]


class StatementRead(BaseModel):
    shareholder_id: str
    issuer_id: str
    as_of: date | None = None
    holdings: list[StatementHoldingRead]


__all__ = [
    "ShareholderTransaction",
    "ShareholderTransactions",
    "StatementHoldingRead",
    "StatementLine",
    "StatementRead",
    "TransferImportResponse",
    "TransferImportRow",
    "TransferRead",
]
