"""Shareholder ORM model."""
from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from transfer_agent.models.base import Base, TimestampMixin


class Shareholder(TimestampMixin, Base):
    """Holder of record scoped to a single issuer."""

    __tablename__ = "shareholders"
    __table_args__ = (
        Index("ix_shareholders_issuer_id", "issuer_id"),
        Index("ix_shareholders_email", "email"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    issuer_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("issuers.id", ondelete="CASCADE"), nullable=False
    )
    account_number: Mapped[str | None] = mapped_column(String(64))
    first_name: Mapped[str | None] = mapped_column(String(255))
    last_name: Mapped[str | None] = mapped_column(String(255))
    address: Mapped[str | None] = mapped_column(Text)
    city: Mapped[str | None] = mapped_column(String(128))
    state: Mapped[str | None] = mapped_column(String(64))
    zip: Mapped[str | None] = mapped_column(String(32))
    country: Mapped[str | None] = mapped_column(String(64))
    taxpayer_id: Mapped[str | None] = mapped_column(String(64))
    tin_status: Mapped[str | None] = mapped_column(String(64))
    email: Mapped[str | None] = mapped_column(String(320))
    phone: Mapped[str | None] = mapped_column(String(64))
    dob: Mapped[date | None] = mapped_column(Date)
    holder_type: Mapped[str | None] = mapped_column(String(64))
    lei: Mapped[str | None] = mapped_column(String(64))
    ownership_percentage: Mapped[Decimal] = mapped_column(Numeric(9, 4), nullable=False, default=0)
    ofac_date: Mapped[date | None] = mapped_column(Date)
    user_id: Mapped[str | None] = mapped_column(String(36))

    issuer = relationship("Issuer", back_populates="shareholders")
    transfers = relationship("Transfer", back_populates="shareholder")
    positions = relationship("ShareholderPosition", back_populates="shareholder")

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


__all__ = ["Shareholder"]
