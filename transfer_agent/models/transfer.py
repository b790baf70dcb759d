"""Share transfer ORM model."""
from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from transfer_agent.models.base import Base, TimestampMixin


class Transfer(TimestampMixin, Base):
    """Append-only event changing a shareholder's position in a security."""

    __tablename__ = "transfers"
    __table_args__ = (
        Index("ix_transfers_issuer_id", "issuer_id"),
        Index("ix_transfers_shareholder_id", "shareholder_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    issuer_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("issuers.id", ondelete="CASCADE"), nullable=False
    )
    shareholder_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("shareholders.id", ondelete="SET NULL"), nullable=True
    )
    cusip: Mapped[str | None] = mapped_column(String(16))
    transaction_type: Mapped[str | None] = mapped_column(String(64))
    share_quantity: Mapped[Decimal] = mapped_column(Numeric(20, 4), nullable=False, default=0)
    transaction_date: Mapped[date | None] = mapped_column(Date)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="ACTIVE")
    certificate_type: Mapped[str] = mapped_column(String(64), nullable=False, default="Book Entry")
    notes: Mapped[str | None] = mapped_column(Text)
    restriction_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("restriction_templates.id", ondelete="SET NULL"), nullable=True
    )
    created_by: Mapped[str | None] = mapped_column(String(36))

    shareholder = relationship("Shareholder", back_populates="transfers")
    restriction = relationship("RestrictionTemplate")


__all__ = ["Transfer"]
