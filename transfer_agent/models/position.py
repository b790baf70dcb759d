"""Shareholder position snapshot ORM model."""
from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from transfer_agent.models.base import Base, TimestampMixin


class ShareholderPosition(TimestampMixin, Base):
    """Shares owned by a shareholder in one security as of a position date."""

    __tablename__ = "shareholder_positions"
    __table_args__ = (Index("ix_shareholder_positions_shareholder_id", "shareholder_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    shareholder_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("shareholders.id", ondelete="CASCADE"), nullable=False
    )
    issuer_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("issuers.id", ondelete="CASCADE"), nullable=False
    )
    security_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("securities.id", ondelete="SET NULL"), nullable=True
    )
    shares_owned: Mapped[Decimal] = mapped_column(Numeric(20, 4), nullable=False, default=0)
    position_date: Mapped[date | None] = mapped_column(Date)

    shareholder = relationship("Shareholder", back_populates="positions")


__all__ = ["ShareholderPosition"]
