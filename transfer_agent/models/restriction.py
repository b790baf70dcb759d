"""Restriction template and applied restriction ORM models."""
from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import Boolean, Date, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from transfer_agent.models.base import Base, TimestampMixin


class RestrictionTemplate(TimestampMixin, Base):
    """Named restriction type available to an issuer."""

    __tablename__ = "restriction_templates"
    __table_args__ = (Index("ix_restriction_templates_issuer_id", "issuer_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    issuer_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("issuers.id", ondelete="CASCADE"), nullable=False
    )
    restriction_type: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_by: Mapped[str | None] = mapped_column(String(36))


class ShareholderRestriction(TimestampMixin, Base):
    """A restriction template applied to a shareholder's shares in one CUSIP."""

    __tablename__ = "shareholder_restrictions"
    __table_args__ = (Index("ix_shareholder_restrictions_issuer_id", "issuer_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    issuer_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("issuers.id", ondelete="CASCADE"), nullable=False
    )
    shareholder_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("shareholders.id", ondelete="CASCADE"), nullable=False
    )
    restriction_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("restriction_templates.id", ondelete="CASCADE"), nullable=False
    )
    cusip: Mapped[str] = mapped_column(String(16), nullable=False)
    restricted_shares: Mapped[Decimal] = mapped_column(Numeric(20, 4), nullable=False)
    restriction_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
    expiration_date: Mapped[date | None] = mapped_column(Date)
    notes: Mapped[str | None] = mapped_column(Text)
    created_by: Mapped[str | None] = mapped_column(String(36))

    shareholder = relationship("Shareholder")
    template = relationship("RestrictionTemplate")


__all__ = ["RestrictionTemplate", "ShareholderRestriction"]
