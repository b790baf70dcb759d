"""Issuer ORM model."""
from __future__ import annotations

import uuid

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from transfer_agent.models.base import Base, TimestampMixin


class Issuer(TimestampMixin, Base):
    """A company whose shareholder records are administered."""

    __tablename__ = "issuers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    issuer_name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    display_name: Mapped[str | None] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text)
    address: Mapped[str | None] = mapped_column(Text)
    telephone: Mapped[str | None] = mapped_column(String(64))
    tax_id: Mapped[str | None] = mapped_column(String(64))
    incorporation: Mapped[str | None] = mapped_column(String(255))
    underwriter: Mapped[str | None] = mapped_column(String(255))
    share_info: Mapped[str | None] = mapped_column(Text)
    notes: Mapped[str | None] = mapped_column(Text)
    forms_sl_status: Mapped[str | None] = mapped_column(String(255))
    timeframe_for_separation: Mapped[str | None] = mapped_column(String(255))
    separation_ratio: Mapped[str | None] = mapped_column(String(255))
    exchange_platform: Mapped[str | None] = mapped_column(String(255))
    timeframe_for_bc: Mapped[str | None] = mapped_column(String(255))
    us_counsel: Mapped[str | None] = mapped_column(String(255))
    offshore_counsel: Mapped[str | None] = mapped_column(String(255))
    status: Mapped[str | None] = mapped_column(String(32))
    created_by: Mapped[str | None] = mapped_column(String(36))

    shareholders = relationship("Shareholder", back_populates="issuer")
    securities = relationship("Security", back_populates="issuer")
    memberships = relationship("IssuerUser", back_populates="issuer")


__all__ = ["Issuer"]
