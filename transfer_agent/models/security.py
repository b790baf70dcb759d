"""Security (CUSIP) ORM model."""
from __future__ import annotations

import uuid
from decimal import Decimal

from sqlalchemy import ForeignKey, Index, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from transfer_agent.models.base import Base, TimestampMixin


class Security(TimestampMixin, Base):
    """A CUSIP-identified class of shares issued by an issuer."""

    __tablename__ = "securities"
    __table_args__ = (
        UniqueConstraint("issuer_id", "cusip", name="uq_securities_issuer_cusip"),
        Index("ix_securities_issuer_id", "issuer_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    issuer_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("issuers.id", ondelete="CASCADE"), nullable=False
    )
    class_name: Mapped[str] = mapped_column(String(255), nullable=False)
    cusip: Mapped[str] = mapped_column(String(16), nullable=False)
    issue_name: Mapped[str] = mapped_column(String(255), nullable=False)
    issue_ticker: Mapped[str | None] = mapped_column(String(32))
    total_authorized_shares: Mapped[Decimal | None] = mapped_column(Numeric(20, 4))
    trading_platform: Mapped[str | None] = mapped_column(String(128))
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="active")
    created_by: Mapped[str | None] = mapped_column(String(36))

    issuer = relationship("Issuer", back_populates="securities")


__all__ = ["Security"]
