"""Identity and authorization ORM models."""
from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from transfer_agent.models.base import Base, TimestampMixin


class RoleName(str, enum.Enum):
    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    TRANSFER_TEAM = "transfer_team"
    SHAREHOLDER = "shareholder"
    BROKER = "broker"
    READ_ONLY = "read_only"


class User(TimestampMixin, Base):
    """Local user record keyed by the auth provider's user id."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    name: Mapped[str | None] = mapped_column(String(255))
    is_super_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_owner: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    memberships = relationship("IssuerUser", back_populates="user")


class Role(TimestampMixin, Base):
    """Entry in the fixed role catalogue."""

    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    role_name: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    display_name: Mapped[str | None] = mapped_column(String(128))


class InvitedUser(TimestampMixin, Base):
    """Pre-authorization of an email for a role before first sign-in."""

    __tablename__ = "invited_users"
    __table_args__ = (Index("ix_invited_users_email", "email"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    name: Mapped[str | None] = mapped_column(String(255))
    role_id: Mapped[int] = mapped_column(Integer, ForeignKey("roles.id"), nullable=False)
    issuer_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("issuers.id", ondelete="CASCADE"), nullable=True
    )
    invited_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    role = relationship("Role")
    issuer = relationship("Issuer")


class IssuerUser(TimestampMixin, Base):
    """Membership granting a user one role on one issuer."""

    __tablename__ = "issuer_users"
    __table_args__ = (
        Index("ix_issuer_users_user_id", "user_id"),
        Index("ix_issuer_users_issuer_id", "issuer_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE", onupdate="CASCADE"), nullable=False
    )
    issuer_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("issuers.id", ondelete="CASCADE"), nullable=False
    )
    role_id: Mapped[int] = mapped_column(Integer, ForeignKey("roles.id"), nullable=False)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    user = relationship("User", back_populates="memberships")
    issuer = relationship("Issuer", back_populates="memberships")
    role = relationship("Role")


__all__ = ["InvitedUser", "IssuerUser", "Role", "RoleName", "User"]
