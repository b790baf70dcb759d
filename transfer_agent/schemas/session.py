"""Pydantic schemas describing the signed-in session and issuer access."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class IssuerRole(BaseModel):
    name: str
    display_name: str


class AvailableIssuer(BaseModel):
    issuer_id: str
    issuer_name: str
    issuer_display_name: str | None = None
    issuer_description: str | None = None
    earliest_membership: datetime | None = None
    roles: list[IssuerRole]


class SessionUser(BaseModel):
    id: str
    email: str
    name: str | None = None


class SessionContext(BaseModel):
    user: SessionUser
    role: str
    issuers: list[AvailableIssuer]
    landing_page: str
    can_edit: bool
    is_admin: bool
    is_super_admin: bool


class IssuerAccessRead(BaseModel):
    has_access: bool
    role: str
    issuer_role: str | None = None
    issuer: AvailableIssuer | None = None
    landing_page: str


class UserRead(BaseModel):
    id: str
    email: str
    created_at: datetime | None = None


__all__ = [
    "AvailableIssuer",
    "IssuerAccessRead",
    "IssuerRole",
    "SessionContext",
    "SessionUser",
    "UserRead",
]
