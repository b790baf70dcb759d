"""Role resolution and issuer access checks."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from transfer_agent.core.errors import IssuerAccessDenied
from transfer_agent.models import Issuer, IssuerUser, Role, RoleName, User

logger = logging.getLogger(__name__)

ROLE_HIERARCHY: tuple[str, ...] = tuple(role.value for role in RoleName)
DEFAULT_ROLE = RoleName.READ_ONLY.value
NO_ACCESS_PAGE = "/?error=no_access"

_ROLE_DISPLAY_NAMES = {
    RoleName.SUPERADMIN.value: "Super Admin",
    RoleName.ADMIN.value: "Admin",
    RoleName.TRANSFER_TEAM.value: "Transfer Team",
    RoleName.SHAREHOLDER.value: "Shareholder",
    RoleName.BROKER.value: "Broker",
    RoleName.READ_ONLY.value: "Read Only",
}


def role_display_name(role_name: str) -> str:
    return _ROLE_DISPLAY_NAMES.get(role_name, "Read Only")


def highest_role(role_names: Iterable[str | None]) -> str | None:
    """Return the highest-priority role present, or ``None`` when there is none."""

    found = {name.lower() for name in role_names if name}
    for level in ROLE_HIERARCHY:
        if level in found:
            return level
    return None


def has_permission(role: str | None, required: str) -> bool:
    if role not in ROLE_HIERARCHY or required not in ROLE_HIERARCHY:
        return False
    return ROLE_HIERARCHY.index(role) <= ROLE_HIERARCHY.index(required)


def can_edit(role: str | None) -> bool:
    return has_permission(role, RoleName.TRANSFER_TEAM.value)


def is_admin(role: str | None) -> bool:
    return has_permission(role, RoleName.ADMIN.value)


def landing_page(role: str | None) -> str:
    if role == RoleName.SHAREHOLDER.value:
        return "/shareholder-home"
    if role in (RoleName.ADMIN.value, RoleName.SUPERADMIN.value):
        return "/dashboard"
    return "/"


def is_super_admin(session: Session, user_id: str) -> bool:
    user = session.get(User, user_id)
    return bool(user and user.is_super_admin)


def membership_roles(session: Session, user_id: str, issuer_id: str | None = None) -> list[str]:
    statement = (
        select(Role.role_name)
        .join(IssuerUser, IssuerUser.role_id == Role.id)
        .where(IssuerUser.user_id == user_id)
    )
    if issuer_id is not None:
        statement = statement.where(IssuerUser.issuer_id == issuer_id)
    return list(session.scalars(statement).all())


def resolve_global_role(session: Session, user_id: str) -> str:
    if is_super_admin(session, user_id):
        return RoleName.SUPERADMIN.value
    return highest_role(membership_roles(session, user_id)) or DEFAULT_ROLE


def resolve_issuer_role(session: Session, user_id: str, issuer_id: str) -> str | None:
    """Highest role on one issuer. Superadmins act as admins everywhere."""

    if is_super_admin(session, user_id):
        return RoleName.ADMIN.value
    roles = membership_roles(session, user_id, issuer_id)
    if not roles:
        return None
    return highest_role(roles) or roles[0]


@dataclass(slots=True)
class IssuerSummary:
    issuer_id: str
    issuer_name: str
    issuer_display_name: str | None
    issuer_description: str | None
    earliest_membership: datetime | None
    roles: list[dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "issuer_id": self.issuer_id,
            "issuer_name": self.issuer_name,
            "issuer_display_name": self.issuer_display_name,
            "issuer_description": self.issuer_description,
            "earliest_membership": self.earliest_membership,
            "roles": list(self.roles),
        }


def user_issuers(session: Session, user_id: str) -> list[IssuerSummary]:
    """Issuers available to a user, oldest membership first."""

    if is_super_admin(session, user_id):
        issuers = session.scalars(select(Issuer).order_by(Issuer.created_at, Issuer.issuer_name)).all()
        return [
            IssuerSummary(
                issuer_id=issuer.id,
                issuer_name=issuer.issuer_name,
                issuer_display_name=issuer.display_name,
                issuer_description=issuer.description,
                earliest_membership=issuer.created_at,
                roles=[{"name": RoleName.SUPERADMIN.value, "display_name": "Super Admin"}],
            )
            for issuer in issuers
        ]

    statement = (
        select(IssuerUser, Issuer, Role)
        .join(Issuer, Issuer.id == IssuerUser.issuer_id)
        .join(Role, Role.id == IssuerUser.role_id)
        .where(IssuerUser.user_id == user_id)
        .order_by(IssuerUser.created_at)
    )
    grouped: dict[str, IssuerSummary] = {}
    for membership, issuer, role in session.execute(statement).all():
        summary = grouped.get(issuer.id)
        if summary is None:
            summary = IssuerSummary(
                issuer_id=issuer.id,
                issuer_name=issuer.issuer_name,
                issuer_display_name=issuer.display_name,
                issuer_description=issuer.description,
                earliest_membership=membership.created_at,
            )
            grouped[issuer.id] = summary
        summary.roles.append(
            {
                "name": role.role_name or DEFAULT_ROLE,
                "display_name": role.display_name or role_display_name(role.role_name),
            }
        )
    return list(grouped.values())


@dataclass(slots=True, frozen=True)
class IssuerAccess:
    has_access: bool
    global_role: str
    issuer_role: str | None
    issuer: IssuerSummary | None
    landing_page: str


def validate_issuer_access(session: Session, user_id: str, issuer_id: str) -> IssuerAccess:
    """Decide whether a user may enter an issuer and where they should land."""

    global_role = resolve_global_role(session, user_id)
    if global_role == RoleName.SUPERADMIN.value:
        issuer = session.get(Issuer, issuer_id)
        summary = None
        if issuer is not None:
            summary = IssuerSummary(
                issuer_id=issuer.id,
                issuer_name=issuer.issuer_name,
                issuer_display_name=issuer.display_name,
                issuer_description=issuer.description,
                earliest_membership=issuer.created_at,
                roles=[{"name": RoleName.SUPERADMIN.value, "display_name": "Super Admin"}],
            )
        return IssuerAccess(
            has_access=True,
            global_role=global_role,
            issuer_role=RoleName.ADMIN.value,
            issuer=summary,
            landing_page=landing_page(global_role),
        )

    roles = membership_roles(session, user_id, issuer_id)
    if not roles:
        logger.info("issuer access denied", extra={"user_id": user_id, "issuer_id": issuer_id})
        return IssuerAccess(
            has_access=False,
            global_role=global_role,
            issuer_role=None,
            issuer=None,
            landing_page=NO_ACCESS_PAGE,
        )

    issuer_role = highest_role(roles) or roles[0]
    current = next(
        (summary for summary in user_issuers(session, user_id) if summary.issuer_id == issuer_id),
        None,
    )
    return IssuerAccess(
        has_access=True,
        global_role=global_role,
        issuer_role=issuer_role,
        issuer=current,
        landing_page=landing_page(issuer_role),
    )


def require_issuer_role(
    session: Session,
    *,
    user_id: str,
    issuer_id: str,
    minimum: RoleName = RoleName.TRANSFER_TEAM,
) -> str:
    """Return the caller's issuer role or raise when it is below ``minimum``."""

    role = resolve_issuer_role(session, user_id, issuer_id)
    if role is None:
        raise IssuerAccessDenied("Access denied to this issuer")
    if not has_permission(role, minimum.value):
        raise IssuerAccessDenied("Insufficient permissions for this issuer")
    return role


__all__ = [
    "DEFAULT_ROLE",
    "IssuerAccess",
    "IssuerSummary",
    "NO_ACCESS_PAGE",
    "ROLE_HIERARCHY",
    "can_edit",
    "has_permission",
    "highest_role",
    "is_admin",
    "is_super_admin",
    "landing_page",
    "membership_roles",
    "require_issuer_role",
    "resolve_global_role",
    "resolve_issuer_role",
    "role_display_name",
    "user_issuers",
    "validate_issuer_access",
]
