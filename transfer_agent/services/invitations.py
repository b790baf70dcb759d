"""Reconciliation of external sign-ins against invitations and local users.

Each successful OAuth code exchange is evaluated once against a decision
table keyed on whether an invitation exists for the email and whether a
local user record already exists:

    invitation  local user  outcome
    ----------  ----------  -----------------------------------------------
    yes         any         InvitedLogin: create user (+ membership) if absent
    no          yes         ReturningLogin: reconcile a mismatched user id
    no          no          RejectedLogin: delete the external identity

Invitations are kept after first use.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Protocol, Union
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from transfer_agent.core.errors import ProviderError
from transfer_agent.models import InvitedUser, IssuerUser, RoleName, Shareholder, User
from transfer_agent.obs import operation_span
from transfer_agent.services.access import highest_role, membership_roles
from transfer_agent.services.auth_provider import AuthIdentity

logger = logging.getLogger(__name__)

SHAREHOLDER_HOME = "/shareholder-home"


class IdentityAdmin(Protocol):
    def delete_user(self, user_id: str) -> None: ...


class LoginBranch(str, enum.Enum):
    INVITED = "invited"
    EXISTING = "existing"
    NEITHER = "neither"


DECISION_TABLE: dict[tuple[bool, bool], LoginBranch] = {
    (True, True): LoginBranch.INVITED,
    (True, False): LoginBranch.INVITED,
    (False, True): LoginBranch.EXISTING,
    (False, False): LoginBranch.NEITHER,
}


def decide(invitation_found: bool, local_user_found: bool) -> LoginBranch:
    return DECISION_TABLE[(invitation_found, local_user_found)]


@dataclass(slots=True, frozen=True)
class InvitedLogin:
    target: str
    user_created: bool
    membership_created: bool


@dataclass(slots=True, frozen=True)
class ReturningLogin:
    target: str
    id_reconciled: bool


@dataclass(slots=True, frozen=True)
class RejectedLogin:
    identity_deleted: bool


@dataclass(slots=True, frozen=True)
class FailedLogin:
    error: str
    details: str | None = None
    identity_deleted: bool = False


LoginOutcome = Union[InvitedLogin, ReturningLogin, RejectedLogin, FailedLogin]


def error_detail(exc: BaseException) -> str:
    """Driver-level message of an error, without the statement or its parameters."""

    return str(getattr(exc, "orig", None) or exc)


class LoginLookupError(RuntimeError):
    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


def find_invitation(session: Session, email: str) -> InvitedUser | None:
    statement = (
        select(InvitedUser)
        .where(func.lower(InvitedUser.email) == email.lower())
        .order_by(InvitedUser.invited_at.desc())
        .limit(1)
    )
    try:
        return session.scalars(statement).first()
    except SQLAlchemyError as exc:
        logger.error("invitation lookup failed", extra={"error": str(exc)})
        raise LoginLookupError("invite_check_failed", error_detail(exc)) from exc


def find_local_user(session: Session, identity: AuthIdentity) -> User | None:
    """Match a local user by provider id, falling back to email."""

    statement = select(User).where(
        or_(User.id == identity.id, func.lower(User.email) == identity.email.lower())
    )
    try:
        candidates = session.scalars(statement).all()
    except SQLAlchemyError as exc:
        logger.error("local user lookup failed", extra={"error": str(exc)})
        raise LoginLookupError("user_check_failed", error_detail(exc)) from exc
    for candidate in candidates:
        if candidate.id == identity.id:
            return candidate
    return candidates[0] if candidates else None


def reconcile_login(
    session: Session,
    provider: IdentityAdmin,
    identity: AuthIdentity,
    *,
    next_path: str = "/",
) -> LoginOutcome:
    """Apply the login decision table for one exchanged identity."""

    try:
        invitation = find_invitation(session, identity.email)
        existing = None if invitation is not None else find_local_user(session, identity)
    except LoginLookupError as exc:
        logger.error("login lookup failed", extra={"error": str(exc), "code": exc.code})
        return FailedLogin(error=exc.code, details=str(exc))

    branch = decide(invitation is not None, existing is not None)
    logger.info("login branch resolved", extra={"email": identity.email, "branch": branch.value})

    with operation_span("auth.reconcile_login", branch=branch.value):
        if branch is LoginBranch.INVITED and invitation is not None:
            return _accept_invitation(session, provider, identity, invitation, next_path=next_path)
        if branch is LoginBranch.EXISTING and existing is not None:
            return _accept_returning_user(session, identity, existing, next_path=next_path)
        return _reject(provider, identity)


def _accept_invitation(
    session: Session,
    provider: IdentityAdmin,
    identity: AuthIdentity,
    invitation: InvitedUser,
    *,
    next_path: str,
) -> LoginOutcome:
    role_name = (invitation.role.role_name if invitation.role else "") or ""
    is_superadmin = role_name.lower() == RoleName.SUPERADMIN.value
    user_created = False
    membership_created = False

    try:
        existing = session.get(User, identity.id)
    except SQLAlchemyError as exc:
        logger.error("user lookup failed", extra={"error": str(exc)})
        return FailedLogin(error="user_check_failed", details=error_detail(exc))

    if existing is None:
        user = User(
            id=identity.id,
            email=identity.email,
            name=invitation.name,
            is_super_admin=is_superadmin,
            is_owner=False,
        )
        session.add(user)
        try:
            session.flush()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("user creation from invitation failed", extra={"error": str(exc)})
            deleted = _delete_identity(provider, identity)
            return FailedLogin(
                error="user_creation_failed",
                details=error_detail(exc) or "User creation failed",
                identity_deleted=deleted,
            )
        user_created = True

        if not is_superadmin and invitation.issuer_id:
            try:
                with session.begin_nested():
                    session.add(
                        IssuerUser(
                            user_id=identity.id,
                            issuer_id=invitation.issuer_id,
                            role_id=invitation.role_id,
                            is_primary=True,
                        )
                    )
                membership_created = True
            except SQLAlchemyError as exc:
                logger.error("issuer membership creation failed", extra={"error": str(exc)})

        session.commit()
        logger.info("user created from invitation", extra={"email": identity.email})

    target = SHAREHOLDER_HOME if role_name.lower() == RoleName.SHAREHOLDER.value else next_path
    return InvitedLogin(target=target, user_created=user_created, membership_created=membership_created)


def _accept_returning_user(
    session: Session, identity: AuthIdentity, existing: User, *, next_path: str
) -> LoginOutcome:
    id_reconciled = False
    previous_id = existing.id
    if previous_id != identity.id:
        logger.info(
            "reconciling user id",
            extra={"email": identity.email, "previous_id": previous_id, "auth_user_id": identity.id},
        )
        try:
            session.execute(
                update(User).where(User.id == previous_id).values(id=identity.id),
                execution_options={"synchronize_session": False},
            )
            session.execute(
                update(IssuerUser).where(IssuerUser.user_id == previous_id).values(user_id=identity.id),
                execution_options={"synchronize_session": False},
            )
            session.execute(
                update(Shareholder).where(Shareholder.user_id == previous_id).values(user_id=identity.id),
                execution_options={"synchronize_session": False},
            )
            session.commit()
            id_reconciled = True
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("user id reconciliation failed", extra={"error": str(exc)})
        session.expire_all()

    target = next_path
    try:
        if highest_role(membership_roles(session, identity.id)) == RoleName.SHAREHOLDER.value:
            target = SHAREHOLDER_HOME
    except SQLAlchemyError as exc:
        logger.warning("issuer role lookup for redirect failed", extra={"error": str(exc)})
    return ReturningLogin(target=target, id_reconciled=id_reconciled)


def _reject(provider: IdentityAdmin, identity: AuthIdentity) -> LoginOutcome:
    logger.warning("uninvited sign-in rejected", extra={"email": identity.email})
    return RejectedLogin(identity_deleted=_delete_identity(provider, identity))


def _delete_identity(provider: IdentityAdmin, identity: AuthIdentity) -> bool:
    try:
        provider.delete_user(identity.id)
    except ProviderError as exc:
        logger.warning("failed to delete auth identity", extra={"error": str(exc)})
        return False
    return True


def _with_query(path: str, **params: str) -> str:
    parts = urlsplit(path)
    query = parse_qsl(parts.query, keep_blank_values=True)
    query.extend(params.items())
    return urlunsplit(("", "", parts.path or "/", urlencode(query), parts.fragment))


def login_error_path(error: str, details: str | None = None) -> str:
    params = {"error": error}
    if details:
        params["details"] = details
    return _with_query("/login", **params)


def redirect_path(outcome: LoginOutcome) -> str:
    """Relative redirect target for a login outcome."""

    if isinstance(outcome, InvitedLogin):
        return _with_query(outcome.target, login="new")
    if isinstance(outcome, ReturningLogin):
        return _with_query(outcome.target, login="returning")
    if isinstance(outcome, RejectedLogin):
        return login_error_path("not_invited")
    return login_error_path(outcome.error, outcome.details)


__all__ = [
    "DECISION_TABLE",
    "FailedLogin",
    "InvitedLogin",
    "LoginBranch",
    "LoginOutcome",
    "RejectedLogin",
    "ReturningLogin",
    "decide",
    "error_detail",
    "find_invitation",
    "find_local_user",
    "login_error_path",
    "reconcile_login",
    "redirect_path",
]
