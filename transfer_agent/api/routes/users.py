"""User directory and the signed-in session context."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from transfer_agent.api.deps import AuthenticatedUser, get_current_user, get_db_session
from transfer_agent.models import RoleName, User
from transfer_agent.schemas.session import AvailableIssuer, SessionContext, SessionUser, UserRead
from transfer_agent.services.access import (
    can_edit,
    is_admin,
    landing_page,
    resolve_global_role,
    user_issuers,
)

router = APIRouter()


@router.get("/users", response_model=list[UserRead])
def list_users(
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> list[UserRead]:
    users = session.scalars(select(User).order_by(User.created_at.desc())).all()
    return [UserRead(id=item.id, email=item.email, created_at=item.created_at) for item in users]


@router.get("/me", response_model=SessionContext)
def current_session(
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> SessionContext:
    """Role, issuers and landing page for the caller."""

    record = session.get(User, user.id)
    role = resolve_global_role(session, user.id)
    return SessionContext(
        user=SessionUser(
            id=user.id,
            email=record.email if record else user.email,
            name=record.name if record else None,
        ),
        role=role,
        issuers=[AvailableIssuer(**summary.to_dict()) for summary in user_issuers(session, user.id)],
        landing_page=landing_page(role),
        can_edit=can_edit(role),
        is_admin=is_admin(role),
        is_super_admin=role == RoleName.SUPERADMIN.value,
    )


__all__ = ["router"]
