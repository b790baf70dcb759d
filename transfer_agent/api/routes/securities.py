"""Security catalogue endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from transfer_agent.api.deps import (
    AuthenticatedUser,
    ensure_can_edit,
    ensure_member,
    get_current_user,
    get_db_session,
    http_error,
    require_issuer_id,
)
from transfer_agent.core.errors import TransferAgentError
from transfer_agent.schemas.security import SecurityCreate, SecurityRead
from transfer_agent.services import securities as security_service

router = APIRouter(prefix="/securities")


@router.get("", response_model=list[SecurityRead])
def list_securities(
    issuer_id: str | None = Query(default=None, alias="issuerId"),
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> list[SecurityRead]:
    issuer_id = require_issuer_id(issuer_id)
    ensure_member(session, user, issuer_id)
    return [SecurityRead.model_validate(item) for item in security_service.active_securities(session, issuer_id)]


@router.post("", response_model=SecurityRead, status_code=status.HTTP_201_CREATED)
def create_security(
    payload: SecurityCreate,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> SecurityRead:
    ensure_can_edit(session, user, [payload.issuer_id])
    try:
        security = security_service.create_security(session, payload, actor_id=user.id)
    except TransferAgentError as exc:
        raise http_error(exc) from exc
    return SecurityRead.model_validate(security)


__all__ = ["router"]
