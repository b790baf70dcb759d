"""Restriction template and applied restriction endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
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
from transfer_agent.schemas.restriction import (
    RestrictionTemplateCreate,
    RestrictionTemplateRead,
    ShareholderRestrictionCreate,
    ShareholderRestrictionDetail,
    ShareholderRestrictionRead,
)
from transfer_agent.services import restrictions as restriction_service

router = APIRouter()


@router.get("/restriction-templates", response_model=list[RestrictionTemplateRead])
def list_templates(
    issuer_id: str | None = Query(default=None, alias="issuerId"),
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> list[RestrictionTemplateRead]:
    issuer_id = require_issuer_id(issuer_id)
    ensure_member(session, user, issuer_id)
    return [
        RestrictionTemplateRead.model_validate(item)
        for item in restriction_service.list_templates(session, issuer_id)
    ]


@router.post("/restriction-templates", response_model=RestrictionTemplateRead)
def create_template(
    payload: RestrictionTemplateCreate,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> RestrictionTemplateRead:
    ensure_can_edit(session, user, [payload.issuer_id])
    try:
        template = restriction_service.create_template(session, payload, actor_id=user.id)
    except TransferAgentError as exc:
        raise http_error(exc) from exc
    return RestrictionTemplateRead.model_validate(template)


@router.get("/shareholder-restrictions", response_model=list[ShareholderRestrictionDetail])
def list_shareholder_restrictions(
    issuer_id: str | None = Query(default=None, alias="issuerId"),
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> list[ShareholderRestrictionDetail]:
    issuer_id = require_issuer_id(issuer_id)
    ensure_member(session, user, issuer_id)
    return [
        ShareholderRestrictionDetail.model_validate(item)
        for item in restriction_service.list_applied(session, issuer_id)
    ]


@router.post("/shareholder-restrictions", response_model=ShareholderRestrictionRead)
def apply_restriction(
    payload: ShareholderRestrictionCreate,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> ShareholderRestrictionRead:
    ensure_can_edit(session, user, [payload.issuer_id])
    try:
        restriction = restriction_service.apply_restriction(session, payload, actor_id=user.id)
    except TransferAgentError as exc:
        raise http_error(exc) from exc
    return ShareholderRestrictionRead.model_validate(restriction)


__all__ = ["router"]
