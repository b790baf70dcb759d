"""Restriction templates and restrictions applied to holders."""
from __future__ import annotations

from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from transfer_agent.core.errors import ValidationFailure
from transfer_agent.models import RestrictionTemplate, ShareholderRestriction
from transfer_agent.schemas.restriction import RestrictionTemplateCreate, ShareholderRestrictionCreate


def list_templates(session: Session, issuer_id: str) -> list[RestrictionTemplate]:
    statement = (
        select(RestrictionTemplate)
        .where(RestrictionTemplate.issuer_id == issuer_id)
        .order_by(RestrictionTemplate.created_at.desc())
    )
    return list(session.scalars(statement).all())


def create_template(
    session: Session, payload: RestrictionTemplateCreate, *, actor_id: str
) -> RestrictionTemplate:
    if not (payload.issuer_id and payload.restriction_type and payload.description):
        raise ValidationFailure("Missing required fields")
    template = RestrictionTemplate(
        issuer_id=payload.issuer_id,
        restriction_type=payload.restriction_type,
        description=payload.description,
        is_active=payload.is_active,
        created_by=actor_id,
    )
    session.add(template)
    session.commit()
    session.refresh(template)
    return template


def list_applied(session: Session, issuer_id: str) -> list[ShareholderRestriction]:
    statement = (
        select(ShareholderRestriction)
        .options(selectinload(ShareholderRestriction.shareholder), selectinload(ShareholderRestriction.template))
        .where(ShareholderRestriction.issuer_id == issuer_id)
        .order_by(ShareholderRestriction.created_at.desc())
    )
    return list(session.scalars(statement).all())


def apply_restriction(
    session: Session, payload: ShareholderRestrictionCreate, *, actor_id: str
) -> ShareholderRestriction:
    if not (
        payload.issuer_id
        and payload.shareholder_id
        and payload.restriction_id
        and payload.cusip
        and payload.restricted_shares is not None
    ):
        raise ValidationFailure("Missing required fields")
    restriction = ShareholderRestriction(
        issuer_id=payload.issuer_id,
        shareholder_id=payload.shareholder_id,
        restriction_id=payload.restriction_id,
        cusip=payload.cusip,
        restricted_shares=payload.restricted_shares,
        restriction_date=payload.restriction_date or date.today(),
        expiration_date=payload.expiration_date,
        notes=payload.notes,
        created_by=actor_id,
    )
    session.add(restriction)
    session.commit()
    session.refresh(restriction)
    return restriction


__all__ = ["apply_restriction", "create_template", "list_applied", "list_templates"]
