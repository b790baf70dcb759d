"""Security (CUSIP) catalogue per issuer."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from transfer_agent.core.errors import ValidationFailure
from transfer_agent.models import Security
from transfer_agent.schemas.security import SecurityCreate

logger = logging.getLogger(__name__)

ACTIVE = "active"


def active_securities(session: Session, issuer_id: str) -> list[Security]:
    statement = (
        select(Security)
        .where(Security.issuer_id == issuer_id, Security.status == ACTIVE)
        .order_by(Security.created_at.desc())
    )
    return list(session.scalars(statement).all())


def create_security(session: Session, payload: SecurityCreate, *, actor_id: str) -> Security:
    if not (payload.issuer_id and payload.class_name and payload.cusip and payload.issue_name):
        raise ValidationFailure("issuer_id, class_name, cusip, and issue_name are required")

    duplicate = session.scalars(
        select(Security.id).where(Security.issuer_id == payload.issuer_id, Security.cusip == payload.cusip)
    ).first()
    if duplicate is not None:
        logger.warning("duplicate cusip rejected", extra={"issuer_id": payload.issuer_id, "cusip": payload.cusip})
        raise ValidationFailure("CUSIP already exists for this issuer")

    security = Security(
        issuer_id=payload.issuer_id,
        class_name=payload.class_name,
        cusip=payload.cusip,
        issue_name=payload.issue_name,
        issue_ticker=payload.issue_ticker or None,
        total_authorized_shares=payload.total_authorized_shares or None,
        trading_platform=payload.trading_platform or None,
        status=payload.status or ACTIVE,
        created_by=actor_id,
    )
    session.add(security)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise ValidationFailure("CUSIP already exists for this issuer") from exc
    session.refresh(security)
    return security


__all__ = ["ACTIVE", "active_securities", "create_security"]
