"""Shareholder registers, holdings and statements."""
from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from transfer_agent.core.errors import NotFoundError, ValidationFailure
from transfer_agent.models import (
    Issuer,
    RestrictionTemplate,
    Security,
    Shareholder,
    ShareholderPosition,
    Transfer,
)
from transfer_agent.schemas.shareholder import ShareholderCreate
from transfer_agent.services.positions import holdings_ownership, issuer_ownership, statement_holdings

logger = logging.getLogger(__name__)


def find_by_email(session: Session, email: str, issuer_id: str | None = None) -> Shareholder | None:
    statement = select(Shareholder).where(Shareholder.email == email)
    if issuer_id is not None:
        statement = statement.where(Shareholder.issuer_id == issuer_id)
    return session.scalars(statement.order_by(Shareholder.created_at)).first()


def issuer_register(session: Session, issuer_id: str) -> list[dict[str, Any]]:
    """Shareholders of an issuer with balances derived from the transfer ledger."""

    holders = session.scalars(
        select(Shareholder).where(Shareholder.issuer_id == issuer_id).order_by(Shareholder.created_at)
    ).all()
    transfers = session.scalars(select(Transfer).where(Transfer.issuer_id == issuer_id)).all()
    ownership = issuer_ownership([holder.id for holder in holders], transfers)

    register = []
    for holder in holders:
        derived = ownership[holder.id]
        register.append(
            {
                "holder": holder,
                "current_shares": derived.current_shares,
                "calculated_ownership_percentage": derived.calculated_ownership_percentage,
            }
        )
    return register


def profile_with_holdings(session: Session, email: str) -> dict[str, Any]:
    """Profile for an email plus its position snapshots priced against authorized shares."""

    profile = find_by_email(session, email)
    if profile is None:
        raise NotFoundError("Shareholder not found")

    positions = session.scalars(
        select(ShareholderPosition).where(ShareholderPosition.shareholder_id == profile.id)
    ).all()
    issuer_ids = {position.issuer_id for position in positions}
    security_ids = {position.security_id for position in positions if position.security_id}

    issuers = {}
    if issuer_ids:
        for issuer in session.scalars(select(Issuer).where(Issuer.id.in_(issuer_ids))).all():
            issuers[issuer.id] = {"id": issuer.id, "issuer_name": issuer.issuer_name}
    securities = {}
    if security_ids:
        for security in session.scalars(select(Security).where(Security.id.in_(security_ids))).all():
            securities[security.id] = {
                "id": security.id,
                "class_name": security.class_name,
                "cusip": security.cusip,
                "total_authorized_shares": security.total_authorized_shares,
            }

    rows = [
        {
            "id": position.id,
            "shares_owned": position.shares_owned,
            "position_date": position.position_date,
            "issuer_id": position.issuer_id,
            "security_id": position.security_id,
            "issuer": issuers.get(position.issuer_id),
        }
        for position in positions
    ]
    return {"profile": profile, "holdings": holdings_ownership(rows, securities)}


def create_shareholders(session: Session, items: Sequence[ShareholderCreate]) -> list[Shareholder]:
    if not items:
        raise ValidationFailure("No shareholders provided")

    created = [Shareholder(**item.model_dump()) for item in items]
    session.add_all(created)
    session.commit()
    for shareholder in created:
        session.refresh(shareholder)
    logger.info("shareholders created", extra={"count": len(created)})
    return created


def shareholder_transactions(session: Session, issuer_id: str, email: str) -> list[Transfer]:
    """Transfers of the shareholder matching ``email`` within one issuer, newest first."""

    holder = find_by_email(session, email, issuer_id)
    if holder is None:
        raise NotFoundError("Shareholder not found")
    return list(
        session.scalars(
            select(Transfer)
            .where(Transfer.issuer_id == issuer_id, Transfer.shareholder_id == holder.id)
            .order_by(Transfer.transaction_date.desc())
        ).all()
    )


def statement(
    session: Session, issuer_id: str, shareholder_id: str, *, as_of: date | None = None
) -> dict[str, Any]:
    holder = session.get(Shareholder, shareholder_id)
    if holder is None or holder.issuer_id != issuer_id:
        raise NotFoundError("Shareholder not found")

    transfers = session.scalars(
        select(Transfer).where(Transfer.issuer_id == issuer_id, Transfer.shareholder_id == shareholder_id)
    ).all()
    holdings = statement_holdings(transfers, as_of=as_of)

    securities = {
        security.cusip: security
        for security in session.scalars(select(Security).where(Security.issuer_id == issuer_id)).all()
    }
    template_ids = {restriction_id for holding in holdings for restriction_id in holding.restriction_ids}
    templates = {}
    if template_ids:
        templates = {
            template.id: template.restriction_type
            for template in session.scalars(
                select(RestrictionTemplate).where(RestrictionTemplate.id.in_(template_ids))
            ).all()
        }

    return {
        "shareholder_id": shareholder_id,
        "issuer_id": issuer_id,
        "as_of": as_of,
        "holdings": [
            {
                "cusip": holding.cusip,
                "issue_name": getattr(securities.get(holding.cusip), "issue_name", None),
                "class_name": getattr(securities.get(holding.cusip), "class_name", None),
                "shares": holding.shares,
                "restrictions": [templates.get(rid, rid) for rid in holding.restriction_ids],
                "transactions": [
                    {
                        "date": line.date,
                        "type": line.type,
                        "shares": line.shares,
                        "running_total": line.running_total,
                    }
                    for line in holding.transactions
                ],
            }
            for holding in holdings
        ],
    }


__all__ = [
    "create_shareholders",
    "find_by_email",
    "issuer_register",
    "profile_with_holdings",
    "shareholder_transactions",
    "statement",
]
