"""Transfer journal and record-keeping ledger enrichment."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from sqlalchemy import inspect, select
from sqlalchemy.orm import Session

from transfer_agent.models import RestrictionTemplate, Security, Shareholder, Transfer
from transfer_agent.obs import operation_span
from transfer_agent.services.positions import classify_transaction

logger = logging.getLogger(__name__)

DEFAULT_CERTIFICATE_TYPE = "Book Entry"


def row_to_dict(instance: Any) -> dict[str, Any]:
    """Column values of an ORM instance keyed by attribute name."""

    return {attr.key: getattr(instance, attr.key) for attr in inspect(instance).mapper.column_attrs}


def _text(value: Any) -> Any:
    return "" if value is None else value


def enrich_transfer(
    transfer: Transfer,
    security: Security | None,
    shareholder: Shareholder | None,
) -> dict[str, Any]:
    """Flatten a transfer with its security and holder details for export."""

    holder = row_to_dict(shareholder) if shareholder is not None else None
    details = row_to_dict(security) if security is not None else None
    first_name = shareholder.first_name if shareholder else None
    last_name = shareholder.last_name if shareholder else None
    return {
        **row_to_dict(transfer),
        "credit_debit": classify_transaction(transfer.transaction_type).value,
        "issue_name": _text(security.issue_name if security else None),
        "issue_ticker": _text(security.issue_ticker if security else None),
        "trading_platform": _text(security.trading_platform if security else None),
        "security_type": _text(security.class_name if security else None),
        "quantity": transfer.share_quantity,
        "certificate_type": transfer.certificate_type or DEFAULT_CERTIFICATE_TYPE,
        "account_number": _text(shareholder.account_number if shareholder else None),
        "shareholder_name": f"{first_name or ''} {last_name or ''}".strip() if shareholder else "",
        "shareholder_first_name": _text(first_name),
        "shareholder_last_name": _text(last_name),
        "address": _text(shareholder.address if shareholder else None),
        "city": _text(shareholder.city if shareholder else None),
        "state": _text(shareholder.state if shareholder else None),
        "zip": _text(shareholder.zip if shareholder else None),
        "country": _text(shareholder.country if shareholder else None),
        "taxpayer_id": _text(shareholder.taxpayer_id if shareholder else None),
        "tin_status": _text(shareholder.tin_status if shareholder else None),
        "email": _text(shareholder.email if shareholder else None),
        "phone": _text(shareholder.phone if shareholder else None),
        "date_of_birth": _text(shareholder.dob if shareholder else None),
        "ownership_percentage": _text(shareholder.ownership_percentage if shareholder else None),
        "lei": _text(shareholder.lei if shareholder else None),
        "holder_type": _text(shareholder.holder_type if shareholder else None),
        "ofac_date": _text(shareholder.ofac_date if shareholder else None),
        "ofac_results": "",
        "cusip_details": details,
        "shareholder": holder,
    }


def restriction_fields(
    transfer: Transfer, templates: Mapping[str, RestrictionTemplate]
) -> dict[str, Any]:
    template = templates.get(transfer.restriction_id or "")
    if template is None:
        return {"restrictions": [], "restricted_shares": Decimal("0"), "restriction_codes": ""}
    return {
        "restrictions": [row_to_dict(template)],
        "restricted_shares": transfer.share_quantity,
        "restriction_codes": template.restriction_type or "",
    }


def _lookups(session: Session, issuer_id: str) -> tuple[dict[str, Security], dict[str, Shareholder]]:
    securities = session.scalars(select(Security).where(Security.issuer_id == issuer_id)).all()
    holders = session.scalars(select(Shareholder).where(Shareholder.issuer_id == issuer_id)).all()
    return (
        {security.cusip: security for security in securities},
        {holder.id: holder for holder in holders},
    )


def _enrich_all(
    transfers: Iterable[Transfer],
    by_cusip: Mapping[str, Security],
    by_holder: Mapping[str, Shareholder],
) -> list[dict[str, Any]]:
    return [
        enrich_transfer(
            transfer,
            by_cusip.get(transfer.cusip or ""),
            by_holder.get(transfer.shareholder_id or ""),
        )
        for transfer in transfers
    ]


def transfer_journal(session: Session, issuer_id: str) -> list[dict[str, Any]]:
    """Every transfer of an issuer, newest first, enriched for export."""

    transfers = session.scalars(
        select(Transfer).where(Transfer.issuer_id == issuer_id).order_by(Transfer.created_at.desc())
    ).all()
    by_cusip, by_holder = _lookups(session, issuer_id)
    return _enrich_all(transfers, by_cusip, by_holder)


def record_keeping_ledger(session: Session, issuer_id: str) -> list[dict[str, Any]]:
    """Transfers in transaction-date order with restriction details attached."""

    with operation_span("journal.record_keeping_ledger", issuer_id=issuer_id):
        transfers = session.scalars(
            select(Transfer)
            .where(Transfer.issuer_id == issuer_id)
            .order_by(Transfer.transaction_date.asc())
        ).all()
        by_cusip, by_holder = _lookups(session, issuer_id)

        restriction_ids = {transfer.restriction_id for transfer in transfers if transfer.restriction_id}
        templates: dict[str, RestrictionTemplate] = {}
        if restriction_ids:
            rows = session.scalars(
                select(RestrictionTemplate).where(RestrictionTemplate.id.in_(restriction_ids))
            ).all()
            templates = {template.id: template for template in rows}

    ledger = []
    for transfer, enriched in zip(transfers, _enrich_all(transfers, by_cusip, by_holder)):
        enriched.update(restriction_fields(transfer, templates))
        ledger.append(enriched)
    logger.info(
        "record keeping ledger built",
        extra={"issuer_id": issuer_id, "count": len(ledger), "templates": len(templates)},
    )
    return ledger


__all__ = [
    "DEFAULT_CERTIFICATE_TYPE",
    "enrich_transfer",
    "record_keeping_ledger",
    "restriction_fields",
    "row_to_dict",
    "transfer_journal",
]
