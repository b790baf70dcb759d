"""Bulk import of transfer ledger rows."""
from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.orm import Session

from transfer_agent.core.errors import ValidationFailure
from transfer_agent.models import Transfer
from transfer_agent.schemas.transfer import TransferImportRow
from transfer_agent.services.journal import DEFAULT_CERTIFICATE_TYPE

logger = logging.getLogger(__name__)

DEFAULT_STATUS = "ACTIVE"


def import_transfers(session: Session, rows: Sequence[TransferImportRow], *, actor_id: str) -> list[Transfer]:
    """Insert ledger rows as-is. Restriction links are never set on import."""

    if not rows:
        raise ValidationFailure("No transactions provided")
    if any(not row.issuer_id for row in rows):
        raise ValidationFailure("issuer_id is required for every transaction")

    records = [
        Transfer(
            issuer_id=row.issuer_id,
            cusip=row.cusip or None,
            transaction_type=row.transaction_type or None,
            share_quantity=row.share_quantity,
            shareholder_id=row.shareholder_id,
            restriction_id=None,
            transaction_date=row.transaction_date,
            status=row.status or DEFAULT_STATUS,
            notes=row.notes or None,
            certificate_type=row.certificate_type or DEFAULT_CERTIFICATE_TYPE,
            created_by=actor_id,
        )
        for row in rows
    ]
    session.add_all(records)
    session.commit()
    for record in records:
        session.refresh(record)
    logger.info("transfers imported", extra={"count": len(records), "actor": actor_id})
    return records


__all__ = ["DEFAULT_STATUS", "import_transfers"]
