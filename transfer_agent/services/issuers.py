"""Issuer reads, updates and imports."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from transfer_agent.core.errors import NotFoundError, ValidationFailure
from transfer_agent.models import Issuer

logger = logging.getLogger(__name__)

UNNAMED_ISSUER = "Unnamed Issuer"

IMPORT_FIELDS: tuple[str, ...] = (
    "address",
    "telephone",
    "tax_id",
    "incorporation",
    "underwriter",
    "share_info",
    "notes",
    "forms_sl_status",
    "timeframe_for_separation",
    "separation_ratio",
    "exchange_platform",
    "timeframe_for_bc",
    "us_counsel",
    "offshore_counsel",
    "description",
)


def list_issuers(session: Session) -> list[Issuer]:
    return list(session.scalars(select(Issuer).order_by(Issuer.issuer_name)).all())


def get_issuer(session: Session, issuer_id: str) -> Issuer:
    issuer = session.get(Issuer, issuer_id)
    if issuer is None:
        raise NotFoundError("Issuer not found")
    return issuer


def find_by_name(session: Session, issuer_name: str) -> Issuer | None:
    return session.scalars(select(Issuer).where(Issuer.issuer_name == issuer_name)).first()


def _is_unique_violation(exc: IntegrityError) -> bool:
    message = str(exc.orig).lower()
    return "unique" in message or "duplicate" in message


def _commit(session: Session, issuer: Issuer) -> Issuer:
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        if _is_unique_violation(exc):
            raise ValidationFailure("Issuer name already exists") from exc
        logger.warning("issuer write rejected", extra={"error": str(exc.orig)})
        raise ValidationFailure("Invalid issuer data") from exc
    session.refresh(issuer)
    return issuer


def update_issuer(session: Session, issuer_id: str, changes: Mapping[str, Any]) -> Issuer:
    """Apply a partial set of column values to an issuer."""

    issuer = get_issuer(session, issuer_id)
    for field_name, value in changes.items():
        setattr(issuer, field_name, value)
    return _commit(session, issuer)


def set_separation_ratio(session: Session, issuer_id: str, separation_ratio: str | None) -> Issuer:
    issuer = get_issuer(session, issuer_id)
    issuer.separation_ratio = separation_ratio
    logger.info("separation ratio updated", extra={"issuer_id": issuer_id})
    return _commit(session, issuer)


@dataclass(slots=True, frozen=True)
class ImportResult:
    issuer: Issuer
    created: bool
    exists: bool = False


def import_issuer(session: Session, payload: Mapping[str, Any], *, actor_id: str) -> ImportResult:
    """Create an issuer, or overwrite one of the same name when ``override`` is set."""

    issuer_name = payload.get("issuer_name") or None
    existing = None
    if issuer_name:
        existing = find_by_name(session, issuer_name)

    if existing is not None and not payload.get("override"):
        return ImportResult(issuer=existing, created=False, exists=True)

    values: dict[str, Any] = {field: payload.get(field) or None for field in IMPORT_FIELDS}
    values["issuer_name"] = issuer_name or UNNAMED_ISSUER
    values["display_name"] = payload.get("display_name") or issuer_name or None
    values["created_by"] = actor_id

    if existing is not None:
        for field_name, value in values.items():
            setattr(existing, field_name, value)
        issuer = _commit(session, existing)
        logger.info("issuer overwritten by import", extra={"issuer_id": issuer.id})
        return ImportResult(issuer=issuer, created=False)

    issuer = Issuer(**values)
    session.add(issuer)
    issuer = _commit(session, issuer)
    logger.info("issuer imported", extra={"issuer_id": issuer.id})
    return ImportResult(issuer=issuer, created=True)


__all__ = [
    "IMPORT_FIELDS",
    "ImportResult",
    "find_by_name",
    "UNNAMED_ISSUER",
    "get_issuer",
    "import_issuer",
    "list_issuers",
    "set_separation_ratio",
    "update_issuer",
]
