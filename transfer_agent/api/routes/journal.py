"""Transfer journal, record-keeping ledger and bulk transfer import."""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
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
from transfer_agent.obs import record_transfers_imported
from transfer_agent.schemas.transfer import TransferImportResponse, TransferImportRow, TransferRead
from transfer_agent.services.journal import record_keeping_ledger, transfer_journal
from transfer_agent.services.transfers import import_transfers

router = APIRouter()


@router.get("/transfer-journal")
def get_transfer_journal(
    issuer_id: str | None = Query(default=None, alias="issuerId"),
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> list[dict[str, Any]]:
    issuer_id = require_issuer_id(issuer_id)
    ensure_member(session, user, issuer_id)
    return transfer_journal(session, issuer_id)


@router.get("/record-keeping-transactions")
def get_record_keeping_transactions(
    issuer_id: str | None = Query(default=None, alias="issuerId"),
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> list[dict[str, Any]]:
    issuer_id = require_issuer_id(issuer_id)
    ensure_member(session, user, issuer_id)
    return record_keeping_ledger(session, issuer_id)


@router.post(
    "/recordkeeping/transactions",
    response_model=TransferImportResponse,
    status_code=status.HTTP_201_CREATED,
)
def import_record_keeping_transactions(
    rows: list[TransferImportRow] = Body(...),
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> TransferImportResponse:
    ensure_can_edit(session, user, [row.issuer_id for row in rows])
    try:
        records = import_transfers(session, rows, actor_id=user.id)
    except TransferAgentError as exc:
        raise http_error(exc) from exc
    record_transfers_imported(len(records))
    return TransferImportResponse(
        success=True,
        count=len(records),
        records=[TransferRead.model_validate(record) for record in records],
    )


__all__ = ["router"]
