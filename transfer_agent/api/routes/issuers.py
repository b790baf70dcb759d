"""Issuer endpoints: listing, profile updates, imports, documents and statements."""
from __future__ import annotations

import logging
import time
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from transfer_agent.api.deps import (
    AuthenticatedUser,
    ensure_can_edit,
    ensure_member,
    get_current_user,
    get_db_session,
    http_error,
)
from transfer_agent.core.errors import TransferAgentError
from transfer_agent.schemas.document import DocumentList, FilingDocument
from transfer_agent.schemas.issuer import (
    IssuerImport,
    IssuerImportResponse,
    IssuerListItem,
    IssuerPatchResponse,
    IssuerRead,
    IssuerUpdate,
    SeparationRatioUpdate,
)
from transfer_agent.schemas.session import AvailableIssuer, IssuerAccessRead
from transfer_agent.schemas.transfer import (
    ShareholderTransaction,
    ShareholderTransactions,
    StatementRead,
)
from transfer_agent.services import issuers as issuer_service
from transfer_agent.services import shareholders as shareholder_service
from transfer_agent.services.access import can_edit, resolve_global_role, validate_issuer_access
from transfer_agent.services.documents import featured_filings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/issuers")


@router.get("", response_model=list[IssuerListItem])
def list_issuers(
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> list[IssuerListItem]:
    return [IssuerListItem.model_validate(issuer) for issuer in issuer_service.list_issuers(session)]


@router.post("/import", response_model=IssuerImportResponse)
def import_issuer(
    payload: IssuerImport,
    response: Response,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> IssuerImportResponse:
    if not can_edit(resolve_global_role(session, user.id)):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
    if payload.override and payload.issuer_name:
        existing = issuer_service.find_by_name(session, payload.issuer_name)
        if existing is not None:
            ensure_can_edit(session, user, [existing.id])
    try:
        result = issuer_service.import_issuer(session, payload.model_dump(), actor_id=user.id)
    except TransferAgentError as exc:
        raise http_error(exc) from exc

    issuer = IssuerRead.model_validate(result.issuer)
    if result.exists:
        return IssuerImportResponse(exists=True, issuer=issuer)
    response.status_code = status.HTTP_201_CREATED if result.created else status.HTTP_200_OK
    return IssuerImportResponse(success=True, issuer=issuer)


@router.get("/{issuer_id}", response_model=IssuerRead)
def get_issuer(
    issuer_id: str,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> IssuerRead:
    started = time.perf_counter()
    try:
        issuer = issuer_service.get_issuer(session, issuer_id)
    except TransferAgentError as exc:
        raise http_error(exc) from exc
    finally:
        logger.info(
            "issuer lookup finished",
            extra={"issuer_id": issuer_id, "duration_ms": round((time.perf_counter() - started) * 1000, 2)},
        )
    ensure_member(session, user, issuer_id)
    return IssuerRead.model_validate(issuer)


@router.put("/{issuer_id}", response_model=IssuerRead)
def update_issuer(
    issuer_id: str,
    payload: IssuerUpdate,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> IssuerRead:
    ensure_can_edit(session, user, [issuer_id])
    try:
        issuer = issuer_service.update_issuer(session, issuer_id, payload.model_dump(exclude_unset=True))
    except TransferAgentError as exc:
        raise http_error(exc) from exc
    return IssuerRead.model_validate(issuer)


@router.patch("/{issuer_id}", response_model=IssuerPatchResponse)
def patch_separation_ratio(
    issuer_id: str,
    payload: SeparationRatioUpdate,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> IssuerPatchResponse:
    try:
        issuer_service.get_issuer(session, issuer_id)
    except TransferAgentError as exc:
        raise http_error(exc) from exc
    ensure_can_edit(session, user, [issuer_id])
    issuer = issuer_service.set_separation_ratio(session, issuer_id, payload.separation_ratio)
    return IssuerPatchResponse(success=True, issuer=IssuerRead.model_validate(issuer))


@router.get("/{issuer_id}/transactions", response_model=ShareholderTransactions)
def list_my_transactions(
    issuer_id: str,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> ShareholderTransactions:
    ensure_member(session, user, issuer_id)
    started = time.perf_counter()
    try:
        transfers = shareholder_service.shareholder_transactions(session, issuer_id, user.email)
    except TransferAgentError as exc:
        raise http_error(exc) from exc
    logger.info(
        "shareholder transactions fetched",
        extra={"issuer_id": issuer_id, "duration_ms": round((time.perf_counter() - started) * 1000, 2)},
    )
    return ShareholderTransactions(
        transactions=[ShareholderTransaction.model_validate(transfer) for transfer in transfers]
    )


@router.get("/{issuer_id}/documents", response_model=DocumentList)
def list_documents(issuer_id: str) -> DocumentList:
    return DocumentList(documents=[FilingDocument(**item) for item in featured_filings(issuer_id)])


@router.get("/{issuer_id}/access", response_model=IssuerAccessRead)
def check_access(
    issuer_id: str,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> IssuerAccessRead:
    access = validate_issuer_access(session, user.id, issuer_id)
    return IssuerAccessRead(
        has_access=access.has_access,
        role=access.global_role,
        issuer_role=access.issuer_role,
        issuer=AvailableIssuer(**access.issuer.to_dict()) if access.issuer else None,
        landing_page=access.landing_page,
    )


@router.get("/{issuer_id}/shareholders/{shareholder_id}/statement", response_model=StatementRead)
def get_statement(
    issuer_id: str,
    shareholder_id: str,
    as_of: date | None = Query(default=None),
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> StatementRead:
    ensure_member(session, user, issuer_id)
    try:
        payload = shareholder_service.statement(session, issuer_id, shareholder_id, as_of=as_of)
    except TransferAgentError as exc:
        raise http_error(exc) from exc
    return StatementRead.model_validate(payload)


__all__ = ["router"]
