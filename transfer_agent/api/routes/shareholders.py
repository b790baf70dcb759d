"""Shareholder register endpoints."""
from __future__ import annotations

import logging
import time
from typing import Union

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
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
from transfer_agent.schemas.shareholder import (
    Holding,
    IssuerShareholderRead,
    ShareholderCreate,
    ShareholderHoldings,
    ShareholderProfile,
    ShareholderRead,
)
from transfer_agent.services import shareholders as shareholder_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shareholders")


@router.get("", response_model=Union[list[IssuerShareholderRead], ShareholderHoldings])
def list_shareholders(
    email: str | None = Query(default=None),
    issuer_id: str | None = Query(default=None, alias="issuerId"),
    issuer_id_snake: str | None = Query(default=None, alias="issuer_id", include_in_schema=False),
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> list[IssuerShareholderRead] | ShareholderHoldings:
    issuer_id = issuer_id or issuer_id_snake
    if issuer_id:
        ensure_member(session, user, issuer_id)
        return [
            IssuerShareholderRead(
                **ShareholderRead.model_validate(row["holder"]).model_dump(),
                current_shares=row["current_shares"],
                calculated_ownership_percentage=row["calculated_ownership_percentage"],
            )
            for row in shareholder_service.issuer_register(session, issuer_id)
        ]

    if not email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email or issuerId is required")

    started = time.perf_counter()
    try:
        result = shareholder_service.profile_with_holdings(session, email)
    except TransferAgentError as exc:
        raise http_error(exc) from exc
    if email.lower() != user.email.lower():
        issuer_ids = [result["profile"].issuer_id, *(item["issuer_id"] for item in result["holdings"])]
        ensure_can_edit(session, user, issuer_ids)
    logger.info(
        "shareholder holdings fetched",
        extra={"duration_ms": round((time.perf_counter() - started) * 1000, 2)},
    )
    return ShareholderHoldings(
        profile=ShareholderProfile.model_validate(result["profile"]),
        holdings=[Holding.model_validate(item) for item in result["holdings"]],
    )


@router.post(
    "",
    response_model=Union[list[ShareholderRead], ShareholderRead],
    status_code=status.HTTP_201_CREATED,
)
def create_shareholders(
    payload: Union[list[ShareholderCreate], ShareholderCreate] = Body(...),
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> list[ShareholderRead] | ShareholderRead:
    items = payload if isinstance(payload, list) else [payload]
    if not items:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No shareholders provided")
    ensure_can_edit(session, user, [item.issuer_id for item in items])

    try:
        created = shareholder_service.create_shareholders(session, items)
    except TransferAgentError as exc:
        raise http_error(exc) from exc

    records = [ShareholderRead.model_validate(item) for item in created]
    return records if isinstance(payload, list) else records[0]


__all__ = ["router"]
