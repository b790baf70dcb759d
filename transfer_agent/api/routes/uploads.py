"""Routes for issuer document uploads."""
from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from transfer_agent.api.deps import (
    AuthenticatedUser,
    ensure_member,
    get_current_user,
    get_db_session,
    get_document_storage,
    http_error,
)
from transfer_agent.core.errors import ProviderError
from transfer_agent.schemas.document import UploadResult
from transfer_agent.services.documents import DocumentStorage

router = APIRouter()


@router.post("/upload", response_model=UploadResult)
def upload_document(
    file: UploadFile | None = File(default=None),
    issuer_id: str | None = Form(default=None, alias="issuerId"),
    document_type: str | None = Form(default=None, alias="documentType"),
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
    storage: DocumentStorage = Depends(get_document_storage),
) -> UploadResult:
    if file is None or not issuer_id or not document_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File, issuer ID, and document type are required",
        )
    ensure_member(session, user, issuer_id)

    body = file.file.read()
    try:
        stored = storage.upload(
            issuer_id=issuer_id,
            document_type=document_type,
            filename=file.filename or "upload",
            body=body,
            content_type=file.content_type,
        )
    except ProviderError as exc:
        raise http_error(exc) from exc

    return UploadResult(
        success=True,
        file_url=stored.file_url,
        file_name=stored.file_name,
        file_size=stored.file_size,
        file_type=stored.file_type,
        storage_path=stored.storage_path,
    )


__all__ = ["router", "upload_document"]
