"""Common dependencies for API routes."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt  # type: ignore[import-untyped]
from sqlalchemy.orm import Session

from transfer_agent.core.config import Settings, get_settings
from transfer_agent.core.errors import (
    IssuerAccessDenied,
    NotFoundError,
    TransferAgentError,
    ValidationFailure,
)
from transfer_agent.db.session import SessionLocal
from transfer_agent.models import RoleName
from transfer_agent.services.access import require_issuer_role
from transfer_agent.services.auth_provider import AuthProviderClient
from transfer_agent.services.documents import DocumentStorage

logger = logging.getLogger(__name__)

security_scheme = HTTPBearer(auto_error=False)

_STATUS_BY_ERROR: tuple[tuple[type[TransferAgentError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidationFailure, status.HTTP_400_BAD_REQUEST),
    (IssuerAccessDenied, status.HTTP_403_FORBIDDEN),
)


@dataclass(frozen=True)
class AuthenticatedUser:
    id: str
    email: str


def get_db_session() -> Iterator[Session]:
    """Yield a database session for FastAPI dependencies."""

    session: Session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def get_auth_provider() -> Iterator[AuthProviderClient]:
    client = AuthProviderClient(get_settings())
    try:
        yield client
    finally:
        client.close()


def get_document_storage() -> DocumentStorage:
    return DocumentStorage(settings=get_settings())


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_access_token(token: str, settings: Settings) -> AuthenticatedUser:
    try:
        claims = jwt.decode(
            token,
            settings.auth_jwt_secret,
            algorithms=[settings.auth_jwt_algorithm],
            audience=settings.auth_jwt_audience,
        )
    except JWTError as exc:
        raise _unauthorized() from exc

    subject = claims.get("sub")
    if not subject:
        raise _unauthorized()
    return AuthenticatedUser(id=str(subject), email=str(claims.get("email") or ""))


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security_scheme),
) -> AuthenticatedUser:
    """Resolve the caller from a bearer token or the session cookie."""

    settings = get_settings()
    token = credentials.credentials if credentials else request.cookies.get(settings.session_cookie_name)
    if not token:
        raise _unauthorized()

    user = decode_access_token(token, settings)
    request.state.actor_email = user.email
    request.state.issuer_id = request.path_params.get("issuer_id") or request.query_params.get("issuerId")
    return user


def http_error(exc: TransferAgentError) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    logger.error("service call failed", extra={"error": str(exc)})
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


def require_issuer_id(issuer_id: str | None) -> str:
    if not issuer_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Issuer ID is required")
    return issuer_id


def ensure_can_edit(
    session: Session,
    user: AuthenticatedUser,
    issuer_ids: Iterable[str | None],
    *,
    minimum: RoleName = RoleName.TRANSFER_TEAM,
) -> None:
    """Raise 403 unless the caller holds ``minimum`` on every referenced issuer."""

    for issuer_id in sorted({issuer_id for issuer_id in issuer_ids if issuer_id}):
        try:
            require_issuer_role(session, user_id=user.id, issuer_id=issuer_id, minimum=minimum)
        except IssuerAccessDenied as exc:
            logger.warning(
                "issuer write denied", extra={"user_id": user.id, "issuer_id": issuer_id}
            )
            raise http_error(exc) from exc


def ensure_member(session: Session, user: AuthenticatedUser, issuer_id: str) -> None:
    """Raise 403 unless the caller holds any role on the issuer."""

    ensure_can_edit(session, user, [issuer_id], minimum=RoleName.READ_ONLY)


__all__ = [
    "AuthenticatedUser",
    "decode_access_token",
    "ensure_can_edit",
    "ensure_member",
    "get_auth_provider",
    "get_current_user",
    "get_db_session",
    "get_document_storage",
    "http_error",
    "require_issuer_id",
]
