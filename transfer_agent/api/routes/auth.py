"""OAuth callback that turns an authorization code into a local session."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from transfer_agent.api.deps import get_auth_provider, get_db_session
from transfer_agent.core.config import get_settings
from transfer_agent.core.errors import ProviderError
from transfer_agent.obs import record_login_outcome
from transfer_agent.services.auth_provider import AuthProviderClient
from transfer_agent.services.invitations import (
    FailedLogin,
    RejectedLogin,
    error_detail,
    login_error_path,
    reconcile_login,
    redirect_path,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _absolute(request: Request, path: str) -> str:
    settings = get_settings()
    origin = (settings.site_url or str(request.base_url)).rstrip("/")
    return f"{origin}{path}"


@router.get("/callback", include_in_schema=False)
def oauth_callback(
    request: Request,
    code: str | None = Query(default=None),
    next_path: str = Query(default="/", alias="next"),
    session: Session = Depends(get_db_session),
    provider: AuthProviderClient = Depends(get_auth_provider),
) -> RedirectResponse:
    if not code:
        return RedirectResponse(_absolute(request, login_error_path("no_code")), status_code=302)

    try:
        auth_session = provider.exchange_code_for_session(code)
    except ProviderError as exc:
        logger.warning("oauth code exchange failed", extra={"error": str(exc)})
        return RedirectResponse(
            _absolute(request, login_error_path("oauth_exchange_failed", str(exc))), status_code=302
        )

    if auth_session.user is None:
        return RedirectResponse(_absolute(request, login_error_path("no_user_data")), status_code=302)

    request.state.actor_email = auth_session.user.email
    try:
        outcome = reconcile_login(session, provider, auth_session.user, next_path=next_path)
    except Exception as exc:
        logger.exception("oauth callback failed")
        return RedirectResponse(
            _absolute(request, login_error_path("callback_error", error_detail(exc))), status_code=302
        )

    record_login_outcome(type(outcome).__name__)
    response = RedirectResponse(_absolute(request, redirect_path(outcome)), status_code=302)
    if not isinstance(outcome, (RejectedLogin, FailedLogin)):
        settings = get_settings()
        response.set_cookie(
            settings.session_cookie_name,
            auth_session.access_token,
            max_age=auth_session.expires_in or settings.session_cookie_max_age_seconds,
            httponly=True,
            secure=settings.site_url.startswith("https"),
            samesite="lax",
        )
    return response


__all__ = ["oauth_callback", "router"]
