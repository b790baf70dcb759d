"""HTTP client wrapper for the hosted authentication provider."""
from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from transfer_agent.core.config import Settings, get_settings
from transfer_agent.core.errors import ProviderError

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class AuthIdentity:
    """External identity returned by the provider after sign-in."""

    id: str
    email: str


@dataclass(slots=True, frozen=True)
class AuthSession:
    access_token: str
    refresh_token: str | None
    expires_in: int | None
    user: AuthIdentity | None


class AuthProviderClient:
    """Synchronous wrapper around the provider's OAuth and admin APIs."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        client: httpx.Client | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._base_url = self._settings.auth_url.rstrip("/")
        self._client = client or httpx.Client(timeout=self._settings.auth_timeout_seconds)
        self._owns_client = client is None

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "AuthProviderClient":  # pragma: no cover - convenience
        return self

    def __exit__(self, *_args: object) -> None:  # pragma: no cover - convenience
        self.close()

    @property
    def has_admin_access(self) -> bool:
        return bool(self._settings.auth_service_role_key)

    def _headers(self, *, admin: bool = False) -> dict[str, str]:
        key = self._settings.auth_service_role_key if admin else self._settings.auth_api_key
        return {"apikey": key or "", "Authorization": f"Bearer {key or ''}"}

    def exchange_code_for_session(self, code: str, *, code_verifier: str | None = None) -> AuthSession:
        """Trade an OAuth authorization code for a provider session."""

        payload: dict[str, str] = {"auth_code": code}
        if code_verifier:
            payload["code_verifier"] = code_verifier
        try:
            response = self._client.post(
                f"{self._base_url}/token",
                params={"grant_type": "pkce"},
                json=payload,
                headers=self._headers(),
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            message = _error_message(exc.response)
            raise ProviderError(message) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(str(exc) or "Auth provider unavailable") from exc

        data = response.json()
        user_data = data.get("user") or {}
        user = None
        if user_data.get("id"):
            user = AuthIdentity(id=str(user_data["id"]), email=str(user_data.get("email") or ""))
        return AuthSession(
            access_token=str(data.get("access_token") or ""),
            refresh_token=data.get("refresh_token"),
            expires_in=data.get("expires_in"),
            user=user,
        )

    def delete_user(self, user_id: str) -> None:
        """Remove an identity from the provider using the service-role key."""

        if not self.has_admin_access:
            raise ProviderError("Admin client not available")
        try:
            response = self._client.delete(
                f"{self._base_url}/admin/users/{user_id}",
                headers=self._headers(admin=True),
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ProviderError(_error_message(exc.response)) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(str(exc) or "Auth provider unavailable") from exc
        logger.info("deleted auth identity", extra={"auth_user_id": user_id})


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    for key in ("error_description", "msg", "message", "error"):
        if isinstance(body, dict) and body.get(key):
            return str(body[key])
    return f"HTTP {response.status_code}"


__all__ = ["AuthIdentity", "AuthProviderClient", "AuthSession"]
