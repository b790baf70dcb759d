from __future__ import annotations

from transfer_agent.models import Issuer, RoleName, User

from tests.conftest import mint_token


def test_me_returns_role_context(client, auth_headers, transfer_team_user: User, issuer: Issuer) -> None:
    response = client.get("/api/me", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["user"] == {"id": transfer_team_user.id, "email": "ops@example.com", "name": "Ops"}
    assert body["role"] == "transfer_team"
    assert body["can_edit"] is True
    assert body["is_admin"] is False
    assert body["landing_page"] == "/"
    assert body["issuers"][0]["issuer_id"] == issuer.id
    assert body["issuers"][0]["roles"] == [{"name": "transfer_team", "display_name": "Transfer Team"}]


def test_me_accepts_session_cookie(client, make_user, issuer: Issuer) -> None:
    holder = make_user("holder@example.com", issuer=issuer, role=RoleName.SHAREHOLDER)
    cookie = f"ta-access-token={mint_token(holder.id, holder.email)}"

    response = client.get("/api/me", headers={"Cookie": cookie})

    assert response.status_code == 200
    assert response.json()["landing_page"] == "/shareholder-home"
    assert response.json()["can_edit"] is False


def test_forged_token_is_rejected(client, transfer_team_user: User) -> None:
    token = mint_token(transfer_team_user.id, transfer_team_user.email, secret="x" * 40)

    response = client.get("/api/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_users_listing(client, auth_headers, make_user) -> None:
    make_user("second@example.com")

    response = client.get("/api/users", headers=auth_headers)

    assert response.status_code == 200
    assert {item["email"] for item in response.json()} == {"ops@example.com", "second@example.com"}
    assert set(response.json()[0]) == {"id", "email", "created_at"}


def test_health_endpoints(client) -> None:
    assert client.get("/api/healthz").json()["status"] == "ok"
    assert client.get("/api/readyz").status_code == 200
