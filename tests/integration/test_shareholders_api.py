from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from transfer_agent.models import Issuer, RoleName, Security, Shareholder, ShareholderPosition, Transfer


def _holder(session: Session, issuer: Issuer, **fields) -> Shareholder:
    holder = Shareholder(issuer_id=issuer.id, **fields)
    session.add(holder)
    session.commit()
    return holder


def test_create_single_shareholder_returns_object(client, auth_headers, issuer: Issuer) -> None:
    response = client.post(
        "/api/shareholders",
        json={
            "issuer_id": issuer.id,
            "shareholder_name": "Alice",
            "last_name": "Investor",
            "date_of_birth": "1980-04-01",
            "email": "alice@example.com",
        },
        headers=auth_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["first_name"] == "Alice"
    assert body["dob"] == "1980-04-01"
    assert Decimal(body["ownership_percentage"]) == Decimal("0")


def test_create_many_shareholders_returns_list(client, auth_headers, issuer: Issuer) -> None:
    response = client.post(
        "/api/shareholders",
        json=[
            {"issuer_id": issuer.id, "first_name": "Cede & Co"},
            {"issuer_id": issuer.id, "first_name": "Sponsor LLC"},
        ],
        headers=auth_headers,
    )

    assert response.status_code == 201
    assert [item["first_name"] for item in response.json()] == ["Cede & Co", "Sponsor LLC"]


def test_empty_batch_is_rejected(client, auth_headers) -> None:
    response = client.post("/api/shareholders", json=[], headers=auth_headers)

    assert response.status_code == 400
    assert response.json() == {"error": "No shareholders provided"}


def test_create_for_foreign_issuer_is_forbidden(client, auth_headers, db_session: Session) -> None:
    other = Issuer(issuer_name="Someone Else Corp")
    db_session.add(other)
    db_session.commit()

    response = client.post("/api/shareholders", json={"issuer_id": other.id}, headers=auth_headers)

    assert response.status_code == 403


def test_register_derives_balances_from_transfers(
    client, auth_headers, db_session: Session, issuer: Issuer
) -> None:
    sponsor = _holder(db_session, issuer, first_name="Sponsor")
    public = _holder(db_session, issuer, first_name="Public")
    idle = _holder(db_session, issuer, first_name="Idle")
    db_session.add_all(
        [
            Transfer(issuer_id=issuer.id, shareholder_id=sponsor.id, transaction_type="IPO", share_quantity=1000),
            Transfer(
                issuer_id=issuer.id,
                shareholder_id=sponsor.id,
                transaction_type="DWAC Withdrawal",
                share_quantity=300,
            ),
            Transfer(issuer_id=issuer.id, shareholder_id=public.id, transaction_type="IPO", share_quantity=300),
        ]
    )
    db_session.commit()

    response = client.get("/api/shareholders", params={"issuerId": issuer.id}, headers=auth_headers)

    assert response.status_code == 200
    rows = {row["first_name"]: row for row in response.json()}
    assert Decimal(rows["Sponsor"]["current_shares"]) == Decimal("700")
    assert Decimal(rows["Sponsor"]["calculated_ownership_percentage"]) == Decimal("70.00")
    assert Decimal(rows["Public"]["calculated_ownership_percentage"]) == Decimal("30.00")
    assert Decimal(rows["Idle"]["current_shares"]) == Decimal("0")
    assert idle.id in {row["id"] for row in response.json()}


def test_holdings_by_email(client, auth_headers, db_session: Session, issuer: Issuer) -> None:
    holder = _holder(db_session, issuer, first_name="Dana", email="dana@example.com")
    security = Security(
        issuer_id=issuer.id,
        class_name="Class A",
        cusip="12802A109",
        issue_name="Class A Ordinary Shares",
        total_authorized_shares=Decimal("10000"),
    )
    db_session.add(security)
    db_session.flush()
    db_session.add(
        ShareholderPosition(
            shareholder_id=holder.id,
            issuer_id=issuer.id,
            security_id=security.id,
            shares_owned=Decimal("500"),
            position_date=date(2025, 6, 30),
        )
    )
    db_session.commit()

    response = client.get("/api/shareholders", params={"email": "dana@example.com"}, headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["profile"]["id"] == holder.id
    holding = body["holdings"][0]
    assert holding["issuer"]["issuer_name"] == issuer.issuer_name
    assert holding["security"]["cusip"] == "12802A109"
    assert Decimal(holding["ownership_percentage"]) == Decimal("5.00")


def test_lookup_requires_email_or_issuer(client, auth_headers) -> None:
    response = client.get("/api/shareholders", headers=auth_headers)

    assert response.status_code == 400
    assert response.json() == {"error": "Email or issuerId is required"}


def test_unknown_email_returns_404(client, auth_headers) -> None:
    response = client.get("/api/shareholders", params={"email": "ghost@example.com"}, headers=auth_headers)

    assert response.status_code == 404
    assert response.json() == {"error": "Shareholder not found"}


def test_own_transactions_and_statement(
    client, make_user, headers_for, auth_headers, db_session: Session, issuer: Issuer
) -> None:
    holder = _holder(db_session, issuer, first_name="Erin", email="erin@example.com")
    db_session.add_all(
        [
            Transfer(
                issuer_id=issuer.id,
                shareholder_id=holder.id,
                cusip="12802A109",
                transaction_type="IPO",
                share_quantity=1000,
                transaction_date=date(2025, 1, 10),
            ),
            Transfer(
                issuer_id=issuer.id,
                shareholder_id=holder.id,
                cusip="12802A109",
                transaction_type="Transfer Debit",
                share_quantity=400,
                transaction_date=date(2025, 5, 1),
            ),
        ]
    )
    db_session.commit()
    erin = make_user("erin@example.com", issuer=issuer, role=RoleName.SHAREHOLDER)

    own = client.get(f"/api/issuers/{issuer.id}/transactions", headers=headers_for(erin))
    assert own.status_code == 200
    assert [item["transaction_type"] for item in own.json()["transactions"]] == ["Transfer Debit", "IPO"]

    statement = client.get(
        f"/api/issuers/{issuer.id}/shareholders/{holder.id}/statement",
        params={"as_of": "2025-03-31"},
        headers=auth_headers,
    )
    assert statement.status_code == 200
    holding = statement.json()["holdings"][0]
    assert holding["cusip"] == "12802A109"
    assert Decimal(holding["shares"]) == Decimal("1000")
    assert holding["transactions"][0]["date"] == "2025-01-10"
