from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from transfer_agent.models import Issuer, RestrictionTemplate, Security, Shareholder, Transfer


def _seed_ledger(session: Session, issuer: Issuer) -> Shareholder:
    holder = Shareholder(
        issuer_id=issuer.id,
        first_name="Sponsor",
        last_name="LLC",
        account_number="ACCT-9",
        email="sponsor@example.com",
    )
    template = RestrictionTemplate(issuer_id=issuer.id, restriction_type="LOCKUP", description="Lock-up")
    session.add_all(
        [
            holder,
            template,
            Security(
                issuer_id=issuer.id,
                class_name="Units",
                cusip="12802A100",
                issue_name="Units",
                issue_ticker="CRACU",
                trading_platform="NASDAQ",
            ),
        ]
    )
    session.flush()
    session.add_all(
        [
            Transfer(
                issuer_id=issuer.id,
                shareholder_id=holder.id,
                cusip="12802A100",
                transaction_type="IPO",
                share_quantity=1000,
                transaction_date=date(2025, 5, 23),
                restriction_id=template.id,
            ),
            Transfer(
                issuer_id=issuer.id,
                shareholder_id=None,
                cusip="UNKNOWN",
                transaction_type="DWAC Withdrawal",
                share_quantity=300,
                transaction_date=date(2025, 6, 1),
            ),
        ]
    )
    session.commit()
    return holder


def test_transfer_journal_enrichment(client, auth_headers, db_session: Session, issuer: Issuer) -> None:
    _seed_ledger(db_session, issuer)

    response = client.get("/api/transfer-journal", params={"issuerId": issuer.id}, headers=auth_headers)

    assert response.status_code == 200
    rows = {row["transaction_type"]: row for row in response.json()}
    ipo = rows["IPO"]
    assert ipo["credit_debit"] == "Credit"
    assert ipo["issue_ticker"] == "CRACU"
    assert ipo["security_type"] == "Units"
    assert ipo["shareholder_name"] == "Sponsor LLC"
    assert ipo["account_number"] == "ACCT-9"
    assert ipo["certificate_type"] == "Book Entry"
    assert ipo["cusip_details"]["trading_platform"] == "NASDAQ"

    orphan = rows["DWAC Withdrawal"]
    assert orphan["credit_debit"] == "Debit"
    assert orphan["issue_name"] == ""
    assert orphan["shareholder_name"] == ""
    assert orphan["cusip_details"] is None
    assert orphan["shareholder"] is None


def test_record_keeping_ledger_orders_by_date_with_restrictions(
    client, auth_headers, db_session: Session, issuer: Issuer
) -> None:
    _seed_ledger(db_session, issuer)

    response = client.get(
        "/api/record-keeping-transactions", params={"issuerId": issuer.id}, headers=auth_headers
    )

    assert response.status_code == 200
    rows = response.json()
    assert [row["transaction_date"] for row in rows] == ["2025-05-23", "2025-06-01"]
    assert rows[0]["restriction_codes"] == "LOCKUP"
    assert Decimal(str(rows[0]["restricted_shares"])) == Decimal("1000")
    assert rows[0]["restrictions"][0]["description"] == "Lock-up"
    assert rows[1]["restrictions"] == []
    assert rows[1]["restriction_codes"] == ""


def test_bulk_import_normalises_rows(client, auth_headers, db_session: Session, issuer: Issuer) -> None:
    holder_id = str(uuid.uuid4())
    db_session.add(Shareholder(id=holder_id, issuer_id=issuer.id, first_name="Imported"))
    db_session.commit()

    response = client.post(
        "/api/recordkeeping/transactions",
        json=[
            {
                "issuer_id": issuer.id,
                "cusip": "12802A109",
                "transaction_type": "IPO",
                "share_quantity": 1500,
                "shareholder_id": holder_id,
                "transaction_date": "2025-05-23",
            },
            {
                "issuer_id": issuer.id,
                "transaction_type": "Transfer Credit",
                "share_quantity": "lots",
                "shareholder_id": "not-a-uuid",
                "restriction_id": "ignored",
            },
        ],
        headers=auth_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["count"] == 2
    first, second = body["records"]
    assert first["shareholder_id"] == holder_id
    assert first["status"] == "ACTIVE"
    assert second["shareholder_id"] is None
    assert Decimal(second["share_quantity"]) == Decimal("0")
    assert all(row.restriction_id is None for row in db_session.scalars(select(Transfer)).all())


def test_bulk_import_rejects_empty_and_non_array_bodies(client, auth_headers) -> None:
    empty = client.post("/api/recordkeeping/transactions", json=[], headers=auth_headers)
    assert empty.status_code == 400
    assert empty.json() == {"error": "No transactions provided"}

    not_array = client.post(
        "/api/recordkeeping/transactions", json={"issuer_id": "x"}, headers=auth_headers
    )
    assert not_array.status_code == 400


def test_bulk_import_requires_issuer_on_every_row(client, auth_headers, issuer: Issuer) -> None:
    response = client.post(
        "/api/recordkeeping/transactions",
        json=[{"issuer_id": issuer.id, "share_quantity": 1}, {"share_quantity": 2}],
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json() == {"error": "issuer_id is required for every transaction"}
