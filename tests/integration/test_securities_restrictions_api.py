from __future__ import annotations

from decimal import Decimal

from sqlalchemy.orm import Session

from transfer_agent.models import Issuer, Shareholder

CUSIP = "12802A109"


def _security_payload(issuer: Issuer, **overrides) -> dict[str, object]:
    return {
        "issuer_id": issuer.id,
        "class_name": "Class A",
        "cusip": CUSIP,
        "issue_name": "Class A Ordinary Shares",
        "total_authorized_shares": "100000000",
        "status": "ACTIVE",
        **overrides,
    }


def test_create_and_list_securities(client, auth_headers, issuer: Issuer) -> None:
    created = client.post("/api/securities", json=_security_payload(issuer), headers=auth_headers)
    assert created.status_code == 201
    assert created.json()["status"] == "active"

    client.post(
        "/api/securities",
        json=_security_payload(issuer, cusip="12802A208", status="inactive"),
        headers=auth_headers,
    )

    listed = client.get("/api/securities", params={"issuerId": issuer.id}, headers=auth_headers)
    assert listed.status_code == 200
    assert [item["cusip"] for item in listed.json()] == [CUSIP]


def test_duplicate_cusip_is_rejected(client, auth_headers, issuer: Issuer) -> None:
    client.post("/api/securities", json=_security_payload(issuer), headers=auth_headers)

    duplicate = client.post("/api/securities", json=_security_payload(issuer), headers=auth_headers)

    assert duplicate.status_code == 400
    assert duplicate.json() == {"error": "CUSIP already exists for this issuer"}


def test_security_requires_core_fields(client, auth_headers, issuer: Issuer) -> None:
    response = client.post(
        "/api/securities", json=_security_payload(issuer, issue_name=None), headers=auth_headers
    )

    assert response.status_code == 400
    assert response.json() == {"error": "issuer_id, class_name, cusip, and issue_name are required"}


def test_listing_requires_issuer_id(client, auth_headers) -> None:
    for path in ("/api/securities", "/api/restriction-templates", "/api/shareholder-restrictions"):
        response = client.get(path, headers=auth_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "Issuer ID is required"}


def test_restriction_template_and_application(
    client, auth_headers, db_session: Session, issuer: Issuer
) -> None:
    holder = Shareholder(issuer_id=issuer.id, first_name="Sponsor", last_name="LLC", account_number="A-1")
    db_session.add(holder)
    db_session.commit()

    template = client.post(
        "/api/restriction-templates",
        json={"issuer_id": issuer.id, "restriction_type": "LOCKUP", "description": "180 day lock-up"},
        headers=auth_headers,
    )
    assert template.status_code == 200
    template_id = template.json()["id"]

    templates = client.get("/api/restriction-templates", params={"issuerId": issuer.id}, headers=auth_headers)
    assert [item["restriction_type"] for item in templates.json()] == ["LOCKUP"]

    applied = client.post(
        "/api/shareholder-restrictions",
        json={
            "issuer_id": issuer.id,
            "shareholder_id": holder.id,
            "restriction_id": template_id,
            "cusip": CUSIP,
            "restricted_shares": "2500",
        },
        headers=auth_headers,
    )
    assert applied.status_code == 200
    assert applied.json()["restriction_date"]

    listing = client.get("/api/shareholder-restrictions", params={"issuerId": issuer.id}, headers=auth_headers)
    row = listing.json()[0]
    assert Decimal(row["restricted_shares"]) == Decimal("2500")
    assert row["shareholder"]["account_number"] == "A-1"
    assert row["template"]["restriction_type"] == "LOCKUP"


def test_template_requires_fields(client, auth_headers, issuer: Issuer) -> None:
    response = client.post(
        "/api/restriction-templates",
        json={"issuer_id": issuer.id, "restriction_type": "LOCKUP"},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields"}
