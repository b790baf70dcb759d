from __future__ import annotations

from transfer_agent.models import Issuer


def test_upload_stores_document(client, auth_headers, audit_s3_client, issuer: Issuer) -> None:
    response = client.post(
        "/api/upload",
        files={"file": ("Board Minutes.pdf", b"%PDF-1.7 minutes", "application/pdf")},
        data={"issuerId": issuer.id, "documentType": "minutes"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["file_name"] == "Board Minutes.pdf"
    assert body["file_size"] == len(b"%PDF-1.7 minutes")
    assert body["storage_path"].startswith(f"{issuer.id}/minutes/")
    assert body["storage_path"].endswith("_Board_Minutes.pdf")
    assert body["file_url"].endswith(body["storage_path"])
    assert audit_s3_client.buckets["documents"][body["storage_path"]] == b"%PDF-1.7 minutes"


def test_upload_requires_all_fields(client, auth_headers, issuer: Issuer) -> None:
    response = client.post(
        "/api/upload",
        data={"issuerId": issuer.id, "documentType": "minutes"},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json() == {"error": "File, issuer ID, and document type are required"}


def test_upload_requires_issuer_membership(client, make_user, headers_for, issuer: Issuer) -> None:
    outsider = make_user("outsider@example.com")

    response = client.post(
        "/api/upload",
        files={"file": ("a.txt", b"a", "text/plain")},
        data={"issuerId": issuer.id, "documentType": "misc"},
        headers=headers_for(outsider),
    )

    assert response.status_code == 403
