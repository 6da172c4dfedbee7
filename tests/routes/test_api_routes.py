# -*- coding: utf-8 -*-
# backend/tests/routes/test_api_routes.py
"""
Pruebas de extremo a extremo sobre la API HTTP (ASGITransport + lifespan).

Cubren el cableado de rutas, dependencias de autenticación, recursos
globales inyectados y la forma estable de los errores:

    {"detail": {"error_code": ..., "message": ..., "request_id": ...}}
"""

import uuid

import httpx

from app.modules.bulk_import.facades import add_invoice_to_session
from app.modules.bulk_import.services.csv_parser import CSV_COLUMNS
from app.shared.auth_context import create_access_token

GOOD_ROW = "INV-CSV-1,01,2025-11-01,,Pembeli Satu,C98765432109,,,,MYR,,Consulting,2,50.00,01,6"


async def _create(client, headers, payload):
    resp = await client.post("/api/invoices", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def _ready(client, headers, payload):
    invoice = await _create(client, headers, payload)
    resp = await client.post(f"/api/invoices/{invoice['id']}/finalize", headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
async def test_health_endpoints(async_client):
    resp = await async_client.get("/health")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/json; charset=utf-8"
    body = resp.json()
    assert body["status"] == "ok"
    assert body["database"]["reachable"] is True

    live = await async_client.get("/api/health/live")
    assert live.json() == {"status": "alive"}

    ready = await async_client.get("/api/health/ready")
    assert ready.status_code == 200
    assert ready.json()["status"] == "ready"


# ---------------------------------------------------------------------------
# Autenticación
# ---------------------------------------------------------------------------
async def test_missing_token_is_rejected(async_client):
    resp = await async_client.get("/api/invoices")
    assert resp.status_code == 401


async def test_invalid_token_is_rejected(async_client):
    resp = await async_client.get("/api/invoices", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


async def test_token_without_business_claim_is_rejected(async_client, user_id):
    token = create_access_token(user_id, "")
    resp = await async_client.get("/api/invoices", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


# ---------------------------------------------------------------------------
# Negocio
# ---------------------------------------------------------------------------
async def test_business_profile_and_credentials(async_client, auth_headers, business):
    resp = await async_client.get("/api/businesses/me", headers=auth_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == str(business.id)
    assert body["has_lhdn_credentials"] is True
    assert "lhdn_client_id_encrypted" not in body

    resp = await async_client.put(
        "/api/businesses/me/lhdn-credentials",
        json={"client_id": "new-id", "client_secret": "new-secret"},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.json() == {"business_id": str(business.id), "has_lhdn_credentials": True}


async def test_credentials_require_values(async_client, auth_headers):
    resp = await async_client.put(
        "/api/businesses/me/lhdn-credentials",
        json={"client_id": "", "client_secret": "x"},
        headers=auth_headers,
    )
    assert resp.status_code == 422
    detail = resp.json()["detail"]
    assert detail["error_code"] == "VALIDATION_ERROR"
    assert "client_id" in detail["field_errors"]


# ---------------------------------------------------------------------------
# Facturas
# ---------------------------------------------------------------------------
async def test_invoice_crud_flow(async_client, auth_headers, invoice_payload):
    created = await _create(async_client, auth_headers, invoice_payload(subtotal="999"))
    assert created["status"] == "DRAFT"
    assert (created["subtotal"], created["tax_total"], created["grand_total"]) == ("100.00", "6.00", "106.00")
    assert len(created["items"]) == 1
    invoice_id = created["id"]

    resp = await async_client.get(f"/api/invoices/{invoice_id}", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["invoice_number"] == "INV-2025-0001"

    resp = await async_client.patch(
        f"/api/invoices/{invoice_id}",
        json={"notes": "Net 30", "items": [{"description": "Audit", "quantity": "1", "unit_price": "200", "tax_type": "02", "tax_rate": "8"}]},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["notes"] == "Net 30"
    assert body["grand_total"] == "216.00"
    assert [i["description"] for i in body["items"]] == ["Audit"]

    resp = await async_client.get("/api/invoices", params={"status": "DRAFT"}, headers=auth_headers)
    assert resp.status_code == 200
    listing = resp.json()
    assert listing["total"] == 1
    assert listing["items"][0]["id"] == invoice_id

    resp = await async_client.delete(f"/api/invoices/{invoice_id}", headers=auth_headers)
    assert resp.status_code == 204

    resp = await async_client.get(f"/api/invoices/{invoice_id}", headers=auth_headers)
    assert resp.status_code == 404
    assert resp.json()["detail"]["error_code"] == "INVOICE_NOT_FOUND"


async def test_finalize_then_delete_is_refused(async_client, auth_headers, invoice_payload):
    invoice = await _ready(async_client, auth_headers, invoice_payload())
    assert invoice["status"] == "READY_FOR_SUBMISSION"

    resp = await async_client.delete(f"/api/invoices/{invoice['id']}", headers=auth_headers)
    assert resp.status_code == 409
    detail = resp.json()["detail"]
    assert detail["error_code"] == "INVOICE_NOT_DELETABLE"
    assert detail["request_id"]

    resp = await async_client.patch(f"/api/invoices/{invoice['id']}", json={"notes": "x"}, headers=auth_headers)
    assert resp.status_code == 409
    assert resp.json()["detail"]["error_code"] == "INVOICE_NOT_EDITABLE"


async def test_finalize_reports_missing_fields(async_client, auth_headers, invoice_payload):
    invoice = await _create(async_client, auth_headers, invoice_payload(buyer_name=None))
    resp = await async_client.post(f"/api/invoices/{invoice['id']}/finalize", headers=auth_headers)
    assert resp.status_code == 422
    detail = resp.json()["detail"]
    assert detail["error_code"] == "MISSING_REQUIRED_FIELDS"
    assert "buyer_name" in detail["field_errors"]


async def test_request_validation_error_shape(async_client, auth_headers, invoice_payload):
    resp = await async_client.post("/api/invoices", json=invoice_payload(items=[]), headers=auth_headers)
    assert resp.status_code == 422
    detail = resp.json()["detail"]
    assert detail["error_code"] == "VALIDATION_ERROR"
    assert "items" in detail["field_errors"]


async def test_invoice_of_other_business_is_forbidden(async_client, auth_headers, other_business, user_id, invoice_payload):
    other_headers = {"Authorization": f"Bearer {create_access_token(user_id, other_business.id)}"}
    invoice = await _create(async_client, other_headers, invoice_payload())

    resp = await async_client.get(f"/api/invoices/{invoice['id']}", headers=auth_headers)
    assert resp.status_code == 403
    assert resp.json()["detail"]["error_code"] == "FORBIDDEN"


# ---------------------------------------------------------------------------
# Cargas OCR
# ---------------------------------------------------------------------------
async def test_upload_document_queues_ocr(async_client, auth_headers, blob_store, ocr_queue):
    resp = await async_client.post(
        "/api/uploads",
        files={"file": ("receipt.png", b"\x89PNG fake image", "image/png")},
        headers=auth_headers,
    )
    assert resp.status_code == 202, resp.text
    body = resp.json()
    assert body["status"] == "OCR_PROCESSING"
    assert len(ocr_queue) == 1

    doc = await async_client.get(f"/api/uploads/documents/{body['ocr_document_id']}", headers=auth_headers)
    assert doc.status_code == 200
    assert doc.json()["ocr_status"] == "PENDING"
    assert doc.json()["original_filename"] == "receipt.png"

    invoice = await async_client.get(f"/api/invoices/{body['invoice_id']}", headers=auth_headers)
    assert invoice.json()["status"] == "OCR_PROCESSING"


async def test_upload_unsupported_type(async_client, auth_headers, ocr_queue):
    resp = await async_client.post(
        "/api/uploads",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=auth_headers,
    )
    assert resp.status_code == 415
    assert resp.json()["detail"]["error_code"] == "UNSUPPORTED_FILE_TYPE"
    assert len(ocr_queue) == 0


async def test_confirm_missing_blob(async_client, auth_headers, user_id):
    resp = await async_client.post(
        "/api/uploads/confirm",
        json={"storage_key": f"uploads/{user_id}/missing.pdf"},
        headers=auth_headers,
    )
    assert resp.status_code == 404
    assert resp.json()["detail"]["error_code"] == "FILE_NOT_FOUND"


# ---------------------------------------------------------------------------
# LHDN
# ---------------------------------------------------------------------------
async def test_lhdn_submit_poll_cancel(async_client, auth_headers, invoice_payload, fake_lhdn, published_events):
    invoice = await _ready(async_client, auth_headers, invoice_payload())
    invoice_id = invoice["id"]

    resp = await async_client.post(f"/api/lhdn/invoices/{invoice_id}/submit", headers=auth_headers)
    assert resp.status_code == 202, resp.text
    assert resp.json() == {"submission_uid": "SUB-0001", "status": "SUBMITTED"}

    fake_lhdn.valid_status("2025-11-04T10:00:00Z")
    resp = await async_client.post(f"/api/lhdn/invoices/{invoice_id}/poll", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["status"] == "Valid"

    resp = await async_client.get(f"/api/invoices/{invoice_id}", headers=auth_headers)
    assert resp.json()["status"] == "VALIDATED"

    resp = await async_client.get(f"/api/lhdn/invoices/{invoice_id}/submissions", headers=auth_headers)
    assert resp.status_code == 200
    [submission] = resp.json()["items"]
    assert submission["status"] == "VALIDATED"
    assert submission["document_uuid"] == "DOC-UUID-0001"

    resp = await async_client.post(
        f"/api/lhdn/invoices/{invoice_id}/cancel", json={"reason": "Wrong buyer"}, headers=auth_headers
    )
    assert resp.status_code == 200
    assert resp.json() == {"status": "CANCELLED"}

    assert [e.event_type for e in published_events] == [
        "invoice.submitted",
        "invoice.validated",
        "invoice.cancelled",
    ]


async def test_lhdn_submit_requires_ready_invoice(async_client, auth_headers, invoice_payload, fake_lhdn):
    invoice = await _create(async_client, auth_headers, invoice_payload())
    resp = await async_client.post(f"/api/lhdn/invoices/{invoice['id']}/submit", headers=auth_headers)
    assert resp.status_code == 422
    assert resp.json()["detail"]["error_code"] == "INVALID_STATUS_TRANSITION"
    assert fake_lhdn.requests == []


async def test_lhdn_network_failure_maps_to_502(async_client, auth_headers, invoice_payload, fake_lhdn):
    invoice = await _ready(async_client, auth_headers, invoice_payload())
    fake_lhdn.submit_error = httpx.ConnectError("connection reset")

    resp = await async_client.post(f"/api/lhdn/invoices/{invoice['id']}/submit", headers=auth_headers)
    assert resp.status_code == 502
    assert resp.json()["detail"]["error_code"] == "LHDN_SUBMISSION_ERROR"

    resp = await async_client.get(f"/api/invoices/{invoice['id']}", headers=auth_headers)
    assert resp.json()["status"] == "READY_FOR_SUBMISSION"


# ---------------------------------------------------------------------------
# Importación masiva
# ---------------------------------------------------------------------------
async def test_document_session_flow(async_client, auth_headers, invoice_payload, session_factory, business, ocr_queue):
    resp = await async_client.post("/api/bulk-imports/sessions", headers=auth_headers)
    assert resp.status_code == 201
    session = resp.json()
    assert session["source"] == "DOCUMENTS"

    resp = await async_client.post(
        "/api/uploads",
        files={"file": ("scan.pdf", b"%PDF-1.4 fake", "application/pdf")},
        data={"bulk_session_id": session["id"]},
        headers=auth_headers,
    )
    assert resp.status_code == 202, resp.text

    ready = await _ready(async_client, auth_headers, invoice_payload())
    async with session_factory() as db:
        assert await add_invoice_to_session(db, uuid.UUID(session["id"]), uuid.UUID(ready["id"]), business_id=business.id)
        await db.commit()

    resp = await async_client.get(f"/api/bulk-imports/sessions/{session['id']}", headers=auth_headers)
    assert resp.status_code == 200
    view = resp.json()
    assert view["stats"] == {"total": 2, "ready": 1, "reviewing": 0, "processing": 1, "failed": 0}
    assert sorted(i["original_filename"] or "" for i in view["invoices"]) == ["", "scan.pdf"]

    resp = await async_client.post(f"/api/bulk-imports/sessions/{session['id']}/submit-all", headers=auth_headers)
    assert resp.status_code == 200
    result = resp.json()
    assert (result["submitted"], result["failed"], result["total"]) == (1, 0, 1)
    assert result["results"][0]["invoice_id"] == ready["id"]
    assert result["results"][0]["submission_uid"] == "SUB-0001"


async def test_unknown_session_is_not_found(async_client, auth_headers):
    resp = await async_client.get(f"/api/bulk-imports/sessions/{uuid.uuid4()}", headers=auth_headers)
    assert resp.status_code == 404
    assert resp.json()["detail"]["error_code"] == "IMPORT_NOT_FOUND"


async def test_csv_import_flow(async_client, auth_headers, csv_queue, blob_store):
    data = "\n".join([",".join(CSV_COLUMNS), GOOD_ROW]).encode("utf-8")
    resp = await async_client.post(
        "/api/bulk-imports/csv",
        files={"file": ("invoices.csv", data, "text/csv")},
        headers=auth_headers,
    )
    assert resp.status_code == 202, resp.text
    record = resp.json()
    assert record["source"] == "CSV"
    assert record["status"] == "QUEUED"
    assert len(csv_queue) == 1

    resp = await async_client.get("/api/bulk-imports", headers=auth_headers)
    assert resp.status_code == 200
    assert [r["id"] for r in resp.json()["items"]] == [record["id"]]

    resp = await async_client.get(f"/api/bulk-imports/{record['id']}", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["original_filename"] == "invoices.csv"


async def test_csv_import_rejects_other_files(async_client, auth_headers, csv_queue):
    resp = await async_client.post(
        "/api/bulk-imports/csv",
        files={"file": ("invoices.xlsx", b"PK\x03\x04", "application/octet-stream")},
        headers=auth_headers,
    )
    assert resp.status_code == 415
    assert len(csv_queue) == 0

# Fin del archivo backend/tests/routes/test_api_routes.py
