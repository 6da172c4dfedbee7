# -*- coding: utf-8 -*-
# backend/tests/modules/bulk_import/test_document_sessions.py
import uuid

import pytest
from sqlalchemy import select
from sqlalchemy.exc import InvalidRequestError

from app.modules.bulk_import.enums import BulkImportSource, BulkImportStatus
from app.modules.bulk_import.facades import (
    add_invoice_to_session,
    compute_session_stats,
    create_document_session,
    get_session_with_invoices,
    submit_ready,
)
from app.modules.bulk_import.models import BulkImport
from app.modules.invoices.enums import InvoiceStatus
from app.modules.invoices.facades import create_invoice, finalize_invoice
from app.modules.invoices.models import Invoice
from app.modules.lhdn.facades import submit_invoice
from app.modules.ocr.enums import OcrStatus
from app.modules.ocr.facades import upload_document
from app.shared.errors import NotFoundError

S = InvoiceStatus


def test_stats_bucket_statuses():
    stats = compute_session_stats(
        [S.READY_FOR_SUBMISSION, S.READY_FOR_SUBMISSION, S.REVIEW_REQUIRED, S.OCR_PROCESSING, S.REJECTED, S.SUBMITTED]
    )
    assert stats == {"total": 6, "ready": 2, "reviewing": 1, "processing": 1, "failed": 1}


def test_stats_empty():
    assert compute_session_stats([]) == {"total": 0, "ready": 0, "reviewing": 0, "processing": 0, "failed": 0}


async def test_create_session(db_session, business, user_id):
    session = await create_document_session(db_session, business.id, user_id)
    assert session.source == BulkImportSource.DOCUMENTS
    assert session.status == BulkImportStatus.PROCESSING
    assert session.total_rows == 0
    assert session.storage_key == f"sessions/{business.id}/{session.id}"


async def test_uploads_join_session(db_session, business, user_id, blob_store, ocr_queue):
    business_id = business.id
    session = await create_document_session(db_session, business_id, user_id)

    for name in ("a.pdf", "b.png"):
        await upload_document(
            db_session,
            user_id=user_id,
            business_id=business_id,
            filename=name,
            data=b"bytes",
            blob_store=blob_store,
            job_queue=ocr_queue,
            bulk_session_id=session.id,
        )

    view = await get_session_with_invoices(db_session, session.id, business_id)
    assert view.session.total_rows == 2
    assert view.stats == {"total": 2, "ready": 0, "reviewing": 0, "processing": 2, "failed": 0}
    assert sorted(doc.original_filename for _, doc in view.invoices) == ["a.pdf", "b.png"]
    assert all(doc.ocr_status == OcrStatus.PENDING for _, doc in view.invoices)


async def test_upload_with_unknown_session_still_succeeds(db_session, business, user_id, blob_store, ocr_queue):
    out = await upload_document(
        db_session,
        user_id=user_id,
        business_id=business.id,
        filename="a.pdf",
        data=b"bytes",
        blob_store=blob_store,
        job_queue=ocr_queue,
        bulk_session_id=uuid.uuid4(),
    )
    assert out.status == S.OCR_PROCESSING
    assert len(ocr_queue) == 1


async def test_linking_is_idempotent(db_session, business, user_id, invoice_payload):
    business_id = business.id
    session = await create_document_session(db_session, business_id, user_id)
    invoice = await create_invoice(db_session, business_id, user_id, invoice_payload())

    assert await add_invoice_to_session(db_session, session.id, invoice.id, business_id=business_id)
    assert await add_invoice_to_session(db_session, session.id, invoice.id, business_id=business_id)
    await db_session.commit()

    view = await get_session_with_invoices(db_session, session.id, business_id)
    assert view.session.total_rows == 1


async def test_session_links_are_never_loaded_implicitly(
    db_session, session_factory, business, user_id, invoice_payload
):
    assert BulkImport.links.property.lazy == "raise"

    business_id = business.id
    session = await create_document_session(db_session, business_id, user_id)
    invoice = await create_invoice(db_session, business_id, user_id, invoice_payload())
    await add_invoice_to_session(db_session, session.id, invoice.id, business_id=business_id)
    await db_session.commit()

    async with session_factory() as fresh:
        loaded = (await fresh.execute(select(BulkImport).where(BulkImport.id == session.id))).scalar_one()
        with pytest.raises(InvalidRequestError):
            loaded.links

    view = await get_session_with_invoices(db_session, session.id, business_id)
    assert [inv.id for inv, _ in view.invoices] == [invoice.id]


async def test_session_of_other_business_is_hidden(db_session, business, other_business, user_id, invoice_payload):
    session = await create_document_session(db_session, business.id, user_id)
    invoice = await create_invoice(db_session, other_business.id, user_id, invoice_payload())

    assert not await add_invoice_to_session(db_session, session.id, invoice.id, business_id=other_business.id)
    with pytest.raises(NotFoundError) as exc:
        await get_session_with_invoices(db_session, session.id, other_business.id)
    assert exc.value.code == "IMPORT_NOT_FOUND"


async def _session_with(db, business_id, user_id, invoice_payload, statuses):
    session = await create_document_session(db, business_id, user_id)
    ids = []
    for n, status in enumerate(statuses):
        invoice = await create_invoice(db, business_id, user_id, invoice_payload(invoice_number=f"INV-S{n}"))
        if status == S.READY_FOR_SUBMISSION:
            await finalize_invoice(db, invoice.id, business_id)
        elif status != S.DRAFT:
            invoice.status = status
        await add_invoice_to_session(db, session.id, invoice.id, business_id=business_id)
        await db.commit()
        ids.append(invoice.id)
    return session.id, ids


async def test_submit_ready_only_touches_ready_invoices(
    db_session, business, user_id, invoice_payload, lhdn_client, token_cache, fake_lhdn
):
    business_id = business.id
    session_id, ids = await _session_with(
        db_session, business_id, user_id, invoice_payload,
        [S.READY_FOR_SUBMISSION, S.REVIEW_REQUIRED, S.READY_FOR_SUBMISSION],
    )

    async def _submit(invoice_id):
        return await submit_invoice(
            db_session, invoice_id, business_id, api_client=lhdn_client, token_cache=token_cache
        )

    result = await submit_ready(db_session, session_id, business_id, _submit)

    assert result["submitted"] == 2
    assert result["failed"] == 0
    assert result["total"] == 2
    assert {r["invoice_id"] for r in result["results"]} == {ids[0], ids[2]}
    assert all(r["submission_uid"] == "SUB-0001" for r in result["results"])
    assert len(fake_lhdn.requests_to("/api/v1.0/documentsubmissions/")) == 2

    view = await get_session_with_invoices(db_session, session_id, business_id)
    assert view.stats["reviewing"] == 1
    assert view.stats["ready"] == 0


async def test_submit_ready_reports_individual_failures(
    db_session, business, user_id, invoice_payload, lhdn_client, token_cache
):
    business_id = business.id
    session_id, ids = await _session_with(
        db_session, business_id, user_id, invoice_payload, [S.READY_FOR_SUBMISSION, S.READY_FOR_SUBMISSION]
    )
    failing = ids[0]

    async def _submit(invoice_id):
        if invoice_id == failing:
            raise RuntimeError("LHDN timeout")
        return await submit_invoice(
            db_session, invoice_id, business_id, api_client=lhdn_client, token_cache=token_cache
        )

    result = await submit_ready(db_session, session_id, business_id, _submit)

    assert result["submitted"] == 1
    assert result["failed"] == 1
    failed = [r for r in result["results"] if not r["success"]]
    assert failed == [{"invoice_id": failing, "success": False, "error": "LHDN timeout"}]

    invoice = await db_session.get(Invoice, failing, populate_existing=True)
    assert invoice.status == S.READY_FOR_SUBMISSION


async def test_submit_ready_with_nothing_ready(db_session, business, user_id, invoice_payload):
    business_id = business.id
    session_id, _ = await _session_with(db_session, business_id, user_id, invoice_payload, [S.DRAFT])

    async def _submit(invoice_id):
        raise AssertionError("should not be called")

    result = await submit_ready(db_session, session_id, business_id, _submit)
    assert result == {"submitted": 0, "failed": 0, "total": 0, "results": []}

# Fin del archivo backend/tests/modules/bulk_import/test_document_sessions.py
