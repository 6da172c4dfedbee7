# -*- coding: utf-8 -*-
# backend/tests/modules/lhdn/test_submission_facade.py
import base64
import json
from datetime import datetime, timezone

import httpx
import pytest

from app.modules.invoices.enums import InvoiceStatus
from app.modules.invoices.facades import create_invoice, finalize_invoice
from app.modules.invoices.models import Invoice
from app.modules.lhdn.enums import SubmissionStatus
from app.modules.lhdn.facades import cancel_invoice, list_submissions, poll_status, submit_invoice
from app.modules.lhdn.models import LhdnSubmission
from app.modules.lhdn.services import LhdnApiClient, TokenCache
from app.shared.errors import (
    ConflictError,
    InvalidStatusTransition,
    LhdnCredentialsMissing,
    LhdnSubmissionError,
    OwnershipError,
)
from app.shared.integrations import InvoiceEventType


async def _ready_invoice(db, business_id, user_id, payload):
    invoice = await create_invoice(db, business_id, user_id, payload)
    invoice = await finalize_invoice(db, invoice.id, business_id)
    return invoice.id


async def _fresh(db, model, ident):
    return await db.get(model, ident, populate_existing=True)


async def _submissions(session_factory, invoice_id):
    async with session_factory() as db:
        rows = await db.execute(LhdnSubmission.__table__.select().where(LhdnSubmission.invoice_id == invoice_id))
        return rows.mappings().all()


class SpyLhdnClient(LhdnApiClient):
    """Registra las filas de auditoría visibles en el momento de la llamada de envío."""

    def __init__(self, http_client, session_factory, invoice_id):
        super().__init__(http_client)
        self.session_factory = session_factory
        self.invoice_id = invoice_id
        self.rows_at_call = None

    async def submit_documents(self, access_token, payload):
        self.rows_at_call = await _submissions(self.session_factory, self.invoice_id)
        return await super().submit_documents(access_token, payload)


async def test_submit_accepted(
    db_session, business, user_id, invoice_payload, lhdn_client, token_cache, event_bus, published_events, fake_lhdn
):
    business_id = business.id
    invoice_id = await _ready_invoice(db_session, business_id, user_id, invoice_payload())

    result = await submit_invoice(
        db_session, invoice_id, business_id, api_client=lhdn_client, token_cache=token_cache, event_bus=event_bus
    )

    assert result == {"submission_uid": "SUB-0001", "status": "SUBMITTED"}
    invoice = await _fresh(db_session, Invoice, invoice_id)
    assert invoice.status == InvoiceStatus.SUBMITTED
    assert invoice.lhdn_submission_uid == "SUB-0001"
    assert invoice.lhdn_uuid == "DOC-UUID-0001"
    assert invoice.lhdn_submitted_at is not None

    [submission] = await list_submissions(db_session, invoice_id, business_id)
    assert submission.status == SubmissionStatus.SUBMITTED
    assert submission.submission_uid == "SUB-0001"
    assert submission.document_uuid == "DOC-UUID-0001"
    assert submission.response_payload["submissionUid"] == "SUB-0001"

    entry = submission.submission_payload["documents"][0]
    assert entry["codeNumber"] == "INV-2025-0001"
    ubl = json.loads(base64.b64decode(entry["document"]))
    assert ubl["Invoice"][0]["ID"] == [{"_": "INV-2025-0001"}]

    request = fake_lhdn.requests_to("/api/v1.0/documentsubmissions/")[0]
    assert request.headers["authorization"] == "Bearer token-1"

    assert [e.event_type for e in published_events] == [InvoiceEventType.INVOICE_SUBMITTED.value]
    assert published_events[0].payload == {"submission_uid": "SUB-0001", "document_uuid": "DOC-UUID-0001"}


async def test_pending_row_is_committed_before_the_call(
    db_session, session_factory, business, user_id, invoice_payload, fake_lhdn
):
    business_id = business.id
    invoice_id = await _ready_invoice(db_session, business_id, user_id, invoice_payload())
    http = httpx.AsyncClient(base_url="https://lhdn.test", transport=httpx.MockTransport(fake_lhdn.handler))
    spy = SpyLhdnClient(http, session_factory, invoice_id)
    try:
        await submit_invoice(
            db_session, invoice_id, business_id, api_client=spy, token_cache=TokenCache(spy, buffer_seconds=60)
        )
    finally:
        await spy.aclose()

    assert len(spy.rows_at_call) == 1
    assert spy.rows_at_call[0]["status"] == SubmissionStatus.PENDING
    assert spy.rows_at_call[0]["submission_payload"]["documents"][0]["codeNumber"] == "INV-2025-0001"


async def test_submit_rejected_by_lhdn(
    db_session, business, user_id, invoice_payload, lhdn_client, token_cache, event_bus, published_events, fake_lhdn
):
    business_id = business.id
    invoice_id = await _ready_invoice(db_session, business_id, user_id, invoice_payload())
    fake_lhdn.submit_response = (
        202,
        {
            "submissionUid": None,
            "acceptedDocuments": [],
            "rejectedDocuments": [
                {"invoiceCodeNumber": "INV-2025-0001", "error": {"code": "DS302", "message": "Duplicate invoice"}}
            ],
        },
    )

    with pytest.raises(LhdnSubmissionError, match="Duplicate invoice"):
        await submit_invoice(
            db_session, invoice_id, business_id, api_client=lhdn_client, token_cache=token_cache, event_bus=event_bus
        )

    invoice = await _fresh(db_session, Invoice, invoice_id)
    assert invoice.status == InvoiceStatus.REJECTED
    [submission] = await list_submissions(db_session, invoice_id, business_id)
    assert submission.status == SubmissionStatus.REJECTED
    assert submission.error_message == "Duplicate invoice"
    assert [e.event_type for e in published_events] == ["invoice.rejected"]
    assert published_events[0].payload == {"reason": "Duplicate invoice"}


async def test_network_failure_keeps_invoice_ready(
    db_session, business, user_id, invoice_payload, lhdn_client, token_cache, event_bus, published_events, fake_lhdn
):
    business_id = business.id
    invoice_id = await _ready_invoice(db_session, business_id, user_id, invoice_payload())
    fake_lhdn.submit_error = httpx.ConnectError("connection reset")

    with pytest.raises(LhdnSubmissionError):
        await submit_invoice(
            db_session, invoice_id, business_id, api_client=lhdn_client, token_cache=token_cache, event_bus=event_bus
        )

    invoice = await _fresh(db_session, Invoice, invoice_id)
    assert invoice.status == InvoiceStatus.READY_FOR_SUBMISSION
    [submission] = await list_submissions(db_session, invoice_id, business_id)
    assert submission.status == SubmissionStatus.REJECTED
    assert "connection reset" in submission.error_message
    assert published_events == []

    # un reintento posterior funciona y deja dos filas de auditoría
    fake_lhdn.submit_error = None
    await submit_invoice(db_session, invoice_id, business_id, api_client=lhdn_client, token_cache=token_cache)
    assert len(await list_submissions(db_session, invoice_id, business_id)) == 2


@pytest.mark.parametrize("status", [InvoiceStatus.DRAFT, InvoiceStatus.SUBMITTED, InvoiceStatus.VALIDATED])
async def test_submit_requires_ready_status(
    db_session, business, user_id, invoice_payload, lhdn_client, token_cache, fake_lhdn, status
):
    business_id = business.id
    invoice = await create_invoice(db_session, business_id, user_id, invoice_payload())
    invoice.status = status
    await db_session.commit()

    with pytest.raises(InvalidStatusTransition):
        await submit_invoice(db_session, invoice.id, business_id, api_client=lhdn_client, token_cache=token_cache)
    assert fake_lhdn.requests == []


async def test_submit_without_credentials(
    db_session, business_without_credentials, user_id, invoice_payload, lhdn_client, token_cache, fake_lhdn
):
    business_id = business_without_credentials.id
    invoice_id = await _ready_invoice(db_session, business_id, user_id, invoice_payload())

    with pytest.raises(LhdnCredentialsMissing):
        await submit_invoice(db_session, invoice_id, business_id, api_client=lhdn_client, token_cache=token_cache)
    assert fake_lhdn.requests == []
    assert await list_submissions(db_session, invoice_id, business_id) == []


async def test_submit_foreign_invoice(
    db_session, business, other_business, user_id, invoice_payload, lhdn_client, token_cache
):
    invoice_id = await _ready_invoice(db_session, business.id, user_id, invoice_payload())
    with pytest.raises(OwnershipError):
        await submit_invoice(db_session, invoice_id, other_business.id, api_client=lhdn_client, token_cache=token_cache)


async def _submitted_invoice(db, business_id, user_id, payload, lhdn_client, token_cache):
    invoice_id = await _ready_invoice(db, business_id, user_id, payload)
    await submit_invoice(db, invoice_id, business_id, api_client=lhdn_client, token_cache=token_cache)
    return invoice_id


async def test_poll_validated(
    db_session, business, user_id, invoice_payload, lhdn_client, token_cache, event_bus, published_events, fake_lhdn
):
    business_id = business.id
    invoice_id = await _submitted_invoice(db_session, business_id, user_id, invoice_payload(), lhdn_client, token_cache)
    fake_lhdn.valid_status("2025-11-04T10:00:00Z")

    result = await poll_status(
        db_session, invoice_id, business_id, api_client=lhdn_client, token_cache=token_cache, event_bus=event_bus
    )

    assert result["status"] == "Valid"
    assert result["details"]["overallStatus"] == "valid"
    invoice = await _fresh(db_session, Invoice, invoice_id)
    assert invoice.status == InvoiceStatus.VALIDATED
    assert invoice.lhdn_validation_status == "Valid"
    assert invoice.lhdn_validated_at == datetime(2025, 11, 4, 10, 0, tzinfo=timezone.utc)
    [submission] = await list_submissions(db_session, invoice_id, business_id)
    assert submission.status == SubmissionStatus.VALIDATED
    assert [e.event_type for e in published_events] == ["invoice.validated"]


async def test_poll_invalid(
    db_session, business, user_id, invoice_payload, lhdn_client, token_cache, event_bus, published_events, fake_lhdn
):
    business_id = business.id
    invoice_id = await _submitted_invoice(db_session, business_id, user_id, invoice_payload(), lhdn_client, token_cache)
    fake_lhdn.invalid_status("Buyer TIN is invalid")

    result = await poll_status(
        db_session, invoice_id, business_id, api_client=lhdn_client, token_cache=token_cache, event_bus=event_bus
    )

    assert result["status"] == "Invalid"
    invoice = await _fresh(db_session, Invoice, invoice_id)
    assert invoice.status == InvoiceStatus.REJECTED
    [submission] = await list_submissions(db_session, invoice_id, business_id)
    assert submission.status == SubmissionStatus.REJECTED
    assert submission.error_message == "Buyer TIN is invalid"
    assert published_events[0].payload == {"reason": "Buyer TIN is invalid"}


async def test_poll_in_progress_changes_nothing(
    db_session, business, user_id, invoice_payload, lhdn_client, token_cache, event_bus, published_events
):
    business_id = business.id
    invoice_id = await _submitted_invoice(db_session, business_id, user_id, invoice_payload(), lhdn_client, token_cache)

    result = await poll_status(
        db_session, invoice_id, business_id, api_client=lhdn_client, token_cache=token_cache, event_bus=event_bus
    )

    assert result == {"status": "in progress"}
    invoice = await _fresh(db_session, Invoice, invoice_id)
    assert invoice.status == InvoiceStatus.SUBMITTED
    assert published_events == []


async def test_poll_after_terminal_is_idempotent(
    db_session, business, user_id, invoice_payload, lhdn_client, token_cache, event_bus, published_events, fake_lhdn
):
    business_id = business.id
    invoice_id = await _submitted_invoice(db_session, business_id, user_id, invoice_payload(), lhdn_client, token_cache)
    fake_lhdn.valid_status()
    kwargs = dict(api_client=lhdn_client, token_cache=token_cache, event_bus=event_bus)

    await poll_status(db_session, invoice_id, business_id, **kwargs)
    second = await poll_status(db_session, invoice_id, business_id, **kwargs)

    assert second["status"] == "Valid"
    assert len(published_events) == 1


async def test_poll_requires_submission(db_session, business, user_id, invoice_payload, lhdn_client, token_cache):
    invoice_id = await _ready_invoice(db_session, business.id, user_id, invoice_payload())
    with pytest.raises(ConflictError) as exc:
        await poll_status(db_session, invoice_id, business.id, api_client=lhdn_client, token_cache=token_cache)
    assert exc.value.code == "NOT_SUBMITTED"


async def test_cancel_validated_invoice(
    db_session, business, user_id, invoice_payload, lhdn_client, token_cache, event_bus, published_events, fake_lhdn
):
    business_id = business.id
    invoice_id = await _submitted_invoice(db_session, business_id, user_id, invoice_payload(), lhdn_client, token_cache)
    fake_lhdn.valid_status()
    await poll_status(db_session, invoice_id, business_id, api_client=lhdn_client, token_cache=token_cache)

    result = await cancel_invoice(
        db_session,
        invoice_id,
        business_id,
        api_client=lhdn_client,
        token_cache=token_cache,
        reason="Wrong buyer",
        event_bus=event_bus,
    )

    assert result == {"status": "CANCELLED"}
    invoice = await _fresh(db_session, Invoice, invoice_id)
    assert invoice.status == InvoiceStatus.CANCELLED
    put = fake_lhdn.requests_to("/api/v1.0/documents/state/DOC-UUID-0001/state")[0]
    assert json.loads(put.content) == {"status": "cancelled", "reason": "Wrong buyer"}
    assert [e.event_type for e in published_events] == ["invoice.cancelled"]


async def test_cancel_requires_validated(db_session, business, user_id, invoice_payload, lhdn_client, token_cache, fake_lhdn):
    business_id = business.id
    invoice_id = await _submitted_invoice(db_session, business_id, user_id, invoice_payload(), lhdn_client, token_cache)

    with pytest.raises(InvalidStatusTransition):
        await cancel_invoice(db_session, invoice_id, business_id, api_client=lhdn_client, token_cache=token_cache)
    assert fake_lhdn.requests_to("/api/v1.0/documents/state/") == []


async def test_cancel_failure_keeps_invoice_validated(
    db_session, business, user_id, invoice_payload, lhdn_client, token_cache, fake_lhdn
):
    business_id = business.id
    invoice_id = await _submitted_invoice(db_session, business_id, user_id, invoice_payload(), lhdn_client, token_cache)
    fake_lhdn.valid_status()
    await poll_status(db_session, invoice_id, business_id, api_client=lhdn_client, token_cache=token_cache)
    fake_lhdn.cancel_response = (400, {"error": "Cancellation window expired"})

    with pytest.raises(LhdnSubmissionError):
        await cancel_invoice(db_session, invoice_id, business_id, api_client=lhdn_client, token_cache=token_cache)

    invoice = await _fresh(db_session, Invoice, invoice_id)
    assert invoice.status == InvoiceStatus.VALIDATED


async def test_event_handler_failure_does_not_break_submit(
    db_session, business, user_id, invoice_payload, lhdn_client, token_cache, event_bus
):
    async def _boom(event):
        raise RuntimeError("subscriber down")

    event_bus.subscribe(_boom)
    business_id = business.id
    invoice_id = await _ready_invoice(db_session, business_id, user_id, invoice_payload())

    result = await submit_invoice(
        db_session, invoice_id, business_id, api_client=lhdn_client, token_cache=token_cache, event_bus=event_bus
    )
    assert result["status"] == "SUBMITTED"

# Fin del archivo backend/tests/modules/lhdn/test_submission_facade.py
