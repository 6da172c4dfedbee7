# -*- coding: utf-8 -*-
# backend/tests/modules/bulk_import/test_csv_import.py
import uuid

import pytest

from app.modules.bulk_import.enums import BulkImportSource, BulkImportStatus
from app.modules.bulk_import.facades import (
    CsvImportJob,
    get_import_status,
    get_session_with_invoices,
    list_imports,
    process_csv_import,
    start_csv_import,
)
from app.modules.bulk_import.jobs import handle_csv_import_batch
from app.modules.bulk_import.models import BulkImport
from app.modules.bulk_import.services.csv_parser import CSV_COLUMNS
from app.modules.invoices.enums import InvoiceStatus
from app.shared.errors import FileTooLarge, NotFoundError, UnsupportedFileType, ValidationFailed

HEADER = ",".join(CSV_COLUMNS)
GOOD_ROW = "INV-{n},01,2025-11-01,,Pembeli {n},C98765432109,,,,MYR,,Consulting,2,50.00,01,6"


def _csv(*rows: str) -> bytes:
    return "\n".join([HEADER, *rows]).encode("utf-8")


async def _start(db, business, user_id, blob_store, csv_queue, data, filename="invoices.csv"):
    record = await start_csv_import(
        db,
        business_id=business.id,
        user_id=user_id,
        filename=filename,
        data=data,
        blob_store=blob_store,
        job_queue=csv_queue,
        content_type="text/csv",
    )
    [msg] = await csv_queue.receive_batch()
    return record, CsvImportJob.from_message(msg.body)


async def _reload(session_factory, bulk_import_id):
    async with session_factory() as db:
        return await db.get(BulkImport, bulk_import_id)


async def test_start_stores_file_and_queues_job(db_session, business, user_id, blob_store, csv_queue):
    record, job = await _start(db_session, business, user_id, blob_store, csv_queue, _csv(GOOD_ROW.format(n=1)))

    assert record.status == BulkImportStatus.QUEUED
    assert record.source == BulkImportSource.CSV
    assert record.original_filename == "invoices.csv"
    assert record.storage_key == f"bulk-imports/{business.id}/{record.id}.csv"
    assert await blob_store.get(record.storage_key) == _csv(GOOD_ROW.format(n=1))
    assert job.bulk_import_id == record.id
    assert job.user_id == user_id


@pytest.mark.parametrize("filename,content_type", [("data.xlsx", None), ("data.txt", "text/plain")])
async def test_start_rejects_non_csv(db_session, business, user_id, blob_store, csv_queue, filename, content_type):
    with pytest.raises(UnsupportedFileType):
        await start_csv_import(
            db_session,
            business_id=business.id,
            user_id=user_id,
            filename=filename,
            data=b"a,b",
            blob_store=blob_store,
            job_queue=csv_queue,
            content_type=content_type,
        )
    assert len(csv_queue) == 0


async def test_start_accepts_csv_content_type_without_extension(db_session, business, user_id, blob_store, csv_queue):
    record = await start_csv_import(
        db_session,
        business_id=business.id,
        user_id=user_id,
        filename="export",
        data=_csv(),
        blob_store=blob_store,
        job_queue=csv_queue,
        content_type="text/csv; charset=utf-8",
    )
    assert record.status == BulkImportStatus.QUEUED


async def test_start_rejects_oversized_csv(db_session, business, user_id, blob_store, csv_queue):
    with pytest.raises(FileTooLarge):
        await start_csv_import(
            db_session,
            business_id=business.id,
            user_id=user_id,
            filename="big.csv",
            data=b"x" * (5 * 1024 * 1024 + 1),
            blob_store=blob_store,
            job_queue=csv_queue,
        )


async def test_process_creates_drafts_and_collects_row_errors(
    db_session, session_factory, business, user_id, blob_store, csv_queue
):
    data = _csv(
        GOOD_ROW.format(n=1),
        "INV-2,01,2025-11-01",
        GOOD_ROW.format(n=3).replace("Consulting", ""),
        GOOD_ROW.format(n=4),
    )
    record, job = await _start(db_session, business, user_id, blob_store, csv_queue, data)

    async with session_factory() as db:
        result = await process_csv_import(db, job, blob_store=blob_store)

    assert result.status == BulkImportStatus.COMPLETED
    assert result.total_rows == 4
    assert result.success_count == 2
    assert result.error_count == 2
    assert result.error_summary == [
        {"row": 3, "message": "Expected 16 columns, got 3"},
        {"row": 4, "message": "item_description is required"},
    ]
    assert result.completed_at is not None

    async with session_factory() as db:
        view = await get_session_with_invoices(db, record.id, business.id)
    numbers = [invoice.invoice_number for invoice, _ in view.invoices]
    assert sorted(numbers) == ["INV-1", "INV-4"]
    for invoice, doc in view.invoices:
        assert invoice.status == InvoiceStatus.DRAFT
        assert invoice.grand_total == "106.00"
        assert doc is None


async def test_process_rejects_too_many_rows(db_session, session_factory, business, user_id, blob_store, csv_queue):
    rows = [GOOD_ROW.format(n=n) for n in range(501)]
    record, job = await _start(db_session, business, user_id, blob_store, csv_queue, _csv(*rows))

    async with session_factory() as db:
        with pytest.raises(ValidationFailed, match="CSV has 501 rows; maximum is 500"):
            await process_csv_import(db, job, blob_store=blob_store)

    stored = await _reload(session_factory, record.id)
    assert stored.status == BulkImportStatus.FAILED
    assert stored.processing_error == "CSV has 501 rows; maximum is 500"
    assert stored.success_count == 0


async def test_process_unknown_import(session_factory, business, user_id, blob_store):
    job = CsvImportJob(bulk_import_id=uuid.uuid4(), storage_key="x.csv", business_id=business.id, user_id=user_id)
    async with session_factory() as db:
        with pytest.raises(NotFoundError):
            await process_csv_import(db, job, blob_store=blob_store)


async def test_consumer_processes_queue(db_session, session_factory, business, user_id, blob_store, csv_queue):
    record = await start_csv_import(
        db_session,
        business_id=business.id,
        user_id=user_id,
        filename="invoices.csv",
        data=_csv(GOOD_ROW.format(n=1), GOOD_ROW.format(n=2)),
        blob_store=blob_store,
        job_queue=csv_queue,
    )

    async def _handler(batch):
        await handle_csv_import_batch(batch, session_factory, blob_store)

    await csv_queue.drain(_handler)

    stored = await _reload(session_factory, record.id)
    assert stored.status == BulkImportStatus.COMPLETED
    assert stored.success_count == 2
    assert stored.error_summary is None
    assert csv_queue.dead_letters == []


async def test_consumer_dead_letters_missing_file(db_session, session_factory, business, user_id, blob_store, csv_queue):
    record = await start_csv_import(
        db_session,
        business_id=business.id,
        user_id=user_id,
        filename="invoices.csv",
        data=_csv(GOOD_ROW.format(n=1)),
        blob_store=blob_store,
        job_queue=csv_queue,
    )
    blob_store._objects.clear()

    async def _handler(batch):
        await handle_csv_import_batch(batch, session_factory, blob_store)

    await csv_queue.drain(_handler)

    assert len(csv_queue.dead_letters) == 1
    stored = await _reload(session_factory, record.id)
    assert stored.status == BulkImportStatus.FAILED


async def test_list_and_status_are_scoped(db_session, business, other_business, user_id, blob_store, csv_queue):
    business_id, other_id = business.id, other_business.id
    record, _ = await _start(db_session, business, user_id, blob_store, csv_queue, _csv())

    listed = await list_imports(db_session, business_id)
    assert [r.id for r in listed] == [record.id]
    assert await list_imports(db_session, other_id) == []

    assert (await get_import_status(db_session, record.id, business_id)).id == record.id
    with pytest.raises(NotFoundError) as exc:
        await get_import_status(db_session, record.id, other_id)
    assert exc.value.code == "IMPORT_NOT_FOUND"

# Fin del archivo backend/tests/modules/bulk_import/test_csv_import.py
