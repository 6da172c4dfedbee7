# -*- coding: utf-8 -*-
"""
backend/app/modules/bulk_import/facades/csv_import_facade.py

Importación masiva por CSV.

- start_csv_import: valida el archivo, lo guarda, crea el registro QUEUED y encola
- process_csv_import: worker; una factura DRAFT por fila válida

Fases del worker:
    1. BulkImport -> PROCESSING (commit)
    2. CSV desde el blob store
    3. Parseo + límite de filas
    4. total_rows (commit)
    5. Alta de facturas fila por fila (errores por fila, no fatales)
    6. BulkImport -> COMPLETED con conteos y error_summary

Un fallo fatal (archivo ausente, demasiadas filas, error de base) deja
el registro en FAILED con processing_error y se re-lanza para que la
cola reintente.

Autor: EInvoiceMY
Fecha: 2025-11-15
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.bulk_import.enums import BulkImportSource, BulkImportStatus
from app.modules.bulk_import.models import BulkImport
from app.modules.bulk_import.repositories import BulkImportRepository
from app.modules.bulk_import.services import parse_csv_rows
from app.modules.invoices.facades import create_invoice
from app.shared.config import get_settings
from app.shared.database import commit_or_raise, now_utc
from app.shared.errors import BlobNotFoundError, FileTooLarge, NotFoundError, UnsupportedFileType, ValidationFailed
from app.shared.integrations import BlobStore, JobQueue
from app.shared.integrations.blob_store import BULK_IMPORTS_PREFIX

logger = logging.getLogger(__name__)

bulk_import_repo = BulkImportRepository()

CSV_CONTENT_TYPES = ("text/csv", "application/csv")


@dataclass(frozen=True)
class CsvImportJob:
    """Mensaje de la cola de importación CSV."""
    bulk_import_id: UUID
    storage_key: str
    business_id: UUID
    user_id: UUID

    def to_message(self) -> Dict[str, str]:
        return {
            "bulk_import_id": str(self.bulk_import_id),
            "storage_key": self.storage_key,
            "business_id": str(self.business_id),
            "user_id": str(self.user_id),
        }

    @classmethod
    def from_message(cls, body: Dict[str, Any]) -> "CsvImportJob":
        return cls(
            bulk_import_id=UUID(str(body["bulk_import_id"])),
            storage_key=str(body["storage_key"]),
            business_id=UUID(str(body["business_id"])),
            user_id=UUID(str(body["user_id"])),
        )


def _is_csv(filename: str, content_type: Optional[str]) -> bool:
    if content_type and content_type.split(";", 1)[0].strip().lower() in CSV_CONTENT_TYPES:
        return True
    return filename.lower().endswith(".csv")


async def start_csv_import(
    db: AsyncSession,
    *,
    business_id: UUID,
    user_id: UUID,
    filename: str,
    data: bytes,
    blob_store: BlobStore,
    job_queue: JobQueue,
    content_type: Optional[str] = None,
) -> BulkImport:
    """
    Registra una importación CSV y la encola.

    Raises:
        UnsupportedFileType: No es CSV (415)
        FileTooLarge: Excede MAX_CSV_SIZE_MB (413)
    """
    if not _is_csv(filename, content_type):
        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else (content_type or "")
        raise UnsupportedFileType(ext, ["csv"])
    max_bytes = get_settings().max_csv_size_bytes
    if len(data) > max_bytes:
        raise FileTooLarge(len(data), max_bytes)

    bulk_import_id = uuid.uuid4()
    storage_key = f"{BULK_IMPORTS_PREFIX}/{business_id}/{bulk_import_id}.csv"
    await blob_store.put(storage_key, data, "text/csv")

    async def _work() -> BulkImport:
        record = BulkImport(
            id=bulk_import_id,
            business_id=business_id,
            initiated_by_user_id=user_id,
            storage_key=storage_key,
            original_filename=(filename or "import.csv")[:255],
            source=BulkImportSource.CSV,
            status=BulkImportStatus.QUEUED,
            success_count=0,
            error_count=0,
        )
        db.add(record)
        await db.flush()
        return record

    record = await commit_or_raise(db, _work)

    job = CsvImportJob(
        bulk_import_id=bulk_import_id,
        storage_key=storage_key,
        business_id=business_id,
        user_id=user_id,
    )
    await job_queue.send(job.to_message())
    logger.info(
        "[start_csv_import] Importación encolada",
        extra={"bulk_import_id": str(bulk_import_id), "business_id": str(business_id), "size": len(data)},
    )
    return record


async def _mark_failed(db: AsyncSession, bulk_import_id: UUID, error: Exception) -> None:
    try:
        await db.rollback()
        record = await db.get(BulkImport, bulk_import_id, populate_existing=True)
        if record is not None:
            record.status = BulkImportStatus.FAILED
            record.processing_error = str(error) or error.__class__.__name__
            record.updated_at = now_utc()
            await db.commit()
    except Exception as mark_err:
        logger.error(
            f"[process_csv_import] No se pudo marcar FAILED: {mark_err}",
            extra={"bulk_import_id": str(bulk_import_id)},
        )


async def process_csv_import(
    db: AsyncSession,
    job: CsvImportJob,
    *,
    blob_store: BlobStore,
) -> BulkImport:
    """
    Procesa una importación CSV encolada.

    Raises:
        NotFoundError: El registro de importación no existe
        Exception: Cualquier fallo fatal, tras marcar FAILED
    """
    log_ctx = {"bulk_import_id": str(job.bulk_import_id), "business_id": str(job.business_id)}
    logger.info("[process_csv_import] Starting CSV import", extra=log_ctx)

    # ========== FASE 1: PROCESSING ==========
    record = await db.get(BulkImport, job.bulk_import_id)
    if record is None:
        raise NotFoundError("Bulk import", job.bulk_import_id, code="IMPORT_NOT_FOUND")
    record.status = BulkImportStatus.PROCESSING
    record.processing_error = None
    record.updated_at = now_utc()
    await db.commit()

    try:
        # ========== FASE 2: CSV ==========
        data = await blob_store.get(job.storage_key)
        if data is None:
            raise BlobNotFoundError(job.storage_key)
        csv_text = data.decode("utf-8-sig")

        # ========== FASE 3: parseo ==========
        rows = parse_csv_rows(csv_text)
        max_rows = get_settings().max_csv_rows
        if len(rows) > max_rows:
            raise ValidationFailed(f"CSV has {len(rows)} rows; maximum is {max_rows}")

        # ========== FASE 4: total_rows ==========
        record.total_rows = len(rows)
        record.updated_at = now_utc()
        await db.commit()
        logger.info("[process_csv_import] Phase 4: %d rows", len(rows), extra=log_ctx)

        # ========== FASE 5: facturas ==========
        errors: List[Dict[str, Any]] = []
        created = 0
        for parsed in rows:
            if not parsed.ok:
                errors.append({"row": parsed.row, "message": parsed.error or "Unknown parse error"})
                continue
            try:
                invoice = await create_invoice(db, job.business_id, job.user_id, parsed.data)
                await bulk_import_repo.link_invoice(db, job.bulk_import_id, invoice.id)
                await db.commit()
                created += 1
            except Exception as e:
                await db.rollback()
                logger.warning(
                    "[process_csv_import] Fila %d falló: %s", parsed.row, e, extra=log_ctx
                )
                errors.append({"row": parsed.row, "message": str(e) or "Creation failed"})

        # ========== FASE 6: COMPLETED ==========
        record = await db.get(BulkImport, job.bulk_import_id, populate_existing=True)
        now = now_utc()
        record.status = BulkImportStatus.COMPLETED
        record.success_count = created
        record.error_count = len(errors)
        record.error_summary = errors or None
        record.completed_at = now
        record.updated_at = now
        await db.commit()

        logger.info(
            "[process_csv_import] Import completed",
            extra={**log_ctx, "success_count": created, "error_count": len(errors)},
        )
        return record

    except Exception as e:
        logger.error(f"[process_csv_import] Import failed: {e}", exc_info=True, extra=log_ctx)
        await _mark_failed(db, job.bulk_import_id, e)
        raise


__all__ = ["CsvImportJob", "CSV_CONTENT_TYPES", "start_csv_import", "process_csv_import"]

# Fin del archivo backend/app/modules/bulk_import/facades/csv_import_facade.py
