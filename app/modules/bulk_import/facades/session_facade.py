# -*- coding: utf-8 -*-
"""
backend/app/modules/bulk_import/facades/session_facade.py

Coordinador de sesiones de documentos (carga masiva OCR).

- create_document_session: sesión DOCUMENTS en PROCESSING
- add_invoice_to_session: vínculo idempotente; total_rows = facturas vinculadas
- get_session_with_invoices: facturas + documento OCR + estadísticas frescas
- get_ready_invoice_ids: facturas en READY_FOR_SUBMISSION
- submit_ready: envía todas las listas; un fallo individual no detiene al resto

Estadísticas (siempre recalculadas, nunca persistidas):
    ready      = READY_FOR_SUBMISSION
    reviewing  = REVIEW_REQUIRED
    processing = OCR_PROCESSING
    failed     = REJECTED

Autor: EInvoiceMY
Fecha: 2025-11-15
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.bulk_import.enums import BulkImportSource, BulkImportStatus
from app.modules.bulk_import.models import BulkImport
from app.modules.bulk_import.repositories import BulkImportRepository
from app.modules.invoices.enums import InvoiceStatus
from app.modules.invoices.models import Invoice
from app.modules.ocr.models import OcrDocument
from app.shared.database import commit_or_raise, now_utc
from app.shared.errors import NotFoundError
from app.shared.integrations.blob_store import SESSIONS_PREFIX

logger = logging.getLogger(__name__)

bulk_import_repo = BulkImportRepository()

DOCUMENT_SESSION_FILENAME = "Document Session"

SubmitFn = Callable[[UUID], Awaitable[Dict[str, Any]]]

_STAT_BY_STATUS = {
    InvoiceStatus.READY_FOR_SUBMISSION: "ready",
    InvoiceStatus.REVIEW_REQUIRED: "reviewing",
    InvoiceStatus.OCR_PROCESSING: "processing",
    InvoiceStatus.REJECTED: "failed",
}


@dataclass
class SessionWithInvoices:
    session: BulkImport
    invoices: List[Tuple[Invoice, Optional[OcrDocument]]] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)


def compute_session_stats(statuses: List[InvoiceStatus]) -> Dict[str, int]:
    stats = {"total": len(statuses), "ready": 0, "reviewing": 0, "processing": 0, "failed": 0}
    for status in statuses:
        key = _STAT_BY_STATUS.get(InvoiceStatus(status))
        if key is not None:
            stats[key] += 1
    return stats


async def get_owned_import(db: AsyncSession, bulk_import_id: UUID, business_id: UUID) -> BulkImport:
    """
    Raises:
        NotFoundError: IMPORT_NOT_FOUND si no existe o pertenece a otro negocio
    """
    bulk_import = await bulk_import_repo.get_for_business(db, bulk_import_id, business_id)
    if bulk_import is None:
        raise NotFoundError("Bulk import session", bulk_import_id, code="IMPORT_NOT_FOUND")
    return bulk_import


async def create_document_session(db: AsyncSession, business_id: UUID, user_id: UUID) -> BulkImport:
    """Crea una sesión DOCUMENTS vacía a la que se agregan las cargas OCR."""
    session_id = uuid.uuid4()

    async def _work() -> BulkImport:
        session = BulkImport(
            id=session_id,
            business_id=business_id,
            initiated_by_user_id=user_id,
            storage_key=f"{SESSIONS_PREFIX}/{business_id}/{session_id}",
            original_filename=DOCUMENT_SESSION_FILENAME,
            source=BulkImportSource.DOCUMENTS,
            status=BulkImportStatus.PROCESSING,
            total_rows=0,
            success_count=0,
            error_count=0,
        )
        db.add(session)
        await db.flush()
        return session

    session = await commit_or_raise(db, _work)
    logger.info(
        "[create_document_session] Sesión creada",
        extra={"bulk_import_id": str(session_id), "business_id": str(business_id)},
    )
    return session


async def add_invoice_to_session(
    db: AsyncSession,
    session_id: UUID,
    invoice_id: UUID,
    *,
    business_id: Optional[UUID] = None,
) -> bool:
    """
    Vincula una factura a la sesión y recalcula total_rows.

    No hace commit: corre dentro de la transacción del llamador.

    Returns:
        False si la sesión no existe (o no pertenece al negocio)
    """
    if business_id is not None:
        session = await bulk_import_repo.get_for_business(db, session_id, business_id)
    else:
        session = await bulk_import_repo.get(db, session_id)
    if session is None:
        return False

    await bulk_import_repo.link_invoice(db, session.id, invoice_id)
    session.total_rows = await bulk_import_repo.count_invoices(db, session.id)
    session.updated_at = now_utc()
    await db.flush()

    logger.info(
        "[add_invoice_to_session] Factura vinculada",
        extra={"bulk_import_id": str(session.id), "invoice_id": str(invoice_id), "total_rows": session.total_rows},
    )
    return True


async def get_session_with_invoices(
    db: AsyncSession, session_id: UUID, business_id: UUID
) -> SessionWithInvoices:
    session = await get_owned_import(db, session_id, business_id)
    rows = await bulk_import_repo.list_invoices_with_documents(db, session.id)
    stats = compute_session_stats([invoice.status for invoice, _ in rows])
    return SessionWithInvoices(session=session, invoices=rows, stats=stats)


async def get_ready_invoice_ids(db: AsyncSession, session_id: UUID, business_id: UUID) -> List[UUID]:
    result = await get_session_with_invoices(db, session_id, business_id)
    return [
        invoice.id
        for invoice, _ in result.invoices
        if invoice.status == InvoiceStatus.READY_FOR_SUBMISSION
    ]


async def submit_ready(
    db: AsyncSession,
    session_id: UUID,
    business_id: UUID,
    submit_fn: SubmitFn,
) -> Dict[str, Any]:
    """
    Envía a LHDN todas las facturas READY_FOR_SUBMISSION de la sesión.

    Cada envío se resuelve por separado; los errores individuales se
    reportan en results y no se propagan.

    Returns:
        {"submitted", "failed", "total", "results": [{invoice_id, success, submission_uid | error}]}
    """
    invoice_ids = await get_ready_invoice_ids(db, session_id, business_id)
    log_ctx = {"bulk_import_id": str(session_id), "business_id": str(business_id)}
    if not invoice_ids:
        logger.info("[submit_ready] Sin facturas listas", extra=log_ctx)
        return {"submitted": 0, "failed": 0, "total": 0, "results": []}

    results: List[Dict[str, Any]] = []
    for invoice_id in invoice_ids:
        try:
            outcome = await submit_fn(invoice_id)
        except Exception as e:
            logger.warning(
                "[submit_ready] Envío falló para %s: %s",
                invoice_id,
                e,
                extra={**log_ctx, "invoice_id": str(invoice_id)},
            )
            await db.rollback()
            results.append({"invoice_id": invoice_id, "success": False, "error": str(e)})
        else:
            results.append(
                {"invoice_id": invoice_id, "success": True, "submission_uid": outcome.get("submission_uid")}
            )

    submitted = sum(1 for r in results if r["success"])
    logger.info(
        "[submit_ready] %d enviadas, %d fallidas",
        submitted,
        len(results) - submitted,
        extra=log_ctx,
    )
    return {
        "submitted": submitted,
        "failed": len(results) - submitted,
        "total": len(results),
        "results": results,
    }


__all__ = [
    "SessionWithInvoices",
    "compute_session_stats",
    "get_owned_import",
    "create_document_session",
    "add_invoice_to_session",
    "get_session_with_invoices",
    "get_ready_invoice_ids",
    "submit_ready",
    "DOCUMENT_SESSION_FILENAME",
]

# Fin del archivo backend/app/modules/bulk_import/facades/session_facade.py
