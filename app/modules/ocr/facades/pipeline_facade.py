# -*- coding: utf-8 -*-
"""
backend/app/modules/ocr/facades/pipeline_facade.py

Pipeline OCR -> extracción IA -> triage -> factura.

Fases (secuenciales, cada una depende de la anterior):
    1. OcrDocument -> PROCESSING (commit inmediato, visible para quien consulta)
    2. Bytes desde el blob store
    3. Texto crudo por tipo de archivo (pdf / imagen)
    4. Extracción estructurada con IA
    5. Validación estricta del JSON (dentro de la fase 4)
    6. Triage por confianza
    7. Recalculo de líneas en servidor (los montos de la IA se descartan)
    8. Reemplazo de líneas + campos de la factura + transición de estado
    9. OcrDocument -> COMPLETED

Política de fallo:
    - OcrDocument -> FAILED con el mensaje de error
    - Invoice -> REVIEW_REQUIRED si seguía en OCR_PROCESSING
    - Ambos marcados en modo best-effort (errores secundarios solo se registran)
    - La excepción original se re-lanza para que la cola reintente

Autor: EInvoiceMY
Fecha: 2025-11-10
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.invoices.enums import InvoiceStatus
from app.modules.invoices.facades.base import (
    apply_totals,
    build_invoice_items,
    invoice_repo,
    transition_invoice_status,
)
from app.modules.invoices.models import Invoice
from app.modules.invoices.services import to_money_str
from app.modules.ocr.enums import FileType, OcrStatus
from app.modules.ocr.models import OcrDocument
from app.modules.ocr.schemas import ExtractedInvoice
from app.modules.ocr.services import extract_invoice_data, extract_text, triage_extraction
from app.shared.database.base import now_utc
from app.shared.errors import BlobNotFoundError, NotFoundError
from app.shared.integrations import AiInferenceClient, BlobStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OcrJob:
    """Mensaje de la cola OCR (una carga confirmada)."""
    ocr_document_id: UUID
    storage_key: str
    file_type: FileType
    invoice_id: UUID
    user_id: UUID
    business_id: UUID

    def to_message(self) -> Dict[str, str]:
        return {
            "ocr_document_id": str(self.ocr_document_id),
            "storage_key": self.storage_key,
            "file_type": self.file_type.value,
            "invoice_id": str(self.invoice_id),
            "user_id": str(self.user_id),
            "business_id": str(self.business_id),
        }

    @classmethod
    def from_message(cls, body: Dict[str, Any]) -> "OcrJob":
        return cls(
            ocr_document_id=UUID(str(body["ocr_document_id"])),
            storage_key=str(body["storage_key"]),
            file_type=FileType(str(body["file_type"]).lower()),
            invoice_id=UUID(str(body["invoice_id"])),
            user_id=UUID(str(body["user_id"])),
            business_id=UUID(str(body["business_id"])),
        )


@dataclass
class OcrPipelineSummary:
    """Resumen de una ejecución exitosa del pipeline."""
    ocr_document_id: UUID
    invoice_id: UUID
    target_status: InvoiceStatus
    confidence_score: str
    review_reasons: List[str] = field(default_factory=list)
    line_count: int = 0


def _clip(value: Optional[str], length: int) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value[:length] if value else None


def _line_inputs(extracted: ExtractedInvoice) -> List[Dict[str, Any]]:
    """Entradas crudas para el motor de totales (sin los montos de la IA)."""
    return [
        {
            "description": (item.description or "")[:500],
            "quantity": str(item.quantity),
            "unit_price": str(item.unit_price),
            "tax_type": item.tax_type,
            "tax_rate": str(item.tax_rate),
        }
        for item in extracted.line_items
    ]


def _apply_extraction(invoice: Invoice, extracted: ExtractedInvoice) -> None:
    """Copia a la factura los campos extraídos (solo los que vienen con valor)."""
    updates = {
        "invoice_number": _clip(extracted.invoice.number, 50),
        "issue_date": _clip(extracted.invoice.date, 10),
        "supplier_name": _clip(extracted.supplier.name, 255),
        "supplier_tin": _clip(extracted.supplier.tin, 20),
        "supplier_registration": _clip(extracted.supplier.registration_number, 50),
        "buyer_name": _clip(extracted.buyer.name, 255),
        "buyer_tin": _clip(extracted.buyer.tin, 20),
        "buyer_registration_number": _clip(extracted.buyer.registration_number, 50),
        "buyer_email": _clip(extracted.buyer.email, 255),
        "buyer_phone": _clip(extracted.buyer.phone, 20),
        "buyer_address_line0": _clip(extracted.buyer.address, 255),
    }
    for name, value in updates.items():
        if value is not None:
            setattr(invoice, name, value)
    invoice.currency_code = (_clip(extracted.invoice.currency, 3) or "MYR").upper()


async def _load_pair(db: AsyncSession, job: OcrJob, *, refresh: bool = False):
    options = {"populate_existing": True} if refresh else {}
    doc = await db.get(OcrDocument, job.ocr_document_id, **options)
    invoice = await db.get(Invoice, job.invoice_id, **options)
    return doc, invoice


async def _mark_failed(db: AsyncSession, job: OcrJob, error: Exception) -> None:
    """Marca FAILED + REVIEW_REQUIRED; nunca re-lanza."""
    try:
        await db.rollback()
        doc, invoice = await _load_pair(db, job, refresh=True)
        now = now_utc()
        if doc is not None:
            doc.ocr_status = OcrStatus.FAILED
            doc.processing_error = str(error) or error.__class__.__name__
            doc.updated_at = now
        if invoice is not None and invoice.status == InvoiceStatus.OCR_PROCESSING:
            transition_invoice_status(invoice, InvoiceStatus.REVIEW_REQUIRED)
        await db.commit()
        logger.info(
            "[run_ocr_pipeline] Documento marcado FAILED",
            extra={"ocr_document_id": str(job.ocr_document_id), "invoice_id": str(job.invoice_id)},
        )
    except Exception as mark_err:
        logger.error(
            f"[run_ocr_pipeline] No se pudo marcar el fallo: {mark_err}",
            extra={"ocr_document_id": str(job.ocr_document_id)},
        )


async def run_ocr_pipeline(
    db: AsyncSession,
    job: OcrJob,
    *,
    blob_store: BlobStore,
    ai_client: AiInferenceClient,
) -> OcrPipelineSummary:
    """
    Ejecuta el pipeline completo para un documento.

    Args:
        db: Sesión dedicada al job (el pipeline hace sus propios commits)
        job: Mensaje de la cola
        blob_store: Origen de los bytes
        ai_client: Cliente de inferencia (visión + extracción)

    Returns:
        OcrPipelineSummary

    Raises:
        NotFoundError: El OcrDocument o la factura no existen
        Exception: Cualquier fallo de las fases 2-8, tras marcar el documento
    """
    log_ctx = {
        "ocr_document_id": str(job.ocr_document_id),
        "invoice_id": str(job.invoice_id),
        "business_id": str(job.business_id),
        "file_type": job.file_type.value,
    }
    logger.info("[run_ocr_pipeline] Starting OCR pipeline", extra=log_ctx)

    # ========== FASE 1: PROCESSING ==========
    doc, invoice = await _load_pair(db, job)
    if doc is None:
        raise NotFoundError("OcrDocument", job.ocr_document_id, code="OCR_DOCUMENT_NOT_FOUND")
    if invoice is None:
        raise NotFoundError("Invoice", job.invoice_id, code="INVOICE_NOT_FOUND")

    doc.ocr_status = OcrStatus.PROCESSING
    doc.updated_at = now_utc()
    await db.commit()
    logger.info("[run_ocr_pipeline] Phase 1: processing", extra=log_ctx)

    try:
        # ========== FASE 2: bytes ==========
        data = await blob_store.get(job.storage_key)
        if data is None:
            raise BlobNotFoundError(job.storage_key)
        logger.info("[run_ocr_pipeline] Phase 2: fetched %d bytes", len(data), extra=log_ctx)

        # ========== FASE 3: texto crudo ==========
        raw_text = await extract_text(data, job.file_type, ai_client)
        logger.info("[run_ocr_pipeline] Phase 3: extracted %d chars", len(raw_text), extra=log_ctx)

        # ========== FASE 4-5: extracción estructurada + validación ==========
        extracted = await extract_invoice_data(raw_text, ai_client)
        logger.info("[run_ocr_pipeline] Phase 4: structured extraction ok", extra=log_ctx)

        # ========== FASE 6: triage ==========
        triage = triage_extraction(extracted)
        target_status = triage.target_status
        logger.info(
            "[run_ocr_pipeline] Phase 6: triage -> %s",
            target_status.value,
            extra={**log_ctx, "review_reasons": triage.reasons},
        )

        # ========== FASE 7: recalculo en servidor ==========
        items, totals = build_invoice_items(_line_inputs(extracted))

        # ========== FASE 8: factura ==========
        await invoice_repo.replace_items(db, invoice, items)
        _apply_extraction(invoice, extracted)
        apply_totals(invoice, totals)
        transition_invoice_status(invoice, target_status, allow_noop=True)
        invoice.updated_at = now_utc()
        logger.info(
            "[run_ocr_pipeline] Phase 8: invoice updated",
            extra={**log_ctx, "line_count": len(items), "grand_total": totals.grand_total},
        )

        # ========== FASE 9: COMPLETED ==========
        confidence_score = to_money_str(str(extracted.overall_confidence))
        now = now_utc()
        doc.ocr_status = OcrStatus.COMPLETED
        doc.raw_text = raw_text
        doc.extracted_json = extracted.model_dump(mode="json")
        doc.confidence_score = confidence_score
        doc.processing_error = None
        doc.processed_at = now
        doc.updated_at = now
        await db.commit()

        logger.info(
            "[run_ocr_pipeline] Pipeline completed successfully",
            extra={**log_ctx, "target_status": target_status.value, "confidence_score": confidence_score},
        )
        return OcrPipelineSummary(
            ocr_document_id=job.ocr_document_id,
            invoice_id=job.invoice_id,
            target_status=target_status,
            confidence_score=confidence_score,
            review_reasons=list(triage.reasons),
            line_count=len(items),
        )

    except Exception as e:
        logger.error(f"[run_ocr_pipeline] Pipeline failed: {e}", exc_info=True, extra=log_ctx)
        await _mark_failed(db, job, e)
        raise


__all__ = ["OcrJob", "OcrPipelineSummary", "run_ocr_pipeline"]

# Fin del archivo backend/app/modules/ocr/facades/pipeline_facade.py
