# -*- coding: utf-8 -*-
"""
backend/app/modules/lhdn/facades/submission_facade.py

Orquestador de envíos a LHDN MyInvois.

- submit_invoice: READY_FOR_SUBMISSION -> SUBMITTED | REJECTED
- poll_status: SUBMITTED -> VALIDATED | REJECTED (o sin cambio si sigue en proceso)
- cancel_invoice: VALIDATED -> CANCELLED
- list_submissions: historial de auditoría

Orden en submit_invoice:
    1. Factura del negocio en READY_FOR_SUBMISSION
    2. Token (caché o refresco; falla si no hay credenciales)
    3. Documento UBL
    4. base64 + hash
    5. Fila LhdnSubmission en PENDING con el payload, commit ANTES de la red
    6. Llamada a LHDN:
       - rechazo sin aceptados -> envío REJECTED, factura REJECTED, error al llamador
       - aceptado -> envío SUBMITTED, factura SUBMITTED con UUID / UID / fecha
       - cualquier otra excepción -> envío REJECTED con el mensaje, la
         factura queda en READY_FOR_SUBMISSION y la excepción se re-lanza

Los eventos de dominio se publican después del commit.

Autor: EInvoiceMY
Fecha: 2025-11-13
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.businesses.facades import get_business
from app.modules.invoices.enums import InvoiceStatus
from app.modules.invoices.facades.base import get_owned_invoice, transition_invoice_status
from app.modules.invoices.models import Invoice
from app.modules.lhdn.enums import LhdnDocumentStatus, SubmissionStatus
from app.modules.lhdn.models import LhdnSubmission
from app.modules.lhdn.repositories import LhdnSubmissionRepository
from app.modules.lhdn.services import (
    LhdnApiClient,
    TokenCache,
    build_submission_payload,
    build_ubl_invoice,
    prepare_document,
)
from app.shared.database.base import now_utc
from app.shared.errors import AppError, ConflictError, InvalidStatusTransition, LhdnSubmissionError
from app.shared.integrations import DomainEvent, DomainEventBus, InvoiceEventType

logger = logging.getLogger(__name__)

submission_repo = LhdnSubmissionRepository()

DEFAULT_CANCEL_REASON = "Cancelled by user"
DEFAULT_REJECTION_MESSAGE = "Rejected by LHDN"


def _parse_lhdn_datetime(value: Optional[str]) -> datetime:
    if value:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            logger.warning("[lhdn] Fecha no reconocida en respuesta: %s", value)
        else:
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=now_utc().tzinfo)
    return now_utc()


async def _emit(
    event_bus: Optional[DomainEventBus],
    event_type: InvoiceEventType,
    invoice: Invoice,
    **payload: Any,
) -> None:
    if event_bus is None:
        return
    await event_bus.publish(
        DomainEvent(
            event_type=event_type.value,
            invoice_id=str(invoice.id),
            business_id=str(invoice.business_id),
            payload=payload,
        )
    )


async def _mark_submission_failed(db: AsyncSession, submission_id: UUID, error: Exception) -> None:
    """El fallo de transporte queda registrado en la fila de auditoría."""
    try:
        await db.rollback()
        submission = await db.get(LhdnSubmission, submission_id, populate_existing=True)
        if submission is not None:
            submission.status = SubmissionStatus.REJECTED
            submission.error_message = str(error) or error.__class__.__name__
            await db.commit()
    except Exception as mark_err:
        logger.error(
            f"[submit_invoice] No se pudo registrar el fallo del envío: {mark_err}",
            extra={"submission_id": str(submission_id)},
        )


async def submit_invoice(
    db: AsyncSession,
    invoice_id: UUID,
    business_id: UUID,
    *,
    api_client: LhdnApiClient,
    token_cache: TokenCache,
    event_bus: Optional[DomainEventBus] = None,
) -> Dict[str, Any]:
    """
    Envía una factura a LHDN.

    Returns:
        {"submission_uid": str, "status": "SUBMITTED"}

    Raises:
        NotFoundError / OwnershipError: Factura ajena o inexistente
        InvalidStatusTransition: La factura no está en READY_FOR_SUBMISSION
        LhdnCredentialsMissing: El negocio no configuró credenciales
        LhdnTokenError: No se pudo obtener token
        LhdnSubmissionError: LHDN rechazó el documento o la llamada falló
    """
    log_ctx = {"invoice_id": str(invoice_id), "business_id": str(business_id)}

    # ========== FASE 1: validaciones ==========
    invoice = await get_owned_invoice(db, invoice_id, business_id)
    if invoice.status != InvoiceStatus.READY_FOR_SUBMISSION:
        raise InvalidStatusTransition(
            invoice.status,
            InvoiceStatus.SUBMITTED,
            f"Only READY_FOR_SUBMISSION invoices can be submitted (current: {InvoiceStatus(invoice.status).value})",
        )
    business = await get_business(db, business_id)

    # ========== FASE 2: token ==========
    access_token = await token_cache.get_or_refresh(db, business)

    # ========== FASE 3-4: documento ==========
    ubl_document = build_ubl_invoice(invoice, list(invoice.items), business)
    prepared = prepare_document(ubl_document, invoice.invoice_number or str(invoice.id))
    payload = build_submission_payload([prepared])

    # ========== FASE 5: auditoría antes de la red ==========
    submission = LhdnSubmission(
        invoice_id=invoice.id,
        business_id=business_id,
        submission_payload=payload,
        status=SubmissionStatus.PENDING,
    )
    db.add(submission)
    await db.commit()
    log_ctx["submission_id"] = str(submission.id)
    logger.info("[submit_invoice] Fila de envío PENDING registrada", extra=log_ctx)

    # ========== FASE 6: llamada ==========
    try:
        response = await api_client.submit_documents(access_token, payload)
    except Exception as e:
        logger.error(f"[submit_invoice] Envío falló: {e}", exc_info=True, extra=log_ctx)
        await _mark_submission_failed(db, submission.id, e)
        raise

    accepted = response.accepted_documents[0] if response.accepted_documents else None
    rejected = response.rejected_documents[0] if response.rejected_documents else None
    response_payload = response.to_payload()

    if rejected is not None and accepted is None:
        message = (rejected.error.message if rejected.error else None) or DEFAULT_REJECTION_MESSAGE
        submission.status = SubmissionStatus.REJECTED
        submission.response_payload = response_payload
        submission.error_message = message
        transition_invoice_status(invoice, InvoiceStatus.REJECTED)
        await db.commit()
        logger.warning("[submit_invoice] LHDN rechazó el documento: %s", message, extra=log_ctx)
        await _emit(event_bus, InvoiceEventType.INVOICE_REJECTED, invoice, reason=message)
        raise LhdnSubmissionError(message)

    now = now_utc()
    document_uuid = accepted.uuid if accepted is not None else None

    submission.submission_uid = response.submission_uid
    submission.document_uuid = document_uuid
    submission.status = SubmissionStatus.SUBMITTED
    submission.response_payload = response_payload
    submission.submitted_at = now

    transition_invoice_status(invoice, InvoiceStatus.SUBMITTED)
    invoice.lhdn_submission_uid = response.submission_uid
    invoice.lhdn_uuid = document_uuid
    invoice.lhdn_submitted_at = now
    await db.commit()

    logger.info(
        "[submit_invoice] Factura enviada",
        extra={**log_ctx, "submission_uid": response.submission_uid, "document_uuid": document_uuid},
    )
    await _emit(
        event_bus,
        InvoiceEventType.INVOICE_SUBMITTED,
        invoice,
        submission_uid=response.submission_uid,
        document_uuid=document_uuid,
    )
    return {"submission_uid": response.submission_uid, "status": InvoiceStatus.SUBMITTED.value}


async def poll_status(
    db: AsyncSession,
    invoice_id: UUID,
    business_id: UUID,
    *,
    api_client: LhdnApiClient,
    token_cache: TokenCache,
    event_bus: Optional[DomainEventBus] = None,
) -> Dict[str, Any]:
    """
    Consulta el estado del envío vigente y aplica estados terminales.

    Returns:
        {"status": <estado LHDN>, "details": <respuesta>} o
        {"status": overallStatus} si LHDN aún no reporta documentos

    Raises:
        ConflictError: NOT_SUBMITTED si la factura no tiene submission UID
    """
    log_ctx = {"invoice_id": str(invoice_id), "business_id": str(business_id)}

    invoice = await get_owned_invoice(db, invoice_id, business_id)
    if not invoice.lhdn_submission_uid:
        raise ConflictError("Invoice has not been submitted to LHDN", code="NOT_SUBMITTED")
    business = await get_business(db, business_id)

    access_token = await token_cache.get_or_refresh(db, business)
    status_response = await api_client.get_submission_status(access_token, invoice.lhdn_submission_uid)
    details = status_response.to_payload()

    doc = status_response.document_summary[0] if status_response.document_summary else None
    if doc is None:
        await db.commit()
        return {"status": status_response.overall_status}

    event_type: Optional[InvoiceEventType] = None
    event_payload: Dict[str, Any] = {}

    if doc.status in (LhdnDocumentStatus.VALID, LhdnDocumentStatus.INVALID):
        if invoice.status == InvoiceStatus.SUBMITTED:
            submission = await submission_repo.latest_by_invoice(db, invoice.id)

            if doc.status == LhdnDocumentStatus.VALID:
                validated_at = _parse_lhdn_datetime(doc.date_time_validated)
                if submission is not None:
                    submission.status = SubmissionStatus.VALIDATED
                    submission.validated_at = validated_at
                    submission.response_payload = details
                transition_invoice_status(invoice, InvoiceStatus.VALIDATED)
                invoice.lhdn_validation_status = LhdnDocumentStatus.VALID.value
                invoice.lhdn_validated_at = validated_at
                event_type = InvoiceEventType.INVOICE_VALIDATED
            else:
                message = (doc.error.message if doc.error else None) or DEFAULT_REJECTION_MESSAGE
                if submission is not None:
                    submission.status = SubmissionStatus.REJECTED
                    submission.error_message = message
                    submission.response_payload = details
                transition_invoice_status(invoice, InvoiceStatus.REJECTED)
                invoice.lhdn_validation_status = LhdnDocumentStatus.INVALID.value
                event_type = InvoiceEventType.INVOICE_REJECTED
                event_payload["reason"] = message
        else:
            logger.info(
                "[poll_status] Estado terminal ya aplicado (%s); sin cambios",
                InvoiceStatus(invoice.status).value,
                extra=log_ctx,
            )

    await db.commit()
    logger.info("[poll_status] LHDN reporta %s", doc.status, extra=log_ctx)

    if event_type is not None:
        await _emit(event_bus, event_type, invoice, **event_payload)
    return {"status": doc.status, "details": details}


async def cancel_invoice(
    db: AsyncSession,
    invoice_id: UUID,
    business_id: UUID,
    *,
    api_client: LhdnApiClient,
    token_cache: TokenCache,
    reason: str = DEFAULT_CANCEL_REASON,
    event_bus: Optional[DomainEventBus] = None,
) -> Dict[str, Any]:
    """
    Cancela en LHDN una factura validada.

    Raises:
        InvalidStatusTransition: La factura no está en VALIDATED
        AppError: MISSING_UUID (400) si falta el UUID asignado por LHDN
    """
    invoice = await get_owned_invoice(db, invoice_id, business_id)
    if invoice.status != InvoiceStatus.VALIDATED:
        raise InvalidStatusTransition(
            invoice.status,
            InvoiceStatus.CANCELLED,
            f"Only VALIDATED invoices can be cancelled (current: {InvoiceStatus(invoice.status).value})",
        )
    if not invoice.lhdn_uuid:
        raise AppError("Invoice does not have an LHDN UUID", code="MISSING_UUID", status_code=400)
    business = await get_business(db, business_id)

    access_token = await token_cache.get_or_refresh(db, business)
    await api_client.cancel_document(access_token, invoice.lhdn_uuid, reason)

    transition_invoice_status(invoice, InvoiceStatus.CANCELLED)
    await db.commit()
    logger.info(
        "[cancel_invoice] Factura cancelada",
        extra={"invoice_id": str(invoice_id), "business_id": str(business_id)},
    )
    await _emit(event_bus, InvoiceEventType.INVOICE_CANCELLED, invoice, reason=reason)
    return {"status": InvoiceStatus.CANCELLED.value}


async def list_submissions(db: AsyncSession, invoice_id: UUID, business_id: UUID) -> Sequence[LhdnSubmission]:
    """Historial de envíos de la factura, más reciente primero."""
    invoice = await get_owned_invoice(db, invoice_id, business_id)
    return await submission_repo.list_by_invoice(db, invoice.id)


__all__ = [
    "submit_invoice",
    "poll_status",
    "cancel_invoice",
    "list_submissions",
    "DEFAULT_CANCEL_REASON",
]

# Fin del archivo backend/app/modules/lhdn/facades/submission_facade.py
