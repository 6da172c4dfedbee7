# -*- coding: utf-8 -*-
"""
backend/app/modules/invoices/facades/invoice_facade.py

Comandos sobre facturas:
- create_invoice: alta manual en DRAFT con totales calculados
- update_invoice: edición en DRAFT / REVIEW_REQUIRED (líneas reemplazadas completas)
- finalize_invoice: guardas + transición a READY_FOR_SUBMISSION
- delete_invoice: borrado físico en DRAFT / REVIEW_REQUIRED

No hay control de versión sobre la fila Invoice: dos ediciones humanas
concurrentes sobre la misma factura pueden pisarse (última escritura gana).

Transacciones: commit_or_raise como única fuente de verdad.

Autor: EInvoiceMY
Fecha: 2025-10-30
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.invoices.enums import EDITABLE_STATUSES, InvoiceStatus, InvoiceType
from app.modules.invoices.models import Invoice
from app.modules.invoices.services import reconcile
from app.modules.invoices.facades.base import (
    apply_totals,
    build_invoice_items,
    get_owned_invoice,
    invoice_repo,
    transition_invoice_status,
)
from app.shared.database import commit_or_raise, now_utc
from app.shared.errors import ConflictError, InvalidStatusTransition, ValidationFailed

logger = logging.getLogger(__name__)

# Campos escalares editables (los items se tratan aparte)
EDITABLE_FIELDS = (
    "invoice_number",
    "invoice_type",
    "supplier_name",
    "supplier_tin",
    "supplier_registration",
    "buyer_name",
    "buyer_tin",
    "buyer_registration_number",
    "buyer_sst_number",
    "buyer_email",
    "buyer_phone",
    "buyer_address_line0",
    "buyer_address_line1",
    "buyer_city_name",
    "buyer_state_code",
    "buyer_country_code",
    "currency_code",
    "issue_date",
    "due_date",
    "notes",
)

# Campos obligatorios para finalizar
REQUIRED_FOR_FINALIZE = (
    "invoice_number",
    "issue_date",
    "supplier_name",
    "supplier_tin",
    "buyer_name",
    "buyer_tin",
)


def _as_dict(data: Any) -> Dict[str, Any]:
    if isinstance(data, Mapping):
        return dict(data)
    return data.model_dump(exclude_unset=True)


async def create_invoice(
    db: AsyncSession,
    business_id: UUID,
    user_id: Optional[UUID],
    data: Any,
) -> Invoice:
    """
    Crea una factura DRAFT con sus líneas y totales calculados.

    Args:
        db: Sesión async
        business_id: Negocio propietario
        user_id: Usuario que crea (None para procesos en segundo plano)
        data: dict o InvoiceCreate (campos + items)

    Returns:
        Invoice creada (con items)
    """
    values = _as_dict(data)
    items, totals = build_invoice_items(values.get("items") or [])

    async def _work() -> Invoice:
        invoice = Invoice(
            business_id=business_id,
            created_by_user_id=user_id,
            status=InvoiceStatus.DRAFT,
            invoice_type=InvoiceType(values.get("invoice_type") or InvoiceType.INVOICE),
            buyer_country_code=values.get("buyer_country_code") or "MYS",
            currency_code=values.get("currency_code") or "MYR",
            items=items,
        )
        for name in EDITABLE_FIELDS:
            if name in ("invoice_type", "buyer_country_code", "currency_code"):
                continue
            if values.get(name) is not None:
                setattr(invoice, name, values[name])
        apply_totals(invoice, totals)
        db.add(invoice)
        await db.flush()
        return invoice

    invoice = await commit_or_raise(db, _work)
    logger.info(
        "[create_invoice] Factura creada con %d líneas",
        len(items),
        extra={"invoice_id": str(invoice.id), "business_id": str(business_id)},
    )
    return invoice


async def update_invoice(
    db: AsyncSession,
    invoice_id: UUID,
    business_id: UUID,
    data: Any,
) -> Invoice:
    """
    Edita una factura en DRAFT o REVIEW_REQUIRED.

    Solo se actualizan los campos presentes. Si vienen items, se recalculan
    los totales y se reemplazan todas las líneas.

    Raises:
        ConflictError: INVOICE_NOT_EDITABLE si el status no lo permite
    """
    values = _as_dict(data)

    async def _work() -> Invoice:
        invoice = await get_owned_invoice(db, invoice_id, business_id, for_update=True)
        if invoice.status not in EDITABLE_STATUSES:
            raise ConflictError(
                f"Invoice with status {invoice.status} cannot be edited",
                code="INVOICE_NOT_EDITABLE",
            )

        for name in EDITABLE_FIELDS:
            if name in values:
                setattr(invoice, name, values[name])

        if values.get("items") is not None:
            items, totals = build_invoice_items(values["items"])
            await invoice_repo.replace_items(db, invoice, items)
            apply_totals(invoice, totals)

        invoice.updated_at = now_utc()
        await db.flush()
        return invoice

    invoice = await commit_or_raise(db, _work)
    logger.info("[update_invoice] Factura actualizada", extra={"invoice_id": str(invoice_id)})
    return invoice


def _missing_required_fields(invoice: Invoice) -> List[str]:
    return [name for name in REQUIRED_FOR_FINALIZE if not getattr(invoice, name)]


async def finalize_invoice(
    db: AsyncSession,
    invoice_id: UUID,
    business_id: UUID,
) -> Invoice:
    """
    Finaliza una factura: DRAFT / REVIEW_REQUIRED -> READY_FOR_SUBMISSION.

    Guardas, en orden:
    1. status editable (si no, InvalidStatusTransition)
    2. campos obligatorios presentes (MISSING_REQUIRED_FIELDS)
    3. al menos una línea (NO_LINE_ITEMS)
    4. totales conciliados contra las líneas, siempre en fresco (INVALID_TOTALS)

    También es el punto de entrada para reenviar tras un rechazo: la
    factura corregida se crea en DRAFT y se finaliza de nuevo.
    """
    target = InvoiceStatus.READY_FOR_SUBMISSION

    async def _work() -> Invoice:
        invoice = await get_owned_invoice(db, invoice_id, business_id, for_update=True)
        if invoice.status not in EDITABLE_STATUSES:
            raise InvalidStatusTransition(invoice.status, target)

        missing = _missing_required_fields(invoice)
        if missing:
            raise ValidationFailed(
                f"Missing required fields: {', '.join(missing)}",
                code="MISSING_REQUIRED_FIELDS",
                field_errors={name: ["is required"] for name in missing},
            )

        if not invoice.items:
            raise ValidationFailed("Invoice must have at least one line item", code="NO_LINE_ITEMS")

        result = reconcile(invoice.items, invoice.subtotal, invoice.tax_total, invoice.grand_total)
        if not result.valid:
            raise ValidationFailed("; ".join(result.errors), code="INVALID_TOTALS")

        transition_invoice_status(invoice, target)
        await db.flush()
        return invoice

    invoice = await commit_or_raise(db, _work)
    logger.info("[finalize_invoice] Factura lista para envío", extra={"invoice_id": str(invoice_id)})
    return invoice


async def delete_invoice(
    db: AsyncSession,
    invoice_id: UUID,
    business_id: UUID,
) -> None:
    """
    Borra una factura y sus líneas (cascade). Solo DRAFT / REVIEW_REQUIRED.

    Raises:
        ConflictError: INVOICE_NOT_DELETABLE si ya avanzó en el ciclo
    """

    async def _work() -> None:
        invoice = await get_owned_invoice(db, invoice_id, business_id, for_update=True)
        if invoice.status not in EDITABLE_STATUSES:
            raise ConflictError(
                f"Invoice with status {invoice.status} cannot be deleted",
                code="INVOICE_NOT_DELETABLE",
            )
        await invoice_repo.delete(db, invoice)

    await commit_or_raise(db, _work)
    logger.info("[delete_invoice] Factura eliminada", extra={"invoice_id": str(invoice_id)})


__all__ = [
    "EDITABLE_FIELDS",
    "REQUIRED_FOR_FINALIZE",
    "create_invoice",
    "update_invoice",
    "finalize_invoice",
    "delete_invoice",
]

# Fin del archivo backend/app/modules/invoices/facades/invoice_facade.py
