# -*- coding: utf-8 -*-
"""
backend/app/modules/invoices/facades/base.py

Utilidades base compartidas por las fachadas de facturas
(y por el pipeline OCR, el orquestador LHDN y la importación masiva):

- get_owned_invoice: carga con verificación de pertenencia (404 / 403)
- transition_invoice_status: aplica una transición validada por la máquina de estados
- build_invoice_items: líneas ORM + totales calculados por el motor de totales

Autor: EInvoiceMY
Fecha: 2025-10-30
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.invoices.enums import InvoiceStatus, TaxType, validate_status_transition
from app.modules.invoices.models import Invoice, InvoiceItem
from app.modules.invoices.repositories import InvoiceRepository
from app.modules.invoices.services import InvoiceTotals, compute_totals_from_inputs, to_decimal, to_money_str
from app.shared.database.base import now_utc
from app.shared.errors import NotFoundError, OwnershipError

logger = logging.getLogger(__name__)

invoice_repo = InvoiceRepository()

DEFAULT_CLASSIFICATION_CODE = "001"
DEFAULT_UNIT_CODE = "UNT"


async def get_owned_invoice(
    db: AsyncSession,
    invoice_id: UUID,
    business_id: UUID,
    *,
    for_update: bool = False,
) -> Invoice:
    """
    Obtiene una factura verificando que pertenezca al negocio.

    Raises:
        NotFoundError: INVOICE_NOT_FOUND si no existe
        OwnershipError: Si pertenece a otro negocio
    """
    if for_update:
        invoice = await invoice_repo.get_for_update(db, invoice_id)
    else:
        invoice = await invoice_repo.get(db, invoice_id)
    if invoice is None:
        raise NotFoundError("Invoice", invoice_id, code="INVOICE_NOT_FOUND")
    if invoice.business_id != business_id:
        raise OwnershipError("invoice", invoice_id)
    return invoice


def transition_invoice_status(
    invoice: Invoice,
    to_status: InvoiceStatus,
    *,
    allow_noop: bool = False,
) -> InvoiceStatus:
    """
    Cambia el status de la factura validando la transición.

    Args:
        invoice: Factura a modificar (en sesión)
        to_status: Estado destino
        allow_noop: Si True, from == to no es error (redelivery del pipeline)

    Returns:
        Estado previo

    Raises:
        InvalidStatusTransition: Si la transición no está en la tabla
    """
    from_status = InvoiceStatus(invoice.status)
    if allow_noop and from_status == to_status:
        return from_status
    validate_status_transition(from_status, to_status)

    invoice.status = to_status
    invoice.updated_at = now_utc()
    logger.info(
        "[transition_invoice_status] %s -> %s",
        from_status.value,
        to_status.value,
        extra={"invoice_id": str(invoice.id), "from_status": from_status.value, "to_status": to_status.value},
    )
    return from_status


def _item_field(item: Any, name: str, default: Any = None) -> Any:
    if isinstance(item, Mapping):
        value = item.get(name)
    else:
        value = getattr(item, name, None)
    return default if value is None else value


def build_invoice_items(item_inputs: Iterable[Any]) -> Tuple[List[InvoiceItem], InvoiceTotals]:
    """
    Construye las líneas ORM desde entradas crudas y calcula los totales.

    Los montos por línea y los agregados salen siempre del motor de totales.

    Args:
        item_inputs: dicts / esquemas con description, quantity, unit_price,
            tax_type, tax_rate y opcionalmente classification_code, unit_code

    Returns:
        (líneas ORM sin asociar, totales de la factura)
    """
    inputs = list(item_inputs)
    lines, totals = compute_totals_from_inputs(inputs)

    items: List[InvoiceItem] = []
    for idx, (raw, line) in enumerate(zip(inputs, lines)):
        items.append(
            InvoiceItem(
                description=_item_field(raw, "description", ""),
                classification_code=_item_field(raw, "classification_code", DEFAULT_CLASSIFICATION_CODE),
                quantity=str(to_decimal(_item_field(raw, "quantity"), "quantity")),
                unit_code=_item_field(raw, "unit_code", DEFAULT_UNIT_CODE),
                unit_price=to_money_str(to_decimal(_item_field(raw, "unit_price"), "unit_price")),
                tax_type=TaxType(_item_field(raw, "tax_type", TaxType.NOT_APPLICABLE)),
                tax_rate=str(to_decimal(_item_field(raw, "tax_rate", "0"), "tax_rate")),
                subtotal=line.subtotal,
                tax_amount=line.tax_amount,
                total=line.total,
                sort_order=idx,
            )
        )
    return items, totals


def apply_totals(invoice: Invoice, totals: InvoiceTotals) -> None:
    invoice.subtotal = totals.subtotal
    invoice.tax_total = totals.tax_total
    invoice.grand_total = totals.grand_total


__all__ = [
    "invoice_repo",
    "get_owned_invoice",
    "transition_invoice_status",
    "build_invoice_items",
    "apply_totals",
    "DEFAULT_CLASSIFICATION_CODE",
    "DEFAULT_UNIT_CODE",
]

# Fin del archivo backend/app/modules/invoices/facades/base.py
