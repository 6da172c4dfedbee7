# -*- coding: utf-8 -*-
"""
backend/app/modules/invoices/facades/invoice_query_facade.py

Consultas de facturas (solo lectura).

Autor: EInvoiceMY
Fecha: 2025-10-30
"""

from __future__ import annotations

import math
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.invoices.enums import InvoiceStatus
from app.modules.invoices.models import Invoice
from app.modules.invoices.facades.base import get_owned_invoice, invoice_repo


async def list_invoices(
    db: AsyncSession,
    business_id: UUID,
    *,
    status: Optional[InvoiceStatus] = None,
    page: int = 1,
    limit: int = 20,
) -> Dict[str, Any]:
    """
    Lista paginada de facturas del negocio, más recientes primero.

    Returns:
        {"items", "page", "limit", "total", "total_pages"}
    """
    page = max(page, 1)
    limit = max(limit, 1)
    rows, total = await invoice_repo.list_by_business(
        db,
        business_id,
        status=status,
        limit=limit,
        offset=(page - 1) * limit,
    )
    return {
        "items": list(rows),
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": math.ceil(total / limit) if total else 0,
    }


async def get_invoice(db: AsyncSession, invoice_id: UUID, business_id: UUID) -> Invoice:
    """Factura con sus líneas ordenadas por sort_order (404 / 403)."""
    return await get_owned_invoice(db, invoice_id, business_id)


__all__ = ["list_invoices", "get_invoice"]

# Fin del archivo backend/app/modules/invoices/facades/invoice_query_facade.py
