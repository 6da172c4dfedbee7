# -*- coding: utf-8 -*-
"""
backend/app/modules/invoices/routes/invoices_lifecycle.py

Rutas de ciclo de vida de facturas:
- POST /invoices/{invoice_id}/finalize

Autor: EInvoiceMY
Fecha: 2025-10-31
"""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.invoices.facades import finalize_invoice
from app.modules.invoices.schemas import InvoiceRead
from app.shared.auth_context import AuthContext, get_auth_context
from app.shared.database import get_async_session

router = APIRouter(prefix="/invoices", tags=["invoices:lifecycle"])


@router.post(
    "/{invoice_id}/finalize",
    response_model=InvoiceRead,
    summary="Finalizar factura (-> READY_FOR_SUBMISSION)",
)
async def finalize_invoice_route(
    invoice_id: UUID,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Valida campos obligatorios, líneas y totales; si todo cuadra la
    factura queda lista para enviarse a LHDN.
    """
    invoice = await finalize_invoice(db, invoice_id, auth.business_id)
    return InvoiceRead.model_validate(invoice)


__all__ = ["router"]

# Fin del archivo backend/app/modules/invoices/routes/invoices_lifecycle.py
