# -*- coding: utf-8 -*-
"""
backend/app/modules/invoices/routes/invoices_crud.py

Rutas CRUD de facturas:
- GET    /invoices
- POST   /invoices
- GET    /invoices/{invoice_id}
- PATCH  /invoices/{invoice_id}
- DELETE /invoices/{invoice_id}

Autor: EInvoiceMY
Fecha: 2025-10-31
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.invoices.enums import InvoiceStatus
from app.modules.invoices.facades import (
    create_invoice,
    delete_invoice,
    get_invoice,
    list_invoices,
    update_invoice,
)
from app.modules.invoices.schemas import (
    InvoiceCreateIn,
    InvoiceListResponse,
    InvoiceRead,
    InvoiceUpdateIn,
)
from app.shared.auth_context import AuthContext, get_auth_context
from app.shared.database import get_async_session

router = APIRouter(prefix="/invoices", tags=["invoices:crud"])


@router.get("", response_model=InvoiceListResponse, summary="Listar facturas del negocio")
async def list_invoices_route(
    status_filter: Optional[InvoiceStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_async_session),
):
    result = await list_invoices(db, auth.business_id, status=status_filter, page=page, limit=limit)
    return InvoiceListResponse(
        items=[InvoiceRead.model_validate(inv) for inv in result["items"]],
        page=result["page"],
        limit=result["limit"],
        total=result["total"],
        total_pages=result["total_pages"],
    )


@router.post(
    "",
    response_model=InvoiceRead,
    status_code=status.HTTP_201_CREATED,
    summary="Crear factura manual (DRAFT)",
)
async def create_invoice_route(
    payload: InvoiceCreateIn,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_async_session),
):
    invoice = await create_invoice(db, auth.business_id, auth.user_id, payload)
    return InvoiceRead.model_validate(invoice)


@router.get("/{invoice_id}", response_model=InvoiceRead, summary="Obtener factura con líneas")
async def get_invoice_route(
    invoice_id: UUID,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_async_session),
):
    invoice = await get_invoice(db, invoice_id, auth.business_id)
    return InvoiceRead.model_validate(invoice)


@router.patch("/{invoice_id}", response_model=InvoiceRead, summary="Editar factura (DRAFT / REVIEW_REQUIRED)")
async def update_invoice_route(
    invoice_id: UUID,
    payload: InvoiceUpdateIn,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_async_session),
):
    invoice = await update_invoice(db, invoice_id, auth.business_id, payload)
    return InvoiceRead.model_validate(invoice)


@router.delete(
    "/{invoice_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Eliminar factura (DRAFT / REVIEW_REQUIRED)",
)
async def delete_invoice_route(
    invoice_id: UUID,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_async_session),
):
    await delete_invoice(db, invoice_id, auth.business_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]

# Fin del archivo backend/app/modules/invoices/routes/invoices_crud.py
