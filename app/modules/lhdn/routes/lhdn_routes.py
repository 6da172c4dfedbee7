# -*- coding: utf-8 -*-
"""
backend/app/modules/lhdn/routes/lhdn_routes.py

Rutas de integración con LHDN MyInvois:
- POST /lhdn/invoices/{invoice_id}/submit
- POST /lhdn/invoices/{invoice_id}/poll
- POST /lhdn/invoices/{invoice_id}/cancel
- GET  /lhdn/invoices/{invoice_id}/submissions

Autor: EInvoiceMY
Fecha: 2025-11-13
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.lhdn.facades import cancel_invoice, list_submissions, poll_status, submit_invoice
from app.modules.lhdn.schemas import (
    CancelInvoiceIn,
    CancelInvoiceOut,
    PollStatusOut,
    SubmissionListResponse,
    SubmissionRead,
    SubmitInvoiceOut,
)
from app.modules.lhdn.services import LhdnApiClient, TokenCache
from app.shared.auth_context import AuthContext, get_auth_context
from app.shared.core import get_event_bus, get_lhdn_client, get_token_cache
from app.shared.database import get_async_session
from app.shared.integrations import DomainEventBus

router = APIRouter()


@router.post(
    "/invoices/{invoice_id}/submit",
    response_model=SubmitInvoiceOut,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Enviar factura a LHDN",
)
async def submit_invoice_route(
    invoice_id: UUID,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_async_session),
    api_client: LhdnApiClient = Depends(get_lhdn_client),
    token_cache: TokenCache = Depends(get_token_cache),
    event_bus: DomainEventBus = Depends(get_event_bus),
):
    """
    La validación final la hace LHDN de forma asíncrona: la respuesta
    indica que el documento fue aceptado para procesamiento.
    """
    result = await submit_invoice(
        db,
        invoice_id,
        auth.business_id,
        api_client=api_client,
        token_cache=token_cache,
        event_bus=event_bus,
    )
    return SubmitInvoiceOut(**result)


@router.post("/invoices/{invoice_id}/poll", response_model=PollStatusOut, summary="Consultar estado en LHDN")
async def poll_status_route(
    invoice_id: UUID,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_async_session),
    api_client: LhdnApiClient = Depends(get_lhdn_client),
    token_cache: TokenCache = Depends(get_token_cache),
    event_bus: DomainEventBus = Depends(get_event_bus),
):
    result = await poll_status(
        db,
        invoice_id,
        auth.business_id,
        api_client=api_client,
        token_cache=token_cache,
        event_bus=event_bus,
    )
    return PollStatusOut(**result)


@router.post("/invoices/{invoice_id}/cancel", response_model=CancelInvoiceOut, summary="Cancelar factura validada")
async def cancel_invoice_route(
    invoice_id: UUID,
    payload: Optional[CancelInvoiceIn] = Body(default=None),
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_async_session),
    api_client: LhdnApiClient = Depends(get_lhdn_client),
    token_cache: TokenCache = Depends(get_token_cache),
    event_bus: DomainEventBus = Depends(get_event_bus),
):
    payload = payload or CancelInvoiceIn()
    result = await cancel_invoice(
        db,
        invoice_id,
        auth.business_id,
        api_client=api_client,
        token_cache=token_cache,
        reason=payload.reason,
        event_bus=event_bus,
    )
    return CancelInvoiceOut(**result)


@router.get(
    "/invoices/{invoice_id}/submissions",
    response_model=SubmissionListResponse,
    summary="Historial de envíos de la factura",
)
async def list_submissions_route(
    invoice_id: UUID,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_async_session),
):
    submissions = await list_submissions(db, invoice_id, auth.business_id)
    return SubmissionListResponse(items=[SubmissionRead.model_validate(s) for s in submissions])


__all__ = ["router"]

# Fin del archivo backend/app/modules/lhdn/routes/lhdn_routes.py
