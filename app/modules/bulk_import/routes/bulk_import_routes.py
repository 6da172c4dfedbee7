# -*- coding: utf-8 -*-
"""
backend/app/modules/bulk_import/routes/bulk_import_routes.py

Rutas de importación masiva:
- POST /bulk-imports/sessions
- GET  /bulk-imports/sessions/{session_id}
- POST /bulk-imports/sessions/{session_id}/submit-all
- POST /bulk-imports/csv
- GET  /bulk-imports
- GET  /bulk-imports/{bulk_import_id}

Autor: EInvoiceMY
Fecha: 2025-11-15
"""

from typing import Any, Dict
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.bulk_import.facades import (
    create_document_session,
    get_import_status,
    get_session_with_invoices,
    list_imports,
    start_csv_import,
    submit_ready,
)
from app.modules.bulk_import.schemas import (
    BulkImportListResponse,
    BulkImportRead,
    SessionInvoiceRead,
    SessionStats,
    SessionWithInvoicesOut,
    SubmitAllOut,
)
from app.modules.lhdn.facades import submit_invoice
from app.modules.lhdn.services import LhdnApiClient, TokenCache
from app.shared.auth_context import AuthContext, get_auth_context
from app.shared.core import get_blob_store, get_csv_queue, get_event_bus, get_lhdn_client, get_token_cache
from app.shared.database import get_async_session
from app.shared.integrations import BlobStore, DomainEventBus, JobQueue

router = APIRouter(prefix="/bulk-imports", tags=["bulk-imports"])


@router.post(
    "/sessions",
    response_model=BulkImportRead,
    status_code=status.HTTP_201_CREATED,
    summary="Crear sesión de carga de documentos",
)
async def create_session_route(
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_async_session),
):
    session = await create_document_session(db, auth.business_id, auth.user_id)
    return BulkImportRead.model_validate(session)


@router.get("/sessions/{session_id}", response_model=SessionWithInvoicesOut, summary="Sesión con facturas y estadísticas")
async def get_session_route(
    session_id: UUID,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_async_session),
):
    result = await get_session_with_invoices(db, session_id, auth.business_id)
    invoices = [
        SessionInvoiceRead(
            invoice_id=invoice.id,
            status=invoice.status,
            invoice_number=invoice.invoice_number,
            supplier_name=invoice.supplier_name,
            buyer_name=invoice.buyer_name,
            grand_total=invoice.grand_total,
            currency_code=invoice.currency_code,
            ocr_document_id=doc.id if doc is not None else None,
            original_filename=doc.original_filename if doc is not None else None,
            ocr_status=doc.ocr_status if doc is not None else None,
            confidence_score=doc.confidence_score if doc is not None else None,
            processing_error=doc.processing_error if doc is not None else None,
        )
        for invoice, doc in result.invoices
    ]
    return SessionWithInvoicesOut(
        session=BulkImportRead.model_validate(result.session),
        invoices=invoices,
        stats=SessionStats(**result.stats),
    )


@router.post(
    "/sessions/{session_id}/submit-all",
    response_model=SubmitAllOut,
    summary="Enviar a LHDN todas las facturas listas de la sesión",
)
async def submit_all_route(
    session_id: UUID,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_async_session),
    api_client: LhdnApiClient = Depends(get_lhdn_client),
    token_cache: TokenCache = Depends(get_token_cache),
    event_bus: DomainEventBus = Depends(get_event_bus),
):
    async def _submit(invoice_id: UUID) -> Dict[str, Any]:
        return await submit_invoice(
            db,
            invoice_id,
            auth.business_id,
            api_client=api_client,
            token_cache=token_cache,
            event_bus=event_bus,
        )

    result = await submit_ready(db, session_id, auth.business_id, _submit)
    return SubmitAllOut(**result)


@router.post(
    "/csv",
    response_model=BulkImportRead,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Importar facturas desde CSV",
)
async def upload_csv_route(
    file: UploadFile = File(...),
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_async_session),
    blob_store: BlobStore = Depends(get_blob_store),
    job_queue: JobQueue = Depends(get_csv_queue),
):
    data = await file.read()
    record = await start_csv_import(
        db,
        business_id=auth.business_id,
        user_id=auth.user_id,
        filename=file.filename or "",
        data=data,
        blob_store=blob_store,
        job_queue=job_queue,
        content_type=file.content_type,
    )
    return BulkImportRead.model_validate(record)


@router.get("", response_model=BulkImportListResponse, summary="Listar importaciones")
async def list_imports_route(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_async_session),
):
    records = await list_imports(db, auth.business_id, limit=limit, offset=offset)
    return BulkImportListResponse(
        items=[BulkImportRead.model_validate(r) for r in records],
        limit=limit,
        offset=offset,
    )


@router.get("/{bulk_import_id}", response_model=BulkImportRead, summary="Estado de una importación")
async def get_import_route(
    bulk_import_id: UUID,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_async_session),
):
    record = await get_import_status(db, bulk_import_id, auth.business_id)
    return BulkImportRead.model_validate(record)


__all__ = ["router"]

# Fin del archivo backend/app/modules/bulk_import/routes/bulk_import_routes.py
