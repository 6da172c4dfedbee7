# -*- coding: utf-8 -*-
"""
backend/app/modules/ocr/routes/upload_routes.py

Rutas de carga de documentos para OCR:
- POST /uploads                       (multipart: archivo + bulk_session_id opcional)
- POST /uploads/confirm               (archivo ya presente en el blob store)
- GET  /uploads/documents/{document_id}

Ambas cargas responden 202: la factura queda en OCR_PROCESSING y el
pipeline corre en la cola.

Autor: EInvoiceMY
Fecha: 2025-11-10
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.ocr.facades import confirm_upload, get_ocr_document, upload_document
from app.modules.ocr.schemas import ConfirmUploadIn, ConfirmUploadOut, OcrDocumentRead
from app.shared.auth_context import AuthContext, get_auth_context
from app.shared.core import get_blob_store, get_ocr_queue
from app.shared.database import get_async_session
from app.shared.integrations import BlobStore, JobQueue

router = APIRouter(prefix="/uploads", tags=["uploads"])


@router.post(
    "",
    response_model=ConfirmUploadOut,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Subir documento (pdf/jpg/jpeg/png) para OCR",
)
async def upload_document_route(
    file: UploadFile = File(...),
    bulk_session_id: Optional[UUID] = Form(None),
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_async_session),
    blob_store: BlobStore = Depends(get_blob_store),
    job_queue: JobQueue = Depends(get_ocr_queue),
):
    data = await file.read()
    return await upload_document(
        db,
        user_id=auth.user_id,
        business_id=auth.business_id,
        filename=file.filename or "",
        data=data,
        blob_store=blob_store,
        job_queue=job_queue,
        bulk_session_id=bulk_session_id,
    )


@router.post(
    "/confirm",
    response_model=ConfirmUploadOut,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Confirmar archivo ya subido y encolar OCR",
)
async def confirm_upload_route(
    payload: ConfirmUploadIn,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_async_session),
    blob_store: BlobStore = Depends(get_blob_store),
    job_queue: JobQueue = Depends(get_ocr_queue),
):
    return await confirm_upload(
        db,
        user_id=auth.user_id,
        business_id=auth.business_id,
        storage_key=payload.storage_key,
        blob_store=blob_store,
        job_queue=job_queue,
        original_filename=payload.original_filename,
        bulk_session_id=payload.bulk_session_id,
    )


@router.get("/documents/{document_id}", response_model=OcrDocumentRead, summary="Estado del documento OCR")
async def get_ocr_document_route(
    document_id: UUID,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_async_session),
):
    doc = await get_ocr_document(db, document_id, auth.business_id)
    return OcrDocumentRead.model_validate(doc)


__all__ = ["router"]

# Fin del archivo backend/app/modules/ocr/routes/upload_routes.py
