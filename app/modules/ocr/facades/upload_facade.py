# -*- coding: utf-8 -*-
"""
backend/app/modules/ocr/facades/upload_facade.py

Alta de documentos para OCR.

- build_upload_key: llave uploads/{user}/{uuid}.{ext}
- upload_document: guarda los bytes en el blob store y confirma
- confirm_upload: crea OcrDocument (PENDING) + Invoice (OCR_PROCESSING),
  vincula a la sesión masiva si aplica, confirma y encola el job OCR

El job se encola solo después del commit: el consumidor nunca ve
un documento que todavía no existe en la base.

Autor: EInvoiceMY
Fecha: 2025-11-10
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.bulk_import.facades.session_facade import add_invoice_to_session
from app.modules.invoices.enums import InvoiceStatus, InvoiceType
from app.modules.invoices.models import Invoice
from app.modules.ocr.enums import ALLOWED_FILE_TYPES, FileType, OcrStatus
from app.modules.ocr.facades.pipeline_facade import OcrJob
from app.modules.ocr.models import OcrDocument
from app.modules.ocr.schemas import ConfirmUploadOut
from app.shared.config import get_settings
from app.shared.database import commit_or_raise
from app.shared.errors import BlobNotFoundError, FileTooLarge, UnsupportedFileType
from app.shared.integrations import BlobStore, JobQueue
from app.shared.integrations.blob_store import UPLOADS_PREFIX

logger = logging.getLogger(__name__)

_CONTENT_TYPES = {
    FileType.PDF: "application/pdf",
    FileType.JPG: "image/jpeg",
    FileType.JPEG: "image/jpeg",
    FileType.PNG: "image/png",
}


def _max_upload_bytes() -> int:
    return get_settings().max_upload_size_mb * 1024 * 1024


def detect_file_type(name: str) -> FileType:
    """Tipo de archivo a partir de la extensión (sin inspeccionar el contenido)."""
    ext = name.rsplit(".", 1)[-1].lower() if "." in name else ""
    if ext not in ALLOWED_FILE_TYPES:
        raise UnsupportedFileType(ext, list(ALLOWED_FILE_TYPES))
    return FileType(ext)


def build_upload_key(user_id: UUID, ext: str) -> str:
    return f"{UPLOADS_PREFIX}/{user_id}/{uuid.uuid4()}.{ext.lower()}"


async def confirm_upload(
    db: AsyncSession,
    *,
    user_id: UUID,
    business_id: UUID,
    storage_key: str,
    blob_store: BlobStore,
    job_queue: JobQueue,
    original_filename: Optional[str] = None,
    bulk_session_id: Optional[UUID] = None,
) -> ConfirmUploadOut:
    """
    Confirma un archivo ya presente en el blob store y dispara el OCR.

    Raises:
        BlobNotFoundError: La llave no existe en el blob store
        FileTooLarge: Excede MAX_UPLOAD_SIZE_MB
        UnsupportedFileType: Extensión fuera de pdf/jpg/jpeg/png
    """
    size = await blob_store.head(storage_key)
    if size is None:
        raise BlobNotFoundError(storage_key)
    max_bytes = _max_upload_bytes()
    if size > max_bytes:
        raise FileTooLarge(size, max_bytes)

    file_type = detect_file_type(storage_key)
    filename = original_filename or storage_key.rsplit("/", 1)[-1]

    ocr_document_id = uuid.uuid4()
    invoice_id = uuid.uuid4()

    async def _work() -> None:
        db.add(
            Invoice(
                id=invoice_id,
                business_id=business_id,
                created_by_user_id=user_id,
                ocr_document_id=ocr_document_id,
                invoice_type=InvoiceType.INVOICE,
                status=InvoiceStatus.OCR_PROCESSING,
                buyer_country_code="MYS",
                currency_code="MYR",
                subtotal="0.00",
                tax_total="0.00",
                grand_total="0.00",
            )
        )
        await db.flush()
        db.add(
            OcrDocument(
                id=ocr_document_id,
                invoice_id=invoice_id,
                user_id=user_id,
                business_id=business_id,
                storage_key=storage_key,
                original_filename=filename[:255],
                file_type=file_type,
                file_size=size,
                ocr_status=OcrStatus.PENDING,
            )
        )
        await db.flush()

        if bulk_session_id is not None:
            linked = await add_invoice_to_session(
                db, bulk_session_id, invoice_id, business_id=business_id
            )
            if not linked:
                logger.warning(
                    "[confirm_upload] Sesión masiva no encontrada; factura sin vincular",
                    extra={"bulk_session_id": str(bulk_session_id), "invoice_id": str(invoice_id)},
                )

    await commit_or_raise(db, _work)

    job = OcrJob(
        ocr_document_id=ocr_document_id,
        storage_key=storage_key,
        file_type=file_type,
        invoice_id=invoice_id,
        user_id=user_id,
        business_id=business_id,
    )
    await job_queue.send(job.to_message())

    logger.info(
        "[confirm_upload] Documento confirmado y encolado",
        extra={
            "invoice_id": str(invoice_id),
            "ocr_document_id": str(ocr_document_id),
            "business_id": str(business_id),
            "file_type": file_type.value,
            "file_size": size,
        },
    )
    return ConfirmUploadOut(
        invoice_id=invoice_id,
        ocr_document_id=ocr_document_id,
        status=InvoiceStatus.OCR_PROCESSING,
    )


async def upload_document(
    db: AsyncSession,
    *,
    user_id: UUID,
    business_id: UUID,
    filename: str,
    data: bytes,
    blob_store: BlobStore,
    job_queue: JobQueue,
    bulk_session_id: Optional[UUID] = None,
) -> ConfirmUploadOut:
    """Sube los bytes al blob store y los confirma en un solo paso."""
    file_type = detect_file_type(filename)
    max_bytes = _max_upload_bytes()
    if len(data) > max_bytes:
        raise FileTooLarge(len(data), max_bytes)

    storage_key = build_upload_key(user_id, file_type.value)
    await blob_store.put(storage_key, data, _CONTENT_TYPES[file_type])

    return await confirm_upload(
        db,
        user_id=user_id,
        business_id=business_id,
        storage_key=storage_key,
        blob_store=blob_store,
        job_queue=job_queue,
        original_filename=filename,
        bulk_session_id=bulk_session_id,
    )


__all__ = ["detect_file_type", "build_upload_key", "confirm_upload", "upload_document"]

# Fin del archivo backend/app/modules/ocr/facades/upload_facade.py
