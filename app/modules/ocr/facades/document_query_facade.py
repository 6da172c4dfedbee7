# -*- coding: utf-8 -*-
"""
backend/app/modules/ocr/facades/document_query_facade.py

Lectura de documentos OCR con verificación de pertenencia.

Autor: EInvoiceMY
Fecha: 2025-11-10
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.ocr.models import OcrDocument
from app.modules.ocr.repositories import OcrDocumentRepository
from app.shared.errors import NotFoundError, OwnershipError

ocr_document_repo = OcrDocumentRepository()


async def get_ocr_document(db: AsyncSession, ocr_document_id: UUID, business_id: UUID) -> OcrDocument:
    doc = await ocr_document_repo.get(db, ocr_document_id)
    if doc is None:
        raise NotFoundError("OcrDocument", ocr_document_id, code="OCR_DOCUMENT_NOT_FOUND")
    if doc.business_id != business_id:
        raise OwnershipError("ocr document", ocr_document_id)
    return doc


__all__ = ["get_ocr_document", "ocr_document_repo"]

# Fin del archivo backend/app/modules/ocr/facades/document_query_facade.py
