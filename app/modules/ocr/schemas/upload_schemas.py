# -*- coding: utf-8 -*-
"""
backend/app/modules/ocr/schemas/upload_schemas.py

Schemas de confirmación de carga y lectura de documentos OCR.

Autor: EInvoiceMY
Fecha: 2025-11-08
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from app.modules.invoices.enums import InvoiceStatus
from app.modules.ocr.enums import FileType, OcrStatus
from app.shared.utils.base_models import UTF8SafeModel


class ConfirmUploadIn(UTF8SafeModel):
    """El archivo ya fue subido al blob store bajo `storage_key`."""
    storage_key: str = Field(..., min_length=1, max_length=512)
    original_filename: Optional[str] = Field(None, max_length=255)
    bulk_session_id: Optional[UUID] = None


class ConfirmUploadOut(UTF8SafeModel):
    invoice_id: UUID
    ocr_document_id: UUID
    status: InvoiceStatus


class OcrDocumentRead(UTF8SafeModel):
    id: UUID
    invoice_id: Optional[UUID] = None
    original_filename: str
    file_type: FileType
    file_size: int
    ocr_status: OcrStatus
    confidence_score: Optional[str] = None
    processing_error: Optional[str] = None
    processed_at: Optional[datetime] = None
    created_at: datetime


__all__ = ["ConfirmUploadIn", "ConfirmUploadOut", "OcrDocumentRead"]

# Fin del archivo backend/app/modules/ocr/schemas/upload_schemas.py
