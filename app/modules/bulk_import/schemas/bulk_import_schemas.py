# -*- coding: utf-8 -*-
"""
backend/app/modules/bulk_import/schemas/bulk_import_schemas.py

Schemas de importaciones masivas y sesiones de documentos.

Autor: EInvoiceMY
Fecha: 2025-11-15
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from app.modules.bulk_import.enums import BulkImportSource, BulkImportStatus
from app.modules.invoices.enums import InvoiceStatus
from app.modules.ocr.enums import OcrStatus
from app.shared.utils.base_models import UTF8SafeModel


class BulkImportRead(UTF8SafeModel):
    id: UUID
    business_id: UUID
    original_filename: str
    source: BulkImportSource
    status: BulkImportStatus
    total_rows: Optional[int] = None
    success_count: int
    error_count: int
    error_summary: Optional[List[Dict[str, Any]]] = None
    processing_error: Optional[str] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class BulkImportListResponse(UTF8SafeModel):
    items: List[BulkImportRead]
    limit: int
    offset: int


class SessionStats(UTF8SafeModel):
    total: int = 0
    ready: int = 0
    reviewing: int = 0
    processing: int = 0
    failed: int = 0


class SessionInvoiceRead(UTF8SafeModel):
    invoice_id: UUID
    status: InvoiceStatus
    invoice_number: Optional[str] = None
    supplier_name: Optional[str] = None
    buyer_name: Optional[str] = None
    grand_total: str
    currency_code: str
    ocr_document_id: Optional[UUID] = None
    original_filename: Optional[str] = None
    ocr_status: Optional[OcrStatus] = None
    confidence_score: Optional[str] = None
    processing_error: Optional[str] = None


class SessionWithInvoicesOut(UTF8SafeModel):
    session: BulkImportRead
    invoices: List[SessionInvoiceRead]
    stats: SessionStats


class SubmitResultItem(UTF8SafeModel):
    invoice_id: UUID
    success: bool
    submission_uid: Optional[str] = None
    error: Optional[str] = None


class SubmitAllOut(UTF8SafeModel):
    submitted: int
    failed: int
    total: int
    results: List[SubmitResultItem]


__all__ = [
    "BulkImportRead",
    "BulkImportListResponse",
    "SessionStats",
    "SessionInvoiceRead",
    "SessionWithInvoicesOut",
    "SubmitResultItem",
    "SubmitAllOut",
]

# Fin del archivo backend/app/modules/bulk_import/schemas/bulk_import_schemas.py
