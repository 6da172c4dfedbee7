# -*- coding: utf-8 -*-
"""
backend/app/modules/lhdn/schemas/submission_schemas.py

Schemas de las rutas LHDN (envío, consulta, cancelación, historial).

Autor: EInvoiceMY
Fecha: 2025-11-13
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import Field

from app.modules.invoices.enums import InvoiceStatus
from app.modules.lhdn.enums import SubmissionStatus
from app.shared.utils.base_models import UTF8SafeModel


class SubmitInvoiceOut(UTF8SafeModel):
    submission_uid: Optional[str] = None
    status: InvoiceStatus


class PollStatusOut(UTF8SafeModel):
    status: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class CancelInvoiceIn(UTF8SafeModel):
    reason: str = Field(default="Cancelled by user", min_length=1, max_length=300)


class CancelInvoiceOut(UTF8SafeModel):
    status: InvoiceStatus


class SubmissionRead(UTF8SafeModel):
    id: UUID
    invoice_id: UUID
    submission_uid: Optional[str] = None
    document_uuid: Optional[str] = None
    status: SubmissionStatus
    error_message: Optional[str] = None
    submitted_at: Optional[datetime] = None
    validated_at: Optional[datetime] = None
    created_at: datetime


class SubmissionListResponse(UTF8SafeModel):
    items: List[SubmissionRead]


__all__ = [
    "SubmitInvoiceOut",
    "PollStatusOut",
    "CancelInvoiceIn",
    "CancelInvoiceOut",
    "SubmissionRead",
    "SubmissionListResponse",
]

# Fin del archivo backend/app/modules/lhdn/schemas/submission_schemas.py
