# -*- coding: utf-8 -*-
"""
backend/app/modules/invoices/enums/invoice_status_enum.py

Estados del ciclo de vida de una factura.

- DRAFT: creada manualmente, editable
- OCR_PROCESSING: creada por carga de archivo; el pipeline OCR está trabajando
- REVIEW_REQUIRED: requiere revisión humana (triage o falla de OCR)
- READY_FOR_SUBMISSION: finalizada, lista para enviarse a LHDN
- SUBMITTED: aceptada por LHDN, validación asíncrona pendiente
- VALIDATED: validada por LHDN (terminal)
- REJECTED: rechazada por LHDN (terminal)
- CANCELLED: cancelada ante LHDN tras validarse (terminal)

Autor: EInvoiceMY
Fecha: 2025-10-28
"""

from enum import StrEnum


class InvoiceStatus(StrEnum):
    __pg_enum_name__ = "invoice_status_enum"

    DRAFT = "DRAFT"
    OCR_PROCESSING = "OCR_PROCESSING"
    REVIEW_REQUIRED = "REVIEW_REQUIRED"
    READY_FOR_SUBMISSION = "READY_FOR_SUBMISSION"
    SUBMITTED = "SUBMITTED"
    VALIDATED = "VALIDATED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


__all__ = ["InvoiceStatus"]

# Fin del archivo backend/app/modules/invoices/enums/invoice_status_enum.py
