# -*- coding: utf-8 -*-
"""
backend/app/modules/lhdn/enums/submission_status_enum.py

Estado de un intento de envío a LHDN (fila de auditoría).

PENDING -> SUBMITTED -> VALIDATED | REJECTED
PENDING -> REJECTED (rechazo inmediato o fallo de red)

Autor: EInvoiceMY
Fecha: 2025-11-12
"""

from enum import StrEnum


class SubmissionStatus(StrEnum):
    __pg_enum_name__ = "lhdn_submission_status_enum"

    PENDING = "PENDING"
    SUBMITTED = "SUBMITTED"
    VALIDATED = "VALIDATED"
    REJECTED = "REJECTED"


class LhdnDocumentStatus(StrEnum):
    """Estados que reporta LHDN en documentSummary[].status."""
    VALID = "Valid"
    INVALID = "Invalid"
    SUBMITTED = "Submitted"
    CANCELLED = "Cancelled"


__all__ = ["SubmissionStatus", "LhdnDocumentStatus"]

# Fin del archivo backend/app/modules/lhdn/enums/submission_status_enum.py
