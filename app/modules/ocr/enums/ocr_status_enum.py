# -*- coding: utf-8 -*-
"""
backend/app/modules/ocr/enums/ocr_status_enum.py

Estados del intento de extracción de un documento.

PENDING -> PROCESSING -> COMPLETED | FAILED

Autor: EInvoiceMY
Fecha: 2025-11-08
"""

from enum import StrEnum


class OcrStatus(StrEnum):
    __pg_enum_name__ = "ocr_status_enum"

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


__all__ = ["OcrStatus"]

# Fin del archivo backend/app/modules/ocr/enums/ocr_status_enum.py
