# -*- coding: utf-8 -*-
"""
backend/app/modules/bulk_import/enums/bulk_import_enums.py

Enums de importaciones masivas.

- BulkImportSource: CSV (una factura por fila) | DOCUMENTS (sesión de cargas OCR)
- BulkImportStatus: QUEUED -> PROCESSING -> COMPLETED | FAILED

Autor: EInvoiceMY
Fecha: 2025-11-15
"""

from enum import StrEnum


class BulkImportSource(StrEnum):
    __pg_enum_name__ = "bulk_import_source_enum"

    CSV = "CSV"
    DOCUMENTS = "DOCUMENTS"


class BulkImportStatus(StrEnum):
    __pg_enum_name__ = "bulk_import_status_enum"

    QUEUED = "QUEUED"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


__all__ = ["BulkImportSource", "BulkImportStatus"]

# Fin del archivo backend/app/modules/bulk_import/enums/bulk_import_enums.py
