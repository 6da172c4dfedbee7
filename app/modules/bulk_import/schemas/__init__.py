# -*- coding: utf-8 -*-
"""
backend/app/modules/bulk_import/schemas/__init__.py
"""

from .bulk_import_schemas import (
    BulkImportRead,
    BulkImportListResponse,
    SessionStats,
    SessionInvoiceRead,
    SessionWithInvoicesOut,
    SubmitResultItem,
    SubmitAllOut,
)

__all__ = [
    "BulkImportRead",
    "BulkImportListResponse",
    "SessionStats",
    "SessionInvoiceRead",
    "SessionWithInvoicesOut",
    "SubmitResultItem",
    "SubmitAllOut",
]
