# -*- coding: utf-8 -*-
"""
backend/app/modules/ocr/schemas/__init__.py
"""

from .extraction_schemas import (
    ExtractedInvoice,
    ExtractedSupplier,
    ExtractedBuyer,
    ExtractedInvoiceMeta,
    ExtractedLineItem,
    ExtractedTotals,
)
from .upload_schemas import ConfirmUploadIn, ConfirmUploadOut, OcrDocumentRead

__all__ = [
    "ExtractedInvoice",
    "ExtractedSupplier",
    "ExtractedBuyer",
    "ExtractedInvoiceMeta",
    "ExtractedLineItem",
    "ExtractedTotals",
    "ConfirmUploadIn",
    "ConfirmUploadOut",
    "OcrDocumentRead",
]
