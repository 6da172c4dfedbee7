# -*- coding: utf-8 -*-
"""
backend/app/modules/invoices/schemas/__init__.py
"""

from .invoice_schemas import (
    InvoiceItemIn,
    InvoiceCreateIn,
    InvoiceUpdateIn,
    InvoiceItemRead,
    InvoiceRead,
    InvoiceListResponse,
)

__all__ = [
    "InvoiceItemIn",
    "InvoiceCreateIn",
    "InvoiceUpdateIn",
    "InvoiceItemRead",
    "InvoiceRead",
    "InvoiceListResponse",
]
