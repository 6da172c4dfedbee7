# -*- coding: utf-8 -*-
"""
backend/app/modules/invoices/models/__init__.py
"""

from .invoice_models import Invoice, InvoiceItem

__all__ = ["Invoice", "InvoiceItem"]
