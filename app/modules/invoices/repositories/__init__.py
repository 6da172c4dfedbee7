# -*- coding: utf-8 -*-
"""
backend/app/modules/invoices/repositories/__init__.py
"""

from .invoice_repository import InvoiceRepository

__all__ = ["InvoiceRepository"]
