# -*- coding: utf-8 -*-
"""
backend/app/modules/invoices/facades/__init__.py

Fachadas del módulo de facturas.
"""

from .base import (
    get_owned_invoice,
    transition_invoice_status,
    build_invoice_items,
    apply_totals,
)
from .invoice_facade import (
    create_invoice,
    update_invoice,
    finalize_invoice,
    delete_invoice,
)
from .invoice_query_facade import list_invoices, get_invoice

__all__ = [
    "get_owned_invoice",
    "transition_invoice_status",
    "build_invoice_items",
    "apply_totals",
    "create_invoice",
    "update_invoice",
    "finalize_invoice",
    "delete_invoice",
    "list_invoices",
    "get_invoice",
]
