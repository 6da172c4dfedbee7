# -*- coding: utf-8 -*-
"""
backend/app/modules/invoices/services/__init__.py

Servicios puros del módulo de facturas.
"""

from .totals_engine import (
    LineTotals,
    InvoiceTotals,
    ReconciliationResult,
    TOTALS_TOLERANCE,
    to_decimal,
    round2,
    to_money_str,
    compute_line_totals,
    compute_invoice_totals,
    compute_totals_from_inputs,
    reconcile,
)

__all__ = [
    "LineTotals",
    "InvoiceTotals",
    "ReconciliationResult",
    "TOTALS_TOLERANCE",
    "to_decimal",
    "round2",
    "to_money_str",
    "compute_line_totals",
    "compute_invoice_totals",
    "compute_totals_from_inputs",
    "reconcile",
]
