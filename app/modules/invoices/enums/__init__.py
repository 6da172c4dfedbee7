# -*- coding: utf-8 -*-
"""
backend/app/modules/invoices/enums/__init__.py

Enums del módulo de facturas.
"""

from .invoice_status_enum import InvoiceStatus
from .invoice_type_enum import InvoiceType
from .tax_type_enum import TaxType, NON_TAXABLE_TYPES
from .invoice_status_transitions import (
    VALID_STATUS_TRANSITIONS,
    EDITABLE_STATUSES,
    TERMINAL_STATUSES,
    is_valid_status_transition,
    get_allowed_transitions,
    validate_status_transition,
)

__all__ = [
    "InvoiceStatus",
    "InvoiceType",
    "TaxType",
    "NON_TAXABLE_TYPES",
    "VALID_STATUS_TRANSITIONS",
    "EDITABLE_STATUSES",
    "TERMINAL_STATUSES",
    "is_valid_status_transition",
    "get_allowed_transitions",
    "validate_status_transition",
]
