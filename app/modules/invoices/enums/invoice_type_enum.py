# -*- coding: utf-8 -*-
"""
backend/app/modules/invoices/enums/invoice_type_enum.py

Tipos de documento e-Invoice (InvoiceTypeCode de LHDN).

Autor: EInvoiceMY
Fecha: 2025-10-28
"""

from enum import StrEnum


class InvoiceType(StrEnum):
    __pg_enum_name__ = "invoice_type_enum"

    INVOICE = "01"
    CREDIT_NOTE = "02"
    DEBIT_NOTE = "03"
    REFUND_NOTE = "04"


__all__ = ["InvoiceType"]

# Fin del archivo backend/app/modules/invoices/enums/invoice_type_enum.py
