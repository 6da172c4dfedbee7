# -*- coding: utf-8 -*-
"""
backend/app/modules/invoices/enums/tax_type_enum.py

Tipos de impuesto por línea (códigos LHDN).

Autor: EInvoiceMY
Fecha: 2025-10-28
"""

from enum import StrEnum


class TaxType(StrEnum):
    __pg_enum_name__ = "tax_type_enum"

    STANDARD = "01"        # Sales tax
    SERVICE = "02"         # Service tax
    EXEMPT = "E"           # Exento
    ZERO_RATED = "AE"      # Tasa cero
    NOT_APPLICABLE = "NA"  # No aplica


# Tipos que nunca generan monto de impuesto, sin importar la tasa
NON_TAXABLE_TYPES = frozenset({TaxType.EXEMPT, TaxType.NOT_APPLICABLE})


__all__ = ["TaxType", "NON_TAXABLE_TYPES"]

# Fin del archivo backend/app/modules/invoices/enums/tax_type_enum.py
