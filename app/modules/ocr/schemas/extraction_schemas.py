# -*- coding: utf-8 -*-
"""
backend/app/modules/ocr/schemas/extraction_schemas.py

Esquema estricto de la respuesta de extracción estructurada de la IA.

La salida de la IA es entrada externa no confiable: se valida con el mismo
rigor que la entrada de usuario. Claves desconocidas, tipos incorrectos o
confianzas fuera de [0, 1] se rechazan (no se coercionan).

Autor: EInvoiceMY
Fecha: 2025-11-09
"""

from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.modules.invoices.enums import TaxType

ConfidenceScore = Annotated[float, Field(ge=0.0, le=1.0)]


class _StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)


class SupplierConfidence(_StrictModel):
    name: ConfidenceScore
    tin: ConfidenceScore
    registration_number: ConfidenceScore
    address: ConfidenceScore


class ExtractedSupplier(_StrictModel):
    name: Optional[str]
    tin: Optional[str]
    registration_number: Optional[str]
    address: Optional[str]
    confidence: SupplierConfidence


class BuyerConfidence(_StrictModel):
    name: ConfidenceScore
    tin: ConfidenceScore


class ExtractedBuyer(_StrictModel):
    name: Optional[str]
    tin: Optional[str]
    registration_number: Optional[str]
    email: Optional[str]
    phone: Optional[str]
    address: Optional[str]
    confidence: BuyerConfidence


class InvoiceMetaConfidence(_StrictModel):
    number: ConfidenceScore
    date: ConfidenceScore


class ExtractedInvoiceMeta(_StrictModel):
    number: Optional[str]
    date: Optional[str]
    currency: str = "MYR"
    confidence: InvoiceMetaConfidence


class ExtractedLineItem(_StrictModel):
    description: str
    quantity: float
    unit_price: float
    tax_type: TaxType = TaxType.NOT_APPLICABLE
    tax_rate: float = 0.0
    # La IA reporta estos montos, pero el servidor los recalcula siempre
    tax_amount: float
    subtotal: float
    total: float
    confidence: ConfidenceScore


class TotalsConfidence(_StrictModel):
    subtotal: ConfidenceScore
    tax_total: ConfidenceScore
    grand_total: ConfidenceScore


class ExtractedTotals(_StrictModel):
    subtotal: Optional[float]
    tax_total: Optional[float]
    grand_total: Optional[float]
    confidence: TotalsConfidence


class ExtractedInvoice(_StrictModel):
    """Documento completo devuelto por el modelo de extracción."""
    supplier: ExtractedSupplier
    buyer: ExtractedBuyer
    invoice: ExtractedInvoiceMeta
    line_items: List[ExtractedLineItem]
    totals: ExtractedTotals
    overall_confidence: ConfidenceScore


__all__ = [
    "ExtractedInvoice",
    "ExtractedSupplier",
    "ExtractedBuyer",
    "ExtractedInvoiceMeta",
    "ExtractedLineItem",
    "ExtractedTotals",
]

# Fin del archivo backend/app/modules/ocr/schemas/extraction_schemas.py
