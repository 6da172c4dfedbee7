# -*- coding: utf-8 -*-
"""
backend/app/modules/invoices/schemas/invoice_schemas.py

Schemas Pydantic para creación, edición y respuesta de facturas.

Los montos viajan como strings decimales ("50.00"); el servidor
recalcula todos los subtotales/impuestos/totales.

Autor: EInvoiceMY
Fecha: 2025-10-30
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import ConfigDict, EmailStr, Field, model_validator

from app.modules.invoices.enums import InvoiceStatus, InvoiceType, TaxType
from app.shared.utils.base_models import UTF8SafeModel

DECIMAL_PATTERN = r"^\d+(\.\d{1,2})?$"
DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


# ========== REQUEST SCHEMAS ==========

class InvoiceItemIn(UTF8SafeModel):
    """Línea de factura tal como la envía el cliente."""
    description: str = Field(..., min_length=1, max_length=500)
    classification_code: str = Field("001", max_length=10)
    quantity: str = Field(..., pattern=DECIMAL_PATTERN)
    unit_code: str = Field("UNT", max_length=10)
    unit_price: str = Field(..., pattern=DECIMAL_PATTERN)
    tax_type: TaxType = TaxType.NOT_APPLICABLE
    tax_rate: str = Field("0", pattern=DECIMAL_PATTERN)


class _InvoiceFields(UTF8SafeModel):
    invoice_number: Optional[str] = Field(None, max_length=50)
    supplier_name: Optional[str] = Field(None, max_length=255)
    supplier_tin: Optional[str] = Field(None, max_length=20)
    supplier_registration: Optional[str] = Field(None, max_length=50)
    buyer_name: Optional[str] = Field(None, max_length=255)
    buyer_tin: Optional[str] = Field(None, max_length=20)
    buyer_registration_number: Optional[str] = Field(None, max_length=50)
    buyer_sst_number: Optional[str] = Field(None, max_length=50)
    buyer_email: Optional[EmailStr] = None
    buyer_phone: Optional[str] = Field(None, max_length=20)
    buyer_address_line0: Optional[str] = Field(None, max_length=255)
    buyer_address_line1: Optional[str] = Field(None, max_length=255)
    buyer_city_name: Optional[str] = Field(None, max_length=100)
    buyer_state_code: Optional[str] = Field(None, max_length=5)
    issue_date: Optional[str] = Field(None, pattern=DATE_PATTERN)
    due_date: Optional[str] = Field(None, pattern=DATE_PATTERN)
    notes: Optional[str] = Field(None, max_length=2000)


class InvoiceCreateIn(_InvoiceFields):
    """
    Request para crear una factura manual (status DRAFT).

    Requiere al menos una línea.
    """
    invoice_type: InvoiceType = InvoiceType.INVOICE
    buyer_country_code: str = Field("MYS", min_length=3, max_length=3)
    currency_code: str = Field("MYR", min_length=3, max_length=3)
    items: List[InvoiceItemIn] = Field(..., min_length=1)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "invoice_number": "INV-2025-0001",
                "issue_date": "2025-11-01",
                "supplier_name": "Kedai Runcit Sdn Bhd",
                "supplier_tin": "C12345678901",
                "buyer_name": "Syarikat Pembeli Bhd",
                "buyer_tin": "C98765432109",
                "items": [
                    {"description": "Consulting", "quantity": "2", "unit_price": "50.00",
                     "tax_type": "01", "tax_rate": "6"}
                ],
            }
        }
    )


class InvoiceUpdateIn(_InvoiceFields):
    """Edición parcial; si vienen items, se reemplazan todas las líneas."""
    invoice_type: Optional[InvoiceType] = None
    buyer_country_code: Optional[str] = Field(None, min_length=3, max_length=3)
    currency_code: Optional[str] = Field(None, min_length=3, max_length=3)
    items: Optional[List[InvoiceItemIn]] = Field(None, min_length=1)

    @model_validator(mode="after")
    def at_least_one_field(self) -> "InvoiceUpdateIn":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided")
        for name in ("invoice_type", "buyer_country_code", "currency_code", "items"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


# ========== RESPONSE SCHEMAS ==========

class InvoiceItemRead(UTF8SafeModel):
    id: UUID
    description: str
    classification_code: str
    quantity: str
    unit_code: str
    unit_price: str
    subtotal: str
    tax_type: TaxType
    tax_rate: str
    tax_amount: str
    total: str
    sort_order: int


class InvoiceRead(UTF8SafeModel):
    id: UUID
    business_id: UUID
    ocr_document_id: Optional[UUID] = None
    invoice_number: Optional[str] = None
    invoice_type: InvoiceType
    status: InvoiceStatus
    supplier_name: Optional[str] = None
    supplier_tin: Optional[str] = None
    supplier_registration: Optional[str] = None
    buyer_name: Optional[str] = None
    buyer_tin: Optional[str] = None
    buyer_registration_number: Optional[str] = None
    buyer_sst_number: Optional[str] = None
    buyer_email: Optional[str] = None
    buyer_phone: Optional[str] = None
    buyer_address_line0: Optional[str] = None
    buyer_address_line1: Optional[str] = None
    buyer_city_name: Optional[str] = None
    buyer_state_code: Optional[str] = None
    buyer_country_code: str
    currency_code: str
    subtotal: str
    tax_total: str
    grand_total: str
    issue_date: Optional[str] = None
    due_date: Optional[str] = None
    notes: Optional[str] = None
    lhdn_uuid: Optional[str] = None
    lhdn_submission_uid: Optional[str] = None
    lhdn_validation_status: Optional[str] = None
    lhdn_submitted_at: Optional[datetime] = None
    lhdn_validated_at: Optional[datetime] = None
    pdf_storage_key: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    items: List[InvoiceItemRead] = Field(default_factory=list)


class InvoiceListResponse(UTF8SafeModel):
    items: List[InvoiceRead]
    page: int
    limit: int
    total: int
    total_pages: int


__all__ = [
    "InvoiceItemIn",
    "InvoiceCreateIn",
    "InvoiceUpdateIn",
    "InvoiceItemRead",
    "InvoiceRead",
    "InvoiceListResponse",
]

# Fin del archivo backend/app/modules/invoices/schemas/invoice_schemas.py
