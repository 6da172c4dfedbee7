# -*- coding: utf-8 -*-
"""
backend/app/modules/invoices/models/invoice_models.py

Modelos ORM del agregado factura:
- Invoice: cabecera, partes, totales y correlación LHDN
- InvoiceItem: líneas; se reemplazan completas en cada edición

Los montos se guardan como texto decimal de 2 posiciones ("1234.50"),
nunca como float.

Autor: EInvoiceMY
Fecha: 2025-10-29
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.shared.database.base import Base, MoneyString, UTCDateTime, enum_column, now_utc
from app.modules.invoices.enums import InvoiceStatus, InvoiceType, TaxType


class Invoice(Base):
    """Factura electrónica."""

    __tablename__ = "invoices"
    __table_args__ = (
        Index("ix_invoices_business_status", "business_id", "status"),
        Index("ix_invoices_business_created", "business_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    business_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False
    )
    created_by_user_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    ocr_document_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)

    invoice_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    invoice_type: Mapped[InvoiceType] = mapped_column(
        enum_column(InvoiceType), nullable=False, default=InvoiceType.INVOICE
    )
    status: Mapped[InvoiceStatus] = mapped_column(
        enum_column(InvoiceStatus), nullable=False, default=InvoiceStatus.DRAFT
    )

    # Proveedor (vacío => se usa el perfil del negocio al construir el UBL)
    supplier_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    supplier_tin: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    supplier_registration: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # Comprador
    buyer_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    buyer_tin: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    buyer_registration_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    buyer_sst_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    buyer_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    buyer_phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    buyer_address_line0: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    buyer_address_line1: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    buyer_city_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    buyer_state_code: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)
    buyer_country_code: Mapped[str] = mapped_column(String(3), nullable=False, default="MYS")

    currency_code: Mapped[str] = mapped_column(String(3), nullable=False, default="MYR")
    subtotal: Mapped[str] = mapped_column(MoneyString, nullable=False, default="0.00")
    tax_total: Mapped[str] = mapped_column(MoneyString, nullable=False, default="0.00")
    grand_total: Mapped[str] = mapped_column(MoneyString, nullable=False, default="0.00")

    # Fechas ISO (YYYY-MM-DD)
    issue_date: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    due_date: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Correlación LHDN (solo tras el envío)
    lhdn_uuid: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    lhdn_submission_uid: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    lhdn_validation_status: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    lhdn_submitted_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    lhdn_validated_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)

    pdf_storage_key: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=now_utc)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=now_utc, onupdate=now_utc)

    items: Mapped[List["InvoiceItem"]] = relationship(
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.sort_order",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Invoice id={self.id} number={self.invoice_number} status={self.status}>"


class InvoiceItem(Base):
    """Línea de factura; pertenece exclusivamente a una Invoice."""

    __tablename__ = "invoice_items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    invoice_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True
    )

    description: Mapped[str] = mapped_column(String(500), nullable=False)
    classification_code: Mapped[str] = mapped_column(String(10), nullable=False, default="001")
    quantity: Mapped[str] = mapped_column(MoneyString, nullable=False)
    unit_code: Mapped[str] = mapped_column(String(10), nullable=False, default="UNT")
    unit_price: Mapped[str] = mapped_column(MoneyString, nullable=False)
    subtotal: Mapped[str] = mapped_column(MoneyString, nullable=False)
    tax_type: Mapped[TaxType] = mapped_column(
        enum_column(TaxType), nullable=False, default=TaxType.NOT_APPLICABLE
    )
    tax_rate: Mapped[str] = mapped_column(MoneyString, nullable=False, default="0")
    tax_amount: Mapped[str] = mapped_column(MoneyString, nullable=False)
    total: Mapped[str] = mapped_column(MoneyString, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=now_utc)

    invoice: Mapped[Invoice] = relationship(back_populates="items")

    def __repr__(self) -> str:
        return f"<InvoiceItem id={self.id} invoice_id={self.invoice_id} total={self.total}>"


__all__ = ["Invoice", "InvoiceItem"]

# Fin del archivo backend/app/modules/invoices/models/invoice_models.py
