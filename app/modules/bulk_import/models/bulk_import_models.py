# -*- coding: utf-8 -*-
"""
backend/app/modules/bulk_import/models/bulk_import_models.py

Modelos ORM de importaciones masivas:

- BulkImport: una importación CSV o una sesión de documentos.
  error_summary es una lista JSON de {row|file, message}.
- BulkImportInvoice: vínculo importación <-> factura. La restricción
  única (bulk_import_id, invoice_id) hace que agregar sea idempotente
  y que dos cargas concurrentes a la misma sesión no se pisen.

Autor: EInvoiceMY
Fecha: 2025-11-15
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.shared.database.base import Base, JsonDocument, UTCDateTime, enum_column, now_utc
from app.modules.bulk_import.enums import BulkImportSource, BulkImportStatus


class BulkImport(Base):
    """Importación masiva (CSV) o sesión de documentos."""

    __tablename__ = "bulk_imports"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    business_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    initiated_by_user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    storage_key: Mapped[str] = mapped_column(String(512), nullable=False)
    original_filename: Mapped[str] = mapped_column(String(255), nullable=False)
    source: Mapped[BulkImportSource] = mapped_column(
        enum_column(BulkImportSource), nullable=False, default=BulkImportSource.CSV
    )
    status: Mapped[BulkImportStatus] = mapped_column(
        enum_column(BulkImportStatus), nullable=False, default=BulkImportStatus.QUEUED
    )

    total_rows: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    success_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    error_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    error_summary: Mapped[Optional[List[dict[str, Any]]]] = mapped_column(JsonDocument, nullable=True)
    processing_error: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    completed_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=now_utc)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=now_utc, onupdate=now_utc)

    links: Mapped[List["BulkImportInvoice"]] = relationship(
        back_populates="bulk_import",
        cascade="all, delete-orphan",
        lazy="raise",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<BulkImport id={self.id} source={self.source} status={self.status}>"


class BulkImportInvoice(Base):
    """Factura creada o agregada dentro de una importación."""

    __tablename__ = "bulk_import_invoices"
    __table_args__ = (
        UniqueConstraint("bulk_import_id", "invoice_id", name="uq_bulk_import_invoices_import_invoice"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    bulk_import_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("bulk_imports.id", ondelete="CASCADE"), nullable=False, index=True
    )
    invoice_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=now_utc)

    bulk_import: Mapped[BulkImport] = relationship(back_populates="links")


__all__ = ["BulkImport", "BulkImportInvoice"]

# Fin del archivo backend/app/modules/bulk_import/models/bulk_import_models.py
