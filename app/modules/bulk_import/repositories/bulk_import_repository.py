# -*- coding: utf-8 -*-
"""
backend/app/modules/bulk_import/repositories/bulk_import_repository.py

Acceso a datos de importaciones masivas y de sus vínculos con facturas.

link_invoice usa INSERT ... ON CONFLICT DO NOTHING sobre la restricción
única (bulk_import_id, invoice_id): agregar la misma factura dos veces
no duplica filas.

Autor: EInvoiceMY
Fecha: 2025-11-15
"""

from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.bulk_import.models import BulkImport, BulkImportInvoice
from app.modules.invoices.models import Invoice
from app.modules.ocr.models import OcrDocument
from app.shared.database.repository import BaseRepository

_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class BulkImportRepository(BaseRepository[BulkImport]):
    def __init__(self) -> None:
        super().__init__(BulkImport)

    async def get_for_business(
        self, session: AsyncSession, bulk_import_id: UUID, business_id: UUID
    ) -> Optional[BulkImport]:
        result = await session.execute(
            select(BulkImport).where(
                BulkImport.id == bulk_import_id,
                BulkImport.business_id == business_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_by_business(
        self, session: AsyncSession, business_id: UUID, *, limit: int = 20, offset: int = 0
    ) -> Sequence[BulkImport]:
        result = await session.execute(
            select(BulkImport)
            .where(BulkImport.business_id == business_id)
            .order_by(BulkImport.created_at.desc(), BulkImport.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return result.scalars().all()

    async def link_invoice(self, session: AsyncSession, bulk_import_id: UUID, invoice_id: UUID) -> None:
        """Vincula una factura a la importación (idempotente)."""
        dialect = session.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)

        if insert is None:
            existing = await session.execute(
                select(BulkImportInvoice.id).where(
                    BulkImportInvoice.bulk_import_id == bulk_import_id,
                    BulkImportInvoice.invoice_id == invoice_id,
                )
            )
            if existing.first() is None:
                session.add(BulkImportInvoice(bulk_import_id=bulk_import_id, invoice_id=invoice_id))
                await session.flush()
            return

        stmt = insert(BulkImportInvoice).values(bulk_import_id=bulk_import_id, invoice_id=invoice_id)
        stmt = stmt.on_conflict_do_nothing(
            index_elements=[BulkImportInvoice.bulk_import_id, BulkImportInvoice.invoice_id]
        )
        await session.execute(stmt)

    async def count_invoices(self, session: AsyncSession, bulk_import_id: UUID) -> int:
        result = await session.execute(
            select(func.count())
            .select_from(BulkImportInvoice)
            .where(BulkImportInvoice.bulk_import_id == bulk_import_id)
        )
        return int(result.scalar_one())

    async def list_invoices_with_documents(
        self, session: AsyncSession, bulk_import_id: UUID
    ) -> List[Tuple[Invoice, Optional[OcrDocument]]]:
        """Facturas vinculadas (en orden de alta) con su documento OCR si existe."""
        result = await session.execute(
            select(Invoice, OcrDocument)
            .join(BulkImportInvoice, BulkImportInvoice.invoice_id == Invoice.id)
            .outerjoin(OcrDocument, OcrDocument.id == Invoice.ocr_document_id)
            .where(BulkImportInvoice.bulk_import_id == bulk_import_id)
            .order_by(BulkImportInvoice.created_at, BulkImportInvoice.id)
        )
        return [(row[0], row[1]) for row in result.all()]


__all__ = ["BulkImportRepository"]

# Fin del archivo backend/app/modules/bulk_import/repositories/bulk_import_repository.py
