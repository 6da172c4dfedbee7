# -*- coding: utf-8 -*-
"""
backend/app/modules/invoices/repositories/invoice_repository.py

Acceso a datos de facturas y sus líneas.

Autor: EInvoiceMY
Fecha: 2025-10-30
"""

from typing import Iterable, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.invoices.enums import InvoiceStatus
from app.modules.invoices.models import Invoice, InvoiceItem
from app.shared.database.repository import BaseRepository


class InvoiceRepository(BaseRepository[Invoice]):
    def __init__(self) -> None:
        super().__init__(Invoice)

    async def get(self, session: AsyncSession, obj_id: UUID) -> Optional[Invoice]:
        """Factura con sus líneas, refrescada aunque la sesión la tenga expirada tras un rollback."""
        return await session.get(Invoice, obj_id, populate_existing=True)

    async def get_for_update(self, session: AsyncSession, obj_id: UUID) -> Optional[Invoice]:
        result = await session.execute(
            select(Invoice)
            .where(Invoice.id == obj_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_by_business(
        self,
        session: AsyncSession,
        business_id: UUID,
        *,
        status: Optional[InvoiceStatus] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[Sequence[Invoice], int]:
        """Página de facturas del negocio (más recientes primero) + total."""
        filters = [Invoice.business_id == business_id]
        if status is not None:
            filters.append(Invoice.status == status)

        total = await session.scalar(select(func.count()).select_from(Invoice).where(*filters))
        result = await session.execute(
            select(Invoice)
            .where(*filters)
            .order_by(Invoice.created_at.desc(), Invoice.id)
            .limit(limit)
            .offset(offset)
        )
        return result.scalars().all(), int(total or 0)

    async def get_many(self, session: AsyncSession, invoice_ids: Iterable[UUID]) -> List[Invoice]:
        ids = list(invoice_ids)
        if not ids:
            return []
        result = await session.execute(select(Invoice).where(Invoice.id.in_(ids)))
        return list(result.scalars().all())

    async def replace_items(
        self,
        session: AsyncSession,
        invoice: Invoice,
        items: List[InvoiceItem],
    ) -> None:
        """
        Reemplaza todas las líneas de la factura (delete-all + insert-new).

        El cascade delete-orphan de la relación borra las líneas previas.
        """
        invoice.items = items
        await session.flush()


__all__ = ["InvoiceRepository"]

# Fin del archivo backend/app/modules/invoices/repositories/invoice_repository.py
