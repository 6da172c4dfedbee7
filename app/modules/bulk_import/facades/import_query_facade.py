# -*- coding: utf-8 -*-
"""
backend/app/modules/bulk_import/facades/import_query_facade.py

Consultas de importaciones masivas (CSV y sesiones de documentos).

Autor: EInvoiceMY
Fecha: 2025-11-15
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.bulk_import.facades.session_facade import bulk_import_repo, get_owned_import
from app.modules.bulk_import.models import BulkImport


async def list_imports(
    db: AsyncSession, business_id: UUID, *, limit: int = 20, offset: int = 0
) -> Sequence[BulkImport]:
    """Importaciones del negocio, más recientes primero."""
    return await bulk_import_repo.list_by_business(db, business_id, limit=limit, offset=offset)


async def get_import_status(db: AsyncSession, bulk_import_id: UUID, business_id: UUID) -> BulkImport:
    return await get_owned_import(db, bulk_import_id, business_id)


__all__ = ["list_imports", "get_import_status"]

# Fin del archivo backend/app/modules/bulk_import/facades/import_query_facade.py
