# -*- coding: utf-8 -*-
"""
backend/app/modules/ocr/repositories/ocr_document_repository.py

Acceso a datos de documentos OCR.

Autor: EInvoiceMY
Fecha: 2025-11-08
"""

from typing import Dict, Iterable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.ocr.models import OcrDocument
from app.shared.database.repository import BaseRepository


class OcrDocumentRepository(BaseRepository[OcrDocument]):
    def __init__(self) -> None:
        super().__init__(OcrDocument)

    async def map_by_id(self, session: AsyncSession, ids: Iterable[UUID]) -> Dict[UUID, OcrDocument]:
        """Documentos indexados por id (para unirlos a un lote de facturas)."""
        wanted = [i for i in ids if i is not None]
        if not wanted:
            return {}
        result = await session.execute(select(OcrDocument).where(OcrDocument.id.in_(wanted)))
        return {doc.id: doc for doc in result.scalars().all()}


__all__ = ["OcrDocumentRepository"]

# Fin del archivo backend/app/modules/ocr/repositories/ocr_document_repository.py
