# -*- coding: utf-8 -*-
"""
backend/app/modules/lhdn/repositories/submission_repository.py

Acceso a datos del historial de envíos LHDN (solo inserción + cambios de estado).

Autor: EInvoiceMY
Fecha: 2025-11-12
"""

from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.lhdn.models import LhdnSubmission
from app.shared.database.repository import BaseRepository


class LhdnSubmissionRepository(BaseRepository[LhdnSubmission]):
    def __init__(self) -> None:
        super().__init__(LhdnSubmission)

    async def list_by_invoice(self, session: AsyncSession, invoice_id: UUID) -> Sequence[LhdnSubmission]:
        """Historial de la factura, más reciente primero."""
        result = await session.execute(
            select(LhdnSubmission)
            .where(LhdnSubmission.invoice_id == invoice_id)
            .order_by(LhdnSubmission.created_at.desc(), LhdnSubmission.id.desc())
        )
        return result.scalars().all()

    async def latest_by_invoice(self, session: AsyncSession, invoice_id: UUID) -> Optional[LhdnSubmission]:
        result = await session.execute(
            select(LhdnSubmission)
            .where(LhdnSubmission.invoice_id == invoice_id)
            .order_by(LhdnSubmission.created_at.desc(), LhdnSubmission.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()


__all__ = ["LhdnSubmissionRepository"]

# Fin del archivo backend/app/modules/lhdn/repositories/submission_repository.py
