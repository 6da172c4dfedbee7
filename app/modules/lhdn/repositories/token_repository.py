# -*- coding: utf-8 -*-
"""
backend/app/modules/lhdn/repositories/token_repository.py

Caché persistente de tokens LHDN (una fila por negocio).

upsert usa INSERT ... ON CONFLICT (business_id) DO UPDATE: dos refrescos
concurrentes del mismo negocio no chocan con la restricción única,
la última escritura gana.

Autor: EInvoiceMY
Fecha: 2025-11-12
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.lhdn.models import LhdnToken
from app.shared.database.base import now_utc
from app.shared.database.repository import BaseRepository

_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class LhdnTokenRepository(BaseRepository[LhdnToken]):
    def __init__(self) -> None:
        super().__init__(LhdnToken)

    async def get_by_business(self, session: AsyncSession, business_id: UUID) -> Optional[LhdnToken]:
        result = await session.execute(
            select(LhdnToken)
            .where(LhdnToken.business_id == business_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def upsert(
        self,
        session: AsyncSession,
        *,
        business_id: UUID,
        access_token_encrypted: str,
        expires_at: datetime,
    ) -> None:
        now = now_utc()
        dialect = session.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)

        if insert is None:
            existing = await self.get_by_business(session, business_id)
            if existing is None:
                await self.create(
                    session,
                    business_id=business_id,
                    access_token_encrypted=access_token_encrypted,
                    expires_at=expires_at,
                    updated_at=now,
                )
            else:
                existing.access_token_encrypted = access_token_encrypted
                existing.expires_at = expires_at
                existing.updated_at = now
                await session.flush()
            return

        stmt = insert(LhdnToken).values(
            business_id=business_id,
            access_token_encrypted=access_token_encrypted,
            expires_at=expires_at,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[LhdnToken.business_id],
            set_={
                "access_token_encrypted": stmt.excluded.access_token_encrypted,
                "expires_at": stmt.excluded.expires_at,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        await session.execute(stmt)


__all__ = ["LhdnTokenRepository"]

# Fin del archivo backend/app/modules/lhdn/repositories/token_repository.py
