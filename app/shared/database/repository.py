# -*- coding: utf-8 -*-
"""
backend/app/shared/database/repository.py

Repositorio base de los módulos de dominio (negocios, facturas, OCR,
envíos LHDN e importaciones).

Los repositorios nunca hacen commit: la transacción pertenece a la
fachada que los usa.

Autor: EInvoiceMY
Fecha: 2025-11-07
"""

from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")  # modelo ORM


class BaseRepository(Generic[T]):
    """Lecturas por PK y borrado, comunes a todos los agregados."""

    def __init__(self, model: Type[T]):
        self.model = model

    async def get(self, session: AsyncSession, obj_id: Any) -> Optional[T]:
        return await session.get(self.model, obj_id)

    async def get_for_update(self, session: AsyncSession, obj_id: Any) -> Optional[T]:
        """
        Bloquea la fila hasta el fin de la transacción (SELECT ... FOR UPDATE).

        En SQLite la cláusula se ignora; la serialización la da la base.
        """
        pk = self.model.__mapper__.primary_key[0]  # type: ignore[attr-defined]
        result = await session.execute(select(self.model).where(pk == obj_id).with_for_update())
        return result.scalar_one_or_none()

    async def delete(self, session: AsyncSession, obj: T) -> None:
        await session.delete(obj)
        await session.flush()


__all__ = ["BaseRepository"]

# Fin del archivo backend/app/shared/database/repository.py
