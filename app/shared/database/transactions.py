# -*- coding: utf-8 -*-
"""
backend/app/shared/database/transactions.py

Helpers transaccionales compartidos por las fachadas de todos los módulos.

Autor: EInvoiceMY
Fecha: 2025-11-06
"""

from __future__ import annotations

from typing import Awaitable, Callable, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


async def commit_or_raise(db: AsyncSession, work: Callable[[], Awaitable[T]]) -> T:
    """
    Ejecuta work() dentro de un contexto transaccional.

    Aplica commit si work() tiene éxito.
    Aplica rollback y re-lanza si work() falla.

    Args:
        db: Sesión async de SQLAlchemy
        work: Corutina sin argumentos a ejecutar dentro de la transacción

    Returns:
        Resultado de work()

    Raises:
        Cualquier excepción lanzada por work() o por el commit
    """
    try:
        result = await work()
        await db.commit()
        return result
    except Exception:
        await db.rollback()
        raise


__all__ = ["commit_or_raise"]

# Fin del archivo backend/app/shared/database/transactions.py
