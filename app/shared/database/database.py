# -*- coding: utf-8 -*-
"""
backend/app/shared/database/database.py

Motor SQLAlchemy async (asyncpg en despliegue, aiosqlite en pruebas locales).

Provee:
- engine (create_async_engine)
- SessionLocal (async_sessionmaker)
- Base (DeclarativeBase con naming convention para Alembic)
- Dependencia FastAPI: get_async_session
- context manager: session_scope()
- check_database_health()

Autor: EInvoiceMY
Fecha: 2025-10-18
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.shared.config import get_settings
from app.shared.database.base import Base  # reutilizamos la Base única

logger = logging.getLogger(__name__)


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """
    Construye el engine async según el dialecto de la URL.

    - sqlite: StaticPool para que ':memory:' comparta una única conexión.
    - postgres: pool configurado desde settings.
    """
    if url.startswith("sqlite"):
        return create_async_engine(
            url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )

    settings = get_settings()
    return create_async_engine(
        url,
        echo=echo,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
    )


_settings = get_settings()

engine = build_engine(_settings.database_url, echo=_settings.db_echo_sql)
logger.info("[DB] Engine creado (dialect=%s, echo=%s)", engine.dialect.name, _settings.db_echo_sql)

# ── Session factory
SessionLocal = async_sessionmaker(
    bind=engine,
    expire_on_commit=False,
    class_=AsyncSession,
    autoflush=False,
)


# ── Dependencia FastAPI
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        try:
            yield session
        except SQLAlchemyError:
            # Importante: rollback para liberar cualquier transacción/lock
            await session.rollback()
            raise
        finally:
            if session.in_transaction():
                await session.rollback()


# ── Context manager reutilizable en workers/scripts
@asynccontextmanager
async def session_scope() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        try:
            yield session
            # El commit/rollback lo decide quien use el scope
        finally:
            if session.in_transaction():
                await session.rollback()


# ── Health check
async def check_database_health(timeout_s: float = 3.0, sql: str = "SELECT 1") -> bool:
    """
    Verifica conectividad a la base de datos.

    Args:
        timeout_s: Tiempo máximo de espera en segundos
        sql: Query SQL a ejecutar (default: "SELECT 1")

    Returns:
        True si la conexión es exitosa, False en caso contrario
    """
    try:
        async with asyncio.timeout(timeout_s):
            async with engine.connect() as conn:
                await conn.execute(text(sql))
        return True
    except (SQLAlchemyError, OSError, TimeoutError) as e:
        logger.warning("[DB] Health check falló: %s", e)
        return False


__all__ = [
    "engine",
    "build_engine",
    "SessionLocal",
    "Base",
    "get_async_session",
    "session_scope",
    "check_database_health",
]
# Fin del archivo backend/app/shared/database/database.py
