# -*- coding: utf-8 -*-
"""
backend/app/core/db.py

Fachada para la capa de acceso a datos basada en SQLAlchemy async.
Envuelve `app.shared.database.database` y agrega create_all_tables(),
que registra los modelos de todos los módulos antes de crear el esquema
(arranque local y pruebas; en despliegue el esquema lo gestiona la
migración).

Autor: EInvoiceMY
Fecha: 2025-11-17
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from app.shared.database.database import (
    engine,
    SessionLocal,
    Base,
    get_async_session,
    session_scope,
    check_database_health,
)


def import_all_models() -> None:
    """Importa los modelos ORM para poblar Base.metadata."""
    import app.modules.businesses.models  # noqa: F401
    import app.modules.invoices.models  # noqa: F401
    import app.modules.ocr.models  # noqa: F401
    import app.modules.lhdn.models  # noqa: F401
    import app.modules.bulk_import.models  # noqa: F401


async def create_all_tables(target: Optional[AsyncEngine] = None) -> None:
    import_all_models()
    async with (target or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


__all__ = [
    "engine",
    "SessionLocal",
    "Base",
    "get_async_session",
    "session_scope",
    "check_database_health",
    "import_all_models",
    "create_all_tables",
]

# Fin del archivo backend/app/core/db.py
