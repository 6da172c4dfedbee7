# -*- coding: utf-8 -*-
"""
backend/app/core/__init__.py

Puntos de entrada estables para el arranque del backend:
- Configuración por entorno (get_settings) y logging (setup_logging),
  reexpuestos desde `app.shared.config`
- Motor de base de datos, sesiones y creación del esquema (`app.core.db`)

Autor: EInvoiceMY
Fecha: 2025-11-17
"""

from app.shared.config import get_settings, setup_logging

from .db import (
    engine,
    SessionLocal,
    Base,
    get_async_session,
    session_scope,
    check_database_health,
    create_all_tables,
    import_all_models,
)

__all__ = [
    "get_settings",
    "setup_logging",
    "engine",
    "SessionLocal",
    "Base",
    "get_async_session",
    "session_scope",
    "check_database_health",
    "create_all_tables",
    "import_all_models",
]

# Fin del archivo backend/app/core/__init__.py
