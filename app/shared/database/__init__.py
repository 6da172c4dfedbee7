# -*- coding: utf-8 -*-
"""
backend/app/shared/database/__init__.py

Re-exporta utilidades comunes de base de datos.

Autor: EInvoiceMY
Fecha: 2025-10-18 (Consolidación modular; ajustado 2025-11-21)
"""

from __future__ import annotations

from .database import (
    engine,
    SessionLocal,
    get_async_session,
    session_scope,
    check_database_health,
)
from .base import Base, NAMING_CONVENTION, enum_column, MoneyString, JsonDocument, UTCDateTime, now_utc
from .repository import BaseRepository
from .transactions import commit_or_raise

__all__ = [
    "engine",
    "SessionLocal",
    "Base",
    "NAMING_CONVENTION",
    "enum_column",
    "MoneyString",
    "JsonDocument",
    "UTCDateTime",
    "now_utc",
    "BaseRepository",
    "commit_or_raise",
    "get_async_session",
    "session_scope",
    "check_database_health",
]

# Fin del archivo backend/app/shared/database/__init__.py
