# -*- coding: utf-8 -*-
"""
backend/app/shared/database/base.py

Base declarativa y convención de nombres para modelos ORM.

Este módulo proporciona:
- Base: clase base declarativa de SQLAlchemy
- NAMING_CONVENTION: convención de nombres para constraints
- enum_column: helper genérico para mapear StrEnum de Python a columnas
- MoneyString: tipo de columna para montos decimales en texto
- JsonDocument / UTCDateTime: tipos portables PostgreSQL / SQLite
- now_utc: reloj UTC usado por defaults y fachadas

Autor: EInvoiceMY
Fecha: 2025-10-18 (ajustado 2025-11-21)
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Type

from sqlalchemy import JSON, DateTime, Enum as SAEnum, MetaData, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator

# ===== NAMING CONVENTION =====
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


# ===== BASE DECLARATIVA =====
class Base(DeclarativeBase):
    """
    Base declarativa para todos los modelos ORM.
    Incluye convención de nombres para constraints.
    """
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


# ===== HELPER GENÉRICO PARA ENUMS =====
def enum_column(enum_cls: Type[Enum], name: str | None = None) -> SAEnum:
    """
    Devuelve un tipo Enum de SQLAlchemy basado en un Enum de Python,
    persistiendo los *valores* (no los nombres de miembro).

    Uso típico:

        from app.shared.database.base import Base, enum_column
        from .enums import InvoiceStatus

        class Invoice(Base):
            status: Mapped[InvoiceStatus] = mapped_column(
                enum_column(InvoiceStatus),
                nullable=False,
            )

    - Si no se pasa `name`, intenta usar `__pg_enum_name__` del enum,
      o el nombre de la clase en minúsculas.
    - native_enum=False: se guarda como VARCHAR + CHECK, portable a SQLite.
    """
    enum_name = name or getattr(enum_cls, "__pg_enum_name__", enum_cls.__name__.lower())

    def _values(_: object) -> list[str]:
        return [e.value for e in enum_cls]  # type: ignore[arg-type]

    return SAEnum(
        enum_cls,
        name=enum_name,
        native_enum=False,
        validate_strings=True,
        values_callable=_values,
        length=32,
    )


# Montos monetarios: texto decimal con 2 decimales fijos ("1234.50")
MoneyString = String(32)

# Documentos JSON: JSONB en PostgreSQL, JSON genérico en otros dialectos
JsonDocument = JSON().with_variant(JSONB(), "postgresql")


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    DateTime que siempre devuelve valores con tzinfo=UTC.

    SQLite no conserva la zona horaria; sin esto las comparaciones
    contra datetime.now(timezone.utc) fallarían con TypeError.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


__all__ = [
    "Base",
    "NAMING_CONVENTION",
    "enum_column",
    "MoneyString",
    "JsonDocument",
    "UTCDateTime",
    "now_utc",
]

# Fin del archivo backend/app/shared/database/base.py
