# -*- coding: utf-8 -*-
"""
backend/app/modules/businesses/models/business_models.py

Modelo ORM para la tabla businesses (perfil fiscal del emisor).

El perfil alimenta al constructor UBL como proveedor por defecto y guarda
las credenciales LHDN (client_id / client_secret) cifradas con AES-GCM.

Autor: EInvoiceMY
Fecha: 2025-10-29
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, UTCDateTime, now_utc


class Business(Base):
    """Negocio emisor de facturas."""

    __tablename__ = "businesses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    tin: Mapped[str] = mapped_column(String(32), nullable=False, doc="Tax Identification Number (LHDN).")
    registration_number: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, doc="Número SSM/BRN.")
    msic_code: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    sst_registration_number: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    address_line0: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    address_line1: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    address_line2: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    postal_zone: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    city_name: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    state_code: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    country_code: Mapped[str] = mapped_column(String(3), nullable=False, default="MYS")
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    # Credenciales LHDN cifradas (base64 de iv + ciphertext)
    lhdn_client_id_encrypted: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    lhdn_client_secret_encrypted: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=now_utc)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=now_utc, onupdate=now_utc)

    @property
    def has_lhdn_credentials(self) -> bool:
        return bool(self.lhdn_client_id_encrypted and self.lhdn_client_secret_encrypted)

    def __repr__(self) -> str:
        return f"<Business id={self.id} tin={self.tin} active={self.is_active}>"


__all__ = ["Business"]

# Fin del archivo backend/app/modules/businesses/models/business_models.py
