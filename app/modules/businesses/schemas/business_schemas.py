# -*- coding: utf-8 -*-
"""
backend/app/modules/businesses/schemas/business_schemas.py

Esquemas Pydantic del perfil de negocio.
Las credenciales LHDN nunca se devuelven; solo si están configuradas.

Autor: EInvoiceMY
Fecha: 2025-11-07
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from app.shared.utils.base_models import UTF8SafeModel


class BusinessRead(UTF8SafeModel):
    id: UUID
    name: str
    tin: str
    registration_number: Optional[str] = None
    msic_code: Optional[str] = None
    sst_registration_number: Optional[str] = None
    address_line0: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    postal_zone: Optional[str] = None
    city_name: Optional[str] = None
    state_code: Optional[str] = None
    country_code: str = "MYS"
    email: Optional[str] = None
    phone: Optional[str] = None
    has_lhdn_credentials: bool = False
    is_active: bool = True
    created_at: datetime
    updated_at: datetime


class LhdnCredentialsIn(UTF8SafeModel):
    client_id: str = Field(..., min_length=1, max_length=255)
    client_secret: str = Field(..., min_length=1, max_length=255)


class LhdnCredentialsStatus(UTF8SafeModel):
    business_id: UUID
    has_lhdn_credentials: bool


__all__ = ["BusinessRead", "LhdnCredentialsIn", "LhdnCredentialsStatus"]

# Fin del archivo backend/app/modules/businesses/schemas/business_schemas.py
