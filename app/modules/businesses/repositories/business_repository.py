# -*- coding: utf-8 -*-
"""
backend/app/modules/businesses/repositories/business_repository.py

Repositorio de negocios.

Autor: EInvoiceMY
Fecha: 2025-10-29
"""

from app.modules.businesses.models import Business
from app.shared.database.repository import BaseRepository


class BusinessRepository(BaseRepository[Business]):
    def __init__(self) -> None:
        super().__init__(Business)


__all__ = ["BusinessRepository"]

# Fin del archivo backend/app/modules/businesses/repositories/business_repository.py
