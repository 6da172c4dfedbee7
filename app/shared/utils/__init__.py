# -*- coding: utf-8 -*-
"""
backend/app/shared/utils/__init__.py

Exportación de utilidades comunes.

Autor: EInvoiceMY
Fecha: 2025-11-07
"""

from .base_models import UTF8SafeModel, EmailStr, Field
from .json_response import UTF8JSONResponse

__all__ = [
    "UTF8SafeModel",
    "EmailStr",
    "Field",
    "UTF8JSONResponse",
]

# Fin del archivo backend/app/shared/utils/__init__.py
