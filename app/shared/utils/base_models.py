# -*- coding: utf-8 -*-
"""
backend/app/shared/utils/base_models.py

Modelo base personalizado para Pydantic en el backend de e-Invoice.

Incluye:
- Eliminación automática de espacios en campos de texto (`str_strip_whitespace = True`)
- Modo de atributos activado para compatibilidad con ORM (`from_attributes = True`)
- Configuración para Pydantic v2
- Reexportación de utilidades comunes: `EmailStr` y `Field`

Este modelo debe usarse como base para los esquemas de request/response de la API.

Autor: EInvoiceMY
Fecha: 31/05/2025
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UTF8SafeModel(BaseModel):
    """Modelo base para esquemas de la API (ORM-friendly, strings recortados)."""
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


__all__ = ["UTF8SafeModel", "EmailStr", "Field"]
# Fin del archivo backend/app/shared/utils/base_models.py
