# -*- coding: utf-8 -*-
"""
backend/app/shared/config/settings_prod.py

Overrides para entorno de PRODUCCIÓN usando Pydantic v2.
Forza lectura solo desde variables de entorno / secret stores,
activa logging estable (INFO en JSON) y defaults seguros.

Autor: EInvoiceMY
Fecha: 24/10/2025
"""

from typing import Literal
from .settings_base import BaseAppSettings
from pydantic_settings import SettingsConfigDict


class ProdSettings(BaseAppSettings):
    # --- Identidad de entorno ---
    python_env: Literal["development", "test", "production"] = "production"

    # --- Logging en prod: nivel estable y formato estructurado ---
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "pretty", "plain"] = "json"

    # --- LHDN: se define por env; por defecto producción real ---
    lhdn_env: Literal["sandbox", "production"] = "production"

    # Nota: _security_checks exigirá JWT fuerte, ENCRYPTION_KEY y AI_API_TOKEN.

    model_config = SettingsConfigDict(
        env_file=None,  # No leemos .env en producción
        extra="ignore",
    )


__all__ = ["ProdSettings"]
# Fin del archivo backend/app/shared/config/settings_prod.py
