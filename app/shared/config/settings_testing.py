# -*- coding: utf-8 -*-
"""
backend/app/shared/config/settings_testing.py

Overrides para entorno de PRUEBAS (test) usando Pydantic v2.
Busca ser determinista y seguro: logging moderado, SQLite en memoria
y llaves dummy para cifrado y JWT.

Autor: EInvoiceMY
Fecha: 24/10/2025
"""

from pydantic import SecretStr
from pydantic_settings import SettingsConfigDict

from .settings_base import BaseAppSettings


class EnvTestingSettings(BaseAppSettings):
    # --- Identidad de entorno ---
    python_env: str = "test"

    # --- Logging en test: menos ruido ---
    log_level: str = "WARNING"
    log_format: str = "pretty"

    # --- Base de datos aislada ---
    db_url: str = "sqlite+aiosqlite:///:memory:"

    # --- Llaves dummy ---
    jwt_secret_key: SecretStr = SecretStr("test-secret-for-einvoice-suite-please-change")
    encryption_key: SecretStr = SecretStr("00112233445566778899aabbccddeeff00112233445566778899aabbccddeeff")

    lhdn_env: str = "sandbox"

    # --- Las pruebas drenan las colas explícitamente ---
    queue_consumers_enabled: bool = False

    model_config = SettingsConfigDict(
        env_file=".env.test",
        env_file_encoding="utf-8",
        extra="ignore",
    )


__all__ = ["EnvTestingSettings"]
# Fin del archivo backend/app/shared/config/settings_testing.py
