# -*- coding: utf-8 -*-
"""
backend/app/shared/config/settings_base.py

Base de configuración (Pydantic v2) para el backend de e-Invoice.
- Esta clase NO instancia singletons ni resuelve .env; eso lo hace config_loader.
- Es la base para settings_dev.py, settings_testing.py y settings_prod.py.

Autor: EInvoiceMY
Fecha: 24/10/2025
"""

from typing import Literal, Optional
from pydantic import Field, SecretStr, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Tipos de entorno soportados
EnvName = Literal["development", "test", "production"]

# Endpoints públicos de MyInvois por ambiente
LHDN_BASE_URLS = {
    "sandbox": "https://preprod-api.myinvois.hasil.gov.my",
    "production": "https://api.myinvois.hasil.gov.my",
}


class BaseAppSettings(BaseSettings):
    # =========================
    # Núcleo de la aplicación
    # =========================
    python_env: EnvName = Field(default="development", validation_alias="PYTHON_ENV")
    app_name: str = Field(default="EInvoiceMY", validation_alias="APP_NAME")
    app_version: str = Field(default="0.1.0", validation_alias="APP_VERSION")
    app_host: str = Field(default="0.0.0.0", validation_alias="APP_HOST")
    app_port: int = Field(default=8000, validation_alias="APP_PORT")
    debug: bool = Field(default=False, validation_alias="DEBUG")

    # =========================
    # Base de datos (PostgreSQL)
    # =========================
    db_user: str = Field(default="postgres", validation_alias="DB_USER")
    db_password: SecretStr = Field(default=SecretStr("postgres"), validation_alias="DB_PASSWORD")
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=5432, validation_alias="DB_PORT")
    db_name: str = Field(default="einvoice", validation_alias="DB_NAME")
    db_pool_size: int = Field(default=5, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=5, validation_alias="DB_MAX_OVERFLOW")
    db_pool_pre_ping: bool = Field(default=True, validation_alias="DB_POOL_PRE_PING")
    db_echo_sql: bool = Field(default=False, validation_alias="DB_ECHO_SQL")
    db_url: Optional[str] = Field(default=None, validation_alias="DB_URL")

    @computed_field  # type: ignore[misc]
    @property
    def database_url(self) -> str:
        """
        Genera la URL de conexión completa para SQLAlchemy async.
        Prioriza DB_URL si existe, sino construye desde componentes individuales.
        """
        from urllib.parse import quote_plus

        if self.db_url:
            url = self.db_url
            if url.startswith("sqlite"):
                return url
            return (
                url.replace("postgres://", "postgresql+asyncpg://")
                   .replace("postgresql://", "postgresql+asyncpg://")
            )

        pw = quote_plus(self.db_password.get_secret_value())
        return (
            f"postgresql+asyncpg://{self.db_user}:{pw}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    # =========================
    # CORS / Frontend
    # =========================
    allowed_origins: str = Field(default="*", validation_alias="CORS_ORIGINS")

    # =========================
    # Auth (contexto del bearer token)
    # =========================
    jwt_secret_key: SecretStr = Field(default=SecretStr("please-change-me"), validation_alias="JWT_SECRET_KEY")
    jwt_algorithm: Literal["HS256", "RS256"] = Field(default="HS256", validation_alias="JWT_ALGORITHM")

    # =========================
    # Cifrado en reposo (AES-256-GCM, llave hex de 32 bytes)
    # =========================
    encryption_key: SecretStr = Field(default=SecretStr(""), validation_alias="ENCRYPTION_KEY")

    # =========================
    # LHDN MyInvois
    # =========================
    lhdn_env: Literal["sandbox", "production"] = Field(default="sandbox", validation_alias="LHDN_ENV")
    lhdn_timeout_sec: float = Field(default=30.0, validation_alias="LHDN_TIMEOUT_SEC")
    lhdn_token_buffer_sec: int = Field(default=60, validation_alias="LHDN_TOKEN_BUFFER_SEC")

    # =========================
    # Inferencia IA (OCR visión + extracción estructurada)
    # =========================
    ai_base_url: str = Field(default="https://api.cloudflare.com/client/v4", validation_alias="AI_BASE_URL")
    ai_account_id: Optional[str] = Field(default=None, validation_alias="AI_ACCOUNT_ID")
    ai_api_token: SecretStr = Field(default=SecretStr(""), validation_alias="AI_API_TOKEN")
    ai_extraction_model: str = Field(
        default="@cf/meta/llama-3.3-70b-instruct-fp8-fast",
        validation_alias="AI_EXTRACTION_MODEL",
    )
    ai_vision_model: str = Field(
        default="@cf/meta/llama-3.2-11b-vision-instruct",
        validation_alias="AI_VISION_MODEL",
    )
    ai_timeout_sec: float = Field(default=120.0, validation_alias="AI_TIMEOUT_SEC")

    # =========================
    # Archivos, importaciones y colas
    # =========================
    max_upload_size_mb: int = Field(default=10, validation_alias="MAX_UPLOAD_SIZE_MB")
    max_csv_size_mb: int = Field(default=5, validation_alias="MAX_CSV_SIZE_MB")
    max_csv_rows: int = Field(default=500, validation_alias="MAX_CSV_ROWS")
    ocr_queue_max_retries: int = Field(default=3, validation_alias="OCR_QUEUE_MAX_RETRIES")
    csv_queue_max_retries: int = Field(default=3, validation_alias="CSV_QUEUE_MAX_RETRIES")
    # Vacío -> blob store en memoria (desarrollo / pruebas)
    blob_storage_dir: Optional[str] = Field(default=None, validation_alias="BLOB_STORAGE_DIR")
    # Consumidores de colas en proceso (OCR + CSV)
    queue_consumers_enabled: bool = Field(default=True, validation_alias="QUEUE_CONSUMERS_ENABLED")
    queue_poll_interval_sec: float = Field(default=1.0, validation_alias="QUEUE_POLL_INTERVAL_SEC")
    # Crear tablas al arrancar (desarrollo local sin migraciones)
    db_auto_create: bool = Field(default=False, validation_alias="DB_AUTO_CREATE")

    # Paginación
    page_size_default: int = Field(20, validation_alias="DEFAULT_PAGE_SIZE")
    page_size_max: int = Field(100, validation_alias="MAX_PAGE_SIZE")

    # =========================
    # Observabilidad / Logging
    # =========================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: Literal["json", "pretty", "plain"] = Field(default="pretty", validation_alias="LOG_FORMAT")

    # ===== Helpers de entorno =====
    @computed_field  # type: ignore[misc]
    @property
    def is_dev(self) -> bool:
        return self.python_env == "development"

    @computed_field  # type: ignore[misc]
    @property
    def is_test(self) -> bool:
        return self.python_env == "test"

    @computed_field  # type: ignore[misc]
    @property
    def is_prod(self) -> bool:
        return self.python_env == "production"

    @computed_field  # type: ignore[misc]
    @property
    def lhdn_base_url(self) -> str:
        """URL base de MyInvois según LHDN_ENV."""
        return LHDN_BASE_URLS[self.lhdn_env]

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    @property
    def max_csv_size_bytes(self) -> int:
        return self.max_csv_size_mb * 1024 * 1024

    # ===== Utilidad para normalizar CORS =====
    def get_cors_origins(self) -> list[str]:
        """Convierte allowed_origins en lista procesable para CORS middleware."""
        if not self.allowed_origins or self.allowed_origins == "*":
            return ["*"]
        return [o.strip().strip('"').strip("'") for o in self.allowed_origins.split(",") if o.strip()]

    def _security_checks(self) -> None:
        """
        Validaciones mínimas de seguridad y coherencia.
        Se invoca desde config_loader tras instanciar el settings.
        """
        import logging
        logger = logging.getLogger(__name__)

        if self.is_prod:
            jwt_key = self.jwt_secret_key.get_secret_value()
            if not jwt_key or jwt_key == "please-change-me" or len(jwt_key) < 32:
                raise ValueError("JWT_SECRET_KEY debe tener ≥32 caracteres en producción")
            if len(self.encryption_key.get_secret_value()) != 64:
                raise ValueError("ENCRYPTION_KEY debe ser una llave hex de 32 bytes en producción")
            if not self.ai_api_token.get_secret_value():
                raise ValueError("AI_API_TOKEN es requerido en producción")

        if self.is_dev:
            if not self.encryption_key.get_secret_value():
                logger.info("ℹ️ ENCRYPTION_KEY vacío - las credenciales LHDN no podrán cifrarse")
            if not self.ai_api_token.get_secret_value():
                logger.info("ℹ️ AI_API_TOKEN vacío - el pipeline OCR no podrá invocar el modelo")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


__all__ = ["BaseAppSettings", "EnvName", "LHDN_BASE_URLS"]
# Fin del archivo backend/app/shared/config/settings_base.py
