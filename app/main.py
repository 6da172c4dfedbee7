# -*- coding: utf-8 -*-
"""
backend/app/main.py

Punto de entrada principal del backend EInvoiceMY.

Ajustes clave:
- Uso de app.core como fachada de configuración y base de datos.
- Logging configurado desde settings (LOG_LEVEL / LOG_FORMAT).
- Ciclo de vida: creación de tablas (solo DEV), recursos globales,
  consumidores de colas OCR/CSV y limpieza segura en shutdown.
- Health principal /health delegado al paquete app.routes (health_routes.py)
- CORS desde settings.get_cors_origins()

Autor: EInvoiceMY
Fecha: 2025-11-14
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

# ---------------------------------------------------------------------------
# Cargar .env ANTES de cualquier import que use os.getenv
# En PROD: override=False para respetar variables del entorno
# ---------------------------------------------------------------------------
from dotenv import load_dotenv

_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
_ENVIRONMENT = os.getenv("PYTHON_ENV", "development").strip().strip('"').strip("'").lower()
_override_env = _ENVIRONMENT == "development"
load_dotenv(dotenv_path=_ENV_PATH, override=_override_env)

import anyio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core import create_all_tables, get_settings, setup_logging
from app.routes import router as main_router
from app.shared.core import init_resources, resources, shutdown_all
from app.shared.core.queue_workers import start_queue_consumers, stop_queue_consumers
from app.shared.middleware import (
    JSONExceptionMiddleware,
    RequestLoggingMiddleware,
    register_exception_handlers,
)
from app.shared.utils.json_response import UTF8JSONResponse

settings = get_settings()
setup_logging(settings.log_level, settings.log_format)
logger = logging.getLogger(__name__)

logger.info(f"[dotenv] Loaded {_ENV_PATH} (override={_override_env}, PYTHON_ENV={_ENVIRONMENT})")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ────────── STARTUP ──────────
    if settings.db_auto_create:
        await create_all_tables()
        logger.info("🗄️ Tablas verificadas (db_auto_create)")

    init_resources(settings)

    if settings.queue_consumers_enabled:
        start_queue_consumers(resources, poll_interval=settings.queue_poll_interval_sec)
    else:
        logger.info("⚡ Consumidores de colas deshabilitados")

    logger.info("🟢 Backend de %s iniciado.", settings.app_name)
    try:
        yield
    finally:
        # ────────── SHUTDOWN ──────────
        logger.info("🔴 Iniciando shutdown ordenado...")
        with anyio.CancelScope(shield=True):
            try:
                await stop_queue_consumers(timeout=10.0)
                await shutdown_all()
            except Exception as e:
                logger.error(f"❌ Error durante shutdown ordenado: {e}")
        logger.info("🔴 Backend de %s apagado.", settings.app_name)


openapi_tags = [
    {"name": "businesses", "description": "Perfil del negocio y credenciales LHDN"},
    {"name": "invoices", "description": "Facturas: CRUD, totales y ciclo de vida"},
    {"name": "uploads", "description": "Carga de documentos y extracción OCR"},
    {"name": "lhdn", "description": "Envío, consulta y cancelación ante MyInvois"},
    {"name": "bulk-imports", "description": "Sesiones de documentos e importación CSV"},
]

app = FastAPI(
    title=f"{settings.app_name} API",
    description="API de facturación electrónica LHDN MyInvois",
    version=settings.app_version,
    lifespan=lifespan,
    openapi_tags=openapi_tags,
    default_response_class=UTF8JSONResponse,
)

# El orden real de ejecución de middlewares en Starlette es inverso al registro:
# CORS se registra al final para ejecutarse primero.
app.add_middleware(JSONExceptionMiddleware)
app.add_middleware(RequestLoggingMiddleware)

_cors_origins = settings.get_cors_origins()
_wildcard = _cors_origins == ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=not _wildcard,
    allow_methods=["*"] if _wildcard else ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["*"],
    max_age=600,
)
logger.info("🌐 CORS habilitado para %d origen(es)", len(_cors_origins))

register_exception_handlers(app)
app.include_router(main_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.app_host, port=settings.app_port, reload=settings.is_dev)

# Fin del archivo backend/app/main.py
