# -*- coding: utf-8 -*-
"""
backend/app/routes/health_routes.py

Health checks del backend:
- /health: estado general con verificación de base de datos
- /api/health/live: liveness (sin dependencias)
- /api/health/ready: readiness (base de datos + recursos globales)

Autor: EInvoiceMY
Fecha: 2025-11-14
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.core import check_database_health, get_settings
from app.shared.core import resources
from app.shared.database.base import now_utc

router = APIRouter()


@router.get(
    "/health",
    summary="Health check del backend",
    description="Estado básico del backend con verificación simple de conectividad a la base de datos.",
)
async def health_check() -> dict:
    settings = get_settings()

    db_ok = await check_database_health(timeout_s=2.0)

    return {
        "status": "ok" if db_ok else "degraded",
        "timestamp": now_utc().isoformat(),
        "environment": settings.python_env,
        "database": {
            "reachable": db_ok,
        },
        "service": {
            "name": settings.app_name,
            "version": settings.app_version,
        },
    }


@router.get("/api/health/live", summary="Liveness probe")
async def liveness() -> dict:
    return {"status": "alive"}


@router.get("/api/health/ready", summary="Readiness probe")
async def readiness():
    """Listo cuando la base responde y los recursos globales están inicializados."""
    db_ok = await check_database_health(timeout_s=2.0)
    ready = db_ok and resources.initialized
    body = {
        "status": "ready" if ready else "not_ready",
        "database": db_ok,
        "resources": resources.initialized,
    }
    return JSONResponse(status_code=200 if ready else 503, content=body)

# Fin del archivo backend/app/routes/health_routes.py
