# -*- coding: utf-8 -*-
"""
backend/app/routes/master_routes.py

Router maestro de la API (/api/...).

Monta los routers de los módulos de dominio:
- businesses: perfil del negocio y credenciales LHDN
- invoices: CRUD y ciclo de vida de facturas
- uploads: carga de documentos y pipeline OCR
- lhdn: envío, consulta y cancelación ante MyInvois
- bulk-imports: sesiones de documentos e importación CSV

Autor: EInvoiceMY
Fecha: 2025-11-14
"""
from __future__ import annotations

import logging

from fastapi import APIRouter

from app.modules.bulk_import.routes import router as bulk_import_router
from app.modules.businesses.routes import router as businesses_router
from app.modules.invoices.routes import router as invoices_router
from app.modules.lhdn.routes import router as lhdn_router
from app.modules.ocr.routes import router as uploads_router

logger = logging.getLogger(__name__)

api = APIRouter(prefix="/api")

_loaded: list[str] = []  # trazabilidad/debug


def _include(target: APIRouter, router: APIRouter, name: str) -> None:
    """Incluye un router en la capa dada y registra trazabilidad en logs."""
    target.include_router(router)
    _loaded.append(f"{target.prefix or '/'}:{name}")
    logger.info(
        "✅ Router '%s' montado en prefix '%s' (router.prefix='%s')",
        name,
        target.prefix or "/",
        getattr(router, "prefix", ""),
    )


_include(api, businesses_router, "businesses")
_include(api, invoices_router, "invoices")
_include(api, uploads_router, "uploads")
_include(api, lhdn_router, "lhdn")
_include(api, bulk_import_router, "bulk_import")


def loaded_routers() -> list[str]:
    return list(_loaded)


__all__ = ["api", "loaded_routers"]

# Fin del archivo backend/app/routes/master_routes.py
