# -*- coding: utf-8 -*-
"""
backend/app/modules/bulk_import/routes/__init__.py

Router de importación masiva. El prefijo /bulk-imports lo declara el
subrouter, que expone el listado en la ruta raíz del prefijo.
"""

from fastapi import APIRouter

from .bulk_import_routes import router as bulk_import_router

router = APIRouter()
router.include_router(bulk_import_router)

__all__ = ["router"]
