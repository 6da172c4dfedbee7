# -*- coding: utf-8 -*-
"""
backend/app/modules/invoices/routes/__init__.py

Router del módulo de facturas.

Cada subrouter declara su propio prefijo /invoices: el listado vive en
la ruta raíz del prefijo ("") y FastAPI no admite incluir una ruta vacía
en un router sin prefijo.
"""

from fastapi import APIRouter

from .invoices_crud import router as crud_router
from .invoices_lifecycle import router as lifecycle_router

router = APIRouter()
router.include_router(crud_router)
router.include_router(lifecycle_router)

__all__ = ["router"]
