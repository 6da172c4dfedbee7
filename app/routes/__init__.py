# -*- coding: utf-8 -*-
"""
backend/app/routes/__init__.py

Ensamblador principal de ruteadores del backend.

Responsabilidades:
- Incluir el router de health (/health, /api/health/*).
- Reutilizar la capa `api` definida en master_routes.py.

Autor: EInvoiceMY
Fecha: 2025-11-14
"""

from fastapi import APIRouter

from .health_routes import router as health_router
from .master_routes import api

router = APIRouter()

router.include_router(health_router)
router.include_router(api)

__all__ = ["router"]

# Fin del archivo backend/app/routes/__init__.py
