# -*- coding: utf-8 -*-
"""
backend/app/modules/lhdn/routes/__init__.py

Router del módulo LHDN (prefijo /lhdn).
"""

from fastapi import APIRouter

from .lhdn_routes import router as lhdn_router

router = APIRouter(prefix="/lhdn", tags=["lhdn"])
router.include_router(lhdn_router)

__all__ = ["router"]
