# -*- coding: utf-8 -*-
"""
backend/app/modules/businesses/routes/__init__.py

Router del módulo de negocios (prefijo /businesses).
"""

from fastapi import APIRouter

from .business_routes import router as business_router

router = APIRouter(prefix="/businesses", tags=["businesses"])
router.include_router(business_router)

__all__ = ["router"]
