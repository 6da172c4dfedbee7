# -*- coding: utf-8 -*-
"""
backend/app/modules/ocr/routes/__init__.py

Router del módulo OCR. El prefijo /uploads lo declara el subrouter,
que expone la carga multipart en la ruta raíz del prefijo.
"""

from fastapi import APIRouter

from .upload_routes import router as upload_router

router = APIRouter()
router.include_router(upload_router)

__all__ = ["router"]
