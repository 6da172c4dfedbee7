# -*- coding: utf-8 -*-
"""
backend/app/modules/ocr/models/__init__.py
"""

from .ocr_document_models import OcrDocument

__all__ = ["OcrDocument"]
