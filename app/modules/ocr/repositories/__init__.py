# -*- coding: utf-8 -*-
"""
backend/app/modules/ocr/repositories/__init__.py
"""

from .ocr_document_repository import OcrDocumentRepository

__all__ = ["OcrDocumentRepository"]
