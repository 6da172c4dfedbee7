# -*- coding: utf-8 -*-
"""
backend/app/modules/ocr/facades/__init__.py

Fachadas del módulo OCR: confirmación de cargas y pipeline de extracción.
"""

from .pipeline_facade import OcrJob, OcrPipelineSummary, run_ocr_pipeline
from .upload_facade import detect_file_type, build_upload_key, confirm_upload, upload_document
from .document_query_facade import get_ocr_document

__all__ = [
    "OcrJob",
    "OcrPipelineSummary",
    "run_ocr_pipeline",
    "detect_file_type",
    "build_upload_key",
    "confirm_upload",
    "upload_document",
    "get_ocr_document",
]
