# -*- coding: utf-8 -*-
"""
backend/app/modules/ocr/enums/__init__.py
"""

from .ocr_status_enum import OcrStatus
from .file_type_enum import FileType, ALLOWED_FILE_TYPES, IMAGE_FILE_TYPES

__all__ = ["OcrStatus", "FileType", "ALLOWED_FILE_TYPES", "IMAGE_FILE_TYPES"]
