# -*- coding: utf-8 -*-
"""
backend/app/modules/ocr/jobs/__init__.py
"""

from .ocr_queue_consumer import handle_ocr_batch

__all__ = ["handle_ocr_batch"]
