# -*- coding: utf-8 -*-
"""
backend/app/modules/bulk_import/repositories/__init__.py
"""

from .bulk_import_repository import BulkImportRepository

__all__ = ["BulkImportRepository"]
