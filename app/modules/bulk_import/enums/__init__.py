# -*- coding: utf-8 -*-
"""
backend/app/modules/bulk_import/enums/__init__.py
"""

from .bulk_import_enums import BulkImportSource, BulkImportStatus

__all__ = ["BulkImportSource", "BulkImportStatus"]
