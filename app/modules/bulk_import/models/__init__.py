# -*- coding: utf-8 -*-
"""
backend/app/modules/bulk_import/models/__init__.py
"""

from .bulk_import_models import BulkImport, BulkImportInvoice

__all__ = ["BulkImport", "BulkImportInvoice"]
