# -*- coding: utf-8 -*-
"""
backend/app/modules/bulk_import/jobs/__init__.py
"""

from .csv_import_consumer import handle_csv_import_batch

__all__ = ["handle_csv_import_batch"]
