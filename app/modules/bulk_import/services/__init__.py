# -*- coding: utf-8 -*-
"""
backend/app/modules/bulk_import/services/__init__.py
"""

from .csv_parser import EXPECTED_COLUMNS, CSV_COLUMNS, ParsedRow, parse_csv_rows

__all__ = ["EXPECTED_COLUMNS", "CSV_COLUMNS", "ParsedRow", "parse_csv_rows"]
