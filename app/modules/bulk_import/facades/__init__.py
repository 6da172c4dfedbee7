# -*- coding: utf-8 -*-
"""
backend/app/modules/bulk_import/facades/__init__.py

Fachadas de importación masiva.
"""

from .session_facade import (
    SessionWithInvoices,
    compute_session_stats,
    get_owned_import,
    create_document_session,
    add_invoice_to_session,
    get_session_with_invoices,
    get_ready_invoice_ids,
    submit_ready,
)
from .csv_import_facade import CsvImportJob, start_csv_import, process_csv_import
from .import_query_facade import list_imports, get_import_status

__all__ = [
    "SessionWithInvoices",
    "compute_session_stats",
    "get_owned_import",
    "create_document_session",
    "add_invoice_to_session",
    "get_session_with_invoices",
    "get_ready_invoice_ids",
    "submit_ready",
    "CsvImportJob",
    "start_csv_import",
    "process_csv_import",
    "list_imports",
    "get_import_status",
]
