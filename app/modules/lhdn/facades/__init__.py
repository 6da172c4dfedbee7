# -*- coding: utf-8 -*-
"""
backend/app/modules/lhdn/facades/__init__.py

Fachadas del módulo LHDN (envío, consulta, cancelación, auditoría).
"""

from .submission_facade import (
    submit_invoice,
    poll_status,
    cancel_invoice,
    list_submissions,
    DEFAULT_CANCEL_REASON,
)

__all__ = [
    "submit_invoice",
    "poll_status",
    "cancel_invoice",
    "list_submissions",
    "DEFAULT_CANCEL_REASON",
]
