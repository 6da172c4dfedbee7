# -*- coding: utf-8 -*-
"""
backend/app/modules/lhdn/enums/__init__.py
"""

from .submission_status_enum import SubmissionStatus, LhdnDocumentStatus

__all__ = ["SubmissionStatus", "LhdnDocumentStatus"]
