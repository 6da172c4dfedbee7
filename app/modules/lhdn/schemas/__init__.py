# -*- coding: utf-8 -*-
"""
backend/app/modules/lhdn/schemas/__init__.py
"""

from .lhdn_api_schemas import (
    LhdnTokenResponse,
    LhdnDocumentError,
    LhdnAcceptedDocument,
    LhdnRejectedDocument,
    LhdnSubmitResponse,
    LhdnDocumentSummary,
    LhdnSubmissionStatusResponse,
    LhdnCancelResponse,
)
from .submission_schemas import (
    SubmitInvoiceOut,
    PollStatusOut,
    CancelInvoiceIn,
    CancelInvoiceOut,
    SubmissionRead,
    SubmissionListResponse,
)

__all__ = [
    "LhdnTokenResponse",
    "LhdnDocumentError",
    "LhdnAcceptedDocument",
    "LhdnRejectedDocument",
    "LhdnSubmitResponse",
    "LhdnDocumentSummary",
    "LhdnSubmissionStatusResponse",
    "LhdnCancelResponse",
    "SubmitInvoiceOut",
    "PollStatusOut",
    "CancelInvoiceIn",
    "CancelInvoiceOut",
    "SubmissionRead",
    "SubmissionListResponse",
]
