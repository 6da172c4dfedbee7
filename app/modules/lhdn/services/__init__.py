# -*- coding: utf-8 -*-
"""
backend/app/modules/lhdn/services/__init__.py

Servicios LHDN: cliente HTTP, caché de tokens, UBL y preparación del documento.
"""

from .api_client import LhdnApiClient, get_lhdn_base_url, LHDN_BASE_URLS
from .token_cache import TokenCache
from .ubl_builder import build_party, build_ubl_invoice
from .document_signer import (
    PreparedDocument,
    prepare_document,
    build_submission_payload,
    serialize_document,
)

__all__ = [
    "LhdnApiClient",
    "get_lhdn_base_url",
    "LHDN_BASE_URLS",
    "TokenCache",
    "build_party",
    "build_ubl_invoice",
    "PreparedDocument",
    "prepare_document",
    "build_submission_payload",
    "serialize_document",
]
