# -*- coding: utf-8 -*-
"""
backend/app/modules/lhdn/services/document_signer.py

Preparación del documento para el envío a MyInvois:
- document: base64 del JSON UTF-8
- documentHash: SHA-256 de esos mismos bytes, en base64
- codeNumber: número de la factura

En sandbox LHDN no valida el bloque de firma digital; el hash cubre
la integridad del contenido.

Autor: EInvoiceMY
Fecha: 2025-11-12
"""

from __future__ import annotations

import base64
import hashlib
import json
from dataclasses import dataclass
from typing import Any, Dict, List


@dataclass(frozen=True)
class PreparedDocument:
    document: str
    document_hash: str
    code_number: str

    def to_submission_entry(self) -> Dict[str, str]:
        return {
            "format": "JSON",
            "document": self.document,
            "documentHash": self.document_hash,
            "codeNumber": self.code_number,
        }


def serialize_document(ubl_document: Dict[str, Any]) -> bytes:
    return json.dumps(ubl_document, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def prepare_document(ubl_document: Dict[str, Any], code_number: str) -> PreparedDocument:
    raw = serialize_document(ubl_document)
    return PreparedDocument(
        document=base64.b64encode(raw).decode("ascii"),
        document_hash=base64.b64encode(hashlib.sha256(raw).digest()).decode("ascii"),
        code_number=code_number,
    )


def build_submission_payload(documents: List[PreparedDocument]) -> Dict[str, Any]:
    return {"documents": [doc.to_submission_entry() for doc in documents]}


__all__ = ["PreparedDocument", "serialize_document", "prepare_document", "build_submission_payload"]

# Fin del archivo backend/app/modules/lhdn/services/document_signer.py
