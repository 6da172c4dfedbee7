# -*- coding: utf-8 -*-
"""
backend/app/modules/lhdn/schemas/lhdn_api_schemas.py

Respuestas de la API MyInvois (camelCase en el cable, snake_case en Python).

extra="allow": los campos que LHDN agregue se conservan en model_dump()
y llegan intactos al payload de auditoría.

Autor: EInvoiceMY
Fecha: 2025-11-12
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _LhdnModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def to_payload(self) -> dict:
        """Dict con las llaves originales del cable."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class LhdnTokenResponse(_LhdnModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int


class LhdnDocumentError(_LhdnModel):
    code: Optional[str] = None
    message: Optional[str] = None


class LhdnAcceptedDocument(_LhdnModel):
    uuid: str
    invoice_code_number: Optional[str] = Field(None, alias="invoiceCodeNumber")


class LhdnRejectedDocument(_LhdnModel):
    invoice_code_number: Optional[str] = Field(None, alias="invoiceCodeNumber")
    error: Optional[LhdnDocumentError] = None


class LhdnSubmitResponse(_LhdnModel):
    submission_uid: Optional[str] = Field(None, alias="submissionUid")
    accepted_documents: List[LhdnAcceptedDocument] = Field(default_factory=list, alias="acceptedDocuments")
    rejected_documents: List[LhdnRejectedDocument] = Field(default_factory=list, alias="rejectedDocuments")


class LhdnDocumentSummary(_LhdnModel):
    uuid: Optional[str] = None
    submission_uid: Optional[str] = Field(None, alias="submissionUid")
    long_id: Optional[str] = Field(None, alias="longId")
    internal_id: Optional[str] = Field(None, alias="internalId")
    type_name: Optional[str] = Field(None, alias="typeName")
    status: str
    date_time_received: Optional[str] = Field(None, alias="dateTimeReceived")
    date_time_validated: Optional[str] = Field(None, alias="dateTimeValidated")
    date_time_delivered: Optional[str] = Field(None, alias="dateTimeDelivered")
    supplier_tin: Optional[str] = Field(None, alias="supplierTin")
    buyer_tin: Optional[str] = Field(None, alias="buyerTin")
    error: Optional[LhdnDocumentError] = None


class LhdnSubmissionStatusResponse(_LhdnModel):
    submission_uid: Optional[str] = Field(None, alias="submissionUid")
    document_count: Optional[int] = Field(None, alias="documentCount")
    date_time_received: Optional[str] = Field(None, alias="dateTimeReceived")
    overall_status: Optional[str] = Field(None, alias="overallStatus")
    document_summary: List[LhdnDocumentSummary] = Field(default_factory=list, alias="documentSummary")


class LhdnCancelResponse(_LhdnModel):
    uuid: Optional[str] = None
    status: Optional[str] = None


__all__ = [
    "LhdnTokenResponse",
    "LhdnDocumentError",
    "LhdnAcceptedDocument",
    "LhdnRejectedDocument",
    "LhdnSubmitResponse",
    "LhdnDocumentSummary",
    "LhdnSubmissionStatusResponse",
    "LhdnCancelResponse",
]

# Fin del archivo backend/app/modules/lhdn/schemas/lhdn_api_schemas.py
