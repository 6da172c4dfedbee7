# -*- coding: utf-8 -*-
"""
backend/app/modules/lhdn/models/lhdn_models.py

Modelos ORM de la integración LHDN:

- LhdnSubmission: una fila por intento de envío. Se inserta en PENDING
  antes de la llamada de red; después solo cambia de estado. Nunca se borra.
  La más reciente por created_at es el envío vigente de la factura.
- LhdnToken: token bearer cacheado por negocio (una fila por negocio).
  expires_at ya incluye el margen de seguridad restado al escribir.

Autor: EInvoiceMY
Fecha: 2025-11-12
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, JsonDocument, UTCDateTime, enum_column, now_utc
from app.modules.lhdn.enums import SubmissionStatus


class LhdnSubmission(Base):
    """Registro de auditoría de un envío a LHDN."""

    __tablename__ = "lhdn_submissions"
    __table_args__ = (
        Index("ix_lhdn_submissions_invoice_created", "invoice_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    invoice_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False
    )
    business_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True
    )

    submission_uid: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    document_uuid: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    submission_payload: Mapped[Optional[dict[str, Any]]] = mapped_column(JsonDocument, nullable=True)
    response_payload: Mapped[Optional[dict[str, Any]]] = mapped_column(JsonDocument, nullable=True)

    status: Mapped[SubmissionStatus] = mapped_column(
        enum_column(SubmissionStatus), nullable=False, default=SubmissionStatus.PENDING
    )
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    submitted_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    validated_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=now_utc)

    def __repr__(self) -> str:
        return f"<LhdnSubmission id={self.id} invoice_id={self.invoice_id} status={self.status}>"


class LhdnToken(Base):
    """Token de acceso LHDN cifrado, uno por negocio."""

    __tablename__ = "lhdn_tokens"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    business_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    access_token_encrypted: Mapped[str] = mapped_column(Text, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=now_utc)

    def __repr__(self) -> str:
        return f"<LhdnToken business_id={self.business_id} expires_at={self.expires_at}>"


__all__ = ["LhdnSubmission", "LhdnToken"]

# Fin del archivo backend/app/modules/lhdn/models/lhdn_models.py
