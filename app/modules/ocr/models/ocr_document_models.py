# -*- coding: utf-8 -*-
"""
backend/app/modules/ocr/models/ocr_document_models.py

Modelo ORM de un archivo cargado y su intento de extracción.

- Se crea al confirmar la carga (PENDING)
- Solo el pipeline OCR lo modifica
- Nunca se borra: extracted_json guarda la salida de la IA tal cual (auditoría)

Autor: EInvoiceMY
Fecha: 2025-11-08
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import BigInteger, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, JsonDocument, MoneyString, UTCDateTime, enum_column, now_utc
from app.modules.ocr.enums import FileType, OcrStatus


class OcrDocument(Base):
    """Documento cargado para extracción OCR/IA."""

    __tablename__ = "ocr_documents"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    invoice_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("invoices.id", ondelete="SET NULL"), nullable=True, index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    business_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False, index=True
    )

    storage_key: Mapped[str] = mapped_column(String(512), nullable=False)
    original_filename: Mapped[str] = mapped_column(String(255), nullable=False)
    file_type: Mapped[FileType] = mapped_column(enum_column(FileType), nullable=False)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False)

    ocr_status: Mapped[OcrStatus] = mapped_column(
        enum_column(OcrStatus), nullable=False, default=OcrStatus.PENDING
    )
    raw_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    extracted_json: Mapped[Optional[dict[str, Any]]] = mapped_column(JsonDocument, nullable=True)
    confidence_score: Mapped[Optional[str]] = mapped_column(MoneyString, nullable=True)
    processing_error: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    processed_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=now_utc)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=now_utc, onupdate=now_utc)

    def __repr__(self) -> str:
        return f"<OcrDocument id={self.id} status={self.ocr_status} file={self.original_filename}>"


__all__ = ["OcrDocument"]

# Fin del archivo backend/app/modules/ocr/models/ocr_document_models.py
