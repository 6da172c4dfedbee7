# -*- coding: utf-8 -*-
"""
backend/app/modules/ocr/services/text_extraction.py

Extracción de texto crudo por tipo de archivo:
- PDF: capa de texto página por página (pdfplumber)
- Imagen (jpg/jpeg/png): modelo de visión que devuelve el texto literal

El extractor se elige solo por la etiqueta de tipo.

Autor: EInvoiceMY
Fecha: 2025-11-09
"""

from __future__ import annotations

import asyncio
import base64
import io
import logging
from typing import Optional

import pdfplumber

from app.modules.ocr.enums import FileType, IMAGE_FILE_TYPES
from app.shared.config import get_settings
from app.shared.errors import AiExtractionError, UnsupportedFileType
from app.shared.integrations import AiInferenceClient

logger = logging.getLogger(__name__)

VISION_PROMPT = (
    "Extract all text exactly as it appears in this invoice document. "
    "Preserve numbers, dates, and formatting. Output only the extracted text, nothing else."
)
VISION_MAX_TOKENS = 4096

_IMAGE_MIME = {
    FileType.JPG: "image/jpeg",
    FileType.JPEG: "image/jpeg",
    FileType.PNG: "image/png",
}


def _pdf_text_sync(data: bytes) -> str:
    parts = []
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        for page in pdf.pages:
            words = page.extract_words()
            parts.append(" ".join(word["text"] for word in words))
    return "\n".join(parts).strip()


async def extract_pdf_text(data: bytes) -> str:
    """Texto de todas las páginas: palabras unidas por espacio, páginas por salto de línea."""
    return await asyncio.to_thread(_pdf_text_sync, data)


async def extract_image_text(
    data: bytes,
    file_type: FileType,
    ai_client: AiInferenceClient,
    *,
    model: Optional[str] = None,
) -> str:
    """
    Texto literal de una imagen vía modelo de visión.

    Raises:
        AiExtractionError: Si el modelo no devuelve texto
    """
    model = model or get_settings().ai_vision_model
    encoded = base64.b64encode(data).decode("ascii")
    payload = {
        "messages": [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": VISION_PROMPT},
                    {
                        "type": "image_url",
                        "image_url": {"url": f"data:{_IMAGE_MIME[file_type]};base64,{encoded}"},
                    },
                ],
            }
        ],
        "max_tokens": VISION_MAX_TOKENS,
    }
    result = await ai_client.run(model, payload)
    text = result.get("response")
    if not isinstance(text, str):
        raise AiExtractionError("Vision model returned no text")
    return text


async def extract_text(
    data: bytes,
    file_type: FileType | str,
    ai_client: AiInferenceClient,
) -> str:
    """
    Despacha al extractor según la etiqueta de tipo.

    Raises:
        UnsupportedFileType: Si la etiqueta no es pdf/jpg/jpeg/png
    """
    try:
        ftype = FileType(str(file_type).lower())
    except ValueError:
        raise UnsupportedFileType(str(file_type), [t.value for t in FileType])

    if ftype == FileType.PDF:
        text = await extract_pdf_text(data)
    elif ftype in IMAGE_FILE_TYPES:
        text = await extract_image_text(data, ftype, ai_client)
    else:
        raise UnsupportedFileType(ftype.value, [t.value for t in FileType])

    logger.info("[extract_text] %s -> %d chars", ftype.value, len(text), extra={"file_type": ftype.value})
    return text


__all__ = [
    "VISION_PROMPT",
    "VISION_MAX_TOKENS",
    "extract_pdf_text",
    "extract_image_text",
    "extract_text",
]

# Fin del archivo backend/app/modules/ocr/services/text_extraction.py
