# -*- coding: utf-8 -*-
"""
backend/app/modules/ocr/services/ai_extraction.py

Extracción estructurada de facturas con un modelo de lenguaje.

Flujo:
1. Prompt fijo de sistema + prompt de usuario con el texto crudo
2. response_format = json_schema (INVOICE_JSON_SCHEMA)
3. Parseo JSON y validación estricta contra ExtractedInvoice

Cualquier falla de parseo o de esquema es una falla del pipeline;
nunca se ignora ni se coerciona.

Autor: EInvoiceMY
Fecha: 2025-11-09
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from app.modules.ocr.schemas import ExtractedInvoice
from app.shared.config import get_settings
from app.shared.errors import AiExtractionError
from app.shared.integrations import AiInferenceClient

logger = logging.getLogger(__name__)

MIN_TEXT_LENGTH = 10
EXTRACTION_MAX_TOKENS = 2048

SYSTEM_PROMPT = """You are an expert Malaysian invoice data extraction assistant.
Your job is to extract structured information from invoice text and return it as valid JSON.

Rules:
- Extract data exactly as it appears in the invoice text.
- For Malaysian invoices: TIN format is typically C/E/F/IG/NA/OA/P-XXXXXXXXXX (letters followed by digits).
- Dates must be in ISO 8601 format: YYYY-MM-DD.
- Amounts must be numbers (float), not strings.
- Use null for fields that cannot be found in the text.
- Confidence scores (0.0-1.0) reflect how certain you are about each extracted value:
  - 0.9-1.0: clearly present, unambiguous
  - 0.7-0.89: present but potentially ambiguous
  - 0.5-0.69: partially present or inferred
  - 0.0-0.49: guessed or uncertain
- Tax type codes: 01=SST, 02=Tourism Tax, E=Exempt, AE=Zero-rated, NA=Not applicable
- Return ONLY valid JSON matching the schema. No explanation text."""

_NULLABLE_STRING = {"type": ["string", "null"]}
_NULLABLE_NUMBER = {"type": ["number", "null"]}
_NUMBER = {"type": "number"}


def _confidence_block(*names: str) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": {name: _NUMBER for name in names},
        "required": list(names),
    }


INVOICE_JSON_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "supplier": {
            "type": "object",
            "properties": {
                "name": _NULLABLE_STRING,
                "tin": _NULLABLE_STRING,
                "registration_number": _NULLABLE_STRING,
                "address": _NULLABLE_STRING,
                "confidence": _confidence_block("name", "tin", "registration_number", "address"),
            },
            "required": ["name", "tin", "registration_number", "address", "confidence"],
        },
        "buyer": {
            "type": "object",
            "properties": {
                "name": _NULLABLE_STRING,
                "tin": _NULLABLE_STRING,
                "registration_number": _NULLABLE_STRING,
                "email": _NULLABLE_STRING,
                "phone": _NULLABLE_STRING,
                "address": _NULLABLE_STRING,
                "confidence": _confidence_block("name", "tin"),
            },
            "required": ["name", "tin", "registration_number", "email", "phone", "address", "confidence"],
        },
        "invoice": {
            "type": "object",
            "properties": {
                "number": _NULLABLE_STRING,
                "date": _NULLABLE_STRING,
                "currency": {"type": "string"},
                "confidence": _confidence_block("number", "date"),
            },
            "required": ["number", "date", "currency", "confidence"],
        },
        "line_items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "description": {"type": "string"},
                    "quantity": _NUMBER,
                    "unit_price": _NUMBER,
                    "tax_type": {"type": "string", "enum": ["01", "02", "E", "AE", "NA"]},
                    "tax_rate": _NUMBER,
                    "tax_amount": _NUMBER,
                    "subtotal": _NUMBER,
                    "total": _NUMBER,
                    "confidence": _NUMBER,
                },
                "required": [
                    "description", "quantity", "unit_price", "tax_type", "tax_rate",
                    "tax_amount", "subtotal", "total", "confidence",
                ],
            },
        },
        "totals": {
            "type": "object",
            "properties": {
                "subtotal": _NULLABLE_NUMBER,
                "tax_total": _NULLABLE_NUMBER,
                "grand_total": _NULLABLE_NUMBER,
                "confidence": _confidence_block("subtotal", "tax_total", "grand_total"),
            },
            "required": ["subtotal", "tax_total", "grand_total", "confidence"],
        },
        "overall_confidence": _NUMBER,
    },
    "required": ["supplier", "buyer", "invoice", "line_items", "totals", "overall_confidence"],
}


def build_extraction_prompt(raw_text: str) -> str:
    """Prompt de usuario: instrucciones + esquema + texto delimitado."""
    return (
        "Extract all invoice data from the following text and return a JSON object.\n\n"
        "The JSON must follow this exact schema:\n"
        f"{json.dumps(INVOICE_JSON_SCHEMA, indent=2)}\n\n"
        "Invoice text:\n---\n"
        f"{raw_text}\n"
        "---"
    )


def parse_extraction_response(raw_json: str) -> ExtractedInvoice:
    """
    Parsea y valida la respuesta cruda del modelo.

    Raises:
        AiExtractionError: "AI returned invalid JSON" o
            "AI extraction schema validation failed: ..."
    """
    try:
        json.loads(raw_json)
    except (TypeError, json.JSONDecodeError) as e:
        raise AiExtractionError("AI returned invalid JSON") from e

    try:
        return ExtractedInvoice.model_validate_json(raw_json)
    except ValidationError as e:
        raise AiExtractionError(f"AI extraction schema validation failed: {e}") from e


async def extract_invoice_data(
    raw_text: str,
    ai_client: AiInferenceClient,
    *,
    model: Optional[str] = None,
) -> ExtractedInvoice:
    """
    Ejecuta la extracción estructurada sobre el texto crudo.

    Args:
        raw_text: Texto obtenido del PDF o del modelo de visión
        ai_client: Cliente de inferencia
        model: Modelo a usar (por defecto AI_EXTRACTION_MODEL)

    Returns:
        ExtractedInvoice validado

    Raises:
        AiExtractionError: Texto demasiado corto, JSON inválido o esquema inválido
    """
    if not raw_text or len(raw_text.strip()) < MIN_TEXT_LENGTH:
        raise AiExtractionError("Extracted text is too short to process")

    model = model or get_settings().ai_extraction_model
    payload = {
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_extraction_prompt(raw_text)},
        ],
        "response_format": {
            "type": "json_schema",
            "json_schema": {"name": "InvoiceExtraction", "schema": INVOICE_JSON_SCHEMA},
        },
        "max_tokens": EXTRACTION_MAX_TOKENS,
    }

    result = await ai_client.run(model, payload)
    extracted = parse_extraction_response(result.get("response"))
    logger.info(
        "[extract_invoice_data] %d líneas, confianza global %.2f",
        len(extracted.line_items),
        extracted.overall_confidence,
        extra={"model": model},
    )
    return extracted


__all__ = [
    "SYSTEM_PROMPT",
    "INVOICE_JSON_SCHEMA",
    "MIN_TEXT_LENGTH",
    "EXTRACTION_MAX_TOKENS",
    "build_extraction_prompt",
    "parse_extraction_response",
    "extract_invoice_data",
]

# Fin del archivo backend/app/modules/ocr/services/ai_extraction.py
