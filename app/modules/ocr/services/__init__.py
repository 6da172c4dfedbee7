# -*- coding: utf-8 -*-
"""
backend/app/modules/ocr/services/__init__.py

Servicios del pipeline OCR: extracción de texto, extracción estructurada
con IA y triage por confianza.
"""

from .text_extraction import extract_text, extract_pdf_text, extract_image_text
from .ai_extraction import (
    SYSTEM_PROMPT,
    INVOICE_JSON_SCHEMA,
    build_extraction_prompt,
    parse_extraction_response,
    extract_invoice_data,
)
from .confidence_triage import (
    OVERALL_MIN,
    CRITICAL_FIELD_MIN,
    OVERALL_AUTO_APPROVE,
    TriageResult,
    triage_extraction,
)

__all__ = [
    "extract_text",
    "extract_pdf_text",
    "extract_image_text",
    "SYSTEM_PROMPT",
    "INVOICE_JSON_SCHEMA",
    "build_extraction_prompt",
    "parse_extraction_response",
    "extract_invoice_data",
    "OVERALL_MIN",
    "CRITICAL_FIELD_MIN",
    "OVERALL_AUTO_APPROVE",
    "TriageResult",
    "triage_extraction",
]

# Fin del archivo backend/app/modules/ocr/services/__init__.py
