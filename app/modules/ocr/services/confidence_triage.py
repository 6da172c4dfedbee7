# -*- coding: utf-8 -*-
"""
backend/app/modules/ocr/services/confidence_triage.py

Triage por confianza de una extracción validada.

Campos críticos (presentes y con confianza >= 0.60):
    supplier.name, supplier.tin, invoice.number, invoice.date, totals.grand_total

Además:
    - overall_confidence < 0.75 -> revisión
    - sin líneas -> revisión

Si cualquier condición falla el destino es REVIEW_REQUIRED; si no,
READY_FOR_SUBMISSION. OVERALL_AUTO_APPROVE queda definido pero no
participa en la decisión.

Autor: EInvoiceMY
Fecha: 2025-11-09
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from app.modules.invoices.enums import InvoiceStatus
from app.modules.ocr.schemas import ExtractedInvoice

OVERALL_MIN = 0.75
CRITICAL_FIELD_MIN = 0.60
OVERALL_AUTO_APPROVE = 0.80


@dataclass(frozen=True)
class TriageResult:
    needs_review: bool
    reasons: List[str] = field(default_factory=list)

    @property
    def target_status(self) -> InvoiceStatus:
        if self.needs_review:
            return InvoiceStatus.REVIEW_REQUIRED
        return InvoiceStatus.READY_FOR_SUBMISSION


def _percent(value: float) -> str:
    return f"{value * 100:.0f}%"


def _critical_fields(data: ExtractedInvoice) -> List[Tuple[str, Optional[Any], float]]:
    return [
        ("supplier.name", data.supplier.name, data.supplier.confidence.name),
        ("supplier.tin", data.supplier.tin, data.supplier.confidence.tin),
        ("invoice.number", data.invoice.number, data.invoice.confidence.number),
        ("invoice.date", data.invoice.date, data.invoice.confidence.date),
        ("totals.grand_total", data.totals.grand_total, data.totals.confidence.grand_total),
    ]


def triage_extraction(data: ExtractedInvoice) -> TriageResult:
    """Evalúa la extracción y devuelve el destino junto con los motivos."""
    reasons: List[str] = []

    for label, value, confidence in _critical_fields(data):
        if value is None:
            reasons.append(f"Missing critical field: {label}")
        elif confidence < CRITICAL_FIELD_MIN:
            reasons.append(f"Low confidence on {label}: {_percent(confidence)}")

    if data.overall_confidence < OVERALL_MIN:
        reasons.append(
            f"Overall confidence too low: {_percent(data.overall_confidence)} "
            f"(min {OVERALL_MIN * 100:.0f}%)"
        )

    if not data.line_items:
        reasons.append("No line items extracted")

    return TriageResult(needs_review=bool(reasons), reasons=reasons)


__all__ = [
    "OVERALL_MIN",
    "CRITICAL_FIELD_MIN",
    "OVERALL_AUTO_APPROVE",
    "TriageResult",
    "triage_extraction",
]

# Fin del archivo backend/app/modules/ocr/services/confidence_triage.py
