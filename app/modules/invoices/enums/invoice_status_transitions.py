# -*- coding: utf-8 -*-
"""
backend/app/modules/invoices/enums/invoice_status_transitions.py

Mapa de transiciones válidas para InvoiceStatus.

Reglas de transición:
- DRAFT                → READY_FOR_SUBMISSION            (finalize)
- OCR_PROCESSING       → REVIEW_REQUIRED | READY_FOR_SUBMISSION (pipeline OCR)
- REVIEW_REQUIRED      → READY_FOR_SUBMISSION            (finalize)
- READY_FOR_SUBMISSION → SUBMITTED | REJECTED            (envío a LHDN)
- SUBMITTED            → VALIDATED | REJECTED            (polling LHDN)
- VALIDATED            → CANCELLED                       (cancelación)
- REJECTED, CANCELLED  → (terminales, sin transiciones)

La edición y el borrado no cambian de estado; se permiten solo en
EDITABLE_STATUSES.

Autor: EInvoiceMY
Fecha: 2025-10-28
"""

from typing import Dict, FrozenSet, Set

from app.shared.errors import InvalidStatusTransition

from .invoice_status_enum import InvoiceStatus


# Mapa de transiciones válidas: estado_origen → {estados_destino_permitidos}
VALID_STATUS_TRANSITIONS: Dict[InvoiceStatus, Set[InvoiceStatus]] = {
    InvoiceStatus.DRAFT: {
        InvoiceStatus.READY_FOR_SUBMISSION,
    },
    InvoiceStatus.OCR_PROCESSING: {
        InvoiceStatus.REVIEW_REQUIRED,
        InvoiceStatus.READY_FOR_SUBMISSION,
    },
    InvoiceStatus.REVIEW_REQUIRED: {
        InvoiceStatus.READY_FOR_SUBMISSION,
    },
    InvoiceStatus.READY_FOR_SUBMISSION: {
        InvoiceStatus.SUBMITTED,
        InvoiceStatus.REJECTED,
    },
    InvoiceStatus.SUBMITTED: {
        InvoiceStatus.VALIDATED,
        InvoiceStatus.REJECTED,
    },
    InvoiceStatus.VALIDATED: {
        InvoiceStatus.CANCELLED,
    },
    InvoiceStatus.REJECTED: set(),
    InvoiceStatus.CANCELLED: set(),
}

# Estados en los que se permite editar y borrar
EDITABLE_STATUSES: FrozenSet[InvoiceStatus] = frozenset({
    InvoiceStatus.DRAFT,
    InvoiceStatus.REVIEW_REQUIRED,
})

# Estados desde los que la factura no avanza sin una nueva acción humana
TERMINAL_STATUSES: FrozenSet[InvoiceStatus] = frozenset({
    InvoiceStatus.VALIDATED,
    InvoiceStatus.REJECTED,
    InvoiceStatus.CANCELLED,
})


def is_valid_status_transition(
    from_status: InvoiceStatus,
    to_status: InvoiceStatus,
) -> bool:
    """
    Valida si una transición de estado es permitida.

    Args:
        from_status: Estado actual.
        to_status: Estado destino.

    Returns:
        True si la transición es válida, False en caso contrario.
    """
    if from_status not in VALID_STATUS_TRANSITIONS:
        return False
    return to_status in VALID_STATUS_TRANSITIONS[from_status]


def get_allowed_transitions(from_status: InvoiceStatus) -> Set[InvoiceStatus]:
    """
    Obtiene los estados permitidos desde un estado dado.

    Args:
        from_status: Estado actual.

    Returns:
        Set de estados permitidos como destino.
    """
    return VALID_STATUS_TRANSITIONS.get(from_status, set())


def validate_status_transition(
    from_status: InvoiceStatus,
    to_status: InvoiceStatus,
) -> None:
    """
    Valida una transición de estado, lanzando excepción si no es válida.

    Args:
        from_status: Estado actual.
        to_status: Estado destino.

    Raises:
        InvalidStatusTransition: Si la transición no es válida.
    """
    if not is_valid_status_transition(from_status, to_status):
        allowed = get_allowed_transitions(from_status)
        allowed_str = ", ".join(sorted(s.value for s in allowed)) if allowed else "none"
        raise InvalidStatusTransition(
            from_status,
            to_status,
            f"Cannot transition invoice from {from_status.value} to {to_status.value}. "
            f"Allowed from {from_status.value}: {allowed_str}"
        )


__all__ = [
    "VALID_STATUS_TRANSITIONS",
    "EDITABLE_STATUSES",
    "TERMINAL_STATUSES",
    "is_valid_status_transition",
    "get_allowed_transitions",
    "validate_status_transition",
]

# Fin del archivo backend/app/modules/invoices/enums/invoice_status_transitions.py
