# -*- coding: utf-8 -*-
"""
backend/app/shared/integrations/domain_events.py

Canal saliente de eventos de dominio.

El núcleo emite eventos (factura enviada/validada/rechazada/cancelada)
y NO decide cómo notificar: un consumidor externo lee el canal.

Reglas:
- publish() nunca bloquea la operación principal con la entrega final.
- Un fallo al encolar se registra en logs y NO se propaga.

Autor: EInvoiceMY
Fecha: 2025-11-12
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .job_queue import JobQueue

logger = logging.getLogger(__name__)


class InvoiceEventType(StrEnum):
    INVOICE_SUBMITTED = "invoice.submitted"
    INVOICE_VALIDATED = "invoice.validated"
    INVOICE_REJECTED = "invoice.rejected"
    INVOICE_CANCELLED = "invoice.cancelled"


@dataclass
class DomainEvent:
    event_type: str
    invoice_id: str
    business_id: str
    payload: Dict[str, Any] = field(default_factory=dict)
    occurred_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


EventHandler = Callable[[DomainEvent], Awaitable[None]]


class DomainEventBus:
    """
    Bus de eventos best-effort.

    Los handlers suscritos reciben cada evento; si una cola de salida
    está configurada, el evento también se encola allí.
    """

    def __init__(self, outbound_queue: Optional[JobQueue] = None) -> None:
        self.outbound_queue = outbound_queue
        self._handlers: List[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> None:
        self._handlers.append(handler)

    async def publish(self, event: DomainEvent) -> None:
        extra = {"event_type": event.event_type, "invoice_id": event.invoice_id}
        if self.outbound_queue is not None:
            try:
                await self.outbound_queue.send(event.to_dict())
            except Exception as e:
                logger.warning("[publish] No se pudo encolar evento %s: %s", event.event_type, e, extra=extra)

        for handler in self._handlers:
            try:
                await handler(event)
            except Exception as e:
                logger.warning("[publish] Handler falló para %s: %s", event.event_type, e, extra=extra)

        logger.info("[publish] %s", event.event_type, extra=extra)


__all__ = ["InvoiceEventType", "DomainEvent", "DomainEventBus", "EventHandler"]

# Fin del archivo backend/app/shared/integrations/domain_events.py
