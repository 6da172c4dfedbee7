# -*- coding: utf-8 -*-
"""
backend/app/shared/integrations/job_queue.py

Abstracción de cola durable de trabajos (entrega at-least-once).

Contrato:
- Productor: send(job: dict)
- Consumidor: recibe lotes de QueueMessage; cada mensaje se confirma con
  ack() o se devuelve con retry(). El número de reintentos y el dead-letter
  son configuración de la cola, no lógica de la aplicación.

InMemoryJobQueue implementa ese contrato en proceso (pruebas y worker local):
- retry() re-encola el mensaje con attempts+1.
- Superado max_retries, el mensaje pasa a dead_letters.

Autor: EInvoiceMY
Fecha: 2025-11-06
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Deque, Dict, List, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class JobQueue(Protocol):
    async def send(self, job: Dict[str, Any]) -> None: ...


@dataclass
class QueueMessage:
    """Mensaje entregado al consumidor."""
    body: Dict[str, Any]
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    attempts: int = 1
    _outcome: Optional[str] = field(default=None, repr=False)

    def ack(self) -> None:
        self._outcome = "ack"

    def retry(self) -> None:
        self._outcome = "retry"

    @property
    def outcome(self) -> Optional[str]:
        return self._outcome


class InMemoryJobQueue:
    """Cola en memoria con reintentos y dead-letter."""

    def __init__(self, name: str, max_retries: int = 3) -> None:
        self.name = name
        self.max_retries = max_retries
        self._pending: Deque[QueueMessage] = deque()
        self.dead_letters: List[QueueMessage] = []
        self._lock = asyncio.Lock()

    async def send(self, job: Dict[str, Any]) -> None:
        async with self._lock:
            self._pending.append(QueueMessage(body=dict(job)))
        logger.info("[queue_send] queue=%s pending=%d", self.name, len(self._pending), extra={"queue": self.name})

    def __len__(self) -> int:
        return len(self._pending)

    async def receive_batch(self, max_messages: int = 10) -> List[QueueMessage]:
        async with self._lock:
            batch: List[QueueMessage] = []
            while self._pending and len(batch) < max_messages:
                batch.append(self._pending.popleft())
            return batch

    async def settle(self, batch: List[QueueMessage]) -> None:
        """
        Aplica el resultado de cada mensaje del lote.

        Mensajes sin ack explícito se tratan como retry (semántica at-least-once).
        """
        async with self._lock:
            for msg in batch:
                if msg.outcome == "ack":
                    continue
                if msg.attempts > self.max_retries:
                    self.dead_letters.append(msg)
                    logger.error(
                        "[queue_dead_letter] queue=%s message=%s attempts=%d",
                        self.name,
                        msg.id,
                        msg.attempts,
                        extra={"queue": self.name, "message_id": msg.id},
                    )
                    continue
                self._pending.append(
                    QueueMessage(body=msg.body, id=msg.id, attempts=msg.attempts + 1)
                )

    async def drain(
        self,
        handler: Callable[[List[QueueMessage]], Awaitable[None]],
        max_batches: int = 100,
    ) -> int:
        """
        Consume la cola hasta vaciarla (o hasta max_batches).

        Returns:
            Número de lotes procesados
        """
        processed = 0
        while processed < max_batches:
            batch = await self.receive_batch()
            if not batch:
                break
            await handler(batch)
            await self.settle(batch)
            processed += 1
        return processed


__all__ = ["JobQueue", "QueueMessage", "InMemoryJobQueue"]

# Fin del archivo backend/app/shared/integrations/job_queue.py
