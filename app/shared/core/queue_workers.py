# -*- coding: utf-8 -*-
"""
backend/app/shared/core/queue_workers.py

Consumidores en proceso de las colas OCR y CSV.

Cada consumidor es un asyncio.Task registrado en job_registry que drena
su cola periódicamente: receive_batch -> handler -> settle. Un lote que
falla de forma inesperada no detiene el ciclo.

Autor: EInvoiceMY
Fecha: 2025-11-14
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.bulk_import.jobs import handle_csv_import_batch
from app.modules.ocr.jobs import handle_ocr_batch
from app.shared.database import SessionLocal
from app.shared.integrations import InMemoryJobQueue, QueueMessage
from app.shared.utils.async_job_registry import job_registry

from .resources_cache import GlobalResources

logger = logging.getLogger(__name__)

BatchHandler = Callable[[List[QueueMessage]], Awaitable[None]]


async def consume_forever(queue: InMemoryJobQueue, handler: BatchHandler, poll_interval: float) -> None:
    """Drena la cola hasta ser cancelado."""
    logger.info("[queue_worker] %s iniciado", queue.name, extra={"queue": queue.name})
    while True:
        try:
            processed = await queue.drain(handler)
        except Exception as e:
            logger.error(
                f"[queue_worker] {queue.name} lote falló: {e}",
                exc_info=True,
                extra={"queue": queue.name},
            )
            processed = 0
        if processed == 0:
            await asyncio.sleep(poll_interval)


def start_queue_consumers(
    res: GlobalResources,
    *,
    session_factory: Callable[[], AsyncSession] = SessionLocal,
    poll_interval: float = 1.0,
) -> None:
    """Lanza los consumidores OCR y CSV sobre los recursos dados."""

    async def _ocr_handler(batch: List[QueueMessage]) -> None:
        await handle_ocr_batch(batch, session_factory, res.blob_store, res.ai_client)

    async def _csv_handler(batch: List[QueueMessage]) -> None:
        await handle_csv_import_batch(batch, session_factory, res.blob_store)

    job_registry.register_task(
        "ocr-consumer",
        asyncio.create_task(consume_forever(res.ocr_queue, _ocr_handler, poll_interval)),
    )
    job_registry.register_task(
        "csv-consumer",
        asyncio.create_task(consume_forever(res.csv_queue, _csv_handler, poll_interval)),
    )
    logger.info("⚙️ Consumidores de colas iniciados")


async def stop_queue_consumers(timeout: float = 10.0) -> None:
    await job_registry.cancel_all_tasks(timeout=timeout)


__all__ = ["consume_forever", "start_queue_consumers", "stop_queue_consumers"]

# Fin del archivo backend/app/shared/core/queue_workers.py
