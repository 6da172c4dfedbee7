# -*- coding: utf-8 -*-
"""
backend/app/modules/bulk_import/jobs/csv_import_consumer.py

Consumidor de la cola de importación CSV.

- éxito -> ack()
- fallo -> retry() (el registro ya quedó en FAILED; un reintento lo
  vuelve a PROCESSING)

Autor: EInvoiceMY
Fecha: 2025-11-15
"""

from __future__ import annotations

import logging
from typing import Callable, List

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.bulk_import.facades.csv_import_facade import CsvImportJob, process_csv_import
from app.shared.integrations import BlobStore, QueueMessage

_logger = logging.getLogger("bulk_import.jobs.csv_import_consumer")


async def handle_csv_import_batch(
    messages: List[QueueMessage],
    session_factory: Callable[[], AsyncSession],
    blob_store: BlobStore,
) -> None:
    """Procesa un lote de la cola CSV de forma secuencial."""
    for msg in messages:
        try:
            job = CsvImportJob.from_message(msg.body)
        except (KeyError, ValueError) as e:
            _logger.error("[csv_queue] Mensaje inválido %s: %s", msg.id, e, extra={"message_id": msg.id})
            msg.retry()
            continue

        try:
            async with session_factory() as db:
                record = await process_csv_import(db, job, blob_store=blob_store)
            _logger.info(
                "[csv_queue] %s -> COMPLETED (%d ok, %d errores)",
                job.bulk_import_id,
                record.success_count,
                record.error_count,
                extra={"message_id": msg.id, "attempt": msg.attempts},
            )
            msg.ack()
        except Exception as e:
            _logger.error(
                "[csv_queue] Falló %s (intento %d): %s",
                job.bulk_import_id,
                msg.attempts,
                e,
                extra={"message_id": msg.id, "attempt": msg.attempts},
            )
            msg.retry()


__all__ = ["handle_csv_import_batch"]

# Fin del archivo backend/app/modules/bulk_import/jobs/csv_import_consumer.py
