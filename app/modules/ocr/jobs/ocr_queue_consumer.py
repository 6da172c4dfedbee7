# -*- coding: utf-8 -*-
"""
backend/app/modules/ocr/jobs/ocr_queue_consumer.py

Consumidor de la cola OCR.

Cada mensaje se procesa en su propia sesión:
- éxito -> ack()
- fallo -> retry() (límite de reintentos y dead-letter los define la cola)

Un mensaje malformado no detiene el lote.

Autor: EInvoiceMY
Fecha: 2025-11-10
"""

from __future__ import annotations

import logging
from typing import Callable, List

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.ocr.facades.pipeline_facade import OcrJob, run_ocr_pipeline
from app.shared.integrations import AiInferenceClient, BlobStore, QueueMessage

_logger = logging.getLogger("ocr.jobs.ocr_queue_consumer")


async def handle_ocr_batch(
    messages: List[QueueMessage],
    session_factory: Callable[[], AsyncSession],
    blob_store: BlobStore,
    ai_client: AiInferenceClient,
) -> None:
    """Procesa un lote de la cola OCR de forma secuencial."""
    for msg in messages:
        try:
            job = OcrJob.from_message(msg.body)
        except (KeyError, ValueError) as e:
            _logger.error(
                "[ocr_queue] Mensaje inválido %s: %s",
                msg.id,
                e,
                extra={"message_id": msg.id},
            )
            msg.retry()
            continue

        try:
            async with session_factory() as db:
                summary = await run_ocr_pipeline(db, job, blob_store=blob_store, ai_client=ai_client)
            _logger.info(
                "[ocr_queue] %s -> %s",
                job.ocr_document_id,
                summary.target_status.value,
                extra={
                    "message_id": msg.id,
                    "attempt": msg.attempts,
                    "review_reasons": "; ".join(summary.review_reasons),
                },
            )
            msg.ack()
        except Exception as e:
            _logger.error(
                "[ocr_queue] Falló %s (intento %d): %s",
                job.ocr_document_id,
                msg.attempts,
                e,
                extra={"message_id": msg.id, "attempt": msg.attempts},
            )
            msg.retry()


__all__ = ["handle_ocr_batch"]

# Fin del archivo backend/app/modules/ocr/jobs/ocr_queue_consumer.py
