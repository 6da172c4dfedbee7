# -*- coding: utf-8 -*-
"""
backend/app/shared/core/resource_lifecycle_cache.py

Gestión del ciclo de vida de recursos globales.

- init_resources: construye los colaboradores desde settings (idempotente;
  respeta los atributos que ya fueron inyectados, p. ej. en pruebas)
- shutdown_all: cierre limpio del cliente HTTP de LHDN

Autor: EInvoiceMY
Fecha: 2025-11-14
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import anyio

from app.modules.lhdn.services import LhdnApiClient, TokenCache
from app.shared.integrations import (
    DomainEventBus,
    InMemoryBlobStore,
    InMemoryJobQueue,
    LocalDirBlobStore,
    WorkersAiClient,
)

from .resources_cache import GlobalResources, resources

logger = logging.getLogger(__name__)


def init_resources(settings: Any, target: Optional[GlobalResources] = None) -> GlobalResources:
    """
    Inicializa los recursos que falten.

    Args:
        settings: BaseAppSettings
        target: Contenedor a poblar (default: singleton del proceso)

    Returns:
        El contenedor poblado
    """
    res = target or resources

    if res.blob_store is None:
        if settings.blob_storage_dir:
            res.blob_store = LocalDirBlobStore(settings.blob_storage_dir)
            logger.info("📦 Blob store local en %s", settings.blob_storage_dir)
        else:
            res.blob_store = InMemoryBlobStore()
            logger.info("📦 Blob store en memoria")

    if res.ocr_queue is None:
        res.ocr_queue = InMemoryJobQueue("ocr-queue", max_retries=settings.ocr_queue_max_retries)
    if res.csv_queue is None:
        res.csv_queue = InMemoryJobQueue("csv-import-queue", max_retries=settings.csv_queue_max_retries)
    if res.event_queue is None:
        res.event_queue = InMemoryJobQueue("domain-events")
    if res.event_bus is None:
        res.event_bus = DomainEventBus(outbound_queue=res.event_queue)

    if res.ai_client is None:
        res.ai_client = WorkersAiClient(
            base_url=settings.ai_base_url,
            account_id=settings.ai_account_id or "",
            api_token=settings.ai_api_token.get_secret_value(),
            timeout_sec=settings.ai_timeout_sec,
        )

    if res.lhdn_client is None:
        res.lhdn_client = LhdnApiClient.from_settings(settings)
    if res.token_cache is None:
        res.token_cache = TokenCache(res.lhdn_client, buffer_seconds=settings.lhdn_token_buffer_sec)

    res.initialized = True
    logger.info("✅ Recursos globales inicializados")
    return res


async def shutdown_all(target: Optional[GlobalResources] = None) -> None:
    """
    Cierre limpio de todos los recursos globales.

    - CancelScope(shield=True) evita que la cancelación interrumpa aclose().
    - move_on_after(2.0) impide que un cierre colgado bloquee el shutdown.
    """
    res = target or resources
    logger.info("🔴 Cerrando recursos globales...")

    client = res.lhdn_client
    if client is not None:
        try:
            with anyio.CancelScope(shield=True):
                with anyio.move_on_after(2.0):
                    await client.aclose()
        except RuntimeError as e:
            if "Event loop is closed" in str(e):
                logger.warning("Event loop ya cerrado al cerrar cliente LHDN; se ignora.")
            else:
                logger.exception("Error cerrando cliente LHDN (RuntimeError): %s", e)
        except Exception as e:
            logger.exception("Error cerrando cliente LHDN: %s", e)
        finally:
            res.lhdn_client = None
            res.token_cache = None
            logger.info("✅ Cliente LHDN cerrado")

    res.initialized = False
    logger.info("🔴 Recursos globales cerrados")


__all__ = ["init_resources", "shutdown_all"]

# Fin del archivo backend/app/shared/core/resource_lifecycle_cache.py
