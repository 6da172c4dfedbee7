# -*- coding: utf-8 -*-
"""
backend/app/shared/core/resources_cache.py

Contenedor singleton de recursos globales compartidos.

Mantiene los colaboradores externos del proceso:
- blob_store: bytes de cargas y CSV
- ocr_queue / csv_queue: colas de trabajo
- event_bus: canal saliente de eventos de dominio
- ai_client: inferencia IA (visión + extracción)
- lhdn_client / token_cache: API MyInvois

Las rutas los obtienen por dependencias FastAPI (get_*); las pruebas
pueden reemplazar cualquier atributo antes de levantar la app.

Autor: EInvoiceMY
Fecha: 2025-11-14
"""

from __future__ import annotations

from typing import Optional

from app.modules.lhdn.services import LhdnApiClient, TokenCache
from app.shared.integrations import (
    AiInferenceClient,
    BlobStore,
    DomainEventBus,
    InMemoryJobQueue,
)


class GlobalResources:
    """Contenedor de recursos globales compartidos (instancia única por proceso)."""

    def __init__(self) -> None:
        self.blob_store: Optional[BlobStore] = None
        self.ocr_queue: Optional[InMemoryJobQueue] = None
        self.csv_queue: Optional[InMemoryJobQueue] = None
        self.event_queue: Optional[InMemoryJobQueue] = None
        self.event_bus: Optional[DomainEventBus] = None
        self.ai_client: Optional[AiInferenceClient] = None
        self.lhdn_client: Optional[LhdnApiClient] = None
        self.token_cache: Optional[TokenCache] = None
        self.initialized: bool = False


# Instancia singleton de recursos globales
resources = GlobalResources()


def _require(name: str):
    value = getattr(resources, name)
    if value is None:
        raise RuntimeError(f"Recurso global '{name}' no inicializado")
    return value


def get_blob_store() -> BlobStore:
    return _require("blob_store")


def get_ocr_queue() -> InMemoryJobQueue:
    return _require("ocr_queue")


def get_csv_queue() -> InMemoryJobQueue:
    return _require("csv_queue")


def get_event_bus() -> DomainEventBus:
    return _require("event_bus")


def get_ai_client() -> AiInferenceClient:
    return _require("ai_client")


def get_lhdn_client() -> LhdnApiClient:
    return _require("lhdn_client")


def get_token_cache() -> TokenCache:
    return _require("token_cache")


__all__ = [
    "GlobalResources",
    "resources",
    "get_blob_store",
    "get_ocr_queue",
    "get_csv_queue",
    "get_event_bus",
    "get_ai_client",
    "get_lhdn_client",
    "get_token_cache",
]

# Fin del archivo backend/app/shared/core/resources_cache.py
