# -*- coding: utf-8 -*-
"""
backend/app/shared/core/__init__.py

Recursos globales compartidos del proceso (blob store, colas, bus de
eventos, clientes IA y LHDN) y su ciclo de vida.

Autor: EInvoiceMY
Fecha: 2025-11-14
"""

from .resources_cache import (
    GlobalResources,
    resources,
    get_blob_store,
    get_ocr_queue,
    get_csv_queue,
    get_event_bus,
    get_ai_client,
    get_lhdn_client,
    get_token_cache,
)
from .resource_lifecycle_cache import init_resources, shutdown_all

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
    "init_resources",
    "shutdown_all",
]
