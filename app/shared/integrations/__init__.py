# -*- coding: utf-8 -*-
"""
backend/app/shared/integrations/__init__.py

Colaboradores externos (solo su interfaz + implementaciones locales):
blob store, cola de trabajos, inferencia IA y canal de eventos de dominio.
"""

from .blob_store import BlobStore, InMemoryBlobStore, LocalDirBlobStore
from .job_queue import JobQueue, QueueMessage, InMemoryJobQueue
from .ai_inference_client import AiInferenceClient, WorkersAiClient
from .domain_events import DomainEvent, DomainEventBus, InvoiceEventType

__all__ = [
    "BlobStore",
    "InMemoryBlobStore",
    "LocalDirBlobStore",
    "JobQueue",
    "QueueMessage",
    "InMemoryJobQueue",
    "AiInferenceClient",
    "WorkersAiClient",
    "DomainEvent",
    "DomainEventBus",
    "InvoiceEventType",
]
