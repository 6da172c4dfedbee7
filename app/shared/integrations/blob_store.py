# -*- coding: utf-8 -*-
"""
backend/app/shared/integrations/blob_store.py

Abstracción de almacenamiento de objetos ("blob store").

Contrato mínimo consumido por el backend:
- get(key)  -> bytes | None
- put(key, data, content_type)
- head(key) -> tamaño en bytes | None

Las llaves son strings con espacio de nombres:
    uploads/{user}/{uuid}.{ext}
    invoices/{business}/{invoice}.pdf
    bulk-imports/{business}/{id}.csv

Implementaciones:
- InMemoryBlobStore: pruebas y desarrollo local.
- LocalDirBlobStore: directorio en disco (anyio.Path), útil en dev.

Autor: EInvoiceMY
Fecha: 2025-11-06
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Protocol, Tuple, runtime_checkable

import anyio

logger = logging.getLogger(__name__)

# Prefijos de llaves
UPLOADS_PREFIX = "uploads"
INVOICES_PREFIX = "invoices"
BULK_IMPORTS_PREFIX = "bulk-imports"
SESSIONS_PREFIX = "sessions"


@runtime_checkable
class BlobStore(Protocol):
    async def get(self, key: str) -> Optional[bytes]: ...

    async def put(self, key: str, data: bytes, content_type: str) -> None: ...

    async def head(self, key: str) -> Optional[int]: ...


class InMemoryBlobStore:
    """Blob store en memoria (por proceso)."""

    def __init__(self) -> None:
        self._objects: Dict[str, Tuple[bytes, str]] = {}

    async def get(self, key: str) -> Optional[bytes]:
        entry = self._objects.get(key)
        return entry[0] if entry else None

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        self._objects[key] = (bytes(data), content_type)
        logger.debug("[blob_put] key=%s size=%d", key, len(data))

    async def head(self, key: str) -> Optional[int]:
        entry = self._objects.get(key)
        return len(entry[0]) if entry else None


class LocalDirBlobStore:
    """Blob store respaldado por un directorio local."""

    def __init__(self, root: str) -> None:
        self.root = anyio.Path(root)

    def _path(self, key: str) -> anyio.Path:
        # Normaliza para no escapar del directorio raíz
        parts = [p for p in key.split("/") if p not in ("", ".", "..")]
        return self.root.joinpath(*parts)

    async def get(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        if not await path.exists():
            return None
        return await path.read_bytes()

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        path = self._path(key)
        await path.parent.mkdir(parents=True, exist_ok=True)
        await path.write_bytes(data)
        logger.debug("[blob_put] key=%s size=%d path=%s", key, len(data), path)

    async def head(self, key: str) -> Optional[int]:
        path = self._path(key)
        if not await path.exists():
            return None
        stat = await path.stat()
        return stat.st_size


__all__ = [
    "BlobStore",
    "InMemoryBlobStore",
    "LocalDirBlobStore",
    "UPLOADS_PREFIX",
    "INVOICES_PREFIX",
    "BULK_IMPORTS_PREFIX",
    "SESSIONS_PREFIX",
]

# Fin del archivo backend/app/shared/integrations/blob_store.py
