# -*- coding: utf-8 -*-
"""
backend/app/shared/utils/async_job_registry.py

Registry global de asyncio.Task de larga vida (consumidores de colas).
Permite cancelación ordenada durante shutdown.

Autor: EInvoiceMY
Fecha: 2025-11-14
"""

import asyncio
import logging
import threading
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class AsyncJobRegistry:
    """Registry thread-safe de tasks activas por nombre."""

    def __init__(self):
        self._lock = threading.Lock()
        self._active_tasks: Dict[str, asyncio.Task] = {}

    def register_task(self, job_id: str, task: asyncio.Task) -> None:
        with self._lock:
            self._active_tasks[job_id] = task
            logger.debug(f"📝 Task registrada: job_id={job_id}")

    def get_task(self, job_id: str) -> Optional[asyncio.Task]:
        with self._lock:
            return self._active_tasks.get(job_id)

    def get_active_count(self) -> int:
        with self._lock:
            return len([t for t in self._active_tasks.values() if not t.done()])

    async def cancel_all_tasks(self, timeout: float = 30.0) -> None:
        """
        Cancela todas las tasks activas y espera a que terminen.

        Args:
            timeout: Tiempo máximo de espera en segundos
        """
        with self._lock:
            active_tasks = [t for t in self._active_tasks.values() if not t.done()]

        if not active_tasks:
            logger.info("🟢 No hay tasks activas para cancelar")
        else:
            logger.info(f"🔄 Cancelando {len(active_tasks)} tasks activas...")
            for task in active_tasks:
                task.cancel()
            try:
                await asyncio.wait_for(
                    asyncio.gather(*active_tasks, return_exceptions=True),
                    timeout=timeout,
                )
                logger.info("✅ Todas las tasks canceladas")
            except asyncio.TimeoutError:
                logger.warning(f"⚠️ Timeout esperando cancelación de tasks ({timeout}s)")

        with self._lock:
            self._active_tasks.clear()


# Instancia global
job_registry = AsyncJobRegistry()

# Fin del archivo backend/app/shared/utils/async_job_registry.py
