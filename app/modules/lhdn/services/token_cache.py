# -*- coding: utf-8 -*-
"""
backend/app/modules/lhdn/services/token_cache.py

Caché de tokens LHDN por negocio (get-or-refresh).

Política:
- Al escribir: expires_at = now + (expires_in - buffer). El margen se
  resta una sola vez, aquí.
- Al leer: el token cacheado se reutiliza si now < expires_at, sin
  volver a aplicar el margen.
- Token y credenciales se guardan cifrados (AES-256-GCM); las
  credenciales se descifran solo al pedir un token nuevo.
- Dos refrescos concurrentes del mismo negocio son tolerados: ambos
  tokens son válidos y la última escritura gana.

El caché no hace commit: la transacción pertenece al llamador.

Autor: EInvoiceMY
Fecha: 2025-11-12
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.businesses.models import Business
from app.modules.lhdn.repositories import LhdnTokenRepository
from app.modules.lhdn.services.api_client import LhdnApiClient
from app.shared.config import get_settings
from app.shared.database.base import now_utc
from app.shared.errors import LhdnCredentialsMissing
from app.shared.security.crypto import decrypt, encrypt

logger = logging.getLogger(__name__)


class TokenCache:
    """get_or_refresh(db, business) -> access token vigente."""

    def __init__(
        self,
        api_client: LhdnApiClient,
        *,
        buffer_seconds: Optional[int] = None,
        clock: Callable[[], datetime] = now_utc,
        repository: Optional[LhdnTokenRepository] = None,
    ) -> None:
        self.api_client = api_client
        self.buffer_seconds = (
            get_settings().lhdn_token_buffer_sec if buffer_seconds is None else buffer_seconds
        )
        self._clock = clock
        self._repo = repository or LhdnTokenRepository()

    async def get_or_refresh(self, db: AsyncSession, business: Business) -> str:
        """
        Devuelve un token utilizable para el negocio.

        Raises:
            LhdnCredentialsMissing: El negocio no tiene credenciales configuradas
            LhdnTokenError: El endpoint de token falló
        """
        if not business.has_lhdn_credentials:
            raise LhdnCredentialsMissing(business.id)

        now = self._clock()
        cached = await self._repo.get_by_business(db, business.id)
        if cached is not None and now < cached.expires_at:
            return decrypt(cached.access_token_encrypted)

        return await self._refresh(db, business, now)

    async def _refresh(self, db: AsyncSession, business: Business, now: datetime) -> str:
        client_id = decrypt(business.lhdn_client_id_encrypted)
        client_secret = decrypt(business.lhdn_client_secret_encrypted)

        token = await self.api_client.get_token(client_id, client_secret)
        expires_at = now + timedelta(seconds=token.expires_in - self.buffer_seconds)

        await self._repo.upsert(
            db,
            business_id=business.id,
            access_token_encrypted=encrypt(token.access_token),
            expires_at=expires_at,
        )
        logger.info(
            "[lhdn_token] Token renovado",
            extra={"business_id": str(business.id), "expires_at": expires_at.isoformat()},
        )
        return token.access_token


__all__ = ["TokenCache"]

# Fin del archivo backend/app/modules/lhdn/services/token_cache.py
