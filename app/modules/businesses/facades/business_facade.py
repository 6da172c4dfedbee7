# -*- coding: utf-8 -*-
"""
backend/app/modules/businesses/facades/business_facade.py

Operaciones sobre el perfil del negocio:
- get_business: carga el negocio activo del llamante
- set_lhdn_credentials: guarda client_id / client_secret cifrados (AES-GCM)

Al cambiar las credenciales se invalida el token LHDN cacheado, para que
la próxima llamada lo renueve con el nuevo par.

Autor: EInvoiceMY
Fecha: 2025-11-07
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.businesses.models import Business
from app.modules.businesses.repositories import BusinessRepository
from app.modules.lhdn.models import LhdnToken
from app.shared.database import commit_or_raise
from app.shared.errors import NotFoundError, ValidationFailed
from app.shared.security.crypto import encrypt

logger = logging.getLogger(__name__)

_business_repo = BusinessRepository()


async def get_business(db: AsyncSession, business_id: UUID) -> Business:
    """
    Obtiene un negocio por ID.

    Raises:
        NotFoundError: BUSINESS_NOT_FOUND si no existe
    """
    business = await _business_repo.get(db, business_id)
    if business is None:
        raise NotFoundError("Business", business_id, code="BUSINESS_NOT_FOUND")
    return business


async def set_lhdn_credentials(
    db: AsyncSession,
    business_id: UUID,
    *,
    client_id: str,
    client_secret: str,
) -> Business:
    """
    Cifra y guarda las credenciales LHDN del negocio.

    Args:
        db: Sesión async
        business_id: Negocio del llamante
        client_id: Client ID emitido por MyInvois
        client_secret: Client secret emitido por MyInvois

    Returns:
        Business actualizado

    Raises:
        ValidationFailed: Si algún valor viene vacío
        NotFoundError: Si el negocio no existe
    """
    field_errors = {}
    if not client_id or not client_id.strip():
        field_errors["client_id"] = ["must not be empty"]
    if not client_secret or not client_secret.strip():
        field_errors["client_secret"] = ["must not be empty"]
    if field_errors:
        raise ValidationFailed("Invalid LHDN credentials", field_errors=field_errors)

    async def _work() -> Business:
        business = await get_business(db, business_id)
        business.lhdn_client_id_encrypted = encrypt(client_id.strip())
        business.lhdn_client_secret_encrypted = encrypt(client_secret.strip())
        await db.execute(delete(LhdnToken).where(LhdnToken.business_id == business_id))
        await db.flush()
        return business

    business = await commit_or_raise(db, _work)
    logger.info("[set_lhdn_credentials] Credenciales actualizadas", extra={"business_id": str(business_id)})
    return business


__all__ = ["get_business", "set_lhdn_credentials"]

# Fin del archivo backend/app/modules/businesses/facades/business_facade.py
