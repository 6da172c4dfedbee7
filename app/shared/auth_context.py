# -*- coding: utf-8 -*-
"""
backend/app/shared/auth_context.py

Contexto de autenticación para las rutas de la API.

La emisión de tokens y el manejo de sesiones viven fuera de este backend;
aquí solo se decodifica el bearer JWT (python-jose) y se extraen:
- sub          -> user_id
- business_id  -> negocio activo del usuario

Este módulo es la ÚNICA FUENTE DE VERDAD para obtener user_id/business_id
dentro de las rutas.

Autor: EInvoiceMY
Fecha: 2025-12-27
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from app.shared.config import get_settings

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """Identidad mínima del llamante."""
    user_id: UUID
    business_id: UUID


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decodifica y valida un JWT. Devuelve None si es inválido o expiró.
    """
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key.get_secret_value(),
            algorithms=[settings.jwt_algorithm],
        )
    except ExpiredSignatureError as e:
        logger.warning(f"Token expirado: {e}")
        return None
    except JWTError as e:
        logger.warning(f"Token inválido: {e}")
        return None


def create_access_token(user_id: Any, business_id: Any, **claims: Any) -> str:
    """Firma un token con los claims esperados (usado por scripts y tests)."""
    settings = get_settings()
    payload = {"sub": str(user_id), "business_id": str(business_id), **claims}
    return jwt.encode(
        payload,
        settings.jwt_secret_key.get_secret_value(),
        algorithm=settings.jwt_algorithm,
    )


async def get_auth_context(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> AuthContext:
    """
    Dependencia FastAPI: devuelve el AuthContext del bearer token.

    Raises:
        HTTPException 401: Si no hay token, es inválido o faltan claims
    """
    if creds is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")

    payload = decode_access_token(creds.credentials)
    if not payload:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")

    user_id = payload.get("sub")
    business_id = payload.get("business_id")
    if not user_id or not business_id:
        logger.warning("Auth context missing claims: sub=%s business_id=%s", bool(user_id), bool(business_id))
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing user/business in auth context")

    try:
        return AuthContext(user_id=UUID(str(user_id)), business_id=UUID(str(business_id)))
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid user/business id format")


__all__ = [
    "AuthContext",
    "decode_access_token",
    "create_access_token",
    "get_auth_context",
]

# Fin del archivo backend/app/shared/auth_context.py
