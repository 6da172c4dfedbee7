# -*- coding: utf-8 -*-
"""
backend/app/modules/businesses/routes/business_routes.py

Rutas del perfil del negocio del llamante:
- GET /businesses/me
- PUT /businesses/me/lhdn-credentials

Autor: EInvoiceMY
Fecha: 2025-11-07
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.businesses.facades import get_business, set_lhdn_credentials
from app.modules.businesses.schemas import BusinessRead, LhdnCredentialsIn, LhdnCredentialsStatus
from app.shared.auth_context import AuthContext, get_auth_context
from app.shared.database import get_async_session

router = APIRouter()


@router.get("/me", response_model=BusinessRead, summary="Perfil del negocio del llamante")
async def get_my_business(
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_async_session),
):
    business = await get_business(db, auth.business_id)
    return BusinessRead.model_validate(business)


@router.put(
    "/me/lhdn-credentials",
    response_model=LhdnCredentialsStatus,
    summary="Guardar credenciales LHDN (cifradas)",
)
async def put_lhdn_credentials(
    payload: LhdnCredentialsIn,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_async_session),
):
    business = await set_lhdn_credentials(
        db,
        auth.business_id,
        client_id=payload.client_id,
        client_secret=payload.client_secret,
    )
    return LhdnCredentialsStatus(business_id=business.id, has_lhdn_credentials=business.has_lhdn_credentials)


__all__ = ["router"]

# Fin del archivo backend/app/modules/businesses/routes/business_routes.py
