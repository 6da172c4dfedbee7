# -*- coding: utf-8 -*-
"""
backend/app/shared/utils/json_response.py

Respuesta JSON por defecto de la API con charset UTF-8 explícito.

Los nombres de proveedores y compradores malasios llegan con frecuencia
con caracteres no ASCII (nombres chinos, tamiles, acentos en direcciones);
sin charset algunos clientes los muestran corruptos.

    app = FastAPI(default_response_class=UTF8JSONResponse)

Autor: EInvoiceMY
Fecha: 2025-11-14
"""

from fastapi.responses import JSONResponse


class UTF8JSONResponse(JSONResponse):
    """JSONResponse con Content-Type: application/json; charset=utf-8."""
    media_type = "application/json; charset=utf-8"


__all__ = ["UTF8JSONResponse"]

# Fin del archivo backend/app/shared/utils/json_response.py
