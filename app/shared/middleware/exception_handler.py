# -*- coding: utf-8 -*-
"""
backend/app/shared/middleware/exception_handler.py

Manejo centralizado de errores HTTP.

- JSONExceptionMiddleware: captura excepciones no manejadas y responde JSON 500.
- register_exception_handlers(app): traduce AppError y errores de validación
  de FastAPI a la forma estable:

    {"detail": {"error_code": ..., "message": ..., "field_errors"?: ..., "request_id": ...}}

Autor: EInvoiceMY
Fecha: 2026-01-28
"""

from __future__ import annotations

import logging
import uuid
from typing import Callable, Dict, List

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.shared.errors import AppError

logger = logging.getLogger(__name__)

# Header para request ID (proxies, nginx, etc.)
REQUEST_ID_HEADERS = ["x-request-id", "x-correlation-id"]


def get_request_id(request: Request) -> str:
    """Extrae request_id de headers o genera uno nuevo."""
    for header in REQUEST_ID_HEADERS:
        value = request.headers.get(header)
        if value:
            return value
    return uuid.uuid4().hex[:16]


def _request_id_of(request: Request) -> str:
    request_id = getattr(request.state, "request_id", None)
    if not request_id:
        request_id = get_request_id(request)
        request.state.request_id = request_id
    return request_id


class JSONExceptionMiddleware(BaseHTTPMiddleware):
    """
    Middleware que captura excepciones no manejadas y devuelve JSON.

    Garantiza:
    - Content-Type: application/json (nunca text/plain)
    - error_code estable para UI
    - request_id para correlación de logs
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = _request_id_of(request)

        try:
            return await call_next(request)
        except Exception as e:
            logger.error(
                "unhandled_exception request_id=%s method=%s path=%s error=%r",
                request_id,
                request.method,
                request.url.path,
                e,
                exc_info=True,
            )
            detail = {
                "error_code": "INTERNAL_SERVER_ERROR",
                "message": "Internal server error",
                "request_id": request_id,
            }
            return JSONResponse(
                status_code=500,
                content={"detail": detail},
                headers={"X-Request-ID": request_id},
            )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Convierte un AppError en respuesta JSON con su status_code."""
    request_id = _request_id_of(request)
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "[app_error] %s %s -> %s %s: %s",
        request.method,
        request.url.path,
        exc.status_code,
        exc.code,
        exc.message,
        extra={"request_id": request_id, "error_code": exc.code},
    )
    detail = exc.to_dict()
    detail["request_id"] = request_id
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": detail},
        headers={"X-Request-ID": request_id},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Convierte errores de validación de FastAPI/pydantic a mapa campo -> mensajes."""
    request_id = _request_id_of(request)
    field_errors: Dict[str, List[str]] = {}
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc) or "__root__"
        field_errors.setdefault(field, []).append(err.get("msg", "invalid"))

    detail = {
        "error_code": "VALIDATION_ERROR",
        "message": "Request validation failed",
        "field_errors": field_errors,
        "request_id": request_id,
    }
    return JSONResponse(status_code=422, content={"detail": detail})


def register_exception_handlers(app: FastAPI) -> None:
    """Registra los handlers de AppError y RequestValidationError en la app."""
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]


__all__ = [
    "JSONExceptionMiddleware",
    "get_request_id",
    "app_error_handler",
    "request_validation_handler",
    "register_exception_handlers",
]

# Fin del archivo backend/app/shared/middleware/exception_handler.py
