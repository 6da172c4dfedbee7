# -*- coding: utf-8 -*-
"""
backend/app/shared/errors/app_errors.py

Taxonomía única de errores de dominio del backend de e-Invoice.

Cada error lleva:
- status_code: código HTTP equivalente
- code: código estable legible por máquina (para la UI)
- message: mensaje legible por humanos
- field_errors: mapa campo -> mensajes (solo errores de validación)

Las fachadas lanzan estas excepciones; el handler de FastAPI
(app.shared.middleware.exception_handler) las convierte en JSON.

Autor: EInvoiceMY
Fecha: 2025-11-02
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class AppError(Exception):
    """Error base de la aplicación."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        field_errors: Optional[Dict[str, List[str]]] = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.field_errors = field_errors

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"error_code": self.code, "message": self.message}
        if self.field_errors:
            data["field_errors"] = self.field_errors
        return data


# ========== VALIDATION ==========

class ValidationFailed(AppError):
    """Entrada mal formada o que no cumple el esquema. Nunca se reintenta."""

    status_code = 422
    code = "VALIDATION_ERROR"


class LhdnCredentialsMissing(ValidationFailed):
    """El negocio no tiene credenciales LHDN configuradas (distinto de 'la llamada falló')."""

    code = "LHDN_CREDENTIALS_MISSING"

    def __init__(self, business_id: Any):
        super().__init__(
            "LHDN credentials are not configured for this business",
            field_errors={"lhdn_credentials": ["not configured"]},
        )
        self.business_id = business_id


class UnsupportedFileType(AppError):
    status_code = 415
    code = "UNSUPPORTED_FILE_TYPE"

    def __init__(self, file_type: str, allowed: List[str]):
        super().__init__(
            f"Unsupported file type '{file_type}'. Allowed: {', '.join(allowed)}"
        )
        self.file_type = file_type


class FileTooLarge(AppError):
    status_code = 413
    code = "FILE_TOO_LARGE"

    def __init__(self, size: int, max_size: int):
        super().__init__(f"File size {size} bytes exceeds maximum of {max_size} bytes")
        self.size = size
        self.max_size = max_size


# ========== NOT_FOUND / OWNERSHIP ==========

class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: Any, *, code: Optional[str] = None):
        super().__init__(f"{resource} not found: {identifier}", code=code)
        self.resource = resource
        self.identifier = identifier


class OwnershipError(AppError):
    status_code = 403
    code = "FORBIDDEN"

    def __init__(self, resource: str, identifier: Any):
        super().__init__(f"You do not have access to {resource} {identifier}")
        self.resource = resource
        self.identifier = identifier


# ========== CONFLICT / INVALID_STATUS_TRANSITION ==========

class ConflictError(AppError):
    status_code = 409
    code = "CONFLICT"


class InvalidStatusTransition(AppError):
    """Transición de estado no permitida por la máquina de estados de facturas."""

    status_code = 422
    code = "INVALID_STATUS_TRANSITION"

    def __init__(self, from_status: Any, to_status: Any, message: Optional[str] = None):
        from_value = getattr(from_status, "value", from_status)
        to_value = getattr(to_status, "value", to_status)
        super().__init__(
            message or f"Cannot transition invoice from {from_value} to {to_value}"
        )
        self.from_status = from_status
        self.to_status = to_status


# ========== EXTERNAL_DEPENDENCY_FAILURE ==========

class ExternalDependencyError(AppError):
    """Falla de un colaborador externo (IA, LHDN, blob store)."""

    status_code = 502
    code = "EXTERNAL_DEPENDENCY_FAILURE"


class LhdnTokenError(ExternalDependencyError):
    code = "LHDN_TOKEN_ERROR"

    def __init__(self, message: str, *, http_status: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.http_status = http_status
        self.body = body


class LhdnSubmissionError(ExternalDependencyError):
    code = "LHDN_SUBMISSION_ERROR"

    def __init__(self, message: str, *, http_status: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.http_status = http_status
        self.body = body


class AiExtractionError(ExternalDependencyError):
    code = "AI_EXTRACTION_ERROR"


class BlobNotFoundError(ExternalDependencyError):
    status_code = 404
    code = "FILE_NOT_FOUND"

    def __init__(self, key: str):
        super().__init__(f"File not found in storage: {key}")
        self.key = key


__all__ = [
    "AppError",
    "ValidationFailed",
    "LhdnCredentialsMissing",
    "UnsupportedFileType",
    "FileTooLarge",
    "NotFoundError",
    "OwnershipError",
    "ConflictError",
    "InvalidStatusTransition",
    "ExternalDependencyError",
    "LhdnTokenError",
    "LhdnSubmissionError",
    "AiExtractionError",
    "BlobNotFoundError",
]

# Fin del archivo backend/app/shared/errors/app_errors.py
