# -*- coding: utf-8 -*-
"""
backend/app/shared/errors/__init__.py

Re-exporta la taxonomía de errores de dominio.

Autor: EInvoiceMY
Fecha: 2025-11-02
"""

from .app_errors import (
    AppError,
    ValidationFailed,
    LhdnCredentialsMissing,
    UnsupportedFileType,
    FileTooLarge,
    NotFoundError,
    OwnershipError,
    ConflictError,
    InvalidStatusTransition,
    ExternalDependencyError,
    LhdnTokenError,
    LhdnSubmissionError,
    AiExtractionError,
    BlobNotFoundError,
)

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

# Fin del archivo backend/app/shared/errors/__init__.py
