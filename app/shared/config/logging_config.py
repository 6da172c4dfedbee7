# -*- coding: utf-8 -*-
"""
backend/app/shared/config/logging_config.py

Configuración centralizada de logging para el backend de e-Invoice.
Soporta formato plain (desarrollo) y json (producción).

Los campos pasados vía `extra={...}` (invoice_id, business_id,
ocr_document_id, submission_id...) se emiten como claves JSON de primer
nivel cuando fmt="json".

Autor: EInvoiceMY
Fecha: 24/10/2025
"""

import logging.config
from typing import Literal

# Librerías ruidosas que se limitan a WARNING salvo en DEBUG
_NOISY_LOGGERS = ("httpx", "httpcore", "aiohttp.access", "sqlalchemy.engine", "pdfminer")


def setup_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO",
    fmt: Literal["plain", "pretty", "json"] = "plain"
) -> None:
    """
    Configura el sistema de logging de la aplicación.

    Args:
        level: Nivel de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        fmt: Formato de salida (plain, pretty, json)

    Ejemplos:
        >>> setup_logging("INFO", "plain")
        >>> setup_logging("WARNING", "json")
    """
    # pretty == plain para efectos prácticos
    use_json = fmt == "json"

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json" if use_json else "default",
            "stream": "ext://sys.stdout",
        }
    }

    formatters = {
        "default": {
            "format": "%(asctime)s %(levelname)s [%(name)s]: %(message)s"
        },
        "json": {
            "()": "pythonjsonlogger.json.JsonFormatter",
            "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
        },
    }

    noisy_level = "DEBUG" if level.upper() == "DEBUG" else "WARNING"

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": handlers,
        "loggers": {name: {"level": noisy_level} for name in _NOISY_LOGGERS},
        "root": {
            "handlers": ["console"],
            "level": level.upper(),
        },
    }

    logging.config.dictConfig(logging_config)


__all__ = ["setup_logging"]
# Fin del archivo backend/app/shared/config/logging_config.py
