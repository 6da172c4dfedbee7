# -*- coding: utf-8 -*-
"""
backend/app/shared/config/__init__.py

Punto único de acceso a la configuración:
    from app.shared.config import get_settings

Autor: EInvoiceMY
Fecha: 24/10/2025
"""

from .config_loader import get_settings
from .logging_config import setup_logging
from .settings_base import BaseAppSettings, LHDN_BASE_URLS

__all__ = [
    "get_settings",
    "setup_logging",
    "BaseAppSettings",
    "LHDN_BASE_URLS",
]

# Fin del archivo backend/app/shared/config/__init__.py
