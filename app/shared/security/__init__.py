# -*- coding: utf-8 -*-
"""
backend/app/shared/security/__init__.py

Utilidades de seguridad de EInvoiceMY (cifrado de secretos en reposo).
"""

from .crypto import EncryptionError, decrypt, encrypt

__all__ = ["EncryptionError", "encrypt", "decrypt"]

# Fin del archivo backend/app/shared/security/__init__.py
