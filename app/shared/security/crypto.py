# -*- coding: utf-8 -*-
"""
backend/app/shared/security/crypto.py

Cifrado simétrico en reposo (AES-256-GCM) para secretos por negocio:
credenciales LHDN (client_id / client_secret) y tokens de acceso cacheados.

Formato del texto cifrado:
    base64( iv[12 bytes] || ciphertext || tag[16 bytes] )

La llave se configura como hex de 32 bytes en ENCRYPTION_KEY.

Autor: EInvoiceMY
Fecha: 2025-11-04
"""

from __future__ import annotations

import base64
import binascii
import logging
import os
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from app.shared.config import get_settings

logger = logging.getLogger(__name__)

IV_LENGTH = 12


class EncryptionError(Exception):
    """Error al cifrar/descifrar (llave inválida o texto manipulado)."""


def _load_key(hex_key: Optional[str] = None) -> bytes:
    raw = hex_key if hex_key is not None else get_settings().encryption_key.get_secret_value()
    try:
        key = bytes.fromhex(raw)
    except ValueError as e:
        raise EncryptionError("ENCRYPTION_KEY no es hex válido") from e
    if len(key) != 32:
        raise EncryptionError("ENCRYPTION_KEY debe tener 32 bytes (64 caracteres hex)")
    return key


def encrypt(plaintext: str, hex_key: Optional[str] = None) -> str:
    """
    Cifra un texto con AES-256-GCM.

    Args:
        plaintext: Texto a cifrar
        hex_key: Llave hex opcional (por defecto ENCRYPTION_KEY)

    Returns:
        Texto cifrado en base64 (iv + ciphertext + tag)
    """
    key = _load_key(hex_key)
    iv = os.urandom(IV_LENGTH)
    ciphertext = AESGCM(key).encrypt(iv, plaintext.encode("utf-8"), None)
    return base64.b64encode(iv + ciphertext).decode("ascii")


def decrypt(token: str, hex_key: Optional[str] = None) -> str:
    """
    Descifra un texto producido por `encrypt`.

    Raises:
        EncryptionError: Si el formato es inválido o la autenticación GCM falla
    """
    key = _load_key(hex_key)
    try:
        combined = base64.b64decode(token, validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncryptionError("Texto cifrado no es base64 válido") from e
    if len(combined) <= IV_LENGTH:
        raise EncryptionError("Texto cifrado demasiado corto")

    iv, ciphertext = combined[:IV_LENGTH], combined[IV_LENGTH:]
    try:
        plaintext = AESGCM(key).decrypt(iv, ciphertext, None)
    except InvalidTag as e:
        logger.warning("[decrypt] Autenticación GCM falló (llave incorrecta o dato alterado)")
        raise EncryptionError("No se pudo descifrar el valor") from e
    return plaintext.decode("utf-8")


__all__ = ["encrypt", "decrypt", "EncryptionError"]

# Fin del archivo backend/app/shared/security/crypto.py
