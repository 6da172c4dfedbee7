# -*- coding: utf-8 -*-
"""
backend/app/modules/ocr/enums/file_type_enum.py

Tipos de archivo aceptados para OCR. El extractor se elige solo por
esta etiqueta (derivada de la extensión), nunca inspeccionando el contenido.

Autor: EInvoiceMY
Fecha: 2025-11-08
"""

from enum import StrEnum


class FileType(StrEnum):
    __pg_enum_name__ = "ocr_file_type_enum"

    PDF = "pdf"
    JPG = "jpg"
    JPEG = "jpeg"
    PNG = "png"


ALLOWED_FILE_TYPES = tuple(t.value for t in FileType)
IMAGE_FILE_TYPES = frozenset({FileType.JPG, FileType.JPEG, FileType.PNG})

__all__ = ["FileType", "ALLOWED_FILE_TYPES", "IMAGE_FILE_TYPES"]

# Fin del archivo backend/app/modules/ocr/enums/file_type_enum.py
