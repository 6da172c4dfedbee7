# -*- coding: utf-8 -*-
"""
backend/app/modules/bulk_import/__init__.py

Módulo de importación masiva:
- Sesiones de documentos (N cargas OCR agrupadas + envío en lote)
- Importación CSV (una factura DRAFT por fila)
"""
