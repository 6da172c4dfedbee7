# -*- coding: utf-8 -*-
"""
backend/app/modules/ocr/__init__.py

Módulo OCR: confirmación de carga, pipeline de extracción (texto -> IA ->
validación -> triage -> factura) y consumidor de la cola OCR.
"""
