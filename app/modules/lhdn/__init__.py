# -*- coding: utf-8 -*-
"""
backend/app/modules/lhdn/__init__.py

Integración con LHDN MyInvois: cliente HTTP, caché de tokens,
construcción del documento UBL y orquestación de envíos.
"""
