# -*- coding: utf-8 -*-
"""
backend/app/shared/__init__.py

Infraestructura compartida por los módulos de dominio:
configuración, base de datos, errores, middlewares, seguridad,
integraciones externas y recursos globales.

No inicializa nada en import-time para evitar efectos colaterales
durante la recolección de tests.
"""

# Fin del archivo backend/app/shared/__init__.py
