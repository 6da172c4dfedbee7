# -*- coding: utf-8 -*-
"""
backend/app/__init__.py

Inicializador del paquete principal 'app' del backend EInvoiceMY.

Autor: EInvoiceMY
Fecha: 2025-11-07
"""

# Fin del archivo backend/app/__init__.py
