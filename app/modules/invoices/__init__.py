# -*- coding: utf-8 -*-
"""
backend/app/modules/invoices/__init__.py

Módulo de facturas: agregado Invoice, máquina de estados y motor de totales.
"""
