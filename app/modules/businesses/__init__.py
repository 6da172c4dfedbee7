# -*- coding: utf-8 -*-
"""
backend/app/modules/businesses/__init__.py

Módulo de negocios: perfil fiscal del emisor y credenciales LHDN.
"""
