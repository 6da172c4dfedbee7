# -*- coding: utf-8 -*-
"""
backend/app/modules/businesses/facades/__init__.py

Fachadas del módulo de negocios.
"""

from .business_facade import get_business, set_lhdn_credentials

__all__ = ["get_business", "set_lhdn_credentials"]
