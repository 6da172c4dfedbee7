# -*- coding: utf-8 -*-
"""
backend/app/modules/businesses/schemas/__init__.py
"""

from .business_schemas import BusinessRead, LhdnCredentialsIn, LhdnCredentialsStatus

__all__ = ["BusinessRead", "LhdnCredentialsIn", "LhdnCredentialsStatus"]
