# -*- coding: utf-8 -*-
"""
backend/app/modules/businesses/repositories/__init__.py
"""

from .business_repository import BusinessRepository

__all__ = ["BusinessRepository"]
