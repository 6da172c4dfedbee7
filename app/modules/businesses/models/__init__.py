# -*- coding: utf-8 -*-
"""
backend/app/modules/businesses/models/__init__.py
"""

from .business_models import Business

__all__ = ["Business"]
