# -*- coding: utf-8 -*-
"""
backend/app/modules/lhdn/models/__init__.py
"""

from .lhdn_models import LhdnSubmission, LhdnToken

__all__ = ["LhdnSubmission", "LhdnToken"]
