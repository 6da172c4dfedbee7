# -*- coding: utf-8 -*-
"""
backend/app/modules/lhdn/repositories/__init__.py
"""

from .submission_repository import LhdnSubmissionRepository
from .token_repository import LhdnTokenRepository

__all__ = ["LhdnSubmissionRepository", "LhdnTokenRepository"]
