"""
Journal API Routes.

This package contains one router module per record type plus the insights
router for derived data. All routes are mounted under ``API_PREFIX``.
"""

# API prefix
API_PREFIX = "/api"

__all__ = ["API_PREFIX"]
