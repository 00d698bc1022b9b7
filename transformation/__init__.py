"""
TenMinuteTransformation Package.

Journal backend for weekly goals, daily intentions and reflections, and
weekly reviews.

This package contains:
- FastAPI backend server and REST API routes
- In-memory and SQLite record stores
- Activity suggestion and streak calculations
- Async API client with a query cache
"""

__version__ = "0.1.0"
