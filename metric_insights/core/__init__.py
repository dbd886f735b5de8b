"""
Core infrastructure package for the Metric Insights backend.

Provides:
- Configuration management via pydantic-settings
- Async PostgreSQL connectivity via asyncpg

Re-exports key components so callers can write:

    from metric_insights.core import get_settings, get_db_pool
"""

from metric_insights.core.config import Settings, get_settings
from metric_insights.core.database import init_db, close_db, get_db_pool

__all__ = [
    # Configuration management (from config.py)
    'Settings',
    'get_settings',
    # Database pool lifecycle (from database.py)
    'init_db',
    'close_db',
    'get_db_pool',
]
