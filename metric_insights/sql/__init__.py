"""
SQL Query Module for the Metric Insights backend.

Provides parameterized SQL queries for reading the daily metrics store,
keeping data access separate from the analysis logic.

Example usage:
    from metric_insights.sql import get_daily_metrics_query

    rows = await conn.fetch(get_daily_metrics_query(), site_id, since)
"""

from metric_insights.sql.metric_queries import (
    get_daily_metrics_query,
    METRIC_ROW_COLUMNS,
)

__all__ = [
    'get_daily_metrics_query',
    'METRIC_ROW_COLUMNS',
]
