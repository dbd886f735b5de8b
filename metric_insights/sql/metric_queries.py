"""
Daily metrics SQL query module for the Metric Insights backend.

The metrics store keeps one row per site per calendar day and dimension
combination in ga4_daily. The analyzer reads it with a single parameterized
query per analysis; nothing here writes to the store.

Parameters:
    $1: site_id
    $2: earliest date to include (inclusive)
"""

from typing import Tuple


# Columns read from ga4_daily, in the order MetricRow.from_record expects them
METRIC_ROW_COLUMNS: Tuple[str, ...] = (
    "id",
    "site_id",
    "date",
    "sessions",
    "users",
    "events",
    "conversions",
    "bounce_rate",
    "avg_session_duration",
    "pages_per_session",
    "channel",
    "landing_page",
    "device",
    "geo",
)


def get_daily_metrics_query() -> str:
    """
    Generate SQL to fetch daily metric rows for a site since a given date.

    Rows are ordered by date descending (most recent first).

    Returns:
        Parameterized SQL string using $1 (site_id) and $2 (since date).

    Example:
        >>> sql = get_daily_metrics_query()
        >>> rows = await conn.fetch(sql, "site_123", date(2026, 1, 1))
    """
    columns = ",\n    ".join(METRIC_ROW_COLUMNS)

    return f"""
SELECT
    {columns}
FROM ga4_daily
WHERE site_id = $1
  AND date >= $2
ORDER BY date DESC
"""
