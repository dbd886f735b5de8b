"""
Data loader for metric change analysis.

Fetches the last two comparison windows of daily rows for a site in one read
query and splits them by a date cutoff:

- current:  date >= as_of - window_days
- previous: date <  as_of - window_days

The fetch covers date >= as_of - 2 * window_days, ordered by date descending.
Rows without a usable date belong to neither window.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, List, Optional, Tuple

from metric_insights.core.config import get_settings
from metric_insights.core.database import get_db_pool
from metric_insights.services.metric_values import MetricRow, window_label
from metric_insights.sql.metric_queries import get_daily_metrics_query

logger = logging.getLogger(__name__)


@dataclass
class MetricWindows:
    """Rows for the current and previous comparison windows."""
    current: List[MetricRow] = field(default_factory=list)
    previous: List[MetricRow] = field(default_factory=list)
    window_days: int = 7

    @property
    def label(self) -> str:
        return window_label(self.window_days)


async def fetch_metric_rows(site_id: str, since: date) -> List[MetricRow]:
    """
    Fetch daily rows for site_id with date >= since, most recent first.

    Raises:
        asyncpg.PostgresError: If the query fails. The orchestrator converts
            this into an error explanation.
    """
    pool = await get_db_pool()

    async with pool.acquire() as conn:
        records = await conn.fetch(get_daily_metrics_query(), site_id, since)

    return [MetricRow.from_record(record) for record in records]


def split_windows(
    rows: Iterable[MetricRow],
    cutoff: date,
) -> Tuple[List[MetricRow], List[MetricRow]]:
    """Split rows into (current, previous) around cutoff."""
    current: List[MetricRow] = []
    previous: List[MetricRow] = []

    for row in rows:
        if row.date is None:
            continue
        if row.date >= cutoff:
            current.append(row)
        else:
            previous.append(row)

    return current, previous


async def load_metric_windows(
    site_id: str,
    as_of: Optional[date] = None,
) -> MetricWindows:
    """
    Load the current and previous windows for a site.

    Args:
        site_id: Site identifier in the metrics store.
        as_of: Reference date; defaults to today.

    Returns:
        MetricWindows with both row sets and the configured window length.
    """
    window_days = get_settings().comparison_window_days
    as_of = as_of or date.today()
    cutoff = as_of - timedelta(days=window_days)
    since = as_of - timedelta(days=window_days * 2)

    rows = await fetch_metric_rows(site_id, since)
    current, previous = split_windows(rows, cutoff)

    logger.debug(
        f"Loaded {len(rows)} rows for site {site_id} since {since}: "
        f"{len(current)} current, {len(previous)} previous"
    )

    return MetricWindows(current=current, previous=previous, window_days=window_days)


__all__ = [
    "MetricWindows",
    "fetch_metric_rows",
    "split_windows",
    "load_metric_windows",
]
