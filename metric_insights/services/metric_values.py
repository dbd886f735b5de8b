"""
Metric value extraction for daily metrics rows.

Maps a raw ga4_daily record to an immutable MetricRow and a MetricRow plus a
MetricKey to a numeric value. Store values are coerced leniently on the way in:
anything missing, non-numeric or non-finite becomes None and counts as 0, so no
NaN or Infinity can reach the percent, contribution or confidence arithmetic.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional

import numpy as np

from metric_insights.models.enums import MetricKey


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class MetricRow:
    """
    One day of metrics for a site and dimension combination.

    Owned by the metrics store; read-only to the analyzer.
    """
    id: Optional[int] = None
    site_id: Optional[str] = None
    date: Optional[date] = None
    sessions: Optional[float] = None
    users: Optional[float] = None
    events: Optional[float] = None
    conversions: Optional[float] = None
    bounce_rate: Optional[float] = None
    avg_session_duration: Optional[float] = None
    pages_per_session: Optional[float] = None
    channel: Optional[str] = None
    landing_page: Optional[str] = None
    device: Optional[str] = None
    geo: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "MetricRow":
        """Build a MetricRow from an asyncpg Record or a plain mapping."""
        data = dict(record)
        raw_id = _coerce_number(data.get("id"))

        return cls(
            id=int(raw_id) if raw_id is not None else None,
            site_id=_coerce_text(data.get("site_id")),
            date=_coerce_date(data.get("date")),
            sessions=_coerce_number(data.get("sessions")),
            users=_coerce_number(data.get("users")),
            events=_coerce_number(data.get("events")),
            conversions=_coerce_number(data.get("conversions")),
            bounce_rate=_coerce_number(data.get("bounce_rate")),
            avg_session_duration=_coerce_number(data.get("avg_session_duration")),
            pages_per_session=_coerce_number(data.get("pages_per_session")),
            channel=_coerce_text(data.get("channel")),
            landing_page=_coerce_text(data.get("landing_page")),
            device=_coerce_text(data.get("device")),
            geo=_coerce_text(data.get("geo")),
        )


# =============================================================================
# EXTRACTION
# =============================================================================

def get_metric_value(row: MetricRow, metric_key: MetricKey) -> float:
    """
    Extract the value of metric_key from a row.

    avgTimeToLeadSubmit is computed from lead data, not from daily traffic
    rows, so it always yields 0 here.
    """
    if metric_key == MetricKey.ACTIVE_USERS:
        return row.users or 0.0
    if metric_key == MetricKey.EVENT_COUNT:
        return row.events or 0.0
    if metric_key == MetricKey.NEW_USERS:
        # No separate new-user counter in daily rows; approximate with users
        return row.users or 0.0
    return 0.0


def calculate_total(rows: Iterable[MetricRow], metric_key: MetricKey) -> float:
    """Sum metric_key across rows."""
    return float(sum(get_metric_value(row, metric_key) for row in rows))


# =============================================================================
# ROUNDING AND LABELS
# =============================================================================

def round_half_up(value: float, digits: int = 1) -> float:
    """
    Round to `digits` decimals with halves rounded towards +infinity.

    Python's round() uses banker's rounding, which would report 12.25 as 12.2.
    """
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def window_label(window_days: int) -> str:
    """Human readable window label, e.g. '7 days'."""
    return f"{window_days} days"


# =============================================================================
# COERCION HELPERS
# =============================================================================

def _coerce_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not np.isfinite(number):
        return None
    return number


def _coerce_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _coerce_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


__all__ = [
    "MetricRow",
    "get_metric_value",
    "calculate_total",
    "round_half_up",
    "window_label",
]
