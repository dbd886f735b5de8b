"""
Enumeration definitions for the Metric Insights backend.

All enums inherit from both `str` and `Enum` to ensure JSON serialization
compatibility with Pydantic models, enabling automatic serialization and
deserialization in API responses.
"""

from enum import Enum


class MetricKey(str, Enum):
    """
    Tracked business metrics that can be explained.

    The key determines which field of a daily metrics row is read:
    - activeUsers: users
    - eventCount: events
    - newUsers: users (daily rows carry no separate new-user counter)
    - avgTimeToLeadSubmit: not derivable from daily rows, always 0
    """
    ACTIVE_USERS = "activeUsers"
    EVENT_COUNT = "eventCount"
    NEW_USERS = "newUsers"
    AVG_TIME_TO_LEAD_SUBMIT = "avgTimeToLeadSubmit"


class ExplanationStatus(str, Enum):
    """
    Outcome of a single metric analysis.

    - improving: percent change >= +5%
    - stable: |percent change| < 5%
    - needs_attention: percent change <= -5%
    - no_data: the metrics store returned no usable rows
    - error: analysis failed; details are in the explanation's error field
    """
    IMPROVING = "improving"
    STABLE = "stable"
    NEEDS_ATTENTION = "needs_attention"
    NO_DATA = "no_data"
    ERROR = "error"


class ConfidenceLevel(str, Enum):
    """Heuristic trust label for an explanation (score >= 70 high, >= 45 med)."""
    HIGH = "high"
    MED = "med"
    LOW = "low"


class DriverType(str, Enum):
    """Dimension a driver was attributed to."""
    CHANNEL = "channel"
    DEVICE = "device"
    GEO = "geo"
    LANDING_PAGE = "landing_page"
