"""
Confidence scoring for metric explanations.

A heuristic 0-100 score built from three independent signals:

- Data completeness (40 points): how full each comparison window is, relative
  to one row per day
- Explanatory power (30 points): how much of the change the top drivers
  account for, capped at 100%
- Change magnitude (30 points, stepped): small changes are noisier to
  attribute, so they cap confidence even with good driver coverage

The score maps to high (>= 70), med (>= 45) or low.
"""

from typing import Sequence

import numpy as np

from metric_insights.models.enums import ConfidenceLevel
from metric_insights.models.schemas import DriverResult

COMPLETENESS_WEIGHT: float = 40.0
EXPLANATORY_WEIGHT: float = 30.0

HIGH_CONFIDENCE_SCORE: float = 70.0
MED_CONFIDENCE_SCORE: float = 45.0

# (minimum |percent change|, points), checked in order
MAGNITUDE_STEPS = (
    (20.0, 30.0),
    (10.0, 20.0),
    (5.0, 10.0),
)
MIN_MAGNITUDE_POINTS: float = 5.0


def _magnitude_points(percent_change: float) -> float:
    abs_change = abs(percent_change)
    for minimum, points in MAGNITUDE_STEPS:
        if abs_change >= minimum:
            return points
    return MIN_MAGNITUDE_POINTS


def calculate_confidence_score(
    current_points: int,
    previous_points: int,
    top_drivers: Sequence[DriverResult],
    percent_change: float,
    expected_points: int = 7,
) -> float:
    """
    Compute the 0-100 confidence score.

    Args:
        current_points: Rows in the current window
        previous_points: Rows in the previous window
        top_drivers: Drivers reported in the explanation
        percent_change: Unrounded percent change of the metric
        expected_points: Rows expected per full window (one per day)

    Returns:
        Score clamped to [0, 100].
    """
    expected = max(expected_points, 1)
    current_completeness = min(current_points / expected, 1.0)
    previous_completeness = min(previous_points / expected, 1.0)
    score = (current_completeness + previous_completeness) * (COMPLETENESS_WEIGHT / 2)

    total_explained = sum(abs(d.contributionPct) for d in top_drivers)
    score += min(total_explained / 100.0, 1.0) * EXPLANATORY_WEIGHT

    score += _magnitude_points(percent_change)

    return float(np.clip(score, 0.0, 100.0))


def confidence_level(score: float) -> ConfidenceLevel:
    """Map a score to its label: >= 70 high, >= 45 med, otherwise low."""
    if score >= HIGH_CONFIDENCE_SCORE:
        return ConfidenceLevel.HIGH
    if score >= MED_CONFIDENCE_SCORE:
        return ConfidenceLevel.MED
    return ConfidenceLevel.LOW


def calculate_confidence(
    current_points: int,
    previous_points: int,
    top_drivers: Sequence[DriverResult],
    percent_change: float,
    expected_points: int = 7,
) -> ConfidenceLevel:
    score = calculate_confidence_score(
        current_points,
        previous_points,
        top_drivers,
        percent_change,
        expected_points=expected_points,
    )
    return confidence_level(score)
