"""
Metric Analyzer - "What changed and why" for dashboard KPI metrics

Orchestrates one analysis per metric key:

1. Load the current and previous comparison windows for the site
2. Short-circuit to no_data when nothing was loaded for the current window
3. Compute the metric delta and status
4. Attribute the change across channel, device, geo and landing page
5. Rank the top drivers, score confidence, build evidence
6. Render the summary and recommendations

Status thresholds (on the unrounded percent change):
- |percent| < 5  -> stable
- percent >= 5   -> improving
- percent <= -5  -> needs_attention

analyze_metric never raises: any failure inside the pipeline is logged and
returned as an explanation with status error. analyze_all_metrics fans out one
analysis per metric key and can therefore never fail as a whole.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, timezone
from typing import List, Optional, Union

from metric_insights.core.config import get_settings
from metric_insights.models.enums import (
    ConfidenceLevel,
    ExplanationStatus,
    MetricKey,
)
from metric_insights.models.schemas import (
    MetricDefinition,
    MetricDelta,
    MetricEvidence,
    MetricExplanation,
    MetricExplanationsResponse,
)
from metric_insights.services.confidence import calculate_confidence
from metric_insights.services.dimension_drivers import (
    analyze_all_dimensions,
    build_evidence,
    rank_top_drivers,
)
from metric_insights.services.metric_loader import load_metric_windows
from metric_insights.services.metric_values import (
    calculate_total,
    round_half_up,
    window_label,
)
from metric_insights.services.recommendations import generate_recommendations
from metric_insights.services.summarizer import (
    generate_detailed_summary,
    generate_summary,
)

logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

# Percent change below which a metric is reported as stable
STABLE_THRESHOLD_PCT: float = 5.0

DEFAULT_WINDOW_DAYS: int = 7

METRIC_DEFINITIONS: List[MetricDefinition] = [
    MetricDefinition(
        metricKey=MetricKey.ACTIVE_USERS,
        title="Active Users",
        definition=(
            "The number of unique users who initiated sessions on your site during the "
            "selected time period. This metric helps you understand your audience reach "
            "and engagement."
        ),
    ),
    MetricDefinition(
        metricKey=MetricKey.EVENT_COUNT,
        title="Event Count",
        definition=(
            "The total number of events triggered on your site, including page views, "
            "clicks, form submissions, and custom events. Higher event counts typically "
            "indicate more engaged users."
        ),
    ),
    MetricDefinition(
        metricKey=MetricKey.NEW_USERS,
        title="New Users",
        definition=(
            "Users who visited your site for the first time during the selected period. "
            "This metric indicates how well your marketing and SEO efforts are attracting "
            "fresh audiences."
        ),
    ),
    MetricDefinition(
        metricKey=MetricKey.AVG_TIME_TO_LEAD_SUBMIT,
        title="Average Time to Lead Submission",
        definition=(
            "The average time between a visitor's first session and their lead form "
            "submission. Shorter times suggest your pages answer questions quickly and "
            "make it easy to get in touch."
        ),
    ),
]


# =============================================================================
# DELTA AND STATUS
# =============================================================================

def calculate_percent_change(current_total: float, previous_total: float) -> float:
    """
    Unrounded percent change from previous_total to current_total.

    A zero previous total reports 100 for any positive current total and 0
    otherwise, instead of dividing by zero.
    """
    if previous_total == 0:
        return 100.0 if current_total > 0 else 0.0
    return (current_total - previous_total) / abs(previous_total) * 100


def calculate_delta(
    current_total: float,
    previous_total: float,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> MetricDelta:
    change = current_total - previous_total
    return MetricDelta(
        absolute=int(round_half_up(change, 0)),
        percent=round_half_up(calculate_percent_change(current_total, previous_total), 1),
        timeWindowLabel=window_label(window_days),
    )


def determine_status(percent_change: float) -> ExplanationStatus:
    if abs(percent_change) < STABLE_THRESHOLD_PCT:
        return ExplanationStatus.STABLE
    if percent_change > 0:
        return ExplanationStatus.IMPROVING
    return ExplanationStatus.NEEDS_ATTENTION


def _zero_delta(window_days: int) -> MetricDelta:
    return MetricDelta(absolute=0, percent=0.0, timeWindowLabel=window_label(window_days))


# =============================================================================
# TERMINAL EXPLANATIONS
# =============================================================================

def no_data_explanation(
    metric_key: MetricKey,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> MetricExplanation:
    """Explanation for a site with no rows in the current window."""
    delta = _zero_delta(window_days)
    status = ExplanationStatus.NO_DATA

    return MetricExplanation(
        metricKey=metric_key,
        status=status,
        delta=delta,
        summary=generate_summary(metric_key, status, delta, []),
        topDrivers=[],
        evidence=MetricEvidence(),
        recommendations=generate_recommendations(metric_key, status, [], []),
        confidence=ConfidenceLevel.LOW,
        lastUpdated=datetime.now(timezone.utc),
    )


def error_explanation(
    metric_key: Union[MetricKey, str],
    error: str,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> MetricExplanation:
    """
    Explanation for a failed analysis.

    The summary stays generic; the raw message is kept in the error field for
    developers.
    """
    try:
        metric_key = MetricKey(metric_key)
    except ValueError:
        # Unknown keys are reported as given
        metric_key = str(metric_key)

    delta = _zero_delta(window_days)
    status = ExplanationStatus.ERROR

    return MetricExplanation(
        metricKey=metric_key,
        status=status,
        delta=delta,
        summary=generate_summary(metric_key, status, delta, []),
        topDrivers=[],
        evidence=MetricEvidence(),
        recommendations=[],
        confidence=ConfidenceLevel.LOW,
        lastUpdated=datetime.now(timezone.utc),
        error=error or "Unknown error",
    )


# =============================================================================
# ANALYSIS
# =============================================================================

async def _run_analysis(
    site_id: str,
    metric_key: MetricKey,
    as_of: Optional[date],
    detailed: bool,
) -> MetricExplanation:
    windows = await load_metric_windows(site_id, as_of=as_of)

    if not windows.current:
        logger.info(f"No current data for site {site_id}, metric {metric_key.value}")
        return no_data_explanation(metric_key, windows.window_days)

    current_total = calculate_total(windows.current, metric_key)
    previous_total = calculate_total(windows.previous, metric_key)
    total_change = current_total - previous_total

    percent_change = calculate_percent_change(current_total, previous_total)
    delta = calculate_delta(current_total, previous_total, windows.window_days)
    status = determine_status(percent_change)

    drivers = analyze_all_dimensions(
        windows.current,
        windows.previous,
        metric_key,
        total_change,
    )
    top_drivers = rank_top_drivers(drivers)

    confidence = calculate_confidence(
        len(windows.current),
        len(windows.previous),
        top_drivers,
        percent_change,
        expected_points=windows.window_days,
    )

    summarize = generate_detailed_summary if detailed else generate_summary
    summary = summarize(metric_key, status, delta, top_drivers)

    recommendations = generate_recommendations(
        metric_key,
        status,
        top_drivers,
        drivers.page,
    )

    logger.info(
        f"Analyzed {metric_key.value} for site {site_id}: "
        f"{status.value} ({delta.percent}%), {len(top_drivers)} drivers, "
        f"confidence {confidence.value}"
    )

    return MetricExplanation(
        metricKey=metric_key,
        status=status,
        delta=delta,
        summary=summary,
        topDrivers=top_drivers,
        evidence=build_evidence(drivers),
        recommendations=recommendations,
        confidence=confidence,
        lastUpdated=datetime.now(timezone.utc),
    )


async def analyze_metric(
    site_id: str,
    metric_key: Union[MetricKey, str],
    as_of: Optional[date] = None,
    detailed: bool = False,
) -> MetricExplanation:
    """
    Explain the change of one metric for a site.

    Args:
        site_id: Site identifier in the metrics store
        metric_key: Metric to explain, as a MetricKey or its string value
        as_of: Reference date for the comparison windows (defaults to today)
        detailed: Use the detailed summary with secondary drivers

    Returns:
        MetricExplanation. Never raises; failures yield status error.
    """
    window_days = DEFAULT_WINDOW_DAYS
    try:
        window_days = get_settings().comparison_window_days
        key = MetricKey(metric_key)
        return await _run_analysis(site_id, key, as_of, detailed)
    except Exception as e:
        logger.error(
            f"Error analyzing {getattr(metric_key, 'value', metric_key)} for site {site_id}: {e}",
            exc_info=True,
        )
        return error_explanation(metric_key, str(e), window_days)


async def analyze_all_metrics(
    site_id: str,
    as_of: Optional[date] = None,
) -> MetricExplanationsResponse:
    """
    Explain every tracked metric for a site concurrently.

    Each analysis isolates its own failures, so one broken metric shows up as
    an error explanation without affecting the others.
    """
    metric_keys = list(MetricKey)
    explanations = await asyncio.gather(
        *(analyze_metric(site_id, key, as_of=as_of) for key in metric_keys)
    )

    return MetricExplanationsResponse(
        **{key.value: explanation for key, explanation in zip(metric_keys, explanations)}
    )


def get_metric_definitions() -> List[MetricDefinition]:
    """Definitions for the breakdown page "What it means" section."""
    return [definition.model_copy() for definition in METRIC_DEFINITIONS]


__all__ = [
    "analyze_metric",
    "analyze_all_metrics",
    "calculate_percent_change",
    "calculate_delta",
    "determine_status",
    "no_data_explanation",
    "error_explanation",
    "get_metric_definitions",
    "METRIC_DEFINITIONS",
    "STABLE_THRESHOLD_PCT",
]
