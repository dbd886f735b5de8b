"""
Pydantic response models for the Metric Insights API.

These models define the JSON contract consumed by the dashboard's "What Changed?"
KPI cards and Metric Breakdown pages. Field names are camelCase to match the
frontend types; list caps (top drivers, recommendations, evidence) are enforced
here so no analysis path can emit an oversized explanation.

All models use Pydantic v2 syntax with field validation and examples.
"""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from metric_insights.models.enums import (
    ConfidenceLevel,
    DriverType,
    ExplanationStatus,
    MetricKey,
)


# =============================================================================
# Delta and Driver Models
# =============================================================================


class MetricDelta(BaseModel):
    """
    Change of a metric between the previous and current windows.

    percent is (change / |previous total|) * 100; when the previous total is 0
    it is 100 if the current total is positive and 0 otherwise.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "absolute": 200,
                "percent": 20.0,
                "timeWindowLabel": "7 days"
            }
        }
    )

    absolute: int = Field(
        ...,
        description="Total change in metric units, rounded to an integer"
    )
    percent: float = Field(
        ...,
        description="Percent change relative to the previous window (1 decimal)"
    )
    timeWindowLabel: str = Field(
        default="7 days",
        description="Human readable comparison window"
    )


class DriverResult(BaseModel):
    """
    A single dimension value and its share of the metric change.

    contributionPct is signed relative to the total change: positive values
    moved with the total, negative values moved against it.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "type": "channel",
                "label": "Organic Search",
                "contributionPct": 40.0,
                "delta": 80.0,
                "valueBefore": 100.0,
                "valueAfter": 180.0,
                "details": "Organic Search increased by 80 (80.0%)"
            }
        }
    )

    type: DriverType = Field(
        ...,
        description="Dimension the driver belongs to"
    )
    label: str = Field(
        ...,
        description="Display label for the dimension value"
    )
    contributionPct: float = Field(
        ...,
        description="Signed percent of the total change attributed to this driver"
    )
    delta: float = Field(
        ...,
        description="Change in metric units for this dimension value"
    )
    valueBefore: float = Field(
        default=0.0,
        description="Metric total in the previous window"
    )
    valueAfter: float = Field(
        default=0.0,
        description="Metric total in the current window"
    )
    details: Optional[str] = Field(
        default=None,
        description="One-line description of the change"
    )


# =============================================================================
# Evidence Models
# =============================================================================


class PageImpact(BaseModel):
    """Landing page evidence row for the breakdown page."""
    url: str
    valueBefore: float
    valueAfter: float
    delta: float
    contributionPct: float


class SourceImpact(BaseModel):
    """Traffic source evidence row for the breakdown page."""
    source: str
    delta: float
    contributionPct: float


class MetricEvidence(BaseModel):
    """
    Longer tail of page and source drivers, independent of the top-5 cut.
    """
    topPagesByImpact: List[PageImpact] = Field(
        default_factory=list,
        max_length=10,
        description="Up to 10 landing page drivers"
    )
    topSourcesByImpact: List[SourceImpact] = Field(
        default_factory=list,
        max_length=5,
        description="Up to 5 channel drivers"
    )


class Recommendation(BaseModel):
    """Actionable advice attached to an explanation."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Review SEO performance",
                "why": "Organic search traffic has declined. Check for ranking drops or technical issues.",
                "targetUrls": [],
                "suggestedActions": ["Check Google Search Console for crawl errors"]
            }
        }
    )

    title: str
    why: str
    targetUrls: List[str] = Field(default_factory=list)
    suggestedActions: List[str] = Field(default_factory=list)


# =============================================================================
# Explanation Models
# =============================================================================


class MetricExplanation(BaseModel):
    """
    Root output of a metric analysis.

    Created fresh on every call; every failure mode is representable as a
    valid explanation (status no_data or error).
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "metricKey": "activeUsers",
                "status": "improving",
                "delta": {"absolute": 200, "percent": 20.0, "timeWindowLabel": "7 days"},
                "summary": "Active users increased 20.0% over the past 7 days, primarily driven by growth in Organic Search traffic.",
                "topDrivers": [],
                "evidence": {"topPagesByImpact": [], "topSourcesByImpact": []},
                "recommendations": [],
                "confidence": "high",
                "lastUpdated": "2026-01-15T12:00:00Z"
            }
        }
    )

    metricKey: Union[MetricKey, str]
    status: ExplanationStatus
    delta: MetricDelta
    summary: str = Field(
        ...,
        description="One sentence plain English explanation"
    )
    topDrivers: List[DriverResult] = Field(
        default_factory=list,
        max_length=5
    )
    evidence: MetricEvidence = Field(default_factory=MetricEvidence)
    recommendations: List[Recommendation] = Field(
        default_factory=list,
        max_length=3
    )
    confidence: ConfidenceLevel = ConfidenceLevel.LOW
    lastUpdated: datetime
    error: Optional[str] = Field(
        default=None,
        description="Developer-facing error message when status is error"
    )


class MetricExplanationsResponse(BaseModel):
    """Batch response for the dashboard: one explanation per tracked metric."""
    activeUsers: MetricExplanation
    eventCount: MetricExplanation
    newUsers: MetricExplanation
    avgTimeToLeadSubmit: MetricExplanation


class MetricDefinition(BaseModel):
    """Copy for the breakdown page "What it means" section."""
    metricKey: MetricKey
    title: str
    definition: str
