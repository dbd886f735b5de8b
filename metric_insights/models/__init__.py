"""
Package initialization file for Metric Insights models.

Re-exports all Pydantic schemas and enumerations so other modules can write:

    from metric_insights.models import MetricKey, MetricExplanation
"""

# =============================================================================
# Enums
# =============================================================================

from metric_insights.models.enums import (
    MetricKey,
    ExplanationStatus,
    ConfidenceLevel,
    DriverType,
)

# =============================================================================
# Schemas
# =============================================================================

from metric_insights.models.schemas import (
    MetricDelta,
    DriverResult,
    PageImpact,
    SourceImpact,
    MetricEvidence,
    Recommendation,
    MetricExplanation,
    MetricExplanationsResponse,
    MetricDefinition,
)

__all__ = [
    # Enums
    "MetricKey",
    "ExplanationStatus",
    "ConfidenceLevel",
    "DriverType",
    # Schemas
    "MetricDelta",
    "DriverResult",
    "PageImpact",
    "SourceImpact",
    "MetricEvidence",
    "Recommendation",
    "MetricExplanation",
    "MetricExplanationsResponse",
    "MetricDefinition",
]
