"""
Metric Insights Services Module

Business logic for explaining KPI metric changes. Each service is stateless;
only metric_loader performs I/O.

Services:
- metric_values: Row model, metric extraction, rounding helpers
- metric_loader: Two-window row fetch from ga4_daily
- dimension_drivers: Channel/device/geo/page attribution and aggregation
- confidence: Heuristic confidence scoring
- summarizer: Plain English summaries
- recommendations: Rule-based recommendations
- metric_analyzer: Per-metric and batch orchestration

All services are designed to be consumed by the API layer (metric_insights/api/).
"""

# =============================================================================
# Metric Values and Loading
# =============================================================================

from metric_insights.services.metric_values import (
    MetricRow,
    get_metric_value,
    calculate_total,
    round_half_up,
    window_label,
)

from metric_insights.services.metric_loader import (
    MetricWindows,
    fetch_metric_rows,
    split_windows,
    load_metric_windows,
)

# =============================================================================
# Dimension Drivers
# =============================================================================

from metric_insights.services.dimension_drivers import (
    DimensionConfig,
    DimensionDrivers,
    analyze_dimension,
    analyze_all_dimensions,
    analyze_channel,
    analyze_device,
    analyze_geo,
    analyze_page,
    rank_top_drivers,
    build_evidence,
)

# =============================================================================
# Confidence, Summary and Recommendations
# =============================================================================

from metric_insights.services.confidence import (
    calculate_confidence,
    calculate_confidence_score,
    confidence_level,
)

from metric_insights.services.summarizer import (
    generate_summary,
    generate_detailed_summary,
    format_driver_label,
)

from metric_insights.services.recommendations import (
    generate_recommendations,
    get_channel_recommendation,
    get_device_recommendation,
)

# =============================================================================
# Orchestration
# =============================================================================

from metric_insights.services.metric_analyzer import (
    analyze_metric,
    analyze_all_metrics,
    calculate_delta,
    determine_status,
    get_metric_definitions,
)


__all__ = [
    # Metric values and loading
    "MetricRow",
    "get_metric_value",
    "calculate_total",
    "round_half_up",
    "window_label",
    "MetricWindows",
    "fetch_metric_rows",
    "split_windows",
    "load_metric_windows",
    # Dimension drivers
    "DimensionConfig",
    "DimensionDrivers",
    "analyze_dimension",
    "analyze_all_dimensions",
    "analyze_channel",
    "analyze_device",
    "analyze_geo",
    "analyze_page",
    "rank_top_drivers",
    "build_evidence",
    # Confidence, summary and recommendations
    "calculate_confidence",
    "calculate_confidence_score",
    "confidence_level",
    "generate_summary",
    "generate_detailed_summary",
    "format_driver_label",
    "generate_recommendations",
    "get_channel_recommendation",
    "get_device_recommendation",
    # Orchestration
    "analyze_metric",
    "analyze_all_metrics",
    "calculate_delta",
    "determine_status",
    "get_metric_definitions",
]
