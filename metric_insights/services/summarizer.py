"""
Natural language summaries for metric explanations.

Status decides the template; for improving and declining metrics the single
top driver is phrased according to its dimension.
"""

from typing import Dict, Sequence

from metric_insights.models.enums import DriverType, ExplanationStatus, MetricKey
from metric_insights.models.schemas import DriverResult, MetricDelta

METRIC_NAMES: Dict[MetricKey, str] = {
    MetricKey.ACTIVE_USERS: "active users",
    MetricKey.EVENT_COUNT: "events",
    MetricKey.NEW_USERS: "new users",
    MetricKey.AVG_TIME_TO_LEAD_SUBMIT: "time to lead submission",
}


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def format_driver_label(driver: DriverResult) -> str:
    """Phrase a driver for use after 'primarily driven by'."""
    direction = "growth" if driver.delta > 0 else "decline"

    if driver.type == DriverType.CHANNEL:
        return f"{direction} in {driver.label} traffic"
    if driver.type == DriverType.DEVICE:
        return f"changes in {driver.label} users"
    if driver.type == DriverType.GEO:
        return f"traffic from {driver.label}"
    if driver.type == DriverType.LANDING_PAGE:
        return f"your {driver.label} page"
    return driver.label


def generate_summary(
    metric_key: MetricKey,
    status: ExplanationStatus,
    delta: MetricDelta,
    top_drivers: Sequence[DriverResult],
) -> str:
    """
    One sentence summary of what happened to the metric.

    The error summary is deliberately generic; the underlying exception is
    only exposed through the explanation's error field.
    """
    metric_name = METRIC_NAMES.get(metric_key, str(metric_key))

    if status == ExplanationStatus.NO_DATA:
        return f"No data available to analyze {metric_name}. Connect Google Analytics to see insights."

    if status == ExplanationStatus.ERROR:
        return f"Unable to analyze {metric_name} due to a data error. Please try again later."

    if status == ExplanationStatus.STABLE:
        return f"{_capitalize(metric_name)} remained stable over the past {delta.timeWindowLabel}."

    direction = "increased" if delta.percent > 0 else "decreased"
    abs_percent = f"{abs(delta.percent):.1f}"

    if not top_drivers:
        return f"{_capitalize(metric_name)} {direction} {abs_percent}% over the past {delta.timeWindowLabel}."

    driver_label = format_driver_label(top_drivers[0])

    return (
        f"{_capitalize(metric_name)} {direction} {abs_percent}% over the past "
        f"{delta.timeWindowLabel}, primarily driven by {driver_label}."
    )


def generate_detailed_summary(
    metric_key: MetricKey,
    status: ExplanationStatus,
    delta: MetricDelta,
    top_drivers: Sequence[DriverResult],
) -> str:
    """Summary for the breakdown page: adds up to two secondary drivers."""
    base_summary = generate_summary(metric_key, status, delta, top_drivers)

    if status in (ExplanationStatus.NO_DATA, ExplanationStatus.ERROR, ExplanationStatus.STABLE):
        return base_summary

    secondary_drivers = list(top_drivers[1:3])
    if not secondary_drivers:
        return base_summary

    secondary_labels = " and ".join(format_driver_label(d) for d in secondary_drivers)
    return f"{base_summary} Secondary factors include {secondary_labels}."
