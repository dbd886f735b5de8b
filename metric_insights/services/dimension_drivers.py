"""
Dimensional Driver Analysis - Attribution of a metric change across dimensions

This module explains a metric change between two windows by attributing it to
individual values of four independent dimensions: traffic channel, device
class, geography and landing page.

Algorithm Overview (one generic driver, instantiated per dimension):
- If the total change is 0, there is nothing to attribute
- Group current and previous rows by the dimension key and sum the metric
- For every key seen in either window:
  * delta = current - previous (keys with |delta| < 0.01 are skipped)
  * contribution = delta / total_change * 100
- Keep keys whose |contribution| clears the dimension threshold
  (5% for channel/device/geo, 3% for landing pages)
- Results ranked by |contribution| descending

Aggregation:
- Top drivers: all channel/device/geo drivers plus at most 3 page drivers,
  ranked together and cut to 5
- Evidence: up to 10 page drivers and up to 5 channel drivers, independent of
  the top-5 cut
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Sequence

import pandas as pd

from metric_insights.models.enums import DriverType, MetricKey
from metric_insights.models.schemas import (
    DriverResult,
    MetricEvidence,
    PageImpact,
    SourceImpact,
)
from metric_insights.services.metric_values import (
    MetricRow,
    get_metric_value,
    round_half_up,
)

# =============================================================================
# CONSTANTS
# =============================================================================

# Changes smaller than this are treated as no change
MIN_DELTA: float = 0.01

# Minimum |contribution| (percent of total change) for a driver to be reported
DEFAULT_THRESHOLD_PCT: float = 5.0

# Pages use a lower threshold to surface more page-level evidence
PAGE_THRESHOLD_PCT: float = 3.0

TOP_DRIVERS_LIMIT: int = 5

# Page drivers allowed into the top-driver ranking
TOP_PAGES_IN_DRIVERS: int = 3

EVIDENCE_PAGES_LIMIT: int = 10
EVIDENCE_SOURCES_LIMIT: int = 5

PAGE_LABEL_MAX_LENGTH: int = 60

CHANNEL_NAMES: Dict[str, str] = {
    "organic search": "Organic Search",
    "organic": "Organic Search",
    "direct": "Direct",
    "referral": "Referral",
    "social": "Social",
    "email": "Email",
    "paid search": "Paid Search",
    "paid social": "Paid Social",
    "display": "Display",
    "affiliates": "Affiliates",
    "(none)": "Direct",
    "(not set)": "Other",
}

DEVICE_NAMES: Dict[str, str] = {
    "mobile": "Mobile",
    "desktop": "Desktop",
    "tablet": "Tablet",
    "(not set)": "Unknown",
}


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class DimensionConfig:
    """
    Everything that differs between the four dimension drivers.

    extract_key maps a row to its grouping key (with the dimension's default
    for rows missing the tag); format_label maps a key to its display label.
    """
    driver_type: DriverType
    extract_key: Callable[[MetricRow], str]
    format_label: Callable[[str], str]
    threshold: float = DEFAULT_THRESHOLD_PCT
    details_template: str = "{label} {direction} by {amount} ({percent}%)"


@dataclass
class DimensionDrivers:
    """Driver results for every dimension of one analysis."""
    channel: List[DriverResult] = field(default_factory=list)
    device: List[DriverResult] = field(default_factory=list)
    geo: List[DriverResult] = field(default_factory=list)
    page: List[DriverResult] = field(default_factory=list)


# =============================================================================
# LABEL FORMATTING
# =============================================================================

def format_channel_name(channel: str) -> str:
    clean_name = channel.strip()
    return CHANNEL_NAMES.get(clean_name.lower(), clean_name)


def format_device_name(device: str) -> str:
    return DEVICE_NAMES.get(device.strip().lower(), device)


def format_geo_name(geo: str) -> str:
    clean_name = geo.strip()
    if clean_name in ("(not set)", ""):
        return "Unknown Region"
    return clean_name


def format_page_url(url: str) -> str:
    """Strip the query string and truncate long paths with an ellipsis."""
    clean_url = url.strip()
    if clean_url in ("(not set)", ""):
        return "/"

    without_query = clean_url.split("?")[0]
    if len(without_query) > PAGE_LABEL_MAX_LENGTH:
        return without_query[:PAGE_LABEL_MAX_LENGTH - 3] + "..."

    return without_query


def _format_amount(amount: float) -> str:
    # 1234.5 -> "1,234.5", 80.0 -> "80"
    return f"{amount:,.3f}".rstrip("0").rstrip(".")


# =============================================================================
# KEY EXTRACTION
# =============================================================================

def _channel_key(row: MetricRow) -> str:
    return row.channel or "Direct"


def _device_key(row: MetricRow) -> str:
    return row.device or "desktop"


def _geo_key(row: MetricRow) -> str:
    return row.geo or "Unknown"


def _page_key(row: MetricRow) -> str:
    page = row.landing_page or "/"
    path = page.split("?")[0].strip()
    if not path or path == "(not set)":
        return "/"
    return path


CHANNEL_DIMENSION = DimensionConfig(
    driver_type=DriverType.CHANNEL,
    extract_key=_channel_key,
    format_label=format_channel_name,
)

DEVICE_DIMENSION = DimensionConfig(
    driver_type=DriverType.DEVICE,
    extract_key=_device_key,
    format_label=format_device_name,
)

GEO_DIMENSION = DimensionConfig(
    driver_type=DriverType.GEO,
    extract_key=_geo_key,
    format_label=format_geo_name,
    details_template="Traffic from {label} {direction} by {amount} ({percent}%)",
)

PAGE_DIMENSION = DimensionConfig(
    driver_type=DriverType.LANDING_PAGE,
    extract_key=_page_key,
    format_label=format_page_url,
    threshold=PAGE_THRESHOLD_PCT,
)


# =============================================================================
# CORE ATTRIBUTION
# =============================================================================

def _group_totals(
    rows: Sequence[MetricRow],
    metric_key: MetricKey,
    extract_key: Callable[[MetricRow], str],
) -> pd.Series:
    """Sum the metric per dimension key, keeping first-seen key order."""
    values = pd.Series(
        [get_metric_value(row, metric_key) for row in rows],
        index=pd.Index([extract_key(row) for row in rows], dtype=object),
        dtype=float,
    )
    return values.groupby(level=0, sort=False).sum()


def _describe_change(
    config: DimensionConfig,
    label: str,
    before: float,
    change: float,
) -> str:
    direction = "increased" if change > 0 else "decreased"
    percent = f"{abs(change / before * 100):.1f}" if before > 0 else "N/A"

    return config.details_template.format(
        label=label,
        direction=direction,
        amount=_format_amount(abs(change)),
        percent=percent,
    )


def analyze_dimension(
    config: DimensionConfig,
    current: Sequence[MetricRow],
    previous: Sequence[MetricRow],
    metric_key: MetricKey,
    total_change: float,
) -> List[DriverResult]:
    """
    Attribute total_change to the values of one dimension.

    Args:
        config: Dimension definition (key extraction, labels, threshold)
        current: Rows in the current window
        previous: Rows in the previous window
        metric_key: Metric being explained
        total_change: Signed total change of the metric (current - previous)

    Returns:
        Drivers whose |contributionPct| clears config.threshold, sorted by
        |contributionPct| descending. Empty when total_change is 0.
    """
    if total_change == 0:
        return []

    current_totals = _group_totals(current, metric_key, config.extract_key)
    previous_totals = _group_totals(previous, metric_key, config.extract_key)

    # Union of keys seen in either window
    keys = current_totals.index.union(previous_totals.index, sort=False)

    frame = pd.DataFrame({
        "after": current_totals.reindex(keys, fill_value=0.0),
        "before": previous_totals.reindex(keys, fill_value=0.0),
    })
    frame["change"] = frame["after"] - frame["before"]

    frame = frame.loc[frame["change"].abs() >= MIN_DELTA]
    frame = frame.assign(contribution=frame["change"] / total_change * 100)
    frame = frame.loc[frame["contribution"].abs() >= config.threshold]

    drivers: List[DriverResult] = []
    for item in frame.itertuples():
        label = config.format_label(item.Index)
        drivers.append(DriverResult(
            type=config.driver_type,
            label=label,
            contributionPct=round_half_up(float(item.contribution), 1),
            delta=round_half_up(float(item.change), 2),
            valueBefore=float(item.before),
            valueAfter=float(item.after),
            details=_describe_change(config, label, float(item.before), float(item.change)),
        ))

    return sorted(drivers, key=lambda d: abs(d.contributionPct), reverse=True)


def analyze_channel(current, previous, metric_key, total_change) -> List[DriverResult]:
    return analyze_dimension(CHANNEL_DIMENSION, current, previous, metric_key, total_change)


def analyze_device(current, previous, metric_key, total_change) -> List[DriverResult]:
    return analyze_dimension(DEVICE_DIMENSION, current, previous, metric_key, total_change)


def analyze_geo(current, previous, metric_key, total_change) -> List[DriverResult]:
    return analyze_dimension(GEO_DIMENSION, current, previous, metric_key, total_change)


def analyze_page(current, previous, metric_key, total_change) -> List[DriverResult]:
    return analyze_dimension(PAGE_DIMENSION, current, previous, metric_key, total_change)


def analyze_all_dimensions(
    current: Sequence[MetricRow],
    previous: Sequence[MetricRow],
    metric_key: MetricKey,
    total_change: float,
) -> DimensionDrivers:
    """Run all four dimension drivers on the same windows."""
    return DimensionDrivers(
        channel=analyze_channel(current, previous, metric_key, total_change),
        device=analyze_device(current, previous, metric_key, total_change),
        geo=analyze_geo(current, previous, metric_key, total_change),
        page=analyze_page(current, previous, metric_key, total_change),
    )


# =============================================================================
# AGGREGATION
# =============================================================================

def rank_top_drivers(
    drivers: DimensionDrivers,
    top_n: int = TOP_DRIVERS_LIMIT,
) -> List[DriverResult]:
    """
    Merge drivers across dimensions and keep the top_n by |contributionPct|.

    Only the first TOP_PAGES_IN_DRIVERS page drivers compete, so page noise
    cannot crowd out the other dimensions.
    """
    combined = [
        *drivers.channel,
        *drivers.device,
        *drivers.geo,
        *drivers.page[:TOP_PAGES_IN_DRIVERS],
    ]
    ranked = sorted(combined, key=lambda d: abs(d.contributionPct), reverse=True)
    return ranked[:top_n]


def build_evidence(drivers: DimensionDrivers) -> MetricEvidence:
    """Longer tail of page and source drivers for the breakdown page."""
    return MetricEvidence(
        topPagesByImpact=[
            PageImpact(
                url=p.label,
                valueBefore=p.valueBefore,
                valueAfter=p.valueAfter,
                delta=p.delta,
                contributionPct=p.contributionPct,
            )
            for p in drivers.page[:EVIDENCE_PAGES_LIMIT]
        ],
        topSourcesByImpact=[
            SourceImpact(
                source=c.label,
                delta=c.delta,
                contributionPct=c.contributionPct,
            )
            for c in drivers.channel[:EVIDENCE_SOURCES_LIMIT]
        ],
    )


__all__ = [
    # Generic driver
    "DimensionConfig",
    "DimensionDrivers",
    "analyze_dimension",
    "analyze_all_dimensions",
    # Dimension instances
    "CHANNEL_DIMENSION",
    "DEVICE_DIMENSION",
    "GEO_DIMENSION",
    "PAGE_DIMENSION",
    "analyze_channel",
    "analyze_device",
    "analyze_geo",
    "analyze_page",
    # Aggregation
    "rank_top_drivers",
    "build_evidence",
    # Label formatting
    "format_channel_name",
    "format_device_name",
    "format_geo_name",
    "format_page_url",
    # Constants
    "MIN_DELTA",
    "DEFAULT_THRESHOLD_PCT",
    "PAGE_THRESHOLD_PCT",
    "TOP_DRIVERS_LIMIT",
    "TOP_PAGES_IN_DRIVERS",
    "EVIDENCE_PAGES_LIMIT",
    "EVIDENCE_SOURCES_LIMIT",
]
