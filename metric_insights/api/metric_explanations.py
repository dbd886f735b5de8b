"""
FastAPI router module for metric explanation endpoints.

This module implements endpoints for:
- Batch explanations for every tracked metric (dashboard KPI cards)
- A single metric explanation, optionally with the detailed summary
  (Metric Breakdown page)
- Metric definitions for the "What it means" section

Explanations never fail on data problems: a site without data gets status
no_data and a failed analysis gets status error inside a 200 response.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import JSONResponse

from metric_insights.models import (
    MetricDefinition,
    MetricExplanation,
    MetricExplanationsResponse,
    MetricKey,
)
from metric_insights.services.metric_analyzer import (
    analyze_all_metrics,
    analyze_metric,
    get_metric_definitions,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["metric-explanations"])


def _parse_metric_key(metric_key_str: str) -> Optional[MetricKey]:
    """Convert a path segment to a MetricKey, or None if it is not one."""
    try:
        return MetricKey(metric_key_str)
    except ValueError:
        return None


@router.get(
    "/metric-explanations/{site_id}",
    response_model=MetricExplanationsResponse,
)
async def get_metric_explanations(
    site_id: str,
    as_of: Optional[date] = Query(
        None, description="Reference date for the comparison windows (defaults to today)"
    ),
) -> MetricExplanationsResponse:
    """
    Explain every tracked metric for a site.

    Args:
        site_id: Site identifier in the metrics store
        as_of: Optional reference date

    Returns:
        MetricExplanationsResponse keyed by metric

    Raises:
        HTTPException 500: If the batch could not be assembled
    """
    try:
        return await analyze_all_metrics(site_id, as_of=as_of)
    except Exception as e:
        logger.error(f"Error fetching metric explanations for site {site_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail="Failed to fetch metric explanations",
        )


@router.get(
    "/metric-explanations/{site_id}/{metric_key}",
    response_model=MetricExplanation,
    responses={400: {"description": "Invalid metric key"}},
)
async def get_metric_explanation(
    site_id: str,
    metric_key: str,
    detailed: bool = Query(False, description="Include secondary drivers in the summary"),
    as_of: Optional[date] = Query(
        None, description="Reference date for the comparison windows (defaults to today)"
    ),
):
    """
    Explain a single metric for a site.

    An unknown metric key returns 400 with the list of valid keys, in the
    body shape the dashboard already handles.

    Raises:
        HTTPException 500: If the explanation could not be assembled
    """
    key = _parse_metric_key(metric_key)
    if key is None:
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid metric key",
                "validKeys": [k.value for k in MetricKey],
            },
        )

    try:
        return await analyze_metric(site_id, key, as_of=as_of, detailed=detailed)
    except Exception as e:
        logger.error(
            f"Error fetching metric explanation {metric_key} for site {site_id}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=500,
            detail="Failed to fetch metric explanation",
        )


@router.get("/metric-definitions", response_model=List[MetricDefinition])
async def list_metric_definitions() -> List[MetricDefinition]:
    """Definitions for every tracked metric."""
    return get_metric_definitions()
