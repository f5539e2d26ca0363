"""
Dashboard API Endpoints

Metric cards, section summaries and drill-down lists for the dashboard.
Protected data denials surface as 403 and query failures as 500 through
the application exception handlers.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
import structlog

from analytics_buddy.config import get_settings
from analytics_buddy.metrics import charts, lists, summaries
from analytics_buddy.metrics.aggregator import MetricAggregator
from analytics_buddy.metrics.catalog import ORDER_METRICS
from analytics_buddy.metrics.customers import CUSTOMER_METRICS
from analytics_buddy.metrics.date_range import DateRange
from analytics_buddy.serving.api.dependencies import get_aggregator, get_date_range

router = APIRouter()
logger = structlog.get_logger(__name__)


class DataPointModel(BaseModel):
    """Chart point"""
    date: str
    count: int


class MetricResponse(BaseModel):
    """Metric card payload"""
    count: int
    dataPoints: List[DataPointModel]


class CountModel(BaseModel):
    count: int


class MetricInfo(BaseModel):
    name: str
    description: str
    listable: bool


@router.get("/metrics", response_model=List[MetricInfo])
async def list_metrics() -> List[MetricInfo]:
    """Available metric names."""
    listable = set(lists.LIST_BUILDERS)
    infos = [
        MetricInfo(name=name, description=definition.description, listable=name in listable)
        for name, definition in ORDER_METRICS.items()
    ]
    infos.extend(
        MetricInfo(name=name, description=(metric.__doc__ or "").strip(), listable=name in listable)
        for name, metric in CUSTOMER_METRICS.items()
    )
    return infos


@router.get("/metrics/{metric}", response_model=MetricResponse)
async def get_metric(
    metric: str,
    date_range: DateRange = Depends(get_date_range),
    aggregator: MetricAggregator = Depends(get_aggregator),
) -> Dict[str, Any]:
    """Headline count and chart points for one metric."""
    logger.info("get_metric called", metric=metric, range=date_range.token)
    
    if metric in ORDER_METRICS:
        result = await aggregator.series(ORDER_METRICS[metric], date_range)
    elif metric in CUSTOMER_METRICS:
        result = await CUSTOMER_METRICS[metric](aggregator, date_range)
    else:
        raise HTTPException(status_code=404, detail=f"Unknown metric: {metric}")
    
    return result.to_dict()


@router.get("/metrics/{metric}/list")
async def get_metric_list(
    metric: str,
    date_range: DateRange = Depends(get_date_range),
    aggregator: MetricAggregator = Depends(get_aggregator),
) -> Dict[str, Any]:
    """Rows behind a metric card."""
    cap = get_settings().aggregation.list_record_cap
    
    if metric in lists.LIST_BUILDERS:
        return await lists.LIST_BUILDERS[metric](aggregator, date_range, cap=cap)
    raise HTTPException(status_code=404, detail=f"No list available for metric: {metric}")


@router.get("/order-behavior", response_model=Dict[str, CountModel])
async def get_order_behavior(
    date_range: DateRange = Depends(get_date_range),
    aggregator: MetricAggregator = Depends(get_aggregator),
):
    """COD, prepaid, cancelled and abandoned order counts."""
    return await summaries.order_behavior(aggregator, date_range)


@router.get("/engagement-patterns", response_model=Dict[str, CountModel])
async def get_engagement_patterns(
    date_range: DateRange = Depends(get_date_range),
    aggregator: MetricAggregator = Depends(get_aggregator),
):
    """Discount users, reviewers, wishlist users and email subscribers."""
    return await summaries.engagement_patterns(aggregator, date_range)


@router.get("/purchase-timing", response_model=Dict[str, CountModel])
async def get_purchase_timing(
    date_range: DateRange = Depends(get_date_range),
    aggregator: MetricAggregator = Depends(get_aggregator),
):
    """Order counts by time of day and weekend."""
    return await summaries.purchase_timing(aggregator, date_range)


@router.get("/visual-analytics")
async def get_visual_analytics(
    date_range: DateRange = Depends(get_date_range),
    aggregator: MetricAggregator = Depends(get_aggregator),
) -> Dict[str, Any]:
    """Order-type and engagement chart data."""
    return await charts.visual_analytics(aggregator, date_range)


@router.get("/visual-analytics/customer-segmentation")
async def get_customer_segmentation(
    date_range: DateRange = Depends(get_date_range),
    aggregator: MetricAggregator = Depends(get_aggregator),
) -> Dict[str, Any]:
    """Order-type distribution for the pie chart."""
    return {"chartData": await charts.customer_segmentation(aggregator, date_range)}


@router.get("/visual-analytics/behavioral-breakdown")
async def get_behavioral_breakdown(
    date_range: DateRange = Depends(get_date_range),
    aggregator: MetricAggregator = Depends(get_aggregator),
) -> Dict[str, Any]:
    """Engagement counts for the bar chart."""
    return {"chartData": await charts.behavioral_breakdown(aggregator, date_range)}
