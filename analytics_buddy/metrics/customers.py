"""
Customer Overview Metrics

Returning, new, total and inactive customers. These need more than a single
fetch-filter-reduce pass: customer counts come from ``customersCount`` and
returning customers require one prior-order lookup per customer.
"""

from datetime import datetime
from typing import Awaitable, Callable, Dict, Optional

import httpx
import structlog

from analytics_buddy.metrics.aggregator import (
    MetricAggregator,
    MetricResult,
    SeriesPoint,
    build_series,
    plan_cumulative_points,
)
from analytics_buddy.metrics.date_range import DateRange
from analytics_buddy.metrics.errors import AnalyticsError, DataCategory
from analytics_buddy.metrics.pagination import fetch_customers_count, raise_for_errors
from analytics_buddy.metrics.reducers import DistinctActorReducer, RepeatActorReducer
from analytics_buddy.shopify.queries import (
    ACTOR_FIELDS,
    PRIOR_ORDER_QUERY,
    created_before,
    created_between,
    numeric_id,
)

logger = structlog.get_logger(__name__)

CustomerMetric = Callable[[MetricAggregator, DateRange], Awaitable[MetricResult]]


async def _distinct_customers(
    aggregator: MetricAggregator,
    start: Optional[datetime],
    end: Optional[datetime],
) -> DistinctActorReducer:
    records = await aggregator.fetch(ACTOR_FIELDS, start, end)
    reducer = DistinctActorReducer()
    reducer.consume(records)
    return reducer


async def has_prior_order(aggregator: MetricAggregator, customer_id: str, before: datetime) -> bool:
    """Whether the customer placed any order created strictly before ``before``."""
    search = f"customer_id:{numeric_id(customer_id)} {created_before(before)}"
    body = await aggregator.client.graphql(PRIOR_ORDER_QUERY, {"query": search})
    raise_for_errors(body, DataCategory.ORDER)
    nodes = ((body.get("data") or {}).get("orders") or {}).get("nodes") or []
    return len(nodes) > 0


async def count_returning_customers(aggregator: MetricAggregator, start: datetime, end: datetime) -> int:
    """
    Customers ordering in [start, end] who also ordered before ``start``.
    
    Lookups run one customer at a time. A customer whose lookup fails is
    skipped rather than failing the count.
    """
    customers = await _distinct_customers(aggregator, start, end)
    returning = 0
    
    for customer_id in sorted(customers.actors):
        try:
            if await has_prior_order(aggregator, customer_id, start):
                returning += 1
        except (AnalyticsError, httpx.HTTPError) as e:
            logger.warning("Prior order lookup failed, skipping customer", customer_id=customer_id, error=str(e))
    
    return returning


async def returning_customers(aggregator: MetricAggregator, date_range: DateRange) -> MetricResult:
    """Points count repeat customers among all orders up to each point."""
    
    async def point_counter(point: SeriesPoint) -> int:
        records = await aggregator.fetch(ACTOR_FIELDS, point.start, point.end)
        return RepeatActorReducer().consume(records)
    
    async def total_counter() -> int:
        return await count_returning_customers(aggregator, date_range.start, date_range.end)
    
    return await build_series(plan_cumulative_points(date_range), point_counter, total_counter, "returning-customers")


async def _customers_created_up_to(aggregator: MetricAggregator, point: SeriesPoint) -> int:
    return await fetch_customers_count(aggregator.client, created_between(None, point.end))


async def new_customers(aggregator: MetricAggregator, date_range: DateRange) -> MetricResult:
    """Points are cumulative customer counts; the total covers the range only."""
    
    async def total_counter() -> int:
        return await fetch_customers_count(aggregator.client, created_between(date_range.start, date_range.end))
    
    async def point_counter(point: SeriesPoint) -> int:
        return await _customers_created_up_to(aggregator, point)
    
    return await build_series(plan_cumulative_points(date_range), point_counter, total_counter, "new-customers")


async def total_customers(aggregator: MetricAggregator, date_range: DateRange) -> MetricResult:
    """Points approximate the customer base at each instant; total is the current base."""
    
    async def total_counter() -> int:
        return await fetch_customers_count(aggregator.client)
    
    async def point_counter(point: SeriesPoint) -> int:
        return await _customers_created_up_to(aggregator, point)
    
    return await build_series(plan_cumulative_points(date_range), point_counter, total_counter, "total-customers")


async def inactive_customers(aggregator: MetricAggregator, date_range: DateRange) -> MetricResult:
    """Customers without an order in the window: customer base minus active customers."""
    
    async def point_counter(point: SeriesPoint) -> int:
        base = await _customers_created_up_to(aggregator, point)
        active = await _distinct_customers(aggregator, point.start, point.end)
        return max(0, base - active.result())
    
    async def total_counter() -> int:
        base = await fetch_customers_count(aggregator.client)
        active = await _distinct_customers(aggregator, date_range.start, date_range.end)
        return max(0, base - active.result())
    
    return await build_series(plan_cumulative_points(date_range), point_counter, total_counter, "inactive-customers")


CUSTOMER_METRICS: Dict[str, CustomerMetric] = {
    "returning-customers": returning_customers,
    "new-customers": new_customers,
    "total-customers": total_customers,
    "inactive-customers": inactive_customers,
}
