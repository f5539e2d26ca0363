"""
Dashboard Summaries

Section-level snapshots computed from a single paged fetch over the
resolved range.
"""

from typing import Dict

from analytics_buddy.metrics import catalog
from analytics_buddy.metrics.aggregator import MetricAggregator
from analytics_buddy.metrics.date_range import DateRange
from analytics_buddy.shopify.queries import SUMMARY_FIELDS

OrderSummary = Dict[str, Dict[str, int]]


def _wrap(counts: Dict[str, int]) -> OrderSummary:
    return {key: {"count": value} for key, value in counts.items()}


async def order_behavior(aggregator: MetricAggregator, date_range: DateRange) -> OrderSummary:
    counts = await aggregator.count_many(
        {
            "codOrders": catalog.COD_ORDERS,
            "prepaidOrders": catalog.PREPAID_ORDERS,
            "cancelledOrders": catalog.CANCELLED_ORDERS,
        },
        date_range.start,
        date_range.end,
        SUMMARY_FIELDS,
    )
    # Abandoned checkouts are not visible through orders
    counts["abandonedOrders"] = 0
    return _wrap(counts)


async def engagement_patterns(aggregator: MetricAggregator, date_range: DateRange) -> OrderSummary:
    counts = await aggregator.count_many(
        {
            "discountUsers": catalog.DISCOUNT_USERS,
            "reviewers": catalog.REVIEWERS,
        },
        date_range.start,
        date_range.end,
        SUMMARY_FIELDS,
    )
    # Wishlist and email consent need protected customer data
    counts["wishlistUsers"] = 0
    counts["emailSubscribers"] = 0
    return _wrap(counts)


async def purchase_timing(aggregator: MetricAggregator, date_range: DateRange) -> OrderSummary:
    counts = await aggregator.count_many(
        {
            "morningPurchases": catalog.MORNING_PURCHASES,
            "afternoonPurchases": catalog.AFTERNOON_PURCHASES,
            "eveningPurchases": catalog.EVENING_PURCHASES,
            "weekendPurchases": catalog.WEEKEND_PURCHASES,
        },
        date_range.start,
        date_range.end,
        SUMMARY_FIELDS,
    )
    return _wrap(counts)
