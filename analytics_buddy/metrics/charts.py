"""
Visual Analytics

Chart payloads built from the section summaries: order-type distribution
(pie) and engagement breakdown (bar). Labels, dataset order and colours are
what the dashboard charts expect.
"""

from typing import Any, Dict, List

from analytics_buddy.metrics import summaries
from analytics_buddy.metrics.aggregator import MetricAggregator
from analytics_buddy.metrics.date_range import DateRange

ChartData = Dict[str, Any]

ORDER_TYPE_SERIES = (
    ("COD Orders", "codOrders"),
    ("Prepaid Orders", "prepaidOrders"),
    ("Cancelled Orders", "cancelledOrders"),
    ("Abandoned Carts", "abandonedOrders"),
)

ENGAGEMENT_SERIES = (
    ("Discount Users", "discountUsers"),
    ("Wishlist Users", "wishlistUsers"),
    ("Reviewers", "reviewers"),
    ("Email Subscribers", "emailSubscribers"),
)

PIE_COLORS = ("255, 99, 132", "54, 162, 235", "255, 206, 86", "75, 192, 192")
BAR_COLOR = "54, 162, 235"


def _counts(summary: summaries.OrderSummary, series) -> List[int]:
    return [summary[key]["count"] for _, key in series]


def order_type_chart(summary: summaries.OrderSummary) -> ChartData:
    return {
        "labels": [label for label, _ in ORDER_TYPE_SERIES],
        "datasets": [
            {
                "data": _counts(summary, ORDER_TYPE_SERIES),
                "backgroundColor": [f"rgba({rgb}, 0.7)" for rgb in PIE_COLORS],
                "borderColor": [f"rgba({rgb}, 1)" for rgb in PIE_COLORS],
                "borderWidth": 1,
            }
        ],
    }


def engagement_chart(summary: summaries.OrderSummary) -> ChartData:
    return {
        "labels": [label for label, _ in ENGAGEMENT_SERIES],
        "datasets": [
            {
                "label": "Number of Users",
                "data": _counts(summary, ENGAGEMENT_SERIES),
                "backgroundColor": f"rgba({BAR_COLOR}, 0.7)",
                "borderColor": f"rgba({BAR_COLOR}, 1)",
                "borderWidth": 1,
            }
        ],
    }


async def customer_segmentation(aggregator: MetricAggregator, date_range: DateRange) -> ChartData:
    return order_type_chart(await summaries.order_behavior(aggregator, date_range))


async def behavioral_breakdown(aggregator: MetricAggregator, date_range: DateRange) -> ChartData:
    return engagement_chart(await summaries.engagement_patterns(aggregator, date_range))


async def visual_analytics(aggregator: MetricAggregator, date_range: DateRange) -> Dict[str, ChartData]:
    """Both charts; the two summaries are fetched one after the other."""
    return {
        "orderTypeData": await customer_segmentation(aggregator, date_range),
        "engagementData": await behavioral_breakdown(aggregator, date_range),
    }
