"""
Metric Catalog

Order-derived dashboard metrics, each a predicate paired with a reduction
strategy.
"""

from typing import Dict

from analytics_buddy.metrics import classifiers
from analytics_buddy.metrics.aggregator import MetricDefinition
from analytics_buddy.metrics.reducers import DistinctActorReducer, RecordCountReducer
from analytics_buddy.shopify import queries


REVIEWERS = MetricDefinition(
    name="reviewers",
    fields=queries.REVIEW_FIELDS,
    predicate=classifiers.has_review_signal,
    reducer=DistinctActorReducer,
    description="Customers whose orders carry a review tag, note or attribute",
)

DISCOUNT_USERS = MetricDefinition(
    name="discount-users",
    fields=queries.DISCOUNT_FIELDS,
    predicate=classifiers.has_discount,
    reducer=DistinctActorReducer,
    description="Customers with at least one discounted order",
)

COD_ORDERS = MetricDefinition(
    name="cod-orders",
    fields=queries.STATUS_FIELDS,
    predicate=classifiers.is_cod,
    reducer=RecordCountReducer,
    description="Orders with a pending, partially paid or authorized financial status",
)

PREPAID_ORDERS = MetricDefinition(
    name="prepaid-orders",
    fields=queries.STATUS_FIELDS,
    predicate=classifiers.is_prepaid,
    reducer=RecordCountReducer,
    description="Orders paid up front",
)

CANCELLED_ORDERS = MetricDefinition(
    name="cancelled-orders",
    fields=queries.STATUS_FIELDS,
    predicate=classifiers.is_cancelled,
    reducer=RecordCountReducer,
    description="Orders with a cancellation timestamp",
)

MORNING_PURCHASES = MetricDefinition(
    name="morning-purchases",
    fields=queries.TIMING_FIELDS,
    predicate=classifiers.is_morning,
    reducer=RecordCountReducer,
    description="Orders placed 06:00-11:59 UTC",
)

AFTERNOON_PURCHASES = MetricDefinition(
    name="afternoon-purchases",
    fields=queries.TIMING_FIELDS,
    predicate=classifiers.is_afternoon,
    reducer=RecordCountReducer,
    description="Orders placed 12:00-17:59 UTC",
)

EVENING_PURCHASES = MetricDefinition(
    name="evening-purchases",
    fields=queries.TIMING_FIELDS,
    predicate=classifiers.is_evening,
    reducer=RecordCountReducer,
    description="Orders placed 18:00-23:59 UTC",
)

WEEKEND_PURCHASES = MetricDefinition(
    name="weekend-purchases",
    fields=queries.TIMING_FIELDS,
    predicate=classifiers.is_weekend,
    reducer=RecordCountReducer,
    description="Orders placed on Saturday or Sunday (UTC)",
)

ORDER_METRICS: Dict[str, MetricDefinition] = {
    definition.name: definition
    for definition in (
        REVIEWERS,
        DISCOUNT_USERS,
        COD_ORDERS,
        PREPAID_ORDERS,
        CANCELLED_ORDERS,
        MORNING_PURCHASES,
        AFTERNOON_PURCHASES,
        EVENING_PURCHASES,
        WEEKEND_PURCHASES,
    )
}
