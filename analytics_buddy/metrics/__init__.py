"""
Metrics Module

Paged metric aggregation over the Shopify Admin API.
"""
from .aggregator import MetricAggregator, MetricDefinition, MetricResult, DataPoint
from .date_range import DateRange, resolve_range
from .errors import (
    AnalyticsError,
    DataCategory,
    PerPointFetchFailure,
    ProtectedDataAccessDenied,
    QueryFailure,
)
from .pagination import PageFetcher

__all__ = [
    "MetricAggregator",
    "MetricDefinition",
    "MetricResult",
    "DataPoint",
    "DateRange",
    "resolve_range",
    "AnalyticsError",
    "DataCategory",
    "PerPointFetchFailure",
    "ProtectedDataAccessDenied",
    "QueryFailure",
    "PageFetcher",
]
