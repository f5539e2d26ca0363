"""
Metric Aggregator

Generic fetch-filter-reduce over a paged Admin API connection, plus the
two-point time series builder shared by every dashboard metric.

Each series point is an independent aggregation scoped to its own window,
and the headline total is one more aggregation over the full range. The
remote source is therefore queried once per point plus once for the total;
nothing is cached between calls.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

import httpx
import structlog

from analytics_buddy.metrics.classifiers import Record
from analytics_buddy.metrics.date_range import DateRange, end_of_day, start_of_day, utc_date
from analytics_buddy.metrics.errors import (
    AnalyticsError,
    DataCategory,
    PerPointFetchFailure,
    ProtectedDataAccessDenied,
)
from analytics_buddy.metrics.pagination import DEFAULT_PAGE_SIZE, PageFetcher
from analytics_buddy.metrics.reducers import Reducer
from analytics_buddy.shopify.client import AdminGraphQL
from analytics_buddy.shopify.queries import created_between

logger = structlog.get_logger(__name__)


# =============================================================================
# TYPES
# =============================================================================

@dataclass(frozen=True)
class MetricDefinition:
    """
    One dashboard metric: which records to fetch, which count, how to reduce.
    
    Attributes:
        name: Public metric name
        fields: GraphQL node selection needed by the predicate
        predicate: Record membership test
        reducer: Factory for a fresh reducer per aggregation
        resource: Admin API connection to page through
        category: Data category used to classify access errors
    """
    name: str
    fields: str
    predicate: Callable[[Record], bool]
    reducer: Callable[[], Reducer]
    resource: str = "orders"
    category: DataCategory = DataCategory.ORDER
    description: str = ""


@dataclass(frozen=True)
class DataPoint:
    date: date
    count: int
    
    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date.isoformat(), "count": self.count}


@dataclass
class MetricResult:
    """Headline count over the full range plus chart points."""
    count: int
    data_points: List[DataPoint] = field(default_factory=list)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "dataPoints": [point.to_dict() for point in self.data_points],
        }


@dataclass(frozen=True)
class SeriesPoint:
    """A planned chart point: its label instant and its own query window."""
    label: datetime
    start: Optional[datetime]
    end: datetime


# =============================================================================
# POINT PLANS
# =============================================================================

def plan_points(date_range: DateRange) -> List[SeriesPoint]:
    """
    Plan chart points for a resolved range.
    
    ``today`` yields a single point covering the current day. Every other
    range yields two points: the first day alone, then the cumulative
    window from the range start to the range end.
    """
    if date_range.token == "today":
        return [SeriesPoint(date_range.end, start_of_day(date_range.end), date_range.end)]
    return [
        SeriesPoint(date_range.start, date_range.start, end_of_day(date_range.start)),
        SeriesPoint(date_range.end, date_range.start, date_range.end),
    ]


def plan_cumulative_points(date_range: DateRange) -> List[SeriesPoint]:
    """Points whose windows are open-ended: everything up to the label instant."""
    labels = [date_range.end] if date_range.token == "today" else [date_range.start, date_range.end]
    return [SeriesPoint(label, None, label) for label in labels]


# =============================================================================
# SERIES
# =============================================================================

async def _count_point(point: SeriesPoint, counter: Callable[[SeriesPoint], Awaitable[int]]) -> int:
    try:
        return await counter(point)
    except ProtectedDataAccessDenied:
        raise
    except (AnalyticsError, httpx.HTTPError) as exc:
        raise PerPointFetchFailure(utc_date(point.label), exc) from exc


async def build_series(
    points: List[SeriesPoint],
    point_counter: Callable[[SeriesPoint], Awaitable[int]],
    total_counter: Callable[[], Awaitable[int]],
    metric: str = "",
) -> MetricResult:
    """
    Compute each point independently, then the authoritative total.
    
    A failed point records count 0 and the series continues; a protected
    data denial at any point aborts the whole call.
    """
    data_points: List[DataPoint] = []
    
    for point in points:
        try:
            count = await _count_point(point, point_counter)
        except PerPointFetchFailure as exc:
            logger.warning(
                "Series point failed, recording zero",
                metric=metric,
                date=exc.point_date.isoformat(),
                error=str(exc.cause),
            )
            count = 0
        data_points.append(DataPoint(utc_date(point.label), count))
    
    total = await total_counter()
    logger.info("Metric computed", metric=metric, count=total, points=len(data_points))
    return MetricResult(count=total, data_points=data_points)


# =============================================================================
# AGGREGATOR
# =============================================================================

class MetricAggregator:
    """
    Runs metric definitions against one shop-scoped client.
    
    Args:
        client: Shop-scoped Admin GraphQL client
        page_size: Records per page request
        max_records: Accumulated-record cap (None fetches until exhaustion)
    """
    
    def __init__(
        self,
        client: AdminGraphQL,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_records: Optional[int] = None,
    ):
        self.client = client
        self.page_size = page_size
        self.max_records = max_records
    
    def fetcher(
        self,
        resource: str = "orders",
        category: DataCategory = DataCategory.ORDER,
        max_records: Optional[int] = None,
    ) -> PageFetcher:
        return PageFetcher(
            self.client,
            resource=resource,
            category=category,
            page_size=self.page_size,
            max_records=max_records if max_records is not None else self.max_records,
        )
    
    async def fetch(
        self,
        fields: str,
        start: Optional[datetime],
        end: Optional[datetime],
        resource: str = "orders",
        category: DataCategory = DataCategory.ORDER,
        max_records: Optional[int] = None,
    ) -> List[Record]:
        """Fetch every record created within [start, end]."""
        fetcher = self.fetcher(resource, category, max_records)
        return await fetcher.fetch_all(fields, created_between(start, end))
    
    async def count(
        self,
        definition: MetricDefinition,
        start: Optional[datetime],
        end: Optional[datetime],
    ) -> int:
        """Fetch the window, keep matching records, reduce to a count."""
        records = await self.fetch(definition.fields, start, end, definition.resource, definition.category)
        reducer = definition.reducer()
        return reducer.consume(record for record in records if definition.predicate(record))
    
    async def count_many(
        self,
        definitions: Mapping[str, MetricDefinition],
        start: Optional[datetime],
        end: Optional[datetime],
        fields: str,
    ) -> Dict[str, int]:
        """
        Reduce several metrics over a single fetch.
        
        ``fields`` must cover every definition's predicate.
        """
        records = await self.fetch(fields, start, end)
        counts: Dict[str, int] = {}
        for key, definition in definitions.items():
            reducer = definition.reducer()
            counts[key] = reducer.consume(record for record in records if definition.predicate(record))
        logger.info("Summary computed", records=len(records), **counts)
        return counts
    
    async def series(self, definition: MetricDefinition, date_range: DateRange) -> MetricResult:
        """Two-point series plus full-range total for one metric."""
        logger.info(
            "Computing metric",
            metric=definition.name,
            range=date_range.token,
            start=date_range.start_iso,
            end=date_range.end_iso,
        )
        
        async def point_counter(point: SeriesPoint) -> int:
            return await self.count(definition, point.start, point.end)
        
        async def total_counter() -> int:
            return await self.count(definition, date_range.start, date_range.end)
        
        return await build_series(plan_points(date_range), point_counter, total_counter, definition.name)
