"""
Drill-down Lists

Row-level views behind the dashboard cards. Order and customer scans stop
once the list record cap is reached; the active-customer scan behind the
inactive list is unbounded, matching the inactive-customers count.
"""

from contextlib import aclosing
from datetime import datetime
from functools import partial
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set

import httpx
import structlog

from analytics_buddy.metrics import catalog
from analytics_buddy.metrics.aggregator import MetricAggregator, MetricDefinition
from analytics_buddy.metrics.classifiers import (
    Record,
    actor_id,
    is_cancelled,
    is_cod,
    parse_amount,
    parse_timestamp,
)
from analytics_buddy.metrics.customers import has_prior_order
from analytics_buddy.metrics.date_range import DateRange
from analytics_buddy.metrics.errors import AnalyticsError, DataCategory
from analytics_buddy.metrics.reducers import DistinctActorReducer
from analytics_buddy.shopify.queries import (
    ACTOR_FIELDS,
    CANCELLED_LIST_FIELDS,
    COD_LIST_FIELDS,
    CUSTOMER_LIST_FIELDS,
    RETURNING_LIST_FIELDS,
)

logger = structlog.get_logger(__name__)

NOT_AVAILABLE = "N/A"
DEFAULT_LIST_CAP = 1000

ListBuilder = Callable[..., Awaitable[Dict[str, Any]]]


def format_money(money: Optional[Dict[str, Any]]) -> str:
    if not money:
        return "0.00"
    amount = parse_amount(money.get("amount"))
    return f"{amount:.2f} {money.get('currencyCode') or ''}".strip()


def format_date(value: Optional[str]) -> str:
    parsed = parse_timestamp(value)
    return parsed.date().isoformat() if parsed else NOT_AVAILABLE


def customer_row(customer: Record) -> Dict[str, Any]:
    return {
        "id": customer.get("id"),
        "name": customer.get("displayName") or NOT_AVAILABLE,
        "email": customer.get("email") or NOT_AVAILABLE,
        "createdAt": format_date(customer.get("createdAt")),
        "numberOfOrders": int(customer.get("numberOfOrders") or 0),
        "totalSpent": format_money(customer.get("amountSpent")),
    }


def order_row(order: Record) -> Dict[str, Any]:
    customer = order.get("customer") or {}
    return {
        "id": order.get("id"),
        "orderNumber": order.get("name") or NOT_AVAILABLE,
        "customerName": customer.get("displayName") or NOT_AVAILABLE,
        "customerEmail": customer.get("email") or NOT_AVAILABLE,
        "createdAt": format_date(order.get("createdAt")),
        "total": format_money((order.get("totalPriceSet") or {}).get("shopMoney")),
    }


def cancelled_order_row(order: Record) -> Dict[str, Any]:
    return {**order_row(order), "cancelledAt": format_date(order.get("cancelledAt"))}


def cod_order_row(order: Record) -> Dict[str, Any]:
    return {**order_row(order), "status": order.get("displayFinancialStatus") or NOT_AVAILABLE}


async def matching_customer_ids(
    aggregator: MetricAggregator,
    definition: MetricDefinition,
    start: datetime,
    end: datetime,
    cap: int = DEFAULT_LIST_CAP,
) -> Set[str]:
    """Distinct customer ids behind a distinct-actor metric, from a capped order scan."""
    records = await aggregator.fetch(definition.fields, start, end, max_records=cap)
    return {
        customer_id
        for customer_id in (actor_id(record) for record in records if definition.predicate(record))
        if customer_id
    }


def _customer_rows(customers: List[Record]) -> Dict[str, Any]:
    rows = [customer_row(customer) for customer in customers]
    return {"customers": rows, "total": len(rows)}


async def customer_list(
    aggregator: MetricAggregator,
    date_range: DateRange,
    definition: MetricDefinition,
    cap: int = DEFAULT_LIST_CAP,
) -> Dict[str, Any]:
    """
    Customer rows for a distinct-actor metric.
    
    Scans the customer connection page by page, keeping only matching
    customers, and stops early once every matching customer was found.
    """
    wanted = await matching_customer_ids(aggregator, definition, date_range.start, date_range.end, cap)
    if not wanted:
        return _customer_rows([])
    
    fetcher = aggregator.fetcher("customers", DataCategory.CUSTOMER, max_records=cap)
    found: List[Record] = []
    scanned = 0
    
    async with aclosing(fetcher.iter_pages(CUSTOMER_LIST_FIELDS)) as pages:
        async for page in pages:
            scanned += len(page)
            found.extend(customer for customer in page if customer.get("id") in wanted)
            if len(found) >= len(wanted):
                break
    
    logger.info(
        "Customer list built",
        metric=definition.name,
        matched=len(wanted),
        found=len(found),
        scanned=scanned,
    )
    return _customer_rows(found)


async def _fetch_customers(
    aggregator: MetricAggregator,
    start: Optional[datetime],
    end: Optional[datetime],
    cap: int,
) -> List[Record]:
    return await aggregator.fetch(
        CUSTOMER_LIST_FIELDS,
        start,
        end,
        resource="customers",
        category=DataCategory.CUSTOMER,
        max_records=cap,
    )


async def new_customer_list(
    aggregator: MetricAggregator,
    date_range: DateRange,
    cap: int = DEFAULT_LIST_CAP,
) -> Dict[str, Any]:
    """Customers created within the range."""
    customers = await _fetch_customers(aggregator, date_range.start, date_range.end, cap)
    
    # Re-check the window locally; the search filter is not authoritative
    in_range = []
    for customer in customers:
        created = parse_timestamp(customer.get("createdAt"))
        if created is not None and date_range.start <= created <= date_range.end:
            in_range.append(customer)
    return _customer_rows(in_range)


async def total_customer_list(
    aggregator: MetricAggregator,
    date_range: DateRange,
    cap: int = DEFAULT_LIST_CAP,
) -> Dict[str, Any]:
    """Customers created up to the range end."""
    return _customer_rows(await _fetch_customers(aggregator, None, date_range.end, cap))


async def returning_customer_list(
    aggregator: MetricAggregator,
    date_range: DateRange,
    cap: int = DEFAULT_LIST_CAP,
) -> Dict[str, Any]:
    """
    Customers ordering in the range who also ordered before it.
    
    Same rule as the returning-customers count: one sequential prior-order
    lookup per customer, and a failed lookup skips that customer.
    """
    records = await aggregator.fetch(RETURNING_LIST_FIELDS, date_range.start, date_range.end, max_records=cap)
    
    candidates: Dict[str, Record] = {}
    for record in records:
        customer_id = actor_id(record)
        if customer_id and customer_id not in candidates:
            candidates[customer_id] = record["customer"]
    
    returning: List[Record] = []
    for customer_id, customer in candidates.items():
        try:
            if await has_prior_order(aggregator, customer_id, date_range.start):
                returning.append(customer)
        except (AnalyticsError, httpx.HTTPError) as e:
            logger.warning("Prior order lookup failed, skipping customer", customer_id=customer_id, error=str(e))
    
    return _customer_rows(returning)


async def inactive_customer_list(
    aggregator: MetricAggregator,
    date_range: DateRange,
    cap: int = DEFAULT_LIST_CAP,
) -> Dict[str, Any]:
    """Customers (capped scan) with no order in the range."""
    customers = await _fetch_customers(aggregator, None, None, cap)
    
    active = DistinctActorReducer()
    active.consume(await aggregator.fetch(ACTOR_FIELDS, date_range.start, date_range.end))
    
    return _customer_rows([customer for customer in customers if customer.get("id") not in active.actors])


async def _order_list(
    aggregator: MetricAggregator,
    date_range: DateRange,
    fields: str,
    predicate: Callable[[Record], bool],
    row: Callable[[Record], Dict[str, Any]],
    cap: int,
) -> Dict[str, Any]:
    records = await aggregator.fetch(fields, date_range.start, date_range.end, max_records=cap)
    rows = [row(order) for order in records if predicate(order)]
    return {"orders": rows, "total": len(rows)}


async def cancelled_order_list(
    aggregator: MetricAggregator,
    date_range: DateRange,
    cap: int = DEFAULT_LIST_CAP,
) -> Dict[str, Any]:
    return await _order_list(aggregator, date_range, CANCELLED_LIST_FIELDS, is_cancelled, cancelled_order_row, cap)


async def cod_order_list(
    aggregator: MetricAggregator,
    date_range: DateRange,
    cap: int = DEFAULT_LIST_CAP,
) -> Dict[str, Any]:
    return await _order_list(aggregator, date_range, COD_LIST_FIELDS, is_cod, cod_order_row, cap)


# metric name -> builder(aggregator, date_range, cap=...)
LIST_BUILDERS: Dict[str, ListBuilder] = {
    catalog.REVIEWERS.name: partial(customer_list, definition=catalog.REVIEWERS),
    catalog.DISCOUNT_USERS.name: partial(customer_list, definition=catalog.DISCOUNT_USERS),
    catalog.CANCELLED_ORDERS.name: cancelled_order_list,
    catalog.COD_ORDERS.name: cod_order_list,
    "new-customers": new_customer_list,
    "total-customers": total_customer_list,
    "returning-customers": returning_customer_list,
    "inactive-customers": inactive_customer_list,
}
