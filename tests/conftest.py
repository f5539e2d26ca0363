"""
Test Suite Configuration
"""
import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import pytest

SEARCH_TERM = re.compile(r"(\w+):(>=|<=|>|<)?'?([^'\s]+)'?")


def _parse(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _matches(record: Dict[str, Any], field: str, op: Optional[str], value: str) -> bool:
    if field == "created_at":
        created = _parse(record["createdAt"])
        bound = _parse(value)
        return {
            ">=": created >= bound,
            "<=": created <= bound,
            ">": created > bound,
            "<": created < bound,
            None: created == bound,
        }[op]
    if field == "customer_id":
        customer = record.get("customer") or {}
        return str(customer.get("id") or "").rsplit("/", 1)[-1] == value
    return True


def filter_records(records: List[Dict[str, Any]], search: Optional[str]) -> List[Dict[str, Any]]:
    """Apply the subset of Admin API search syntax the service emits."""
    if not search:
        return list(records)
    terms = SEARCH_TERM.findall(search)
    return [
        record for record in records
        if all(_matches(record, field, op or None, value) for field, op, value in terms)
    ]


class FakeAdminClient:
    """
    In-memory stand-in for the Admin GraphQL endpoint.

    Emulates cursor pagination (cursor = offset), ``created_at`` and
    ``customer_id`` search terms, and ``customersCount``. Calls are numbered
    from 1; scripted GraphQL errors or raised exceptions can be attached to
    a call number.
    """

    def __init__(self, orders=None, customers=None):
        self.orders: List[Dict[str, Any]] = list(orders or [])
        self.customers: List[Dict[str, Any]] = list(customers or [])
        self.calls: List[Dict[str, Any]] = []
        self.errors_on_call: Dict[int, List[Dict[str, Any]]] = {}
        self.raise_on_call: Dict[int, Exception] = {}
        self.always_errors: Optional[List[Dict[str, Any]]] = None

    async def graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        variables = dict(variables or {})
        self.calls.append({"query": query, "variables": variables})
        call_number = len(self.calls)

        if call_number in self.raise_on_call:
            raise self.raise_on_call[call_number]
        if call_number in self.errors_on_call:
            return {"errors": self.errors_on_call[call_number]}
        if self.always_errors:
            return {"errors": self.always_errors}

        search = variables.get("query")
        if "customersCount(" in query:
            return {"data": {"customersCount": {"count": len(filter_records(self.customers, search))}}}

        resource = "customers" if "customers(" in query else "orders"
        source = self.customers if resource == "customers" else self.orders
        records = filter_records(source, search)

        first = int(variables.get("first", 1))
        offset = int(variables["after"]) if variables.get("after") else 0
        page = records[offset:offset + first]
        next_offset = offset + len(page)

        return {
            "data": {
                resource: {
                    "pageInfo": {
                        "hasNextPage": next_offset < len(records),
                        "endCursor": str(next_offset) if page else None,
                    },
                    "nodes": page,
                }
            }
        }

    @property
    def searches(self) -> List[Optional[str]]:
        return [call["variables"].get("query") for call in self.calls]


def _iso(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@pytest.fixture
def now() -> datetime:
    """Fixed reference instant: Sunday 2026-03-15 14:30 UTC"""
    return datetime(2026, 3, 15, 14, 30, tzinfo=timezone.utc)


@pytest.fixture
def make_order() -> Callable[..., Dict[str, Any]]:
    """Factory for order nodes"""
    counter = {"n": 0}

    def factory(
        created_at: datetime,
        customer: Optional[str] = None,
        tags: Optional[List[str]] = None,
        note: Optional[str] = None,
        custom_attributes: Optional[List[Dict[str, str]]] = None,
        financial_status: str = "PAID",
        cancelled_at: Optional[datetime] = None,
        discount: Optional[str] = "0.00",
        **extra: Any,
    ) -> Dict[str, Any]:
        counter["n"] += 1
        order = {
            "id": f"gid://shopify/Order/{counter['n']}",
            "name": f"#{1000 + counter['n']}",
            "createdAt": _iso(created_at),
            "customer": {"id": f"gid://shopify/Customer/{customer}"} if customer else None,
            "tags": tags or [],
            "note": note,
            "customAttributes": custom_attributes or [],
            "displayFinancialStatus": financial_status,
            "cancelledAt": _iso(cancelled_at) if cancelled_at else None,
            "totalDiscountsSet": {"shopMoney": {"amount": discount}},
        }
        order.update(extra)
        return order

    return factory


@pytest.fixture
def make_customer() -> Callable[..., Dict[str, Any]]:
    """Factory for customer nodes"""

    def factory(
        customer: str,
        created_at: datetime,
        name: Optional[str] = None,
        email: Optional[str] = None,
        orders: int = 1,
        spent: str = "0.00",
    ) -> Dict[str, Any]:
        return {
            "id": f"gid://shopify/Customer/{customer}",
            "displayName": name,
            "email": email,
            "createdAt": _iso(created_at),
            "numberOfOrders": orders,
            "amountSpent": {"amount": spent, "currencyCode": "USD"},
        }

    return factory


@pytest.fixture
def fake_client() -> FakeAdminClient:
    return FakeAdminClient()

