"""
GraphQL documents and search filter builders for the Admin API.
"""

from datetime import datetime
from typing import Optional

from analytics_buddy.metrics.date_range import format_instant


def connection_query(resource: str, fields: str) -> str:
    """
    Build a cursor-paged connection query for ``resource``.
    
    The cursor travels as the ``$after`` variable and is omitted on the
    first request.
    """
    return (
        f"query {resource.capitalize()}Page($first: Int!, $after: String, $query: String) {{\n"
        f"  {resource}(first: $first, after: $after, query: $query) {{\n"
        "    pageInfo {\n"
        "      hasNextPage\n"
        "      endCursor\n"
        "    }\n"
        "    nodes {\n"
        f"      {fields}\n"
        "    }\n"
        "  }\n"
        "}"
    )


CUSTOMERS_COUNT_QUERY = """
query CustomersCount($query: String) {
  customersCount(query: $query) {
    count
  }
}
"""

PRIOR_ORDER_QUERY = """
query PriorOrders($query: String) {
  orders(first: 1, query: $query) {
    nodes {
      id
    }
  }
}
"""

# Node selections per metric family
REVIEW_FIELDS = "id tags note customAttributes { key value } customer { id }"
DISCOUNT_FIELDS = "id totalDiscountsSet { shopMoney { amount } } customer { id }"
STATUS_FIELDS = "id displayFinancialStatus cancelledAt"
TIMING_FIELDS = "id createdAt"
ACTOR_FIELDS = "id createdAt customer { id }"
SUMMARY_FIELDS = (
    "id createdAt displayFinancialStatus cancelledAt tags note "
    "customAttributes { key value } totalDiscountsSet { shopMoney { amount } } customer { id }"
)
CANCELLED_LIST_FIELDS = (
    "id name cancelledAt createdAt "
    "totalPriceSet { shopMoney { amount currencyCode } } customer { displayName email }"
)
COD_LIST_FIELDS = (
    "id name displayFinancialStatus createdAt "
    "totalPriceSet { shopMoney { amount currencyCode } } customer { displayName email }"
)
CUSTOMER_LIST_FIELDS = "id displayName email createdAt numberOfOrders amountSpent { amount currencyCode }"
RETURNING_LIST_FIELDS = f"id createdAt customer {{ {CUSTOMER_LIST_FIELDS} }}"


def created_between(start: Optional[datetime] = None, end: Optional[datetime] = None) -> Optional[str]:
    """Build a ``created_at`` search filter; either bound may be open."""
    terms = []
    if start is not None:
        terms.append(f"created_at:>='{format_instant(start)}'")
    if end is not None:
        terms.append(f"created_at:<='{format_instant(end)}'")
    return " ".join(terms) or None


def created_before(moment: datetime) -> str:
    return f"created_at:<'{format_instant(moment)}'"


def numeric_id(gid: str) -> str:
    """Extract the numeric tail of a global id (gid://shopify/Customer/42 -> 42)."""
    return gid.rsplit("/", 1)[-1]
