"""
Page Fetcher

Follows Admin API cursors one page at a time until the server reports no
further page or the accumulated-record cap is reached. Pages are requested
strictly sequentially.
"""

from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

import structlog

from analytics_buddy.metrics.errors import (
    DataCategory,
    ProtectedDataAccessDenied,
    QueryFailure,
)
from analytics_buddy.shopify.client import AdminGraphQL
from analytics_buddy.shopify.queries import CUSTOMERS_COUNT_QUERY, connection_query

logger = structlog.get_logger(__name__)

# Substrings that flag an access-denied error, per data category.
# The Admin API offers no stable machine-readable code for this condition.
ACCESS_DENIED_MARKERS: Dict[DataCategory, Sequence[str]] = {
    DataCategory.ORDER: ("not approved", "protected", "Order"),
    DataCategory.CUSTOMER: ("not approved", "protected customer data", "Customer"),
}

DEFAULT_PAGE_SIZE = 250


def is_access_denied(message: Optional[str], category: DataCategory) -> bool:
    if not message:
        return False
    return any(marker in message for marker in ACCESS_DENIED_MARKERS[category])


def raise_for_errors(body: Dict[str, Any], category: DataCategory) -> None:
    """
    Raise the matching failure if a response carries GraphQL errors.
    
    Raises:
        ProtectedDataAccessDenied: any error message matches the category markers
        QueryFailure: any other reported error
    """
    errors = body.get("errors") or []
    if not errors:
        return
    
    for error in errors:
        message = error.get("message") if isinstance(error, dict) else str(error)
        if is_access_denied(message, category):
            logger.warning("Protected data access denied", category=category.value, message=message)
            raise ProtectedDataAccessDenied(category, message)
    
    first = errors[0]
    raise QueryFailure(first.get("message") if isinstance(first, dict) else str(first))


class PageFetcher:
    """
    Cursor-following fetcher for one Admin API connection.
    
    Args:
        client: Shop-scoped GraphQL client
        resource: Connection name (``orders``, ``customers``)
        category: Data category used to classify access errors
        page_size: Records requested per page
        max_records: Stop once at least this many records are accumulated
            (None fetches until exhaustion)
    """
    
    def __init__(
        self,
        client: AdminGraphQL,
        resource: str = "orders",
        category: DataCategory = DataCategory.ORDER,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_records: Optional[int] = None,
    ):
        self.client = client
        self.resource = resource
        self.category = category
        self.page_size = page_size
        self.max_records = max_records
    
    async def fetch_all(
        self,
        fields: str,
        search: Optional[str] = None,
        cursor: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Fetch every page matching ``search``.
        
        Records are returned in arrival order. Any error aborts the whole
        fetch; records accumulated so far are discarded.
        
        Args:
            fields: GraphQL node selection
            search: Admin API search filter
            cursor: Optional starting cursor (None means first page)
        """
        records: List[Dict[str, Any]] = []
        async for page in self.iter_pages(fields, search, cursor):
            records.extend(page)
        return records
    
    async def iter_pages(
        self,
        fields: str,
        search: Optional[str] = None,
        cursor: Optional[str] = None,
    ) -> AsyncIterator[List[Dict[str, Any]]]:
        """Yield node lists page by page."""
        query = connection_query(self.resource, fields)
        has_next_page = True
        fetched = 0
        pages = 0
        
        while has_next_page and (self.max_records is None or fetched < self.max_records):
            variables: Dict[str, Any] = {"first": self.page_size}
            if search:
                variables["query"] = search
            if cursor:
                variables["after"] = cursor
            
            body = await self.client.graphql(query, variables)
            raise_for_errors(body, self.category)
            
            connection = (body.get("data") or {}).get(self.resource) or {}
            nodes = connection.get("nodes") or []
            page_info = connection.get("pageInfo") or {}
            
            pages += 1
            fetched += len(nodes)
            has_next_page = bool(page_info.get("hasNextPage"))
            cursor = page_info.get("endCursor")
            if has_next_page and not cursor:
                has_next_page = False
            
            yield nodes
        
        logger.debug(
            "Pagination finished",
            resource=self.resource,
            search=search,
            pages=pages,
            records=fetched,
        )


async def fetch_customers_count(client: AdminGraphQL, search: Optional[str] = None) -> int:
    """Run a ``customersCount`` query (CUSTOMER category)."""
    variables = {"query": search} if search else None
    body = await client.graphql(CUSTOMERS_COUNT_QUERY, variables)
    raise_for_errors(body, DataCategory.CUSTOMER)
    counts = (body.get("data") or {}).get("customersCount") or {}
    return int(counts.get("count") or 0)

