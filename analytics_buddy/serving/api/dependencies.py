"""
Request Dependencies

Per-request Shopify session and aggregator construction.
"""

from typing import AsyncGenerator, Optional

from fastapi import Depends, Header, HTTPException, Query
import structlog

from analytics_buddy.config import get_settings
from analytics_buddy.metrics.aggregator import MetricAggregator
from analytics_buddy.metrics.date_range import DateRange, current_time, resolve_range
from analytics_buddy.shopify.client import AdminGraphQL, ShopifyAdminClient

logger = structlog.get_logger(__name__)


async def get_admin_client(
    x_shopify_shop_domain: Optional[str] = Header(None, alias="X-Shopify-Shop-Domain"),
    x_shopify_access_token: Optional[str] = Header(None, alias="X-Shopify-Access-Token"),
) -> AsyncGenerator[AdminGraphQL, None]:
    """
    Shop-scoped Admin API client for one request.
    
    Session headers take precedence over configured credentials.
    """
    settings = get_settings()
    shop_domain = x_shopify_shop_domain or settings.shopify.shop_domain
    access_token = x_shopify_access_token
    if not access_token and settings.shopify.access_token:
        access_token = settings.shopify.access_token.get_secret_value()
    
    if not shop_domain or not access_token:
        logger.warning("Missing Shopify session", shop=shop_domain)
        raise HTTPException(status_code=401, detail="Missing Shopify session")
    
    client = ShopifyAdminClient(
        shop_domain,
        access_token,
        api_version=settings.shopify.api_version,
        timeout=settings.shopify.request_timeout,
    )
    try:
        yield client
    finally:
        await client.aclose()


def get_aggregator(client: AdminGraphQL = Depends(get_admin_client)) -> MetricAggregator:
    settings = get_settings()
    return MetricAggregator(
        client,
        page_size=settings.aggregation.page_size,
        max_records=settings.aggregation.max_records,
    )


def get_date_range(date_range: Optional[str] = Query(None, alias="dateRange")) -> DateRange:
    """Resolve the ``dateRange`` query parameter against the current time."""
    settings = get_settings()
    token = date_range or settings.aggregation.default_range
    return resolve_range(token, current_time(settings.aggregation.timezone))
