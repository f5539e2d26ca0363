"""
Shopify Admin API Module
"""
from .client import ShopifyAdminClient, AdminGraphQL

__all__ = ["ShopifyAdminClient", "AdminGraphQL"]
