"""
Shopify Admin GraphQL Client

Thin async wrapper over httpx bound to one shop. GraphQL-level errors are
returned untouched in the response body so callers can classify them.
"""

from typing import Any, Dict, Optional, Protocol

import httpx
import structlog

logger = structlog.get_logger(__name__)


class AdminGraphQL(Protocol):
    """Anything that can execute an Admin GraphQL document"""
    
    async def graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        ...


class ShopifyAdminClient:
    """Admin GraphQL client scoped to a single shop."""
    
    def __init__(
        self,
        shop_domain: str,
        access_token: str,
        api_version: str = "2025-01",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        domain = shop_domain.strip().replace("https://", "").replace("http://", "").rstrip("/")
        self.shop_domain = domain
        self.api_version = api_version
        self.endpoint = f"https://{domain}/admin/api/{api_version}/graphql.json"
        self._client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={
                "X-Shopify-Access-Token": access_token,
                "Content-Type": "application/json",
            },
        )
    
    async def graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Execute a GraphQL document.
        
        Raises:
            httpx.HTTPError: transport failures and non-2xx responses
        """
        payload: Dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables
        
        response = await self._client.post(self.endpoint, json=payload)
        response.raise_for_status()
        
        body = response.json() or {}
        if body.get("errors"):
            logger.debug("GraphQL errors returned", shop=self.shop_domain, errors=len(body["errors"]))
        return body
    
    async def aclose(self) -> None:
        await self._client.aclose()
    
    async def __aenter__(self) -> "ShopifyAdminClient":
        return self
    
    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
