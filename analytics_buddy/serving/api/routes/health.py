"""
Health Check Endpoints
"""

from datetime import datetime, timezone
from typing import Dict, Any

from fastapi import APIRouter
from pydantic import BaseModel

from analytics_buddy.config import get_settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    environment: str
    timestamp: datetime
    checks: Dict[str, Any]


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Service health.
    
    The service holds no database or cache; the only dependency is the
    Shopify Admin API, which is scoped per request and not probed here.
    """
    settings = get_settings()
    checks = {
        "shopify_api_version": settings.shopify.api_version,
        "default_shop_configured": bool(settings.shopify.shop_domain),
    }
    return HealthResponse(
        status="healthy",
        version=settings.version,
        environment=settings.app_env,
        timestamp=datetime.now(timezone.utc),
        checks=checks,
    )


@router.get("/health/live")
async def liveness_check() -> Dict[str, str]:
    """Liveness probe endpoint."""
    return {"status": "alive"}
