"""
FastAPI Production Application

Main entry point for the Customer Analytics Buddy API.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
import httpx
import structlog

from analytics_buddy.config import get_settings
from analytics_buddy.config.logging import configure_logging
from analytics_buddy.metrics.errors import AnalyticsError, ProtectedDataAccessDenied
from analytics_buddy.serving.api.middleware import (
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from analytics_buddy.serving.api.routes import dashboard_router, health_router

settings = get_settings()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    configure_logging()
    logger.info("Starting Customer Analytics Buddy API", environment=settings.app_env)
    yield
    logger.info("Shutting down...")


app = FastAPI(
    title="Customer Analytics Buddy API",
    description="Customer and order analytics for Shopify merchants",
    version=settings.version,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.security.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)


@app.exception_handler(ProtectedDataAccessDenied)
async def protected_data_handler(request: Request, exc: ProtectedDataAccessDenied) -> JSONResponse:
    logger.warning(
        "Protected data access denied - access must be requested in the Partner Dashboard",
        path=request.url.path,
        code=exc.code,
    )
    return JSONResponse(status_code=403, content={"error": exc.code})


@app.exception_handler(AnalyticsError)
async def analytics_error_handler(request: Request, exc: AnalyticsError) -> JSONResponse:
    logger.error("Aggregation failed", path=request.url.path, error=str(exc), error_type=type(exc).__name__)
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.exception_handler(httpx.HTTPError)
async def upstream_error_handler(request: Request, exc: httpx.HTTPError) -> JSONResponse:
    logger.error("Shopify request failed", path=request.url.path, error=str(exc), error_type=type(exc).__name__)
    return JSONResponse(status_code=500, content={"error": str(exc) or type(exc).__name__})


app.include_router(health_router, prefix="/api/v1", tags=["Health"])
app.include_router(dashboard_router, prefix="/api/v1/dashboard", tags=["Dashboard"])


@app.get("/api/v1/info")
async def api_info():
    """API information endpoint."""
    return {
        "name": "Customer Analytics Buddy API",
        "version": settings.version,
        "environment": settings.app_env,
        "documentation": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
