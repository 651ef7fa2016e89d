"""
ClubOps Payroll - Main Application Entry Point

Compensation calculation service for gaming-club back offices.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.config import get_settings
from backend.middleware.request_log import RequestLogMiddleware
from backend.routers.v1 import compensation, maintenance_kpi

settings = get_settings()

logging.basicConfig(level=settings.log_level.upper())

# Initialize Sentry for error monitoring
if settings.sentry_dsn:
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        release=f"clubops-payroll@{settings.app_version}",
        traces_sample_rate=0.1 if settings.environment == "production" else 1.0,
        integrations=[FastApiIntegration()],
    )


app = FastAPI(
    title=settings.app_name,
    description=(
        "Shift salary and equipment maintenance bonus calculations for "
        "gaming-club payroll. Every endpoint is a pure calculation: the "
        "caller supplies the stored scheme or KPI configuration and the "
        "observed metrics, and persists the returned result."
    ),
    version=settings.app_version,
    docs_url="/api/docs" if settings.debug else None,
    redoc_url="/api/redoc" if settings.debug else None,
    openapi_url="/api/openapi.json" if settings.debug else None,
)

# Request logging middleware (outermost, captures all requests)
app.add_middleware(RequestLogMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check endpoints
@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Basic health check endpoint."""
    return {"status": "healthy", "service": "clubops-payroll"}


@app.get("/health/ready", tags=["Health"])
async def readiness_check() -> dict[str, str]:
    """Readiness check. The service has no external dependencies."""
    return {
        "status": "ready",
        "service": "clubops-payroll",
        "version": settings.app_version,
        "environment": settings.environment,
    }


# API v1 routes
app.include_router(
    compensation.router,
    prefix=f"{settings.api_v1_prefix}/compensation",
    tags=["Compensation"],
)
app.include_router(
    maintenance_kpi.router,
    prefix=f"{settings.api_v1_prefix}/maintenance-kpi",
    tags=["Maintenance KPI"],
)
