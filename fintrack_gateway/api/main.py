"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from fintrack_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from fintrack_gateway.api.v1 import accounts, budgets, receipts, reports, sms, subscriptions
from fintrack_gateway.infrastructure.observability.logging import setup_logging
from fintrack_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Fintrack Gateway",
        description="Personal finance tracking: SMS import, receipts, budgets and reports",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(accounts.router, prefix="/v1", tags=["accounts"])
    app.include_router(sms.router, prefix="/v1", tags=["sms"])
    app.include_router(receipts.router, prefix="/v1", tags=["receipts"])
    app.include_router(budgets.router, prefix="/v1", tags=["budgets"])
    app.include_router(reports.router, prefix="/v1", tags=["reports"])
    app.include_router(subscriptions.router, prefix="/v1", tags=["subscriptions"])

    return app


app = create_app()
