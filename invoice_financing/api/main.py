"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from invoice_financing.api.middleware import RequestIDMiddleware, MetricsMiddleware
from invoice_financing.api.v1 import financing, invoices
from invoice_financing.infrastructure.observability.logging import setup_logging
from invoice_financing.config import settings

# JSON logs carry the service name on every record
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Invoice Financing",
        description="Matches pending invoices with the cheapest eligible financier",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Last added runs first: the request id is assigned before MetricsMiddleware times the call
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Liveness probe for the financing service
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Scraped by Prometheus; includes the financing run metrics
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Financing runs and invoice queries live under /v1
    app.include_router(financing.router, prefix="/v1", tags=["financing"])
    app.include_router(invoices.router, prefix="/v1", tags=["invoices"])

    return app


app = create_app()
