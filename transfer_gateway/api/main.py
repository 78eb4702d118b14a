"""FastAPI application factory"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from transfer_gateway.api.errors import register_exception_handlers
from transfer_gateway.api.middleware import MetricsMiddleware, RequestIDMiddleware, UnhandledErrorMiddleware
from transfer_gateway.api.v1 import accounts, transactions, transfer
from transfer_gateway.config import Settings, get_settings
from transfer_gateway.infrastructure.clients.identity import build_identity_resolver
from transfer_gateway.infrastructure.database.session import build_engine, build_session_factory
from transfer_gateway.infrastructure.observability.logging import setup_logging


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure FastAPI application"""
    settings = settings or get_settings()

    # Setup structured logging
    setup_logging(settings.log_level, settings.service_name)

    app = FastAPI(
        title="Transfer Gateway",
        description="Authenticated money transfers with an audited ledger",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Collaborators are built once per app and injected through app.state
    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.identity_resolver = build_identity_resolver(settings)

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type", "x-request-id"],
        expose_headers=["X-Request-ID"],
    )

    register_exception_handlers(app)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(transfer.router, prefix="/v1", tags=["transfers"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(accounts.router, prefix="/v1", tags=["accounts"])

    return app
