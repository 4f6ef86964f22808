"""FastAPI application factory"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from advance_gateway.api.errors import register_exception_handlers
from advance_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from advance_gateway.api.routes import admin, applications, auth, transactions
from advance_gateway.config import Settings, settings as default_settings
from advance_gateway.infrastructure.database.session import Database
from advance_gateway.infrastructure.observability.logging import setup_logging


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Configuration; defaults to values read from the environment
        database: Pre-built database handle; built from settings.database_url when omitted
    """
    settings = settings or default_settings
    owns_database = database is None
    database = database or Database(settings.database_url, echo=settings.db_echo)

    # Setup structured logging
    setup_logging(settings.log_level, settings.service_name)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.auto_create_schema:
            database.create_all()
        yield
        if owns_database:
            database.dispose()

    app = FastAPI(
        title="Cash Advance Gateway",
        description="Cash-advance applications, lifecycle transitions and authentication",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
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
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(applications.router, prefix="/api/applications", tags=["applications"])
    app.include_router(transactions.router, prefix="/api/transactions", tags=["transactions"])
    app.include_router(admin.router, prefix="/api/admin/applications", tags=["admin"])

    return app


app = create_app()
