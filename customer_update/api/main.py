from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from customer_update.api.errors import register_exception_handlers
from customer_update.api.routers import customers as customers_routes
from customer_update.api.routers import health as health_routes
from customer_update.config import Settings, get_settings
from customer_update.db.base import Base
from customer_update.db import models  # noqa: F401 - import models so Base.metadata is populated
from customer_update.db.session import create_engine_from_settings, create_session_factory
from customer_update.logging_config import configure_logging
from customer_update.services.demo_data import seed_demo_customers
from customer_update.services.external_validator import build_external_validator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    if settings.create_tables_on_startup:
        Base.metadata.create_all(bind=app.state.engine)

    if settings.seed_demo_data:
        with app.state.session_factory() as db:
            seed_demo_customers(db)

    logger.info(
        "Customer Update API started (environment=%s, version=%s, validator=%s)",
        settings.environment,
        settings.app_version,
        app.state.external_validator.name,
    )
    yield
    app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None, *, setup_logging: bool = True) -> FastAPI:
    """
    Build the FastAPI application from an explicit Settings object.

    The engine, session factory and external validator are created here once
    and shared through app.state.
    """
    settings = settings or get_settings()

    if setup_logging:
        configure_logging(settings)

    app = FastAPI(
        title="Customer Update API",
        version=settings.app_version,
        description="Customer records CRUD with legacy-system validation on create.",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = create_engine_from_settings(settings)
    app.state.session_factory = create_session_factory(app.state.engine)
    app.state.external_validator = build_external_validator(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # ---------------------------------------------------------------------------
    # Routers (mounted under /api; health is also served at the root)
    # ---------------------------------------------------------------------------
    app.include_router(customers_routes.router, prefix="/api")   # /api/customers/...
    app.include_router(health_routes.router, prefix="/api")      # /api/health
    app.include_router(health_routes.router, include_in_schema=False)  # /health

    return app
