"""Shared test fixtures for the Customer Update test suite."""

from collections.abc import Callable, Generator
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from customer_update.api.main import create_app
from customer_update.config import Settings
from customer_update.db.base import Base
from customer_update.db.session import create_engine_from_settings, create_session_factory
from customer_update.schemas.customers import CustomerPayload


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at a private in-memory SQLite database."""
    return Settings(
        database_url="sqlite://",
        environment="Test",
        app_version="9.9.9",
        external_validator="stub",
        external_validation_timeout_seconds=0,
        seed_demo_data=False,
    )


@pytest.fixture
def db_session(settings: Settings) -> Generator[Session, None, None]:
    """Session on a fresh schema, for service-level tests."""
    engine = create_engine_from_settings(settings)
    Base.metadata.create_all(bind=engine)
    session = create_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings, setup_logging=False)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    # Context manager runs the lifespan, which creates the tables
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def customer_data() -> Callable[..., dict[str, Any]]:
    """Factory for valid camelCase request bodies.

    Usage:
        body = customer_data(taxId="11122233344", phone=None)
    """

    def _make(**overrides: Any) -> dict[str, Any]:
        body = {
            "name": "Ada Lovelace",
            "phone": "+44 20-7946-0000",
            "email": "ada@example.com",
            "address": "12 St James's Square, London",
            "taxId": "12345678901",
        }
        body.update(overrides)
        return body

    return _make


@pytest.fixture
def payload(customer_data: Callable[..., dict[str, Any]]) -> Callable[..., CustomerPayload]:
    """Factory for CustomerPayload objects built from customer_data."""

    def _make(**overrides: Any) -> CustomerPayload:
        return CustomerPayload.model_validate(customer_data(**overrides))

    return _make
