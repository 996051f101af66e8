# customer_update/db/session.py

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Request
from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from customer_update.config import Settings


def create_engine_from_settings(settings: Settings) -> Engine:
    """
    Build the SQLAlchemy engine for DATABASE_URL.

    SQLite needs check_same_thread=False because FastAPI runs sync routes in a
    thread pool; in-memory SQLite also needs a single shared connection.
    """
    url = make_url(settings.database_url)
    kwargs: dict = {"future": True, "pool_pre_ping": True}

    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool

    return create_engine(url, **kwargs)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        future=True,
    )


# Dependency helper for FastAPI
def get_db(request: Request) -> Iterator[Session]:
    session_factory: sessionmaker[Session] = request.app.state.session_factory
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
