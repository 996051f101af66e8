# customer_update/db/__init__.py

from .base import Base
from .session import create_engine_from_settings, create_session_factory, get_db
from . import models  # noqa: F401  # ensure models are imported so Base.metadata is populated

__all__ = [
    "Base",
    "create_engine_from_settings",
    "create_session_factory",
    "get_db",
    "models",
]
