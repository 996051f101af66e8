# customer_update/db/models/__init__.py

from customer_update.db.base import Base

from .customers import Customer

__all__ = [
    "Base",
    "Customer",
]
