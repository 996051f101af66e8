from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from customer_update.db.base import Base

DEFAULT_STATUS = "Active"

# Largest id the integer primary key can hold on every supported backend
MAX_CUSTOMER_ID = 2**31 - 1


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Customer(Base):
    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    address: Mapped[str] = mapped_column(String(500), nullable=False)

    # Unique across the whole table; the service only pre-checks it on update
    tax_id: Mapped[str] = mapped_column(String(11), nullable=False, unique=True, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=DEFAULT_STATUS)

    def __repr__(self) -> str:
        return f"<Customer id={self.id} tax_id={self.tax_id!r}>"
