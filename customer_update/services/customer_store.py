# customer_update/services/customer_store.py
"""
Row-level access to the customers table.

These helpers never commit; the calling service owns the transaction.
"""
from __future__ import annotations

from typing import Optional

from sqlalchemy import exists, select
from sqlalchemy.orm import Session

from customer_update.db.models.customers import MAX_CUSTOMER_ID, Customer


def list_all(db: Session) -> list[Customer]:
    stmt = select(Customer).order_by(Customer.name.asc(), Customer.id.asc())
    return list(db.execute(stmt).scalars().all())


def get_by_id(db: Session, customer_id: int) -> Customer | None:
    # Ids outside the column range cannot exist and would overflow the driver
    if not 1 <= customer_id <= MAX_CUSTOMER_ID:
        return None
    return db.get(Customer, customer_id)


def tax_id_exists(db: Session, tax_id: str, *, exclude_id: Optional[int] = None) -> bool:
    condition = Customer.tax_id == tax_id
    if exclude_id is not None:
        condition = condition & (Customer.id != exclude_id)
    return bool(db.execute(select(exists().where(condition))).scalar())


def add(db: Session, customer: Customer) -> Customer:
    db.add(customer)
    db.flush()
    return customer


def delete(db: Session, customer: Customer) -> None:
    db.delete(customer)
    db.flush()
