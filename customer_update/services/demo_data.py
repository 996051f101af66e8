# customer_update/services/demo_data.py
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from customer_update.db.models.customers import DEFAULT_STATUS, Customer

logger = logging.getLogger(__name__)

# (name, phone, email, address, tax_id, created days ago, updated days ago)
DEMO_CUSTOMERS = [
    ("John Doe", "555-123-4567", "john.doe@example.com",
     "123 Main Street, Anytown, ST 12345", "12345678901", 5, 1),
    ("Jane Smith", "555-234-5678", "jane.smith@example.com",
     "456 Oak Avenue, Springfield, IL 62701", "23456789012", 3, 3),
    ("Robert Johnson", "555-345-6789", None,
     "789 Pine Street, Metro City, NY 10001", "34567890123", 7, 2),
]


def seed_demo_customers(db: Session) -> int:
    """
    Insert the demo customers when the table is empty.

    Returns the number of rows inserted (0 if the table already had data).
    """
    existing = db.execute(select(func.count()).select_from(Customer)).scalar_one()
    if existing:
        logger.info("Skipping demo seed, customers table already has %d rows", existing)
        return 0

    now = datetime.now(timezone.utc)
    for name, phone, email, address, tax_id, created_ago, updated_ago in DEMO_CUSTOMERS:
        db.add(
            Customer(
                name=name,
                phone=phone,
                email=email,
                address=address,
                tax_id=tax_id,
                status=DEFAULT_STATUS,
                created_at=now - timedelta(days=created_ago),
                updated_at=now - timedelta(days=updated_ago),
            )
        )
    db.commit()
    logger.info("Seeded %d demo customers", len(DEMO_CUSTOMERS))
    return len(DEMO_CUSTOMERS)
