from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from customer_update.db.models.customers import DEFAULT_STATUS, Customer
from customer_update.errors import (
    CustomerNotFound,
    DuplicateTaxId,
    ExternalValidationFailed,
    ExternalValidatorUnavailable,
    ValidationFailed,
)
from customer_update.schemas.customers import CustomerPayload
from customer_update.services import customer_store
from customer_update.services.external_validator import (
    ExternalValidationResult,
    ExternalValidator,
)
from customer_update.services.field_validation import validate_customer_fields

logger = logging.getLogger(__name__)


class _CallTimedOut(Exception):
    pass


def _call_with_timeout(
    fn: Callable[..., ExternalValidationResult],
    kwargs: dict[str, Any],
    timeout: float,
) -> ExternalValidationResult:
    """
    Run fn(**kwargs) in its own daemon thread and wait at most `timeout` seconds.

    A call that times out keeps running in its thread; it holds no shared
    worker slot, so later calls start immediately.
    """
    outcome: dict[str, Any] = {}

    def _target() -> None:
        try:
            outcome["result"] = fn(**kwargs)
        except BaseException as exc:  # re-raised in the waiting thread
            outcome["error"] = exc

    worker = threading.Thread(target=_target, name="external-validation", daemon=True)
    worker.start()
    worker.join(timeout)

    if worker.is_alive():
        raise _CallTimedOut()
    if "error" in outcome:
        raise outcome["error"]
    return outcome["result"]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    return value if value else None


def _ensure_valid(fields: CustomerPayload) -> None:
    errors = validate_customer_fields(fields)
    if errors:
        logger.info("Customer payload rejected: %s", errors)
        raise ValidationFailed(errors)


def list_customers(db: Session) -> list[Customer]:
    return customer_store.list_all(db)


def get_customer(db: Session, customer_id: int) -> Customer:
    customer = customer_store.get_by_id(db, customer_id)
    if customer is None:
        raise CustomerNotFound(customer_id)
    return customer


def run_external_validation(
    validator: ExternalValidator,
    fields: CustomerPayload,
    *,
    timeout: Optional[float] = None,
) -> ExternalValidationResult:
    """
    Make the single external validation round trip for a create.

    timeout=None or 0 waits indefinitely. A timeout or an exception from the
    validator is raised as ExternalValidatorUnavailable; no retry is attempted.
    """
    kwargs = dict(
        name=fields.name,
        phone=fields.phone,
        email=fields.email,
        address=fields.address,
        tax_id=fields.tax_id,
    )
    try:
        if not timeout:
            return validator.validate(**kwargs)
        return _call_with_timeout(validator.validate, kwargs, timeout)
    except _CallTimedOut as exc:
        logger.error(
            "External validator %s did not answer within %.1fs (tax_id=%s)",
            getattr(validator, "name", type(validator).__name__),
            timeout,
            fields.tax_id,
        )
        raise ExternalValidatorUnavailable("External validation timed out") from exc
    except Exception as exc:
        logger.exception("External validator raised for tax_id=%s", fields.tax_id)
        raise ExternalValidatorUnavailable("External validation failed to complete") from exc


def create_customer(
    db: Session,
    fields: CustomerPayload,
    *,
    validator: ExternalValidator,
    validation_timeout: Optional[float] = None,
) -> Customer:
    """
    Validate, run the external check, then persist a new customer.

    The tax id is not pre-checked for uniqueness here (only update does that);
    the unique index on customers.tax_id turns a duplicate into DuplicateTaxId.
    """
    _ensure_valid(fields)

    verdict = run_external_validation(validator, fields, timeout=validation_timeout)
    if not verdict.valid:
        logger.info(
            "External validation rejected tax_id=%s: %s", fields.tax_id, verdict.message
        )
        raise ExternalValidationFailed(verdict.message, verdict.errors)

    now = _now()
    customer = Customer(
        name=fields.name,
        phone=_blank_to_none(fields.phone),
        email=_blank_to_none(fields.email),
        address=fields.address,
        tax_id=fields.tax_id,
        status=DEFAULT_STATUS,
        created_at=now,
        updated_at=now,
    )

    try:
        customer_store.add(db, customer)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Create rejected by store, duplicate tax_id=%s", fields.tax_id)
        raise DuplicateTaxId(fields.tax_id) from exc

    db.refresh(customer)
    logger.info("Created customer id=%s tax_id=%s", customer.id, customer.tax_id)
    return customer


def update_customer(db: Session, customer_id: int, fields: CustomerPayload) -> Customer:
    _ensure_valid(fields)

    customer = get_customer(db, customer_id)

    if customer_store.tax_id_exists(db, fields.tax_id, exclude_id=customer.id):
        logger.info(
            "Update of customer id=%s rejected, tax_id=%s held by another customer",
            customer_id,
            fields.tax_id,
        )
        raise DuplicateTaxId(fields.tax_id)

    customer.name = fields.name
    customer.phone = _blank_to_none(fields.phone)
    customer.email = _blank_to_none(fields.email)
    customer.address = fields.address
    customer.tax_id = fields.tax_id
    customer.updated_at = _now()

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Update rejected by store, duplicate tax_id=%s", fields.tax_id)
        raise DuplicateTaxId(fields.tax_id) from exc

    db.refresh(customer)
    logger.info("Updated customer id=%s", customer.id)
    return customer


def delete_customer(db: Session, customer_id: int) -> None:
    customer = get_customer(db, customer_id)
    customer_store.delete(db, customer)
    db.commit()
    logger.info("Deleted customer id=%s", customer_id)


def check_tax_id_available(db: Session, tax_id: str) -> bool:
    """True when no stored customer holds tax_id."""
    return not customer_store.tax_id_exists(db, tax_id)
