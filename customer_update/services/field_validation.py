# customer_update/services/field_validation.py
"""
Declarative field constraints for customer create/update payloads.

validate_customer_fields is a pure function: it never touches the database or
the external validator and collects every violation instead of stopping at the
first one. Within a single field the checks run in order and only the first
failing check is reported.
"""
from __future__ import annotations

import re
from typing import Callable, List, Optional

from email_validator import EmailNotValidError, validate_email

from customer_update.schemas.customers import CustomerPayload

NAME_MIN, NAME_MAX = 2, 100
ADDRESS_MIN, ADDRESS_MAX = 5, 500
PHONE_MIN, PHONE_MAX = 7, 20
TAX_ID_LENGTH = 11

_PHONE_RE = re.compile(r"\+?[0-9 -]+")
_TAX_ID_RE = re.compile(r"[0-9]{%d}" % TAX_ID_LENGTH)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _check_name(value: Optional[str]) -> Optional[str]:
    if _is_blank(value):
        return "Name is required"
    if not NAME_MIN <= len(value) <= NAME_MAX:
        return f"Name must be between {NAME_MIN} and {NAME_MAX} characters"
    return None


def _check_phone(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    if not (PHONE_MIN <= len(value) <= PHONE_MAX and _PHONE_RE.fullmatch(value)):
        return (
            f"Phone must be {PHONE_MIN}-{PHONE_MAX} characters of digits, spaces "
            "or hyphens, optionally starting with +"
        )
    return None


def _check_email(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    try:
        # Format only: no DNS, and *.test domains are allowed. The other
        # reserved names (.local, .invalid, .onion, localhost) stay rejected.
        result = validate_email(
            value,
            check_deliverability=False,
            globally_deliverable=False,
            test_environment=True,
        )
    except EmailNotValidError:
        return "Email must be a valid email address"
    if "." not in result.domain:
        return "Email must be a valid email address"
    return None


def _check_address(value: Optional[str]) -> Optional[str]:
    if _is_blank(value):
        return "Address is required"
    if not ADDRESS_MIN <= len(value) <= ADDRESS_MAX:
        return f"Address must be between {ADDRESS_MIN} and {ADDRESS_MAX} characters"
    return None


def _check_tax_id(value: Optional[str]) -> Optional[str]:
    if _is_blank(value):
        return "Tax ID is required"
    if len(value) != TAX_ID_LENGTH:
        return f"Tax ID must be exactly {TAX_ID_LENGTH} characters"
    if not is_valid_tax_id_format(value):
        return f"Tax ID must be exactly {TAX_ID_LENGTH} digits"
    return None


_RULES: List[tuple[str, Callable[[Optional[str]], Optional[str]]]] = [
    ("name", _check_name),
    ("phone", _check_phone),
    ("email", _check_email),
    ("address", _check_address),
    ("tax_id", _check_tax_id),
]


def is_valid_tax_id_format(tax_id: Optional[str]) -> bool:
    """True when tax_id is exactly 11 ASCII digits."""
    return bool(tax_id) and _TAX_ID_RE.fullmatch(tax_id) is not None


def validate_customer_fields(fields: CustomerPayload) -> List[str]:
    """
    Return the ordered list of violation messages for a candidate customer.

    An empty list means the payload is valid.
    """
    errors: List[str] = []
    for attr, check in _RULES:
        message = check(getattr(fields, attr))
        if message:
            errors.append(message)
    return errors
