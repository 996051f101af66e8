"""
Error taxonomy of the customer service.

Everything except ExternalValidatorUnavailable is an expected, caller-fixable
condition; the API layer renders those verbatim in the response envelope.
"""
from __future__ import annotations

from typing import List, Optional

DUPLICATE_TAX_ID_MESSAGE = "A customer with this Tax ID already exists in the system"


class CustomerServiceError(Exception):
    """Base class for errors raised by the customer service."""


class ValidationFailed(CustomerServiceError):
    """Field-level constraints rejected the payload."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Validation failed")


class ExternalValidationFailed(CustomerServiceError):
    """The legacy system rejected the customer data."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.message = message
        self.errors = list(errors or [])
        super().__init__(message)


class CustomerNotFound(CustomerServiceError):
    def __init__(self, customer_id: int):
        self.customer_id = customer_id
        self.message = f"Customer with ID {customer_id} does not exist"
        super().__init__(self.message)


class DuplicateTaxId(CustomerServiceError):
    def __init__(self, tax_id: str, message: str = DUPLICATE_TAX_ID_MESSAGE):
        self.tax_id = tax_id
        self.message = message
        super().__init__(message)


class ExternalValidatorUnavailable(CustomerServiceError):
    """The external validator raised or did not answer in time. Not caller-fixable."""
