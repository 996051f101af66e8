from __future__ import annotations

import logging
import random
import re
import threading
import time
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from pydantic import BaseModel, Field

from customer_update.config import Settings

logger = logging.getLogger(__name__)


class ExternalValidationResult(BaseModel):
    valid: bool
    message: str = ""
    errors: List[str] = Field(default_factory=list)


# ============================================================================
# Abstract Validator Interface
# ============================================================================

class ExternalValidator(ABC):
    """
    Capability interface for the legacy-system check run before a customer is
    created.

    One call, one verdict. Implementations may block (network, mainframe) and
    may raise; retries and timeouts are not their concern.
    """

    name: str

    @abstractmethod
    def validate(
        self,
        *,
        name: str,
        phone: Optional[str],
        email: Optional[str],
        address: str,
        tax_id: str,
    ) -> ExternalValidationResult:
        ...


# ============================================================================
# Implementations
# ============================================================================

class StubExternalValidator(ExternalValidator):
    """Always approves. Stands in for the real legacy system."""

    name = "stub"

    def validate(self, *, name, phone, email, address, tax_id) -> ExternalValidationResult:
        logger.debug("Stub external validation for tax_id=%s", tax_id)
        return ExternalValidationResult(valid=True, message="Validation passed", errors=[])


class SimulatedLegacyValidator(ExternalValidator):
    """
    Offline simulation of the mainframe validation program.

    Applies the legacy rule set (which is stricter than the API's field
    validation in places, e.g. names may only contain letters, spaces,
    apostrophes and hyphens) and keeps its own registry of tax ids it has
    approved, so a second create with the same tax id is rejected here.

    Message format mirrors the legacy program:
      - "SUCCESS: ..." on approval
      - "VALIDATION_ERROR: <error>. <error>." on rejection
    """

    name = "simulated"

    KNOWN_TAX_IDS = ("12345678901", "98765432109", "11111111111")

    _NAME_RE = re.compile(r"[a-zA-Z\s'-]+")
    _PHONE_STRIP_RE = re.compile(r"[\s\-()+]")
    _PHONE_BAD_CHARS_RE = re.compile(r"[^0-9\s\-()+]")
    _EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

    def __init__(self, latency_ms: int = 0, known_tax_ids: Optional[Iterable[str]] = None):
        self.latency_ms = latency_ms
        self._tax_ids = set(self.KNOWN_TAX_IDS if known_tax_ids is None else known_tax_ids)
        self._lock = threading.Lock()

    def validate(self, *, name, phone, email, address, tax_id) -> ExternalValidationResult:
        if self.latency_ms:
            time.sleep(self.latency_ms / 1000.0)

        logger.info("Simulated legacy validation for tax_id=%s", tax_id)

        errors: List[str] = []
        errors += self._check_name(name)
        errors += self._check_phone(phone)
        errors += self._check_email(email)
        errors += self._check_address(address)

        with self._lock:
            errors += self._check_tax_id(tax_id)

            if errors:
                message = "VALIDATION_ERROR: " + ". ".join(errors) + "."
                logger.warning("Simulated legacy validation failed: %s", message)
                return ExternalValidationResult(valid=False, message=message, errors=errors)

            self._tax_ids.add(tax_id)

        legacy_id = random.randint(1000, 9999)
        message = (
            "SUCCESS: Customer information validated and saved successfully. "
            f"Customer ID: {legacy_id}"
        )
        logger.info("Simulated legacy validation succeeded: %s", message)
        return ExternalValidationResult(valid=True, message=message, errors=[])

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------
    def _check_name(self, name: Optional[str]) -> List[str]:
        if not name or not name.strip():
            return ["Customer name is required"]
        if len(name) < 2 or len(name) > 100:
            return ["Customer name must be 2-100 characters"]
        if not self._NAME_RE.fullmatch(name):
            return ["Customer name contains invalid characters"]
        return []

    def _check_phone(self, phone: Optional[str]) -> List[str]:
        if not phone or not phone.strip():
            return []
        errors = []
        digits = self._PHONE_STRIP_RE.sub("", phone)
        if not (digits.isascii() and digits.isdigit() and len(digits) >= 10):
            errors.append("Phone number must contain at least 10 digits")
        if self._PHONE_BAD_CHARS_RE.search(phone):
            errors.append("Phone number contains invalid characters")
        return errors

    def _check_email(self, email: Optional[str]) -> List[str]:
        if not email or not email.strip():
            return []
        if len(email) > 100:
            return ["Email address too long (max 100 characters)"]
        if "@" not in email:
            return ["Email address must contain @ symbol"]
        if not self._EMAIL_RE.fullmatch(email):
            return ["Invalid email address format"]
        return []

    def _check_address(self, address: Optional[str]) -> List[str]:
        if not address or not address.strip():
            return ["Address is required"]
        if len(address) < 5:
            return ["Address must be at least 5 characters"]
        if len(address) > 255:
            return ["Address too long (max 255 characters)"]
        return []

    def _check_tax_id(self, tax_id: Optional[str]) -> List[str]:
        if not tax_id or not tax_id.strip():
            return ["Tax ID is required"]
        if len(tax_id) != 11:
            return ["Tax ID must be exactly 11 characters"]
        if not re.fullmatch(r"[0-9]{11}", tax_id):
            return ["Tax ID must contain only digits"]
        if tax_id in self._tax_ids:
            return ["Tax ID already exists in database"]
        return []


# ============================================================================
# Factory
# ============================================================================

def build_external_validator(settings: Settings) -> ExternalValidator:
    """
    Map EXTERNAL_VALIDATOR to a concrete validator instance.

      - "stub"      → StubExternalValidator
      - "simulated" → SimulatedLegacyValidator
    """
    provider = (settings.external_validator or "stub").lower()

    if provider == "stub":
        validator: ExternalValidator = StubExternalValidator()
    elif provider == "simulated":
        validator = SimulatedLegacyValidator(latency_ms=settings.external_validator_latency_ms)
    else:
        raise ValueError(f"Unknown external validator: {provider!r}")

    logger.info("Using external validator: %s", validator.name)
    return validator
