from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Wire models use camelCase on the outside, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CustomerPayload(CamelModel):
    """
    Body of POST /customers and PUT /customers/{id}.

    Every field is optional at the binding layer so that missing or blank values
    reach validate_customer_fields and are reported alongside all other
    violations instead of being rejected one by one by pydantic.
    """

    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    tax_id: Optional[str] = Field(default=None, description="Exactly 11 digits")


class CustomerItem(CamelModel):
    id: int
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    address: str
    tax_id: str
    created_at: datetime
    updated_at: datetime
    status: str

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # SQLite hands back naive datetimes; everything is stored in UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class TaxIdCheck(CamelModel):
    is_valid: bool
    exists: bool


class HealthStatus(BaseModel):
    status: str
    timestamp: datetime
    version: str
    environment: str
