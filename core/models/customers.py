# =============================================================================
# core/models/customers.py - Customer-Facing Record Schemas
# =============================================================================
# Quotes (requests submitted from the storefront) and customer profiles.
# These carry no media; the console only lists, edits and deletes them.
# =============================================================================

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Quote(BaseModel):
    """A quote request as stored in the quotes table."""
    model_config = ConfigDict(extra="allow")

    id: Any
    created_at: datetime | None = None
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    street_address: str | None = None
    city: str | None = None
    district: str | None = None
    state: str | None = None

    @property
    def full_address(self) -> str:
        parts = [self.street_address, self.city, self.district, self.state]
        return ", ".join(p for p in parts if p)


class QuoteUpdate(BaseModel):
    """
    Partial update for a quote. Only fields that are sent are written.

    Example:
        {"name": "Asha Patil", "city": "Pune"}
    """
    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = Field(default=None, pattern=r"^[^@\s]+@[^@\s]+$")
    phone: str | None = None
    street_address: str | None = None
    city: str | None = None
    district: str | None = None
    state: str | None = None


class CustomerProfile(BaseModel):
    """A storefront customer profile."""
    model_config = ConfigDict(extra="allow")

    id: Any
    created_at: datetime | None = None
    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    city: str | None = None
    district: str | None = None
    state: str | None = None


class CustomerProfileUpdate(BaseModel):
    """Partial update for a customer profile."""
    full_name: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = Field(default=None, pattern=r"^[^@\s]+@[^@\s]+$")
    phone: str | None = None
    city: str | None = None
    district: str | None = None
    state: str | None = None
