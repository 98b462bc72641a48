"""
Lead schemas.

NormalizedLead is what the normalizer hands to the repository; LeadRecord is
the stored row as returned to callers.
"""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

BuyerSeller = Literal["buyer", "seller", "renter"]
Urgency = Literal["high", "medium", "low"]

BUYER_SELLER_VALUES: tuple[str, ...] = ("buyer", "seller", "renter")
URGENCY_VALUES: tuple[str, ...] = ("high", "medium", "low")


class NormalizedLead(BaseModel):
    """Lead fields extracted from an intake payload, ready to insert."""

    agent_id: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    email: str | None = None
    source: str
    priority_score: int | None = Field(None, ge=0, le=100)
    intent_score: int | None = Field(None, ge=0, le=100)
    buyer_seller: BuyerSeller | None = None
    timeline: str | None = None
    status: str = "new"
    intent: str | None = None
    urgency: Urgency | None = None
    priority: str | None = None
    ai_notes: str | None = None

    # Call text kept for the enrichment pass, never persisted as columns
    call_summary: str | None = Field(None, exclude=True)
    transcript: str | None = Field(None, exclude=True)


class EventLogEntry(BaseModel):
    type: str
    at: str
    source: str | None = None
    raw: Any = None


class LeadRecord(BaseModel):
    """Stored lead as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created_at: datetime
    agent_id: str | None
    first_name: str | None
    last_name: str | None
    phone: str | None
    email: str | None
    location: str | None
    source: str
    priority_score: int | None
    intent_score: int | None
    buyer_seller: str | None
    timeline: str | None
    status: str
    intent: str | None
    urgency: str | None
    priority: str | None
    ai_notes: str | None
    budget_min: float | None
    budget_max: float | None
    event_logs: list[EventLogEntry] = Field(default_factory=list)
    enrichment: dict | None = None
