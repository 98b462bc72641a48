"""
Database model for captured leads.

One row per lead; the event log and enrichment snapshot live in JSON columns.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Float, Integer, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# JSONB on Postgres, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class Lead(Base):
    """Lead captured from an inbound call or a generic intake payload."""

    __tablename__ = "leads"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, index=True
    )
    agent_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Contact
    first_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    source: Mapped[str] = mapped_column(String(255), nullable=False)

    # Qualification
    priority_score: Mapped[int | None] = mapped_column(Integer, nullable=True)  # 0-100
    intent_score: Mapped[int | None] = mapped_column(Integer, nullable=True)  # 0-100
    buyer_seller: Mapped[str | None] = mapped_column(
        String(20), nullable=True
    )  # buyer | seller | renter
    timeline: Mapped[str | None] = mapped_column(String(100), nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="new")
    intent: Mapped[str | None] = mapped_column(Text, nullable=True)
    urgency: Mapped[str | None] = mapped_column(
        String(20), nullable=True
    )  # high | medium | low
    priority: Mapped[str | None] = mapped_column(String(20), nullable=True)  # reserved
    ai_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    budget_min: Mapped[float | None] = mapped_column(Float, nullable=True)
    budget_max: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Audit
    event_logs: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    enrichment: Mapped[dict | None] = mapped_column(JSONType, nullable=True)
