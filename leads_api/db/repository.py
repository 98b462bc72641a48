from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from leads_api.db.models import Lead


# ======================================================
# WRITES
# ======================================================

async def insert_lead(
    session: AsyncSession,
    fields: dict,
    raw_payload: dict,
    created_at: datetime,
) -> Lead:
    """Insert a normalized lead with its initial "created" event."""
    # Enrichment columns set explicitly so no attribute is left unloaded
    # after the flush (an async session can't lazy-load it later).
    lead = Lead(
        **{"location": None, "budget_min": None, "budget_max": None, **fields},
        enrichment=None,
        created_at=created_at,
        event_logs=[
            {
                "type": "created",
                "at": created_at.isoformat(),
                "source": fields.get("source"),
                "raw": raw_payload,
            }
        ],
    )
    session.add(lead)
    await session.flush()
    return lead


async def apply_lead_enrichment(
    session: AsyncSession,
    lead_id: UUID,
    updates: dict,
    snapshot: dict,
    enriched_at: datetime,
) -> Lead:
    """
    Write enrichment output onto a stored lead.

    `updates` must already be filtered to non-null values; the event log gets
    one "enriched" entry appended.
    """
    lead = await get_lead_by_id(session, lead_id)
    if lead is None:
        raise LookupError(f"Lead {lead_id} not found")

    for field, value in updates.items():
        setattr(lead, field, value)
    lead.enrichment = snapshot
    # New list so the JSON column is flagged dirty
    lead.event_logs = [
        *(lead.event_logs or []),
        {
            "type": "enriched",
            "at": enriched_at.isoformat(),
            "source": "llm",
            "raw": snapshot,
        },
    ]
    await session.flush()
    return lead


# ======================================================
# READS
# ======================================================

async def get_lead_by_id(session: AsyncSession, lead_id: UUID) -> Lead | None:
    stmt = select(Lead).where(Lead.id == lead_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def list_recent_leads(session: AsyncSession, limit: int = 50) -> list[Lead]:
    stmt = select(Lead).order_by(Lead.created_at.desc()).limit(limit)
    result = await session.execute(stmt)
    return list(result.scalars().all())
