"""
/intake/phone-call — webhook intake for phone-call leads.

Flow:
  POST  →  secret check
        →  parse body (vendor webhook or generic lead)
        →  ignore non-terminal vendor events
        →  normalize + insert with a "created" event holding the raw body
        →  optional LLM enrichment, applied once after the insert commits
        →  return the stored lead
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.exc import SQLAlchemyError

from leads_api.config import Settings, get_settings
from leads_api.db.repository import apply_lead_enrichment, insert_lead
from leads_api.db.session import async_session
from leads_api.errors import IntakeError
from leads_api.schemas.intake import VendorPayload, parse_intake_payload
from leads_api.schemas.lead import LeadRecord, NormalizedLead
from leads_api.services.intake_auth import INTAKE_SECRET_HEADER, is_intake_authorized
from leads_api.services.llm_enrichment import enrich_call, enrichment_updates
from leads_api.services.normalizer import normalize_payload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/intake", tags=["intake"])


@router.get("/phone-call")
async def phone_call_liveness():
    """Liveness check for the webhook URL."""
    return {"status": "ok", "method": "GET"}


@router.post("/phone-call")
async def phone_call_intake(request: Request, settings: Settings = Depends(get_settings)):
    """Create a lead from a phone vendor webhook or a generic lead payload."""
    # ── 1. Auth ──────────────────────────────────────────────────────────────
    if not is_intake_authorized(request.headers.get(INTAKE_SECRET_HEADER), settings):
        logger.warning("Intake request with missing or wrong secret")
        raise IntakeError(401, "Unauthorized")

    # ── 2. Parse body ────────────────────────────────────────────────────────
    try:
        body = await request.json()
    except (ValueError, RecursionError):
        raise IntakeError(400, "Invalid payload")

    if not isinstance(body, dict):
        raise IntakeError(400, "Invalid payload")

    logger.debug(f"Incoming phone call payload: {body}")
    payload = parse_intake_payload(body)

    # ── 3. Only the final analyzed event becomes a lead ──────────────────────
    if isinstance(payload, VendorPayload) and not payload.is_terminal:
        logger.info(f"Ignoring non-analyzed event: {payload.event}")
        return {"status": "ignored", "event": payload.event}

    # ── 4. Normalize + persist ───────────────────────────────────────────────
    lead = normalize_payload(payload, settings)
    try:
        async with async_session() as session:
            stored = await insert_lead(
                session,
                fields=lead.model_dump(),
                raw_payload=body,
                created_at=datetime.now(timezone.utc),
            )
            await session.commit()
    except SQLAlchemyError as e:
        logger.error(f"Error inserting lead: {e}")
        raise IntakeError(500, "Failed to save lead", details=str(e)) from e

    record = LeadRecord.model_validate(stored)
    logger.info(f"Created lead {record.id} from {record.source}")

    # ── 5. Optional enrichment (never fails the request) ─────────────────────
    enriched = await _enrich_stored_lead(record.id, lead, settings)

    return {"status": "ok", "lead": (enriched or record).model_dump(mode="json")}


# ── Helpers ──────────────────────────────────────────────────────────────────

async def _enrich_stored_lead(
    lead_id: UUID,
    lead: NormalizedLead,
    settings: Settings,
) -> LeadRecord | None:
    """Run the LLM pass and write its non-null fields; None if nothing was applied."""
    result = await enrich_call(lead.call_summary, lead.transcript, settings)
    if result is None:
        return None

    try:
        async with async_session() as session:
            stored = await apply_lead_enrichment(
                session,
                lead_id,
                updates=enrichment_updates(result),
                snapshot=result.model_dump(),
                enriched_at=datetime.now(timezone.utc),
            )
            await session.commit()
    except (SQLAlchemyError, LookupError) as e:
        logger.warning(f"Failed to store enrichment for lead {lead_id}: {e}")
        return None

    return LeadRecord.model_validate(stored)
