"""
Payload -> lead normalization.

Never raises on missing or oddly typed fields: every read degrades to None,
False or an empty dict.
"""

import json
import logging
from typing import Any

from leads_api.config import Settings
from leads_api.schemas.intake import GenericPayload, IntakePayload, VendorPayload
from leads_api.schemas.lead import BUYER_SELLER_VALUES, URGENCY_VALUES, NormalizedLead
from leads_api.services.classification import classify_buyer_seller, extract_timeline
from leads_api.services.scoring import CallSignals, clamp_score, score_call

logger = logging.getLogger(__name__)


def normalize_payload(payload: IntakePayload, settings: Settings) -> NormalizedLead:
    if isinstance(payload, VendorPayload):
        return normalize_vendor(payload, settings)
    return normalize_generic(payload, settings)


# ── Vendor path ──────────────────────────────────────────────────────────────

def normalize_vendor(payload: VendorPayload, settings: Settings) -> NormalizedLead:
    """Extract a lead from an analyzed phone call."""
    call = payload.call
    analysis = _as_dict(call.get("call_analysis"))
    custom = _as_dict(analysis.get("custom_analysis_data"))
    summary_block = parse_embedded_json(custom.get("summary_json"))

    transcript = _as_text(call.get("transcript"))
    call_summary = (
        _as_text(summary_block.get("call_summary"))
        or _as_text(analysis.get("call_summary"))
        or transcript
    )
    corpus = f"{call_summary or ''} {transcript or ''}".strip()

    buyer_seller = classify_buyer_seller(corpus)
    timeline = extract_timeline(corpus)

    successful = summary_block.get("call_successful")
    if successful is None:
        successful = analysis.get("call_successful")

    scores = score_call(
        CallSignals(
            text=corpus,
            buyer_seller=buyer_seller,
            timeline=timeline,
            sentiment=_as_text(summary_block.get("user_sentiment"))
            or _as_text(analysis.get("user_sentiment")),
            call_successful=_as_bool(successful),
        ),
        settings.scoring,
    )

    return NormalizedLead(
        agent_id=_as_text(call.get("agent_id")),
        first_name=_as_text(summary_block.get("first_name")),
        last_name=_as_text(summary_block.get("last_name")),
        phone=_as_text(call.get("from_number")),  # inbound caller
        email=_as_text(summary_block.get("email")),
        source=settings.vendor_lead_source,
        priority_score=scores.priority_score,
        intent_score=scores.intent_score,
        buyer_seller=buyer_seller,
        timeline=timeline,
        status="new",
        intent=call_summary,
        urgency=scores.urgency,
        ai_notes=call_summary,
        call_summary=call_summary,
        transcript=transcript,
    )


# ── Generic path ─────────────────────────────────────────────────────────────

def normalize_generic(payload: GenericPayload, settings: Settings) -> NormalizedLead:
    """Direct field reads with simple aliasing; no text heuristics."""
    lead = payload.lead
    return NormalizedLead(
        agent_id=_as_text(_first(lead, "agent_id", "agentId")),
        first_name=_as_text(_first(lead, "first_name", "firstName")),
        last_name=_as_text(_first(lead, "last_name", "lastName")),
        phone=_as_text(_first(lead, "phone", "caller_number", "phone_number", "from_number")),
        email=_as_text(lead.get("email")),
        source=_as_text(lead.get("source")) or settings.default_lead_source,
        priority_score=_as_score(lead.get("priority_score")),
        intent_score=_as_score(lead.get("intent_score")),
        buyer_seller=_as_choice(lead.get("buyer_seller"), BUYER_SELLER_VALUES),
        timeline=_as_text(lead.get("timeline")),
        status=_as_text(lead.get("status")) or "new",
        intent=_as_text(lead.get("intent")),
        urgency=_as_choice(lead.get("urgency"), URGENCY_VALUES),
        ai_notes=_as_text(_first(lead, "ai_notes", "notes")),
        call_summary=_as_text(_first(lead, "call_summary", "summary")),
        transcript=_as_text(lead.get("transcript")),
    )


# ── Helpers ──────────────────────────────────────────────────────────────────

def parse_embedded_json(raw: Any) -> dict:
    """Decode a JSON object carried as a string; anything unusable becomes {}."""
    if isinstance(raw, dict):
        return raw
    if not isinstance(raw, str) or not raw.strip():
        return {}
    try:
        parsed = json.loads(raw)
    except (ValueError, RecursionError) as e:
        logger.warning(f"Failed to parse embedded summary JSON: {e}")
        return {}
    return parsed if isinstance(parsed, dict) else {}


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _first(mapping: dict, *keys: str) -> Any:
    for key in keys:
        if mapping.get(key) is not None:
            return mapping[key]
    return None


def _as_text(value: Any) -> str | None:
    if value is None or isinstance(value, (bool, dict, list)):
        return None
    text = str(value).strip()
    return text or None


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return value is True


def _as_score(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return clamp_score(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


def _as_choice(value: Any, choices: tuple[str, ...]) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip().lower()
    return value if value in choices else None
