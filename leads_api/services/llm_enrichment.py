"""
LLM-based extraction of contact and budget fields from a call.

Best-effort: every failure is logged and returns None, so the intake request
carries on without enrichment.
"""

import json
import logging
import re

from openai import AsyncOpenAI
from pydantic import ValidationError

from leads_api.config import Settings
from leads_api.schemas.enrich import EnrichmentResult

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = """You extract lead details from a real-estate phone call.
Read the call summary and transcript and pull out the caller's:
- first and last name
- email address
- location they are interested in (city, neighborhood or area)
- budget range in dollars (numbers only)

Use null for anything the caller did not say. Do not guess.

Output ONLY a valid JSON object matching this exact schema (no markdown, no extra text):
{
  "first_name": "string or null",
  "last_name": "string or null",
  "email": "string or null",
  "location": "string or null",
  "budget_min": 350000,
  "budget_max": 500000
}"""


def _build_client(settings: Settings) -> AsyncOpenAI:
    """Build the AsyncOpenAI client, optionally with a custom base URL."""
    kwargs: dict = {"api_key": settings.openai_api_key}
    if settings.openai_base_url:
        kwargs["base_url"] = settings.openai_base_url
    return AsyncOpenAI(**kwargs)


async def enrich_call(
    call_summary: str | None,
    transcript: str | None,
    settings: Settings,
) -> EnrichmentResult | None:
    """
    Ask the LLM for structured fields from a call.

    Returns None when enrichment is not configured, there is no call text, or
    anything goes wrong along the way.
    """
    if not settings.openai_api_key:
        logger.debug("OPENAI_API_KEY not set, skipping enrichment")
        return None
    if not call_summary and not transcript:
        return None

    user_content = f"Call summary:\n{call_summary or '(none)'}\n\nTranscript:\n{transcript or '(none)'}"

    try:
        async with _build_client(settings) as client:
            response = await client.chat.completions.create(
                model=settings.openai_model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": user_content},
                ],
                temperature=0,
                response_format={"type": "json_object"},
            )
        content = response.choices[0].message.content
    except Exception as e:
        logger.warning(f"Enrichment request failed: {e}")
        return None

    if not content:
        logger.warning("Enrichment returned empty response")
        return None

    try:
        data = json.loads(_strip_markdown_json(content))
    except ValueError as e:
        logger.warning(f"Enrichment returned invalid JSON: {e}")
        return None

    if not isinstance(data, dict):
        logger.warning(f"Enrichment returned {type(data).__name__}, expected object")
        return None

    try:
        return EnrichmentResult.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Enrichment result rejected: {e}")
        return None


def enrichment_updates(result: EnrichmentResult) -> dict:
    """Fields to write onto the stored lead: non-null values only."""
    return {field: value for field, value in result.model_dump().items() if value is not None}


def _strip_markdown_json(text: str) -> str:
    """Remove ```json ... ``` wrapper if present."""
    text = text.strip()
    if text.startswith("```"):
        text = re.sub(r"^```(?:json)?\s*", "", text)
        text = re.sub(r"\s*```$", "", text)
    return text
