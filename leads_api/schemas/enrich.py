"""
Schema for the LLM enrichment result.

Unlike the heuristics, this shape is lenient: fields that come back with the
wrong type are dropped to None instead of failing the whole result.
"""

from typing import Any

from pydantic import BaseModel, field_validator


class EnrichmentResult(BaseModel):
    """Contact and budget fields extracted from a call by the LLM."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    location: str | None = None
    budget_min: float | None = None
    budget_max: float | None = None

    @field_validator("first_name", "last_name", "email", "location", mode="before")
    @classmethod
    def _text_or_none(cls, value: Any) -> str | None:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None

    @field_validator("budget_min", "budget_max", mode="before")
    @classmethod
    def _number_or_none(cls, value: Any) -> float | None:
        # Only values the model already returned as numbers; "500k" is dropped
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return float(value)
