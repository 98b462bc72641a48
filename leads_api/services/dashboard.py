"""Read-only aggregates for the leads dashboard."""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Protocol, Sequence


class LeadLike(Protocol):
    created_at: datetime | None
    priority_score: int | None
    intent_score: int | None
    urgency: str | None


@dataclass
class DashboardStats:
    total: int
    today: int
    avg_priority: float | None
    avg_intent: float | None
    high_urgency: int
    top_lead_today: LeadLike | None


def to_local(value: datetime) -> datetime:
    """Convert to local time; naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone()


def local_date(value: datetime) -> date:
    return to_local(value).date()


def _average(values: list[int]) -> float | None:
    if not values:
        return None
    return round(sum(values) / len(values), 1)


def combined_score(lead: LeadLike) -> int:
    return (lead.priority_score or 0) + (lead.intent_score or 0)


def compute_dashboard_stats(
    leads: Sequence[LeadLike],
    now: datetime | None = None,
) -> DashboardStats:
    """
    Aggregate the leads as retrieved (newest first).

    The top lead of the day is the first of today's leads with the highest
    priority + intent, so ties go to the earlier row in retrieval order.
    """
    today = local_date(now or datetime.now(timezone.utc))

    todays = [
        lead for lead in leads
        if lead.created_at is not None and local_date(lead.created_at) == today
    ]

    top = None
    for lead in todays:
        if top is None or combined_score(lead) > combined_score(top):
            top = lead

    return DashboardStats(
        total=len(leads),
        today=len(todays),
        avg_priority=_average([l.priority_score for l in leads if l.priority_score is not None]),
        avg_intent=_average([l.intent_score for l in leads if l.intent_score is not None]),
        high_urgency=sum(1 for l in leads if l.urgency == "high"),
        top_lead_today=top,
    )
