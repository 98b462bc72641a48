"""
/leads — read-only dashboard over the most recent leads.

  GET /leads        →  server-rendered HTML table + headline stats
  GET /leads/stats  →  the same view as JSON
"""

import logging
from html import escape

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from leads_api.config import Settings, get_settings
from leads_api.db.repository import list_recent_leads
from leads_api.db.session import async_session
from leads_api.schemas.lead import LeadRecord
from leads_api.services.dashboard import DashboardStats, compute_dashboard_stats, to_local

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leads", tags=["leads"])

MAX_DASHBOARD_LIMIT = 100


# ============================================================
# Pydantic schemas
# ============================================================

class DashboardStatsResponse(BaseModel):
    total: int
    today: int
    avg_priority: float | None
    avg_intent: float | None
    high_urgency: int
    top_lead_today: LeadRecord | None

    @classmethod
    def from_stats(cls, stats: DashboardStats) -> "DashboardStatsResponse":
        top = stats.top_lead_today
        return cls(
            total=stats.total,
            today=stats.today,
            avg_priority=stats.avg_priority,
            avg_intent=stats.avg_intent,
            high_urgency=stats.high_urgency,
            top_lead_today=LeadRecord.model_validate(top) if top is not None else None,
        )


class DashboardResponse(BaseModel):
    stats: DashboardStatsResponse
    leads: list[LeadRecord]


# ============================================================
# Helpers
# ============================================================

async def _load_dashboard(settings: Settings) -> tuple[list[LeadRecord], DashboardStats]:
    limit = max(1, min(settings.dashboard_limit, MAX_DASHBOARD_LIMIT))
    try:
        async with async_session() as session:
            rows = await list_recent_leads(session, limit=limit)
    except SQLAlchemyError as e:
        # Page still renders, just empty
        logger.error(f"Error loading leads: {e}")
        rows = []
    leads = [LeadRecord.model_validate(row) for row in rows]
    return leads, compute_dashboard_stats(leads)


def _cell(value) -> str:
    if value is None or value == "":
        return "—"
    return escape(str(value))


def _full_name(lead: LeadRecord) -> str:
    return " ".join(part for part in (lead.first_name, lead.last_name) if part) or "Unknown"


def _render_row(lead: LeadRecord) -> str:
    created = to_local(lead.created_at).strftime("%Y-%m-%d %H:%M") if lead.created_at else None
    contact = _cell(lead.phone)
    if lead.email:
        contact += f"<br><small>{escape(lead.email)}</small>"
    return (
        "<tr>"
        f"<td>{_cell(created)}</td>"
        f"<td>{escape(_full_name(lead))}</td>"
        f"<td>{contact}</td>"
        f"<td>{escape(lead.buyer_seller or 'unknown')}</td>"
        f"<td>{_cell(lead.timeline)}</td>"
        f'<td class="urgency-{escape(lead.urgency or "unknown")}">{escape(lead.urgency or "unknown")}</td>'
        f"<td>{_cell(lead.priority_score)}</td>"
        f"<td>{_cell(lead.intent_score)}</td>"
        f"<td>{_cell(lead.source)}</td>"
        "</tr>"
    )


def render_dashboard(leads: list[LeadRecord], stats: DashboardStats) -> str:
    if leads:
        rows = "\n".join(_render_row(lead) for lead in leads)
    else:
        rows = (
            '<tr><td colspan="9">No leads yet. Call your intake number to '
            "generate a test lead.</td></tr>"
        )

    top = stats.top_lead_today
    top_label = (
        f"{escape(_full_name(top))} ({_cell(top.phone)})" if top is not None else "—"
    )

    return f"""<!doctype html>
<html>
<head>
<meta charset="utf-8">
<title>Leads Dashboard</title>
<style>
  body {{ font-family: system-ui, sans-serif; background: #0f172a; color: #e2e8f0; margin: 2rem; }}
  table {{ border-collapse: collapse; width: 100%; font-size: 0.875rem; }}
  th, td {{ padding: 0.5rem 0.75rem; border-bottom: 1px solid #1e293b; text-align: left; vertical-align: top; }}
  th {{ text-transform: uppercase; font-size: 0.75rem; color: #94a3b8; }}
  .stats {{ display: flex; gap: 2rem; margin-bottom: 1.5rem; }}
  .urgency-high {{ color: #fca5a5; }}
  .urgency-medium {{ color: #fcd34d; }}
  .urgency-low {{ color: #6ee7b7; }}
</style>
</head>
<body>
<h1>Leads Dashboard</h1>
<p>Last {len(leads)} leads captured from phone calls and other sources.</p>
<div class="stats">
  <div>Total: <strong>{stats.total}</strong></div>
  <div>Today: <strong>{stats.today}</strong></div>
  <div>Avg priority: <strong>{_cell(stats.avg_priority)}</strong></div>
  <div>Avg intent: <strong>{_cell(stats.avg_intent)}</strong></div>
  <div>High urgency: <strong>{stats.high_urgency}</strong></div>
  <div>Top lead today: <strong>{top_label}</strong></div>
</div>
<table>
<thead>
<tr><th>Created</th><th>Lead</th><th>Contact</th><th>Type</th><th>Timeline</th><th>Urgency</th><th>Priority</th><th>Intent</th><th>Source</th></tr>
</thead>
<tbody>
{rows}
</tbody>
</table>
</body>
</html>"""


# ============================================================
# DASHBOARD  GET /leads
# ============================================================

@router.get("", response_class=HTMLResponse)
async def leads_dashboard(settings: Settings = Depends(get_settings)):
    """Render the most recent leads with headline stats."""
    leads, stats = await _load_dashboard(settings)
    return HTMLResponse(render_dashboard(leads, stats))


# ============================================================
# STATS  GET /leads/stats
# ============================================================

@router.get("/stats", response_model=DashboardResponse)
async def leads_stats(settings: Settings = Depends(get_settings)):
    """Same view as the dashboard, as JSON."""
    leads, stats = await _load_dashboard(settings)
    return DashboardResponse(stats=DashboardStatsResponse.from_stats(stats), leads=leads)
