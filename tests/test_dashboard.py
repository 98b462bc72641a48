"""Tests for dashboard aggregates and the /leads pages."""

import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from leads_api.db.models import Lead
from leads_api.services.dashboard import compute_dashboard_stats

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def row(name, priority=None, intent=None, urgency=None, created_at=NOW):
    return SimpleNamespace(
        name=name,
        created_at=created_at,
        priority_score=priority,
        intent_score=intent,
        urgency=urgency,
    )


class TestComputeDashboardStats:
    def test_empty(self):
        stats = compute_dashboard_stats([], now=NOW)
        assert stats.total == 0
        assert stats.today == 0
        assert stats.avg_priority is None
        assert stats.avg_intent is None
        assert stats.high_urgency == 0
        assert stats.top_lead_today is None

    def test_aggregates(self):
        leads = [
            row("a", priority=80, intent=70, urgency="high"),
            row("b", priority=40, intent=None, urgency="medium"),
            row("c", priority=None, intent=50, urgency="high", created_at=NOW - timedelta(days=2)),
        ]
        stats = compute_dashboard_stats(leads, now=NOW)
        assert stats.total == 3
        assert stats.today == 2
        assert stats.avg_priority == 60.0
        assert stats.avg_intent == 60.0
        assert stats.high_urgency == 2

    def test_top_lead_only_from_today(self):
        leads = [
            row("today", priority=50, intent=50),
            row("old", priority=100, intent=100, created_at=NOW - timedelta(days=3)),
        ]
        assert compute_dashboard_stats(leads, now=NOW).top_lead_today.name == "today"

    def test_top_lead_tie_keeps_retrieval_order(self):
        leads = [
            row("first", priority=60, intent=40),
            row("second", priority=40, intent=60),
            row("third", priority=10, intent=10),
        ]
        assert compute_dashboard_stats(leads, now=NOW).top_lead_today.name == "first"

    def test_missing_scores_count_as_zero(self):
        leads = [row("blank"), row("scored", priority=1)]
        assert compute_dashboard_stats(leads, now=NOW).top_lead_today.name == "scored"

    def test_naive_timestamps_treated_as_utc(self):
        naive = NOW.replace(tzinfo=None)
        stats = compute_dashboard_stats([row("naive", created_at=naive)], now=NOW)
        assert stats.today == 1


@pytest.fixture
def seed(sync_session):
    def _seed(**fields):
        lead = Lead(
            id=uuid.uuid4(),
            created_at=fields.pop("created_at", datetime.now(timezone.utc)),
            source=fields.pop("source", "AI Phone Call"),
            status="new",
            event_logs=[{"type": "created", "at": "", "source": "test", "raw": {}}],
            **fields,
        )
        sync_session.add(lead)
        sync_session.commit()
        return lead

    return _seed


class TestLeadsRoutes:
    def test_stats_json(self, client, seed):
        seed(first_name="Old", priority_score=90, intent_score=90,
             created_at=datetime.now(timezone.utc) - timedelta(days=5))
        seed(first_name="Top", priority_score=70, intent_score=80, urgency="high")
        seed(first_name="Low", priority_score=20, intent_score=30, urgency="low")

        response = client.get("/leads/stats")
        assert response.status_code == 200
        body = response.json()

        assert [lead["first_name"] for lead in body["leads"]] == ["Low", "Top", "Old"]
        stats = body["stats"]
        assert stats["total"] == 3
        assert stats["today"] == 2
        assert stats["high_urgency"] == 1
        assert stats["avg_priority"] == 60.0
        assert stats["top_lead_today"]["first_name"] == "Top"

    def test_limit_applied(self, client, settings, seed):
        settings.dashboard_limit = 2
        for i in range(4):
            seed(first_name=f"Lead {i}", created_at=datetime.now(timezone.utc) + timedelta(seconds=i))

        leads = client.get("/leads/stats").json()["leads"]
        assert [lead["first_name"] for lead in leads] == ["Lead 3", "Lead 2"]

    def test_html_dashboard(self, client, seed):
        seed(first_name="<b>Robin</b>", phone="+15551234567", buyer_seller="buyer", urgency="high")

        response = client.get("/leads")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "Leads Dashboard" in response.text
        assert "&lt;b&gt;Robin&lt;/b&gt;" in response.text
        assert "+15551234567" in response.text

    def test_html_dashboard_empty(self, client):
        response = client.get("/leads")
        assert response.status_code == 200
        assert "No leads yet" in response.text
