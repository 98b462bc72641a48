"""Tests for the LLM enrichment client and merge policy."""

import json

import pytest

from conftest import FakeOpenAI
from leads_api.config import Settings
from leads_api.schemas.enrich import EnrichmentResult
from leads_api.services import llm_enrichment
from leads_api.services.llm_enrichment import enrich_call, enrichment_updates


@pytest.fixture
def settings():
    return Settings(_env_file=None, openai_api_key="test-key", openai_model="test-model")


@pytest.fixture
def llm(monkeypatch):
    """Fake AsyncOpenAI client; set .content or .error before calling."""
    client = FakeOpenAI()
    monkeypatch.setattr(llm_enrichment, "_build_client", lambda settings: client)
    return client


class TestEnrichCall:
    async def test_parses_result(self, settings, llm):
        llm.content = json.dumps({
            "first_name": "Jamie",
            "last_name": "Fox",
            "email": "jamie@example.com",
            "location": "Denver",
            "budget_min": 300000,
            "budget_max": 450000.5,
        })
        result = await enrich_call("summary", "transcript", settings)

        assert result == EnrichmentResult(
            first_name="Jamie",
            last_name="Fox",
            email="jamie@example.com",
            location="Denver",
            budget_min=300000,
            budget_max=450000.5,
        )
        request = llm.calls[0]
        assert request["model"] == "test-model"
        assert request["messages"][0]["role"] == "system"
        assert "summary" in request["messages"][1]["content"]
        assert "transcript" in request["messages"][1]["content"]

    async def test_strips_markdown_fence(self, settings, llm):
        llm.content = '```json\n{"email": "a@b.co"}\n```'
        result = await enrich_call("summary", None, settings)
        assert result.email == "a@b.co"

    async def test_non_numeric_budget_dropped(self, settings, llm):
        llm.content = json.dumps({"budget_min": "500k", "budget_max": True})
        result = await enrich_call("summary", None, settings)
        assert result.budget_min is None
        assert result.budget_max is None

    async def test_not_configured(self, settings, llm):
        settings.openai_api_key = ""
        assert await enrich_call("summary", "transcript", settings) is None
        assert llm.calls == []

    async def test_no_call_text(self, settings, llm):
        assert await enrich_call(None, "", settings) is None
        assert llm.calls == []

    async def test_provider_error(self, settings, llm):
        llm.error = RuntimeError("timeout")
        assert await enrich_call("summary", None, settings) is None
        assert llm.closed

    async def test_client_closed_after_request(self, settings, llm):
        llm.content = json.dumps({"email": "a@b.co"})
        await enrich_call("summary", None, settings)
        assert llm.closed

    @pytest.mark.parametrize("content", [None, "", "not json", "[1, 2]", '"just a string"'])
    async def test_unusable_content(self, settings, llm, content):
        llm.content = content
        assert await enrich_call("summary", None, settings) is None


class TestEnrichmentUpdates:
    def test_only_non_null_fields(self):
        result = EnrichmentResult(first_name="Jamie", email=None, budget_max=1000)
        assert enrichment_updates(result) == {"first_name": "Jamie", "budget_max": 1000.0}

    def test_all_null_result_updates_nothing(self):
        assert enrichment_updates(EnrichmentResult()) == {}

    def test_blank_strings_treated_as_missing(self):
        result = EnrichmentResult.model_validate({"first_name": "  ", "location": 12})
        assert enrichment_updates(result) == {}
