from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import NullPool

from leads_api.config import Settings, get_settings
from leads_api.db.models import Base, Lead
from leads_api.main import app
from leads_api.routes import intake, leads

INTAKE_URL = "/intake/phone-call"
TEST_SECRET = "s3cret"


@pytest.fixture
def settings():
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None, intake_secret=TEST_SECRET, openai_api_key="")


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "leads.db"
    engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(engine)
    engine.dispose()
    return path


@pytest.fixture
def session_factory(db_path, monkeypatch):
    """Point the routes at a file-backed SQLite database."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    monkeypatch.setattr(intake, "async_session", factory)
    monkeypatch.setattr(leads, "async_session", factory)
    return factory


@pytest.fixture
def sync_session(db_path):
    """Synchronous session for seeding and inspecting the test database."""
    engine = create_engine(f"sqlite:///{db_path}")
    with Session(engine, expire_on_commit=False) as session:
        yield session
    engine.dispose()


@pytest.fixture
def stored_leads(sync_session):
    def _fetch() -> list[Lead]:
        sync_session.expire_all()
        return list(sync_session.scalars(select(Lead)))

    return _fetch


@pytest.fixture
def client(settings, session_factory):
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_call_payload(event="call_analyzed", **call_fields):
    """Vendor webhook body with an analyzed call."""
    call = {
        "agent_id": "agent_123",
        "from_number": "+15551234567",
        "transcript": "I want to buy a house this week",
        "call_analysis": {"call_successful": True, "user_sentiment": "Positive"},
    }
    call.update(call_fields)
    return {"event": event, "call": call}


class FakeOpenAI:
    """Stands in for AsyncOpenAI: records requests and answers with `content`."""

    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []
        self.closed = False
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    async def _create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))])

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        self.closed = True
