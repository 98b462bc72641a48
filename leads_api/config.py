"""Application configuration."""

from functools import lru_cache

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine.url import URL


class ScoringWeights(BaseModel):
    """Heuristic weight table for priority/intent scoring.

    Override any entry with SCORING__<FIELD>, e.g. SCORING__BASE_PRIORITY=50.
    """

    base_priority: int = 40
    base_intent: int = 50

    classified_priority: int = 10
    classified_intent: int = 10

    # Timeline bucket -> delta
    timeline_priority: dict[str, int] = {
        "ASAP": 25,
        "0-3 months": 15,
        "3-6 months": 5,
        "6-12 months": 0,
    }
    timeline_intent: dict[str, int] = {
        "ASAP": 15,
        "0-3 months": 10,
        "3-6 months": 5,
        "6-12 months": 0,
    }

    strong_intent: int = 10
    positive_sentiment_priority: int = 10
    negative_sentiment_priority: int = -10
    successful_call_priority: int = 30
    successful_call_intent: int = 20


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # so DB_HOST works regardless of case
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Database fields (read from .env)
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "lead_intake"
    db_user: str = "postgres"
    db_password: str = "postgres"

    # Built with URL.create so special characters in the password are escaped
    @property
    def database_url(self) -> URL:
        return URL.create(
            drivername="postgresql+asyncpg",
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )

    # Webhook auth. The phone vendor can't send custom headers, so a missing
    # header is let through unless intake_secret_required is set.
    intake_secret: str | None = None
    intake_secret_required: bool = False

    # OpenAI (or compatible API). Empty key disables enrichment.
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str | None = None  # For Azure/OpenRouter

    # Lead defaults
    vendor_lead_source: str = "AI Phone Call"
    default_lead_source: str = "Manual Entry"
    scoring: ScoringWeights = ScoringWeights()

    # Dashboard
    dashboard_limit: int = 50

    # App
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Build settings once per process; injected into routes via Depends."""
    return Settings()
