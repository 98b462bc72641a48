"""Database engine and session factory for the leads store."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from leads_api.config import get_settings
from leads_api.db.models import Base

settings = get_settings()

engine = create_async_engine(
    settings.database_url,
    echo=settings.log_level.upper() == "DEBUG",
    pool_pre_ping=True,
)

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def init_db():
    """Create the leads table if missing (safe to call on every startup)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
