"""
Lead Intake — FastAPI Service

Turns analyzed phone calls into scored leads, with an append-only event log
and an optional LLM enrichment pass.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from leads_api.config import get_settings
from leads_api.db.session import init_db
from leads_api.errors import IntakeError, intake_error_handler
from leads_api.routes import intake, leads
from leads_api.services.intake_auth import describe_intake_policy

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize DB tables on startup (idempotent via CREATE TABLE IF NOT EXISTS)."""
    warning = describe_intake_policy(settings)
    if warning:
        logger.warning(warning)
    if not settings.openai_api_key:
        logger.info("OPENAI_API_KEY not set; leads will be stored without enrichment")
    await init_db()
    yield


app = FastAPI(
    title="Lead Intake API",
    description="Phone-call webhook intake, lead scoring and dashboard.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(IntakeError, intake_error_handler)

app.include_router(intake.router)
app.include_router(leads.router)


@app.get("/health", tags=["health"])
async def health():
    """Health check for load balancers and container orchestration."""
    return {"status": "ok"}
