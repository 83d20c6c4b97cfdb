"""
api/main.py — FastAPI application entry point.

Run with:
    uvicorn api.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from app.config import settings
from app.db.session import engine
from api.endpoints.automation_routes import router as automation_router
from api.endpoints.client_routes import router as client_router
from api.endpoints.insight_routes import router as insight_router
from api.endpoints.scheduler_routes import router as scheduler_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ─────────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown logic."""
    # Verify DB is reachable on startup
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    logger.info("Database connection verified.")
    yield
    logger.info("Application shutting down.")


# ── App ───────────────────────────────────────────────────────────────────────

app = FastAPI(
    title="Client Relationship Engine",
    description=(
        "A small CRM service: stores clients and their interactions, scores "
        "them with fixed rules, and automatically marks stale clients inactive."
    ),
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Routers ───────────────────────────────────────────────────────────────────

app.include_router(client_router, prefix="/clients", tags=["Clients"])
app.include_router(insight_router, prefix="/insights", tags=["Insights"])
app.include_router(automation_router, prefix="/automation", tags=["Automation"])
app.include_router(scheduler_router, prefix="/api/qstash", tags=["Scheduler"])


# ── Health check ─────────────────────────────────────────────────────────────

@app.get("/health", tags=["System"])
def health_check():
    """Returns service liveness status."""
    return {"status": "ok", "service": "client-relationship-engine"}


@app.get("/", tags=["System"])
def root():
    return {
        "message": "Client Relationship Engine is running.",
        "docs": "/docs",
        "inactivity_threshold_days": settings.inactivity_threshold_days,
    }
