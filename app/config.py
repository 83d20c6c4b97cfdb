"""
app/config.py — Central configuration loaded from environment variables.
All modules import settings from here; never read os.environ directly elsewhere.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Database ──────────────────────────────────────────────────────────────
    database_url: str = Field(..., description="SQLAlchemy connection URI")

    # ── Scheduler (QStash) ────────────────────────────────────────────────────
    qstash_token: Optional[str] = Field(
        default=None,
        description="QStash bearer token, only needed to manage schedules",
    )
    qstash_url: str = Field(
        default="https://qstash.upstash.io",
        description="QStash REST API base URL",
    )
    automation_endpoint_url: str = Field(
        default="http://localhost:8000/api/qstash",
        description="Public URL the scheduler calls to trigger automation",
    )
    automation_cron: str = Field(
        default="0 9 * * *",
        description="Cron expression for the daily automation run",
    )

    # ── Automation ────────────────────────────────────────────────────────────
    inactivity_threshold_days: int = Field(
        default=30,
        ge=1,
        le=365,
        description="Days without interaction before a client is marked inactive",
    )
    interaction_retention_days: int = Field(
        default=365,
        gt=0,
        description="Interactions older than this are removed by the cleanup job",
    )

    # ── Logging ───────────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO", description="Root log level for scripts and the API")


# Singleton — import this everywhere
settings = Settings()
