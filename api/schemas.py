"""
api/schemas.py — Pydantic request/response models for all API endpoints.

These are the API contract — separate from DB ORM models and engine results
so we can control exactly what data is exposed over HTTP.
"""

from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field

from app.db.models import ClientStatus, InteractionType
from app.engine.models import Confidence, Priority


# ── Shared ────────────────────────────────────────────────────────────────────

class OKResponse(BaseModel):
    """Generic success acknowledgement."""
    status: str = "ok"
    message: str


# ── Clients ───────────────────────────────────────────────────────────────────

class InteractionOut(BaseModel):
    id: int
    date: datetime
    description: str
    type: InteractionType

    model_config = {"from_attributes": True}


class ClientOut(BaseModel):
    id: int
    name: str
    phone: str
    status: ClientStatus
    last_interaction_at: datetime
    created_at: datetime
    updated_at: datetime
    interactions: list[InteractionOut] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class ClientCreate(BaseModel):
    name: str
    phone: str
    status: ClientStatus = ClientStatus.POTENTIAL


class ClientUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    status: Optional[ClientStatus] = None


class ClientStatusUpdate(BaseModel):
    status: ClientStatus = Field(..., description="New relationship status")


class InteractionCreate(BaseModel):
    description: str
    type: InteractionType = InteractionType.OTHER


class DashboardStatsOut(BaseModel):
    total: int
    active: int
    inactive: int
    potential: int
    without_interaction_30_days: int

    model_config = {"from_attributes": True}


# ── Insights ──────────────────────────────────────────────────────────────────

class ScoringOut(BaseModel):
    recommended_status: ClientStatus
    confidence: Confidence
    reason: str
    factors: list[str]
    score: int

    model_config = {"from_attributes": True}


class AnalysisOut(BaseModel):
    analysis: str
    priority: Priority
    suggestion: str
    days_since_last_interaction: int
    total_interactions: int
    scoring: ScoringOut

    model_config = {"from_attributes": True}


class RecategorizeRequest(BaseModel):
    client_id: Optional[int] = Field(default=None, description="Omit to process every client")


class StatusChangeOut(BaseModel):
    client_id: str
    name: str
    previous_status: ClientStatus
    new_status: ClientStatus
    reason: str
    confidence: Confidence
    factors: list[str]
    applied: bool

    model_config = {"from_attributes": True}


class RecategorizationOut(BaseModel):
    processed_count: int
    recategorized_count: int
    changes: list[StatusChangeOut]

    model_config = {"from_attributes": True}


class ReminderOut(BaseModel):
    client_id: str
    name: str
    status: ClientStatus
    recommended_frequency: int
    needs_follow_up: bool
    days_overdue: int
    priority: Priority
    best_time_to_contact: str
    days_since_last_interaction: int

    model_config = {"from_attributes": True}


class FollowUpQueueOut(BaseModel):
    reminders: list[ReminderOut]
    total_needing_follow_up: int

    model_config = {"from_attributes": True}


class PortfolioSummaryOut(BaseModel):
    total_clients: int
    active_clients: int
    inactive_clients: int
    potential_clients: int
    clients_needing_attention: int
    recommendations: list[str]

    model_config = {"from_attributes": True}


class ActivityReportOut(BaseModel):
    total_clients: int
    active_last_7_days: int
    active_last_30_days: int
    inactive_over_30_days: int
    inactive_over_60_days: int
    status_breakdown: dict[str, int]
    generated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class StaleClientOut(BaseModel):
    id: str
    name: str
    phone: str
    status: ClientStatus
    last_interaction_at: datetime

    model_config = {"from_attributes": True}


# ── Automation ────────────────────────────────────────────────────────────────

class AutomationRequest(BaseModel):
    days_threshold: Optional[int] = Field(
        default=None, ge=1, le=365,
        description="Days without contact before marking inactive (default from config)",
    )


class AutomationResult(BaseModel):
    message: str
    updated_clients: int
    processed_clients: int
    threshold: Optional[int] = None
    processed_at: datetime


class CleanupRequest(BaseModel):
    days_to_keep: Optional[int] = Field(default=None, ge=1, description="Default from config")


class CleanupResult(BaseModel):
    message: str
    cleaned_clients: int
    cutoff: datetime


class SchedulerPayload(BaseModel):
    """Body QStash posts on each cron tick. camelCase keys, as registered."""
    action: Literal["markInactiveClients", "recategorize"] = "markInactiveClients"
    daysThreshold: Optional[int] = Field(default=None, ge=1, le=365)
