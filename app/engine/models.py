"""
app/engine/models.py — Snapshot inputs and result types for the client engine.

The engine never sees ORM objects. Callers convert stored rows into frozen
ClientRecord snapshots (see app.db.repository.to_record) and get freshly
built, immutable results back.
"""

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.db.models import ClientStatus, InteractionType


class Confidence(str, enum.Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Priority(str, enum.Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


PRIORITY_RANK = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


# ── Input snapshots ──────────────────────────────────────────────────────────

class Interaction(BaseModel):
    """A logged contact with a client. Immutable once recorded."""

    model_config = ConfigDict(frozen=True)

    id: str
    date: datetime
    description: str
    type: InteractionType = InteractionType.OTHER


class ClientRecord(BaseModel):
    """Read-only view of a client, as handed to every engine function."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    phone: str
    status: ClientStatus
    last_interaction_at: datetime           # creation time if never contacted
    interactions: tuple[Interaction, ...] = Field(default_factory=tuple)
    created_at: datetime
    updated_at: datetime


# ── Results ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ScoringResult:
    recommended_status: ClientStatus
    confidence: Confidence
    reason: str
    factors: tuple[str, ...]        # frequency, recency, tenure, status — in that order
    score: int


@dataclass(frozen=True)
class ClientAnalysis:
    analysis: str
    priority: Priority
    suggestion: str
    days_since_last_interaction: int
    total_interactions: int
    scoring: ScoringResult


@dataclass(frozen=True)
class StatusChange:
    client_id: str
    name: str
    previous_status: ClientStatus
    new_status: ClientStatus
    reason: str
    confidence: Confidence
    factors: tuple[str, ...]
    applied: bool = False


@dataclass(frozen=True)
class RecategorizationResult:
    processed_count: int
    recategorized_count: int
    changes: tuple[StatusChange, ...] = ()


@dataclass(frozen=True)
class ReminderEntry:
    client_id: str
    name: str
    status: ClientStatus
    recommended_frequency: int      # days between contacts
    needs_follow_up: bool
    days_overdue: int
    priority: Priority
    best_time_to_contact: str
    days_since_last_interaction: int


@dataclass(frozen=True)
class FollowUpQueue:
    reminders: tuple[ReminderEntry, ...]
    total_needing_follow_up: int


@dataclass(frozen=True)
class PortfolioSummary:
    total_clients: int
    active_clients: int
    inactive_clients: int
    potential_clients: int
    clients_needing_attention: int
    recommendations: tuple[str, ...]


@dataclass(frozen=True)
class ActivityReport:
    total_clients: int
    active_last_7_days: int
    active_last_30_days: int
    inactive_over_30_days: int
    inactive_over_60_days: int
    status_breakdown: dict[str, int] = field(default_factory=dict)
    generated_at: Optional[datetime] = None


@dataclass(frozen=True)
class DashboardStats:
    total: int
    active: int
    inactive: int
    potential: int
    without_interaction_30_days: int
