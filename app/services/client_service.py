"""
app/services/client_service.py — Business logic connecting the store and the engine.

This is the "glue" layer that coordinates:
  - Loading client snapshots from the DB
  - Running the scoring / follow-up / portfolio engine with an explicit `now`
  - Writing proposed status changes back (once per changed client)
  - Housekeeping: trimming old interactions
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from app.config import settings
from app.db.models import utcnow
from app.db.repository import (
    delete_interactions_before,
    get_all_clients,
    get_client_or_raise,
    to_record,
    update_client_status,
)
from app.engine.followup import build_follow_up_queue
from app.engine.models import (
    ActivityReport,
    ClientAnalysis,
    ClientRecord,
    DashboardStats,
    FollowUpQueue,
    PortfolioSummary,
    RecategorizationResult,
    ScoringResult,
    StatusChange,
)
from app.engine.portfolio import activity_report, dashboard_stats, summarize_portfolio
from app.engine.recategorize import find_stale_clients, mark_inactive, recategorize
from app.engine.scoring import analyze_client, score_client

logger = logging.getLogger(__name__)


def load_records(db: Session) -> list[ClientRecord]:
    return [to_record(c) for c in get_all_clients(db)]


def _status_writer(db: Session, now: datetime):
    def apply(change: StatusChange) -> None:
        update_client_status(db, int(change.client_id), change.new_status, now=now)
        logger.info(
            "Client %s (%s): %s → %s (%s)",
            change.client_id, change.name,
            change.previous_status.value, change.new_status.value, change.reason,
        )
    return apply


# ── Single client ─────────────────────────────────────────────────────────────

def score_stored_client(db: Session, client_id: int, now: Optional[datetime] = None) -> ScoringResult:
    record = to_record(get_client_or_raise(db, client_id))
    return score_client(record, now or utcnow())


def analyze_stored_client(db: Session, client_id: int, now: Optional[datetime] = None) -> ClientAnalysis:
    record = to_record(get_client_or_raise(db, client_id))
    return analyze_client(record, now or utcnow())


# ── Status automation ─────────────────────────────────────────────────────────

def run_recategorization(
    db: Session,
    client_id: Optional[int] = None,
    now: Optional[datetime] = None,
) -> RecategorizationResult:
    """
    Re-score one client (or all) and persist every recommended status change.

    Raises:
        ClientNotFoundError / EmptyInputError when `client_id` matches nothing.
    """
    now = now or utcnow()
    records = load_records(db)
    target = str(client_id) if client_id is not None else None

    result = recategorize(records, now, client_id=target, apply=_status_writer(db, now))
    db.flush()
    return result


def run_mark_inactive(
    db: Session,
    days_threshold: Optional[int] = None,
    now: Optional[datetime] = None,
) -> RecategorizationResult:
    """Mark every non-inactive client without contact for `days_threshold` days as Inactive."""
    now = now or utcnow()
    threshold = days_threshold or settings.inactivity_threshold_days

    result = mark_inactive(load_records(db), now, threshold, apply=_status_writer(db, now))
    db.flush()
    return result


def list_stale_clients(
    db: Session,
    days_threshold: Optional[int] = None,
    now: Optional[datetime] = None,
) -> list[ClientRecord]:
    threshold = days_threshold or settings.inactivity_threshold_days
    return find_stale_clients(load_records(db), now or utcnow(), threshold)


def cleanup_old_interactions(
    db: Session,
    days_to_keep: Optional[int] = None,
    now: Optional[datetime] = None,
) -> dict:
    """
    Drop interactions older than the retention window.

    Returns a summary dict: {"cleaned_clients": int, "cutoff": datetime}
    """
    days = days_to_keep or settings.interaction_retention_days
    cutoff = (now or utcnow()) - timedelta(days=days)
    cleaned = delete_interactions_before(db, cutoff)
    return {"cleaned_clients": cleaned, "cutoff": cutoff}


# ── Reports ───────────────────────────────────────────────────────────────────

def follow_up_queue(db: Session, now: Optional[datetime] = None) -> FollowUpQueue:
    return build_follow_up_queue(load_records(db), now or utcnow())


def portfolio_summary(db: Session, now: Optional[datetime] = None) -> PortfolioSummary:
    return summarize_portfolio(load_records(db), now or utcnow())


def portfolio_activity(db: Session, now: Optional[datetime] = None) -> ActivityReport:
    return activity_report(load_records(db), now or utcnow())


def portfolio_dashboard(db: Session, now: Optional[datetime] = None) -> DashboardStats:
    return dashboard_stats(load_records(db), now or utcnow())
