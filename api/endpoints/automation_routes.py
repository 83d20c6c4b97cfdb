"""
api/endpoints/automation_routes.py — Manual triggers for the housekeeping jobs.

POST /automation/mark-inactive  — Mark stale clients as Inactive
POST /automation/cleanup        — Remove interactions past the retention window
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.config import settings
from app.db.models import utcnow
from app.db.session import get_db
from app.errors import ValidationError
from app.services.client_service import cleanup_old_interactions, run_mark_inactive
from api.schemas import AutomationRequest, AutomationResult, CleanupRequest, CleanupResult

logger = logging.getLogger(__name__)
router = APIRouter()


def mark_inactive_result(db: Session, days_threshold: Optional[int]) -> AutomationResult:
    threshold = days_threshold or settings.inactivity_threshold_days
    result = run_mark_inactive(db, days_threshold=threshold)
    return AutomationResult(
        message=f"Marked {result.recategorized_count} clients as inactive.",
        updated_clients=result.recategorized_count,
        processed_clients=result.processed_count,
        threshold=threshold,
        processed_at=utcnow(),
    )


@router.post("/mark-inactive", response_model=AutomationResult, summary="Mark stale clients inactive")
def mark_inactive_clients(
    request: Optional[AutomationRequest] = None,
    db: Session = Depends(get_db),
):
    days_threshold = request.days_threshold if request else None
    try:
        result = mark_inactive_result(db, days_threshold)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors)
    db.commit()
    return result


@router.post("/cleanup", response_model=CleanupResult, summary="Remove old interactions")
def cleanup_interactions(
    request: Optional[CleanupRequest] = None,
    db: Session = Depends(get_db),
):
    days_to_keep = request.days_to_keep if request else None
    summary = cleanup_old_interactions(db, days_to_keep=days_to_keep)
    db.commit()
    return CleanupResult(
        message=f"Removed old interactions from {summary['cleaned_clients']} clients.",
        cleaned_clients=summary["cleaned_clients"],
        cutoff=summary["cutoff"],
    )
