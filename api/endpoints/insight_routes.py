"""
api/endpoints/insight_routes.py — Scoring, recategorization and portfolio reports.

GET  /insights/clients/{id}/score     — Score one client (read-only)
GET  /insights/clients/{id}/analysis  — Priority + suggestion for one client
POST /insights/recategorize           — Re-score one/all clients and apply changes
GET  /insights/follow-ups             — Sorted reminder queue
GET  /insights/portfolio              — Portfolio summary and recommendations
GET  /insights/activity               — 7/30/60-day activity report
GET  /insights/stale                  — Clients past the inactivity threshold
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.errors import ClientNotFoundError, EmptyInputError
from app.services.client_service import (
    analyze_stored_client,
    follow_up_queue,
    list_stale_clients,
    portfolio_activity,
    portfolio_summary,
    run_recategorization,
    score_stored_client,
)
from api.schemas import (
    ActivityReportOut,
    AnalysisOut,
    FollowUpQueueOut,
    PortfolioSummaryOut,
    RecategorizationOut,
    RecategorizeRequest,
    ScoringOut,
    StaleClientOut,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/clients/{client_id}/score", response_model=ScoringOut, summary="Score a client")
def score_one_client(client_id: int, db: Session = Depends(get_db)):
    """Recommended status, confidence and the four contributing factors."""
    try:
        return score_stored_client(db, client_id)
    except ClientNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.get("/clients/{client_id}/analysis", response_model=AnalysisOut, summary="Analyze a client")
def analyze_one_client(client_id: int, db: Session = Depends(get_db)):
    try:
        return analyze_stored_client(db, client_id)
    except ClientNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.post("/recategorize", response_model=RecategorizationOut, summary="Recategorize clients")
def recategorize_clients(
    request: Optional[RecategorizeRequest] = None,
    db: Session = Depends(get_db),
):
    """
    Score clients and persist a new status wherever the recommendation differs.
    Clients whose recommendation matches their status are left untouched.
    """
    client_id = request.client_id if request else None
    try:
        result = run_recategorization(db, client_id=client_id)
    except ClientNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except EmptyInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    db.commit()
    return result


@router.get("/follow-ups", response_model=FollowUpQueueOut, summary="Follow-up reminders")
def follow_ups(db: Session = Depends(get_db)):
    """Clients due for contact, most overdue first, then by priority."""
    return follow_up_queue(db)


@router.get("/portfolio", response_model=PortfolioSummaryOut, summary="Portfolio summary")
def portfolio(db: Session = Depends(get_db)):
    return portfolio_summary(db)


@router.get("/activity", response_model=ActivityReportOut, summary="Activity report")
def activity(db: Session = Depends(get_db)):
    return portfolio_activity(db)


@router.get("/stale", response_model=list[StaleClientOut], summary="Clients needing follow-up")
def stale_clients(
    days_threshold: Optional[int] = Query(default=None, ge=1, le=365),
    db: Session = Depends(get_db),
):
    """Non-inactive clients with no interaction for more than `days_threshold` days."""
    return list_stale_clients(db, days_threshold=days_threshold)
