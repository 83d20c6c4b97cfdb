"""
api/endpoints/scheduler_routes.py — Endpoint called by QStash on the daily cron.

POST /api/qstash  — Run the scheduled job (requires the Upstash-Signature header)
GET  /api/qstash  — Readiness probe / usage hint

The signature header is checked before the body is parsed, and only its
presence is checked. Unexpected failures return a generic 500 so internals
never leak to the caller.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Header
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PayloadError
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.client_service import run_recategorization
from api.endpoints.automation_routes import mark_inactive_result
from api.schemas import SchedulerPayload

logger = logging.getLogger(__name__)
router = APIRouter()

SIGNATURE_HEADER = "Upstash-Signature"


@router.post("", summary="Run scheduled automation")
def run_scheduled_job(
    body: Any = Body(default=None),
    signature: Optional[str] = Header(default=None, alias=SIGNATURE_HEADER),
    db: Session = Depends(get_db),
):
    if not signature:
        logger.warning("Scheduler call rejected: missing %s header.", SIGNATURE_HEADER)
        return JSONResponse(status_code=401, content={"error": "Unauthorized"})

    try:
        payload = SchedulerPayload.model_validate(body or {})
    except PayloadError as exc:
        logger.warning("Scheduler call rejected: invalid payload (%d errors).", exc.error_count())
        return JSONResponse(status_code=400, content={"error": "Invalid payload"})

    try:
        if payload.action == "recategorize":
            outcome = run_recategorization(db)
            result = {
                "processed": outcome.processed_count,
                "recategorized": outcome.recategorized_count,
            }
        else:
            result = mark_inactive_result(db, payload.daysThreshold).model_dump(mode="json")
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Scheduled automation failed (action=%s).", payload.action)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    logger.info("Scheduled automation executed: %s", result)
    return {
        "success": True,
        "message": "Automation executed successfully",
        "result": result,
    }


@router.get("", summary="Scheduler endpoint status")
def scheduler_status():
    return {
        "message": "Scheduler automation endpoint is ready",
        "instructions": "Use POST to trigger the automation",
    }
