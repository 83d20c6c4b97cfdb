"""
app/engine/scoring.py — Rule-based client scoring.

Four additive factors, evaluated in a fixed order:
  1. interaction frequency   (+30 / +15 / -10)
  2. recency                 (+25 / +10 / -5 / -20)
  3. tenure                  (+15 / +5 / -5)
  4. current status          (+20 / +5 / -15)

The total maps to a recommended status:
  score >= 50  → Active,    High confidence
  score >= 20  → Potential, Medium confidence
  otherwise    → Inactive,  High confidence at -20 or below, else Medium
"""

import logging
from datetime import datetime

from app.db.models import ClientStatus
from app.engine.models import ClientAnalysis, ClientRecord, Confidence, Priority, ScoringResult
from app.engine.signals import days_as_client, days_since_last_interaction

logger = logging.getLogger(__name__)

ACTIVE_SCORE_THRESHOLD = 50
POTENTIAL_SCORE_THRESHOLD = 20
HIGH_CONFIDENCE_INACTIVE_SCORE = -20

STATUS_POINTS = {
    ClientStatus.ACTIVE: 20,
    ClientStatus.POTENTIAL: 5,
    ClientStatus.INACTIVE: -15,
}


def _factor(label: str, points: int) -> str:
    return f"{label} ({points:+d})"


# ── Factors ───────────────────────────────────────────────────────────────────

def frequency_points(interaction_count: int) -> tuple[int, str]:
    if interaction_count >= 5:
        return 30, "high interaction frequency"
    if interaction_count >= 2:
        return 15, "moderate interaction frequency"
    return -10, "low interaction frequency"


def recency_points(days_since_last: int) -> tuple[int, str]:
    if days_since_last <= 7:
        return 25, "very recent interaction"
    if days_since_last <= 30:
        return 10, "recent interaction"
    if days_since_last <= 60:
        return -5, "moderately stale interaction"
    return -20, "very stale interaction"


def tenure_points(days_as_client: int) -> tuple[int, str]:
    if days_as_client >= 90:
        return 15, "established client"
    if days_as_client >= 30:
        return 5, "developing client"
    return -5, "new client"


def status_points(status: ClientStatus) -> tuple[int, str]:
    return STATUS_POINTS[status], f"current status: {status.value}"


# ── Scoring ───────────────────────────────────────────────────────────────────

def recommend(score: int) -> tuple[ClientStatus, Confidence, str]:
    """Map a total score to (recommended status, confidence, reason)."""
    if score >= ACTIVE_SCORE_THRESHOLD:
        return ClientStatus.ACTIVE, Confidence.HIGH, "high activity and engagement"
    if score >= POTENTIAL_SCORE_THRESHOLD:
        return ClientStatus.POTENTIAL, Confidence.MEDIUM, "potential for development"
    confidence = Confidence.HIGH if score <= HIGH_CONFIDENCE_INACTIVE_SCORE else Confidence.MEDIUM
    return ClientStatus.INACTIVE, confidence, "low activity shown"


def score_client(record: ClientRecord, now: datetime) -> ScoringResult:
    """
    Score a client and recommend a status.

    Args:
        record: Snapshot of the client. Not modified.
        now:    Evaluation instant; all elapsed-day signals are relative to it.

    Returns:
        A ScoringResult whose factors follow the evaluation order
        (frequency, recency, tenure, status).
    """
    contributions = [
        frequency_points(len(record.interactions)),
        recency_points(days_since_last_interaction(record, now)),
        tenure_points(days_as_client(record, now)),
        status_points(record.status),
    ]

    score = sum(points for points, _ in contributions)
    recommended, confidence, reason = recommend(score)

    logger.debug(
        "Scored client %s: score=%d → %s (%s)",
        record.id, score, recommended.value, confidence.value,
    )

    return ScoringResult(
        recommended_status=recommended,
        confidence=confidence,
        reason=reason,
        factors=tuple(_factor(label, points) for points, label in contributions),
        score=score,
    )


# ── Single-client analysis ────────────────────────────────────────────────────

FEW_INTERACTIONS = 3


def analyze_client(record: ClientRecord, now: datetime) -> ClientAnalysis:
    """Read-only assessment of one client: contact priority, advice and score."""
    days = days_since_last_interaction(record, now)
    total = len(record.interactions)

    if days > 90:
        analysis = "Client with very low activity"
        priority = Priority.HIGH
        suggestion = (
            "This client has gone more than 3 months without contact. "
            "Mark as high priority and reach out immediately."
        )
    elif days > 30:
        analysis = "Client with moderate activity"
        priority = Priority.MEDIUM
        suggestion = (
            "This client has gone more than a month without contact. "
            "Consider scheduling a follow-up call."
        )
    else:
        analysis = "Active client"
        priority = Priority.LOW
        suggestion = "This client has good recent activity. Keep up regular contact."

    if total < FEW_INTERACTIONS:
        analysis += " - few interactions recorded"
        suggestion += " Consider increasing contact frequency to strengthen the relationship."

    return ClientAnalysis(
        analysis=analysis,
        priority=priority,
        suggestion=suggestion,
        days_since_last_interaction=days,
        total_interactions=total,
        scoring=score_client(record, now),
    )
