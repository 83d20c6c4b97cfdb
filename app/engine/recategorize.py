"""
app/engine/recategorize.py — Turns scoring results into status change-sets.

Nothing here writes to the store. Callers pass an optional `apply` callback
that is invoked exactly once per changed record (never for unchanged ones);
the service layer uses it to patch the database.
"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable, Optional

from app.db.models import ClientStatus
from app.engine.models import (
    ClientRecord,
    Confidence,
    RecategorizationResult,
    StatusChange,
)
from app.engine.scoring import score_client
from app.engine.signals import is_older_than
from app.errors import ClientNotFoundError, EmptyInputError, ValidationError

logger = logging.getLogger(__name__)

ApplyFn = Callable[[StatusChange], None]

DEFAULT_DAYS_THRESHOLD = 30
MIN_DAYS_THRESHOLD = 1
MAX_DAYS_THRESHOLD = 365


def _select(records: list[ClientRecord], client_id: Optional[str]) -> list[ClientRecord]:
    if client_id is None:
        return records
    if not records:
        raise EmptyInputError(f"No client records to recategorize (requested {client_id}).")
    selected = [r for r in records if r.id == str(client_id)]
    if not selected:
        raise ClientNotFoundError(client_id)
    return selected


def _commit(changes: list[StatusChange], apply: Optional[ApplyFn]) -> tuple[StatusChange, ...]:
    if apply is None:
        return tuple(changes)
    applied = []
    for change in changes:
        apply(change)
        applied.append(replace(change, applied=True))
    return tuple(applied)


def recategorize(
    records: Iterable[ClientRecord],
    now: datetime,
    client_id: Optional[str] = None,
    apply: Optional[ApplyFn] = None,
) -> RecategorizationResult:
    """
    Score each record and propose a new status where the recommendation differs.

    Args:
        records:   Client snapshots. With `client_id`, only that one is processed.
        now:       Evaluation instant.
        client_id: Restrict the run to a single client.
        apply:     Called once per change, in input order.

    Raises:
        EmptyInputError:     `client_id` was given but `records` is empty.
        ClientNotFoundError: `client_id` is not among `records`.
    """
    targets = _select(list(records), client_id)

    pending = []
    for record in targets:
        result = score_client(record, now)
        if result.recommended_status == record.status:
            continue
        pending.append(
            StatusChange(
                client_id=record.id,
                name=record.name,
                previous_status=record.status,
                new_status=result.recommended_status,
                reason=result.reason,
                confidence=result.confidence,
                factors=result.factors,
            )
        )

    changes = _commit(pending, apply)
    logger.info(
        "Recategorization: %d processed, %d recategorized.",
        len(targets), len(changes),
    )
    return RecategorizationResult(
        processed_count=len(targets),
        recategorized_count=len(changes),
        changes=changes,
    )


# ── Stale-client automation ──────────────────────────────────────────────────

def validate_days_threshold(days_threshold: int) -> int:
    if not MIN_DAYS_THRESHOLD <= days_threshold <= MAX_DAYS_THRESHOLD:
        raise ValidationError({
            "days_threshold": (
                f"must be between {MIN_DAYS_THRESHOLD} and {MAX_DAYS_THRESHOLD} days"
            ),
        })
    return days_threshold


def find_stale_clients(
    records: Iterable[ClientRecord],
    now: datetime,
    days_threshold: int = DEFAULT_DAYS_THRESHOLD,
) -> list[ClientRecord]:
    """Clients not yet Inactive whose last interaction is older than the threshold."""
    return [
        r for r in records
        if r.status != ClientStatus.INACTIVE and is_older_than(r, now, days_threshold)
    ]


def mark_inactive(
    records: Iterable[ClientRecord],
    now: datetime,
    days_threshold: int = DEFAULT_DAYS_THRESHOLD,
    apply: Optional[ApplyFn] = None,
) -> RecategorizationResult:
    """Propose Inactive for every stale client. Used by the scheduled job."""
    validate_days_threshold(days_threshold)
    records = list(records)

    pending = [
        StatusChange(
            client_id=r.id,
            name=r.name,
            previous_status=r.status,
            new_status=ClientStatus.INACTIVE,
            reason=f"no interaction in more than {days_threshold} days",
            confidence=Confidence.HIGH,
            factors=(),
        )
        for r in find_stale_clients(records, now, days_threshold)
    ]

    changes = _commit(pending, apply)
    logger.info(
        "Marked %d of %d clients inactive (threshold=%d days).",
        len(changes), len(records), days_threshold,
    )
    return RecategorizationResult(
        processed_count=len(records),
        recategorized_count=len(changes),
        changes=changes,
    )
