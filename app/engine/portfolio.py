"""
app/engine/portfolio.py — Aggregate views over the whole client portfolio.

All three reports are full scans over an in-memory list of snapshots.
"""

from collections import Counter
from datetime import datetime
from typing import Iterable

from app.db.models import ClientStatus
from app.engine.models import ActivityReport, ClientRecord, DashboardStats, PortfolioSummary
from app.engine.signals import is_older_than, is_within

ATTENTION_WINDOW_DAYS = 30


def _status_counts(records: list[ClientRecord]) -> Counter:
    return Counter(r.status for r in records)


def summarize_portfolio(records: Iterable[ClientRecord], now: datetime) -> PortfolioSummary:
    """
    Status counts, clients needing attention, and plain-language recommendations.

    "Needing attention" means no interaction for more than 30 days and not
    already Inactive. Inactive clients never count, however stale.
    """
    records = list(records)
    counts = _status_counts(records)

    needing_attention = sum(
        1 for r in records
        if r.status != ClientStatus.INACTIVE and is_older_than(r, now, ATTENTION_WINDOW_DAYS)
    )
    inactive = counts[ClientStatus.INACTIVE]
    potential = counts[ClientStatus.POTENTIAL]

    recommendations = [
        f"{needing_attention} clients need immediate attention"
        if needing_attention else "All clients are up to date",
        f"Review {inactive} inactive clients for reactivation"
        if inactive else "No inactive clients",
        f"Develop {potential} potential clients"
        if potential else "No pending potential clients",
    ]

    return PortfolioSummary(
        total_clients=len(records),
        active_clients=counts[ClientStatus.ACTIVE],
        inactive_clients=inactive,
        potential_clients=potential,
        clients_needing_attention=needing_attention,
        recommendations=tuple(r for r in recommendations if r),
    )


def activity_report(records: Iterable[ClientRecord], now: datetime) -> ActivityReport:
    """Recency buckets (7/30/60 days). Buckets overlap; a client can be in several."""
    records = list(records)
    counts = _status_counts(records)

    return ActivityReport(
        total_clients=len(records),
        active_last_7_days=sum(1 for r in records if is_within(r, now, 7)),
        active_last_30_days=sum(1 for r in records if is_within(r, now, 30)),
        inactive_over_30_days=sum(1 for r in records if is_older_than(r, now, 30)),
        inactive_over_60_days=sum(1 for r in records if is_older_than(r, now, 60)),
        status_breakdown={status.value: counts[status] for status in ClientStatus},
        generated_at=now,
    )


def dashboard_stats(records: Iterable[ClientRecord], now: datetime) -> DashboardStats:
    """Headline counts for the dashboard. The 30-day count includes Inactive clients."""
    records = list(records)
    counts = _status_counts(records)

    return DashboardStats(
        total=len(records),
        active=counts[ClientStatus.ACTIVE],
        inactive=counts[ClientStatus.INACTIVE],
        potential=counts[ClientStatus.POTENTIAL],
        without_interaction_30_days=sum(
            1 for r in records if is_older_than(r, now, ATTENTION_WINDOW_DAYS)
        ),
    )
