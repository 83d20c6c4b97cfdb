"""
scripts/run_automation.py — CLI to run the client automation jobs by hand.

Usage:
    python scripts/run_automation.py mark-inactive [--days 45]
    python scripts/run_automation.py recategorize [--client-id 12]
    python scripts/run_automation.py cleanup [--days-to-keep 180]
    python scripts/run_automation.py report
"""

import sys
import os
import argparse
import logging

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from app.config import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("run_automation")

from app.db.session import get_session
from app.services.client_service import (
    cleanup_old_interactions,
    follow_up_queue,
    portfolio_summary,
    run_mark_inactive,
    run_recategorization,
)


def _print_changes(result) -> None:
    print(f"      ✅ Processed {result.processed_count}, changed {result.recategorized_count}.")
    for change in result.changes:
        print(
            f"      • {change.name}: {change.previous_status.value} → "
            f"{change.new_status.value} ({change.reason})"
        )


def mark_inactive(days: int) -> None:
    print(f"\n😴 Marking clients without contact for {days}+ days as inactive...")
    with get_session() as db:
        _print_changes(run_mark_inactive(db, days_threshold=days))


def recategorize(client_id: int | None) -> None:
    target = f"client {client_id}" if client_id else "all clients"
    print(f"\n🧮 Re-scoring {target}...")
    with get_session() as db:
        _print_changes(run_recategorization(db, client_id=client_id))


def cleanup(days_to_keep: int) -> None:
    print(f"\n🧹 Removing interactions older than {days_to_keep} days...")
    with get_session() as db:
        summary = cleanup_old_interactions(db, days_to_keep=days_to_keep)
    print(f"      ✅ Trimmed history of {summary['cleaned_clients']} clients (cutoff {summary['cutoff']:%Y-%m-%d}).")


def report() -> None:
    with get_session() as db:
        summary = portfolio_summary(db)
        queue = follow_up_queue(db)

    print("\n" + "="*55)
    print("  📊  Portfolio Summary")
    print("="*55)
    print(f"  Total: {summary.total_clients}  Active: {summary.active_clients}  "
          f"Inactive: {summary.inactive_clients}  Potential: {summary.potential_clients}")
    for line in summary.recommendations:
        print(f"  • {line}")

    print(f"\n  📞 {queue.total_needing_follow_up} clients due for follow-up:")
    for entry in queue.reminders[:10]:
        print(f"     [{entry.priority.value:<6}] {entry.name} — {entry.days_overdue} days overdue")
    print("="*55 + "\n")


def main():
    parser = argparse.ArgumentParser(description="Run client automation jobs.")
    sub = parser.add_subparsers(dest="command", required=True)

    p_inactive = sub.add_parser("mark-inactive", help="Mark stale clients as Inactive")
    p_inactive.add_argument(
        "--days", type=int, default=settings.inactivity_threshold_days,
        help="Days without interaction (default from .env)",
    )

    p_recat = sub.add_parser("recategorize", help="Re-score clients and apply status changes")
    p_recat.add_argument("--client-id", type=int, default=None, help="Only this client")

    p_cleanup = sub.add_parser("cleanup", help="Remove old interactions")
    p_cleanup.add_argument(
        "--days-to-keep", type=int, default=settings.interaction_retention_days,
        help="Retention window in days (default from .env)",
    )

    sub.add_parser("report", help="Print portfolio summary and follow-up queue")

    args = parser.parse_args()
    if args.command == "mark-inactive":
        mark_inactive(args.days)
    elif args.command == "recategorize":
        recategorize(args.client_id)
    elif args.command == "cleanup":
        cleanup(args.days_to_keep)
    else:
        report()


if __name__ == "__main__":
    main()
