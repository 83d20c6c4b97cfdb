"""
scripts/setup_schedule.py — Register and inspect the daily automation job on QStash.

Usage:
    python scripts/setup_schedule.py setup   # create the recurring cron job
    python scripts/setup_schedule.py test    # deliver one call right now
    python scripts/setup_schedule.py list    # list configured schedules

Requires QSTASH_TOKEN and AUTOMATION_ENDPOINT_URL in .env.
"""

import sys
import os
import argparse
import logging

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("setup_schedule")

from app.config import settings
from app.scheduler.qstash import QStashClient, default_job_body


def setup() -> None:
    print("🚀 Creating recurring automation job...")
    job = QStashClient().create_schedule(
        settings.automation_endpoint_url, settings.automation_cron, default_job_body(),
    )
    print("✅ Recurring job created:")
    print(f"   Job ID: {job.job_id}")
    print(f"   URL:    {job.destination}")
    print(f"   Cron:   {job.cron}")
    print(f"   Marks clients inactive after {settings.inactivity_threshold_days} days without contact")


def test() -> None:
    print("🧪 Triggering automation once...")
    job = QStashClient().publish_now(settings.automation_endpoint_url, default_job_body())
    print(f"✅ Test message sent: {job.job_id} → {job.destination}")


def list_jobs() -> None:
    print("📋 Listing schedules...")
    jobs = QStashClient().list_schedules()
    print(f"✅ Found {len(jobs)} schedules:")
    for index, job in enumerate(jobs, start=1):
        print(f"   {index}. ID: {job.job_id}")
        print(f"      URL:   {job.destination}")
        print(f"      Cron:  {job.cron}")
        print(f"      State: {job.state}")


def main():
    parser = argparse.ArgumentParser(description="Manage the QStash automation schedule.")
    parser.add_argument("command", choices=["setup", "test", "list"])
    args = parser.parse_args()

    commands = {"setup": setup, "test": test, "list": list_jobs}
    try:
        commands[args.command]()
    except Exception as exc:
        logger.error("Schedule command '%s' failed: %s", args.command, exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
