"""
app/scheduler/qstash.py — Manages the daily automation job on Upstash QStash.

QStash calls our /api/qstash endpoint on a cron schedule. This module only
talks to the QStash REST API (create schedule, publish once, list):
  Docs: https://upstash.com/docs/qstash/api
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from app.config import settings

logger = logging.getLogger(__name__)

JOB_ACTION = "markInactiveClients"


def default_job_body() -> dict:
    """Body posted to the automation endpoint when the caller supplies none."""
    return {"action": JOB_ACTION, "daysThreshold": settings.inactivity_threshold_days}


class SchedulerError(RuntimeError):
    """QStash rejected a request or is not configured."""


@dataclass
class ScheduledJob:
    job_id: str
    destination: str
    cron: Optional[str] = None
    state: Optional[str] = None


class QStashClient:
    """Thin wrapper around the QStash v2 REST API."""

    def __init__(self, token: Optional[str] = None, base_url: Optional[str] = None, timeout: int = 15):
        self.token = token or settings.qstash_token
        self.base_url = (base_url or settings.qstash_url).rstrip("/")
        self.timeout = timeout
        if not self.token:
            raise SchedulerError("QSTASH_TOKEN is not set; cannot manage schedules.")

    def _headers(self, extra: Optional[dict[str, str]] = None) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
        }
        headers.update(extra or {})
        return headers

    @retry(
        retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _request(self, method: str, path: str, **kwargs) -> Any:
        """
        Internal: one QStash call. Retries up to 3 times on transient network errors.
        """
        response = requests.request(
            method,
            f"{self.base_url}{path}",
            timeout=self.timeout,
            **kwargs,
        )
        if response.status_code >= 400:
            raise SchedulerError(
                f"QStash {method} {path} failed ({response.status_code}): {response.text[:200]}"
            )
        return response.json() if response.content else None

    def create_schedule(self, destination: str, cron: str, body: Optional[dict] = None) -> ScheduledJob:
        """Register a recurring call to `destination` on `cron`."""
        data = self._request(
            "POST",
            f"/v2/schedules/{destination}",
            headers=self._headers({"Upstash-Cron": cron}),
            data=json.dumps(body or default_job_body()),
        )
        job = ScheduledJob(job_id=data["scheduleId"], destination=destination, cron=cron)
        logger.info("Schedule %s created: %s @ %s", job.job_id, destination, cron)
        return job

    def publish_now(self, destination: str, body: Optional[dict] = None) -> ScheduledJob:
        """Deliver a single call to `destination` right away (smoke test)."""
        data = self._request(
            "POST",
            f"/v2/publish/{destination}",
            headers=self._headers(),
            data=json.dumps(body or default_job_body()),
        )
        job = ScheduledJob(job_id=data["messageId"], destination=destination)
        logger.info("Message %s published to %s", job.job_id, destination)
        return job

    def list_schedules(self) -> list[ScheduledJob]:
        data = self._request("GET", "/v2/schedules", headers=self._headers()) or []
        return [
            ScheduledJob(
                job_id=item.get("scheduleId", ""),
                destination=item.get("destination", ""),
                cron=item.get("cron"),
                state="paused" if item.get("isPaused") else "active",
            )
            for item in data
        ]
