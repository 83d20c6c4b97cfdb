"""
tests/test_scheduler.py — Unit tests for the QStash schedule client.

requests.request is patched everywhere; no network calls are made.
"""

import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from app.scheduler.qstash import QStashClient, ScheduledJob, SchedulerError


def _response(status_code=200, payload=None):
    mock = MagicMock()
    mock.status_code = status_code
    mock.content = b"x" if payload is not None else b""
    mock.json.return_value = payload
    mock.text = json.dumps(payload)
    return mock


@pytest.fixture
def client():
    return QStashClient(token="tok", base_url="https://qstash.test/")


class TestQStashClient:
    def test_missing_token_raises(self):
        with patch("app.scheduler.qstash.settings") as mock_settings:
            mock_settings.qstash_token = None
            mock_settings.qstash_url = "https://qstash.test"
            with pytest.raises(SchedulerError):
                QStashClient()

    @patch("app.scheduler.qstash.requests.request")
    def test_create_schedule(self, mock_request, client):
        mock_request.return_value = _response(payload={"scheduleId": "scd_123"})

        job = client.create_schedule(
            "https://crm.example.com/api/qstash", "0 9 * * *", {"action": "markInactiveClients"},
        )

        assert job == ScheduledJob(
            job_id="scd_123", destination="https://crm.example.com/api/qstash", cron="0 9 * * *",
        )
        method, url = mock_request.call_args.args
        kwargs = mock_request.call_args.kwargs
        assert method == "POST"
        assert url == "https://qstash.test/v2/schedules/https://crm.example.com/api/qstash"
        assert kwargs["headers"]["Upstash-Cron"] == "0 9 * * *"
        assert kwargs["headers"]["Authorization"] == "Bearer tok"
        assert json.loads(kwargs["data"]) == {"action": "markInactiveClients"}

    @patch("app.scheduler.qstash.requests.request")
    def test_publish_now(self, mock_request, client):
        mock_request.return_value = _response(payload={"messageId": "msg_1"})
        job = client.publish_now("https://crm.example.com/api/qstash")
        assert job.job_id == "msg_1"
        assert json.loads(mock_request.call_args.kwargs["data"])["action"] == "markInactiveClients"

    @patch("app.scheduler.qstash.requests.request")
    def test_default_body_uses_configured_threshold(self, mock_request, client):
        mock_request.return_value = _response(payload={"scheduleId": "scd_9"})
        with patch("app.scheduler.qstash.settings") as mock_settings:
            mock_settings.inactivity_threshold_days = 45
            client.create_schedule("https://crm.example.com/api/qstash", "0 9 * * *")
        assert json.loads(mock_request.call_args.kwargs["data"]) == {
            "action": "markInactiveClients", "daysThreshold": 45,
        }

    @patch("app.scheduler.qstash.requests.request")
    def test_list_schedules(self, mock_request, client):
        mock_request.return_value = _response(payload=[
            {"scheduleId": "a", "destination": "https://x", "cron": "0 9 * * *", "isPaused": False},
            {"scheduleId": "b", "destination": "https://y", "cron": "0 0 * * 0", "isPaused": True},
        ])
        jobs = client.list_schedules()
        assert [(j.job_id, j.state) for j in jobs] == [("a", "active"), ("b", "paused")]

    @patch("app.scheduler.qstash.requests.request")
    def test_http_error_raises_without_retry(self, mock_request, client):
        mock_request.return_value = _response(status_code=401, payload={"error": "unauthorized"})
        with pytest.raises(SchedulerError):
            client.list_schedules()
        assert mock_request.call_count == 1

    @patch("app.scheduler.qstash.requests.request")
    def test_transient_errors_are_retried(self, mock_request, client):
        mock_request.side_effect = [
            requests.ConnectionError("reset"),
            _response(payload=[]),
        ]
        # Skip the exponential backoff sleep
        with patch.object(QStashClient._request.retry, "sleep", lambda _: None):
            assert client.list_schedules() == []
        assert mock_request.call_count == 2
