"""
tests/test_scoring.py — Unit tests for signals and the rule-based scoring engine.

Every test passes `now` explicitly; nothing reads the wall clock.
"""

from datetime import timedelta

import pytest

from app.db.models import ClientStatus
from app.engine.models import Confidence, Priority
from app.engine.scoring import (
    analyze_client,
    frequency_points,
    recency_points,
    recommend,
    score_client,
    tenure_points,
)
from app.engine.signals import days_as_client, days_since_last_interaction, whole_days_between


# ── Signals ───────────────────────────────────────────────────────────────────

class TestSignals:
    def test_whole_days_are_floored(self, now):
        assert whole_days_between(now, now - timedelta(days=3, hours=23)) == 3

    def test_same_instant_is_zero(self, now):
        assert whole_days_between(now, now) == 0

    def test_future_timestamp_clamps_to_zero(self, now):
        assert whole_days_between(now, now + timedelta(days=2)) == 0

    def test_naive_timestamps_treated_as_utc(self, now):
        naive = (now - timedelta(days=5)).replace(tzinfo=None)
        assert whole_days_between(now, naive) == 5

    def test_record_signals(self, record_factory, now):
        record = record_factory(days_since_contact=12, days_as_client=40)
        assert days_since_last_interaction(record, now) == 12
        assert days_as_client(record, now) == 40


# ── Factor boundaries ─────────────────────────────────────────────────────────

class TestFactorBoundaries:
    @pytest.mark.parametrize("count, points", [(0, -10), (1, -10), (2, 15), (4, 15), (5, 30), (12, 30)])
    def test_frequency(self, count, points):
        assert frequency_points(count)[0] == points

    @pytest.mark.parametrize(
        "days, points",
        [(0, 25), (7, 25), (8, 10), (30, 10), (31, -5), (60, -5), (61, -20), (400, -20)],
    )
    def test_recency(self, days, points):
        assert recency_points(days)[0] == points

    @pytest.mark.parametrize("days, points", [(0, -5), (29, -5), (30, 5), (89, 5), (90, 15)])
    def test_tenure(self, days, points):
        assert tenure_points(days)[0] == points


class TestRecommend:
    @pytest.mark.parametrize(
        "score, status, confidence",
        [
            (90, ClientStatus.ACTIVE, Confidence.HIGH),
            (50, ClientStatus.ACTIVE, Confidence.HIGH),
            (49, ClientStatus.POTENTIAL, Confidence.MEDIUM),
            (20, ClientStatus.POTENTIAL, Confidence.MEDIUM),
            (19, ClientStatus.INACTIVE, Confidence.MEDIUM),
            (-19, ClientStatus.INACTIVE, Confidence.MEDIUM),
            (-20, ClientStatus.INACTIVE, Confidence.HIGH),
            (-50, ClientStatus.INACTIVE, Confidence.HIGH),
        ],
    )
    def test_score_to_status(self, score, status, confidence):
        recommended, conf, _ = recommend(score)
        assert recommended == status
        assert conf == confidence

    def test_reasons(self):
        assert recommend(60)[2] == "high activity and engagement"
        assert recommend(30)[2] == "potential for development"
        assert recommend(0)[2] == "low activity shown"


# ── score_client ──────────────────────────────────────────────────────────────

class TestScoreClient:
    def test_stale_new_potential_client_goes_inactive(self, record_factory, now):
        record = record_factory(
            status=ClientStatus.POTENTIAL, interactions=0,
            days_since_contact=100, days_as_client=10,
        )
        result = score_client(record, now)
        assert result.score == -30
        assert result.recommended_status == ClientStatus.INACTIVE
        assert result.confidence == Confidence.HIGH

    def test_engaged_established_active_client(self, record_factory, now):
        record = record_factory(
            status=ClientStatus.ACTIVE, interactions=6,
            days_since_contact=3, days_as_client=200,
        )
        result = score_client(record, now)
        assert result.score == 90
        assert result.recommended_status == ClientStatus.ACTIVE
        assert result.confidence == Confidence.HIGH
        assert result.reason == "high activity and engagement"

    def test_factor_order_is_frequency_recency_tenure_status(self, record_factory, now):
        record = record_factory(
            status=ClientStatus.INACTIVE, interactions=3,
            days_since_contact=45, days_as_client=60,
        )
        result = score_client(record, now)
        assert result.factors == (
            "moderate interaction frequency (+15)",
            "moderately stale interaction (-5)",
            "developing client (+5)",
            "current status: Inactive (-15)",
        )
        assert result.score == 0

    def test_identical_signals_score_identically(self, record_factory, now):
        a = record_factory(client_id="a", name="A", interactions=3, days_since_contact=10)
        b = record_factory(client_id="b", name="B", interactions=4, days_since_contact=20)
        assert score_client(a, now).score == score_client(b, now).score

    def test_more_interactions_never_lowers_score(self, record_factory, now):
        scores = [
            score_client(record_factory(interactions=n, days_since_contact=10), now).score
            for n in range(8)
        ]
        assert scores == sorted(scores)

    def test_staleness_never_raises_score(self, record_factory, now):
        scores = [
            score_client(record_factory(interactions=3, days_since_contact=d), now).score
            for d in (0, 7, 8, 30, 31, 60, 61, 120)
        ]
        assert scores == sorted(scores, reverse=True)

    def test_does_not_mutate_record(self, record_factory, now):
        record = record_factory(interactions=2)
        before = record.model_dump()
        score_client(record, now)
        assert record.model_dump() == before


# ── analyze_client ────────────────────────────────────────────────────────────

class TestAnalyzeClient:
    def test_very_stale_client_is_high_priority(self, record_factory, now):
        analysis = analyze_client(record_factory(interactions=5, days_since_contact=120), now)
        assert analysis.priority == Priority.HIGH
        assert analysis.analysis == "Client with very low activity"
        assert analysis.days_since_last_interaction == 120

    def test_month_old_contact_is_medium_priority(self, record_factory, now):
        analysis = analyze_client(record_factory(interactions=5, days_since_contact=45), now)
        assert analysis.priority == Priority.MEDIUM

    def test_recent_client_is_low_priority(self, record_factory, now):
        analysis = analyze_client(record_factory(interactions=5, days_since_contact=2), now)
        assert analysis.priority == Priority.LOW
        assert "few interactions" not in analysis.analysis

    def test_few_interactions_noted(self, record_factory, now):
        analysis = analyze_client(record_factory(interactions=2, days_since_contact=2), now)
        assert analysis.analysis.endswith("few interactions recorded")
        assert "increasing contact frequency" in analysis.suggestion
        assert analysis.total_interactions == 2

    def test_embeds_scoring(self, record_factory, now):
        record = record_factory(interactions=6, days_since_contact=3)
        assert analyze_client(record, now).scoring == score_client(record, now)
