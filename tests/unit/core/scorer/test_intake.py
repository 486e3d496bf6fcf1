#!/usr/bin/env python3
"""
Tests for ApplicationIntakeService against an in-memory database.
"""

import unittest
from datetime import timedelta

import pytest
from sqlalchemy import select, func

from core.exceptions import EntityNotFoundException
from core.scorer import ApplicationIntakeService
from core.scorer.persistence import risk_severity
from core.config_loader import ScoringConfig
from database.models import Application, AbuseEvent
from tests import DatabaseTestCase, FIXED_NOW


@pytest.mark.db
class TestApplicationIntake(DatabaseTestCase):

    def setUp(self):
        super().setUp()
        self.service = ApplicationIntakeService(ScoringConfig())
        self.job = self.add_job(merit_fit=88, required_screeners="Python experience?")
        self.user = self.add_user("cand-1", profile_completeness=75, profile_skills="python, sql")

    def _count(self, model):
        return self.session.execute(select(func.count(model.id))).scalar_one()

    def test_creates_scored_application(self):
        outcome = self.service.submit(
            self.repo, self.user.id, self.job.id,
            raw_answers=[{"question": "Python?", "answer": "Python since 2015"}],
            source_ip="10.0.0.1", user_agent="Mozilla/5.0", now=FIXED_NOW
        )

        self.assertTrue(outcome.created)
        self.assertFalse(outcome.blocked)
        application = outcome.application
        self.assertEqual(application.status, "Applied")
        self.assertTrue(application.required_passed)
        self.assertEqual(application.required_score, 1)
        self.assertEqual(application.risk_score, 0)
        self.assertEqual(application.auto_rank_score, outcome.scoring.auto_rank_score)
        self.assertEqual(application.source_ip, "10.0.0.1")
        self.assertEqual(self._count(AbuseEvent), 0)

    def test_resubmission_is_idempotent(self):
        first = self.service.submit(
            self.repo, self.user.id, self.job.id,
            raw_answers=[{"question": "Python?", "answer": "yes"}], now=FIXED_NOW
        )
        original_rank = first.application.auto_rank_score

        second = self.service.submit(self.repo, self.user.id, self.job.id, raw_answers=[], now=FIXED_NOW)

        self.assertFalse(second.created)
        self.assertIsNone(second.scoring)
        self.assertEqual(second.application.id, first.application.id)
        self.assertEqual(second.application.auto_rank_score, original_rank)
        self.assertEqual(self._count(Application), 1)

    def test_blocked_submission_persists_no_application(self):
        fresh = self.add_user("cand-2", created_at=FIXED_NOW - timedelta(minutes=2), is_flagged=True)
        for i in range(13):
            other_job = self.add_job(title=f"Role {i}")
            self.add_application(fresh, other_job, applied_at=FIXED_NOW - timedelta(minutes=5))

        outcome = self.service.submit(self.repo, fresh.id, self.job.id, raw_answers=[], source_ip="10.0.0.9",
                                      now=FIXED_NOW)

        self.assertTrue(outcome.blocked)
        self.assertIsNone(outcome.application)
        self.assertIsNone(self.repo.applications.get_existing(fresh.id, self.job.id))

        event = self.session.execute(select(AbuseEvent)).scalar_one()
        self.assertEqual(event.decision, "block")
        self.assertEqual(event.severity, "high")
        self.assertEqual(event.source_ip, "10.0.0.9")
        self.assertIn("extreme_application_velocity", event.detail)

    def test_prior_abuse_events_raise_risk(self):
        for _ in range(2):
            self.repo.abuse.record("application_create", None, "10.0.0.7", "medium", "manual_review", "x")
        self.repo.abuse.record("application_create", None, "10.0.0.7", "low", "allow", "ignored")

        outcome = self.service.submit(
            self.repo, self.user.id, self.job.id,
            raw_answers=[{"question": "Python?", "answer": "yes"}], source_ip="10.0.0.7", now=FIXED_NOW
        )

        self.assertIn("ip_history_flagged", outcome.scoring.risk_flags)
        self.assertEqual(outcome.application.risk_score, 12)
        # a flagged but allowed submission is still recorded in the ledger
        self.assertEqual(self._count(AbuseEvent), 4)

    def test_unknown_job_or_user(self):
        with self.assertRaises(EntityNotFoundException):
            self.service.submit(self.repo, self.user.id, 9999, now=FIXED_NOW)
        with self.assertRaises(EntityNotFoundException):
            self.service.submit(self.repo, "nobody", self.job.id, now=FIXED_NOW)

    def test_user_agent_truncated(self):
        outcome = self.service.submit(
            self.repo, self.user.id, self.job.id,
            raw_answers=[{"question": "Python?", "answer": "yes"}], user_agent="A" * 600, now=FIXED_NOW
        )
        self.assertEqual(len(outcome.application.user_agent), 400)


class TestRiskSeverity(unittest.TestCase):

    def test_bands(self):
        config = ScoringConfig()
        self.assertEqual(risk_severity(72, config), "high")
        self.assertEqual(risk_severity(45, config), "medium")
        self.assertEqual(risk_severity(44, config), "low")


if __name__ == '__main__':
    unittest.main()
