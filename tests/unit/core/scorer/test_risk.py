#!/usr/bin/env python3
"""
Tests for additive risk rules.
"""

import unittest
from datetime import datetime, timedelta, timezone

from core.scorer.risk import account_age_hours, calculate_risk


def _risk(**overrides):
    params = dict(
        recent_application_count=0,
        account_age=24 * 30,
        prior_abuse_event_count=0,
        is_flagged=False,
        has_required_screeners=False,
        answer_count=0,
    )
    params.update(overrides)
    return calculate_risk(**params)


class TestAccountAge(unittest.TestCase):

    def test_hours_since_creation(self):
        now = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)
        self.assertAlmostEqual(account_age_hours(now - timedelta(hours=3), now), 3.0)

    def test_naive_creation_time_is_utc(self):
        now = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)
        self.assertAlmostEqual(account_age_hours(datetime(2026, 3, 2, 11, 30), now), 0.5)

    def test_unknown_creation_time_is_brand_new(self):
        self.assertEqual(account_age_hours(None, datetime.now(timezone.utc)), 0.0)


class TestCalculateRisk(unittest.TestCase):

    def test_clean_submission(self):
        score, flags, details = _risk()
        self.assertEqual(score, 0)
        self.assertEqual(flags, [])
        self.assertEqual(details, [])

    def test_velocity_thresholds(self):
        self.assertEqual(_risk(recent_application_count=5)[1], [])
        self.assertEqual(_risk(recent_application_count=6)[1], ['high_application_velocity'])
        self.assertEqual(_risk(recent_application_count=11)[0], 22)

    def test_extreme_velocity_stacks(self):
        score, flags, _ = _risk(recent_application_count=13)
        self.assertEqual(flags, ['high_application_velocity', 'extreme_application_velocity'])
        self.assertEqual(score, 42)

    def test_new_account_rules_stack(self):
        score, flags, _ = _risk(account_age=0.5)
        self.assertEqual(flags, ['new_account'])
        self.assertEqual(score, 18)

        score, flags, _ = _risk(account_age=5 / 60)
        self.assertEqual(flags, ['new_account', 'very_new_account'])
        self.assertEqual(score, 36)

    def test_ip_history_is_capped(self):
        self.assertEqual(_risk(prior_abuse_event_count=2)[0], 12)
        self.assertEqual(_risk(prior_abuse_event_count=4)[0], 24)
        self.assertEqual(_risk(prior_abuse_event_count=9)[0], 24)

    def test_flagged_user(self):
        score, flags, _ = _risk(is_flagged=True)
        self.assertEqual(flags, ['user_previously_flagged'])
        self.assertEqual(score, 26)

    def test_missing_required_answers_only_with_required_screeners(self):
        self.assertEqual(_risk(has_required_screeners=True, answer_count=0)[1], ['missing_required_answers'])
        self.assertEqual(_risk(has_required_screeners=True, answer_count=1)[1], [])
        self.assertEqual(_risk(has_required_screeners=False, answer_count=0)[1], [])

    def test_details_carry_amounts(self):
        _, _, details = _risk(is_flagged=True, prior_abuse_event_count=1)
        self.assertEqual(
            [(d['type'], d['amount']) for d in details],
            [('ip_history_flagged', 6), ('user_previously_flagged', 26)]
        )


if __name__ == '__main__':
    unittest.main()
