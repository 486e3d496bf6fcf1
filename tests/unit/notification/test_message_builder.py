import unittest
from types import SimpleNamespace

from notification.message_builder import NotificationMessageBuilder


def _alert(alert_id, title, company="Acme", reason="Matched \"Python\" with merit fit 88."):
    job = SimpleNamespace(title=title, company=company, location="Remote", salary="$150k", merit_fit=88)
    return SimpleNamespace(id=alert_id, job=job, reason=reason)


class TestNotificationMessageBuilder(unittest.TestCase):

    def setUp(self):
        self.builder = NotificationMessageBuilder("MeritBoard")

    def test_instant_email(self):
        message = self.builder.build_instant_email(_alert(1, "Data Engineer"))
        self.assertEqual(message.subject, "New MeritBoard match: Data Engineer at Acme")
        self.assertEqual(message.body.splitlines(), [
            "Role: Data Engineer",
            "Company: Acme",
            "Location: Remote",
            "Salary: $150k",
            "Merit fit: 88",
            "Reason: Matched \"Python\" with merit fit 88.",
        ])

    def test_digest_email(self):
        alerts = [_alert(1, "Data Engineer"), _alert(2, "ML Engineer", company="Beta")]
        message = self.builder.build_digest_email("Python roles", "weekly", alerts)
        self.assertEqual(message.subject, "Weekly MeritBoard digest: Python roles (2 new matches)")
        lines = message.body.splitlines()
        self.assertEqual(lines[0], "WEEKLY DIGEST")
        self.assertEqual(lines[1], "Saved search: Python roles")
        self.assertIn("ML Engineer | Beta | Remote | $150k | fit 88", lines)

    def test_daily_is_the_default_cadence_word(self):
        message = self.builder.build_digest_email("Python roles", "daily", [_alert(1, "Data Engineer")])
        self.assertTrue(message.subject.startswith("Daily MeritBoard digest"))

    def test_instant_push(self):
        message = self.builder.build_instant_push(_alert(1, "Data Engineer"), "Python roles")
        self.assertEqual(message.subject, "MeritBoard match: Data Engineer")
        self.assertEqual(message.body, "Data Engineer | Acme | Remote | $150k | Fit 88 | Search: Python roles")

    def test_push_digest_lists_top_three(self):
        alerts = [_alert(i, f"Role {i}") for i in range(1, 6)]
        message = self.builder.build_push_digest("Python roles", "daily", alerts)
        self.assertEqual(message.subject, "MeritBoard daily push digest")
        self.assertEqual(
            message.body,
            "Daily digest for Python roles: 5 new matches | Role 1 (Acme), Role 2 (Acme), Role 3 (Acme)"
        )

    def test_deferred_push_reads_as_queued(self):
        message = self.builder.build_push_digest("Python roles", "instant", [_alert(1, "Role 1")])
        self.assertTrue(message.body.startswith("Queued digest for Python roles: 1 new matches"))

    def test_in_app_messages(self):
        self.assertEqual(self.builder.build_in_app_instant("Python roles", 3).subject, "In-app match alerts: Python roles")
        digest = self.builder.build_in_app_digest("Python roles", "daily", [_alert(1, "Role 1")])
        self.assertEqual(digest.subject, "In-app digest: Python roles")
        self.assertTrue(digest.body.startswith("DAILY DIGEST"))


if __name__ == '__main__':
    unittest.main()
