import unittest
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from core.pipeline.models import LoadLevel
from core.pipeline.rebalance import compute_load_stats, suggest_rebalance

BASE = datetime(2026, 3, 3, 9, 0, tzinfo=timezone.utc)


def _interviews(counts):
    """counts: {owner: n}; ids are assigned in insertion order, one hour apart."""
    interviews = []
    next_id = 1
    for owner, n in counts.items():
        for i in range(n):
            interviews.append(SimpleNamespace(
                id=next_id,
                person=f"person-{next_id}",
                owner=owner,
                scheduled_at=BASE + timedelta(hours=next_id)
            ))
            next_id += 1
    return sorted(interviews, key=lambda item: item.scheduled_at)


class TestLoadStats(unittest.TestCase):

    def test_levels_relative_to_mean(self):
        stats = compute_load_stats(_interviews({'alice': 5, 'bob': 1, 'cara': 3}))
        self.assertEqual([s.owner for s in stats], ['alice', 'cara', 'bob'])
        levels = {s.owner: s.load_level for s in stats}
        self.assertEqual(levels, {'alice': LoadLevel.HIGH, 'cara': LoadLevel.BALANCED, 'bob': LoadLevel.LOW})

    def test_next_interview_is_earliest(self):
        stats = compute_load_stats(_interviews({'alice': 3}))
        self.assertEqual(stats[0].next_interview_at, BASE + timedelta(hours=1))

    def test_empty(self):
        self.assertEqual(compute_load_stats([]), [])


class TestSuggestRebalance(unittest.TestCase):

    def _run(self, counts):
        interviews = _interviews(counts)
        stats = compute_load_stats(interviews)
        return stats, suggest_rebalance(stats, interviews)

    def test_five_and_one_converges_without_overshoot(self):
        stats, suggestions = self._run({'alice': 5, 'bob': 1})

        counts = {s.owner: s.scheduled for s in stats}
        for suggestion in suggestions:
            self.assertEqual((suggestion.current_owner, suggestion.suggested_owner), ('alice', 'bob'))
            counts['alice'] -= 1
            counts['bob'] += 1
            self.assertLessEqual(counts['bob'], counts['alice'])

        self.assertLessEqual(abs(counts['alice'] - counts['bob']), 1)
        self.assertEqual(len(suggestions), 2)
        self.assertEqual(
            suggestions[0].reason,
            "Reduce interviewer load from 5 to 4, and raise bob from 1 to 2."
        )

    def test_moves_earliest_interviews_first(self):
        _, suggestions = self._run({'alice': 5, 'bob': 1})
        self.assertEqual([s.interview_id for s in suggestions], [1, 2])

    def test_balanced_team_needs_no_moves(self):
        _, suggestions = self._run({'alice': 2, 'bob': 2, 'cara': 3})
        self.assertEqual(suggestions, [])

    def test_no_underloaded_owner(self):
        _, suggestions = self._run({'alice': 6, 'bob': 4, 'cara': 4})
        self.assertEqual(suggestions, [])

    def test_targets_least_loaded_first(self):
        stats, suggestions = self._run({'alice': 7, 'bob': 2, 'cara': 1, 'dan': 2})
        self.assertEqual(suggestions[0].suggested_owner, 'cara')
        self.assertEqual([s.suggested_owner for s in suggestions], ['cara', 'cara', 'bob', 'dan'])
        self.assertTrue(all(s.current_owner == 'alice' for s in suggestions))


if __name__ == '__main__':
    unittest.main()
