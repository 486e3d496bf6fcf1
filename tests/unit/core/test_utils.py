import unittest
from datetime import datetime, timezone, timedelta

from core.utils import (
    parse_list,
    parse_unique_list,
    encode_list,
    clamp_score,
    as_utc,
    mask_email,
)


class TestListCodec(unittest.TestCase):

    def test_parse_list_accepts_all_separators(self):
        self.assertEqual(parse_list("python, sql\nAWS | docker"), ["python", "sql", "AWS", "docker"])

    def test_parse_list_drops_blanks(self):
        self.assertEqual(parse_list(" , ,\n|"), [])
        self.assertEqual(parse_list(None), [])
        self.assertEqual(parse_list(""), [])

    def test_parse_list_accepts_iterables(self):
        self.assertEqual(parse_list([" a ", "", "b"]), ["a", "b"])

    def test_parse_unique_list_is_case_insensitive_first_seen(self):
        self.assertEqual(parse_unique_list("Python, SQL, python, sql, Go"), ["Python", "SQL", "Go"])

    def test_encode_list(self):
        self.assertEqual(encode_list(["a", " b ", "", "c"]), "a, b, c")


class TestClampScore(unittest.TestCase):

    def test_clamps_and_rounds(self):
        self.assertEqual(clamp_score(-5), 0)
        self.assertEqual(clamp_score(150), 100)
        self.assertEqual(clamp_score(49.6), 50)

    def test_non_finite_is_zero(self):
        self.assertEqual(clamp_score(float("nan")), 0)
        self.assertEqual(clamp_score(float("inf")), 0)
        self.assertEqual(clamp_score(None), 0)


class TestTimeAndMasking(unittest.TestCase):

    def test_as_utc_attaches_utc_to_naive(self):
        naive = datetime(2026, 1, 1, 10, 0)
        self.assertEqual(as_utc(naive), datetime(2026, 1, 1, 10, 0, tzinfo=timezone.utc))

    def test_as_utc_converts_aware(self):
        plus_two = datetime(2026, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        self.assertEqual(as_utc(plus_two), datetime(2026, 1, 1, 10, 0, tzinfo=timezone.utc))
        self.assertIsNone(as_utc(None))

    def test_mask_email(self):
        self.assertEqual(mask_email("jane.doe@example.com"), "***@example.com")
        self.assertEqual(mask_email("not-an-email"), "***")
        self.assertEqual(mask_email(None), "***")


if __name__ == '__main__':
    unittest.main()
